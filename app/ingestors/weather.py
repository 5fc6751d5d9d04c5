"""Weather and air-quality resolution with a deterministic offline fallback."""

from __future__ import annotations

import logging
import math
import struct
import time
from typing import Any, Callable

import httpx

from app.config import settings
from app.models.weather import WeatherSnapshot

logger = logging.getLogger("weatherauto.ingestors.weather")

FALLBACK_CONDITIONS = (
    "Clear",
    "Partly Cloudy",
    "Cloudy",
    "Light Rain",
    "Heavy Rain",
    "Sunny",
    "Overcast",
    "Foggy",
)


class WeatherProviderError(RuntimeError):
    """Live weather lookup failed; always absorbed by the fallback."""


def _now_ms() -> int:
    return time.time_ns() // 1_000_000


def _to_int32(value: int) -> int:
    value &= 0xFFFFFFFF
    return value - 0x100000000 if value & 0x80000000 else value


def city_hash(city: str) -> int:
    """Signed 32-bit rolling hash (``h * 31 + unit``) of the lowercased city.

    Iterates over UTF-16 code units so non-BMP characters hash as surrogate
    pairs.
    """

    encoded = city.lower().encode("utf-16-le")
    value = 0
    for (unit,) in struct.iter_unpack("<H", encoded):
        value = _to_int32(value * 31 + unit)
    return value


def _round_half_up(value: float) -> int:
    return math.floor(value + 0.5)


def fallback_snapshot(city: str, now_ms: int) -> WeatherSnapshot:
    """Derive pseudo-weather for ``city`` from its hash and a clock reading."""

    value = city_hash(city)
    base_temperature = abs(value) % 30 + 5
    jitter = (now_ms % 10) - 5
    return WeatherSnapshot.build(
        city=city,
        temperature=max(0, base_temperature + jitter),
        condition=FALLBACK_CONDITIONS[abs(value) % len(FALLBACK_CONDITIONS)],
        air_quality_index=abs(value) % 6 + 1,
    )


def _parse_payload(city: str, payload: Any) -> WeatherSnapshot:
    try:
        current = payload["current"]
        temp_c = float(current["temp_c"])
        condition = current["condition"]["text"]
        aqi = (current.get("air_quality") or {}).get("us-epa-index")
        location_name = (payload.get("location") or {}).get("name")
    except (AttributeError, KeyError, TypeError, ValueError) as exc:
        raise WeatherProviderError("Malformed weather response") from exc

    if not math.isfinite(temp_c):
        raise WeatherProviderError("Malformed weather response")

    if not isinstance(condition, str) or not condition:
        raise WeatherProviderError("Malformed weather response")

    if location_name and location_name != city:
        logger.debug("Provider canonicalized %r as %r", city, location_name)

    return WeatherSnapshot.build(
        city=city,
        temperature=_round_half_up(temp_c),
        condition=condition,
        air_quality_index=aqi,
    )


class WeatherResolver:
    """Resolve a weather snapshot for a city, never raising to the caller."""

    def __init__(
        self,
        *,
        api_key: str | None = None,
        base_url: str | None = None,
        timeout: float | None = None,
        clock: Callable[[], int] | None = None,
    ):
        self.api_key = settings.weather_api_key if api_key is None else api_key
        self.base_url = base_url or settings.weather_base_url
        self.timeout = timeout or settings.weather_timeout
        self.clock = clock or _now_ms

    async def resolve(self, city: str) -> WeatherSnapshot:
        try:
            snapshot = await self.fetch_live(city)
        except WeatherProviderError as exc:
            logger.warning("Using fallback weather for %s: %s", city, exc)
            snapshot = fallback_snapshot(city, self.clock())

        logger.info(
            "Weather resolved for %s: %s°C %s aqi=%s",
            city,
            snapshot.temperature,
            snapshot.condition,
            snapshot.air_quality_index,
        )
        return snapshot

    async def fetch_live(self, city: str) -> WeatherSnapshot:
        if not self.api_key:
            raise WeatherProviderError("Weather provider API key not configured")

        params = {"key": self.api_key, "q": city, "aqi": "yes"}
        try:
            async with httpx.AsyncClient(timeout=self.timeout) as client:
                response = await client.get(self.base_url, params=params)
                response.raise_for_status()
        except httpx.TimeoutException as exc:
            logger.error("Weather request timed out: %s", exc)
            raise WeatherProviderError("Weather service timeout") from exc
        except httpx.HTTPStatusError as exc:
            logger.error(
                "Weather service returned error: status=%s body=%s",
                exc.response.status_code,
                exc.response.text,
            )
            raise WeatherProviderError("Weather service error") from exc
        except httpx.RequestError as exc:
            logger.error("Weather request failed: %s", exc)
            raise WeatherProviderError("Weather request failed") from exc

        try:
            payload = response.json()
        except ValueError as exc:
            raise WeatherProviderError("Weather response is not JSON") from exc

        return _parse_payload(city, payload)


__all__ = [
    "FALLBACK_CONDITIONS",
    "WeatherProviderError",
    "WeatherResolver",
    "city_hash",
    "fallback_snapshot",
]
