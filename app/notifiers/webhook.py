"""Webhook delivery of weather snapshots to user automation (e.g. n8n)."""

from __future__ import annotations

from datetime import datetime, timezone
import logging
from typing import Any

import httpx
from pydantic import AnyHttpUrl, TypeAdapter, ValidationError

from app.config import settings
from app.models.weather import WeatherSnapshot

logger = logging.getLogger("weatherauto.notifiers.webhook")

EVENT_SOURCE = "weather-automation-app"
EVENT_TYPE = "weather_data"
APP_NAME = "Weather Automation System"
APP_VERSION = "1.0.0"

_http_url = TypeAdapter(AnyHttpUrl)


def validate_webhook_url(url: str | None) -> bool:
    """Return True for syntactically valid http or https URLs only."""

    if not url or not url.strip():
        return False
    try:
        parsed = _http_url.validate_python(url.strip())
    except ValidationError:
        return False
    return parsed.scheme in {"http", "https"}


def _isoformat(moment: datetime) -> str:
    return moment.astimezone(timezone.utc).isoformat(timespec="milliseconds").replace(
        "+00:00", "Z"
    )


def build_envelope(snapshot: WeatherSnapshot, captured_at: datetime | None = None) -> dict[str, Any]:
    """Build the fixed-shape webhook payload for a snapshot."""

    stamp = _isoformat(captured_at or datetime.now(timezone.utc))
    return {
        "timestamp": stamp,
        "source": EVENT_SOURCE,
        "event_type": EVENT_TYPE,
        "data": {
            "city": snapshot.city,
            "temperature": snapshot.temperature,
            "condition": snapshot.condition,
            "air_quality": snapshot.air_quality_label,
            "air_quality_index": snapshot.air_quality_index,
            "report_time": stamp,
        },
        "metadata": {
            "app_name": APP_NAME,
            "version": APP_VERSION,
        },
    }


class WebhookNotifier:
    """POST weather envelopes to a user-configured URL, once, without retry."""

    def __init__(self, *, timeout: float | None = None):
        self.timeout = timeout or settings.webhook_timeout

    async def send(self, url: str, snapshot: WeatherSnapshot) -> bool:
        payload = build_envelope(snapshot)
        logger.info("Sending weather data for %s to webhook", snapshot.city)

        try:
            async with httpx.AsyncClient(timeout=self.timeout) as client:
                response = await client.post(
                    url,
                    json=payload,
                    headers={"Content-Type": "application/json"},
                )
        except (httpx.HTTPError, httpx.InvalidURL) as exc:
            logger.error("Webhook request failed: %s", exc)
            return False

        if not response.is_success:
            logger.error(
                "Webhook returned error: status=%s body=%s",
                response.status_code,
                response.text,
            )
            return False

        logger.info("Webhook accepted weather data: status=%s", response.status_code)
        return True


__all__ = ["WebhookNotifier", "build_envelope", "validate_webhook_url"]
