"""Data sources feeding weather requests."""

from .weather import WeatherProviderError, WeatherResolver, city_hash, fallback_snapshot

__all__ = ["WeatherProviderError", "WeatherResolver", "city_hash", "fallback_snapshot"]
