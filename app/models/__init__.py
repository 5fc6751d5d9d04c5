"""Pydantic models for the weather automation backend."""

from .weather import AIR_QUALITY_LABELS, WeatherSnapshot

__all__ = ["AIR_QUALITY_LABELS", "WeatherSnapshot"]
