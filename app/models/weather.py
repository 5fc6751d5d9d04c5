"""Weather and air-quality models shared by the resolver and notifiers."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field, model_validator

AIR_QUALITY_LABELS: dict[int, str] = {
    1: "Good",
    2: "Moderate",
    3: "Unhealthy for Sensitive Groups",
    4: "Unhealthy",
    5: "Very Unhealthy",
    6: "Hazardous",
}
DEFAULT_AIR_QUALITY_INDEX = 1


def normalize_air_quality_index(value) -> int:
    """Clamp a provider index to the supported 1-6 range, defaulting to Good."""

    try:
        index = int(value)
    except (TypeError, ValueError):
        return DEFAULT_AIR_QUALITY_INDEX
    return index if index in AIR_QUALITY_LABELS else DEFAULT_AIR_QUALITY_INDEX


def air_quality_label(index: int) -> str:
    return AIR_QUALITY_LABELS[normalize_air_quality_index(index)]


class WeatherSnapshot(BaseModel):
    """Immutable weather and air-quality reading for one city."""

    model_config = ConfigDict(frozen=True)

    city: str = Field(..., description="City name as requested by the caller")
    temperature: int = Field(..., description="Air temperature in whole degrees Celsius")
    condition: str = Field(..., description="Short textual summary of conditions")
    air_quality_label: str = Field(..., description="Human-readable air quality rating")
    air_quality_index: int = Field(
        ..., ge=1, le=6, description="US EPA air quality index (1-6)"
    )

    @model_validator(mode="after")
    def _label_matches_index(self) -> "WeatherSnapshot":
        expected = AIR_QUALITY_LABELS[self.air_quality_index]
        if self.air_quality_label != expected:
            raise ValueError(
                f"air_quality_label {self.air_quality_label!r} does not match index "
                f"{self.air_quality_index} ({expected!r})"
            )
        return self

    @classmethod
    def build(
        cls, *, city: str, temperature: int, condition: str, air_quality_index
    ) -> "WeatherSnapshot":
        """Create a snapshot deriving the label from the index table."""

        index = normalize_air_quality_index(air_quality_index)
        return cls(
            city=city,
            temperature=temperature,
            condition=condition,
            air_quality_label=AIR_QUALITY_LABELS[index],
            air_quality_index=index,
        )


__all__ = [
    "AIR_QUALITY_LABELS",
    "WeatherSnapshot",
    "air_quality_label",
    "normalize_air_quality_index",
]
