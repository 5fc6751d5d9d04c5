"""Request and response models for the weather request API."""

from __future__ import annotations

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field

from app.domain.voice import VoiceIntent
from app.models.weather import WeatherSnapshot
from app.services.orchestrator import OutcomeStatus


class WeatherRequestCreate(BaseModel):
    """Form submission collected from the user."""

    name: str = Field(default="", description="Full name of the requester")
    email: str = Field(default="", description="Address the confirmation is sent to")
    city: str = Field(default="", description="City to resolve weather for")


class FieldValidationRequest(BaseModel):
    """Subset of form fields to validate as the user types."""

    name: Optional[str] = None
    email: Optional[str] = None
    city: Optional[str] = None


class FieldValidationResponse(BaseModel):
    valid: bool = Field(..., description="True when none of the checked fields has an error")
    errors: dict[str, str] = Field(
        default_factory=dict, description="Per-field error message; empty string clears it"
    )


class SubmissionResponse(BaseModel):
    """Outcome of a weather request submission."""

    status: OutcomeStatus = Field(..., description="success or partial_success")
    record_saved: bool = Field(..., description="Whether the request was persisted")
    email_sent: bool = Field(..., description="Whether the confirmation email was sent")
    message: str = Field(..., description="Human-readable outcome summary")
    request_id: Optional[str] = Field(default=None, description="Identifier of the saved request")
    weather: Optional[WeatherSnapshot] = Field(
        default=None, description="Weather snapshot resolved for the city"
    )
    email_error: Optional[str] = Field(
        default=None, description="Reason the confirmation email failed, if it did"
    )


class WeatherRequestSummary(BaseModel):
    """Saved weather request as returned to its owner."""

    model_config = ConfigDict(from_attributes=True)

    id: str
    name: str
    email: str
    city: str
    temperature: int
    condition: str
    air_quality_label: str
    air_quality_index: int
    created_at: datetime


class EmailNotificationRequest(BaseModel):
    """Payload for sending a weather confirmation email directly."""

    name: str
    email: str
    city: str
    temperature: int
    condition: str
    air_quality: str
    air_quality_index: int = Field(..., ge=1, le=6)

    def to_snapshot(self) -> WeatherSnapshot:
        return WeatherSnapshot(
            city=self.city,
            temperature=self.temperature,
            condition=self.condition,
            air_quality_label=self.air_quality,
            air_quality_index=self.air_quality_index,
        )


class EmailNotificationResponse(BaseModel):
    success: bool
    message_id: Optional[str] = None
    message: str


class WebhookConfigUpdate(BaseModel):
    url: str = Field(..., description="http(s) URL of the webhook to notify")


class WebhookSendRequest(BaseModel):
    """Either a snapshot to forward or a city to resolve first."""

    city: Optional[str] = Field(default=None, description="City to resolve weather for")
    snapshot: Optional[WeatherSnapshot] = Field(
        default=None, description="Previously resolved snapshot to forward as-is"
    )


class WebhookSendResponse(BaseModel):
    success: bool
    sent_at: Optional[str] = None
    message: str


class VoiceCommandRequest(BaseModel):
    transcript: str = Field(..., description="Recognized speech text")
    city: Optional[str] = Field(
        default=None, description="City whose weather a report should describe"
    )


class VoiceCommandResponse(BaseModel):
    intent: VoiceIntent
    response: str


__all__ = [
    "EmailNotificationRequest",
    "EmailNotificationResponse",
    "FieldValidationRequest",
    "FieldValidationResponse",
    "SubmissionResponse",
    "VoiceCommandRequest",
    "VoiceCommandResponse",
    "WeatherRequestCreate",
    "WeatherRequestSummary",
    "WebhookConfigUpdate",
    "WebhookSendRequest",
    "WebhookSendResponse",
]
