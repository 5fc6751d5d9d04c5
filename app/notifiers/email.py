"""Confirmation email delivery through the Resend transactional email API."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timezone
from html import escape
import logging
from typing import Literal, Optional
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

import httpx

from app.config import settings
from app.errors import ConfigurationError
from app.models.weather import WeatherSnapshot

logger = logging.getLogger("weatherauto.notifiers.email")

FailureKind = Literal["transport", "provider", "configuration"]

_TEMPLATE = """\
<div style="font-family: Arial, sans-serif; max-width: 600px; margin: 0 auto; padding: 20px; background-color: #f8fafc;">
  <div style="background-color: white; border-radius: 10px; padding: 30px;">
    <h1 style="color: #2563eb; text-align: center;">🌤️ Weather Update for {city}</h1>
    <p style="font-size: 18px; color: #374151;">Hi {name},</p>
    <p style="font-size: 16px; color: #6b7280;">Here's your personalized weather summary for <strong>{city}</strong>:</p>
    <table role="presentation" style="width: 100%; margin: 25px 0;">
      <tr>
        <td style="text-align: center; padding: 20px;">
          <div style="font-size: 28px; font-weight: bold; color: #dc2626;">🌡️ {temperature}°C</div>
          <div style="color: #6b7280; font-size: 14px;">Temperature</div>
        </td>
        <td style="text-align: center; padding: 20px;">
          <div style="font-size: 20px; font-weight: bold; color: #2563eb;">☁️ {condition}</div>
          <div style="color: #6b7280; font-size: 14px;">Condition</div>
        </td>
        <td style="text-align: center; padding: 20px;">
          <div style="font-size: 18px; font-weight: bold; color: #059669;">💨 {air_quality}</div>
          <div style="color: #6b7280; font-size: 14px;">Air Quality ({air_quality_index}/6)</div>
        </td>
      </tr>
    </table>
    <div style="background-color: #f3f4f6; padding: 20px; border-radius: 8px;">
      <h3 style="color: #374151; margin-top: 0;">📍 Location Details</h3>
      <p style="color: #6b7280;"><strong>City:</strong> {city}</p>
      <p style="color: #6b7280;"><strong>Report Time ({timezone_label}):</strong> {report_time}</p>
    </div>
    <p style="font-size: 16px; color: #374151; text-align: center;">Thank you for using our Weather Automation System! 🚀</p>
    <p style="font-size: 14px; color: #9ca3af; text-align: center;">Best regards,<br><strong>Weather Automation Team</strong></p>
  </div>
</div>
"""


@dataclass
class EmailDispatchResult:
    """Outcome of a single confirmation email attempt."""

    success: bool
    provider_message_id: Optional[str] = None
    error_message: Optional[str] = None
    failure_kind: Optional[FailureKind] = None

    @classmethod
    def failed(cls, message: str, kind: FailureKind) -> "EmailDispatchResult":
        return cls(success=False, error_message=message, failure_kind=kind)


def format_report_time(moment: datetime, tz_name: str) -> str:
    """Format a timestamp like ``19 October 2026, 2:05 pm`` in ``tz_name``."""

    local = moment.astimezone(ZoneInfo(tz_name))
    hour = local.hour % 12 or 12
    suffix = "am" if local.hour < 12 else "pm"
    return f"{local.day} {local:%B %Y}, {hour}:{local:%M} {suffix}"


def email_subject(city: str) -> str:
    return f"🌤️ Weather Update for {city}"


def render_weather_email(
    name: str,
    city: str,
    snapshot: WeatherSnapshot,
    *,
    sent_at: datetime | None = None,
    tz_name: str | None = None,
    timezone_label: str | None = None,
) -> str:
    """Render the HTML confirmation body for a weather snapshot."""

    report_time = format_report_time(
        sent_at or datetime.now(timezone.utc), tz_name or settings.email_timezone
    )
    return _TEMPLATE.format(
        name=escape(name),
        city=escape(city),
        temperature=snapshot.temperature,
        condition=escape(snapshot.condition),
        air_quality=escape(snapshot.air_quality_label),
        air_quality_index=snapshot.air_quality_index,
        timezone_label=escape(timezone_label or settings.email_timezone_label),
        report_time=report_time,
    )


class EmailNotifier:
    """Send weather confirmation emails via the Resend HTTP API."""

    def __init__(
        self,
        *,
        api_key: str | None = None,
        base_url: str | None = None,
        sender: str | None = None,
        timeout: float | None = None,
        tz_name: str | None = None,
        timezone_label: str | None = None,
    ):
        self.api_key = settings.resend_api_key if api_key is None else api_key
        self.base_url = (base_url or settings.resend_base_url).rstrip("/")
        self.sender = sender or settings.email_from
        self.timeout = timeout or settings.email_timeout
        self.tz_name = tz_name or settings.email_timezone
        self.timezone_label = timezone_label or settings.email_timezone_label

    def require_api_key(self) -> str:
        if not self.api_key:
            logger.error("RESEND_API_KEY is not configured")
            raise ConfigurationError("RESEND_API_KEY environment variable is not set")
        return self.api_key

    def require_timezone(self) -> ZoneInfo:
        try:
            return ZoneInfo(self.tz_name)
        except (ZoneInfoNotFoundError, OSError, ValueError) as exc:
            logger.error("EMAIL_TIMEZONE %r is not a known time zone", self.tz_name)
            raise ConfigurationError(
                f"EMAIL_TIMEZONE '{self.tz_name}' is not a known time zone"
            ) from exc

    def require_configuration(self) -> str:
        """Check the API key and report time zone before any send."""

        api_key = self.require_api_key()
        self.require_timezone()
        return api_key

    async def send(
        self, name: str, email: str, city: str, snapshot: WeatherSnapshot
    ) -> EmailDispatchResult:
        logger.info("Attempting to send weather email to %s for %s", email, city)

        try:
            api_key = self.require_configuration()
        except ConfigurationError as exc:
            return EmailDispatchResult.failed(exc.message, "configuration")

        body = {
            "from": self.sender,
            "to": [email],
            "subject": email_subject(city),
            "html": render_weather_email(
                name,
                city,
                snapshot,
                tz_name=self.tz_name,
                timezone_label=self.timezone_label,
            ),
        }

        try:
            async with httpx.AsyncClient(timeout=self.timeout) as client:
                response = await client.post(
                    f"{self.base_url}/emails",
                    json=body,
                    headers={"Authorization": f"Bearer {api_key}"},
                )
        except httpx.TimeoutException as exc:
            logger.error("Email provider request timed out: %s", exc)
            return EmailDispatchResult.failed("Email service timeout", "transport")
        except httpx.HTTPError as exc:
            logger.error("Email provider request failed: %s", exc)
            return EmailDispatchResult.failed("Email request failed", "transport")

        try:
            payload = response.json()
        except ValueError:
            payload = {}
        if not isinstance(payload, dict):
            payload = {}

        if not response.is_success:
            message = payload.get("message") or f"Email provider returned {response.status_code}"
            logger.error(
                "Email provider rejected message: status=%s body=%s",
                response.status_code,
                response.text,
            )
            return EmailDispatchResult.failed(str(message), "provider")

        message_id = payload.get("id")
        logger.info("Email sent successfully to %s: id=%s", email, message_id)
        return EmailDispatchResult(success=True, provider_message_id=message_id)


__all__ = [
    "EmailDispatchResult",
    "EmailNotifier",
    "email_subject",
    "format_report_time",
    "render_weather_email",
]
