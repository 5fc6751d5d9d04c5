"""Outbound notifications for resolved weather snapshots."""

from .email import EmailDispatchResult, EmailNotifier, render_weather_email
from .webhook import WebhookNotifier, build_envelope, validate_webhook_url

__all__ = [
    "EmailDispatchResult",
    "EmailNotifier",
    "WebhookNotifier",
    "build_envelope",
    "render_weather_email",
    "validate_webhook_url",
]
