"""Providers for the collaborators used by API routes."""

from __future__ import annotations

from fastapi import Depends
from sqlalchemy.orm import Session

from app.config import settings
from app.db import get_db
from app.ingestors import WeatherResolver
from app.notifiers import EmailNotifier, WebhookNotifier
from app.repositories import WeatherRequestRepository
from app.security import CallerIdentity, require_api_key
from app.services import RequestOrchestrator
from app.storage import WebhookConfigStore, client_store


def get_weather_resolver() -> WeatherResolver:
    return WeatherResolver()


def get_email_notifier() -> EmailNotifier:
    return EmailNotifier()


def get_webhook_notifier() -> WebhookNotifier:
    return WebhookNotifier()


def get_request_repository(db: Session = Depends(get_db)) -> WeatherRequestRepository:
    return WeatherRequestRepository(db)


def get_orchestrator(
    weather: WeatherResolver = Depends(get_weather_resolver),
    repository: WeatherRequestRepository = Depends(get_request_repository),
    email: EmailNotifier = Depends(get_email_notifier),
) -> RequestOrchestrator:
    return RequestOrchestrator(weather=weather, store=repository, email=email)


def get_webhook_config_store(
    caller: CallerIdentity = Depends(require_api_key),
) -> WebhookConfigStore:
    """Webhook settings are scoped to the calling client."""

    return WebhookConfigStore(client_store(settings.webhook_state_dir, caller.requester_id))
