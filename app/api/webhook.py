"""Webhook configuration and delivery endpoints."""

from __future__ import annotations

import logging

from fastapi import APIRouter, Depends, HTTPException, status

from app.api.dependencies import get_weather_resolver, get_webhook_config_store, get_webhook_notifier
from app.ingestors import WeatherResolver
from app.models.requests import WebhookConfigUpdate, WebhookSendRequest, WebhookSendResponse
from app.notifiers import WebhookNotifier
from app.storage import WebhookConfig, WebhookConfigStore

router = APIRouter(prefix="/api/v1/webhook", tags=["webhook"])

logger = logging.getLogger("weatherauto.api.webhook")


def _error(status_code: int, code: str, message: str) -> HTTPException:
    return HTTPException(status_code=status_code, detail={"code": code, "message": message})


@router.get("/config", response_model=WebhookConfig, summary="Get the webhook configuration")
async def get_webhook_config(
    store: WebhookConfigStore = Depends(get_webhook_config_store),
) -> WebhookConfig:
    return store.load()


@router.put("/config", response_model=WebhookConfig, summary="Save the webhook URL")
async def save_webhook_config(
    request: WebhookConfigUpdate,
    store: WebhookConfigStore = Depends(get_webhook_config_store),
) -> WebhookConfig:
    try:
        config = store.save_url(request.url)
    except ValueError as exc:
        raise _error(status.HTTP_422_UNPROCESSABLE_ENTITY, "invalid_webhook_url", str(exc)) from exc
    logger.info("Webhook URL saved")
    return config


@router.delete(
    "/config",
    status_code=status.HTTP_204_NO_CONTENT,
    summary="Clear the webhook configuration",
)
async def reset_webhook_config(
    store: WebhookConfigStore = Depends(get_webhook_config_store),
) -> None:
    store.reset()
    logger.info("Webhook configuration cleared")


@router.post("/send", response_model=WebhookSendResponse, summary="Send weather data to the webhook")
async def send_to_webhook(
    request: WebhookSendRequest,
    store: WebhookConfigStore = Depends(get_webhook_config_store),
    notifier: WebhookNotifier = Depends(get_webhook_notifier),
    resolver: WeatherResolver = Depends(get_weather_resolver),
) -> WebhookSendResponse:
    """Forward a snapshot, resolving it from ``city`` when none is supplied."""

    config = store.load()
    if not config.url:
        raise _error(
            status.HTTP_409_CONFLICT,
            "webhook_not_configured",
            "Please configure the webhook URL first",
        )

    snapshot = request.snapshot
    if snapshot is None:
        city = (request.city or "").strip()
        if not city:
            raise _error(
                status.HTTP_422_UNPROCESSABLE_ENTITY,
                "validation_error",
                "Either snapshot or city is required",
            )
        snapshot = await resolver.resolve(city)

    if not await notifier.send(config.url, snapshot):
        return WebhookSendResponse(success=False, message="Failed to send data to webhook")

    sent_at = store.record_sent()
    return WebhookSendResponse(
        success=True, sent_at=sent_at, message="Weather data sent to webhook successfully"
    )
