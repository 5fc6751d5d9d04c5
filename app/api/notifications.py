"""Standalone confirmation email endpoint."""

from __future__ import annotations

import logging

from fastapi import APIRouter, Depends, HTTPException, status
from fastapi.responses import JSONResponse

from app.api.dependencies import get_email_notifier
from app.errors import ConfigurationError
from app.models.requests import EmailNotificationRequest, EmailNotificationResponse
from app.notifiers import EmailNotifier
from app.security import CallerIdentity, require_api_key

router = APIRouter(prefix="/api/v1/notifications", tags=["notifications"])

logger = logging.getLogger("weatherauto.api.notifications")


@router.post(
    "/email",
    response_model=EmailNotificationResponse,
    summary="Send a weather confirmation email",
)
async def send_weather_email(
    request: EmailNotificationRequest,
    caller: CallerIdentity = Depends(require_api_key),
    notifier: EmailNotifier = Depends(get_email_notifier),
):
    try:
        notifier.require_configuration()
    except ConfigurationError as exc:
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail={"code": exc.code, "message": exc.message},
        ) from exc

    try:
        snapshot = request.to_snapshot()
    except ValueError as exc:
        raise HTTPException(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
            detail={"code": "validation_error", "message": str(exc)},
        ) from exc

    result = await notifier.send(request.name, request.email, request.city, snapshot)
    if not result.success:
        logger.error("Email for %s failed: %s", caller.requester_id, result.error_message)
        body = EmailNotificationResponse(
            success=False,
            message=result.error_message or "Email dispatch failed",
        )
        return JSONResponse(
            status_code=status.HTTP_502_BAD_GATEWAY, content=body.model_dump()
        )

    return EmailNotificationResponse(
        success=True,
        message_id=result.provider_message_id,
        message="Weather email sent successfully",
    )
