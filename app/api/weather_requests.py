"""Weather request submission and lookup endpoints."""

from __future__ import annotations

import logging

from fastapi import APIRouter, Depends, HTTPException, Query, status

from app.api.dependencies import get_orchestrator, get_request_repository, get_weather_resolver
from app.errors import AuthenticationRequired, SubmissionValidationError
from app.ingestors import WeatherResolver
from app.models.requests import (
    FieldValidationRequest,
    FieldValidationResponse,
    SubmissionResponse,
    WeatherRequestCreate,
    WeatherRequestSummary,
)
from app.models.weather import WeatherSnapshot
from app.repositories import WeatherRequestRepository
from app.security import CallerIdentity, require_api_key, resolve_caller
from app.services import OutcomeStatus, RequestOrchestrator
from app.validators import has_errors, validate_fields

router = APIRouter(prefix="/api/v1", tags=["weather-requests"])

logger = logging.getLogger("weatherauto.api.weather_requests")


def _error(status_code: int, code: str, message: str, **extra) -> HTTPException:
    return HTTPException(status_code=status_code, detail={"code": code, "message": message, **extra})


@router.post(
    "/weather-requests",
    response_model=SubmissionResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Submit a weather request",
)
async def submit_weather_request(
    request: WeatherRequestCreate,
    caller: CallerIdentity | None = Depends(resolve_caller),
    orchestrator: RequestOrchestrator = Depends(get_orchestrator),
) -> SubmissionResponse:
    """Resolve weather for the city, save the request, and email the requester."""

    try:
        outcome = await orchestrator.submit(caller, request.name, request.email, request.city)
    except AuthenticationRequired as exc:
        raise _error(status.HTTP_401_UNAUTHORIZED, exc.code, exc.message) from exc
    except SubmissionValidationError as exc:
        raise _error(
            status.HTTP_422_UNPROCESSABLE_ENTITY,
            exc.code,
            exc.message,
            field_errors=exc.field_errors,
        ) from exc

    if outcome.status is OutcomeStatus.FATAL:
        raise _error(
            status.HTTP_500_INTERNAL_SERVER_ERROR,
            outcome.error_code or "internal_error",
            outcome.message,
        )

    return SubmissionResponse(
        status=outcome.status,
        record_saved=outcome.record_saved,
        email_sent=outcome.email_sent,
        message=outcome.message,
        request_id=outcome.request_id,
        weather=outcome.snapshot,
        email_error=outcome.email_error,
    )


@router.post(
    "/weather-requests/validate",
    response_model=FieldValidationResponse,
    summary="Validate individual form fields",
)
async def validate_weather_request_fields(
    request: FieldValidationRequest,
) -> FieldValidationResponse:
    """Check only the fields present in the body."""

    errors = validate_fields(**request.model_dump(exclude_unset=True))
    return FieldValidationResponse(valid=not has_errors(errors), errors=errors)


@router.get(
    "/weather-requests",
    response_model=list[WeatherRequestSummary],
    summary="List the caller's saved weather requests",
)
async def list_weather_requests(
    limit: int = Query(default=20, ge=1, le=100),
    caller: CallerIdentity = Depends(require_api_key),
    repository: WeatherRequestRepository = Depends(get_request_repository),
) -> list[WeatherRequestSummary]:
    records = repository.list_for_requester(caller.requester_id, limit=limit)
    return [WeatherRequestSummary.model_validate(record) for record in records]


@router.get("/weather", response_model=WeatherSnapshot, summary="Resolve weather for a city")
async def get_weather(
    city: str = Query(..., min_length=1, description="City name"),
    resolver: WeatherResolver = Depends(get_weather_resolver),
) -> WeatherSnapshot:
    cleaned = city.strip()
    if not cleaned:
        raise _error(status.HTTP_400_BAD_REQUEST, "validation_error", "City is required")
    return await resolver.resolve(cleaned)
