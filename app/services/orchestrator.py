"""Sequence validation, weather resolution, persistence, and email for one submission."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
import logging
from typing import Optional, Protocol

import httpx

from app.errors import (
    AuthenticationRequired,
    PersistenceFailure,
    SubmissionValidationError,
    WeatherAutomationError,
)
from app.models.weather import WeatherSnapshot
from app.notifiers.email import EmailDispatchResult
from app.security.api_keys import CallerIdentity
from app.validators import has_errors, validate_submission

logger = logging.getLogger("weatherauto.orchestrator")


class SubmissionState(str, Enum):
    IDLE = "idle"
    VALIDATING = "validating"
    RESOLVING_WEATHER = "resolving_weather"
    PERSISTING = "persisting"
    PERSIST_FAILED = "persist_failed"
    NOTIFYING_EMAIL = "notifying_email"
    EMAIL_FAILED = "email_failed"
    EMAIL_SUCCEEDED = "email_succeeded"


class OutcomeStatus(str, Enum):
    SUCCESS = "success"
    PARTIAL_SUCCESS = "partial_success"
    FATAL = "fatal"


@dataclass
class SubmissionOutcome:
    """Terminal result of one submission.

    ``record_saved`` and ``email_sent`` are reported independently; a fatal
    outcome carries no snapshot.
    """

    status: OutcomeStatus
    record_saved: bool
    email_sent: bool
    snapshot: Optional[WeatherSnapshot] = None
    request_id: Optional[str] = None
    email_error: Optional[str] = None
    error: Optional[str] = None
    error_code: Optional[str] = None

    @property
    def message(self) -> str:
        if self.status is OutcomeStatus.SUCCESS:
            return "Weather data retrieved and confirmation email sent."
        if self.status is OutcomeStatus.PARTIAL_SUCCESS:
            return "Your request was saved, but the confirmation email could not be sent."
        return self.error or "Failed to process your request. Please try again."


class WeatherSource(Protocol):
    async def resolve(self, city: str) -> WeatherSnapshot:
        ...


class WeatherRequestStore(Protocol):
    def insert(
        self,
        *,
        requester_id: str,
        name: str,
        email: str,
        city: str,
        snapshot: WeatherSnapshot,
    ):
        ...


class EmailSender(Protocol):
    async def send(
        self, name: str, email: str, city: str, snapshot: WeatherSnapshot
    ) -> EmailDispatchResult:
        ...


class RequestOrchestrator:
    """Run a weather request submission through to a terminal outcome."""

    def __init__(
        self,
        *,
        weather: WeatherSource,
        store: WeatherRequestStore,
        email: EmailSender,
    ):
        self.weather = weather
        self.store = store
        self.email = email
        self.state = SubmissionState.IDLE

    def reset(self) -> None:
        self.state = SubmissionState.IDLE

    async def submit(
        self,
        identity: CallerIdentity | None,
        name: str,
        email: str,
        city: str,
    ) -> SubmissionOutcome:
        """Submit one request.

        Raises :class:`AuthenticationRequired` or
        :class:`SubmissionValidationError` before any external call; every
        other failure is reported through the returned outcome.
        """

        self.reset()

        if identity is None:
            logger.warning("Rejected submission without caller identity")
            raise AuthenticationRequired()

        self.state = SubmissionState.VALIDATING
        errors = validate_submission(name, email, city)
        if has_errors(errors):
            self.reset()
            raise SubmissionValidationError(errors)

        name, email, city = name.strip(), email.strip(), city.strip()

        self.state = SubmissionState.RESOLVING_WEATHER
        snapshot = await self.weather.resolve(city)

        self.state = SubmissionState.PERSISTING
        try:
            record = self.store.insert(
                requester_id=identity.requester_id,
                name=name,
                email=email,
                city=city,
                snapshot=snapshot,
            )
        except PersistenceFailure as exc:
            self.state = SubmissionState.PERSIST_FAILED
            logger.error("Submission for %s not saved: %s", identity.requester_id, exc)
            return SubmissionOutcome(
                status=OutcomeStatus.FATAL,
                record_saved=False,
                email_sent=False,
                error=exc.message,
                error_code=exc.code,
            )

        request_id = getattr(record, "id", None)

        self.state = SubmissionState.NOTIFYING_EMAIL
        try:
            result = await self.email.send(name, email, city, snapshot)
        except (httpx.HTTPError, WeatherAutomationError) as exc:
            logger.exception("Email dispatch raised for request %s", request_id)
            result = EmailDispatchResult.failed(str(exc) or "Email dispatch failed", "transport")

        if not result.success:
            self.state = SubmissionState.EMAIL_FAILED
            logger.warning(
                "Request %s saved but email failed (%s): %s",
                request_id,
                result.failure_kind,
                result.error_message,
            )
            return SubmissionOutcome(
                status=OutcomeStatus.PARTIAL_SUCCESS,
                record_saved=True,
                email_sent=False,
                snapshot=snapshot,
                request_id=request_id,
                email_error=result.error_message or "Email dispatch failed",
            )

        self.state = SubmissionState.EMAIL_SUCCEEDED
        logger.info(
            "Request %s completed; email id=%s", request_id, result.provider_message_id
        )
        return SubmissionOutcome(
            status=OutcomeStatus.SUCCESS,
            record_saved=True,
            email_sent=True,
            snapshot=snapshot,
            request_id=request_id,
        )


__all__ = [
    "OutcomeStatus",
    "RequestOrchestrator",
    "SubmissionOutcome",
    "SubmissionState",
]
