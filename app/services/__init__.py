"""Service-layer helpers for the weather automation backend."""

from .orchestrator import (
    OutcomeStatus,
    RequestOrchestrator,
    SubmissionOutcome,
    SubmissionState,
)

__all__ = [
    "OutcomeStatus",
    "RequestOrchestrator",
    "SubmissionOutcome",
    "SubmissionState",
]
