"""Domain exceptions raised by the weather automation core."""

from __future__ import annotations


class WeatherAutomationError(Exception):
    """Base class for errors surfaced to API callers."""

    code = "internal_error"

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class SubmissionValidationError(WeatherAutomationError):
    """One or more submitted fields failed validation."""

    code = "validation_error"

    def __init__(self, field_errors: dict[str, str]):
        super().__init__("Please fix the errors below and try again.")
        self.field_errors = {field: error for field, error in field_errors.items() if error}


class AuthenticationRequired(WeatherAutomationError):
    """No resolved caller identity was available for the submission."""

    code = "authentication_required"

    def __init__(self, message: str = "Authentication is required to submit a request"):
        super().__init__(message)


class PersistenceFailure(WeatherAutomationError):
    """The persistence store rejected the weather request insert."""

    code = "persistence_failed"


class ConfigurationError(WeatherAutomationError):
    """A provider credential or setting is missing from the environment."""

    code = "configuration_error"


__all__ = [
    "AuthenticationRequired",
    "ConfigurationError",
    "PersistenceFailure",
    "SubmissionValidationError",
    "WeatherAutomationError",
]
