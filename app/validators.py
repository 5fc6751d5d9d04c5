"""Field validators for weather request submissions."""

from __future__ import annotations

import re

EMAIL_PATTERN = re.compile(r"^[^\s@]+@[^\s@]+\.[^\s@]+$")
ADDRESS_PATTERN = re.compile(r"^[^\s@]+@[^\s@]+$")

NAME_REQUIRED = "Name is required"
CITY_REQUIRED = "City is required"
EMAIL_REQUIRED = "Email is required"
EMAIL_INVALID = "Please enter a valid email address"
EMAIL_DOMAIN_INVALID = "Invalid email domain format"
EMAIL_FORMAT_INVALID = "Invalid email format"


def _has_bad_dots(value: str) -> bool:
    return ".." in value or value.startswith(".") or value.endswith(".")


def validate_name(name: str | None) -> str:
    """Return an error message when the name is blank, else an empty string."""

    return "" if (name or "").strip() else NAME_REQUIRED


def validate_city(city: str | None) -> str:
    return "" if (city or "").strip() else CITY_REQUIRED


def validate_email(email: str | None) -> str:
    """Validate an email address and return a human-readable error or ``""``.

    Checks, in order: presence, the ``local@domain.tld`` shape, dot placement
    within the domain, then dot placement within the whole address.
    """

    if not email:
        return EMAIL_REQUIRED

    if not EMAIL_PATTERN.match(email):
        # local@host without a dotted domain
        if ADDRESS_PATTERN.match(email) and "." not in email.split("@", 1)[1]:
            return EMAIL_DOMAIN_INVALID
        return EMAIL_INVALID

    domain = email.split("@", 1)[1].lower()
    if "." in domain and _has_bad_dots(domain):
        return EMAIL_DOMAIN_INVALID

    if _has_bad_dots(email):
        return EMAIL_FORMAT_INVALID

    return ""


_FIELD_VALIDATORS = {
    "name": validate_name,
    "email": validate_email,
    "city": validate_city,
}


def validate_fields(**fields: str | None) -> dict[str, str]:
    """Validate only the supplied fields, e.g. on each change of a form input.

    Fields that pass map to ``""`` so callers can clear stale errors.
    """

    errors: dict[str, str] = {}
    for field, value in fields.items():
        validator = _FIELD_VALIDATORS.get(field)
        if validator is None:
            raise ValueError(f"Unknown field: {field}")
        errors[field] = validator(value)
    return errors


def validate_submission(name: str | None, email: str | None, city: str | None) -> dict[str, str]:
    """Run every field validator for a full submit."""

    return validate_fields(name=name, email=email, city=city)


def has_errors(errors: dict[str, str]) -> bool:
    return any(errors.values())


__all__ = [
    "has_errors",
    "validate_city",
    "validate_email",
    "validate_fields",
    "validate_name",
    "validate_submission",
]
