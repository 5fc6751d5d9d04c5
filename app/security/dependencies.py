"""FastAPI dependencies resolving the caller identity from an API key."""

from __future__ import annotations

import hmac
import logging
from datetime import datetime

from fastapi import Depends, HTTPException, Security, status
from fastapi.security import APIKeyHeader
from sqlalchemy.orm import Session

from app import db_models
from app.config import settings
from app.db import get_db
from app.security.api_keys import (
    API_KEY_HEADER,
    CallerIdentity,
    hash_api_key,
    is_test_key,
    key_prefix,
)

logger = logging.getLogger("weatherauto.security")

api_key_header = APIKeyHeader(name=API_KEY_HEADER, auto_error=False)

DEV_IDENTITY = CallerIdentity(requester_id="development", email="dev@localhost", label="bypass")


def _auth_error(status_code: int, code: str, message: str) -> HTTPException:
    return HTTPException(status_code=status_code, detail={"code": code, "message": message})


def _check_pepper() -> str:
    if not settings.api_key_pepper:
        logger.error("API key pepper is not configured; rejecting request")
        raise _auth_error(
            status.HTTP_500_INTERNAL_SERVER_ERROR,
            "api_key_misconfigured",
            "API key pepper is not configured",
        )
    return settings.api_key_pepper


async def resolve_caller(
    api_key: str | None = Security(api_key_header),
    db: Session = Depends(get_db),
) -> CallerIdentity | None:
    """Return the caller identity, or None when no API key was presented.

    A presented key that is invalid, revoked, or expired is rejected outright.
    """

    if not settings.require_api_key:
        return DEV_IDENTITY

    if not api_key or not api_key.strip():
        return None

    provided_key = api_key.strip()

    if is_test_key(provided_key) and settings.weatherauto_env.lower() not in {"test", "testing"}:
        raise _auth_error(
            status.HTTP_403_FORBIDDEN,
            "api_key_test_only",
            "Test API keys are not accepted in this environment",
        )

    stored = db.query(db_models.ApiKey).filter_by(key_prefix=key_prefix(provided_key)).first()
    if not stored:
        raise _auth_error(status.HTTP_401_UNAUTHORIZED, "api_key_invalid", "Invalid API key")

    if stored.revoked_at is not None:
        raise _auth_error(status.HTTP_403_FORBIDDEN, "api_key_revoked", "API key has been revoked")

    if stored.expires_at is not None and stored.expires_at <= datetime.utcnow():
        raise _auth_error(status.HTTP_403_FORBIDDEN, "api_key_expired", "API key has expired")

    computed_hash = hash_api_key(provided_key, _check_pepper())
    if not hmac.compare_digest(computed_hash, stored.key_hash):
        raise _auth_error(status.HTTP_401_UNAUTHORIZED, "api_key_invalid", "Invalid API key")

    stored.last_used_at = datetime.utcnow()
    db.commit()

    return CallerIdentity(
        requester_id=str(stored.id), email=stored.holder_email, label=stored.holder_label
    )


async def require_api_key(
    caller: CallerIdentity | None = Depends(resolve_caller),
) -> CallerIdentity:
    """Like :func:`resolve_caller` but rejects anonymous requests."""

    if caller is None:
        raise _auth_error(status.HTTP_401_UNAUTHORIZED, "api_key_missing", "API key header is required")
    return caller
