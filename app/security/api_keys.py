"""API key generation, hashing, and the resolved caller identity."""

from __future__ import annotations

import hmac
import secrets
from dataclasses import dataclass
from hashlib import sha256

API_KEY_HEADER = "X-Weather-API-Key"
DEFAULT_KEY_PREFIX = "sk_weather"
TEST_KEY_PREFIX = "sk_test"


@dataclass(frozen=True)
class CallerIdentity:
    """Opaque identity of the caller on whose behalf a request runs."""

    requester_id: str
    email: str
    label: str | None = None


def generate_api_key(prefix: str = DEFAULT_KEY_PREFIX) -> str:
    """Generate a new ``<prefix>_<64 hex chars>`` API key."""

    return f"{prefix}_{secrets.token_hex(32)}"


def key_prefix(api_key: str, length: int = 8) -> str:
    """Return the short lookup prefix taken from the random part of a key."""

    random_part = api_key.strip().rsplit("_", maxsplit=1)[-1]
    return random_part[:length]


def hash_api_key(api_key: str, pepper: str) -> str:
    """Return a HMAC-SHA256 hex digest of the API key keyed by ``pepper``."""

    if not pepper:
        raise ValueError("API key pepper must be configured to hash keys")

    return hmac.new(pepper.encode(), api_key.encode(), sha256).hexdigest()


def is_test_key(api_key: str) -> bool:
    return api_key.startswith(f"{TEST_KEY_PREFIX}_")
