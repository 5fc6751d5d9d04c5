"""Caller identity and API key helpers."""

from .api_keys import (
    API_KEY_HEADER,
    CallerIdentity,
    generate_api_key,
    hash_api_key,
    is_test_key,
    key_prefix,
)
from .dependencies import require_api_key, resolve_caller

__all__ = [
    "API_KEY_HEADER",
    "CallerIdentity",
    "generate_api_key",
    "hash_api_key",
    "is_test_key",
    "key_prefix",
    "require_api_key",
    "resolve_caller",
]
