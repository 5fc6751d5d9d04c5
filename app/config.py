"""Configuration settings for the weather automation backend."""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass
from functools import lru_cache

import boto3
from botocore.exceptions import BotoCoreError, ClientError

logger = logging.getLogger("weatherauto.config")

SSM_RESEND_API_KEY = "/weatherauto/resend/api_key"
SSM_WEATHER_API_KEY = "/weatherauto/weather/api_key"
SSM_API_KEY_PEPPER = "/weatherauto/api_key_pepper"


def _get_bool(env_var: str, default: bool = False) -> bool:
    """Parse an environment variable into a boolean with a default."""

    value = os.getenv(env_var)
    if value is None:
        return default

    return value.lower() in {"1", "true", "yes", "on"}


@lru_cache(maxsize=1)
def _ssm_client():
    return boto3.client(
        "ssm",
        region_name=os.getenv("AWS_REGION") or os.getenv("AWS_DEFAULT_REGION") or "us-east-1",
    )


@lru_cache(maxsize=8)
def get_ssm_secret(name: str) -> str:
    """Fetch a secret from AWS SSM Parameter Store.

    The value is cached in-memory to avoid repeated SSM calls. Any failure to
    retrieve the parameter results in a runtime error so callers can decide
    whether to fail fast or continue without it.
    """

    try:
        response = _ssm_client().get_parameter(Name=name, WithDecryption=True)
        value = response.get("Parameter", {}).get("Value")
    except (ClientError, BotoCoreError) as exc:  # pragma: no cover - AWS error passthrough
        logger.error("Failed to load %s from SSM: %s", name, exc)
        raise RuntimeError(f"Unable to load {name} from SSM") from exc

    if not value:
        logger.error("Received empty value for %s from SSM", name)
        raise RuntimeError(f"{name} not configured in SSM")

    return value


@dataclass
class Settings:
    """Application configuration loaded from environment variables."""

    weatherauto_env: str = os.getenv("WEATHERAUTO_ENV", "local")
    log_level: str = os.getenv("WEATHERAUTO_LOG_LEVEL", "INFO")
    secrets_source: str = os.getenv("SECRETS_SOURCE", "env").lower()

    # Weather provider
    weather_api_key: str = os.getenv("WEATHER_API_KEY", "")
    weather_base_url: str = os.getenv(
        "WEATHER_BASE_URL", "https://api.weatherapi.com/v1/current.json"
    )
    weather_timeout: float = float(os.getenv("WEATHER_TIMEOUT", "10.0"))

    # Transactional email
    resend_api_key: str = os.getenv("RESEND_API_KEY", "")
    resend_base_url: str = os.getenv("RESEND_BASE_URL", "https://api.resend.com")
    email_from: str = os.getenv(
        "EMAIL_FROM", "Weather Automation <onboarding@resend.dev>"
    )
    email_timeout: float = float(os.getenv("EMAIL_TIMEOUT", "10.0"))
    email_timezone: str = os.getenv("EMAIL_TIMEZONE", "Asia/Kolkata")
    email_timezone_label: str = os.getenv("EMAIL_TIMEZONE_LABEL", "IST")

    # Outbound webhook
    webhook_timeout: float = float(os.getenv("WEBHOOK_TIMEOUT", "10.0"))
    webhook_state_dir: str = os.getenv("WEBHOOK_STATE_DIR", "./webhook_state")

    # API key authentication
    api_key_pepper: str = os.getenv("API_KEY_PEPPER", "")
    require_api_key: bool = _get_bool(
        "REQUIRE_API_KEY",
        default=os.getenv("WEATHERAUTO_ENV", "local").lower()
        in {"prod", "production"},
    )


settings = Settings()

# Fill missing secrets from SSM when explicitly requested
if settings.secrets_source == "ssm":
    for _attr, _parameter in (
        ("resend_api_key", SSM_RESEND_API_KEY),
        ("weather_api_key", SSM_WEATHER_API_KEY),
        ("api_key_pepper", SSM_API_KEY_PEPPER),
    ):
        if getattr(settings, _attr):
            continue
        try:
            setattr(settings, _attr, get_ssm_secret(_parameter))
        except RuntimeError:
            logger.warning("%s not available at import time", _parameter)

__all__ = ["settings", "Settings", "get_ssm_secret"]
