"""Health check endpoint."""

from fastapi import APIRouter
from app.config import settings

router = APIRouter()


@router.get("/healthz", summary="Health check")
def health_check() -> dict[str, str]:
    """Report liveness and whether the providers are configured."""
    return {
        "status": "ok",
        "env": settings.weatherauto_env,
        "weather_provider": "live" if settings.weather_api_key else "fallback",
        "email_provider": "configured" if settings.resend_api_key else "missing",
    }
