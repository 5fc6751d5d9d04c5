"""API routers for the weather automation backend."""

from fastapi import APIRouter

from .health import router as health_router
from .notifications import router as notifications_router
from .voice import router as voice_router
from .weather_requests import router as weather_requests_router
from .webhook import router as webhook_router

api_router = APIRouter()
api_router.include_router(health_router)
api_router.include_router(weather_requests_router)
api_router.include_router(notifications_router)
api_router.include_router(webhook_router)
api_router.include_router(voice_router)

__all__ = ["api_router"]
