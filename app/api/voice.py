"""Voice command mapping endpoint."""

from __future__ import annotations

from fastapi import APIRouter, Depends

from app.api.dependencies import get_weather_resolver
from app.domain import VoiceIntent, classify_command, respond
from app.ingestors import WeatherResolver
from app.models.requests import VoiceCommandRequest, VoiceCommandResponse

router = APIRouter(prefix="/api/v1/voice", tags=["voice"])


@router.post("/command", response_model=VoiceCommandResponse, summary="Answer a voice command")
async def voice_command(
    request: VoiceCommandRequest,
    resolver: WeatherResolver = Depends(get_weather_resolver),
) -> VoiceCommandResponse:
    """Classify a transcript and return the text to speak back."""

    intent = classify_command(request.transcript)
    snapshot = None
    city = (request.city or "").strip()
    if intent is VoiceIntent.WEATHER_QUERY and city:
        snapshot = await resolver.resolve(city)
    return VoiceCommandResponse(intent=intent, response=respond(intent, snapshot))
