"""Voice-command intents and the spoken responses they map to."""

from __future__ import annotations

from enum import Enum
import logging
import re
from typing import Optional, Protocol

from app.models.weather import WeatherSnapshot

logger = logging.getLogger("weatherauto.voice")


class VoiceIntent(str, Enum):
    """Closed set of recognized voice intents."""

    WEATHER_QUERY = "weather-query"
    GREETING = "greeting"
    UNKNOWN = "unknown"


WEATHER_KEYWORDS = frozenset({"weather", "temperature", "report"})
GREETING_KEYWORDS = frozenset({"hello", "hi"})

GREETING_RESPONSE = "Hello! I'm your weather assistant. Ask me about the weather!"
HELP_RESPONSE = (
    "I can help you with weather information. "
    "Try saying 'tell me the weather' or 'weather report'."
)
NO_DATA_RESPONSE = "No weather data available. Please check a city's weather first."

_WORD = re.compile(r"[a-z]+")


def classify_command(transcript: str) -> VoiceIntent:
    """Map a recognized transcript to an intent; weather wins over greetings."""

    words = set(_WORD.findall((transcript or "").lower()))
    if words & WEATHER_KEYWORDS:
        return VoiceIntent.WEATHER_QUERY
    if words & GREETING_KEYWORDS:
        return VoiceIntent.GREETING
    return VoiceIntent.UNKNOWN


def weather_report(snapshot: WeatherSnapshot) -> str:
    return (
        f"Current weather for {snapshot.city}: "
        f"Temperature is {snapshot.temperature}°C. "
        f"Weather condition: {snapshot.condition}. "
        f"Air quality is {snapshot.air_quality_label}, "
        f"index {snapshot.air_quality_index} of 6."
    )


def respond(intent: VoiceIntent, snapshot: Optional[WeatherSnapshot] = None) -> str:
    if intent is VoiceIntent.WEATHER_QUERY:
        return weather_report(snapshot) if snapshot is not None else NO_DATA_RESPONSE
    if intent is VoiceIntent.GREETING:
        return GREETING_RESPONSE
    if intent is VoiceIntent.UNKNOWN:
        return HELP_RESPONSE
    raise ValueError(f"Unsupported voice intent: {intent}")


class SpeechCapability(Protocol):
    """Host-provided speech recognition and synthesis."""

    def start_listening(self) -> None:
        ...

    def stop_listening(self) -> None:
        ...

    def speak(self, text: str) -> None:
        ...

    def stop_speaking(self) -> None:
        ...


class VoiceAssistant:
    """Route recognized transcripts to spoken replies through a speech engine."""

    def __init__(self, speech: SpeechCapability, snapshot: Optional[WeatherSnapshot] = None):
        self.speech = speech
        self.snapshot = snapshot

    def listen(self) -> None:
        self.speech.start_listening()

    def stop(self) -> None:
        self.speech.stop_listening()
        self.speech.stop_speaking()

    def handle_transcript(self, transcript: str) -> str:
        intent = classify_command(transcript)
        reply = respond(intent, self.snapshot)
        logger.info("Voice command %r classified as %s", transcript, intent.value)
        self.speech.speak(reply)
        return reply

    def speak_weather_report(self) -> str:
        reply = respond(VoiceIntent.WEATHER_QUERY, self.snapshot)
        self.speech.speak(reply)
        return reply


__all__ = [
    "SpeechCapability",
    "VoiceAssistant",
    "VoiceIntent",
    "classify_command",
    "respond",
    "weather_report",
]
