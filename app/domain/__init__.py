"""Domain vocabulary for the weather automation backend."""

from .voice import VoiceAssistant, VoiceIntent, classify_command, respond

__all__ = ["VoiceAssistant", "VoiceIntent", "classify_command", "respond"]
