"""Factories for runtime service selection."""

from __future__ import annotations

from typing import Optional

from ..config import Settings
from .notes.base import GenerationProvider
from .notes.dummy import DummyGenerationProvider
from .transcription.base import TranscriptionProvider
from .transcription.dummy import DummyTranscriptionProvider


class ServiceConfigurationError(ValueError):
    """Raised when an unknown backend is requested."""


def _normalise(name: Optional[str]) -> str:
    if not name:
        return ""
    return name.strip().lower()


def resolve_transcription_backend(name: Optional[str], settings: Settings) -> TranscriptionProvider:
    backend = _normalise(name)
    if backend == "dummy":
        return DummyTranscriptionProvider()
    if backend == "deepgram":
        from .transcription.deepgram import DeepgramTranscriptionProvider

        return DeepgramTranscriptionProvider(settings)
    raise ServiceConfigurationError(f"Unknown transcription backend: {name}")


def resolve_notes_backend(name: Optional[str], settings: Settings) -> GenerationProvider:
    backend = _normalise(name)
    if backend == "dummy":
        return DummyGenerationProvider()
    if backend == "openai":
        from .notes.openai_notes import OpenAIGenerationProvider

        return OpenAIGenerationProvider(settings)
    raise ServiceConfigurationError(f"Unknown notes backend: {name}")


__all__ = [
    "ServiceConfigurationError",
    "resolve_notes_backend",
    "resolve_transcription_backend",
]
