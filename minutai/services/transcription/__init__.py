"""Transcription services."""

from .base import TranscriptionProvider
from .dummy import DummyTranscriptionProvider
from .normalizer import normalize_transcript

__all__ = ["DummyTranscriptionProvider", "TranscriptionProvider", "normalize_transcript"]
