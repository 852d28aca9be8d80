"""Dummy transcription provider for offline usage."""

from __future__ import annotations

from ...data.models import StoredUpload, Transcript
from .base import TranscriptionProvider
from .normalizer import normalize_transcript


class DummyTranscriptionProvider(TranscriptionProvider):
    name = "dummy"

    async def transcribe(self, upload: StoredUpload, language: str) -> Transcript:
        text = f"Dummy transcript for {upload.original_name}."
        closing = "Replace with a real transcription backend."
        return normalize_transcript(
            {
                "results": {
                    "channels": [{"alternatives": [{"transcript": f"{text} {closing}"}]}],
                    "utterances": [
                        {"speaker": 0, "start": 0.0, "end": 2.5, "transcript": text},
                        {"speaker": 1, "start": 2.6, "end": 5.0, "transcript": closing},
                    ],
                }
            }
        )


__all__ = ["DummyTranscriptionProvider"]
