"""Transcription provider abstractions."""

from __future__ import annotations

import abc

from ...data.models import StoredUpload, Transcript


class TranscriptionProvider(abc.ABC):
    """Turn a complete audio upload into a diarized :class:`Transcript`."""

    name = "unknown"

    @abc.abstractmethod
    async def transcribe(self, upload: StoredUpload, language: str) -> Transcript:
        raise NotImplementedError


__all__ = ["TranscriptionProvider"]
