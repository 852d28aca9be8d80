"""Deepgram pre-recorded transcription with diarization."""

from __future__ import annotations

import asyncio
from typing import Any, Dict, Optional

import httpx

from ...config import Settings
from ...data.models import StoredUpload, Transcript
from ...logging import get_logger
from .base import TranscriptionProvider
from .normalizer import normalize_transcript

LOGGER = get_logger(__name__)


class DeepgramTranscriptionProvider(TranscriptionProvider):
    name = "deepgram"

    def __init__(self, settings: Settings, client: Optional[httpx.AsyncClient] = None) -> None:
        self.api_key = settings.deepgram_api_key
        self.url = settings.deepgram_url
        self.timeout = settings.transcription_timeout_seconds
        self._client = client
        if not self.api_key:
            LOGGER.warning("MINUTAI_DEEPGRAM_API_KEY is not set; transcription requests will fail")

    def _params(self, language: str) -> Dict[str, Any]:
        return {
            "punctuate": True,
            "diarize": True,
            "utterances": True,
            "language": language,
        }

    async def _post(self, client: httpx.AsyncClient, upload: StoredUpload, language: str) -> Any:
        audio = await asyncio.to_thread(upload.path.read_bytes)
        response = await client.post(
            self.url,
            params=self._params(language),
            headers={
                "Authorization": f"Token {self.api_key}",
                "Content-Type": upload.mime_type,
            },
            content=audio,
        )
        response.raise_for_status()
        return response.json()

    async def transcribe(self, upload: StoredUpload, language: str) -> Transcript:
        if not self.api_key:
            raise RuntimeError("Deepgram API key not configured. Set MINUTAI_DEEPGRAM_API_KEY.")
        LOGGER.info("Requesting Deepgram transcription for %s (%s)", upload.original_name, language)
        if self._client is not None:
            payload = await self._post(self._client, upload, language)
        else:
            async with httpx.AsyncClient(timeout=self.timeout) as client:
                payload = await self._post(client, upload, language)
        return normalize_transcript(payload)


__all__ = ["DeepgramTranscriptionProvider"]
