from __future__ import annotations

import json
from pathlib import Path
from typing import Any, Dict, List, Optional

import pytest

from minutai.config import Settings
from minutai.data.models import StoredUpload, Transcript
from minutai.services.notes.base import GenerationProvider
from minutai.services.prompts import ChatPrompt
from minutai.services.transcription.base import TranscriptionProvider
from minutai.services.transcription.normalizer import normalize_transcript

MEETING_RESPONSE: Dict[str, Any] = {
    "results": {
        "channels": [{"alternatives": [{"transcript": "Hola Buenos días"}]}],
        "utterances": [
            {"speaker": 0, "start": 0.0, "end": 2.5, "transcript": "Hola"},
            {"speaker": 1, "start": 2.6, "end": 5.0, "transcript": "Buenos días"},
        ],
    }
}

MEETING_MINUTES: Dict[str, Any] = {
    "title": "Weekly sync",
    "date": "No mencionado",
    "attendees": [],
    "agenda": [],
    "decisions": ["Ship on Friday"],
    "agreements": [],
}

MEETING_SUMMARY = "# Summary\n\n- Greetings were exchanged\n- **Decision:** ship on Friday\n"


@pytest.fixture
def settings(tmp_path: Path) -> Settings:
    return Settings(
        _env_file=None,
        upload_dir=tmp_path / "uploads",
        documents_dir=tmp_path / "documents",
        transcription_backend="dummy",
        notes_backend="dummy",
    )


@pytest.fixture
def upload(settings: Settings) -> StoredUpload:
    settings.ensure_directories()
    path = settings.upload_dir / "1700000000000-meeting.mp3"
    path.write_bytes(b"fake audio content")
    return StoredUpload(path=path, original_name="meeting.mp3", mime_type="audio/mpeg")


class FakeTranscription(TranscriptionProvider):
    name = "fake"

    def __init__(self, raw: Any = None, error: Optional[Exception] = None) -> None:
        self.raw = MEETING_RESPONSE if raw is None else raw
        self.error = error
        self.calls: List[str] = []

    async def transcribe(self, upload: StoredUpload, language: str) -> Transcript:
        self.calls.append(language)
        if self.error is not None:
            raise self.error
        return normalize_transcript(self.raw)


class FakeGeneration(GenerationProvider):
    model = "fake-model"

    def __init__(
        self,
        record: Optional[str] = None,
        summary: str = MEETING_SUMMARY,
        record_error: Optional[Exception] = None,
        summary_error: Optional[Exception] = None,
    ) -> None:
        self.record = json.dumps(MEETING_MINUTES) if record is None else record
        self.summary = summary
        self.record_error = record_error
        self.summary_error = summary_error
        self.prompts: List[ChatPrompt] = []
        self.schemas: List[Optional[Dict[str, Any]]] = []

    async def generate(self, prompt: ChatPrompt, schema: Optional[Dict[str, Any]] = None) -> str:
        self.prompts.append(prompt)
        self.schemas.append(schema)
        if schema is not None:
            if self.record_error is not None:
                raise self.record_error
            return self.record
        if self.summary_error is not None:
            raise self.summary_error
        return self.summary
