"""Data models used by MinutAI."""

from __future__ import annotations

import json
from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import Any, Dict, List, Literal, Union

from pydantic import BaseModel, ConfigDict, Field

RAW_FALLBACK_KEY = "raw"

StructuredMinutes = Dict[str, Any]


class Utterance(BaseModel):
    """One speaker turn, in the order the provider reported it."""

    model_config = ConfigDict(frozen=True)

    speaker: Union[int, str]
    start: float = 0.0
    end: float = 0.0
    text: str = ""
    synthesized: bool = False

    @property
    def label(self) -> str:
        # Positional ids get their own prefix so they never collide with provider ids.
        if self.synthesized:
            return f"SPEAKER_U{self.speaker}"
        if isinstance(self.speaker, int):
            return f"SPEAKER_{self.speaker}"
        return self.speaker


class Transcript(BaseModel):
    full_text: str = ""
    utterances: List[Utterance] = Field(default_factory=list)

    @property
    def utterance_count(self) -> int:
        return len(self.utterances)

    @property
    def speaker_labels(self) -> List[str]:
        labels: List[str] = []
        for utterance in self.utterances:
            if utterance.label not in labels:
                labels.append(utterance.label)
        return labels

    @property
    def is_empty(self) -> bool:
        return not self.utterances and not self.full_text


class PipelineStage(str, Enum):
    RECEIVED = "received"
    TRANSCRIBING = "transcribing"
    GENERATING_RECORD = "generating_record"
    GENERATING_SUMMARY = "generating_summary"
    RENDERING = "rendering"
    COMPLETE = "complete"
    FAILED = "failed"


class ProgressEvent(BaseModel):
    kind: Literal["progress", "complete", "error"]
    payload: Any = None

    @classmethod
    def progress(cls, stage: PipelineStage, message: str) -> "ProgressEvent":
        return cls(kind="progress", payload={"stage": stage.value, "message": message})

    @classmethod
    def complete(cls, payload: Dict[str, Any]) -> "ProgressEvent":
        return cls(kind="complete", payload=payload)

    @classmethod
    def error(cls, stage: PipelineStage, message: str, details: str) -> "ProgressEvent":
        return cls(
            kind="error",
            payload={"stage": stage.value, "message": message, "details": details},
        )

    @property
    def is_terminal(self) -> bool:
        return self.kind != "progress"

    def to_sse(self) -> str:
        data = json.dumps(self.payload, ensure_ascii=False, default=str)
        return f"event: {self.kind}\ndata: {data}\n\n"


@dataclass
class StoredUpload:
    path: Path
    original_name: str
    mime_type: str = "audio/mpeg"


@dataclass
class RenderedDocument:
    name: str
    path: Path
    locator: str


__all__ = [
    "PipelineStage",
    "ProgressEvent",
    "RAW_FALLBACK_KEY",
    "RenderedDocument",
    "StoredUpload",
    "StructuredMinutes",
    "Transcript",
    "Utterance",
]
