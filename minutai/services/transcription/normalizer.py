"""Normalisation of provider transcription responses into :class:`Transcript`.

Provider payloads are first classified into one of a small set of known shapes.
Only recognised shapes are traversed, so every missing level degrades to an
empty value instead of raising.
"""

from __future__ import annotations

import math
from dataclasses import dataclass, field
from typing import Any, List, Optional, Union

from ...data.models import Transcript, Utterance
from ...utils.payloads import as_data, field_of, first_of


@dataclass(frozen=True)
class DeepgramResponse:
    """Pre-recorded response with ``results.channels`` and ``results.utterances``."""

    transcript: str = ""
    utterances: List[Any] = field(default_factory=list)


@dataclass(frozen=True)
class UnrecognizedResponse:
    reason: str


ProviderResponse = Union[DeepgramResponse, UnrecognizedResponse]


def _to_float(value: Any) -> float:
    if isinstance(value, bool):
        return 0.0
    try:
        number = float(value)
    except (TypeError, ValueError):
        return 0.0
    if math.isnan(number) or number < 0:
        return 0.0
    return number


def classify_response(raw: Any) -> ProviderResponse:
    data = as_data(raw)
    if data is None:
        return UnrecognizedResponse("empty response")
    results = field_of(data, "results")
    if results is None:
        return UnrecognizedResponse("response has no results")

    alternative = first_of(field_of(first_of(field_of(results, "channels")), "alternatives"))
    transcript = field_of(alternative, "transcript")
    utterances = field_of(results, "utterances")
    return DeepgramResponse(
        transcript=transcript if isinstance(transcript, str) else "",
        utterances=list(utterances) if isinstance(utterances, (list, tuple)) else [],
    )


def _explicit_speaker(item: Any) -> Optional[Union[int, str]]:
    speaker = field_of(item, "speaker")
    if isinstance(speaker, bool):
        speaker = None
    if isinstance(speaker, float) and speaker.is_integer():
        speaker = int(speaker)
    if isinstance(speaker, int):
        return speaker
    if isinstance(speaker, str) and speaker.strip():
        return speaker.strip()
    label = field_of(item, "speaker_label")
    if isinstance(label, str) and label.strip():
        return label.strip()
    return None


def _utterance(item: Any, position: int) -> Utterance:
    text = field_of(item, "transcript")
    if not isinstance(text, str):
        text = field_of(item, "text")
    start = _to_float(field_of(item, "start"))
    end = max(_to_float(field_of(item, "end")), start)

    speaker = _explicit_speaker(item)
    return Utterance(
        speaker=position if speaker is None else speaker,
        synthesized=speaker is None,
        start=start,
        end=end,
        text=text.strip() if isinstance(text, str) else "",
    )


def normalize_transcript(raw: Any) -> Transcript:
    """Convert a raw provider response into a :class:`Transcript`; never raises."""

    shape = classify_response(raw)
    if isinstance(shape, UnrecognizedResponse):
        return Transcript()
    utterances = [
        _utterance(item, position)
        for position, item in enumerate(shape.utterances, start=1)
    ]
    return Transcript(full_text=shape.transcript, utterances=utterances)


__all__ = [
    "DeepgramResponse",
    "ProviderResponse",
    "UnrecognizedResponse",
    "classify_response",
    "normalize_transcript",
]
