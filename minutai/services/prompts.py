"""Prompt construction for the minutes and summary generation calls."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, List

from ..data.models import Transcript
from ..logging import get_logger

LOGGER = get_logger(__name__)

DEFAULT_LANGUAGE = "es"

LANGUAGE_NAMES: Dict[str, str] = {
    "es": "Spanish",
    "en": "English",
    "pt": "Portuguese",
    "fr": "French",
    "de": "German",
    "it": "Italian",
}

NOT_MENTIONED: Dict[str, str] = {
    "es": "No mencionado",
    "en": "Not mentioned",
    "pt": "Não mencionado",
    "fr": "Non mentionné",
    "de": "Nicht erwähnt",
    "it": "Non menzionato",
}

NO_TRANSCRIPT_MARKER = "[The audio could not be transcribed.]"

SEPARATOR = "\n\n---\n\n"


@dataclass(frozen=True)
class ChatPrompt:
    system: str
    user: str

    def messages(self) -> List[Dict[str, str]]:
        return [
            {"role": "system", "content": self.system},
            {"role": "user", "content": self.user},
        ]


def _string_field() -> Dict[str, Any]:
    return {"type": "string"}


def _object(properties: Dict[str, Any]) -> Dict[str, Any]:
    return {
        "type": "object",
        "properties": properties,
        "required": list(properties),
        "additionalProperties": False,
    }


MINUTES_SCHEMA: Dict[str, Any] = _object(
    {
        "title": _string_field(),
        "date": _string_field(),
        "attendees": {
            "type": "array",
            "items": _object({"name": _string_field(), "role": _string_field()}),
        },
        "agenda": {
            "type": "array",
            "items": _object({"topic": _string_field(), "summary": _string_field()}),
        },
        "decisions": {"type": "array", "items": _string_field()},
        "agreements": {
            "type": "array",
            "items": _object(
                {
                    "responsible": _string_field(),
                    "task": _string_field(),
                    "due_date": _string_field(),
                }
            ),
        },
    }
)


def resolve_language(code: str | None) -> str:
    """Return a supported language code, falling back to the default."""

    normalised = (code or "").strip().lower()
    if normalised in LANGUAGE_NAMES:
        return normalised
    LOGGER.warning("Unsupported language %r; using %s", code, DEFAULT_LANGUAGE)
    return DEFAULT_LANGUAGE


def language_name(code: str | None) -> str:
    return LANGUAGE_NAMES[resolve_language(code)]


def format_time(seconds: float) -> str:
    return f"{seconds:.2f}s"


def build_diarized_text(transcript: Transcript) -> str:
    """Render utterances as ``(start - end) LABEL: text`` lines.

    Falls back to the flat transcript, then to :data:`NO_TRANSCRIPT_MARKER`.
    """

    if not transcript.utterances:
        return transcript.full_text or NO_TRANSCRIPT_MARKER
    return "".join(
        f"({format_time(u.start)} - {format_time(u.end)}) {u.label}: {u.text}\n"
        for u in transcript.utterances
    )


def _faithfulness(code: str) -> str:
    return (
        "Be faithful to the content: do not invent attendees, decisions or agreements. "
        f'If a piece of information is missing, write "{NOT_MENTIONED[code]}".'
    )


def build_record_prompt(diarized_text: str, language: str | None = None) -> ChatPrompt:
    code = resolve_language(language)
    name = LANGUAGE_NAMES[code]
    system = (
        "You are an assistant that writes structured meeting minutes as JSON. "
        f"Reply ONLY with valid JSON. Write every value in {name}."
    )
    user = "".join(
        [
            "Below is the diarized (speaker-labelled) transcript of a meeting:",
            SEPARATOR,
            diarized_text,
            SEPARATOR,
            "Produce structured MINUTES (JSON) with the properties: title, "
            "date (ISO-8601 if mentioned), attendees (name, role if it can be inferred), "
            "agenda (topic and short summary), decisions (list) and "
            "agreements (responsible, task, due_date). ",
            _faithfulness(code),
        ]
    )
    return ChatPrompt(system=system, user=user)


def build_summary_prompt(diarized_text: str, language: str | None = None) -> ChatPrompt:
    code = resolve_language(language)
    name = LANGUAGE_NAMES[code]
    system = (
        "You are an assistant that writes executive meeting minutes in Markdown. "
        f"Be concise and clear, and write in {name}."
    )
    user = "".join(
        [
            diarized_text,
            "\n\nWrite executive minutes in Markdown with:",
            "\n- Summary (3-5 bullets),",
            "\n- Key decisions,",
            "\n- List of agreements with owners and dates,",
            "\n- Risks or blockers (if any).\n\n",
            _faithfulness(code),
        ]
    )
    return ChatPrompt(system=system, user=user)


__all__ = [
    "ChatPrompt",
    "DEFAULT_LANGUAGE",
    "LANGUAGE_NAMES",
    "MINUTES_SCHEMA",
    "NOT_MENTIONED",
    "NO_TRANSCRIPT_MARKER",
    "build_diarized_text",
    "build_record_prompt",
    "build_summary_prompt",
    "format_time",
    "language_name",
    "resolve_language",
]
