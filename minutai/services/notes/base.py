"""Generation provider abstractions and response normalisation."""

from __future__ import annotations

import abc
from typing import Any, Dict, Optional

from ...utils.payloads import as_data, field_of, first_of
from ..prompts import ChatPrompt


def _blocks_text(blocks: Any) -> str:
    if not isinstance(blocks, (list, tuple)):
        return ""
    for block in blocks:
        text = field_of(block, "text")
        if isinstance(text, str) and text:
            return text
        nested = _blocks_text(field_of(block, "content"))
        if nested:
            return nested
    return ""


def extract_text(response: Any) -> str:
    """Return the first usable text payload from a generation response.

    Understands a direct ``output_text`` field, chat-completion ``choices`` and
    ``content``/``output`` block lists. Anything else yields an empty string.
    """

    if isinstance(response, str):
        return response
    direct = field_of(response, "output_text")
    if isinstance(direct, str) and direct:
        return direct

    data = as_data(response)
    message = field_of(first_of(field_of(data, "choices")), "message")
    content = field_of(message, "content")
    if isinstance(content, str):
        return content
    return (
        _blocks_text(content)
        or _blocks_text(field_of(data, "content"))
        or _blocks_text(field_of(data, "output"))
    )


class GenerationProvider(abc.ABC):
    """Language model backend used for minutes and summary generation."""

    model = "unknown"

    @abc.abstractmethod
    async def generate(self, prompt: ChatPrompt, schema: Optional[Dict[str, Any]] = None) -> str:
        """Return generated text; constrained to ``schema`` JSON when one is given."""
        raise NotImplementedError


__all__ = ["GenerationProvider", "extract_text"]
