"""Minutes generator: structured record plus narrative summary."""

from __future__ import annotations

import json

from ...data.models import RAW_FALLBACK_KEY, StructuredMinutes
from ...logging import get_logger
from ..prompts import MINUTES_SCHEMA, ChatPrompt
from .base import GenerationProvider

LOGGER = get_logger(__name__)


def parse_minutes(text: str) -> StructuredMinutes:
    """Parse model JSON, wrapping anything unparsable as ``{"raw": text}``."""

    try:
        parsed = json.loads(text)
    except (TypeError, ValueError):
        LOGGER.warning("Structured minutes were not valid JSON; keeping raw text")
        return {RAW_FALLBACK_KEY: text}
    if not isinstance(parsed, dict):
        LOGGER.warning("Structured minutes were JSON but not an object; keeping raw text")
        return {RAW_FALLBACK_KEY: text}
    return parsed


class MinutesGenerator:
    def __init__(self, provider: GenerationProvider) -> None:
        self.provider = provider

    @property
    def model(self) -> str:
        return self.provider.model

    async def generate_record(self, prompt: ChatPrompt) -> StructuredMinutes:
        text = await self.provider.generate(prompt, schema=MINUTES_SCHEMA)
        return parse_minutes(text)

    async def generate_summary(self, prompt: ChatPrompt) -> str:
        return await self.provider.generate(prompt) or ""


__all__ = ["MinutesGenerator", "parse_minutes"]
