"""OpenAI-powered minutes and summary generation."""

from __future__ import annotations

from typing import Any, Dict, Optional

from ...config import Settings
from ...logging import get_logger
from ..prompts import ChatPrompt
from .base import GenerationProvider, extract_text

LOGGER = get_logger(__name__)

SCHEMA_NAME = "meeting_minutes"


class OpenAIGenerationProvider(GenerationProvider):
    def __init__(self, settings: Settings, client: Any = None) -> None:
        self.model = settings.openai_model
        self.api_style = settings.openai_api_style
        if client is not None:
            self.client = client
            return
        try:
            from openai import AsyncOpenAI, OpenAIError  # type: ignore
        except ImportError as exc:  # pragma: no cover - runtime dependency guard
            raise RuntimeError("openai package is required for OpenAIGenerationProvider") from exc
        client_kwargs: Dict[str, Any] = {"timeout": settings.generation_timeout_seconds}
        if settings.openai_api_key:
            client_kwargs["api_key"] = settings.openai_api_key

        try:
            self.client = AsyncOpenAI(**client_kwargs)
        except OpenAIError as exc:
            message = str(exc)
            if "api_key" in message.lower():
                raise RuntimeError(
                    "OpenAI API key not configured. Set the OPENAI_API_KEY environment variable "
                    "or MINUTAI_OPENAI_API_KEY."
                ) from exc
            raise RuntimeError(f"Failed to initialise OpenAI client: {message}") from exc

    async def _responses(self, prompt: ChatPrompt, schema: Optional[Dict[str, Any]]) -> Any:
        kwargs: Dict[str, Any] = {"model": self.model, "input": prompt.messages()}
        if schema is not None:
            kwargs["text"] = {
                "format": {
                    "type": "json_schema",
                    "name": SCHEMA_NAME,
                    "schema": schema,
                    "strict": True,
                }
            }
        return await self.client.responses.create(**kwargs)

    async def _chat(self, prompt: ChatPrompt, schema: Optional[Dict[str, Any]]) -> Any:
        kwargs: Dict[str, Any] = {"model": self.model, "messages": prompt.messages()}
        if schema is not None:
            kwargs["response_format"] = {
                "type": "json_schema",
                "json_schema": {"name": SCHEMA_NAME, "schema": schema, "strict": True},
            }
        return await self.client.chat.completions.create(**kwargs)

    async def generate(self, prompt: ChatPrompt, schema: Optional[Dict[str, Any]] = None) -> str:
        LOGGER.info(
            "Requesting OpenAI %s generation (model=%s, api=%s)",
            "structured" if schema is not None else "free-form",
            self.model,
            self.api_style,
        )
        if self.api_style == "chat":
            response = await self._chat(prompt, schema)
        else:
            response = await self._responses(prompt, schema)
        return extract_text(response)


__all__ = ["OpenAIGenerationProvider"]
