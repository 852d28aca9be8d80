"""Dummy generation provider for offline usage."""

from __future__ import annotations

import json
from typing import Any, Dict, Optional

from ..prompts import ChatPrompt
from .base import GenerationProvider


class DummyGenerationProvider(GenerationProvider):
    model = "dummy"

    async def generate(self, prompt: ChatPrompt, schema: Optional[Dict[str, Any]] = None) -> str:
        if schema is not None:
            return json.dumps(
                {
                    "title": "Meeting minutes",
                    "date": "Not mentioned",
                    "attendees": [],
                    "agenda": [],
                    "decisions": [],
                    "agreements": [],
                }
            )
        excerpt = prompt.user.strip().splitlines()[0] if prompt.user.strip() else ""
        return "\n".join(
            [
                "# Executive minutes",
                "",
                "## Summary",
                "",
                f"- **First line:** {excerpt[:200]}",
                "- Replace with a real notes backend.",
            ]
        )


__all__ = ["DummyGenerationProvider"]
