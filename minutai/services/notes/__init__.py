"""Minutes and summary generation services."""

from .base import GenerationProvider, extract_text
from .dummy import DummyGenerationProvider
from .minutes import MinutesGenerator, parse_minutes

__all__ = [
    "DummyGenerationProvider",
    "GenerationProvider",
    "MinutesGenerator",
    "extract_text",
    "parse_minutes",
]
