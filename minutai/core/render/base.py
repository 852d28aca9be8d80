"""Document sink abstractions used by the markdown renderer."""

from __future__ import annotations

import abc


class DocumentSink(abc.ABC):
    """Receives layout commands and lays them out on pages.

    The sink owns the vertical cursor; callers only move it relative to the
    current position.
    """

    @abc.abstractmethod
    def set_font(self, size: float, bold: bool = False, monospace: bool = False) -> None:
        """Switch the font used by subsequent :meth:`write` calls."""

    @abc.abstractmethod
    def write(self, text: str, indent: float = 0.0, align: str = "left") -> None:
        """Write a block of text, wrapping and breaking pages as needed."""

    @abc.abstractmethod
    def move_down(self, lines: float = 1.0) -> None:
        """Advance the cursor by a multiple of the current line height."""

    @abc.abstractmethod
    def rule(self, width: float) -> None:
        """Draw a horizontal line starting at the left margin."""


class RenderError(RuntimeError):
    """Raised when a document cannot be rendered."""


class RenderTimeoutError(RenderError):
    """Raised when rendering exceeds its timeout."""


__all__ = ["DocumentSink", "RenderError", "RenderTimeoutError"]
