"""ReportLab canvas sink and PDF entry point."""

from __future__ import annotations

import io
from datetime import datetime
from typing import BinaryIO, Dict, Tuple

from reportlab.lib.pagesizes import A4
from reportlab.lib.utils import simpleSplit
from reportlab.pdfgen import canvas

from .base import DocumentSink
from .markdown import BODY_SIZE, render_document

LEADING = 1.2

_FONTS: Dict[Tuple[bool, bool], str] = {
    (False, False): "Helvetica",
    (True, False): "Helvetica-Bold",
    (False, True): "Courier",
    (True, True): "Courier-Bold",
}


class ReportLabSink(DocumentSink):
    """Lays text out top-down on a canvas, starting new pages at the bottom margin."""

    def __init__(self, output: BinaryIO, margin: float = 50.0, pagesize: Tuple[float, float] = A4) -> None:
        self.width, self.height = pagesize
        self.margin = margin
        self._canvas = canvas.Canvas(output, pagesize=pagesize)
        self._font = _FONTS[(False, False)]
        self._size = BODY_SIZE
        self._canvas.setFont(self._font, self._size)
        self._y = self.height - margin
        self.pages = 1

    @property
    def line_height(self) -> float:
        return self._size * LEADING

    @property
    def content_width(self) -> float:
        return self.width - 2 * self.margin

    def _new_page(self) -> None:
        self._canvas.showPage()
        self._canvas.setFont(self._font, self._size)
        self._y = self.height - self.margin
        self.pages += 1

    def _ensure_room(self, height: float) -> None:
        if self._y - height < self.margin:
            self._new_page()

    def set_font(self, size: float, bold: bool = False, monospace: bool = False) -> None:
        self._font = _FONTS[(bold, monospace)]
        self._size = size
        self._canvas.setFont(self._font, self._size)

    def write(self, text: str, indent: float = 0.0, align: str = "left") -> None:
        available = max(self.content_width - indent, self._size)
        lines = simpleSplit(text, self._font, self._size, available) or [""]
        for line in lines:
            self._ensure_room(self.line_height)
            self._y -= self.line_height
            if align == "center":
                self._canvas.drawCentredString(self.width / 2, self._y, line)
            else:
                self._canvas.drawString(self.margin + indent, self._y, line)

    def move_down(self, lines: float = 1.0) -> None:
        self._y -= self.line_height * lines
        if self._y < self.margin:
            self._new_page()

    def rule(self, width: float) -> None:
        self._ensure_room(self.line_height)
        self._y -= self.line_height / 2
        self._canvas.line(self.margin, self._y, self.margin + min(width, self.content_width), self._y)

    def finish(self) -> None:
        self._canvas.save()


def render_pdf(markdown: str, title: str, generated_at: datetime, margin: float = 50.0) -> bytes:
    """Render ``markdown`` below a title header and return the PDF bytes."""

    buffer = io.BytesIO()
    sink = ReportLabSink(buffer, margin=margin)
    render_document(sink, markdown, title, generated_at)
    sink.finish()
    return buffer.getvalue()


__all__ = ["ReportLabSink", "render_pdf"]
