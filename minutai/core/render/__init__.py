"""Markdown to PDF rendering."""

from .base import DocumentSink, RenderError, RenderTimeoutError
from .markdown import MarkdownRenderer, RenderState, render_document
from .pdf import ReportLabSink, render_pdf

__all__ = [
    "DocumentSink",
    "MarkdownRenderer",
    "RenderError",
    "RenderState",
    "RenderTimeoutError",
    "ReportLabSink",
    "render_document",
    "render_pdf",
]
