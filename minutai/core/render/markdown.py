"""Walk a markdown token stream and issue layout commands to a sink.

Only the subset used by meeting summaries is laid out: headings, bold runs,
bullet and ordered lists, paragraphs, horizontal rules and code blocks. Table
tokens are consumed for state tracking and their cells flow as plain text.
Nested list items are indented one step per level; the list gap is added once
the outermost list closes.

A run of inline text is written as one block. If any part of the run is bold
the whole run is written bold.
"""

from __future__ import annotations

from dataclasses import dataclass, replace
from datetime import datetime
from functools import reduce
from typing import Callable, Dict, Iterable, List, Optional, Tuple

from markdown_it import MarkdownIt
from markdown_it.token import Token

from .base import DocumentSink

BODY_SIZE = 11.0
CODE_SIZE = 9.0
TITLE_SIZE = 18.0
TIMESTAMP_SIZE = 10.0
HEADING_SIZES: Dict[int, float] = {1: 18.0, 2: 16.0, 3: 14.0, 4: 13.0, 5: 12.0, 6: 11.0}

BULLET = "•"
LIST_INDENT = 15.0
CODE_INDENT = 20.0
RULE_WIDTH = 480.0

HEADING_GAP = 0.5
PARAGRAPH_GAP = 0.5
LIST_GAP = 1.0
BLOCK_GAP = 0.5


@dataclass(frozen=True)
class RenderState:
    list_depth: int = 0
    in_table: bool = False
    size: float = BODY_SIZE
    bold: bool = False


Handler = Callable[[RenderState, Token], RenderState]


def _inline_text(children: Optional[Iterable[Token]]) -> Tuple[str, bool]:
    parts: List[str] = []
    bold = False
    any_bold = False
    for child in children or []:
        if child.type in {"text", "code_inline", "html_inline"}:
            parts.append(child.content)
            any_bold = any_bold or (bold and bool(child.content))
        elif child.type in {"softbreak", "hardbreak"}:
            parts.append(" ")
        elif child.type == "strong_open":
            bold = True
        elif child.type == "strong_close":
            bold = False
    return "".join(parts), any_bold


def create_parser() -> MarkdownIt:
    return MarkdownIt("commonmark").enable("table")


class MarkdownRenderer:
    def __init__(self, sink: DocumentSink, parser: Optional[MarkdownIt] = None) -> None:
        self.sink = sink
        self.parser = parser or create_parser()
        self._handlers: Dict[str, Handler] = {
            "heading_open": self._heading_open,
            "heading_close": self._heading_close,
            "bullet_list_open": self._list_open,
            "ordered_list_open": self._list_open,
            "bullet_list_close": self._list_close,
            "ordered_list_close": self._list_close,
            "paragraph_close": self._paragraph_close,
            "inline": self._inline,
            "hr": self._rule,
            "fence": self._code,
            "code_block": self._code,
            "table_open": self._table_open,
            "table_close": self._table_close,
        }

    def render(self, markdown: str) -> RenderState:
        tokens = self.parser.parse(markdown or "")
        initial = RenderState()
        self.sink.set_font(initial.size, bold=initial.bold)
        return reduce(self._step, tokens, initial)

    def _step(self, state: RenderState, token: Token) -> RenderState:
        handler = self._handlers.get(token.type)
        if handler is None:
            return state
        return handler(state, token)

    def _heading_open(self, state: RenderState, token: Token) -> RenderState:
        level = int(token.tag[1:]) if token.tag[1:].isdigit() else 6
        size = HEADING_SIZES.get(level, BODY_SIZE)
        self.sink.set_font(size, bold=True)
        return replace(state, size=size, bold=True)

    def _heading_close(self, state: RenderState, token: Token) -> RenderState:
        self.sink.move_down(HEADING_GAP)
        self.sink.set_font(BODY_SIZE)
        return replace(state, size=BODY_SIZE, bold=False)

    def _list_open(self, state: RenderState, token: Token) -> RenderState:
        return replace(state, list_depth=state.list_depth + 1)

    def _list_close(self, state: RenderState, token: Token) -> RenderState:
        depth = max(state.list_depth - 1, 0)
        if depth == 0:
            self.sink.move_down(LIST_GAP)
        return replace(state, list_depth=depth)

    def _paragraph_close(self, state: RenderState, token: Token) -> RenderState:
        if not state.list_depth and not state.in_table:
            self.sink.move_down(PARAGRAPH_GAP)
        return state

    def _inline(self, state: RenderState, token: Token) -> RenderState:
        text, run_bold = _inline_text(token.children)
        if not text.strip():
            return state
        switched = run_bold and not state.bold
        if switched:
            self.sink.set_font(state.size, bold=True)
        if state.list_depth:
            self.sink.write(f"{BULLET} {text}", indent=LIST_INDENT * state.list_depth)
        else:
            self.sink.write(text)
        if switched:
            self.sink.set_font(state.size, bold=state.bold)
        return state

    def _rule(self, state: RenderState, token: Token) -> RenderState:
        self.sink.move_down(BLOCK_GAP)
        self.sink.rule(RULE_WIDTH)
        self.sink.move_down(BLOCK_GAP)
        return state

    def _code(self, state: RenderState, token: Token) -> RenderState:
        self.sink.set_font(CODE_SIZE, monospace=True)
        for line in token.content.rstrip("\n").split("\n"):
            self.sink.write(line, indent=CODE_INDENT)
        self.sink.move_down(BLOCK_GAP)
        self.sink.set_font(state.size, bold=state.bold)
        return state

    def _table_open(self, state: RenderState, token: Token) -> RenderState:
        return replace(state, in_table=True)

    def _table_close(self, state: RenderState, token: Token) -> RenderState:
        return replace(state, in_table=False)


def render_document(
    sink: DocumentSink,
    markdown: str,
    title: str,
    generated_at: datetime,
) -> RenderState:
    """Write the fixed header followed by the rendered markdown body."""

    sink.set_font(TITLE_SIZE, bold=True)
    sink.write(title, align="center")
    sink.move_down()
    sink.set_font(TIMESTAMP_SIZE)
    sink.write(f"Generated: {generated_at.isoformat()}")
    sink.move_down()
    return MarkdownRenderer(sink).render(markdown)


__all__ = [
    "BODY_SIZE",
    "BULLET",
    "HEADING_SIZES",
    "MarkdownRenderer",
    "RenderState",
    "create_parser",
    "render_document",
]
