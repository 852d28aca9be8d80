from __future__ import annotations

import io
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import List, Tuple

from minutai.core.render.base import DocumentSink
from minutai.core.render.markdown import BULLET, MarkdownRenderer, RenderState, render_document
from minutai.core.render.pdf import ReportLabSink, render_pdf


@dataclass
class Written:
    text: str
    size: float
    bold: bool
    monospace: bool
    indent: float
    align: str


class RecordingSink(DocumentSink):
    def __init__(self) -> None:
        self.font: Tuple[float, bool, bool] = (11.0, False, False)
        self.writes: List[Written] = []
        self.commands: List[tuple] = []

    def set_font(self, size: float, bold: bool = False, monospace: bool = False) -> None:
        self.font = (size, bold, monospace)
        self.commands.append(("font", size, bold, monospace))

    def write(self, text: str, indent: float = 0.0, align: str = "left") -> None:
        size, bold, monospace = self.font
        self.writes.append(Written(text, size, bold, monospace, indent, align))
        self.commands.append(("write", text))

    def move_down(self, lines: float = 1.0) -> None:
        self.commands.append(("move", lines))

    def rule(self, width: float) -> None:
        self.commands.append(("rule", width))


def _render(markdown: str) -> Tuple[RecordingSink, RenderState]:
    sink = RecordingSink()
    state = MarkdownRenderer(sink).render(markdown)
    return sink, state


def test_heading_list_and_bold_run() -> None:
    markdown = "# Minutes\n\n- first\n- second\n- third\n\nThe **decision** was made.\n"

    sink, state = _render(markdown)

    heading = sink.writes[0]
    assert (heading.text, heading.size, heading.bold) == ("Minutes", 18.0, True)

    bullets = [w for w in sink.writes if w.text.startswith(f"{BULLET} ")]
    assert [b.text for b in bullets] == [f"{BULLET} first", f"{BULLET} second", f"{BULLET} third"]
    assert all(b.indent == 15.0 and b.size == 11.0 and not b.bold for b in bullets)

    paragraph = sink.writes[-1]
    assert paragraph.text == "The decision was made."
    assert paragraph.bold
    assert state == RenderState()


def test_heading_sizes_by_level() -> None:
    markdown = "\n\n".join(f"{'#' * level} Level {level}" for level in range(1, 7))

    sink, _ = _render(markdown)

    assert [(w.size, w.bold) for w in sink.writes] == [
        (18.0, True),
        (16.0, True),
        (14.0, True),
        (13.0, True),
        (12.0, True),
        (11.0, True),
    ]
    assert sink.font == (11.0, False, False)


def test_bold_run_inside_list_item_bolds_whole_item() -> None:
    sink, _ = _render("- **Owner:** Ana\n- plain\n")

    assert sink.writes[0].text == f"{BULLET} Owner: Ana"
    assert sink.writes[0].bold
    assert not sink.writes[1].bold


def test_ordered_lists_use_bullet_glyph() -> None:
    sink, _ = _render("1. one\n2. two\n")

    assert [w.text for w in sink.writes] == [f"{BULLET} one", f"{BULLET} two"]


def test_list_items_are_not_double_spaced() -> None:
    sink, _ = _render("- a\n- b\n")

    moves = [c for c in sink.commands if c[0] == "move"]
    assert moves == [("move", 1.0)]


def test_outer_items_after_nested_list_keep_their_bullet() -> None:
    sink, state = _render("- a\n  - b\n- c\n")

    assert [(w.text, w.indent) for w in sink.writes] == [
        (f"{BULLET} a", 15.0),
        (f"{BULLET} b", 30.0),
        (f"{BULLET} c", 15.0),
    ]
    assert [c for c in sink.commands if c[0] == "move"] == [("move", 1.0)]
    assert state.list_depth == 0


def test_paragraph_gap_and_softbreaks() -> None:
    sink, _ = _render("line one\nline two\n\nnext")

    assert [w.text for w in sink.writes] == ["line one line two", "next"]
    assert sink.commands.count(("move", 0.5)) == 2


def test_horizontal_rule_has_gaps_around_line() -> None:
    sink, _ = _render("above\n\n---\n\nbelow")

    index = next(i for i, c in enumerate(sink.commands) if c[0] == "rule")
    assert sink.commands[index - 1] == ("move", 0.5)
    assert sink.commands[index + 1] == ("move", 0.5)


def test_fenced_code_is_monospace_and_indented() -> None:
    sink, _ = _render("```\nx = 1\ny = 2\n```\n\nafter")

    code = sink.writes[:2]
    assert [w.text for w in code] == ["x = 1", "y = 2"]
    assert all(w.monospace and w.size == 9.0 and w.indent == 20.0 for w in code)
    after = sink.writes[2]
    assert (after.text, after.size, after.monospace) == ("after", 11.0, False)


def test_tables_flatten_into_sequential_text() -> None:
    markdown = "| Owner | Task |\n|---|---|\n| Ana | Budget |\n"

    sink, state = _render(markdown)

    assert [w.text for w in sink.writes] == ["Owner", "Task", "Ana", "Budget"]
    assert not any(c[0] == "move" for c in sink.commands)
    assert not state.in_table


def test_render_document_writes_header_first() -> None:
    sink = RecordingSink()
    generated = datetime(2026, 1, 2, 3, 4, 5, tzinfo=timezone.utc)

    render_document(sink, "body", "Executive minutes", generated)

    title, stamp, body = sink.writes
    assert (title.text, title.size, title.bold, title.align) == ("Executive minutes", 18.0, True, "center")
    assert stamp.text == "Generated: 2026-01-02T03:04:05+00:00"
    assert stamp.size == 10.0
    assert body.text == "body"


def test_render_pdf_produces_pdf_bytes() -> None:
    data = render_pdf(
        "# Title\n\n- **bold** item\n\n---\n\n```\ncode\n```\n",
        "Executive minutes",
        datetime.now(timezone.utc),
    )

    assert data.startswith(b"%PDF")


def test_reportlab_sink_breaks_pages() -> None:
    buffer = io.BytesIO()
    sink = ReportLabSink(buffer)
    MarkdownRenderer(sink).render("\n\n".join(f"Paragraph {i}" for i in range(200)))
    sink.finish()

    assert sink.pages > 1
    assert buffer.getvalue().startswith(b"%PDF")
