"""Shared fixtures for the docbinder test suite.

The fixtures here avoid any dependency on Apache FOP: renders use a recording
layout engine that checks the markup is well-formed and writes a placeholder
PDF, and structure events can be captured with a recording sink.
"""

from __future__ import annotations

import typing as typ
from pathlib import Path

import pytest

from docbinder.generator import check_well_formed
from docbinder.sink import Sink

if typ.TYPE_CHECKING:
    import collections.abc as cabc

RECORDED_EVENTS = (
    "begin_document",
    "end_document",
    "section",
    "section_",
    "section_title",
    "section_title_",
    "anchor",
    "anchor_",
    "link",
    "link_",
    "paragraph",
    "paragraph_",
    "verbatim",
    "verbatim_",
    "bullet_list",
    "bullet_list_",
    "numbered_list",
    "numbered_list_",
    "list_item",
    "list_item_",
    "table",
    "table_",
    "table_row",
    "table_row_",
    "table_cell",
    "table_cell_",
    "bold",
    "bold_",
    "italic",
    "italic_",
    "monospaced",
    "monospaced_",
    "line_break",
    "horizontal_rule",
    "text",
    "raw_text",
)


class RecordingSink(Sink):
    """Sink recording every event as a tuple of its name and arguments."""

    def __init__(self) -> None:
        self.events: list[tuple[typ.Any, ...]] = []


def _recorder(name: str) -> cabc.Callable[..., None]:
    def _record(self: RecordingSink, *args: typ.Any, **kwargs: typ.Any) -> None:
        self.events.append((name, *args, *kwargs.values()))

    return _record


for _name in RECORDED_EVENTS:
    setattr(RecordingSink, _name, _recorder(_name))


class RecordingLayoutEngine:
    """Layout engine that validates the markup and writes a stub PDF."""

    def __init__(self) -> None:
        self.conversions: list[tuple[Path, Path]] = []

    def convert(self, markup_file: Path, output_file: Path) -> None:
        check_well_formed(markup_file)
        output_file.write_bytes(b"%PDF-1.4\n")
        self.conversions.append((markup_file, output_file))


@pytest.fixture
def recorder() -> RecordingSink:
    """Return a fresh recording sink."""
    return RecordingSink()


@pytest.fixture
def layout_engine() -> RecordingLayoutEngine:
    """Return a recording layout engine."""
    return RecordingLayoutEngine()


@pytest.fixture
def write_docs(tmp_path: Path) -> cabc.Callable[[dict[str, str]], Path]:
    """Return a helper writing Markdown documents under ``<base>/markdown``.

    The helper returns the base directory the default module is rooted in.
    """
    base_dir = tmp_path / "site"

    def _write(documents: dict[str, str]) -> Path:
        for name, content in documents.items():
            path = base_dir / "markdown" / name
            path.parent.mkdir(parents=True, exist_ok=True)
            path.write_text(content, encoding="utf-8")
        return base_dir

    return _write
