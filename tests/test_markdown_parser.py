"""Tests for turning Markdown into structure events.

The parser is exercised against a recording sink so the assertions read as
the event stream a renderer would receive.

Usage
-----
Run ``pytest tests/test_markdown_parser.py -v``.
"""

from __future__ import annotations

from textwrap import dedent

import pytest

from docbinder.errors import DocumentParseError
from docbinder.markdown_parser import MarkdownParser, normalize_fenced_blocks


def _events(recorder, *names: str) -> list[tuple]:
    return [event for event in recorder.events if event[0] in names]


def test_headings_open_and_close_nested_sections(recorder) -> None:
    MarkdownParser().parse_text("# A\n\n## B\n\n# C\n", recorder)

    assert _events(recorder, "section", "section_", "text") == [
        ("section", 1),
        ("text", "A"),
        ("section", 2),
        ("text", "B"),
        ("section_", 2),
        ("section_", 1),
        ("section", 1),
        ("text", "C"),
        ("section_", 1),
    ]


def test_heading_title_is_one_text_event_with_explicit_anchor(recorder) -> None:
    MarkdownParser().parse_text("## Set *up* `tool` {#setup}\n", recorder)

    assert recorder.events == [
        ("section", 2),
        ("section_title", 2),
        ("anchor", "setup"),
        ("anchor_",),
        ("text", "Set up tool"),
        ("section_title_", 2),
        ("section_", 2),
    ]


def test_inline_markup(recorder) -> None:
    MarkdownParser().parse_text("Hello *world*, **bold** and `a < b`.\n", recorder)

    assert recorder.events == [
        ("paragraph",),
        ("text", "Hello "),
        ("italic",),
        ("text", "world"),
        ("italic_",),
        ("text", ", "),
        ("bold",),
        ("text", "bold"),
        ("bold_",),
        ("text", " and "),
        ("monospaced",),
        ("text", "a < b"),
        ("monospaced_",),
        ("text", "."),
        ("paragraph_",),
    ]


def test_backslash_escapes_are_restored(recorder) -> None:
    MarkdownParser().parse_text("1\\*2\n", recorder)
    assert ("text", "1*2") in recorder.events


def test_links_and_named_anchors(recorder) -> None:
    MarkdownParser().parse_text("See [usage](usage.md#run) or <a name=\"x\"></a>.\n", recorder)
    assert _events(recorder, "link", "link_") == [("link", "usage.md#run"), ("link_",)]


def test_fenced_code_carries_language_directive(recorder) -> None:
    source = dedent(
        """\
        ```python
        if a < b:
            print("&")
        ```
        """
    )
    MarkdownParser().parse_text(source, recorder)

    assert recorder.events == [
        ("verbatim",),
        ("text", '@lang python\nif a < b:\n    print("&")\n'),
        ("verbatim_",),
    ]


def test_fence_label_extras_and_indent_are_dropped(recorder) -> None:
    MarkdownParser().parse_text("  ```rust,no_run\n  fn main() {}\n  ```\n", recorder)
    verbatim = _events(recorder, "text")
    assert verbatim[0][1].startswith("@lang rust\n")


def test_indented_code_has_no_directive(recorder) -> None:
    MarkdownParser().parse_text("Intro\n\n    plain = True\n", recorder)
    assert ("text", "plain = True\n") in recorder.events


def test_lists_and_tables(recorder) -> None:
    source = dedent(
        """\
        - one
        - two

        1. first

        | Name | Value |
        |------|-------|
        | a    | 1     |
        """
    )
    MarkdownParser().parse_text(source, recorder)

    structure = [
        event
        for event in recorder.events
        if event[0] not in ("text", "table_cell_", "table_row_", "list_item_")
    ]
    assert structure == [
        ("bullet_list",),
        ("list_item",),
        ("list_item",),
        ("bullet_list_",),
        ("numbered_list",),
        ("list_item",),
        ("numbered_list_",),
        ("table",),
        ("table_row",),
        ("table_cell", True),
        ("table_cell", True),
        ("table_row",),
        ("table_cell", False),
        ("table_cell", False),
        ("table_",),
    ]
    assert [text for _, text in _events(recorder, "text")] == [
        "one",
        "two",
        "first",
        "Name",
        "Value",
        "a",
        "1",
    ]


def test_heading_inside_list_item_stays_in_the_item(recorder) -> None:
    MarkdownParser().parse_text("# Top\n\n- # Inner heading\n- plain\n\n## After\n", recorder)

    assert _events(recorder, "section", "section_", "list_item", "list_item_", "text") == [
        ("section", 1),
        ("text", "Top"),
        ("list_item",),
        ("section", 1),
        ("text", "Inner heading"),
        ("section_", 1),
        ("list_item_",),
        ("list_item",),
        ("text", "plain"),
        ("list_item_",),
        ("section", 2),
        ("text", "After"),
        ("section_", 2),
        ("section_", 1),
    ]

def test_horizontal_rule(recorder) -> None:
    MarkdownParser().parse_text("before\n\n---\n\nafter\n", recorder)
    assert ("horizontal_rule",) in recorder.events


def test_normalize_fenced_blocks_leaves_plain_fences() -> None:
    text = "```\ncode\n```"
    assert normalize_fenced_blocks(text) == text


def test_parse_reads_files_and_renders_templates(tmp_path, recorder) -> None:
    document = tmp_path / "guide.md.jinja"
    document.write_text("# {{ product }} guide\n", encoding="utf-8")

    MarkdownParser().parse(document, recorder, {"product": "Binder"})

    assert ("text", "Binder guide") in recorder.events


def test_parse_reports_unreadable_documents(tmp_path, recorder) -> None:
    with pytest.raises(DocumentParseError, match="missing.md"):
        MarkdownParser().parse(tmp_path / "missing.md", recorder)


def test_parse_reports_undefined_template_variables(tmp_path, recorder) -> None:
    document = tmp_path / "guide.md.jinja"
    document.write_text("{{ undefined_name }}\n", encoding="utf-8")

    with pytest.raises(DocumentParseError, match="undefined_name"):
        MarkdownParser().parse(document, recorder)
    assert recorder.events == []
