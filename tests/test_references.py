"""Unit tests for section numbering and cross-reference ids.

These tests pin down the id rules shared by the anchor stage, the TOC builder
and the aggregate sink, together with the hierarchical numbering used for the
rendered table of contents.

Usage
-----
Run ``pytest tests/test_references.py -v``. No fixtures beyond pytest's
built-ins are required.
"""

from __future__ import annotations

import logging

import pytest

from docbinder.references import (
    AnchorCounter,
    SectionNumberStack,
    document_href,
    document_id,
    is_external,
    resolve_link,
    slugify,
    unique_id,
)


@pytest.mark.parametrize(
    ("name", "expected"),
    [
        ("guide.md", "./guide"),
        ("guide", "./guide"),
        ("guide\\install.md", "./guide/install"),
        ("./guide/install.md", "./guide/install"),
        ("guide.md.jinja", "./guide"),
        ("guide//deep.v1/notes.md", "./guide/deep.v1/notes"),
        (".hidden", "./.hidden"),
    ],
)
def test_document_id(name: str, expected: str) -> None:
    assert document_id(name) == expected


def test_empty_document_id_warns(caplog: pytest.LogCaptureFixture) -> None:
    with caplog.at_level(logging.WARNING):
        assert document_id("") == ""
    assert "Empty document reference" in caplog.text


def test_document_href_strips_extension_and_separators() -> None:
    assert document_href("guide\\install.md") == "guide/install"
    assert document_href("guide") == "guide"
    assert document_href("v1.2/notes") == "v1.2/notes", "dots in directories are kept"


def test_resolve_link_targets() -> None:
    assert resolve_link("#intro", "./guide") == "./guide#intro"
    assert resolve_link("other.md#setup", "./guide") == "./other#setup"
    assert resolve_link("other.md", "./sub/guide") == "./sub/other"
    assert resolve_link("../top.md#x", "./sub/guide") == "./top#x"


def test_is_external() -> None:
    assert is_external("https://example.com")
    assert is_external("mailto:someone@example.com")
    assert not is_external("guide.md#intro")


def test_unique_slugs() -> None:
    used: set[str] = set()
    ids = [unique_id(slugify(title), used) for title in ("Set up", "Set up", "!!!")]
    assert ids == ["set-up", "set-up-2", "section"]


def test_anchor_counter_is_monotonic_until_reset() -> None:
    counter = AnchorCounter()
    assert [counter.next_id() for _ in range(3)] == ["section-0", "section-1", "section-2"]
    assert counter.value == 3
    counter.reset()
    assert counter.next_id() == "section-0"


def test_numbering_never_reuses_a_deeper_branch() -> None:
    numbers = SectionNumberStack()
    numbers.push()
    first = numbers.next()
    numbers.push()
    nested = [numbers.next(), numbers.next()]
    numbers.pop()
    second = numbers.next()
    numbers.push()
    fresh = numbers.next()

    assert first == "1."
    assert nested == ["1.1.", "1.2."]
    assert second == "2."
    assert fresh == "2.1.", "a new branch starts its own counter"


def test_advance_adjusts_depth() -> None:
    numbers = SectionNumberStack()
    assert [numbers.advance(level) for level in (1, 2, 2, 3, 1, 2)] == [
        "1.",
        "1.1.",
        "1.2.",
        "1.2.1.",
        "2.",
        "2.1.",
    ]


def test_numbering_errors() -> None:
    numbers = SectionNumberStack()
    with pytest.raises(IndexError):
        numbers.next()
    with pytest.raises(IndexError):
        numbers.pop()
    with pytest.raises(ValueError, match="positive"):
        numbers.advance(0)
