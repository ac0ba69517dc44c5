"""Tests for loading ``binder.yaml`` descriptors.

Usage
-----
Run ``pytest tests/test_config.py -v``.
"""

from __future__ import annotations

from pathlib import Path
from textwrap import dedent

import pytest

from docbinder.config import BinderConfigError, load_binder_config
from docbinder.modules import DocumentModule


def _write(tmp_path: Path, content: str) -> Path:
    path = tmp_path / "binder.yaml"
    path.write_text(dedent(content), encoding="utf-8")
    return path


def test_full_descriptor(tmp_path: Path) -> None:
    path = _write(
        tmp_path,
        """\
        title: Manual
        subtitle: Version 2
        author: Docs Team
        date: 2024-05-01
        output_name: manual
        base_dir: docs
        output_dir: build/pdf
        generate_toc: end
        pygments_style: monokai
        modules:
          - name: markdown
          - name: notes
            source_directory: extra
            extension: .txt
        toc:
          name: Contents
          items:
            - name: Guide
              ref: guide.md
              items:
                - name: Advanced
                  ref: advanced.md
            - name: Part two
        """,
    )

    config = load_binder_config(path)

    assert config.base_dir == tmp_path / "docs"
    assert config.output_dir == tmp_path / "build/pdf"
    assert config.generate_toc == "end"
    assert config.options() == {"generateTOC": "end"}
    assert config.pygments_style == "monokai"
    model = config.model
    assert (model.title, model.subtitle, model.author, model.output_name) == (
        "Manual",
        "Version 2",
        "Docs Team",
        "manual",
    )
    assert model.date == "2024-05-01"
    assert config.modules == [
        DocumentModule("markdown", "markdown", "markdown"),
        DocumentModule("notes", "extra", "txt"),
    ]
    assert model.toc is not None
    guide, part_two = model.toc.items
    assert (guide.name, guide.ref, guide.items[0].ref) == ("Guide", "guide.md", "advanced.md")
    assert (part_two.ref, part_two.items) == (None, [])


def test_defaults(tmp_path: Path) -> None:
    config = load_binder_config(_write(tmp_path, "title: Manual\n"))

    assert config.base_dir == tmp_path
    assert config.output_dir == tmp_path / "output"
    assert config.generate_toc == "start"
    assert config.model.output_name == "target"
    assert config.model.toc is None
    assert config.modules == [DocumentModule("markdown", "markdown", "md")]


def test_toc_without_items_means_no_toc(tmp_path: Path) -> None:
    config = load_binder_config(_write(tmp_path, "toc:\n  name: Contents\n"))
    assert config.model.toc is None


def test_empty_items_list_is_a_declared_toc(tmp_path: Path) -> None:
    config = load_binder_config(_write(tmp_path, "toc:\n  items: []\n"))
    assert config.model.toc is not None
    assert config.model.toc.name == "Table of Contents"
    assert config.model.toc.items == []


@pytest.mark.parametrize(
    ("content", "message"),
    [
        ("toc:\n  items:\n    - ref: a.md\n", r"toc\.items\[0\]' is missing 'name'"),
        ("toc:\n  items: guide.md\n", "must be a list"),
        ("toc:\n  items:\n    - name: A\n      items: [x]\n", r"toc\.items\[0\]\.items\[0\]"),
        ("toc: [a]\n", "'toc' must be a mapping"),
        ("modules: []\n", "non-empty list"),
        ("modules:\n  - source_directory: docs\n", "missing 'name'"),
    ],
)
def test_invalid_descriptors(tmp_path: Path, content: str, message: str) -> None:
    with pytest.raises(BinderConfigError, match=message):
        load_binder_config(_write(tmp_path, content))


def test_missing_file(tmp_path: Path) -> None:
    with pytest.raises(FileNotFoundError):
        load_binder_config(tmp_path / "binder.yaml")


def test_top_level_must_be_mapping(tmp_path: Path) -> None:
    with pytest.raises(TypeError, match="mapping"):
        load_binder_config(_write(tmp_path, "- a\n- b\n"))
