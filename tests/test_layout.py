"""Tests for the FOP layout engine wrapper.

FOP itself is never launched: ``shutil.which`` and ``subprocess.run`` are
monkeypatched so the command line and error handling can be checked.

Usage
-----
Run ``pytest tests/test_layout.py -v``.
"""

from __future__ import annotations

import subprocess
import typing as typ
from pathlib import Path

import pytest

from docbinder.errors import LayoutConversionError
from docbinder.generator import FopLayoutEngine, check_well_formed
from docbinder.generator import layout as layout_module

FO_DOCUMENT = '<fo:root xmlns:fo="http://www.w3.org/1999/XSL/Format"/>\n'


@pytest.fixture
def markup_file(tmp_path: Path) -> Path:
    path = tmp_path / "target.fo"
    path.write_text(FO_DOCUMENT, encoding="utf-8")
    return path


@pytest.fixture
def fake_fop(monkeypatch: pytest.MonkeyPatch) -> list[list[str]]:
    """Resolve ``fop`` to a fixed path and record launched commands."""
    commands: list[list[str]] = []
    monkeypatch.setattr(layout_module.shutil, "which", lambda name: f"/opt/fop/{name}")

    def _run(command: list[str], **_kwargs: typ.Any) -> subprocess.CompletedProcess[str]:
        commands.append(command)
        return subprocess.CompletedProcess(command, 0, "", "")

    monkeypatch.setattr(layout_module.subprocess, "run", _run)
    return commands


def test_malformed_markup_reports_line_and_column(tmp_path: Path) -> None:
    path = tmp_path / "broken.fo"
    path.write_text("<root>\n<block></root>\n", encoding="utf-8")

    with pytest.raises(LayoutConversionError) as excinfo:
        check_well_formed(path)

    assert excinfo.value.line == 2
    assert excinfo.value.column is not None
    assert f"{path}:2:" in str(excinfo.value)


def test_command_line(markup_file: Path, fake_fop: list[list[str]], tmp_path: Path) -> None:
    user_config = tmp_path / "fop.xconf"
    output = tmp_path / "pdf" / "target.pdf"

    FopLayoutEngine(user_config=user_config).convert(markup_file, output)

    assert fake_fop == [
        ["/opt/fop/fop", "-c", str(user_config), "-fo", str(markup_file), "-pdf", str(output)]
    ]
    assert output.parent.is_dir()


def test_missing_executable(markup_file: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setattr(layout_module.shutil, "which", lambda _name: None)
    with pytest.raises(LayoutConversionError, match="not found on PATH"):
        FopLayoutEngine("fop-missing").convert(markup_file, markup_file.with_suffix(".pdf"))


def test_failed_conversion_carries_fop_output(
    markup_file: Path, fake_fop: list[list[str]], monkeypatch: pytest.MonkeyPatch
) -> None:
    def _fail(command: list[str], **_kwargs: typ.Any) -> subprocess.CompletedProcess[str]:
        return subprocess.CompletedProcess(command, 1, "", "SEVERE: invalid property\n")

    monkeypatch.setattr(layout_module.subprocess, "run", _fail)

    with pytest.raises(LayoutConversionError, match="SEVERE: invalid property") as excinfo:
        FopLayoutEngine().convert(markup_file, markup_file.with_suffix(".pdf"))
    assert excinfo.value.path == markup_file


def test_silent_failure_reports_exit_status(
    markup_file: Path, fake_fop: list[list[str]], monkeypatch: pytest.MonkeyPatch
) -> None:
    monkeypatch.setattr(
        layout_module.subprocess,
        "run",
        lambda command, **_kwargs: subprocess.CompletedProcess(command, 3, "", ""),
    )
    with pytest.raises(LayoutConversionError, match="status 3"):
        FopLayoutEngine().convert(markup_file, markup_file.with_suffix(".pdf"))


def test_timeout_is_a_conversion_error(
    markup_file: Path, fake_fop: list[list[str]], monkeypatch: pytest.MonkeyPatch
) -> None:
    def _timeout(command: list[str], **kwargs: typ.Any) -> typ.NoReturn:
        raise subprocess.TimeoutExpired(command, kwargs["timeout"])

    monkeypatch.setattr(layout_module.subprocess, "run", _timeout)
    with pytest.raises(LayoutConversionError):
        FopLayoutEngine(timeout=1).convert(markup_file, markup_file.with_suffix(".pdf"))
