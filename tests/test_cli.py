"""Tests for the ``binder render`` command.

The command function is invoked directly with ``pdf=False`` so no layout
engine is needed.
"""

from __future__ import annotations

from pathlib import Path

import pytest

from docbinder import cli


def _write_project(tmp_path: Path) -> Path:
    docs = tmp_path / "markdown"
    (docs / "guide").mkdir(parents=True)
    (docs / "guide" / "install.md").write_text("# Install\n\nSteps.\n", encoding="utf-8")
    (docs / "intro.md").write_text("# Welcome\n", encoding="utf-8")
    config = tmp_path / "binder.yaml"
    config.write_text(
        "title: Manual\n"
        "output_name: manual\n"
        "toc:\n"
        "  name: Contents\n"
        "  items:\n"
        "    - name: Intro\n"
        "      ref: intro.md\n"
        "    - name: Install\n"
        "      ref: guide/install.md\n",
        encoding="utf-8",
    )
    return config


def test_render_writes_aggregate_markup(
    tmp_path: Path, capsys: pytest.CaptureFixture[str]
) -> None:
    config = _write_project(tmp_path)

    cli.render(config=config, pdf=False)

    markup = tmp_path / "output" / "manual.fo"
    assert markup.exists()
    assert "wrote" in capsys.readouterr().out
    content = markup.read_text(encoding="utf-8")
    assert 'id="./guide/install"' in content
    assert content.index('id="./intro"') < content.index('id="./guide/install"')


def test_render_overrides(tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
    config = _write_project(tmp_path)
    target = tmp_path / "elsewhere"

    cli.render(config=config, output_dir=target, generate_toc="end", pdf=False)

    content = (target / "manual.fo").read_text(encoding="utf-8")
    assert content.index('id="./toc"') > content.index('id="./guide/install"')
    assert str(target / "manual.fo").endswith(capsys.readouterr().out.split("wrote ")[-1].strip())


def test_render_individual(tmp_path: Path) -> None:
    config = _write_project(tmp_path)

    cli.render(config=config, individual=True, pdf=False)

    assert (tmp_path / "output" / "guide" / "install.fo").exists()
    assert (tmp_path / "output" / "intro.fo").exists()


def test_missing_config(tmp_path: Path) -> None:
    with pytest.raises(FileNotFoundError):
        cli.render(config=tmp_path / "absent.yaml", pdf=False)
