"""Behaviour tests for TOC numbering and body cross-references.

The scenarios in ``features/toc_numbering.feature`` build a small Markdown
tree, render it through :class:`~docbinder.generator.AggregateRenderer`, and
inspect the produced XSL-FO with BeautifulSoup.

Usage:
    pytest tests/bdd/test_toc_numbering.py -v
"""

from __future__ import annotations

from pathlib import Path

import pytest
from bs4 import BeautifulSoup
from pytest_bdd import given, parsers, scenarios, then, when

from docbinder.generator import AggregateRenderer
from docbinder.models import DocumentModel, TocDescriptor, TocItem
from docbinder.modules import locate_documents

FEATURE_FILE = Path(__file__).resolve().parents[2] / "features" / "toc_numbering.feature"
scenarios(FEATURE_FILE)


@pytest.fixture
def scenario_state() -> dict[str, object]:
    """Return a mutable dict used to share scenario state across BDD steps."""
    return {}


def _soup(scenario_state: dict[str, object]) -> BeautifulSoup:
    markup = _path(scenario_state["markup"]).read_text(encoding="utf-8")
    return BeautifulSoup(markup, "html.parser")


def _path(value: object) -> Path:
    assert isinstance(value, Path), "the document has not been rendered"
    return value


@given(parsers.parse('a guide document with the sections "{first}" and "{second}"'))
def given_guide(
    write_docs, scenario_state: dict[str, object], first: str, second: str
) -> None:
    scenario_state["base"] = write_docs(
        {"guide.md": f"# {first}\n\nText.\n\n# {second}\n\nMore text.\n"}
    )


@given("an index document")
def given_index(write_docs, scenario_state: dict[str, object]) -> None:
    write_docs({"index.md": "# Home\n\nWelcome.\n"})


@given("a TOC descriptor listing the guide")
def given_toc(scenario_state: dict[str, object]) -> None:
    scenario_state["items"] = [TocItem("Guide", "guide.md")]


@given("a TOC descriptor listing a missing document before the guide")
def given_toc_with_missing(scenario_state: dict[str, object]) -> None:
    scenario_state["items"] = [TocItem("Ghost", "ghost.md"), TocItem("Guide", "guide.md")]


def _render(scenario_state: dict[str, object], model: DocumentModel, tmp_path: Path) -> None:
    base = _path(scenario_state["base"])
    renderer = AggregateRenderer(base_dir=base)
    documents = locate_documents(renderer.registry, base)
    (markup,) = renderer.render(documents, tmp_path / "out", model)
    scenario_state["markup"] = markup


@when("the aggregate document is rendered")
def when_rendered(scenario_state: dict[str, object], tmp_path: Path) -> None:
    items = scenario_state.get("items")
    toc = TocDescriptor(name="Contents", items=list(items)) if items else None  # type: ignore[arg-type]
    _render(scenario_state, DocumentModel(title="Manual", toc=toc), tmp_path)


@when("the aggregate document is rendered without a TOC descriptor")
def when_rendered_flat(scenario_state: dict[str, object], tmp_path: Path) -> None:
    _render(scenario_state, DocumentModel(title="Manual"), tmp_path)


@then(
    parsers.parse(
        'the TOC lists "{n1}" for "{r1}", "{n2}" for "{r2}" and "{n3}" for "{r3}"'
    )
)
def then_toc_lists(
    scenario_state: dict[str, object],
    n1: str,
    r1: str,
    n2: str,
    r2: str,
    n3: str,
    r3: str,
) -> None:
    rows = []
    for row in _soup(scenario_state).find_all("fo:table-row"):
        link = row.find("fo:basic-link")
        if link is None:
            continue
        number = next(block.get_text() for block in row.find_all("fo:block") if block.get_text())
        rows.append((number, link["internal-destination"]))
    assert rows == [(n1, r1), (n2, r2), (n3, r3)]


@then("every TOC reference has a matching target in the body")
def then_targets_exist(scenario_state: dict[str, object]) -> None:
    soup = _soup(scenario_state)
    ids = {tag["id"] for tag in soup.find_all(attrs={"id": True})}
    refs = [tag["ref-id"] for tag in soup.find_all("fo:page-number-citation")]
    assert refs, "expected TOC page citations"
    missing = [ref for ref in refs if ref not in ids]
    assert not missing, f"TOC references without targets: {missing}"


@then(parsers.parse('the body shows the chapter "{heading}"'))
@then(parsers.parse('the body shows the section "{heading}"'))
def then_body_shows(scenario_state: dict[str, object], heading: str) -> None:
    assert heading in _soup(scenario_state).get_text()


@then("the guide chapter precedes the index chapter")
def then_source_order(scenario_state: dict[str, object]) -> None:
    markup = _path(scenario_state["markup"]).read_text(encoding="utf-8")
    assert markup.index('id="./guide"') < markup.index('id="./index"')


@then("no TOC is written")
def then_no_toc(scenario_state: dict[str, object]) -> None:
    assert _soup(scenario_state).find(attrs={"id": "./toc"}) is None
