"""XSL-FO terminal sink writing one document to an append-only stream.

:class:`FoSink` renders structure events as XSL-FO. Formatting comes from
named attribute sets held by :class:`FoConfiguration`; a
``page-config.yaml`` file can override any set by name.

Example
-------
>>> import io
>>> from docbinder.sink.fo import FoSink
>>> out = io.StringIO()
>>> sink = FoSink(out)
>>> sink.begin_document()
>>> sink.paragraph(); sink.text("a < b"); sink.paragraph_()
>>> sink.end_document()
>>> "a &lt; b" in out.getvalue()
True
"""

from __future__ import annotations

import copy
import logging
import typing as typ

from ruamel.yaml import YAML

from docbinder.errors import MarkupStructureError
from docbinder.markup import escape_markup, escape_with_symbols, needs_symbol_font
from docbinder.references import is_external

from .base import Sink

if typ.TYPE_CHECKING:
    import collections.abc as cabc
    from pathlib import Path

logger = logging.getLogger(__name__)

FO_NAMESPACE = "http://www.w3.org/1999/XSL/Format"

DEFAULT_ATTRIBUTE_SETS: dict[str, dict[str, str]] = {
    "layout.master.set.base": {
        "page-width": "8.5in",
        "page-height": "11in",
        "margin-top": "0.625in",
        "margin-bottom": "0.5in",
        "margin-left": "1in",
        "margin-right": "1in",
    },
    "body.text": {
        "font-family": "Helvetica",
        "font-size": "10pt",
        "line-height": "12pt",
        "space-before": "0.5em",
        "space-after": "0.5em",
        "text-align": "justify",
    },
    "body.pre": {
        "font-family": "monospace",
        "font-size": "8pt",
        "line-height": "10pt",
        "white-space-collapse": "false",
        "white-space-treatment": "preserve",
        "linefeed-treatment": "preserve",
        "wrap-option": "wrap",
        "background-color": "#f6f8fa",
        "padding": "0.5em",
        "space-before": "0.5em",
        "space-after": "0.5em",
    },
    "body.h1": {"font-size": "18pt", "font-weight": "bold", "space-before": "1em", "keep-with-next": "always"},
    "body.h2": {"font-size": "15pt", "font-weight": "bold", "space-before": "1em", "keep-with-next": "always"},
    "body.h3": {"font-size": "13pt", "font-weight": "bold", "space-before": "0.8em", "keep-with-next": "always"},
    "body.h4": {"font-size": "11pt", "font-weight": "bold", "space-before": "0.6em", "keep-with-next": "always"},
    "body.h5": {"font-size": "10pt", "font-weight": "bold", "space-before": "0.5em", "keep-with-next": "always"},
    "chapter.title": {"font-size": "22pt", "font-weight": "bold", "space-after": "1em"},
    "cover.title": {"font-size": "28pt", "font-weight": "bold", "text-align": "center", "space-before": "3in"},
    "cover.subtitle": {"font-size": "16pt", "text-align": "center", "space-before": "0.5em"},
    "cover.author": {"font-size": "12pt", "text-align": "center", "space-before": "2in"},
    "cover.date": {"font-size": "10pt", "text-align": "center", "space-before": "0.5em"},
    "header.style": {"font-size": "8pt", "text-align": "end", "border-bottom": "0.5pt solid #999999"},
    "footer.style": {"font-size": "8pt", "text-align": "center"},
    "toc.cell": {"padding-top": "2pt", "padding-bottom": "2pt"},
    "toc.number.style": {"font-size": "10pt", "text-align": "end", "padding-right": "4pt"},
    "toc.h1.style": {"font-size": "11pt", "font-weight": "bold", "space-before": "6pt"},
    "toc.h2.style": {"font-size": "10pt"},
    "toc.h3.style": {"font-size": "10pt"},
    "toc.h4.style": {"font-size": "9pt"},
    "toc.leader.style": {"leader-pattern": "dots", "leader-pattern-width": "4pt"},
    "page.number": {},
    "href.internal": {"color": "#0050a0"},
    "href.external": {"color": "#0050a0", "text-decoration": "underline"},
    "bold": {"font-weight": "bold"},
    "italic": {"font-style": "italic"},
    "monospace": {"font-family": "monospace"},
    "list": {"provisional-distance-between-starts": "1.5em", "space-before": "0.3em", "space-after": "0.3em"},
    "list.item": {"space-before": "0.15em"},
    "table": {"table-layout": "fixed", "width": "100%", "space-before": "0.5em", "space-after": "0.5em"},
    "table.heading.cell": {"font-weight": "bold", "border": "0.5pt solid #999999", "padding": "2pt"},
    "table.body.cell": {"border": "0.5pt solid #999999", "padding": "2pt"},
}


class FoConfiguration:
    """Named FO attribute sets with optional per-name overrides."""

    def __init__(
        self, attribute_sets: cabc.Mapping[str, cabc.Mapping[str, str]] | None = None
    ) -> None:
        self._sets: dict[str, dict[str, str]] = copy.deepcopy(DEFAULT_ATTRIBUTE_SETS)
        if attribute_sets:
            self.update(attribute_sets)

    def update(self, attribute_sets: cabc.Mapping[str, cabc.Mapping[str, str]]) -> None:
        """Merge ``attribute_sets`` over the current sets, name by name."""
        for name, attributes in attribute_sets.items():
            merged = self._sets.setdefault(str(name), {})
            merged.update({str(key): str(value) for key, value in attributes.items()})

    def load(self, path: Path) -> None:
        """Apply overrides read from a YAML mapping of set name to attributes.

        Raises
        ------
        TypeError
            If the file does not hold a mapping of mappings.
        """
        loader = YAML(typ="safe")
        with path.open("r", encoding="utf-8") as handle:
            loaded = loader.load(handle) or {}
        if not isinstance(loaded, dict) or not all(
            isinstance(value, dict) for value in loaded.values()
        ):
            msg = f"Page configuration '{path}' must map attribute-set names to mappings."
            raise TypeError(msg)
        self.update(loaded)

    def attributes(self, name: str) -> dict[str, str]:
        """Return a copy of the attribute set ``name`` (empty when unknown)."""
        return dict(self._sets.get(name, {}))


def _format_attributes(attributes: cabc.Mapping[str, str]) -> str:
    return "".join(
        f' {name}="{escape_markup(str(value))}"' for name, value in attributes.items()
    )


class FoSink(Sink):
    """Render structure events of a single document as XSL-FO.

    Output is strictly appended to ``stream``. Open elements are tracked so
    :meth:`close_to` can unwind a partially rendered structure and keep the
    document well-formed.
    """

    def __init__(
        self, stream: typ.TextIO, configuration: FoConfiguration | None = None
    ) -> None:
        self._stream = stream
        self.configuration = configuration or FoConfiguration()
        self._open_tags: list[str] = []
        self._numbered_lists: list[int | None] = []

    # ------------------------------------------------------------------
    # Writing primitives
    # ------------------------------------------------------------------

    def write(self, markup: str) -> None:
        self._stream.write(markup)

    def writeln(self, markup: str) -> None:
        self._stream.write(markup + "\n")

    def style(self, name: str | None, **extra: str) -> dict[str, str]:
        """Return attribute set ``name`` merged with ``extra`` attributes.

        Keyword names use underscores in place of hyphens.
        """
        attributes = self.configuration.attributes(name) if name else {}
        attributes.update({key.replace("_", "-"): value for key, value in extra.items()})
        return attributes

    def start_tag(self, tag: str, attributes: cabc.Mapping[str, str] | None = None) -> None:
        self.write(f"<fo:{tag}{_format_attributes(attributes or {})}>")
        self._open_tags.append(tag)

    def end_tag(self, tag: str) -> None:
        if not self._open_tags or self._open_tags[-1] != tag:
            msg = f"Cannot close <fo:{tag}>; open elements are {self._open_tags!r}."
            raise MarkupStructureError(msg)
        self._open_tags.pop()
        self.write(f"</fo:{tag}>")

    def empty_tag(self, tag: str, attributes: cabc.Mapping[str, str] | None = None) -> None:
        self.write(f"<fo:{tag}{_format_attributes(attributes or {})}/>")

    def simple_block(self, text: str, attributes: cabc.Mapping[str, str] | None = None) -> None:
        """Write a block holding escaped ``text``."""
        self.start_tag("block", attributes)
        self.write(self.escaped(text))
        self.end_tag("block")

    @property
    def depth(self) -> int:
        """Return the number of currently open elements."""
        return len(self._open_tags)

    def close_to(self, depth: int) -> None:
        """Close open elements until only ``depth`` remain."""
        while len(self._open_tags) > depth:
            self.end_tag(self._open_tags[-1])

    def escaped(self, text: str) -> str:
        return escape_with_symbols(text, self.needs_special_font)

    def needs_special_font(self, char: str) -> bool:
        return needs_symbol_font(char)

    # ------------------------------------------------------------------
    # Document skeleton
    # ------------------------------------------------------------------

    def begin_document(self) -> None:
        self.writeln('<?xml version="1.0" encoding="UTF-8"?>')
        self.start_tag("root", {"xmlns:fo": FO_NAMESPACE})
        self.layout_master_set()
        self.start_page_sequence("body")
        self.start_tag("flow", {"flow-name": "xsl-region-body"})

    def end_document(self) -> None:
        self.close_to(0)
        self.writeln("")

    def layout_master_set(self) -> None:
        self.start_tag("layout-master-set")
        for name in self.page_masters():
            self.start_tag(
                "simple-page-master",
                self.style("layout.master.set.base", master_name=name),
            )
            self.empty_tag("region-body", {"margin-top": "0.5in", "margin-bottom": "0.5in"})
            self.empty_tag("region-before", {"extent": "0.4in"})
            self.empty_tag("region-after", {"extent": "0.4in"})
            self.end_tag("simple-page-master")
        self.end_tag("layout-master-set")

    def page_masters(self) -> tuple[str, ...]:
        return ("body",)

    def start_page_sequence(
        self,
        master: str,
        *,
        header: str | None = None,
        initial_page_number: str | None = None,
        page_format: str | None = None,
    ) -> None:
        attributes = {"master-reference": master}
        if initial_page_number:
            attributes["initial-page-number"] = initial_page_number
        if page_format:
            attributes["format"] = page_format
        self.start_tag("page-sequence", attributes)
        if header:
            self.start_tag("static-content", {"flow-name": "xsl-region-before"})
            self.simple_block(header, self.style("header.style"))
            self.end_tag("static-content")
        self.start_tag("static-content", {"flow-name": "xsl-region-after"})
        self.start_tag("block", self.style("footer.style"))
        self.empty_tag("page-number")
        self.end_tag("block")
        self.end_tag("static-content")

    # ------------------------------------------------------------------
    # Structure events
    # ------------------------------------------------------------------

    def section(self, level: int) -> None:
        self.start_tag("block")

    def section_(self, level: int) -> None:
        self.end_tag("block")

    def section_title(self, level: int) -> None:
        self.start_tag("block", self.style(f"body.h{min(max(level, 1), 5)}"))

    def section_title_(self, level: int) -> None:
        self.end_tag("block")

    def anchor(self, name: str, *, synthesized: bool = False) -> None:
        self.start_tag("inline", {"id": self.anchor_id(name, synthesized=synthesized)})

    def anchor_(self) -> None:
        self.end_tag("inline")

    def anchor_id(self, name: str, *, synthesized: bool = False) -> str:
        """Return the FO id for anchor ``name``."""
        return name

    def link(self, href: str) -> None:
        if is_external(href):
            self.start_tag(
                "basic-link",
                self.style("href.external", external_destination=f"url({href})"),
            )
        else:
            self.start_tag(
                "basic-link",
                self.style("href.internal", internal_destination=self.internal_target(href)),
            )

    def link_(self) -> None:
        self.end_tag("basic-link")

    def internal_target(self, href: str) -> str:
        """Return the FO id an internal ``href`` points at."""
        return href.partition("#")[2] or href

    def paragraph(self) -> None:
        self.start_tag("block", self.style("body.text"))

    def paragraph_(self) -> None:
        self.end_tag("block")

    def verbatim(self) -> None:
        self.start_tag("block", self.style("body.pre"))

    def verbatim_(self) -> None:
        self.end_tag("block")

    def bullet_list(self) -> None:
        self._numbered_lists.append(None)
        self.start_tag("list-block", self.style("list"))

    def bullet_list_(self) -> None:
        self.end_tag("list-block")
        self._numbered_lists.pop()

    def numbered_list(self) -> None:
        self._numbered_lists.append(0)
        self.start_tag("list-block", self.style("list"))

    def numbered_list_(self) -> None:
        self.end_tag("list-block")
        self._numbered_lists.pop()

    def list_item(self) -> None:
        label = "•"
        if self._numbered_lists and self._numbered_lists[-1] is not None:
            self._numbered_lists[-1] += 1
            label = f"{self._numbered_lists[-1]}."
        self.start_tag("list-item", self.style("list.item"))
        self.start_tag("list-item-label", {"end-indent": "label-end()"})
        self.simple_block(label)
        self.end_tag("list-item-label")
        self.start_tag("list-item-body", {"start-indent": "body-start()"})
        self.start_tag("block")

    def list_item_(self) -> None:
        self.end_tag("block")
        self.end_tag("list-item-body")
        self.end_tag("list-item")

    def table(self) -> None:
        self.start_tag("table", self.style("table"))
        self.start_tag("table-body")

    def table_(self) -> None:
        self.end_tag("table-body")
        self.end_tag("table")

    def table_row(self) -> None:
        self.start_tag("table-row")

    def table_row_(self) -> None:
        self.end_tag("table-row")

    def table_cell(self, header: bool = False) -> None:
        name = "table.heading.cell" if header else "table.body.cell"
        self.start_tag("table-cell", self.style(name))
        self.start_tag("block")

    def table_cell_(self) -> None:
        self.end_tag("block")
        self.end_tag("table-cell")

    def bold(self) -> None:
        self.start_tag("inline", self.style("bold"))

    def bold_(self) -> None:
        self.end_tag("inline")

    def italic(self) -> None:
        self.start_tag("inline", self.style("italic"))

    def italic_(self) -> None:
        self.end_tag("inline")

    def monospaced(self) -> None:
        self.start_tag("inline", self.style("monospace"))

    def monospaced_(self) -> None:
        self.end_tag("inline")

    def line_break(self) -> None:
        self.empty_tag("block")

    def horizontal_rule(self) -> None:
        self.start_tag("block")
        self.empty_tag(
            "leader",
            {"leader-pattern": "rule", "leader-length": "100%", "rule-thickness": "0.5pt"},
        )
        self.end_tag("block")

    def text(self, text: str) -> None:
        self.write(self.escaped(text))

    def raw_text(self, markup: str) -> None:
        self.write(markup)


__all__ = ["DEFAULT_ATTRIBUTE_SETS", "FO_NAMESPACE", "FoConfiguration", "FoSink"]
