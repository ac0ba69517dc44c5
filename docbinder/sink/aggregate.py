"""XSL-FO sink merging several documents into one output stream.

:class:`FoAggregateSink` extends :class:`~docbinder.sink.fo.FoSink` with a
cover page, a rendered table of contents, and one chapter per merged
document. Anchors and links are qualified with the id of the document being
merged so targets stay unique across the whole output.
"""

from __future__ import annotations

import logging
import typing as typ

from docbinder._constants import DEFAULT_TOC_POSITION, MAX_TOC_LEVEL, TOC_NONE
from docbinder.references import SectionNumberStack, document_id, resolve_link

from .fo import FO_NAMESPACE, FoSink

if typ.TYPE_CHECKING:
    import collections.abc as cabc

    from docbinder.models import DocumentModel, NormalizedToc, TocEntry

    from .fo import FoConfiguration

logger = logging.getLogger(__name__)

TOC_ID = "./toc"
_TOC_COLUMN_WIDTHS = ("0.45in", "0.4in", "0.4in", "5in")


class FoAggregateSink(FoSink):
    """Render a cover page, an optional TOC, and merged document chapters.

    Parameters
    ----------
    stream : TextIO
        Append-only output stream.
    configuration : FoConfiguration, optional
        Attribute sets; defaults to the built-in sets.
    model : DocumentModel, optional
        Cover metadata (title, subtitle, author, date).
    toc : NormalizedToc, optional
        TOC to render from :meth:`toc`; ``None`` renders nothing.
    toc_position : str, optional
        ``"start"``, ``"end"`` or ``"none"``; ``"none"`` suppresses the TOC.
    numbered : bool, optional
        Prefix chapter and section titles with their TOC numbers.
    """

    def __init__(
        self,
        stream: typ.TextIO,
        configuration: FoConfiguration | None = None,
        *,
        model: DocumentModel | None = None,
        toc: NormalizedToc | None = None,
        toc_position: str = DEFAULT_TOC_POSITION,
        numbered: bool = False,
    ) -> None:
        super().__init__(stream, configuration)
        self.model = model
        self.toc_model = toc
        self.toc_position = toc_position
        self.numbered = numbered
        self.document_name: str | None = None
        self.document_title: str | None = None
        self._document_id: str | None = None
        self._chapter_depth: int | None = None
        self._body_numbers = SectionNumberStack()
        self._title_levels: list[int] = []
        self._toc_numbers = SectionNumberStack()

    def page_masters(self) -> tuple[str, ...]:
        return ("cover", "toc", "body")

    def begin_document(self) -> None:
        self.writeln('<?xml version="1.0" encoding="UTF-8"?>')
        self.start_tag("root", {"xmlns:fo": FO_NAMESPACE})
        self.layout_master_set()

    def end_document(self) -> None:
        self.chapter_()
        super().end_document()

    # ------------------------------------------------------------------
    # Cover and TOC
    # ------------------------------------------------------------------

    def cover_page(self) -> None:
        """Write the cover page when the model carries a title."""
        if self.model is None or not self.model.title:
            return
        self.start_tag("page-sequence", {"master-reference": "cover"})
        self.start_tag("flow", {"flow-name": "xsl-region-body"})
        self.simple_block(self.model.title, self.style("cover.title"))
        for value, style in (
            (self.model.subtitle, "cover.subtitle"),
            (self.model.author, "cover.author"),
            (self.model.date, "cover.date"),
        ):
            if value:
                self.simple_block(value, self.style(style))
        self.end_tag("flow")
        self.end_tag("page-sequence")

    def toc(self) -> None:
        """Write the numbered table of contents as its own page sequence."""
        if self.toc_model is None or self.toc_position == TOC_NONE:
            return

        self.chapter_()
        name = self.toc_model.name
        self.start_page_sequence("toc", header=name, initial_page_number="1", page_format="i")
        self.start_tag("flow", {"flow-name": "xsl-region-body"})
        self.start_tag("block", {"id": TOC_ID})
        self.simple_block(name, self.style("chapter.title"))
        self.start_tag("table", {"table-layout": "fixed", "width": "100%"})
        for width in _TOC_COLUMN_WIDTHS:
            self.empty_tag("table-column", {"column-width": width})
        self.start_tag("table-body")
        if self.toc_model.entries:
            self._write_toc_entries(self.toc_model.entries, 1)
        else:
            # A table body needs at least one row.
            self.start_tag("table-row")
            self.start_tag("table-cell", {"number-columns-spanned": "4"})
            self.empty_tag("block")
            self.end_tag("table-cell")
            self.end_tag("table-row")
        self.end_tag("table-body")
        self.end_tag("table")
        self.end_tag("block")
        self.end_tag("flow")
        self.end_tag("page-sequence")

    def _write_toc_entries(self, entries: cabc.Sequence[TocEntry], level: int) -> None:
        if level > MAX_TOC_LEVEL:
            logger.warning(
                "Dropping %d TOC entries nested deeper than %d levels.",
                len(entries),
                MAX_TOC_LEVEL,
            )
            return

        self._toc_numbers.push()
        for entry in entries:
            self.start_tag("table-row", {"keep-with-next": "auto"})
            for _ in range(max(level - 2, 0)):
                self.start_tag("table-cell")
                self.empty_tag("block")
                self.end_tag("table-cell")

            self.start_tag("table-cell", self.style("toc.cell"))
            self.start_tag("block", self.style("toc.number.style"))
            self.write(self._toc_numbers.next())
            self.end_tag("block")
            self.end_tag("table-cell")

            span = str(5 - level) if level > 2 else "3"
            self.start_tag("table-cell", self.style("toc.cell", number_columns_spanned=span))
            self.start_tag("block", self.style(f"toc.h{level}.style", text_align_last="justify"))
            self.start_tag("basic-link", self.style("href.internal", internal_destination=entry.ref))
            self.write(entry.name)
            self.end_tag("basic-link")
            self.empty_tag("leader", self.style("toc.leader.style"))
            self.start_tag("inline", self.style("page.number"))
            self.empty_tag("page-number-citation", {"ref-id": entry.ref})
            self.end_tag("inline")
            self.end_tag("block")
            self.end_tag("table-cell")
            self.end_tag("table-row")

            if entry.children:
                self._write_toc_entries(entry.children, level + 1)
        self._toc_numbers.pop()

    # ------------------------------------------------------------------
    # Chapters
    # ------------------------------------------------------------------

    def chapter(self, name: str, title: str | None = None, *, nested: bool = False) -> None:
        """Start the chapter holding document ``name``.

        Parameters
        ----------
        name : str
            Document name relative to its module root; its id becomes the
            chapter's cross-reference target.
        title : str, optional
            Display title used in the running header and chapter heading.
        nested : bool, optional
            The document continues the numbering of the enclosing chapter
            instead of opening a new top-level number.
        """
        self.chapter_()
        self.document_name = name
        self.document_title = title
        self._document_id = document_id(name)

        self._chapter_depth = self.depth
        self.start_page_sequence("body", header=title or self._running_header())
        self.start_tag("flow", {"flow-name": "xsl-region-body"})
        self.start_tag("block", {"id": self._document_id})

        number = ""
        if self.numbered and not nested:
            number = self._body_numbers.advance(1)
            self._title_levels.clear()
        if title:
            heading = f"{number} {title}" if number else title
            self.simple_block(heading, self.style("chapter.title"))

    def skip_chapter(self) -> None:
        """Consume the chapter number of a TOC entry whose document is missing."""
        if self.numbered:
            self._body_numbers.advance(1)
            self._title_levels.clear()

    def chapter_(self) -> None:
        """Close the current chapter, including any elements left open."""
        if self._chapter_depth is None:
            return
        self.close_to(self._chapter_depth)
        self._chapter_depth = None
        self.document_name = None
        self.document_title = None
        self._document_id = None

    def _running_header(self) -> str | None:
        return self.model.title if self.model and self.model.title else None

    # ------------------------------------------------------------------
    # Event overrides
    # ------------------------------------------------------------------

    def section_title(self, level: int) -> None:
        super().section_title(level)
        if not (self.numbered and self._body_numbers.depth):
            return
        # Mirror the nesting the indexing traversal derives for the TOC.
        while self._title_levels and self._title_levels[-1] >= level:
            self._title_levels.pop()
        self._title_levels.append(level)
        depth = len(self._title_levels) + 1
        if depth <= MAX_TOC_LEVEL:
            self.write(self._body_numbers.advance(depth) + " ")

    def anchor_id(self, name: str, *, synthesized: bool = False) -> str:
        if synthesized or not self._document_id:
            return name
        return f"{self._document_id}#{name}"

    def internal_target(self, href: str) -> str:
        return resolve_link(href, self._document_id)


__all__ = ["TOC_ID", "FoAggregateSink"]
