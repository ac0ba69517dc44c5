"""Build the numbered table of contents from declared items and documents.

Every declared item with a reference is expanded by an indexing traversal of
its document: the document's sections, and those of any declared child
items, become nested entries. The resulting index forest is then converted
into :class:`~docbinder.models.NormalizedToc` entries whose references are
either whole-document ids (top level) or synthesized ``section-<n>`` anchors.
"""

from __future__ import annotations

import logging
import typing as typ

from docbinder.errors import DocumentParseError
from docbinder.markup import escape_markup
from docbinder.models import IndexEntry, NormalizedToc, TocDescriptor, TocEntry
from docbinder.references import document_href, document_id
from docbinder.sink import IndexingSink

if typ.TYPE_CHECKING:
    import collections.abc as cabc
    from pathlib import Path

    from docbinder.models import TocItem
    from docbinder.modules import ModuleRegistry

    from .context import RenderContext

logger = logging.getLogger(__name__)


class TocBuilder:
    """Derive a :class:`NormalizedToc` for one render.

    Parameters
    ----------
    registry : ModuleRegistry
        Source modules searched for referenced documents.
    base_dir : Path
        Directory the module content roots are relative to.
    context : RenderContext
        Render state; its ``toc_anchors`` counter numbers nested entries.
    """

    def __init__(self, registry: ModuleRegistry, base_dir: Path, context: RenderContext) -> None:
        self.registry = registry
        self.base_dir = base_dir
        self.context = context

    def build(self, descriptor: TocDescriptor) -> NormalizedToc:
        """Expand ``descriptor`` into a normalized, render-ready TOC.

        Items without a reference are skipped with a diagnostic. Items whose
        document cannot be found keep their own line but gain no children.

        Examples
        --------
        >>> from pathlib import Path
        >>> from docbinder.generator import RenderContext
        >>> from docbinder.models import TocDescriptor
        >>> from docbinder.modules import ModuleRegistry
        >>> builder = TocBuilder(ModuleRegistry(), Path("/nonexistent"), RenderContext())
        >>> builder.build(TocDescriptor(name="Contents", items=[])).entries
        ()
        """
        roots: list[IndexEntry] = []
        for item in descriptor.items or []:
            if item.ref is None:
                logger.info("No ref defined for TOC item '%s'.", item.name)
                continue
            chapter = IndexEntry(id=item.ref, title=item.name)
            sink = IndexingSink(chapter)
            self._index(item, sink)
            self._index_items(item.items, sink)
            roots.append(chapter)

        entries = tuple(self._convert(entry, 0) for entry in roots)
        return NormalizedToc(name=descriptor.name, entries=entries)

    def _index_items(self, items: cabc.Sequence[TocItem], sink: IndexingSink) -> None:
        for item in items:
            if item.ref is None:
                logger.info("No ref defined for TOC item '%s'.", item.name)
                continue
            self._index(item, sink)
            self._index_items(item.items, sink)

    def _index(self, item: TocItem, sink: IndexingSink) -> None:
        href = document_href(item.ref or "")
        sources = self.registry.resolve(href, self.base_dir)
        if not sources:
            logger.debug("No document found for TOC item '%s' (%s).", item.name, item.ref)
        for source in sources:
            parser = self.registry.parser_for(source.module)
            try:
                parser.parse(source.path, sink, self.context.options)
            except DocumentParseError as exc:
                logger.warning("Unable to index '%s' for the TOC: %s", source.path, exc)

    def _convert(self, entry: IndexEntry, depth: int) -> TocEntry:
        ref = document_id(entry.id) if depth == 0 else self.context.toc_anchors.next_id()
        children = tuple(self._convert(child, depth + 1) for child in entry.children)
        return TocEntry(name=escape_markup(entry.title), ref=ref, children=children)


__all__ = ["TocBuilder"]
