"""Shared dataclasses describing documents, TOC descriptors, and indexes."""

from __future__ import annotations

import dataclasses as dc

from ._constants import DEFAULT_OUTPUT_NAME


@dc.dataclass(slots=True)
class TocItem:
    """One entry of an author-declared table of contents.

    Attributes
    ----------
    name : str
        Display name of the entry.
    ref : str | None
        Document reference (for example ``"guide.md"``). Entries without a
        reference are skipped and never numbered.
    items : list[TocItem]
        Declared child entries, in order.
    """

    name: str
    ref: str | None = None
    items: list[TocItem] = dc.field(default_factory=list)


@dc.dataclass(slots=True)
class TocDescriptor:
    """Declarative TOC supplied by the document descriptor.

    ``items`` set to ``None`` means the descriptor declares no TOC at all and
    the renderer merges every document instead.
    """

    name: str = "Table of Contents"
    items: list[TocItem] | None = dc.field(default_factory=list)


@dc.dataclass(slots=True)
class DocumentModel:
    """Metadata for one aggregate render."""

    title: str = ""
    subtitle: str = ""
    author: str = ""
    date: str = ""
    output_name: str = DEFAULT_OUTPUT_NAME
    toc: TocDescriptor | None = None


@dc.dataclass(slots=True)
class IndexEntry:
    """Node of the index derived by walking a single document.

    Attributes
    ----------
    id : str
        Identifier unique within the indexed document.
    title : str
        Plain-text title of the section.
    children : list[IndexEntry]
        Nested sections in document order.
    """

    id: str
    title: str = ""
    children: list[IndexEntry] = dc.field(default_factory=list)

    def add_child(self, entry: IndexEntry) -> IndexEntry:
        """Append ``entry`` as the last child and return it."""
        self.children.append(entry)
        return entry


@dc.dataclass(slots=True, frozen=True)
class TocEntry:
    """Numbered-TOC entry ready for rendering.

    ``name`` is already escaped for embedding in markup; ``ref`` is the final
    cross-reference target id.
    """

    name: str
    ref: str
    children: tuple[TocEntry, ...] = ()


@dc.dataclass(slots=True, frozen=True)
class NormalizedToc:
    """Final TOC model consumed by the aggregate sink."""

    name: str
    entries: tuple[TocEntry, ...] = ()


__all__ = [
    "DocumentModel",
    "IndexEntry",
    "NormalizedToc",
    "TocDescriptor",
    "TocEntry",
    "TocItem",
]
