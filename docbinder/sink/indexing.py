"""Indexing traversal recording a document's section structure."""

from __future__ import annotations

from docbinder.models import IndexEntry
from docbinder.references import slugify, unique_id

from .base import Sink


class IndexingSink(Sink):
    """Build :class:`IndexEntry` children from section titles.

    Each titled section becomes a child of the closest enclosing section, or
    of ``root`` at the outermost level. Ids are slugified titles made unique
    within the traversal. Several documents may be indexed into the same
    root; their sections are appended in traversal order.

    Examples
    --------
    >>> from docbinder.models import IndexEntry
    >>> root = IndexEntry("guide.md", "Guide")
    >>> sink = IndexingSink(root)
    >>> sink.section_title(1); sink.text("Install"); sink.section_title_(1)
    >>> [child.id for child in root.children]
    ['install']
    """

    def __init__(self, root: IndexEntry) -> None:
        self.root = root
        self._stack: list[tuple[int, IndexEntry]] = [(0, root)]
        self._title: list[str] | None = None
        self._used: set[str] = set()

    def section_title(self, level: int) -> None:
        self._title = []

    def text(self, text: str) -> None:
        if self._title is not None:
            self._title.append(text)

    def section_title_(self, level: int) -> None:
        parts, self._title = self._title, None
        if not parts:
            return
        title = "".join(parts).strip()
        while len(self._stack) > 1 and self._stack[-1][0] >= level:
            self._stack.pop()
        entry = IndexEntry(id=unique_id(slugify(title), self._used), title=title)
        self._stack[-1][1].add_child(entry)
        self._stack.append((level, entry))


__all__ = ["IndexingSink"]
