r"""Section numbering and cross-reference id rules.

Every target the aggregate output can point at is built by one of the helpers
in this module, so the anchor stage, the TOC builder, and the aggregate sink
always agree on the id of a section or document.

Examples
--------
>>> from docbinder.references import SectionNumberStack, document_id
>>> numbers = SectionNumberStack()
>>> numbers.push()
>>> numbers.next()
'1.'
>>> numbers.push()
>>> numbers.next()
'1.1.'
>>> document_id("guide\\install.md")
'./guide/install'
"""

from __future__ import annotations

import logging
import posixpath
import re

from ._constants import DOCUMENT_ID_PREFIX, SECTION_ANCHOR_TEMPLATE, TEMPLATE_SUFFIX

logger = logging.getLogger(__name__)

_SEPARATOR = "."


def section_anchor_id(index: int) -> str:
    """Return the synthesized anchor id for the ``index``-th section title."""
    return SECTION_ANCHOR_TEMPLATE.format(index=index)


def document_id(name: str | None) -> str:
    """Translate a document name into the id of its chapter block.

    Backslashes become forward slashes, ``./`` is prepended, the template
    suffix and the file extension of the last path segment are stripped, and
    repeated slashes are collapsed. An empty name yields ``""`` with a
    warning, since links to it cannot be resolved.
    """
    if not name:
        logger.warning("Empty document reference, links will not be resolved correctly!")
        return ""

    id_name = name.replace("\\", "/")
    if not id_name.startswith(DOCUMENT_ID_PREFIX):
        id_name = DOCUMENT_ID_PREFIX + id_name
    id_name = id_name.removesuffix(TEMPLATE_SUFFIX)

    head, _, tail = id_name.rpartition("/")
    if "." in tail.lstrip("."):
        tail = tail[: tail.rindex(".")]
    id_name = f"{head}/{tail}"

    return re.sub(r"/{2,}", "/", id_name)


def document_href(ref: str) -> str:
    """Return ``ref`` with normalized separators and no file extension."""
    href = ref.replace("\\", "/")
    stem, dot, ext = href.rpartition(".")
    if dot and "/" not in ext:
        href = stem
    return href


def slugify(title: str) -> str:
    """Convert a title into a lowercase hyphen-separated identifier."""
    slug = re.sub(r"[^a-z0-9]+", "-", title.lower()).strip("-")
    return slug or "section"


def unique_id(base: str, used: set[str]) -> str:
    """Return ``base`` or a numbered variant not yet in ``used``, recording it."""
    candidate = base
    suffix = 2
    while candidate in used:
        candidate = f"{base}-{suffix}"
        suffix += 1
    used.add(candidate)
    return candidate


def is_external(href: str) -> bool:
    """Return True when ``href`` carries a scheme or points off-site."""
    return "://" in href or href.startswith(("mailto:", "//"))


def resolve_link(href: str, current_document: str | None) -> str:
    """Resolve an in-document link target against the current document id.

    ``#name`` resolves to ``<current>#name``; ``other.md#name`` resolves to
    ``./other#name``; a bare ``other.md`` resolves to the whole-document id.
    """
    base, hash_, fragment = href.partition("#")
    if not base:
        target = current_document or ""
    else:
        if current_document and not base.startswith("/"):
            directory = posixpath.dirname(current_document.removeprefix(DOCUMENT_ID_PREFIX))
            base = posixpath.normpath(posixpath.join(directory, base))
        target = document_id(base)
    return f"{target}#{fragment}" if hash_ else target


class AnchorCounter:
    """Monotonic counter producing ``section-<n>`` ids for one render."""

    def __init__(self) -> None:
        self._value = 0

    @property
    def value(self) -> int:
        """Return the index the next call to :meth:`next_id` will use."""
        return self._value

    def next_id(self) -> str:
        """Return the next synthesized anchor id and advance the counter."""
        anchor = section_anchor_id(self._value)
        self._value += 1
        return anchor

    def reset(self) -> None:
        self._value = 0


class SectionNumberStack:
    """Per-level counters producing hierarchical decimal section numbers.

    A counter is pushed when descending a level and popped when ascending,
    so returning to a shallower level never reuses a counter from a previous
    branch. Numbers render as ``1.2.3.`` with a trailing separator.
    """

    def __init__(self) -> None:
        self._counters: list[int] = []

    @property
    def depth(self) -> int:
        """Return the number of active levels."""
        return len(self._counters)

    def push(self) -> None:
        """Open a fresh counter for a deeper level."""
        self._counters.append(0)

    def pop(self) -> None:
        """Drop the counter of the current level."""
        if not self._counters:
            msg = "Cannot pop an empty section number stack."
            raise IndexError(msg)
        self._counters.pop()

    def next(self) -> str:
        """Increment the current level's counter and return the full number."""
        if not self._counters:
            msg = "Push a level before numbering an entry."
            raise IndexError(msg)
        self._counters[-1] += 1
        return self.current()

    def current(self) -> str:
        """Return the number of the most recently numbered entry."""
        return "".join(f"{counter}{_SEPARATOR}" for counter in self._counters)

    def advance(self, level: int) -> str:
        """Number an entry at 1-based ``level``, adjusting the stack first.

        Parameters
        ----------
        level : int
            Depth of the entry; ``1`` is the outermost level.

        Returns
        -------
        str
            The entry's number, for example ``"2.1."``.
        """
        if level < 1:
            msg = f"Section level must be positive, got {level}."
            raise ValueError(msg)
        while self.depth > level:
            self.pop()
        while self.depth < level:
            self.push()
        return self.next()

    def clear(self) -> None:
        self._counters.clear()


__all__ = [
    "AnchorCounter",
    "SectionNumberStack",
    "document_href",
    "document_id",
    "is_external",
    "resolve_link",
    "section_anchor_id",
    "slugify",
    "unique_id",
]
