"""Pipeline stage guaranteeing every section title is addressable."""

from __future__ import annotations

import typing as typ

from .base import ForwardingSink

if typ.TYPE_CHECKING:
    from docbinder.references import AnchorCounter

    from .base import Sink


class SectionAnchorStage(ForwardingSink):
    """Install a synthesized ``section-<n>`` anchor around title text.

    While a section title is open, explicit anchor events are absorbed rather
    than forwarded, and every text event outside an enclosing anchor is
    wrapped in the next id from the render's :class:`AnchorCounter`. The
    counter advances once per wrapped text event and is never reset within a
    render, so the ids line up with the ones the TOC builder assigns.

    Absorbed anchors never reach the output, so the synthesized id is always
    installed, even when an author anchor in the same title carries it.
    """

    def __init__(self, next_sink: Sink, counter: AnchorCounter) -> None:
        super().__init__(next_sink)
        self.counter = counter
        self._in_title = False
        self._in_anchor = False

    def anchor(self, name: str, *, synthesized: bool = False) -> None:
        if self._in_title:
            return
        self._in_anchor = True
        super().anchor(name, synthesized=synthesized)

    def anchor_(self) -> None:
        if self._in_title:
            return
        super().anchor_()
        self._in_anchor = False

    def section_title(self, level: int) -> None:
        super().section_title(level)
        self._in_title = True

    def section_title_(self, level: int) -> None:
        self._in_title = False
        super().section_title_(level)

    def text(self, text: str) -> None:
        if self._in_title and not self._in_anchor:
            self.next_sink.anchor(self.counter.next_id(), synthesized=True)
            self.next_sink.text(text)
            self.next_sink.anchor_()
            return
        super().text(text)

    def reset(self) -> None:
        self._in_title = False
        self._in_anchor = False
        super().reset()


__all__ = ["SectionAnchorStage"]
