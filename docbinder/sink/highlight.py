"""Pipeline stage substituting highlighted markup for verbatim text."""

from __future__ import annotations

import logging
import typing as typ

from docbinder.errors import HighlightError
from docbinder.markup import escape_with_symbols

from .base import ForwardingSink

if typ.TYPE_CHECKING:
    from docbinder.highlight import CodeHighlighter

    from .base import Sink

logger = logging.getLogger(__name__)


class HighlightStage(ForwardingSink):
    """Collect verbatim text and emit it as highlighted raw markup.

    A failed highlight never reaches the caller: the block falls back to
    escaped plain text, with glyphs the output sink flags through
    ``needs_special_font`` switched to the symbol typeface.
    """

    def __init__(self, next_sink: Sink, highlighter: CodeHighlighter) -> None:
        super().__init__(next_sink)
        self.highlighter = highlighter
        self._verbatim = False
        self._buffer: list[str] = []

    def verbatim(self) -> None:
        self._verbatim = True
        self._buffer.clear()
        super().verbatim()

    def text(self, text: str) -> None:
        if self._verbatim:
            self._buffer.append(text)
        else:
            super().text(text)

    def verbatim_(self) -> None:
        source = "".join(self._buffer)
        self._verbatim = False
        self._buffer.clear()
        if source:
            self.next_sink.raw_text(self.highlight(source))
        super().verbatim_()

    def highlight(self, source: str) -> str:
        """Return highlighted markup for ``source`` or its escaped fallback."""
        try:
            return self.highlighter.highlight(source)
        except HighlightError:
            logger.warning(
                "Failed to create syntax highlight. Falling back to plain text.",
                exc_info=True,
            )
        return escape_with_symbols(source, self.needs_special_font)

    def reset(self) -> None:
        self._verbatim = False
        self._buffer.clear()
        super().reset()


__all__ = ["HighlightStage"]
