"""Event-consumer base classes and pipeline composition.

A :class:`Sink` receives document-structure events. Stages that decorate or
substitute events derive from :class:`ForwardingSink` and hand every event on
to ``next_sink``; :func:`build_pipeline` chains them in an explicit order in
front of a terminal sink.
"""

from __future__ import annotations

import typing as typ

if typ.TYPE_CHECKING:
    import collections.abc as cabc


class Sink:
    """Consumer of document-structure events.

    Every handler is a no-op so subclasses only override what they render.
    Closing events carry a trailing underscore (``section_`` closes
    ``section``).
    """

    def begin_document(self) -> None:
        pass

    def end_document(self) -> None:
        pass

    def section(self, level: int) -> None:
        pass

    def section_(self, level: int) -> None:
        pass

    def section_title(self, level: int) -> None:
        pass

    def section_title_(self, level: int) -> None:
        pass

    def anchor(self, name: str, *, synthesized: bool = False) -> None:
        """Open an anchor; ``synthesized`` ids are already render-global."""

    def anchor_(self) -> None:
        pass

    def link(self, href: str) -> None:
        pass

    def link_(self) -> None:
        pass

    def paragraph(self) -> None:
        pass

    def paragraph_(self) -> None:
        pass

    def verbatim(self) -> None:
        pass

    def verbatim_(self) -> None:
        pass

    def bullet_list(self) -> None:
        pass

    def bullet_list_(self) -> None:
        pass

    def numbered_list(self) -> None:
        pass

    def numbered_list_(self) -> None:
        pass

    def list_item(self) -> None:
        pass

    def list_item_(self) -> None:
        pass

    def table(self) -> None:
        pass

    def table_(self) -> None:
        pass

    def table_row(self) -> None:
        pass

    def table_row_(self) -> None:
        pass

    def table_cell(self, header: bool = False) -> None:
        pass

    def table_cell_(self) -> None:
        pass

    def bold(self) -> None:
        pass

    def bold_(self) -> None:
        pass

    def italic(self) -> None:
        pass

    def italic_(self) -> None:
        pass

    def monospaced(self) -> None:
        pass

    def monospaced_(self) -> None:
        pass

    def line_break(self) -> None:
        pass

    def horizontal_rule(self) -> None:
        pass

    def text(self, text: str) -> None:
        pass

    def raw_text(self, markup: str) -> None:
        """Receive markup that must be written without escaping."""

    def needs_special_font(self, char: str) -> bool:
        """Return True when ``char`` cannot be shown in the default typeface."""
        return False


class ForwardingSink(Sink):
    """Pipeline stage that forwards every event to ``next_sink``."""

    def __init__(self, next_sink: Sink) -> None:
        self.next_sink = next_sink

    def begin_document(self) -> None:
        self.next_sink.begin_document()

    def end_document(self) -> None:
        self.next_sink.end_document()

    def section(self, level: int) -> None:
        self.next_sink.section(level)

    def section_(self, level: int) -> None:
        self.next_sink.section_(level)

    def section_title(self, level: int) -> None:
        self.next_sink.section_title(level)

    def section_title_(self, level: int) -> None:
        self.next_sink.section_title_(level)

    def anchor(self, name: str, *, synthesized: bool = False) -> None:
        self.next_sink.anchor(name, synthesized=synthesized)

    def anchor_(self) -> None:
        self.next_sink.anchor_()

    def link(self, href: str) -> None:
        self.next_sink.link(href)

    def link_(self) -> None:
        self.next_sink.link_()

    def paragraph(self) -> None:
        self.next_sink.paragraph()

    def paragraph_(self) -> None:
        self.next_sink.paragraph_()

    def verbatim(self) -> None:
        self.next_sink.verbatim()

    def verbatim_(self) -> None:
        self.next_sink.verbatim_()

    def bullet_list(self) -> None:
        self.next_sink.bullet_list()

    def bullet_list_(self) -> None:
        self.next_sink.bullet_list_()

    def numbered_list(self) -> None:
        self.next_sink.numbered_list()

    def numbered_list_(self) -> None:
        self.next_sink.numbered_list_()

    def list_item(self) -> None:
        self.next_sink.list_item()

    def list_item_(self) -> None:
        self.next_sink.list_item_()

    def table(self) -> None:
        self.next_sink.table()

    def table_(self) -> None:
        self.next_sink.table_()

    def table_row(self) -> None:
        self.next_sink.table_row()

    def table_row_(self) -> None:
        self.next_sink.table_row_()

    def table_cell(self, header: bool = False) -> None:
        self.next_sink.table_cell(header)

    def table_cell_(self) -> None:
        self.next_sink.table_cell_()

    def bold(self) -> None:
        self.next_sink.bold()

    def bold_(self) -> None:
        self.next_sink.bold_()

    def italic(self) -> None:
        self.next_sink.italic()

    def italic_(self) -> None:
        self.next_sink.italic_()

    def monospaced(self) -> None:
        self.next_sink.monospaced()

    def monospaced_(self) -> None:
        self.next_sink.monospaced_()

    def line_break(self) -> None:
        self.next_sink.line_break()

    def horizontal_rule(self) -> None:
        self.next_sink.horizontal_rule()

    def text(self, text: str) -> None:
        self.next_sink.text(text)

    def raw_text(self, markup: str) -> None:
        self.next_sink.raw_text(markup)

    def needs_special_font(self, char: str) -> bool:
        return self.next_sink.needs_special_font(char)

    def reset(self) -> None:
        """Clear per-document state; stages with state override this."""
        if isinstance(self.next_sink, ForwardingSink):
            self.next_sink.reset()


StageFactory = typ.Callable[[Sink], ForwardingSink]


def build_pipeline(terminal: Sink, stages: cabc.Sequence[StageFactory]) -> Sink:
    """Chain ``stages`` in front of ``terminal`` and return the head.

    Parameters
    ----------
    terminal : Sink
        Sink that produces the final output.
    stages : Sequence[Callable[[Sink], ForwardingSink]]
        Stage factories in the order events should flow through them; the
        first factory receives events first.

    Returns
    -------
    Sink
        The head of the pipeline, or ``terminal`` when ``stages`` is empty.
    """
    head = terminal
    for factory in reversed(stages):
        head = factory(head)
    return head


__all__ = ["ForwardingSink", "Sink", "StageFactory", "build_pipeline"]
