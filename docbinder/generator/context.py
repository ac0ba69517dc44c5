"""Mutable state scoped to a single render."""

from __future__ import annotations

import dataclasses as dc
import typing as typ

from docbinder._constants import DEFAULT_TOC_POSITION, TOC_END, TOC_NONE, TOC_START
from docbinder.references import AnchorCounter

TOC_OPTION_KEYS = ("generateTOC", "generate_toc")


@dc.dataclass(slots=True)
class RenderContext:
    """Options and counters carried through one render.

    The TOC builder and the title anchor stage each draw ``section-<n>`` ids
    from their own counter. Both start at zero and visit the same titles in
    the same order, so a TOC reference and the anchor it points at agree.

    Attributes
    ----------
    options : dict[str, Any]
        Render options, also handed to templated documents as variables.
    toc_anchors : AnchorCounter
        Counter used while converting the index into TOC entries.
    title_anchors : AnchorCounter
        Counter used while installing anchors around rendered titles.
    """

    options: dict[str, typ.Any] = dc.field(default_factory=dict)
    toc_anchors: AnchorCounter = dc.field(default_factory=AnchorCounter)
    title_anchors: AnchorCounter = dc.field(default_factory=AnchorCounter)

    @property
    def toc_position(self) -> str:
        """Return ``"start"``, ``"end"`` or ``"none"`` from the TOC option.

        An absent option means ``"start"``; any unrecognised value means
        ``"none"``. Matching ignores case and surrounding whitespace.
        """
        value = next(
            (self.options[key] for key in TOC_OPTION_KEYS if self.options.get(key) is not None),
            None,
        )
        if value is None:
            return DEFAULT_TOC_POSITION
        position = str(value).strip().lower()
        return position if position in (TOC_START, TOC_END) else TOC_NONE

    def reset(self) -> None:
        self.toc_anchors.reset()
        self.title_anchors.reset()


__all__ = ["RenderContext"]
