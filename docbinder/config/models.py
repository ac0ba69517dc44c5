"""Typed dataclasses describing a binder configuration."""

from __future__ import annotations

import dataclasses as dc
from pathlib import Path  # noqa: TC003 - used for runtime type metadata

from docbinder._constants import DEFAULT_PYGMENTS_STYLE, DEFAULT_TOC_POSITION
from docbinder.models import DocumentModel  # noqa: TC001 - used for runtime type metadata
from docbinder.modules import DocumentModule


class BinderConfigError(ValueError):
    """Raised when the binder configuration is invalid or incomplete."""


def _default_modules() -> list[DocumentModule]:
    return [DocumentModule("markdown", "markdown", "md")]


@dc.dataclass(slots=True)
class BinderConfig:
    """Everything needed to render one aggregate document.

    Attributes
    ----------
    base_dir : Path
        Directory the module content roots are relative to.
    output_dir : Path
        Directory receiving the markup and PDF files.
    model : DocumentModel
        Cover metadata, output name and optional TOC descriptor.
    generate_toc : str
        Requested TOC position (``"start"``, ``"end"`` or anything else for
        none).
    pygments_style : str
        Pygments style used to colour code blocks.
    modules : list[DocumentModule]
        Source modules searched for documents.
    """

    base_dir: Path
    output_dir: Path
    model: DocumentModel
    generate_toc: str = DEFAULT_TOC_POSITION
    pygments_style: str = DEFAULT_PYGMENTS_STYLE
    modules: list[DocumentModule] = dc.field(default_factory=_default_modules)

    def options(self) -> dict[str, str]:
        """Return the render options passed to templates and the renderer."""
        return {"generateTOC": self.generate_toc}


__all__ = ["BinderConfig", "BinderConfigError"]
