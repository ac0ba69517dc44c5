"""Exception hierarchy shared by the docbinder rendering pipeline."""

from __future__ import annotations


class DocumentRendererError(Exception):
    """Raised when a render cannot produce its output artefact."""


class HighlighterConfigError(DocumentRendererError):
    """Raised when the highlight rule table cannot be loaded."""


class HighlightError(DocumentRendererError):
    """Raised when a single code block fails to transform."""


class DocumentParseError(DocumentRendererError):
    """Raised when a source document cannot be read, templated, or parsed."""


class MarkupStructureError(DocumentRendererError, ValueError):
    """Raised when an element is closed out of order in the output markup."""


class LayoutConversionError(DocumentRendererError):
    """Raised when the layout engine rejects the intermediate markup.

    Attributes
    ----------
    path : Path | str
        Markup file handed to the layout engine.
    line : int | None
        1-based line of the offending markup, when the engine reports one.
    column : int | None
        Column of the offending markup, when the engine reports one.
    """

    def __init__(
        self,
        path: object,
        detail: str,
        *,
        line: int | None = None,
        column: int | None = None,
    ) -> None:
        self.path = path
        self.line = line
        self.column = column
        if line is not None and column is not None:
            msg = f"Error creating PDF from {path}:{line}:{column}\n{detail}"
        else:
            msg = f"Error creating PDF from {path}: {detail}"
        super().__init__(msg)


__all__ = [
    "DocumentParseError",
    "DocumentRendererError",
    "HighlightError",
    "HighlighterConfigError",
    "LayoutConversionError",
    "MarkupStructureError",
]
