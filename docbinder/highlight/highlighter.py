"""Highlight verbatim code blocks for the XSL-FO output."""

from __future__ import annotations

from docbinder._constants import DEFAULT_PYGMENTS_STYLE

from .code import CodeBlock
from .template import HighlightTemplate, shared_template


class CodeHighlighter:
    """Detect the language of a code block and render it as FO markup.

    The highlighter holds a reference to a :class:`HighlightTemplate` and
    never mutates it, so one instance can be shared by every renderer.
    """

    def __init__(
        self,
        template: HighlightTemplate | None = None,
        *,
        style: str = DEFAULT_PYGMENTS_STYLE,
    ) -> None:
        """Initialize the highlighter.

        Parameters
        ----------
        template : HighlightTemplate, optional
            Explicit template to use; when omitted the process-wide template
            for ``style`` is built or reused.
        style : str, optional
            Pygments style name used when ``template`` is not supplied.

        Raises
        ------
        HighlighterConfigError
            If the shared template for ``style`` cannot be built.
        """
        self.template = template or shared_template(style)

    def highlight(self, source: str) -> str:
        """Return ``source`` highlighted as FO inline markup.

        Raises
        ------
        HighlightError
            If the transform fails for this block.
        """
        code = CodeBlock.from_source(source)
        return self.template.transform(code.to_xml())


__all__ = ["CodeHighlighter"]
