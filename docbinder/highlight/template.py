"""Compiled highlight transform shared by every code highlighter.

A :class:`HighlightTemplate` turns the wrapped XML form of a
:class:`~docbinder.highlight.code.CodeBlock` into XSL-FO inline markup. The
token colours come from a Pygments style, which acts as the rule table: an
unknown style name is a configuration error raised while building the
template.

Building a template resolves the style and precomputes the FO attributes of
every token type, so :func:`shared_template` keeps one instance per style for
the lifetime of the process. Construction is guarded by a lock with a
double-checked fast path; a failed build caches nothing.
"""

from __future__ import annotations

import threading
import typing as typ
from xml.etree import ElementTree

from pygments import highlight
from pygments.formatter import Formatter
from pygments.lexers import get_lexer_by_name
from pygments.token import Token
from pygments.util import ClassNotFound

from docbinder._constants import DEFAULT_LANGUAGE, DEFAULT_PYGMENTS_STYLE
from docbinder.errors import HighlighterConfigError, HighlightError
from docbinder.markup import escape_markup

if typ.TYPE_CHECKING:
    import collections.abc as cabc

    from pygments.lexer import Lexer
    from pygments.token import _TokenType
else:  # pragma: no cover - type-checking fallback
    Lexer = typ.Any
    _TokenType = typ.Any

_TEMPLATES: dict[str, HighlightTemplate] = {}
_TEMPLATE_LOCK = threading.Lock()


def _fo_attributes(definition: cabc.Mapping[str, typ.Any]) -> str:
    """Translate a Pygments style definition into FO inline attributes."""
    attributes: list[str] = []
    if definition.get("color"):
        attributes.append(f'color="#{definition["color"]}"')
    if definition.get("bgcolor"):
        attributes.append(f'background-color="#{definition["bgcolor"]}"')
    if definition.get("bold"):
        attributes.append('font-weight="bold"')
    if definition.get("italic"):
        attributes.append('font-style="italic"')
    if definition.get("underline"):
        attributes.append('text-decoration="underline"')
    return " ".join(attributes)


class FoFormatter(Formatter):
    """Pygments formatter emitting ``fo:inline`` runs for styled tokens."""

    name = "XSL-FO"
    aliases: typ.ClassVar[list[str]] = ["fo", "xslfo"]
    filenames: typ.ClassVar[list[str]] = ["*.fo"]

    def __init__(self, **options: typ.Any) -> None:
        super().__init__(**options)
        self._attributes: dict[_TokenType, str] = {
            ttype: _fo_attributes(definition) for ttype, definition in self.style
        }

    def _lookup(self, ttype: _TokenType) -> str:
        while ttype not in self._attributes and ttype is not Token:
            ttype = ttype.parent
        return self._attributes.get(ttype, "")

    def format_unencoded(
        self, tokensource: cabc.Iterable[tuple[_TokenType, str]], outfile: typ.TextIO
    ) -> None:
        """Write merged runs of equally styled tokens to ``outfile``."""
        current = ""
        run: list[str] = []

        def _flush() -> None:
            if not run:
                return
            text = escape_markup("".join(run))
            if current:
                outfile.write(f"<fo:inline {current}>{text}</fo:inline>")
            else:
                outfile.write(text)
            run.clear()

        for ttype, value in tokensource:
            attributes = self._lookup(ttype)
            if attributes != current:
                _flush()
                current = attributes
            run.append(value)
        _flush()


class HighlightTemplate:
    """Immutable source-to-markup transform for one Pygments style."""

    __slots__ = ("_formatter", "style")

    def __init__(self, style: str, formatter: FoFormatter) -> None:
        self.style = style
        self._formatter = formatter

    @classmethod
    def build(cls, style: str = DEFAULT_PYGMENTS_STYLE) -> HighlightTemplate:
        """Resolve ``style`` and compile its token attributes.

        Raises
        ------
        HighlighterConfigError
            If the style cannot be found or loaded.
        """
        try:
            formatter = FoFormatter(style=style)
        except ClassNotFound as exc:
            msg = f"Failed to load highlight rules for style '{style}'."
            raise HighlighterConfigError(msg) from exc
        return cls(style, formatter)

    def transform(self, document: str) -> str:
        """Highlight a wrapped ``<code language="...">`` document.

        Raises
        ------
        HighlightError
            If the wrapper is not well-formed or is not a ``code`` element.
        """
        try:
            element = ElementTree.fromstring(document)  # noqa: S314
        except ElementTree.ParseError as exc:
            msg = f"Malformed code block: {exc}"
            raise HighlightError(msg) from exc
        if element.tag != "code":
            msg = f"Expected a <code> wrapper, got <{element.tag}>."
            raise HighlightError(msg)

        lexer = self._lexer(element.get("language") or DEFAULT_LANGUAGE)
        return highlight(element.text or "", lexer, self._formatter)

    @staticmethod
    def _lexer(language: str) -> Lexer:
        options = {"stripnl": False, "ensurenl": False}
        try:
            return get_lexer_by_name(language, **options)
        except ClassNotFound:
            return get_lexer_by_name("text", **options)


def shared_template(style: str = DEFAULT_PYGMENTS_STYLE) -> HighlightTemplate:
    """Return the process-wide template for ``style``, building it once.

    Raises
    ------
    HighlighterConfigError
        Propagated from the first failed build; nothing is cached.
    """
    template = _TEMPLATES.get(style)
    if template is None:
        with _TEMPLATE_LOCK:
            template = _TEMPLATES.get(style)
            if template is None:
                template = HighlightTemplate.build(style)
                _TEMPLATES[style] = template
    return template


__all__ = ["FoFormatter", "HighlightTemplate", "shared_template"]
