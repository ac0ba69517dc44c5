r"""Language detection for verbatim code blocks.

Language is resolved in the following order:

1. If the first line carries a directive such as ``@lang css`` (optionally
   wrapped in a comment, ``// @lang css`` or ``<!-- @lang xml -->``), that
   language is used and the first line is removed.
2. Otherwise, text containing a closing tag marker (``</``) is treated as
   markup.
3. Anything else falls back to the default general-purpose language.

Examples
--------
>>> from docbinder.highlight.code import CodeBlock
>>> block = CodeBlock.from_source("@lang css\nbody { color: red; }")
>>> block.language, block.source
('css', 'body { color: red; }')
>>> CodeBlock.from_source("<p>hi</p>").language
'xml'
"""

from __future__ import annotations

import dataclasses as dc
import re

from docbinder._constants import DEFAULT_LANGUAGE, LANG_DIRECTIVE, MARKUP_LANGUAGE
from docbinder.markup import escape_markup

LANG_PATTERN = re.compile(re.escape(LANG_DIRECTIVE) + r"\s+(\w[\w+#-]*)")
MARKUP_MARKER = "</"
CDATA_OPEN = "<![CDATA["
CDATA_CLOSE = "]]>"


@dc.dataclass(slots=True, frozen=True)
class CodeBlock:
    """A verbatim fragment awaiting highlighting.

    Attributes
    ----------
    language : str
        Detected language name.
    source : str
        Raw code with the directive line removed.
    """

    language: str
    source: str

    @classmethod
    def from_source(cls, source: str) -> CodeBlock:
        """Detect the language of ``source`` and strip any directive line."""
        language: str | None = None
        first_line, newline, rest = source.partition("\n")
        if newline:
            match = LANG_PATTERN.search(first_line)
            if match:
                language = match.group(1)
                source = rest

        if language is None:
            language = MARKUP_LANGUAGE if MARKUP_MARKER in source else DEFAULT_LANGUAGE
        return cls(language=language, source=source)

    def to_xml(self) -> str:
        """Return the block wrapped as a small self-describing XML document.

        The code is carried in a CDATA section. Any literal ``]]>`` is split
        across two adjacent CDATA sections so the parsed text reproduces it
        verbatim.
        """
        code = self.source.replace(CDATA_CLOSE, "]]" + CDATA_CLOSE + CDATA_OPEN + ">")
        return (
            '<?xml version="1.0" encoding="utf-8"?>'
            f'<code language="{escape_markup(self.language)}">'
            f"{CDATA_OPEN}{code}{CDATA_CLOSE}</code>"
        )


__all__ = ["LANG_PATTERN", "CodeBlock"]
