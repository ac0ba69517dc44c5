"""Syntax highlighting of verbatim blocks for the aggregate output."""

from .code import CodeBlock
from .highlighter import CodeHighlighter
from .template import FoFormatter, HighlightTemplate, shared_template

__all__ = [
    "CodeBlock",
    "CodeHighlighter",
    "FoFormatter",
    "HighlightTemplate",
    "shared_template",
]
