"""Escaping helpers for the XSL-FO output stream."""

from __future__ import annotations

import typing as typ
from html import escape

SYMBOL_FONT_FAMILY = "Symbol"
# Glyph ranges the default page typefaces cannot draw.
SYMBOL_FONT_RANGES: tuple[tuple[int, int], ...] = (
    (0x0391, 0x03A9),  # Greek capitals
    (0x03B1, 0x03C9),  # Greek small letters
    (0x03D1, 0x03D6),
    (0x2190, 0x21FF),  # arrows
    (0x2200, 0x22FF),  # mathematical operators
    (0x2320, 0x2321),
    (0x25CA, 0x25CA),
    (0x2660, 0x2666),  # card suits
)


def escape_markup(text: str) -> str:
    """Return ``text`` with markup-significant characters escaped."""
    return escape(text, quote=True)


def needs_symbol_font(char: str) -> bool:
    """Return True when ``char`` has to be set in the symbol typeface."""
    code = ord(char)
    return any(low <= code <= high for low, high in SYMBOL_FONT_RANGES)


def symbol_inline(char: str) -> str:
    """Wrap a single glyph in an inline switching to the symbol typeface."""
    return f'<fo:inline font-family="{SYMBOL_FONT_FAMILY}">{char}</fo:inline>'


def escape_with_symbols(
    text: str, needs_special_font: typ.Callable[[str], bool]
) -> str:
    """Escape ``text`` and wrap every glyph flagged by ``needs_special_font``."""
    return "".join(
        symbol_inline(char) if needs_special_font(char) else char
        for char in escape_markup(text)
    )


__all__ = [
    "SYMBOL_FONT_FAMILY",
    "SYMBOL_FONT_RANGES",
    "escape_markup",
    "escape_with_symbols",
    "needs_symbol_font",
    "symbol_inline",
]
