r"""Parse Markdown documents into structure events.

Markdown is converted with Python-Markdown and the resulting element tree is
walked to drive a :class:`~docbinder.sink.Sink`. Fenced code blocks keep
their language by becoming verbatim text whose first line is an ``@lang``
directive, which the highlighting stage uses to pick a lexer.

Example
-------
>>> from docbinder.markdown_parser import normalize_fenced_blocks
>>> print(normalize_fenced_blocks("  ```rust,no_run\n  fn main() {}\n  ```"))
```rust
  fn main() {}
```
"""

from __future__ import annotations

import contextlib
import html
import re
import typing as typ
from xml.etree.ElementTree import Element

from markdown import Markdown, util
from markdown.extensions import Extension
from markdown.treeprocessors import Treeprocessor

from ._constants import LANG_DIRECTIVE
from .templating import read_source

if typ.TYPE_CHECKING:
    import collections.abc as cabc
    from pathlib import Path

    from .sink import Sink

FENCED_INDENT_PATTERN = re.compile(r"^[ ]{1,3}([`~]{3,})", re.MULTILINE)
FENCE_LABEL_PATTERN = re.compile(
    r"^([`~]{3,})([A-Za-z0-9_+#.-]+)?(,[^\r\n]+)$", re.MULTILINE
)
STASHED_CODE_PATTERN = re.compile(
    r"^<pre[^>]*><code(?P<attrs>[^>]*)>(?P<code>.*)</code></pre>$", re.DOTALL
)
CLASS_ATTRIBUTE_PATTERN = re.compile(r'class="([^"]*)"')
LANGUAGE_CLASS_PATTERN = re.compile(r"(?:^|\s)language-([A-Za-z0-9_+#.-]+)")
TAG_PATTERN = re.compile(r"<[^>]+>")
ESCAPED_CHAR_PATTERN = re.compile(f"{util.STX}([0-9]+){util.ETX}")

HEADING_LEVELS = {f"h{level}": level for level in range(1, 7)}
BLOCK_TAGS = frozenset(
    {"p", "pre", "ul", "ol", "blockquote", "table", "hr", "div", *HEADING_LEVELS}
)


def normalize_fenced_blocks(text: str) -> str:
    """Move indented fences to column zero and drop fence label extras.

    ``rust,no_run`` keeps only the language name.
    """
    without_indent = FENCED_INDENT_PATTERN.sub(r"\1", text)

    def _strip_labels(match: re.Match[str]) -> str:
        fence, language, _extras = match.groups()
        return f"{fence}{language or ''}"

    return FENCE_LABEL_PATTERN.sub(_strip_labels, without_indent)


class _CaptureTreeprocessor(Treeprocessor):
    """Keep a reference to the converted tree before serialization."""

    def __init__(self, md: Markdown, roots: list[Element]) -> None:
        super().__init__(md)
        self.roots = roots

    def run(self, root: Element) -> None:
        self.roots.append(root)


class _CaptureExtension(Extension):
    def __init__(self, roots: list[Element]) -> None:
        super().__init__()
        self.roots = roots

    def extendMarkdown(self, md: Markdown) -> None:  # type: ignore[override]  # noqa: N802
        md.treeprocessors.register(
            _CaptureTreeprocessor(md, self.roots), "docbinder_capture", 15
        )


class MarkdownParser:
    """Turn Markdown files into structure events.

    Parameters
    ----------
    extensions : Sequence[str], optional
        Python-Markdown extensions enabled during conversion.
    """

    default_extensions: typ.ClassVar[tuple[str, ...]] = (
        "fenced_code",
        "attr_list",
        "tables",
        "sane_lists",
    )

    def __init__(self, extensions: cabc.Sequence[str] | None = None) -> None:
        self.extensions = tuple(extensions or self.default_extensions)

    def parse(
        self,
        path: Path,
        sink: Sink,
        context: cabc.Mapping[str, typ.Any] | None = None,
    ) -> None:
        """Parse the document at ``path`` into ``sink``.

        Raises
        ------
        DocumentParseError
            If the document cannot be read or its template fails to render.
        """
        self.parse_text(read_source(path, context), sink)

    def parse_text(self, text: str, sink: Sink) -> None:
        """Parse Markdown ``text`` into ``sink``."""
        roots: list[Element] = []
        md = Markdown(extensions=[*self.extensions, _CaptureExtension(roots)])
        md.convert(normalize_fenced_blocks(text))
        root = roots[0] if roots else Element("div")
        _EventEmitter(sink, md).emit(root)


class _EventEmitter:
    """Walk a converted Markdown tree, emitting sink events."""

    def __init__(self, sink: Sink, md: Markdown) -> None:
        self.sink = sink
        self.stash = md.htmlStash
        self._open_sections: list[int] = []

    def emit(self, root: Element) -> None:
        for child in root:
            self._block(child)
        self._close_sections()

    def _close_sections(self) -> None:
        while self._open_sections:
            self.sink.section_(self._open_sections.pop())

    @contextlib.contextmanager
    def _section_scope(self) -> cabc.Iterator[None]:
        """Keep sections opened inside a container from outliving it."""
        outer, self._open_sections = self._open_sections, []
        yield
        self._close_sections()
        self._open_sections = outer

    # Text restoration -------------------------------------------------

    def _restore(self, text: str | None) -> str:
        if not text:
            return ""
        text = util.HTML_PLACEHOLDER_RE.sub(self._unstash, text)
        return ESCAPED_CHAR_PATTERN.sub(lambda m: chr(int(m.group(1))), text)

    def _unstash(self, match: re.Match[str]) -> str:
        index = int(match.group(1))
        if index >= len(self.stash.rawHtmlBlocks):
            return ""
        raw = self.stash.rawHtmlBlocks[index]
        if not isinstance(raw, str):
            raw = "".join(raw.itertext())
        # Raw HTML is not representable in the output; keep its text only.
        return html.unescape(TAG_PATTERN.sub("", raw))

    def _text(self, text: str | None) -> None:
        restored = self._restore(text)
        if restored:
            self.sink.text(restored)

    def _plain(self, element: Element) -> str:
        parts = [self._restore(element.text)]
        for child in element:
            if child.tag == "code":
                parts.append(html.unescape("".join(child.itertext())))
            else:
                parts.append(self._plain(child))
            parts.append(self._restore(child.tail))
        return "".join(parts)

    # Blocks -----------------------------------------------------------

    def _block(self, element: Element) -> None:
        tag = element.tag
        sink = self.sink
        if tag in HEADING_LEVELS:
            self._heading(element, HEADING_LEVELS[tag])
        elif tag == "pre":
            code = element.find("code")
            source = "".join((code if code is not None else element).itertext())
            classes = code.get("class", "") if code is not None else ""
            self._verbatim(html.unescape(source), classes)
        elif tag == "p" and (stashed := self._stashed_code(element)) is not None:
            self._verbatim(*stashed)
        elif tag in ("ul", "ol"):
            self._list(element, numbered=tag == "ol")
        elif tag in ("blockquote", "div"):
            self._text_block(element.text)
            for child in element:
                self._block(child)
        elif tag == "table":
            self._table(element)
        elif tag == "hr":
            sink.horizontal_rule()
        else:
            sink.paragraph()
            self._inline(element)
            sink.paragraph_()

    def _stashed_code(self, element: Element) -> tuple[str, str] | None:
        """Return the source and classes of a fenced block stashed as raw HTML."""
        if len(element) or not element.text:
            return None
        match = util.HTML_PLACEHOLDER_RE.fullmatch(element.text.strip())
        if match is None or int(match.group(1)) >= len(self.stash.rawHtmlBlocks):
            return None
        raw = self.stash.rawHtmlBlocks[int(match.group(1))]
        code = STASHED_CODE_PATTERN.match(raw) if isinstance(raw, str) else None
        if code is None:
            return None
        classes = CLASS_ATTRIBUTE_PATTERN.search(code["attrs"])
        return html.unescape(code["code"]), classes.group(1) if classes else ""

    def _verbatim(self, source: str, classes: str) -> None:
        language = LANGUAGE_CLASS_PATTERN.search(classes)
        if language is not None:
            source = f"{LANG_DIRECTIVE} {language.group(1)}\n{source}"
        self.sink.verbatim()
        self.sink.text(source)
        self.sink.verbatim_()

    def _text_block(self, text: str | None) -> None:
        if text and text.strip():
            self.sink.paragraph()
            self._text(text)
            self.sink.paragraph_()

    def _heading(self, element: Element, level: int) -> None:
        sink = self.sink
        while self._open_sections and self._open_sections[-1] >= level:
            sink.section_(self._open_sections.pop())
        sink.section(level)
        self._open_sections.append(level)

        sink.section_title(level)
        anchor = element.get("id")
        if anchor:
            sink.anchor(anchor)
            sink.anchor_()
        title = self._plain(element).strip()
        if title:
            sink.text(title)
        sink.section_title_(level)

    def _list(self, element: Element, *, numbered: bool) -> None:
        sink = self.sink
        opener, closer = (
            (sink.numbered_list, sink.numbered_list_)
            if numbered
            else (sink.bullet_list, sink.bullet_list_)
        )
        opener()
        for item in element:
            if item.tag != "li":
                continue
            sink.list_item()
            with self._section_scope():
                self._mixed(item)
            sink.list_item_()
        closer()

    def _mixed(self, element: Element) -> None:
        if not any(child.tag in BLOCK_TAGS for child in element):
            self._inline(element)
            return
        if element.text and element.text.strip():
            self._text(element.text)
        for child in element:
            if child.tag in BLOCK_TAGS:
                self._block(child)
                if child.tail and child.tail.strip():
                    self._text(child.tail)
            else:
                self._inline_child(child)

    def _table(self, element: Element) -> None:
        sink = self.sink
        sink.table()
        for row in element.iter("tr"):
            sink.table_row()
            for cell in row:
                if cell.tag not in ("th", "td"):
                    continue
                sink.table_cell(header=cell.tag == "th")
                self._inline(cell)
                sink.table_cell_()
            sink.table_row_()
        sink.table_()

    # Inline content ---------------------------------------------------

    def _inline(self, element: Element) -> None:
        self._text(element.text)
        for child in element:
            self._inline_child(child)

    def _inline_child(self, child: Element) -> None:
        sink = self.sink
        tag = child.tag
        if tag in ("strong", "b"):
            sink.bold()
            self._inline(child)
            sink.bold_()
        elif tag in ("em", "i"):
            sink.italic()
            self._inline(child)
            sink.italic_()
        elif tag == "code":
            sink.monospaced()
            sink.text(html.unescape("".join(child.itertext())))
            sink.monospaced_()
        elif tag == "a":
            self._link(child)
        elif tag == "br":
            sink.line_break()
        elif tag == "img":
            self._text(child.get("alt"))
        else:
            self._inline(child)
        self._text(child.tail)

    def _link(self, element: Element) -> None:
        sink = self.sink
        href = element.get("href")
        name = element.get("name") or element.get("id")
        if href:
            sink.link(href)
            self._inline(element)
            sink.link_()
        elif name:
            sink.anchor(name)
            self._inline(element)
            sink.anchor_()
        else:
            self._inline(element)


__all__ = ["MarkdownParser", "normalize_fenced_blocks"]
