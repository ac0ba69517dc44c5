"""Source modules, their parsers, and document lookup.

A :class:`DocumentModule` names a content root and the file extension of the
documents stored beneath it. The :class:`ModuleRegistry` pairs each module
with the parser that turns its files into structure events and resolves TOC
references to concrete files, including the Jinja-templated variant
(``guide.md.jinja``) of a document.
"""

from __future__ import annotations

import dataclasses as dc
import typing as typ
from pathlib import Path

from ._constants import TEMPLATE_SUFFIX
from .markdown_parser import MarkdownParser

if typ.TYPE_CHECKING:
    import collections.abc as cabc

    from .sink import Sink


class DocumentParser(typ.Protocol):
    """Capability turning one source file into structure events."""

    def parse(
        self,
        path: Path,
        sink: Sink,
        context: cabc.Mapping[str, typ.Any] | None = None,
    ) -> None: ...


@dc.dataclass(slots=True, frozen=True)
class DocumentModule:
    """A family of source documents sharing a content root and extension.

    Attributes
    ----------
    name : str
        Module identifier, also used to look up its parser.
    source_directory : str
        Content root relative to the render's base directory.
    extension : str
        File extension of the module's documents, without the dot.
    """

    name: str
    source_directory: str
    extension: str


@dc.dataclass(slots=True, frozen=True)
class ResolvedSource:
    """A document file located for a TOC reference."""

    name: str
    path: Path
    module: DocumentModule


def _default_modules() -> list[tuple[DocumentModule, DocumentParser]]:
    return [(DocumentModule("markdown", "markdown", "md"), MarkdownParser())]


class ModuleRegistry:
    """Registered source modules and their parsers, in lookup order."""

    def __init__(
        self, modules: cabc.Iterable[tuple[DocumentModule, DocumentParser]] | None = None
    ) -> None:
        self._parsers: dict[DocumentModule, DocumentParser] = {}
        for module, parser in modules if modules is not None else _default_modules():
            self.register(module, parser)

    def register(self, module: DocumentModule, parser: DocumentParser) -> None:
        self._parsers[module] = parser

    def list_modules(self) -> list[DocumentModule]:
        return list(self._parsers)

    def parser_for(self, module: DocumentModule) -> DocumentParser:
        """Return the parser registered for ``module``.

        Raises
        ------
        KeyError
            If ``module`` was never registered.
        """
        try:
            return self._parsers[module]
        except KeyError as exc:
            msg = f"No parser registered for module '{module.name}'."
            raise KeyError(msg) from exc

    def resolve(self, href: str, base_dir: Path) -> list[ResolvedSource]:
        """Locate the files a TOC reference points at in every module.

        Parameters
        ----------
        href : str
            Reference with its extension already stripped (``"guide"``).
        base_dir : Path
            Directory the module content roots are relative to.

        Returns
        -------
        list[ResolvedSource]
            One entry per module holding either ``<href>.<ext>`` or its
            templated variant; empty when no module has the document.
        """
        found: list[ResolvedSource] = []
        for module in self.list_modules():
            root = base_dir / module.source_directory
            if not root.is_dir():
                continue
            suffix = f".{module.extension}"
            name = href + suffix
            source = root / name
            if not source.exists():
                name = (href if suffix in href else name) + TEMPLATE_SUFFIX
                source = root / name
            if source.exists():
                found.append(ResolvedSource(name=name, path=source, module=module))
        return found


def locate_documents(registry: ModuleRegistry, base_dir: Path) -> dict[str, DocumentModule]:
    """Return every source document of every module, in source order.

    Keys are document names relative to their module root, using forward
    slashes (``"guide/install.md"``). Templated variants are included under
    their full name.
    """
    documents: dict[str, DocumentModule] = {}
    for module in registry.list_modules():
        root = base_dir / module.source_directory
        if not root.is_dir():
            continue
        suffixes = (f".{module.extension}", f".{module.extension}{TEMPLATE_SUFFIX}")
        for path in sorted(root.rglob("*")):
            if path.is_file() and path.name.endswith(suffixes):
                documents[path.relative_to(root).as_posix()] = module
    return documents


__all__ = [
    "DocumentModule",
    "DocumentParser",
    "ModuleRegistry",
    "ResolvedSource",
    "locate_documents",
]
