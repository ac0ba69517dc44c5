"""Render a document set into one aggregate XSL-FO file and its PDF.

:class:`AggregateRenderer` drives a render through its fixed sequence: cover
page, TOC at the start when requested, every document merged as a chapter
(in TOC order when a TOC is declared, otherwise in source order), TOC at the
end when requested. Document events flow through the anchor and highlight
stages before reaching the aggregate sink.

Example
-------
>>> from pathlib import Path
>>> from docbinder.generator import AggregateRenderer
>>> from docbinder.models import DocumentModel
>>> from docbinder.modules import ModuleRegistry, locate_documents
>>> registry = ModuleRegistry()
>>> renderer = AggregateRenderer(registry, base_dir=Path("docs"))  # doctest: +SKIP
>>> documents = locate_documents(registry, Path("docs"))  # doctest: +SKIP
>>> renderer.render(documents, Path("out"), DocumentModel(title="Manual"))  # doctest: +SKIP
[PosixPath('out/target.fo')]
"""

from __future__ import annotations

import functools
import logging
import typing as typ

from docbinder._constants import PAGE_CONFIG_FILENAME, TOC_END, TOC_START
from docbinder.errors import DocumentParseError, MarkupStructureError
from docbinder.highlight import CodeHighlighter
from docbinder.modules import ModuleRegistry
from docbinder.references import document_href
from docbinder.sink import (
    FoAggregateSink,
    FoConfiguration,
    FoSink,
    ForwardingSink,
    HighlightStage,
    SectionAnchorStage,
    build_pipeline,
)

from .context import RenderContext
from .toc_builder import TocBuilder

if typ.TYPE_CHECKING:
    import collections.abc as cabc
    from pathlib import Path

    from docbinder.models import DocumentModel, TocDescriptor, TocItem
    from docbinder.modules import DocumentModule
    from docbinder.sink import Sink, StageFactory

    from .layout import LayoutEngine

logger = logging.getLogger(__name__)


def _toc_missing(toc: TocDescriptor | None) -> bool:
    return toc is None or toc.items is None


def _output_stem(name: str, extension: str) -> str:
    """Return ``name`` cut before its module extension (``a/b.md`` -> ``a/b``)."""
    index = name.lower().find(f".{extension.lower()}")
    return name[:index] if index != -1 else name


class AggregateRenderer:
    """Merge source documents into a single cross-referenced output.

    Parameters
    ----------
    registry : ModuleRegistry, optional
        Source modules and their parsers; defaults to the Markdown module.
    base_dir : Path
        Directory the module content roots are relative to.
    layout_engine : LayoutEngine, optional
        Converter producing the PDF; when omitted only markup is written.
    highlighter : CodeHighlighter, optional
        Shared code highlighter; built for ``pygments_style`` when omitted.
    pygments_style : str, optional
        Style used when building the default highlighter.

    Raises
    ------
    HighlighterConfigError
        If the default highlighter cannot load ``pygments_style``.
    """

    def __init__(
        self,
        registry: ModuleRegistry | None = None,
        *,
        base_dir: Path,
        layout_engine: LayoutEngine | None = None,
        highlighter: CodeHighlighter | None = None,
        pygments_style: str | None = None,
    ) -> None:
        self.registry = registry or ModuleRegistry()
        self.base_dir = base_dir
        self.layout_engine = layout_engine
        if highlighter is None:
            highlighter = (
                CodeHighlighter(style=pygments_style) if pygments_style else CodeHighlighter()
            )
        self.highlighter = highlighter

    # ------------------------------------------------------------------
    # Aggregate render
    # ------------------------------------------------------------------

    def render(
        self,
        documents: cabc.Mapping[str, DocumentModule],
        output_dir: Path,
        model: DocumentModel | None = None,
        options: cabc.Mapping[str, typ.Any] | None = None,
    ) -> list[Path]:
        """Render ``documents`` into ``<output_name>.fo`` and its PDF.

        Parameters
        ----------
        documents : Mapping[str, DocumentModule]
            Source documents keyed by name relative to their module root, in
            source order (see :func:`~docbinder.modules.locate_documents`).
        output_dir : Path
            Directory receiving the output files.
        model : DocumentModel, optional
            Cover metadata and TOC descriptor; without a model every document
            is rendered on its own via :meth:`render_individual`.
        options : Mapping[str, Any], optional
            Render options such as ``generateTOC``.

        Returns
        -------
        list[Path]
            The markup file, followed by the PDF when a layout engine is set.

        Raises
        ------
        LayoutConversionError
            If the layout engine rejects the markup.
        """
        if model is None:
            logger.debug("No document model, generating all documents individually.")
            return self.render_individual(documents, output_dir, options)

        markup_file = output_dir / f"{model.output_name}.fo"
        markup_file.parent.mkdir(parents=True, exist_ok=True)
        configuration = self._page_configuration(output_dir)
        context = RenderContext(options=dict(options or {}))
        descriptor = None if _toc_missing(model.toc) else model.toc

        try:
            toc = None
            if descriptor is not None:
                toc = TocBuilder(self.registry, self.base_dir, context).build(descriptor)
            with markup_file.open("w", encoding="utf-8") as stream:
                sink = FoAggregateSink(
                    stream,
                    configuration,
                    model=model,
                    toc=toc,
                    toc_position=context.toc_position,
                    numbered=toc is not None,
                )
                pipeline = build_pipeline(sink, self._stages(context))
                pipeline.begin_document()
                sink.cover_page()
                if context.toc_position == TOC_START:
                    sink.toc()

                if descriptor is None:
                    logger.info("No TOC is defined in the document descriptor. Merging all documents.")
                    self._merge_all(documents, sink, pipeline, context)
                else:
                    logger.debug("Using TOC defined in the document descriptor.")
                    self._merge_items(descriptor.items or [], sink, pipeline, context)

                if context.toc_position == TOC_END:
                    sink.toc()
                pipeline.end_document()
        finally:
            context.reset()

        return [markup_file, *self._convert(markup_file, markup_file.with_suffix(".pdf"))]

    def _stages(self, context: RenderContext) -> list[StageFactory]:
        # Anchors are installed before verbatim text is substituted.
        return [
            functools.partial(SectionAnchorStage, counter=context.title_anchors),
            functools.partial(HighlightStage, highlighter=self.highlighter),
        ]

    def _merge_all(
        self,
        documents: cabc.Mapping[str, DocumentModule],
        sink: FoAggregateSink,
        pipeline: Sink,
        context: RenderContext,
    ) -> None:
        for name, module in documents.items():
            sink.chapter(name)
            path = self.base_dir / module.source_directory / name
            self._parse(path, module, sink, pipeline, context)

    def _merge_items(
        self,
        items: cabc.Sequence[TocItem],
        sink: FoAggregateSink,
        pipeline: Sink,
        context: RenderContext,
        *,
        nested: bool = False,
    ) -> None:
        for item in items:
            if item.ref is None:
                logger.info("No ref defined for TOC item '%s'.", item.name)
                continue

            sources = self.registry.resolve(document_href(item.ref), self.base_dir)
            if not sources:
                logger.warning("Document '%s' for TOC item '%s' not found, skipping.", item.ref, item.name)
                if not nested:
                    sink.skip_chapter()
            for index, source in enumerate(sources):
                sink.chapter(source.name, item.name, nested=nested or index > 0)
                self._parse(source.path, source.module, sink, pipeline, context)

            self._merge_items(item.items, sink, pipeline, context, nested=True)

    def _parse(
        self,
        path: Path,
        module: DocumentModule,
        sink: FoAggregateSink,
        pipeline: Sink,
        context: RenderContext,
    ) -> None:
        parser = self.registry.parser_for(module)
        try:
            parser.parse(path, pipeline, context.options)
        except (DocumentParseError, MarkupStructureError) as exc:
            logger.error("Skipping the rest of '%s': %s", path, exc)  # noqa: TRY400
            _reset(pipeline)
            sink.chapter_()

    # ------------------------------------------------------------------
    # Individual render
    # ------------------------------------------------------------------

    def render_individual(
        self,
        documents: cabc.Mapping[str, DocumentModule],
        output_dir: Path,
        options: cabc.Mapping[str, typ.Any] | None = None,
    ) -> list[Path]:
        """Render each document into its own markup file and PDF.

        Output names mirror the document names without their module
        extension, so ``guide/install.md`` becomes ``guide/install.fo``.
        """
        configuration = self._page_configuration(output_dir)
        stages = [functools.partial(HighlightStage, highlighter=self.highlighter)]
        written: list[Path] = []
        for name, module in documents.items():
            stem = _output_stem(name, module.extension)
            markup_file = output_dir / f"{stem}.fo"
            markup_file.parent.mkdir(parents=True, exist_ok=True)
            source = self.base_dir / module.source_directory / name

            with markup_file.open("w", encoding="utf-8") as stream:
                pipeline = build_pipeline(FoSink(stream, configuration), stages)
                pipeline.begin_document()
                try:
                    self.registry.parser_for(module).parse(source, pipeline, options)
                except (DocumentParseError, MarkupStructureError) as exc:
                    logger.error("Skipping the rest of '%s': %s", source, exc)  # noqa: TRY400
                    _reset(pipeline)
                pipeline.end_document()

            written.append(markup_file)
            written.extend(self._convert(markup_file, output_dir / f"{stem}.pdf"))
        return written

    # ------------------------------------------------------------------
    # Shared helpers
    # ------------------------------------------------------------------

    def _page_configuration(self, output_dir: Path) -> FoConfiguration:
        configuration = FoConfiguration()
        page_config = output_dir / PAGE_CONFIG_FILENAME
        if page_config.exists():
            logger.debug("Using page configuration: %s", page_config)
            configuration.load(page_config)
        return configuration

    def _convert(self, markup_file: Path, pdf_file: Path) -> list[Path]:
        if self.layout_engine is None:
            return []
        self.layout_engine.convert(markup_file, pdf_file)
        return [pdf_file]


def _reset(pipeline: Sink) -> None:
    if isinstance(pipeline, ForwardingSink):
        pipeline.reset()


__all__ = ["AggregateRenderer"]
