"""Cyclopts CLI entrypoint for binding documentation sets into PDF.

The ``binder`` console script defined here reads a ``binder.yaml``
descriptor, merges the documents it names into one XSL-FO file with a
numbered table of contents, and hands the markup to Apache FOP.

Examples
--------
Render the descriptor in the current directory:

>>> from docbinder.cli import main
>>> main()  # doctest: +SKIP

Write only the markup, with the TOC at the end:

>>> from docbinder.cli import app
>>> app(
...     ["render", "--generate-toc", "end", "--no-pdf"]
... )  # doctest: +SKIP
"""

from __future__ import annotations

import logging
import typing as typ
from pathlib import Path

import cyclopts
from cyclopts import App, Parameter

from .config import load_binder_config
from .generator import AggregateRenderer, FopLayoutEngine
from .markdown_parser import MarkdownParser
from .modules import ModuleRegistry, locate_documents

if typ.TYPE_CHECKING:
    from .generator import LayoutEngine

DEFAULT_CONFIG = Path("binder.yaml")
LOG_FORMAT = "[%(levelname)s] %(name)s: %(message)s"

app = App(name="binder", config=cyclopts.config.Env("BINDER_", command=False))  # type: ignore[unknown-argument]


def _format_path(path: Path) -> str:
    """Return a cwd-relative path when possible, otherwise the absolute path."""
    if path.is_absolute():
        try:
            return str(path.relative_to(Path.cwd()))
        except ValueError:  # pragma: no cover - fallback for different roots
            return str(path)
    return str(path)


def _configure_logging(*, verbose: bool, debug: bool) -> None:
    if debug:
        level = logging.DEBUG
    elif verbose:
        level = logging.INFO
    else:
        level = logging.WARNING
    logging.basicConfig(level=level, format=LOG_FORMAT)


@app.command(help="Merge the configured documents into one XSL-FO file and PDF.")
def render(
    *,
    config: typ.Annotated[
        Path, Parameter(help="Path to the binder descriptor", env_var="BINDER_CONFIG")
    ] = DEFAULT_CONFIG,
    output_dir: typ.Annotated[
        Path | None, Parameter(help="Override the output folder")
    ] = None,
    generate_toc: typ.Annotated[
        str | None, Parameter(help="TOC position: start, end or none")
    ] = None,
    individual: typ.Annotated[
        bool, Parameter(help="Render every document into its own file")
    ] = False,
    pdf: typ.Annotated[
        bool, Parameter(help="Convert the markup to PDF with FOP")
    ] = True,
    fop: typ.Annotated[
        str, Parameter(help="FOP executable name or path", env_var="BINDER_FOP")
    ] = "fop",
    verbose: typ.Annotated[bool, Parameter(help="Log progress messages")] = False,
    debug: typ.Annotated[bool, Parameter(help="Log debugging detail")] = False,
) -> None:
    """Render the documents named by a binder descriptor.

    Parameters
    ----------
    config : Path, optional
        Path to the ``binder.yaml`` configuration file.
    output_dir : Path or None, optional
        Directory receiving the output; defaults to the descriptor's
        ``output_dir``.
    generate_toc : str or None, optional
        Override the descriptor's TOC position.
    individual : bool, optional
        Render each document on its own instead of one aggregate.
    pdf : bool, optional
        Run the layout engine after writing the markup.
    fop : str, optional
        FOP launcher used for the PDF conversion.
    verbose, debug : bool, optional
        Logging verbosity.

    Returns
    -------
    None
        Writes the rendered files and prints their paths.

    Raises
    ------
    DocumentRendererError
        If highlighting cannot be configured or PDF conversion fails.
    """
    _configure_logging(verbose=verbose, debug=debug)
    binder = load_binder_config(config)
    if generate_toc is not None:
        binder.generate_toc = generate_toc

    parser = MarkdownParser()
    registry = ModuleRegistry((module, parser) for module in binder.modules)
    layout_engine: LayoutEngine | None = FopLayoutEngine(fop) if pdf else None
    renderer = AggregateRenderer(
        registry,
        base_dir=binder.base_dir,
        layout_engine=layout_engine,
        pygments_style=binder.pygments_style,
    )

    documents = locate_documents(registry, binder.base_dir)
    target_dir = output_dir or binder.output_dir
    if individual:
        written = renderer.render_individual(documents, target_dir, binder.options())
    else:
        written = renderer.render(documents, target_dir, binder.model, binder.options())
    for path in written:
        print(f"wrote {_format_path(path)}")


def main() -> None:
    """Invoke the Cyclopts application that powers the ``binder`` command.

    Examples
    --------
    >>> main()  # doctest: +SKIP
    """
    app()


if __name__ == "__main__":  # pragma: no cover - manual invocation helper
    main()
