"""Bind sets of Markdown documents into one cross-referenced PDF.

This package exposes the CLI entry points used by the ``binder`` console
script, which merges the documents named by a ``binder.yaml`` descriptor into
XSL-FO with a numbered table of contents and converts it with Apache FOP.

Exports
-------
- ``app``: Cyclopts application entry for subcommands.
- ``main``: Convenience function that invokes the Cyclopts app.

Examples
--------
>>> from docbinder import main
>>> main()  # doctest: +SKIP
>>> from docbinder import app
>>> callable(app)
True
"""

from __future__ import annotations

from .cli import app, main

__all__ = ["app", "main"]
