"""Read source documents, expanding Jinja-templated variants."""

from __future__ import annotations

import typing as typ

from jinja2 import Environment, FileSystemLoader, StrictUndefined, TemplateError

from ._constants import TEMPLATE_SUFFIX
from .errors import DocumentParseError

if typ.TYPE_CHECKING:
    import collections.abc as cabc
    from pathlib import Path


def read_source(path: Path, context: cabc.Mapping[str, typ.Any] | None = None) -> str:
    """Return the text of ``path``, rendering it first if it is a template.

    Files ending in ``.jinja`` are rendered with Jinja2, using ``context`` as
    the template variables; other files are read as UTF-8.

    Raises
    ------
    DocumentParseError
        If the file cannot be read, decoded, or rendered.
    """
    try:
        if path.name.endswith(TEMPLATE_SUFFIX):
            env = Environment(
                loader=FileSystemLoader(str(path.parent)),
                autoescape=False,  # noqa: S701 - output is markdown, not HTML
                undefined=StrictUndefined,
                keep_trailing_newline=True,
                trim_blocks=True,
                lstrip_blocks=True,
            )
            return env.get_template(path.name).render(**dict(context or {}))
        return path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError, TemplateError) as exc:
        msg = f"Failed to read source document '{path}': {exc}"
        raise DocumentParseError(msg) from exc


__all__ = ["read_source"]
