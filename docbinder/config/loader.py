"""Load binder configuration YAML into typed dataclasses."""

from __future__ import annotations

import typing as typ
from pathlib import Path

from ruamel.yaml import YAML

from docbinder._constants import (
    DEFAULT_OUTPUT_NAME,
    DEFAULT_PYGMENTS_STYLE,
    DEFAULT_TOC_POSITION,
)
from docbinder.models import DocumentModel

from .helpers import _build_modules, _build_toc_descriptor, _optional_str
from .models import BinderConfig


def load_binder_config(path: Path) -> BinderConfig:
    """Load the YAML descriptor of an aggregate document.

    Relative ``base_dir`` and ``output_dir`` values are resolved against the
    directory holding the configuration file.

    Parameters
    ----------
    path : Path
        Filesystem path to the YAML configuration (for example,
        ``binder.yaml``).

    Returns
    -------
    BinderConfig
        Parsed configuration with defaults applied.

    Raises
    ------
    FileNotFoundError
        If the configuration file does not exist at ``path``.
    TypeError
        If the top-level YAML structure is not a mapping.
    BinderConfigError
        If a section has the wrong shape or a required field is missing.
    YAMLError
        If the YAML content cannot be parsed by the underlying loader.

    Examples
    --------
    >>> from pathlib import Path
    >>> from docbinder.config import load_binder_config
    >>> config = load_binder_config(Path("binder.yaml"))  # doctest: +SKIP
    >>> config.model.output_name  # doctest: +SKIP
    'target'
    """
    if not path.exists():
        msg = f"Configuration file '{path}' not found."
        raise FileNotFoundError(msg)

    loader = YAML(typ="safe")
    loader.version = (1, 2)
    with path.open("r", encoding="utf-8") as handle:
        loaded = loader.load(handle) or {}
    if not isinstance(loaded, dict):
        msg = "Top-level YAML structure must be a mapping."
        raise TypeError(msg)
    raw: dict[str, typ.Any] = dict(loaded)

    root = path.parent
    base_dir = root / (_optional_str(raw.get("base_dir")) or ".")
    output_dir = root / (_optional_str(raw.get("output_dir")) or "output")

    model = DocumentModel(
        title=_optional_str(raw.get("title")) or "",
        subtitle=_optional_str(raw.get("subtitle")) or "",
        author=_optional_str(raw.get("author")) or "",
        date=_optional_str(raw.get("date")) or "",
        output_name=_optional_str(raw.get("output_name")) or DEFAULT_OUTPUT_NAME,
        toc=_build_toc_descriptor(raw.get("toc")),
    )

    config = BinderConfig(
        base_dir=base_dir,
        output_dir=output_dir,
        model=model,
        generate_toc=_optional_str(raw.get("generate_toc")) or DEFAULT_TOC_POSITION,
        pygments_style=_optional_str(raw.get("pygments_style")) or DEFAULT_PYGMENTS_STYLE,
    )
    modules = _build_modules(raw.get("modules"))
    if modules is not None:
        config.modules = modules
    return config


__all__ = ["load_binder_config"]
