"""Load and validate binder configuration YAML.

This subpackage parses a ``binder.yaml`` descriptor naming the cover
metadata, the source modules, the requested TOC position, and the declared
table of contents, and produces a :class:`BinderConfig` ready for rendering.

Examples
--------
>>> from pathlib import Path
>>> from docbinder.config import load_binder_config
>>> config = load_binder_config(Path("docs/binder.yaml"))  # doctest: +SKIP
>>> [item.name for item in config.model.toc.items]  # doctest: +SKIP
['Introduction', 'Guide']
"""

from .loader import load_binder_config
from .models import BinderConfig, BinderConfigError

__all__ = ["BinderConfig", "BinderConfigError", "load_binder_config"]
