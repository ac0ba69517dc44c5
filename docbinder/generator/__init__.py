"""Render document sets into aggregate XSL-FO and PDF output."""

from .context import RenderContext
from .layout import FopLayoutEngine, LayoutEngine, check_well_formed
from .renderer import AggregateRenderer
from .toc_builder import TocBuilder

__all__ = [
    "AggregateRenderer",
    "FopLayoutEngine",
    "LayoutEngine",
    "RenderContext",
    "TocBuilder",
    "check_well_formed",
]
