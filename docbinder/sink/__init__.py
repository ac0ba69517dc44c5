"""Event sinks and pipeline stages producing the aggregate output."""

from .aggregate import FoAggregateSink
from .anchors import SectionAnchorStage
from .base import ForwardingSink, Sink, StageFactory, build_pipeline
from .fo import FoConfiguration, FoSink
from .highlight import HighlightStage
from .indexing import IndexingSink

__all__ = [
    "FoAggregateSink",
    "FoConfiguration",
    "FoSink",
    "ForwardingSink",
    "HighlightStage",
    "IndexingSink",
    "SectionAnchorStage",
    "Sink",
    "StageFactory",
    "build_pipeline",
]
