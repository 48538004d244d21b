"""
Graph assembly helpers for the nightcore pipeline.

Each submodule owns one slice of the GStreamer graph: element creation, the
static effect chain, the dynamic decoder link, the output tail and the
equalizer settings.
"""

from __future__ import annotations

__all__ = [
    "AudioGraph",
    "DiscoveredPad",
    "ElementFactory",
    "ElementUnavailable",
    "GraphBuilder",
    "GraphConstructionError",
    "GraphLinkError",
    "OutputBranch",
    "PadLinker",
    "build_graph",
    "build_output_branch",
    "configure_equalizer",
]

from .factory import ElementFactory, ElementUnavailable, GraphConstructionError
from .equalizer import configure_equalizer
from .pads import DiscoveredPad, PadLinker
from .outputs import OutputBranch, build_output_branch
from .builder import AudioGraph, GraphBuilder, GraphLinkError, build_graph
