"""
Runtime pieces: the media backend and the lifecycle controller driving it.
"""

from __future__ import annotations

from ..utils.gst import PipelineUnavailableError
from .events import EndOfStream, Interrupted, StatusEvent, StreamError
from .gst_adapter import GraphState, GStreamerBackend, MediaBackend
from .controller import InvalidTransition, LifecycleController, RunState

__all__ = [
    "EndOfStream",
    "GraphState",
    "GStreamerBackend",
    "Interrupted",
    "InvalidTransition",
    "LifecycleController",
    "MediaBackend",
    "PipelineUnavailableError",
    "RunState",
    "StatusEvent",
    "StreamError",
]
