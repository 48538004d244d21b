"""
Nightcore: speed up and brighten an audio file with GStreamer.

The package builds a fixed GStreamer graph (decode, resample, pitch/rate,
ten-band equalizer) and either encodes the result to MP3 or plays it through
the default audio output.  All signal processing is left to GStreamer
elements; the code here only assembles the graph and drives its lifecycle.
"""

from __future__ import annotations

from .config import OutputMode, RunConfig
from .runtime.controller import RunState

__all__ = [
    "OutputMode",
    "RunConfig",
    "RunState",
]
