"""
Output branch selection.

The tail of the graph is fixed once at construction time: either an MP3
encoder feeding a file writer, or the platform's automatic audio sink.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, List

from ..config import OutputMode

if TYPE_CHECKING:  # pragma: no cover - typing aid
    from .builder import GraphBuilder

LOG = logging.getLogger(__name__)

ENCODER_FACTORY = "lamemp3enc"
FILE_SINK_FACTORY = "filesink"
PLAYBACK_SINK_FACTORY = "autoaudiosink"


@dataclass
class OutputBranch:
    mode: OutputMode
    labels: List[str] = field(default_factory=list)


def build_output_branch(builder: "GraphBuilder", upstream: str) -> OutputBranch:
    """
    Create the sink subgraph for the configured output mode and link it after ``upstream``.
    """

    config = builder.config
    mode = config.output_mode

    if mode is OutputMode.FILE:
        builder.make(ENCODER_FACTORY, "mp3enc")
        builder.make(FILE_SINK_FACTORY, "filesink")
        builder.set_property("filesink", "location", config.output_path)
        branch = OutputBranch(mode=mode, labels=["mp3enc", "filesink"])
    else:
        builder.make(PLAYBACK_SINK_FACTORY, "autosink")
        branch = OutputBranch(mode=mode, labels=["autosink"])

    builder.link_chain(upstream, *branch.labels)
    LOG.debug("Built %s output branch: %s", mode.value, ", ".join(branch.labels))
    return branch
