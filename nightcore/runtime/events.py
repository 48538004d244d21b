"""
Status events delivered from the pipeline bus to the lifecycle controller.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional, Union


@dataclass(frozen=True, slots=True)
class EndOfStream:
    source: Optional[str] = None


@dataclass(frozen=True, slots=True)
class StreamError:
    message: str
    debug: Optional[str] = None
    source: Optional[str] = None


@dataclass(frozen=True, slots=True)
class Interrupted:
    """The process received a termination signal while the graph was running."""

    signum: int


StatusEvent = Union[EndOfStream, StreamError, Interrupted]
