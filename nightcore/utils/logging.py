"""
Logging setup for the nightcore command line tool.

Everything goes to stderr.  Records at INFO and above are printed as short
``nightcore: <message>`` diagnostics; DEBUG records keep a timestamp and the
emitting module so graph construction can be traced.
"""

from __future__ import annotations

import logging
import sys
from typing import Optional, TextIO

DEBUG_FORMAT = "[%(asctime)s] %(levelname)-8s %(name)s: %(message)s"


class DiagnosticFormatter(logging.Formatter):
    def __init__(self, prog: str = "nightcore") -> None:
        super().__init__(DEBUG_FORMAT)
        self.prog = prog

    def format(self, record: logging.LogRecord) -> str:
        if record.levelno <= logging.DEBUG:
            return super().format(record)
        text = f"{self.prog}: {record.getMessage()}"
        if record.exc_info:
            text = f"{text}\n{self.formatException(record.exc_info)}"
        return text


def configure_logging(
    level: int = logging.INFO,
    *,
    prog: str = "nightcore",
    stream: Optional[TextIO] = None,
) -> bool:
    """
    Attach a stderr diagnostic handler to the root logger, once.

    Returns ``False`` when a handler was already installed by the caller.
    """

    root = logging.getLogger()
    if root.handlers:
        return False

    handler = logging.StreamHandler(stream or sys.stderr)
    handler.setFormatter(DiagnosticFormatter(prog))
    root.addHandler(handler)
    root.setLevel(level)
    return True
