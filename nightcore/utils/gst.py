"""
GStreamer import guard and small helpers shared by the runtime adapter.

PyGObject is optional at import time so the graph logic can be exercised
without the native stack; :func:`require_gstreamer` turns its absence into a
proper error once something actually needs the runtime.
"""

from __future__ import annotations

import logging
from typing import Any, Optional

LOG = logging.getLogger(__name__)

try:  # pragma: no cover - availability depends on host environment
    import gi  # type: ignore

    gi.require_version("Gst", "1.0")
    from gi.repository import GLib, Gst  # type: ignore
except (ImportError, ValueError) as exc:  # pragma: no cover
    GLib = None  # type: ignore[assignment]
    Gst = None  # type: ignore[assignment]
    GST_IMPORT_ERROR: Optional[BaseException] = exc
else:  # pragma: no cover - executed only when GStreamer is present
    GST_IMPORT_ERROR = None

_GST_INITIALISED = False


class PipelineUnavailableError(RuntimeError):
    """Raised when the pipeline cannot be materialised due to missing dependencies."""


def is_available() -> bool:
    return Gst is not None


def require_gstreamer() -> None:
    if Gst is None:  # pragma: no cover - runtime guard
        raise PipelineUnavailableError(
            "GStreamer runtime is not available. Install the system GStreamer 1.x "
            "libraries and plugins, then `pip install nightcore[gst]` for PyGObject."
        ) from GST_IMPORT_ERROR


def ensure_initialised() -> None:
    require_gstreamer()
    global _GST_INITIALISED
    if _GST_INITIALISED:
        return
    Gst.init(None)
    _GST_INITIALISED = True
    LOG.debug("Initialised %s.", Gst.version_string())


def caps_media_type(caps: Any) -> Optional[str]:
    """
    Return the media type of the first structure in ``caps`` (e.g. ``audio/x-raw``).
    """

    if not caps or caps.get_size() == 0:
        return None
    structure = caps.get_structure(0)
    if not structure:
        return None
    return structure.get_name()
