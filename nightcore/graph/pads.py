"""
Dynamic linking of decoder output pads.

``decodebin`` only exposes source pads once it has parsed the container, and
it announces them from its own streaming thread.  Each announcement becomes a
:class:`DiscoveredPad` message which :class:`PadLinker` consumes: audio pads
are linked into the effect chain's entry point exactly once, everything else
is ignored.
"""

from __future__ import annotations

import logging
import threading
from dataclasses import dataclass
from typing import Any, Optional

from ..runtime.gst_adapter import MediaBackend

LOG = logging.getLogger(__name__)

AUDIO_MEDIA_PREFIX = "audio/"


@dataclass(frozen=True)
class DiscoveredPad:
    pad: Any
    media_type: Optional[str] = None

    @property
    def is_audio(self) -> bool:
        return bool(self.media_type) and self.media_type.startswith(AUDIO_MEDIA_PREFIX)


class PadLinker:
    """
    Link the first discovered audio stream to ``target``'s static sink pad.
    """

    def __init__(self, backend: MediaBackend, target: Any, sink_pad_name: str = "sink") -> None:
        self._backend = backend
        self._target = target
        self._sink_pad_name = sink_pad_name
        self._lock = threading.Lock()
        self._linked = False
        self._source: Optional[Any] = None
        self._handler_id: Optional[int] = None

    @property
    def linked(self) -> bool:
        return self._linked

    def attach(self, source: Any) -> None:
        if self._handler_id is not None:
            return
        self._source = source
        self._handler_id = self._backend.connect_pad_added(source, self._on_pad_added)

    def detach(self) -> None:
        if self._source is None or self._handler_id is None:
            return
        try:
            self._backend.disconnect(self._source, self._handler_id)
        except Exception:  # pragma: no cover - defensive
            LOG.debug("Failed to disconnect pad-added handler", exc_info=True)
        self._source = None
        self._handler_id = None

    def consume(self, message: DiscoveredPad) -> bool:
        """
        Link ``message.pad`` if it is audio and nothing is linked yet.

        Returns ``True`` only when this call made the link.
        """

        if not message.is_audio:
            LOG.debug("Ignoring non-audio stream (%s)", message.media_type or "unknown type")
            return False

        with self._lock:
            if self._linked:
                LOG.debug("Audio stream already linked; skipping %s", message.media_type)
                return False

            sink_pad = self._backend.static_pad(self._target, self._sink_pad_name)
            if sink_pad is None:
                LOG.error("Chain entry point has no '%s' pad.", self._sink_pad_name)
                return False
            if self._backend.pad_is_linked(sink_pad):
                self._linked = True
                return False
            if not self._backend.link_pads(message.pad, sink_pad):
                LOG.error("Failed to link decoded %s stream into the effect chain.", message.media_type)
                return False

            self._linked = True
        LOG.debug("Linked decoded %s stream into the effect chain.", message.media_type)
        return True

    # ----------------------------------------------------------------- helpers

    def _on_pad_added(self, pad: Any) -> None:
        self.consume(DiscoveredPad(pad=pad, media_type=self._backend.pad_media_type(pad)))
