"""
Media backend contract and its GStreamer realisation.

Graph construction and the lifecycle controller only talk to a
:class:`MediaBackend`.  :class:`GStreamerBackend` maps that contract onto
PyGObject (``Gst`` elements and pads, a ``GLib`` main loop, a bus watch), and
the test-suite swaps in an in-memory implementation.
"""

from __future__ import annotations

import logging
import signal
from enum import Enum
from typing import Any, Callable, Dict, Iterable, List, Optional

from ..utils.gst import GLib, Gst, PipelineUnavailableError, caps_media_type, ensure_initialised
from .events import EndOfStream, Interrupted, StatusEvent, StreamError

LOG = logging.getLogger(__name__)

StatusCallback = Callable[[StatusEvent], None]
PadCallback = Callable[[Any], None]

TERMINATION_SIGNALS = (signal.SIGINT, signal.SIGTERM)


class GraphState(str, Enum):
    """Graph states the orchestration ever requests."""

    NULL = "null"
    PLAYING = "playing"


class MediaBackend:
    """
    Base class for media backends.

    Handles are opaque to callers; only the backend knows what a graph,
    element, pad or loop really is.
    """

    # ------------------------------------------------------------------ graph

    def new_graph(self, name: str) -> Any:
        raise NotImplementedError

    def make_element(self, type_name: str, label: str) -> Optional[Any]:
        """
        Instantiate an element, returning ``None`` when the type is unavailable.
        """

        raise NotImplementedError

    def add(self, graph: Any, element: Any) -> None:
        raise NotImplementedError

    def set_property(self, element: Any, name: str, value: Any) -> None:
        raise NotImplementedError

    def link(self, upstream: Any, downstream: Any) -> bool:
        raise NotImplementedError

    def set_state(self, graph: Any, state: GraphState) -> bool:
        raise NotImplementedError

    def release_graph(self, graph: Any) -> None:
        raise NotImplementedError

    # ------------------------------------------------------------------- pads

    def static_pad(self, element: Any, name: str) -> Optional[Any]:
        raise NotImplementedError

    def pad_is_linked(self, pad: Any) -> bool:
        raise NotImplementedError

    def pad_media_type(self, pad: Any) -> Optional[str]:
        raise NotImplementedError

    def link_pads(self, src_pad: Any, sink_pad: Any) -> bool:
        raise NotImplementedError

    def connect_pad_added(self, element: Any, callback: PadCallback) -> int:
        raise NotImplementedError

    def disconnect(self, element: Any, handler_id: int) -> None:
        raise NotImplementedError

    # ------------------------------------------------------------- event loop

    def new_loop(self) -> Any:
        raise NotImplementedError

    def run_loop(self, loop: Any) -> None:
        raise NotImplementedError

    def quit_loop(self, loop: Any) -> None:
        raise NotImplementedError

    def release_loop(self, loop: Any) -> None:
        raise NotImplementedError

    def watch_bus(self, graph: Any, callback: StatusCallback) -> Any:
        raise NotImplementedError

    def remove_bus_watch(self, watch: Any) -> None:
        raise NotImplementedError

    def watch_signals(self, signums: Iterable[int], callback: StatusCallback) -> List[Any]:
        raise NotImplementedError

    def remove_signal_watches(self, watches: Iterable[Any]) -> None:
        raise NotImplementedError


class GStreamerBackend(MediaBackend):
    """
    Realise the backend contract using GStreamer and the GLib main loop.
    """

    def __init__(self) -> None:
        self._saved_handlers: Dict[int, Any] = {}
        ensure_initialised()
        LOG.info("GStreamer runtime detected; using the GStreamer backend.")

    # ------------------------------------------------------------------ graph

    def new_graph(self, name: str) -> "Gst.Pipeline":
        pipeline = Gst.Pipeline.new(name)
        if not pipeline:
            raise PipelineUnavailableError("Failed to create GstPipeline instance.")
        return pipeline

    def make_element(self, type_name: str, label: str) -> Optional["Gst.Element"]:
        return Gst.ElementFactory.make(type_name, label)

    def add(self, graph: "Gst.Pipeline", element: "Gst.Element") -> None:
        graph.add(element)

    def set_property(self, element: "Gst.Element", name: str, value: Any) -> None:
        element.set_property(name, value)

    def link(self, upstream: "Gst.Element", downstream: "Gst.Element") -> bool:
        try:
            return bool(upstream.link(downstream))
        except Exception:
            LOG.exception("Error while linking %s to %s", upstream.get_name(), downstream.get_name())
            return False

    def set_state(self, graph: "Gst.Pipeline", state: GraphState) -> bool:
        target = Gst.State.PLAYING if state is GraphState.PLAYING else Gst.State.NULL
        result = graph.set_state(target)
        if result == Gst.StateChangeReturn.FAILURE:
            LOG.debug("Pipeline rejected state change to %s.", state.value)
            return False
        return True

    def release_graph(self, graph: "Gst.Pipeline") -> None:
        # PyGObject owns the reference; dropping ours is all that is left to do.
        LOG.debug("Released pipeline %s.", graph.get_name())

    # ------------------------------------------------------------------- pads

    def static_pad(self, element: "Gst.Element", name: str) -> Optional["Gst.Pad"]:
        return element.get_static_pad(name)

    def pad_is_linked(self, pad: "Gst.Pad") -> bool:
        return bool(pad.is_linked())

    def pad_media_type(self, pad: "Gst.Pad") -> Optional[str]:
        caps = pad.get_current_caps() or pad.query_caps(None)
        return caps_media_type(caps)

    def link_pads(self, src_pad: "Gst.Pad", sink_pad: "Gst.Pad") -> bool:
        result = src_pad.link(sink_pad)
        if result != Gst.PadLinkReturn.OK:
            LOG.debug("Pad link %s -> %s returned %s", src_pad.get_name(), sink_pad.get_name(), result)
            return False
        return True

    def connect_pad_added(self, element: "Gst.Element", callback: PadCallback) -> int:
        def _on_pad_added(_element: "Gst.Element", pad: "Gst.Pad") -> None:
            callback(pad)

        return element.connect("pad-added", _on_pad_added)

    def disconnect(self, element: "Gst.Element", handler_id: int) -> None:
        element.disconnect(handler_id)

    # ------------------------------------------------------------- event loop

    def new_loop(self) -> "GLib.MainLoop":
        return GLib.MainLoop()

    def run_loop(self, loop: "GLib.MainLoop") -> None:
        loop.run()

    def quit_loop(self, loop: "GLib.MainLoop") -> None:
        loop.quit()

    def release_loop(self, loop: "GLib.MainLoop") -> None:
        if loop.is_running():  # pragma: no cover - defensive
            loop.quit()

    def watch_bus(self, graph: "Gst.Pipeline", callback: StatusCallback) -> "Gst.Bus":
        bus = graph.get_bus()
        if not bus:
            raise PipelineUnavailableError("Pipeline bus is not available.")
        bus.add_watch(GLib.PRIORITY_DEFAULT, self._on_bus_message, callback)
        return bus

    def remove_bus_watch(self, watch: "Gst.Bus") -> None:
        watch.remove_watch()

    def watch_signals(self, signums: Iterable[int], callback: StatusCallback) -> List[int]:
        def _on_signal(signum: int) -> bool:
            callback(Interrupted(signum=signum))
            return GLib.SOURCE_CONTINUE

        signums = list(signums)
        self._saved_handlers = {signum: signal.getsignal(signum) for signum in signums}
        for signum in signums:
            # MainLoop.run() only installs its own SIGINT fallback over
            # default_int_handler, which would displace GLib's handler.
            signal.signal(signum, signal.SIG_DFL)

        return [
            GLib.unix_signal_add(GLib.PRIORITY_HIGH, signum, _on_signal, signum)
            for signum in signums
        ]

    def remove_signal_watches(self, watches: Iterable[int]) -> None:
        for source_id in watches:
            GLib.source_remove(source_id)
        for signum, handler in self._saved_handlers.items():
            if handler is not None:
                signal.signal(signum, handler)
        self._saved_handlers = {}

    # --------------------------------------------------------------- bus msgs

    def _on_bus_message(self, _bus: "Gst.Bus", message: "Gst.Message", callback: StatusCallback) -> bool:
        event = self._translate(message)
        if event is not None:
            callback(event)
        return True

    @staticmethod
    def _translate(message: "Gst.Message") -> Optional[StatusEvent]:
        source = message.src.get_name() if message.src else None
        msg_type = message.type
        if msg_type == Gst.MessageType.EOS:
            return EndOfStream(source=source)
        if msg_type == Gst.MessageType.ERROR:
            err, debug = message.parse_error()
            return StreamError(message=err.message, debug=debug, source=source)
        if msg_type == Gst.MessageType.WARNING:
            warn, debug = message.parse_warning()
            LOG.warning("Pipeline warning from %s: %s (%s)", source, warn.message, debug)
        elif msg_type == Gst.MessageType.STATE_CHANGED and isinstance(message.src, Gst.Pipeline):
            _old, new, _pending = message.parse_state_changed()
            LOG.debug("Pipeline state changed to %s", Gst.Element.state_get_name(new))
        return None
