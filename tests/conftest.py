"""Shared fixtures: an in-memory stand-in for the GStreamer backend."""

from __future__ import annotations

import itertools
import threading
from collections import deque
from typing import Any, Callable, Dict, List, Optional

import pytest

from nightcore.config import RunConfig
from nightcore.runtime.events import Interrupted, StatusEvent
from nightcore.runtime.gst_adapter import GraphState, MediaBackend


class FakePad:
    def __init__(self, name: str, media_type: Optional[str] = None) -> None:
        self.name = name
        self.media_type = media_type
        self.peer: Optional["FakePad"] = None


class FakeElement:
    def __init__(self, type_name: str, label: str) -> None:
        self.type_name = type_name
        self.label = label
        self.properties: Dict[str, Any] = {}
        self.property_log: List[tuple] = []
        self.pads = {"sink": FakePad("sink"), "src": FakePad("src")}
        self.pad_added_handlers: Dict[int, Callable[[Any], None]] = {}

    def emit_pad_added(self, pad: FakePad) -> None:
        for handler in list(self.pad_added_handlers.values()):
            handler(pad)


class FakeGraph:
    def __init__(self, name: str) -> None:
        self.name = name
        self.elements: List[FakeElement] = []
        self.states: List[GraphState] = []

    @property
    def labels(self) -> List[str]:
        return [element.label for element in self.elements]


class FakeLoop:
    def __init__(self) -> None:
        self.running = False


class FakeBackend(MediaBackend):
    """
    Records every call; bus events are queued and dispatched by :meth:`run_loop`.
    """

    def __init__(self) -> None:
        self.missing: set = set()
        self.refused_links: set = set()
        self.refuse_pad_links = False
        self.accept_state = True
        self.calls: List[tuple] = []
        self.graphs: List[FakeGraph] = []
        self.links: List[tuple] = []
        self.link_attempts: List[tuple] = []
        self.released_graphs: List[FakeGraph] = []
        self.on_playing: List[Callable[[FakeGraph], None]] = []
        self._pending: deque = deque()
        self._bus_watchers: Dict[int, Callable[[StatusEvent], None]] = {}
        self._signal_watchers: Dict[int, Callable[[StatusEvent], None]] = {}
        self._ids = itertools.count(1)

    # ------------------------------------------------------------ test helpers

    def post(self, event: StatusEvent) -> None:
        self._pending.append(("bus", event))

    def raise_signal(self, signum: int) -> None:
        self._pending.append(("signal", signum))

    def interrupt_loop(self) -> None:
        """Make the loop quit by raising KeyboardInterrupt, as PyGObject does on Ctrl+C."""

        self._pending.append(("keyboard", None))

    def discover_on_play(self, *media_types: Optional[str], threaded: bool = True) -> None:
        """Have ``decode`` announce one pad per media type when the graph starts."""

        def _announce(graph: FakeGraph) -> None:
            decoder = next(element for element in graph.elements if element.label == "decode")

            def _emit() -> None:
                for index, media_type in enumerate(media_types):
                    decoder.emit_pad_added(FakePad(f"src_{index}", media_type))

            if threaded:
                worker = threading.Thread(target=_emit, name="fake-streaming-thread")
                worker.start()
                worker.join()
            else:
                _emit()

        self.on_playing.append(_announce)

    def call_names(self) -> List[str]:
        return [call[0] for call in self.calls]

    # ------------------------------------------------------------------- graph

    def new_graph(self, name: str) -> FakeGraph:
        graph = FakeGraph(name)
        self.graphs.append(graph)
        self.calls.append(("new_graph", name))
        return graph

    def make_element(self, type_name: str, label: str) -> Optional[FakeElement]:
        if type_name in self.missing:
            return None
        return FakeElement(type_name, label)

    def add(self, graph: FakeGraph, element: FakeElement) -> None:
        graph.elements.append(element)

    def set_property(self, element: FakeElement, name: str, value: Any) -> None:
        element.properties[name] = value
        element.property_log.append((name, value))

    def link(self, upstream: FakeElement, downstream: FakeElement) -> bool:
        pair = (upstream.label, downstream.label)
        if pair in self.refused_links:
            return False
        self.links.append(pair)
        return True

    def set_state(self, graph: FakeGraph, state: GraphState) -> bool:
        graph.states.append(state)
        self.calls.append(("set_state", state))
        if state is GraphState.PLAYING:
            for hook in self.on_playing:
                hook(graph)
        return self.accept_state

    def release_graph(self, graph: FakeGraph) -> None:
        self.released_graphs.append(graph)
        self.calls.append(("release_graph", graph.name))

    # -------------------------------------------------------------------- pads

    def static_pad(self, element: FakeElement, name: str) -> Optional[FakePad]:
        return element.pads.get(name)

    def pad_is_linked(self, pad: FakePad) -> bool:
        return pad.peer is not None

    def pad_media_type(self, pad: FakePad) -> Optional[str]:
        return pad.media_type

    def link_pads(self, src_pad: FakePad, sink_pad: FakePad) -> bool:
        self.link_attempts.append((src_pad, sink_pad))
        if self.refuse_pad_links:
            return False
        src_pad.peer = sink_pad
        sink_pad.peer = src_pad
        return True

    def connect_pad_added(self, element: FakeElement, callback: Callable[[Any], None]) -> int:
        handler_id = next(self._ids)
        element.pad_added_handlers[handler_id] = callback
        return handler_id

    def disconnect(self, element: FakeElement, handler_id: int) -> None:
        del element.pad_added_handlers[handler_id]
        self.calls.append(("disconnect", element.label))

    # -------------------------------------------------------------- event loop

    def new_loop(self) -> FakeLoop:
        self.calls.append(("new_loop",))
        return FakeLoop()

    def run_loop(self, loop: FakeLoop) -> None:
        self.calls.append(("run_loop",))
        loop.running = True
        while loop.running:
            if not self._pending:
                raise AssertionError("event loop would block forever")
            kind, payload = self._pending.popleft()
            if kind == "keyboard":
                loop.running = False
                raise KeyboardInterrupt
            if kind == "bus":
                for watcher in list(self._bus_watchers.values()):
                    watcher(payload)
            else:
                watcher = self._signal_watchers.get(payload)
                if watcher is not None:
                    watcher(Interrupted(signum=payload))

    def quit_loop(self, loop: FakeLoop) -> None:
        loop.running = False
        self.calls.append(("quit_loop",))

    def release_loop(self, loop: FakeLoop) -> None:
        self.calls.append(("release_loop",))

    def watch_bus(self, graph: FakeGraph, callback: Callable[[StatusEvent], None]) -> int:
        token = next(self._ids)
        self._bus_watchers[token] = callback
        self.calls.append(("watch_bus",))
        return token

    def remove_bus_watch(self, watch: int) -> None:
        del self._bus_watchers[watch]
        self.calls.append(("remove_bus_watch",))

    def watch_signals(self, signums, callback) -> List[int]:
        tokens = []
        for signum in signums:
            self._signal_watchers[signum] = callback
            tokens.append(signum)
        self.calls.append(("watch_signals",))
        return tokens

    def remove_signal_watches(self, watches) -> None:
        for signum in watches:
            self._signal_watchers.pop(signum, None)
        self.calls.append(("remove_signal_watches",))


@pytest.fixture
def backend() -> FakeBackend:
    return FakeBackend()


@pytest.fixture
def playback_config() -> RunConfig:
    return RunConfig.from_args("song.flac")


@pytest.fixture
def file_config(tmp_path) -> RunConfig:
    return RunConfig.from_args("song.flac", str(tmp_path / "out.mp3"))


@pytest.fixture
def make_pad() -> Callable[..., FakePad]:
    return FakePad
