"""
Lifecycle controller for a built nightcore graph.

The controller owns the only blocking call in the program: running the event
loop.  Status events reach it serially on the loop's thread; the first one
observed while running stops the run, and teardown always follows in a fixed
order once the loop returns.
"""

from __future__ import annotations

import json
import logging
import signal
from enum import Enum
from typing import TYPE_CHECKING, Any, List, Optional

from .events import EndOfStream, Interrupted, StatusEvent, StreamError
from .gst_adapter import TERMINATION_SIGNALS, GraphState, MediaBackend

if TYPE_CHECKING:  # pragma: no cover - typing aid
    from ..graph.builder import AudioGraph

LOG = logging.getLogger(__name__)

EXIT_SUCCESS = 0
EXIT_FAILURE = 1


class RunState(str, Enum):
    IDLE = "idle"
    RUNNING = "running"
    STOPPED = "stopped"


class InvalidTransition(RuntimeError):
    """Raised when the controller is asked to move between incompatible states."""


_ALLOWED_TRANSITIONS = {
    (RunState.IDLE, RunState.RUNNING),
    (RunState.IDLE, RunState.STOPPED),
    (RunState.RUNNING, RunState.STOPPED),
}


class LifecycleController:
    """
    Drive ``Idle -> Running -> Stopped`` for a single graph.
    """

    def __init__(self, backend: MediaBackend) -> None:
        self._backend = backend
        self._state = RunState.IDLE
        self._loop: Optional[Any] = None
        self._outcome: Optional[StatusEvent] = None
        self._abort_reason: Optional[str] = None

    # --------------------------------------------------------------------- API

    @property
    def state(self) -> RunState:
        return self._state

    @property
    def outcome(self) -> Optional[StatusEvent]:
        return self._outcome

    @property
    def exit_code(self) -> int:
        outcome = self._outcome
        if isinstance(outcome, EndOfStream):
            return EXIT_SUCCESS
        if isinstance(outcome, Interrupted):
            return 128 + int(outcome.signum)
        if isinstance(outcome, StreamError) or self._abort_reason is not None:
            return EXIT_FAILURE
        return EXIT_SUCCESS

    def abort(self, reason: str) -> None:
        """
        Mark the run as stopped before anything was started.
        """

        self._transition(RunState.STOPPED)
        self._abort_reason = reason
        LOG.debug("Run aborted before start: %s", reason)

    def run(self, graph: "AudioGraph") -> int:
        """
        Start ``graph``, block until a terminal status arrives, then tear down.

        Returns the process exit code for the run.
        """

        if self._state is not RunState.IDLE:
            raise InvalidTransition(f"cannot start a run from state {self._state.value}")

        backend = self._backend
        loop = backend.new_loop()
        self._loop = loop
        bus_watch = None
        signal_watches: List[Any] = []
        try:
            bus_watch = backend.watch_bus(graph.handle, self.handle_status)
            signal_watches = backend.watch_signals(TERMINATION_SIGNALS, self.handle_status)

            LOG.debug("Starting graph: %s", json.dumps(graph.describe(), sort_keys=True))
            if not backend.set_state(graph.handle, GraphState.PLAYING):
                LOG.warning("Pipeline refused to start; waiting for the bus to report why.")
            self._transition(RunState.RUNNING)
            LOG.info("Processing %s (%s)", graph.config.input_path, graph.output_mode.value)

            try:
                backend.run_loop(loop)
            except KeyboardInterrupt:
                self.handle_status(Interrupted(signum=signal.SIGINT))
        finally:
            self._teardown(graph, bus_watch, signal_watches)

        if self._state is not RunState.STOPPED:  # pragma: no cover - defensive
            self._transition(RunState.STOPPED)
        return self.exit_code

    def handle_status(self, event: StatusEvent) -> None:
        """
        Consume a status event from the bus (or a signal watch).
        """

        if self._state is not RunState.RUNNING:
            LOG.debug("Ignoring %s received in state %s", event, self._state.value)
            return

        self._outcome = event
        self._transition(RunState.STOPPED)

        if isinstance(event, EndOfStream):
            LOG.info("End of stream reached.")
        elif isinstance(event, StreamError):
            LOG.error("Error: %s", event.message)
            if event.debug:
                LOG.debug("Error details from %s: %s", event.source, event.debug)
        elif isinstance(event, Interrupted):
            LOG.warning("Interrupted by signal %s; shutting down.", event.signum)

        if self._loop is not None:
            self._backend.quit_loop(self._loop)

    # ----------------------------------------------------------------- helpers

    def _transition(self, target: RunState) -> None:
        if (self._state, target) not in _ALLOWED_TRANSITIONS:
            raise InvalidTransition(f"{self._state.value} -> {target.value}")
        LOG.debug("Run state %s -> %s", self._state.value, target.value)
        self._state = target

    def _teardown(self, graph: "AudioGraph", bus_watch: Optional[Any], signal_watches: List[Any]) -> None:
        backend = self._backend
        backend.set_state(graph.handle, GraphState.NULL)
        graph.release(backend)
        if bus_watch is not None:
            backend.remove_bus_watch(bus_watch)
        if signal_watches:
            backend.remove_signal_watches(signal_watches)
        if self._loop is not None:
            backend.release_loop(self._loop)
            self._loop = None
