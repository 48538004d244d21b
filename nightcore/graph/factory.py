"""
Element factory adapter.

Every element the graph needs goes through :class:`ElementFactory` so a missing
plugin surfaces as a single, well-named error instead of a ``None`` handle
failing somewhere downstream.
"""

from __future__ import annotations

import logging
from typing import Any

from ..runtime.gst_adapter import MediaBackend

LOG = logging.getLogger(__name__)


class GraphConstructionError(RuntimeError):
    """Base class for failures while assembling the graph."""


class ElementUnavailable(GraphConstructionError):
    """Raised when the backend cannot instantiate an element type."""

    def __init__(self, type_name: str) -> None:
        super().__init__(
            f"Failed to create pipeline element '{type_name}'. "
            "Do you have all the GStreamer plugins installed?"
        )
        self.type_name = type_name


class ElementFactory:
    def __init__(self, backend: MediaBackend) -> None:
        self._backend = backend

    def create(self, type_name: str, label: str) -> Any:
        element = self._backend.make_element(type_name, label)
        if element is None:
            raise ElementUnavailable(type_name)
        LOG.debug("Created %s element '%s'", type_name, label)
        return element
