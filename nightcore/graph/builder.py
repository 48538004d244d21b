"""
Assembly of the nightcore processing graph.

Layout::

    source -> decode ~> convert1 -> resample1 -> pitch -> equalizer
           -> convert2 -> resample2 -> (mp3enc -> filesink | autosink)

Every edge is linked statically except ``decode ~> convert1``: ``decodebin``
does not know how many streams the file holds until it has been read, so that
edge is made by :class:`~nightcore.graph.pads.PadLinker` at runtime.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Tuple

from ..config import OutputMode, RunConfig
from ..runtime.gst_adapter import MediaBackend
from .equalizer import configure_equalizer
from .factory import ElementFactory, GraphConstructionError
from .outputs import OutputBranch, build_output_branch
from .pads import PadLinker

LOG = logging.getLogger(__name__)

PIPELINE_NAME = "mainpipe"

SOURCE_ELEMENTS: Tuple[Tuple[str, str], ...] = (
    ("filesrc", "source"),
    ("decodebin", "decode"),
)
EFFECT_CHAIN: Tuple[Tuple[str, str], ...] = (
    ("audioconvert", "convert1"),
    ("audioresample", "resample1"),
    ("pitch", "pitch"),
    ("equalizer-10bands", "equalizer"),
    ("audioconvert", "convert2"),
    ("audioresample", "resample2"),
)


class GraphLinkError(GraphConstructionError):
    """Raised when a static edge of the graph cannot be linked."""


@dataclass
class AudioGraph:
    """
    A fully constructed graph, ready to be started by the lifecycle controller.
    """

    config: RunConfig
    handle: Any
    elements: Dict[str, Any] = field(default_factory=dict)
    factories: Dict[str, str] = field(default_factory=dict)
    links: List[Tuple[str, str]] = field(default_factory=list)
    output: Optional[OutputBranch] = None
    pad_linker: Optional[PadLinker] = None
    released: bool = False

    @property
    def output_mode(self) -> OutputMode:
        return self.config.output_mode

    @property
    def dynamic_link_made(self) -> bool:
        return bool(self.pad_linker and self.pad_linker.linked)

    def element(self, label: str) -> Any:
        return self.elements[label]

    def describe(self) -> Dict[str, object]:
        """
        Return a serialisable snapshot of the graph.
        """

        return {
            "name": PIPELINE_NAME,
            "config": self.config.to_dict(),
            "elements": [
                {"label": label, "factory": self.factories.get(label)} for label in self.elements
            ],
            "links": [list(link) for link in self.links],
            "dynamic_link": {"from": "decode", "to": "convert1", "linked": self.dynamic_link_made},
            "output": {
                "mode": self.output_mode.value,
                "elements": list(self.output.labels) if self.output else [],
            },
            "released": self.released,
        }

    def release(self, backend: MediaBackend) -> None:
        """
        Drop the graph handle and every element reference it owns.
        """

        if self.released:
            return
        if self.pad_linker is not None:
            self.pad_linker.detach()
        backend.release_graph(self.handle)
        self.handle = None
        self.elements.clear()
        self.released = True


class GraphBuilder:
    def __init__(
        self,
        config: RunConfig,
        backend: MediaBackend,
        factory: Optional[ElementFactory] = None,
    ) -> None:
        self.config = config
        self.backend = backend
        self.factory = factory or ElementFactory(backend)
        self._graph: Optional[AudioGraph] = None

    @property
    def graph(self) -> AudioGraph:
        if self._graph is None:
            raise RuntimeError("Graph construction has not started.")
        return self._graph

    def build(self) -> AudioGraph:
        config = self.config
        self._graph = AudioGraph(config=config, handle=self.backend.new_graph(PIPELINE_NAME))

        for type_name, label in SOURCE_ELEMENTS + EFFECT_CHAIN:
            self.make(type_name, label)

        self.set_property("source", "location", config.input_path)
        self.set_property("pitch", "rate", float(config.rate_factor))
        self.set_property("pitch", "pitch", float(config.pitch_factor))

        self.link_chain("source", "decode")
        self.link_chain(*(label for _type, label in EFFECT_CHAIN))

        graph = self.graph
        configure_equalizer(self.backend, graph.element("equalizer"), config.equalizer_bands)
        graph.output = build_output_branch(self, upstream=EFFECT_CHAIN[-1][1])

        linker = PadLinker(self.backend, graph.element(EFFECT_CHAIN[0][1]))
        linker.attach(graph.element("decode"))
        graph.pad_linker = linker

        LOG.debug("Graph built with %d elements and %d static links.", len(graph.elements), len(graph.links))
        return graph

    # ----------------------------------------------------------------- helpers

    def make(self, type_name: str, label: str) -> Any:
        element = self.factory.create(type_name, label)
        graph = self.graph
        self.backend.add(graph.handle, element)
        graph.elements[label] = element
        graph.factories[label] = type_name
        return element

    def set_property(self, label: str, name: str, value: Any) -> None:
        self.backend.set_property(self.graph.element(label), name, value)

    def link_chain(self, *labels: str) -> None:
        graph = self.graph
        for upstream, downstream in zip(labels, labels[1:]):
            if not self.backend.link(graph.element(upstream), graph.element(downstream)):
                raise GraphLinkError(f"Failed to link {upstream} -> {downstream}.")
            graph.links.append((upstream, downstream))


def build_graph(
    config: RunConfig,
    backend: MediaBackend,
    factory: Optional[ElementFactory] = None,
) -> AudioGraph:
    return GraphBuilder(config, backend, factory).build()
