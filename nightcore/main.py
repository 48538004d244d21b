"""
Command line entrypoint.

``nightcore <infile> [outfile]`` encodes to ``outfile`` as MP3 when it is
given, otherwise plays the processed audio on the default output device.
"""

from __future__ import annotations

import argparse
import logging
import sys
from typing import List, NoReturn, Optional

from .config import RunConfig
from .graph import GraphConstructionError, build_graph
from .runtime import GStreamerBackend, LifecycleController, MediaBackend, PipelineUnavailableError
from .runtime.controller import EXIT_FAILURE
from .utils.logging import configure_logging

LOG = logging.getLogger(__name__)

PROG = "nightcore"


class _ArgumentParser(argparse.ArgumentParser):
    def error(self, message: str) -> NoReturn:
        self.print_usage(sys.stderr)
        self.exit(EXIT_FAILURE, f"{self.prog}: error: {message}\n")


def parse_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    parser = _ArgumentParser(prog=PROG, description="Nightcore-ify an audio file")
    parser.add_argument("input_path", metavar="infile", help="audio file to process")
    parser.add_argument(
        "output_path",
        metavar="outfile",
        nargs="?",
        default=None,
        help="write MP3 here instead of playing the result",
    )
    return parser.parse_args(argv)


def run(argv: Optional[List[str]] = None, backend: Optional[MediaBackend] = None) -> int:
    args = parse_args(argv)
    configure_logging()

    try:
        config = RunConfig.from_args(args.input_path, args.output_path)
    except ValueError as exc:
        LOG.error("error: %s", exc)
        return EXIT_FAILURE

    if backend is None:
        try:
            backend = GStreamerBackend()
        except PipelineUnavailableError as exc:
            LOG.error("error: %s", exc)
            return EXIT_FAILURE

    controller = LifecycleController(backend)
    try:
        graph = build_graph(config, backend)
    except (GraphConstructionError, PipelineUnavailableError) as exc:
        controller.abort(str(exc))
        LOG.error("error: %s", exc)
        return EXIT_FAILURE

    try:
        return controller.run(graph)
    except PipelineUnavailableError as exc:
        LOG.error("error: %s", exc)
        return EXIT_FAILURE


def main(argv: Optional[List[str]] = None) -> NoReturn:
    sys.exit(run(argv))


if __name__ == "__main__":
    main()
