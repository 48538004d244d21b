"""Quick demo script for the nightcore pipeline.

Writes a stereo test tone to a temporary WAV file and runs it through the
full graph, so the GStreamer plugins can be checked without hunting for a
sample file.

Examples
--------
Play a two-minute tone through the default audio output::

    python scripts/demo_nightcore.py --duration 120

Encode a short tone to MP3 instead::

    python scripts/demo_nightcore.py --duration 5 --output out.mp3

Press Ctrl+C to stop playback early.
"""

from __future__ import annotations

import argparse
import math
import struct
import sys
import tempfile
import wave
from pathlib import Path
from typing import Iterable

from nightcore.main import run

SAMPLE_RATE = 44_100


def parse_args(argv: Iterable[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="nightcore pipeline demo")
    parser.add_argument("--duration", type=float, default=10.0, help="tone length in seconds")
    parser.add_argument("--frequency", type=float, default=440.0, help="tone frequency in Hz")
    parser.add_argument("--output", default=None, help="encode to this MP3 path instead of playing")
    return parser.parse_args(argv)


def write_tone(path: Path, duration: float, frequency: float) -> None:
    frames = int(SAMPLE_RATE * max(0.0, duration))
    with wave.open(str(path), "wb") as handle:
        handle.setnchannels(2)
        handle.setsampwidth(2)
        handle.setframerate(SAMPLE_RATE)
        chunk = bytearray()
        for index in range(frames):
            value = int(0.3 * 32767 * math.sin(2.0 * math.pi * frequency * index / SAMPLE_RATE))
            chunk += struct.pack("<hh", value, value)
            if len(chunk) >= 1 << 16:
                handle.writeframes(bytes(chunk))
                chunk.clear()
        handle.writeframes(bytes(chunk))


def main(argv: Iterable[str] | None = None) -> int:
    args = parse_args(argv)
    with tempfile.TemporaryDirectory() as tmp:
        tone = Path(tmp) / "tone.wav"
        write_tone(tone, args.duration, args.frequency)
        pipeline_args = [str(tone)]
        if args.output:
            pipeline_args.append(args.output)
        return run(pipeline_args)


if __name__ == "__main__":
    sys.exit(main())
