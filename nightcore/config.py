"""
Compiled-in tunables and the immutable run configuration.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Optional, Sequence, Tuple

PITCH_FACTOR = 1.0  # Sounds off when raised; speed-up alone carries the effect.
RATE_FACTOR = 1.3

EQUALIZER_BAND_COUNT = 10
# dB gains, low to high band.
DEFAULT_EQUALIZER_BANDS: Tuple[float, ...] = (
    1.0, 3.0, 3.0, 1.0, 0.0, 0.0, -1.0, -2.0, -2.0, -2.0,
)


class OutputMode(str, Enum):
    """Sink subgraph appended to the end of the effect chain."""

    FILE = "file"
    PLAYBACK = "playback"


@dataclass(frozen=True, slots=True)
class RunConfig:
    """
    Everything a single run needs, fixed at startup.
    """

    input_path: str
    output_path: Optional[str] = None
    pitch_factor: float = PITCH_FACTOR
    rate_factor: float = RATE_FACTOR
    equalizer_bands: Tuple[float, ...] = DEFAULT_EQUALIZER_BANDS

    def __post_init__(self) -> None:
        if not self.input_path:
            raise ValueError("input_path must not be empty")
        bands = tuple(float(value) for value in self.equalizer_bands)
        if len(bands) != EQUALIZER_BAND_COUNT:
            raise ValueError(
                f"expected {EQUALIZER_BAND_COUNT} equalizer bands, got {len(bands)}"
            )
        object.__setattr__(self, "equalizer_bands", bands)

    @classmethod
    def from_args(
        cls,
        input_path: str,
        output_path: Optional[str] = None,
        *,
        equalizer_bands: Sequence[float] = DEFAULT_EQUALIZER_BANDS,
    ) -> "RunConfig":
        return cls(
            input_path=input_path,
            output_path=output_path or None,
            equalizer_bands=tuple(equalizer_bands),
        )

    @property
    def output_mode(self) -> OutputMode:
        return OutputMode.FILE if self.output_path else OutputMode.PLAYBACK

    def to_dict(self) -> dict:
        return {
            "input_path": self.input_path,
            "output_path": self.output_path,
            "output_mode": self.output_mode.value,
            "pitch_factor": float(self.pitch_factor),
            "rate_factor": float(self.rate_factor),
            "equalizer_bands": list(self.equalizer_bands),
        }
