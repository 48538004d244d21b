"""
Ten-band equalizer configuration.
"""

from __future__ import annotations

from typing import Any, Sequence

from ..config import EQUALIZER_BAND_COUNT
from ..runtime.gst_adapter import MediaBackend


def band_property(index: int) -> str:
    return f"band{index}"


def configure_equalizer(backend: MediaBackend, equalizer: Any, bands: Sequence[float]) -> None:
    """
    Apply ``bands[0..9]`` to the ``band0``..``band9`` gain properties, in order.
    """

    if len(bands) < EQUALIZER_BAND_COUNT:
        raise ValueError(f"expected {EQUALIZER_BAND_COUNT} equalizer gains, got {len(bands)}")
    for index in range(EQUALIZER_BAND_COUNT):
        backend.set_property(equalizer, band_property(index), float(bands[index]))
