"""
Nearest-neighbour matching of sampled colors against reference palettes.
"""

from collections.abc import Sequence
from typing import NamedTuple

import numpy as np

from petcheck.core.exceptions import EmptyPaletteError
from petcheck.core.models import ReferencePad


class PadMatch(NamedTuple):
    """Closest pad with its palette index and Euclidean distance."""

    pad: ReferencePad
    index: int
    distance: float


def _as_color(color: Sequence[float]) -> np.ndarray:
    arr = np.asarray(color, dtype=np.float64).reshape(-1)
    if arr.shape != (3,):
        raise ValueError(f"Expected an (r, g, b) color, got {color!r}")
    if not np.all(np.isfinite(arr)):
        raise ValueError(f"Color components must be finite, got {color!r}")
    return arr


def color_distance(a: Sequence[float], b: Sequence[float]) -> float:
    """Euclidean distance between two RGB colors."""
    return float(np.linalg.norm(_as_color(a) - _as_color(b)))


def match_color(
    color: Sequence[float],
    palette: Sequence[ReferencePad],
    parameter_key: str | None = None,
) -> PadMatch:
    """
    Find the palette pad nearest to a color in RGB space.

    Channels are not clamped, so out-of-range values are matched as given.
    Equidistant pads resolve to the earliest one in palette order.

    Args:
        color: Sampled (r, g, b).
        palette: Ordered reference pads.
        parameter_key: Parameter name, used only in error details.

    Returns:
        PadMatch for the closest pad.

    Raises:
        EmptyPaletteError: If the palette has no pads.
        ValueError: If the color is not three finite numbers.
    """
    if len(palette) == 0:
        raise EmptyPaletteError(parameter_key=parameter_key)

    target = _as_color(color)
    references = np.array([pad.color for pad in palette], dtype=np.float64)

    squared = np.sum((references - target) ** 2, axis=1)
    # argmin returns the first minimum
    index = int(np.argmin(squared))

    return PadMatch(pad=palette[index], index=index, distance=float(np.sqrt(squared[index])))


def find_closest_pad(color: Sequence[float], palette: Sequence[ReferencePad]) -> ReferencePad:
    """Return the reference pad nearest to `color`. See match_color."""
    return match_color(color, palette).pad
