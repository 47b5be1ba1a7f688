"""
Frame sampling for dipstick pads.

Averages a square pixel window around each sample point of a captured
camera frame, and maps points authored on the displayed video element into
the frame's native pixel space.
"""

import io
import math
from pathlib import Path
from typing import Union

import numpy as np
from PIL import Image

from petcheck.core.exceptions import ImageDecodeError, OutOfBoundsError
from petcheck.core.models import DisplayRect
from petcheck.core.types import RGB

ImageSource = Union[np.ndarray, Image.Image, Path, str, bytes]


class Frame:
    """
    Immutable snapshot of a captured camera frame.

    Wraps an (H, W) grayscale or (H, W, C) array with C in {1, 3, 4}.
    Grayscale frames read as R = G = B; an alpha channel is ignored.
    """

    def __init__(self, pixels: np.ndarray):
        if pixels.ndim == 3 and pixels.shape[2] == 1:
            pixels = pixels[:, :, 0]
        if pixels.ndim not in (2, 3) or (pixels.ndim == 3 and pixels.shape[2] not in (3, 4)):
            raise ValueError(f"Unsupported frame shape: {pixels.shape}")
        if pixels.shape[0] == 0 or pixels.shape[1] == 0:
            raise ValueError("Frame must have at least one pixel")

        self._pixels = np.array(pixels, copy=True)
        self._pixels.setflags(write=False)

    @classmethod
    def from_image(cls, image: ImageSource) -> "Frame":
        """Load a frame from an array, PIL image, file path or encoded bytes."""
        if isinstance(image, Frame):
            return image
        if isinstance(image, np.ndarray):
            return cls(image)
        if isinstance(image, Image.Image):
            return cls(np.array(_to_rgb(image)))
        if isinstance(image, bytes):
            return cls(_decode(io.BytesIO(image)))
        if isinstance(image, (Path, str)):
            return cls(_decode(image))
        raise TypeError(f"Unsupported image type: {type(image)}")

    @property
    def pixels(self) -> np.ndarray:
        """Read-only pixel array."""
        return self._pixels

    @property
    def width(self) -> int:
        return int(self._pixels.shape[1])

    @property
    def height(self) -> int:
        return int(self._pixels.shape[0])

    @property
    def size(self) -> tuple[int, int]:
        """Frame dimensions (width, height)."""
        return self.width, self.height

    def rgb_pixels(self, x0: int, y0: int, x1: int, y1: int) -> np.ndarray:
        """Get the pixels of [x0, x1) x [y0, y1) as an (N, 3) array."""
        region = self._pixels[y0:y1, x0:x1]
        if region.ndim == 3:
            return region.reshape(-1, region.shape[-1])[:, :3]
        flat = region.flatten()
        return np.column_stack([flat, flat, flat])

    def __repr__(self) -> str:
        return f"Frame(width={self.width}, height={self.height})"


def _decode(source: Union[io.BytesIO, Path, str]) -> np.ndarray:
    # Pillow decodes lazily; load() surfaces truncated or corrupt data here
    try:
        with Image.open(source) as pil_img:
            pil_img.load()
            return np.array(_to_rgb(pil_img))
    except FileNotFoundError:
        raise
    except (OSError, SyntaxError, Image.DecompressionBombError) as e:
        raise ImageDecodeError(
            "Image could not be decoded", {"reason": str(e), "error_type": type(e).__name__}
        ) from e


def _to_rgb(image: Image.Image) -> Image.Image:
    if image.mode in ("RGB", "L"):
        return image
    return image.convert("RGB")


def window_bounds(center_x: float, center_y: float, window_size: int) -> tuple[int, int, int, int]:
    """
    Nominal (unclipped) window around a point as (x0, y0, x1, y1).

    The window origin is floored, so a fractional centre shifts the whole
    window to the pixel grid: x0 = floor(cx - size / 2), x1 = x0 + size.
    """
    x0 = math.floor(center_x - window_size / 2)
    y0 = math.floor(center_y - window_size / 2)
    return x0, y0, x0 + window_size, y0 + window_size


def sample_color(
    frame: Union[Frame, np.ndarray],
    center_x: float,
    center_y: float,
    window_size: int,
) -> RGB:
    """
    Average the colors of a square window centred on a point.

    Args:
        frame: Frame (or raw pixel array) to sample.
        center_x: Window centre x in frame pixels.
        center_y: Window centre y in frame pixels.
        window_size: Side length of the square window in pixels.

    Returns:
        Per-channel mean of the in-bounds pixels, each rounded half up to
        the nearest integer.

    Raises:
        ValueError: If window_size is not a positive integer or the centre
            is not finite.
        OutOfBoundsError: If no pixel of the window lies inside the frame.
    """
    if not isinstance(frame, Frame):
        frame = Frame(frame)
    if not isinstance(window_size, (int, np.integer)) or window_size < 1:
        raise ValueError(f"window_size must be a positive integer, got {window_size!r}")
    if not (math.isfinite(center_x) and math.isfinite(center_y)):
        raise ValueError(f"Sample centre must be finite, got ({center_x}, {center_y})")

    x0, y0, x1, y1 = window_bounds(center_x, center_y, window_size)

    # Clip to frame
    cx0, cx1 = max(0, x0), min(frame.width, x1)
    cy0, cy1 = max(0, y0), min(frame.height, y1)

    if cx0 >= cx1 or cy0 >= cy1:
        raise OutOfBoundsError(
            center=(center_x, center_y),
            window_size=window_size,
            frame_size=frame.size,
        )

    pixels = frame.rgb_pixels(cx0, cy0, cx1, cy1).astype(np.float64)
    mean = np.floor(pixels.mean(axis=0) + 0.5).astype(int)

    return RGB(int(mean[0]), int(mean[1]), int(mean[2]))


def map_display_point(
    px: float,
    py: float,
    display: DisplayRect,
    frame_width: int,
    frame_height: int,
) -> tuple[float, float]:
    """
    Map a point on the displayed video element into frame pixel space.

    Assumes the element shows the whole frame stretched to its rectangle,
    with no letterboxing or cropping. For "cover" or "contain" layouts with a
    different aspect ratio the result is only approximate.

    Args:
        px: Point x in display coordinates.
        py: Point y in display coordinates.
        display: Rectangle of the displayed element.
        frame_width: Native frame width in pixels.
        frame_height: Native frame height in pixels.

    Returns:
        (x, y) in frame pixels.
    """
    scale_x = frame_width / display.width
    scale_y = frame_height / display.height
    return (px - display.left) * scale_x, (py - display.top) * scale_y
