"""
Test helpers shared across test modules.
"""

import io
from typing import Optional

import numpy as np
from PIL import Image

from petcheck.llm.client import CompletionClient

# One solid color per quarter of the strip frame, each exactly one reference pad:
# glucose "250", protein "300+", ph "7.0", blood "Neg"
STRIP_COLORS = [
    (150, 200, 50),
    (50, 150, 150),
    (100, 200, 100),
    (255, 255, 150),
]


def solid_frame(width: int, height: int, color: tuple[int, int, int]) -> np.ndarray:
    """Create an RGB frame filled with one color."""
    frame = np.zeros((height, width, 3), dtype=np.uint8)
    frame[:, :] = color
    return frame


def make_strip_frame() -> np.ndarray:
    """400x100 frame with four solid vertical bands, one per default pad."""
    frame = np.zeros((100, 400, 3), dtype=np.uint8)
    for i, color in enumerate(STRIP_COLORS):
        frame[:, i * 100 : (i + 1) * 100] = color
    return frame


def encode_png(pixels: np.ndarray) -> bytes:
    """Encode a pixel array as PNG bytes."""
    buf = io.BytesIO()
    Image.fromarray(pixels).save(buf, format="PNG")
    return buf.getvalue()


class FakeCompletionClient(CompletionClient):
    """Completion client that records prompts and returns a canned reply."""

    def __init__(self, reply: str = "Looks normal. Keep an eye on water intake."):
        self.reply = reply
        self.calls: list[tuple[str, Optional[str]]] = []

    @property
    def provider_name(self) -> str:
        return "Fake"

    @property
    def model_name(self) -> str:
        return "fake-model"

    async def complete(self, prompt: str, context: Optional[str] = None) -> str:
        self.calls.append((prompt, context))
        return self.reply
