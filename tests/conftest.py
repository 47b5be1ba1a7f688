"""
Shared fixtures for PetCheck tests.
"""

import numpy as np
import pytest

from helpers import FakeCompletionClient, encode_png, make_strip_frame
from petcheck.core.models import ParameterDefinition, ReferencePad
from petcheck.storage import InMemoryStore


@pytest.fixture
def strip_frame() -> np.ndarray:
    """400x100 frame with four solid vertical bands, one per default pad."""
    return make_strip_frame()


@pytest.fixture
def strip_png(strip_frame) -> bytes:
    return encode_png(strip_frame)


@pytest.fixture
def glucose_palette() -> tuple[ReferencePad, ...]:
    return (
        ReferencePad(label="Neg", value=0, color=(100, 200, 220)),
        ReferencePad(label="100", value=100, color=(100, 220, 150)),
        ReferencePad(label="250", value=250, color=(150, 200, 50)),
        ReferencePad(label="500", value=500, color=(150, 100, 50)),
        ReferencePad(label="1000+", value=1000, color=(100, 50, 50)),
    )


@pytest.fixture
def two_pad_chart() -> dict[str, ParameterDefinition]:
    """Small chart with distinct dark and light palettes."""
    return {
        "dark": ParameterDefinition(
            name="Dark",
            pads=(
                ReferencePad(label="black", value=0, color=(0, 0, 0)),
                ReferencePad(label="grey", value=1, color=(128, 128, 128)),
            ),
        ),
        "light": ParameterDefinition(
            name="Light",
            unit="u",
            pads=(
                ReferencePad(label="white", value=0, color=(255, 255, 255)),
                ReferencePad(label="grey", value=1, color=(128, 128, 128)),
            ),
        ),
    }


@pytest.fixture
def store() -> InMemoryStore:
    return InMemoryStore()


@pytest.fixture
def fake_client() -> FakeCompletionClient:
    return FakeCompletionClient()
