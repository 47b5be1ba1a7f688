"""
Urinalysis reference chart.

Approximate RGB values for standard dipstick pads, ordered from normal to
most abnormal for each parameter.
"""

import json
from pathlib import Path
from types import MappingProxyType
from typing import Any, Union

from pydantic import ValidationError

from petcheck.core.logging import get_logger
from petcheck.core.models import ParameterDefinition, ReferenceChart, ReferencePad

logger = get_logger(__name__)


def _pads(*entries: tuple[str, float, tuple[int, int, int]]) -> tuple[ReferencePad, ...]:
    return tuple(ReferencePad(label=label, value=value, color=color) for label, value, color in entries)


REFERENCE_CHART: ReferenceChart = MappingProxyType(
    {
        "glucose": ParameterDefinition(
            name="Glucose (Glu)",
            unit="mg/dL",
            pads=_pads(
                ("Neg", 0, (100, 200, 220)),  # sky blue
                ("100", 100, (100, 220, 150)),  # light green
                ("250", 250, (150, 200, 50)),  # olive
                ("500", 500, (150, 100, 50)),  # brownish
                ("1000+", 1000, (100, 50, 50)),  # dark brown
            ),
        ),
        "protein": ParameterDefinition(
            name="Protein (Pro)",
            unit="mg/dL",
            pads=_pads(
                ("Neg", 0, (220, 220, 100)),  # yellow
                ("Trace", 15, (200, 220, 100)),  # greenish yellow
                ("30", 30, (150, 220, 100)),  # light green
                ("100", 100, (100, 200, 150)),  # green
                ("300+", 300, (50, 150, 150)),  # teal
            ),
        ),
        "ph": ParameterDefinition(
            name="pH",
            unit="",
            pads=_pads(
                ("5.0", 5.0, (255, 150, 100)),  # orange
                ("6.0", 6.0, (255, 200, 100)),  # yellow-orange
                ("6.5", 6.5, (150, 200, 100)),  # yellow-green
                ("7.0", 7.0, (100, 200, 100)),  # green
                ("8.0", 8.0, (50, 150, 200)),  # blue
            ),
        ),
        "blood": ParameterDefinition(
            name="Blood (Bld)",
            unit="Ery/uL",
            pads=_pads(
                ("Neg", 0, (255, 255, 150)),  # pale yellow
                ("Trace", 10, (200, 200, 100)),  # darker yellow spots
                ("Small", 50, (150, 200, 100)),  # greenish
                ("Mod", 250, (100, 150, 100)),  # dark green
                ("Large", 500, (50, 100, 100)),  # very dark green
            ),
        ),
    }
)


def chart_from_dict(data: dict[str, Any]) -> ReferenceChart:
    """
    Build a read-only chart from plain data.

    Args:
        data: Mapping of parameter key to {"name", "unit", "pads"} where each
            pad is {"label", "value", "color": [r, g, b]}.

    Returns:
        Immutable mapping of parameter key to ParameterDefinition.

    Raises:
        ValueError: If the data does not describe a valid chart.
    """
    if not isinstance(data, dict):
        raise ValueError("Reference chart must be a JSON object keyed by parameter")
    try:
        chart = {key: ParameterDefinition.model_validate(value) for key, value in data.items()}
    except ValidationError as e:
        raise ValueError(f"Invalid reference chart: {e}") from e
    return MappingProxyType(chart)


def chart_to_dict(chart: ReferenceChart) -> dict[str, Any]:
    """Serialize a chart to JSON-compatible data, preserving order."""
    return {key: definition.model_dump(mode="json") for key, definition in chart.items()}


def load_reference_chart(path: Union[Path, str]) -> ReferenceChart:
    """Load a reference chart from a JSON file."""
    path = Path(path)
    with open(path, encoding="utf-8") as f:
        data = json.load(f)
    chart = chart_from_dict(data)
    logger.info(f"Loaded reference chart with {len(chart)} parameters from {path}")
    return chart
