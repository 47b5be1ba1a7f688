"""
Pluggable result generators.

A result generator turns a chart parameter into a reading level (the
index of a pad in the parameter's palette) and a description. The simulated
analysis flow uses RandomResultGenerator; ScanResultGenerator replays real
scan matches through the same interface, so analysis engines can be swapped
without touching the record-building code.
"""

from abc import ABC, abstractmethod
from collections.abc import Sequence
from typing import NamedTuple, Optional

import numpy as np

from petcheck.core.exceptions import EmptyPaletteError, UnknownParameterError
from petcheck.core.models import ParameterDefinition, Reading, ReferenceChart, ScanResult


class GeneratedReading(NamedTuple):
    """Level (pad index) and description produced for one parameter."""

    level: int
    description: str


def describe(parameter: ParameterDefinition, level: int) -> str:
    """Human-readable description of a parameter at a given level."""
    pad = parameter.pads[level]
    status = "normal" if level == 0 else "abnormal"
    return f"{parameter.name}: {pad.label} {parameter.unit}".strip() + f" ({status})"


class ResultGenerator(ABC):
    """Produces a reading for a parameter definition."""

    @abstractmethod
    def generate(self, key: str, parameter: ParameterDefinition) -> GeneratedReading:
        """Produce a level and description for the chart parameter `key`."""


class RandomResultGenerator(ResultGenerator):
    """
    Simulated analysis.

    Each parameter reads abnormal with probability `abnormal_probability`;
    abnormal levels are drawn with weight 1/level so mild readings are more
    common than severe ones.
    """

    def __init__(self, abnormal_probability: float = 0.2, seed: Optional[int] = None):
        if not 0.0 <= abnormal_probability <= 1.0:
            raise ValueError("abnormal_probability must be between 0 and 1")
        self.abnormal_probability = abnormal_probability
        self._rng = np.random.default_rng(seed)

    def generate(self, key: str, parameter: ParameterDefinition) -> GeneratedReading:
        if not parameter.pads:
            raise EmptyPaletteError(parameter_key=key)

        level = 0
        if len(parameter.pads) > 1 and self._rng.random() < self.abnormal_probability:
            levels = np.arange(1, len(parameter.pads))
            weights = 1.0 / levels
            level = int(self._rng.choice(levels, p=weights / weights.sum()))

        return GeneratedReading(level=level, description=describe(parameter, level))


class ScanResultGenerator(ResultGenerator):
    """Replays the pad matches of a finished scan."""

    def __init__(self, results: Sequence[ScanResult]):
        self._levels = {r.parameter_key: r.pad_index for r in results}

    def generate(self, key: str, parameter: ParameterDefinition) -> GeneratedReading:
        if key not in self._levels:
            raise UnknownParameterError(key)
        level = self._levels[key]
        return GeneratedReading(level=level, description=describe(parameter, level))


def generate_readings(chart: ReferenceChart, generator: ResultGenerator) -> list[Reading]:
    """Produce one reading per chart parameter, in chart order."""
    readings = []
    for key, parameter in chart.items():
        generated = generator.generate(key, parameter)
        pad = parameter.pads[generated.level]
        readings.append(
            Reading(
                parameter_key=key,
                label=pad.label,
                value=pad.value,
                level=generated.level,
                description=generated.description,
            )
        )
    return readings
