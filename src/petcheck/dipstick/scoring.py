"""
Weighted penalty health scoring.

A record starts at 100 and loses `penalty_per_level` points per level above
normal on each parameter, scaled by that parameter's weight.
"""

from collections.abc import Mapping, Sequence
from typing import Optional

from petcheck.core.models import Reading

# Relative clinical weight of an abnormal step per parameter
PARAMETER_WEIGHTS: Mapping[str, float] = {
    "glucose": 2.0,
    "blood": 2.0,
    "protein": 1.5,
    "ph": 1.0,
}

DEFAULT_WEIGHT = 1.0


def health_score(
    readings: Sequence[Reading],
    penalty_per_level: int = 5,
    weights: Optional[Mapping[str, float]] = None,
) -> int:
    """
    Score a set of readings from 0 (worst) to 100 (all normal).

    Args:
        readings: Readings to score.
        penalty_per_level: Points deducted per abnormal level.
        weights: Per-parameter multipliers; unknown keys weigh DEFAULT_WEIGHT.

    Returns:
        Integer score clamped to [0, 100].
    """
    weights = PARAMETER_WEIGHTS if weights is None else weights
    penalty = sum(
        r.level * penalty_per_level * weights.get(r.parameter_key, DEFAULT_WEIGHT)
        for r in readings
    )
    return max(0, min(100, int(round(100 - penalty))))
