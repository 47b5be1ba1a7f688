"""
Domain-specific types and enumerations.
"""

from enum import Enum
from typing import NamedTuple


class Gender(str, Enum):
    """Pet gender."""

    MALE = "male"
    FEMALE = "female"


class RecordSource(str, Enum):
    """Where the readings of a health record came from."""

    SCAN = "scan"
    SIMULATED = "simulated"


class RGB(NamedTuple):
    """An RGB color triplet."""

    r: int
    g: int
    b: int
