"""
Core data models, types and exceptions for PetCheck.
"""

from petcheck.core.exceptions import (
    CompletionError,
    DuplicatePetError,
    EmptyPaletteError,
    ImageDecodeError,
    OutOfBoundsError,
    PetCheckError,
    RateLimitExceededError,
    ScanError,
    StorageError,
    UnknownParameterError,
)
from petcheck.core.models import (
    DisplayRect,
    HealthRecord,
    ParameterDefinition,
    Pet,
    Reading,
    ReferenceChart,
    ReferencePad,
    SampleConfig,
    SampleConfigEntry,
    SamplePoint,
    ScanReport,
    ScanResult,
)
from petcheck.core.types import RGB, Gender, RecordSource

__all__ = [
    # Models
    "DisplayRect",
    "HealthRecord",
    "ParameterDefinition",
    "Pet",
    "Reading",
    "ReferenceChart",
    "ReferencePad",
    "SampleConfig",
    "SampleConfigEntry",
    "SamplePoint",
    "ScanReport",
    "ScanResult",
    # Types
    "RGB",
    "Gender",
    "RecordSource",
    # Exceptions
    "CompletionError",
    "DuplicatePetError",
    "EmptyPaletteError",
    "ImageDecodeError",
    "OutOfBoundsError",
    "PetCheckError",
    "RateLimitExceededError",
    "ScanError",
    "StorageError",
    "UnknownParameterError",
]
