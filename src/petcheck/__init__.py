"""
PetCheck - pet health logging with urine dipstick scanning.

This package provides:

- Dipstick color sampling from camera frames and nearest-match
  classification against a reference chart
- Pluggable result generators and weighted health scoring
- Per-user pet and health record storage over a key-value store
- A chat assistant behind a provider-independent completion interface
- A FastAPI service tying these together
"""

__version__ = "1.0.0"

# Core models
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
from petcheck.core.exceptions import (
    EmptyPaletteError,
    OutOfBoundsError,
    PetCheckError,
    ScanError,
    UnknownParameterError,
)
from petcheck.core.types import RGB, Gender, RecordSource

# Configuration
from petcheck.config import Settings, configure, get_settings

# Dipstick engine
from petcheck.dipstick import (
    REFERENCE_CHART,
    DipstickReader,
    Frame,
    RandomResultGenerator,
    ResultGenerator,
    default_sample_config,
    find_closest_pad,
    map_display_point,
    run_scan,
    sample_color,
)

# Storage
from petcheck.storage import InMemoryStore, JSONFileStore, KeyValueStore

__all__ = [
    # Version
    "__version__",
    # Core models
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
    # Exceptions
    "EmptyPaletteError",
    "OutOfBoundsError",
    "PetCheckError",
    "ScanError",
    "UnknownParameterError",
    # Types
    "RGB",
    "Gender",
    "RecordSource",
    # Config
    "Settings",
    "configure",
    "get_settings",
    # Dipstick
    "REFERENCE_CHART",
    "DipstickReader",
    "Frame",
    "RandomResultGenerator",
    "ResultGenerator",
    "default_sample_config",
    "find_closest_pad",
    "map_display_point",
    "run_scan",
    "sample_color",
    # Storage
    "InMemoryStore",
    "JSONFileStore",
    "KeyValueStore",
]
