"""
Core data models for PetCheck.

All models use Pydantic for validation and serialization.
"""

from collections.abc import Mapping, Sequence
from datetime import datetime
from typing import Annotated, Any, Optional
from uuid import UUID, uuid4

import numpy as np
from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

from petcheck.core.types import Gender, RecordSource

Channel = Annotated[int, Field(ge=0, le=255)]


def _to_tuple(v: Any) -> Any:
    if isinstance(v, (list, np.ndarray)):
        return tuple(v.tolist() if isinstance(v, np.ndarray) else v)
    return v


class ReferencePad(BaseModel):
    """One labelled swatch on a parameter's reference chart."""

    model_config = ConfigDict(frozen=True)

    label: str = Field(..., min_length=1)
    value: float = Field(..., description="Numeric reading represented by this pad")
    color: tuple[Channel, Channel, Channel] = Field(..., description="Reference RGB (0-255)")

    @field_validator("color", mode="before")
    @classmethod
    def convert_to_tuple(cls, v: Any) -> Any:
        return _to_tuple(v)


class ParameterDefinition(BaseModel):
    """A urinalysis parameter and its ordered reference pads.

    Pad order is display order (normal first); matching does not depend on it
    except for breaking exact ties.
    """

    model_config = ConfigDict(frozen=True)

    name: str = Field(..., min_length=1)
    unit: str = Field(default="")
    pads: tuple[ReferencePad, ...] = Field(default=())


# Parameter key (e.g. "glucose") -> definition
ReferenceChart = Mapping[str, ParameterDefinition]


class SamplePoint(BaseModel):
    """A named sampling anchor (e.g. "glu") with its position."""

    model_config = ConfigDict(frozen=True)

    name: str = Field(..., min_length=1)
    x: float
    y: float


class DisplayRect(BaseModel):
    """Rectangle of the displayed video element the points were authored on."""

    model_config = ConfigDict(frozen=True)

    left: float = 0.0
    top: float = 0.0
    width: float = Field(..., gt=0)
    height: float = Field(..., gt=0)


class SampleConfigEntry(BaseModel):
    """Pairs one sample point with the parameter it measures."""

    model_config = ConfigDict(frozen=True)

    point: SamplePoint
    parameter_key: str = Field(..., min_length=1)


class SampleConfig(BaseModel):
    """Ordered sampling layout for one scan.

    Point coordinates are in display space when `display` is set and in
    frame pixel space otherwise.
    """

    entries: list[SampleConfigEntry] = Field(default_factory=list)
    display: Optional[DisplayRect] = Field(default=None)
    window_size: int = Field(default=20, ge=1)

    @model_validator(mode="after")
    def validate_unique_points(self) -> "SampleConfig":
        names = [e.point.name for e in self.entries]
        if len(names) != len(set(names)):
            raise ValueError("Sample point names must be unique")
        return self

    @classmethod
    def from_lists(
        cls,
        points: Sequence[SamplePoint],
        parameter_keys: Sequence[str],
        display: Optional[DisplayRect] = None,
        window_size: int = 20,
    ) -> "SampleConfig":
        """Build a config from parallel point and key lists.

        Raises:
            ValueError: If the lists differ in length.
        """
        if len(points) != len(parameter_keys):
            raise ValueError(
                f"{len(points)} sample points but {len(parameter_keys)} parameter keys"
            )
        entries = [
            SampleConfigEntry(point=point, parameter_key=key)
            for point, key in zip(points, parameter_keys)
        ]
        return cls(entries=entries, display=display, window_size=window_size)


class ScanResult(BaseModel):
    """Outcome of sampling and matching one pad."""

    parameter_key: str
    detected_color: tuple[int, int, int]
    matched_pad: ReferencePad
    pad_index: int = Field(..., ge=0, description="Index of the matched pad in its palette")
    distance: float = Field(..., ge=0.0, description="Euclidean RGB distance to the matched pad")
    frame_point: tuple[float, float] = Field(..., description="Sample centre in frame pixels")

    @field_validator("detected_color", mode="before")
    @classmethod
    def convert_to_tuple(cls, v: Any) -> Any:
        return _to_tuple(v)


class Reading(BaseModel):
    """A single parameter reading stored in a health record."""

    parameter_key: str
    label: str
    value: float
    level: int = Field(default=0, ge=0, description="Pad index (0 = first/normal)")
    description: str = Field(default="")
    detected_color: Optional[tuple[int, int, int]] = Field(default=None)


class ScanReport(BaseModel):
    """Complete result of reading a dipstick frame."""

    id: UUID = Field(default_factory=uuid4)
    timestamp: datetime = Field(default_factory=datetime.now)
    image_size: tuple[int, int] = Field(..., description="Frame dimensions (width, height)")
    results: list[ScanResult] = Field(default_factory=list)

    def as_readings(self, chart: ReferenceChart) -> list[Reading]:
        """Convert scan results into storable readings."""
        readings = []
        for result in self.results:
            parameter = chart[result.parameter_key]
            pad = result.matched_pad
            readings.append(
                Reading(
                    parameter_key=result.parameter_key,
                    label=pad.label,
                    value=pad.value,
                    level=result.pad_index,
                    description=f"{parameter.name}: {pad.label} {parameter.unit}".strip(),
                    detected_color=result.detected_color,
                )
            )
        return readings

    def summary(self) -> str:
        """Generate a summary string."""
        parts = [f"{r.parameter_key}={r.matched_pad.label}" for r in self.results]
        return ", ".join(parts) if parts else "no parameters sampled"


class Pet(BaseModel):
    """A registered pet."""

    id: UUID = Field(default_factory=uuid4)
    name: str = Field(..., min_length=1, max_length=64)
    breed: str = Field(default="", max_length=128)
    age: int = Field(default=0, ge=0, le=50)
    gender: Gender = Field(default=Gender.MALE)
    weight: float = Field(default=0.0, ge=0.0, le=200.0, description="Weight in kg")
    image: Optional[str] = Field(default=None)
    created_at: datetime = Field(default_factory=datetime.now)

    @field_validator("name", "breed", mode="before")
    @classmethod
    def strip_text(cls, v: Any) -> Any:
        return v.strip() if isinstance(v, str) else v


class HealthRecord(BaseModel):
    """A stored set of readings for one pet."""

    id: UUID = Field(default_factory=uuid4)
    pet_id: Optional[UUID] = Field(default=None)
    timestamp: datetime = Field(default_factory=datetime.now)
    source: RecordSource = Field(default=RecordSource.SCAN)
    readings: list[Reading] = Field(default_factory=list)
    health_score: int = Field(default=100, ge=0, le=100)

    @property
    def abnormal_readings(self) -> list[Reading]:
        """Readings that did not match the first (normal) pad."""
        return [r for r in self.readings if r.level > 0]

    def summary(self) -> str:
        """Generate a summary string."""
        abnormal = self.abnormal_readings
        if not abnormal:
            return f"Score {self.health_score}: all parameters normal"
        names = ", ".join(r.parameter_key for r in abnormal)
        return f"Score {self.health_score}: check {names}"
