"""
Exceptions for PetCheck.

Hierarchy:
- PetCheckError (base)
  - ImageDecodeError
  - ScanError
    - OutOfBoundsError
    - EmptyPaletteError
    - UnknownParameterError
  - StorageError
    - DuplicatePetError
  - RateLimitExceededError
  - CompletionError

Scan errors are deterministic: they describe bad input or configuration
and recur identically on retry.
"""

from typing import Any


class PetCheckError(Exception):
    """Base exception for PetCheck errors.

    Attributes:
        message: Human-readable error message.
        details: Additional error context.
    """

    def __init__(self, message: str, details: dict[str, Any] | None = None):
        super().__init__(message)
        self.message = message
        self.details = details or {}

    def __str__(self) -> str:
        if not self.details:
            return self.message
        details_str = ", ".join(f"{k}={v}" for k, v in self.details.items())
        return f"{self.message} | {details_str}"


class ImageDecodeError(PetCheckError):
    """Image data could not be opened or decoded into a frame."""


class ScanError(PetCheckError):
    """Base class for dipstick scan failures."""

    kind = "scan_error"


class OutOfBoundsError(ScanError):
    """Sampling window lies entirely outside the frame."""

    kind = "out_of_bounds"

    def __init__(
        self,
        message: str = "Sampling window is outside the frame",
        center: tuple[float, float] | None = None,
        window_size: int | None = None,
        frame_size: tuple[int, int] | None = None,
    ):
        details: dict[str, Any] = {}
        if center is not None:
            details["center"] = center
        if window_size is not None:
            details["window_size"] = window_size
        if frame_size is not None:
            details["frame_size"] = frame_size
        super().__init__(message, details)


class EmptyPaletteError(ScanError):
    """A parameter has no reference pads to match against."""

    kind = "empty_palette"

    def __init__(self, message: str = "Reference palette is empty", parameter_key: str | None = None):
        details = {"parameter_key": parameter_key} if parameter_key else {}
        super().__init__(message, details)
        self.parameter_key = parameter_key


class UnknownParameterError(ScanError):
    """A sample point references a parameter missing from the chart."""

    kind = "unknown_parameter"

    def __init__(self, parameter_key: str, point_name: str | None = None):
        details: dict[str, Any] = {"parameter_key": parameter_key}
        if point_name:
            details["point"] = point_name
        super().__init__(f"Unknown parameter: {parameter_key}", details)
        self.parameter_key = parameter_key


class StorageError(PetCheckError):
    """Reading or writing the key-value store failed."""


class DuplicatePetError(StorageError):
    """A pet with the same name is already registered for this user."""

    def __init__(self, name: str):
        super().__init__(f"A pet named '{name}' is already registered", {"name": name})
        self.name = name


class RateLimitExceededError(PetCheckError):
    """Too many requests inside the rate limit window."""

    def __init__(self, retry_after: float, limit: int):
        super().__init__(
            "Rate limit exceeded",
            {"limit": limit, "retry_after": round(retry_after, 1)},
        )
        self.retry_after = retry_after
        self.limit = limit


class CompletionError(PetCheckError):
    """The chat completion provider call failed."""
