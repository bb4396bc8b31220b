"""
Error types raised by the chamber state core.

Every error is local and recoverable by the caller. Each one carries the
offending identifier (actuator name, setting field, chamber id) so the
presentation layer can render a precise message.
"""

from __future__ import annotations

from typing import Any


class ChamberError(Exception):
    """Base class for all chamber state errors."""


class InvalidActuatorError(ChamberError, ValueError):
    """Raised for an actuator name outside the fixed actuator set."""

    def __init__(self, name: Any) -> None:
        super().__init__(f"Unknown actuator: {name!r}")
        self.name = name


class InvalidSettingError(ChamberError, ValueError):
    """Raised for a settings field that does not exist."""

    def __init__(self, field: Any) -> None:
        super().__init__(f"Unknown setting: {field!r}")
        self.field = field


class OutOfBoundsError(ChamberError, ValueError):
    """
    Raised for a setting value that cannot be clamped into range.

    Finite numbers are clamped by the settings store, so this is only raised
    for NaN, infinities and non-numeric values.
    """

    def __init__(self, field: str, value: Any, low: float, high: float) -> None:
        super().__init__(f"Invalid value for {field}: {value!r} (allowed {low}..{high})")
        self.field = field
        self.value = value
        self.low = low
        self.high = high


class SessionActiveError(ChamberError, RuntimeError):
    """Raised when settings are modified while a drying session is running."""

    def __init__(self, chamber_id: str) -> None:
        super().__init__(f"Chamber {chamber_id}: settings are locked while drying is active")
        self.chamber_id = chamber_id


class AlreadyActiveError(ChamberError, RuntimeError):
    """Raised when starting a session that is already running."""

    def __init__(self, chamber_id: str) -> None:
        super().__init__(f"Chamber {chamber_id}: drying session already active")
        self.chamber_id = chamber_id


class SessionCompletedError(ChamberError, RuntimeError):
    """Raised when starting a completed session that has not been reset."""

    def __init__(self, chamber_id: str) -> None:
        super().__init__(f"Chamber {chamber_id}: drying session completed; reset before starting again")
        self.chamber_id = chamber_id


class ChamberNotFoundError(ChamberError, LookupError):
    """Raised when looking up a chamber id that is not registered."""

    def __init__(self, chamber_id: Any) -> None:
        super().__init__(f"Chamber not found: {chamber_id!r}")
        self.chamber_id = chamber_id
