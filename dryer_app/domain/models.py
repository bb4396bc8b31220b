"""
Domain models and enums.

This module defines the core domain-level types used across the system:
- Actuator names, session status and sensor status enums
- Drying settings and their allowed bounds
- Mock environment sensor readings
- Read-only session/chamber views handed to the presentation layer

Value types are immutable (frozen) dataclasses so they can be shared safely
between the tick thread, the simulator thread and the UI.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from typing import Dict, Optional


class ActuatorName(str, Enum):
    """
    Fixed set of binary actuators installed in every chamber.

    Members
    -------
    HEATER1, HEATER2 : str
        The two heating elements.
    DRYER : str
        Dehumidifier unit.
    FAN1, FAN2 : str
        Circulation fans.
    """

    HEATER1 = "heater1"
    HEATER2 = "heater2"
    DRYER = "dryer"
    FAN1 = "fan1"
    FAN2 = "fan2"


class SessionStatus(str, Enum):
    """
    Lifecycle state of an automatic drying session.

    Members
    -------
    IDLE : str
        No countdown running; settings may be edited.
    ACTIVE : str
        Countdown running; settings are locked.
    COMPLETED : str
        Countdown reached zero. Only a reset leaves this state.
    """

    IDLE = "IDLE"
    ACTIVE = "ACTIVE"
    COMPLETED = "COMPLETED"


class SensorStatus(str, Enum):
    """
    Operational status of a sensor reading.

    Members
    -------
    OK : str
        The sensor is operating normally.
    FAULTY : str
        The sensor is experiencing a fault or an error.
    """

    OK = "OK"
    FAULTY = "FAULTY"


@dataclass(frozen=True)
class Bound:
    """Inclusive numeric range for one setting."""

    low: float
    high: float

    def clamp(self, value: float) -> float:
        return min(self.high, max(self.low, value))


@dataclass(frozen=True)
class SettingsBounds:
    """
    Allowed ranges for the automatic drying parameters.

    Parameters
    ----------
    desired_temperature
        Target air temperature range in degrees Celsius.
    desired_humidity
        Target relative humidity range in percent.
    drying_time
        Drying duration range in minutes.

    Raises
    ------
    ValueError
        If a range is inverted or the drying time range starts below one
        minute.
    """

    desired_temperature: Bound = Bound(15.0, 40.0)
    desired_humidity: Bound = Bound(30.0, 80.0)
    drying_time: Bound = Bound(30, 480)

    def __post_init__(self) -> None:
        for name in ("desired_temperature", "desired_humidity", "drying_time"):
            b = self.for_field(name)
            if b.low > b.high:
                raise ValueError(f"bounds.{name}: low ({b.low}) must not exceed high ({b.high})")
        # a run must last at least one minute
        if self.drying_time.low < 1:
            raise ValueError(f"bounds.drying_time: low must be at least 1 minute, got {self.drying_time.low}")

    def for_field(self, name: str) -> Bound:
        return getattr(self, name)


@dataclass(frozen=True)
class DryingSettings:
    """
    Parameters for one automatic drying run.

    Parameters
    ----------
    desired_temperature
        Target temperature (degrees Celsius).
    desired_humidity
        Target relative humidity (percent).
    drying_time
        Duration of the run in whole minutes.
    """

    desired_temperature: float = 30.0
    desired_humidity: float = 50.0
    drying_time: int = 120


@dataclass(frozen=True)
class SensorReading:
    """
    Combined temperature/humidity reading from one mock chamber sensor.

    Parameters
    ----------
    sensor
        Sensor channel name (e.g., "sensor1").
    temperature
        Air temperature in degrees Celsius.
    humidity
        Relative humidity in percent.
    timestamp
        Timestamp when the reading was captured.
    status
        Operational status of the reading.
    """

    sensor: str
    temperature: float
    humidity: float
    timestamp: datetime
    status: SensorStatus = SensorStatus.OK


@dataclass(frozen=True)
class SessionView:
    """
    Read-only view of a drying session with derived values filled in.

    'SessionView' is recomputed from the session fields on every request;
    progress and the time display are never stored on the session itself.
    """

    status: SessionStatus
    started_at: Optional[datetime]
    total_seconds: Optional[int]
    remaining_seconds: Optional[int]
    elapsed_seconds: int
    progress_percent: int
    time_display: str


@dataclass(frozen=True)
class ChamberSnapshot:
    """
    Consistent copy of one chamber's state for rendering.

    Parameters
    ----------
    chamber_id
        Registry identifier ("1", "2", ...).
    name
        Display name.
    devices
        Copy of actuator name -> on/off.
    settings
        Current drying settings.
    session
        Session view with derived values.
    readings
        Copy of sensor name -> latest reading.
    """

    chamber_id: str
    name: str
    devices: Dict[str, bool]
    settings: DryingSettings
    session: SessionView
    readings: Dict[str, SensorReading]
