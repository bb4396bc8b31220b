"""
Change event domain models.

A change event records *what happened* to a chamber, while the stores hold
*what is currently true*. Stores return events from their mutators and the
controller publishes them on the event bus, where the presentation layer
picks them up for toasts and re-rendering.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from typing import Optional, Tuple, Union

from dryer_app.domain.models import ActuatorName, DryingSettings, SessionStatus


class SessionTransition(str, Enum):
    """
    Drying session lifecycle transition.

    Members
    -------
    STARTED : str
        IDLE -> ACTIVE.
    COMPLETED : str
        ACTIVE -> COMPLETED (countdown reached zero).
    RESET : str
        ACTIVE or COMPLETED -> IDLE.
    """

    STARTED = "STARTED"
    COMPLETED = "COMPLETED"
    RESET = "RESET"


@dataclass(frozen=True)
class DeviceToggled:
    """
    An actuator was switched.

    Parameters
    ----------
    chamber_id
        Chamber owning the actuator.
    actuator
        Actuator that changed.
    on
        New state after the toggle.
    timestamp
        When the toggle happened.
    """

    chamber_id: str
    actuator: ActuatorName
    on: bool
    timestamp: datetime


@dataclass(frozen=True)
class SettingsUpdated:
    """
    Drying settings were merged.

    Parameters
    ----------
    chamber_id
        Chamber owning the settings.
    settings
        Settings after the merge.
    changed
        Names of the fields present in the update.
    clamped
        Names of the fields whose value was clamped into range.
    timestamp
        When the update happened.
    """

    chamber_id: str
    settings: DryingSettings
    changed: Tuple[str, ...]
    clamped: Tuple[str, ...]
    timestamp: datetime


@dataclass(frozen=True)
class SessionChanged:
    """
    A drying session changed lifecycle state.

    Parameters
    ----------
    chamber_id
        Chamber owning the session.
    transition
        Which transition happened.
    status
        Status after the transition.
    timestamp
        When the transition happened.
    remaining_seconds
        Remaining countdown after the transition, if any.
    """

    chamber_id: str
    transition: SessionTransition
    status: SessionStatus
    timestamp: datetime
    remaining_seconds: Optional[int] = None


@dataclass(frozen=True)
class SessionTicked:
    """
    The countdown advanced while the session stayed ACTIVE.

    Parameters
    ----------
    chamber_id
        Chamber owning the session.
    remaining_seconds
        Remaining countdown after the tick.
    timestamp
        When the tick was applied.
    """

    chamber_id: str
    remaining_seconds: int
    timestamp: datetime


ChangeEvent = Union[DeviceToggled, SettingsUpdated, SessionChanged, SessionTicked]
