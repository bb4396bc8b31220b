from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from typing import Dict, Optional, Union

from dryer_app.domain.errors import InvalidActuatorError
from dryer_app.domain.events import DeviceToggled
from dryer_app.domain.models import ActuatorName

ActuatorKey = Union[ActuatorName, str]


def parse_actuator(name: ActuatorKey) -> ActuatorName:
    """
    Resolve an actuator name or enum member to an `ActuatorName`.

    Raises
    ------
    InvalidActuatorError
        If `name` is not one of the fixed actuators.
    """
    if isinstance(name, ActuatorName):
        return name
    try:
        return ActuatorName(name)
    except ValueError:
        raise InvalidActuatorError(name) from None


@dataclass
class DeviceStore:
    """
    In-memory on/off state for the fixed set of chamber actuators.

    Every member of :class:`~dryer_app.domain.models.ActuatorName` is always
    present; the set of keys never changes after construction.

    Notes
    -----
    - This store is not thread-safe. Synchronization is handled by the
      enclosing `Chamber`.
    - Toggling is independent of the automatic drying session.

    Attributes
    ----------
    chamber_id
        Owning chamber id, copied into emitted events.
    states
        Mapping of actuator -> on/off.
    """

    chamber_id: str = ""
    states: Dict[ActuatorName, bool] = field(default_factory=lambda: {a: False for a in ActuatorName})

    def toggle(self, name: ActuatorKey, now: Optional[datetime] = None) -> DeviceToggled:
        """
        Flip one actuator.

        Parameters
        ----------
        name
            Actuator name or enum member.
        now
            Optional event timestamp; defaults to local current time.

        Returns
        -------
        DeviceToggled
            Change notification carrying the actuator and its new state.

        Raises
        ------
        InvalidActuatorError
            If `name` is unknown. State is left unchanged.
        """
        actuator = parse_actuator(name)
        new_value = not self.states[actuator]
        self.states[actuator] = new_value
        return DeviceToggled(
            chamber_id=self.chamber_id,
            actuator=actuator,
            on=new_value,
            timestamp=now or datetime.now(),
        )

    def get(self, name: ActuatorKey) -> bool:
        return self.states[parse_actuator(name)]

    def get_all(self) -> Dict[str, bool]:
        """
        Copy of all actuator states keyed by actuator name.

        Returns
        -------
        dict[str, bool]
            Actuator name -> on/off, in the fixed actuator order.
        """
        return {a.value: self.states[a] for a in ActuatorName}
