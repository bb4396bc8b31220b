from __future__ import annotations

from dataclasses import dataclass
from typing import Mapping

from dryer_sim.environment.env_constants import (
    CHAMBER_AMBIENT_C,
    CHAMBER_AMBIENT_RH,
    DRYER_RH_DROP,
    FAN_RH_DROP,
    HEATER_RH_DROP,
    HEATER_RISE_C,
    RH_MAX,
    RH_MIN,
    RH_RAMP_PCT_PER_SEC,
    TEMP_OFF_DRIFT_C_PER_SEC,
    TEMP_RAMP_C_PER_SEC,
)


def _ramp(current: float, target: float, max_step: float) -> float:
    diff = target - current
    if abs(diff) <= max_step:
        return target
    return current + (max_step if diff > 0 else -max_step)


@dataclass
class ChamberClimate:
    """Air temperature/humidity model of one drying chamber.

    Responsibilities
    ----------------
    - Track current temperature and relative humidity
    - Move toward a steady state derived from which actuators are on
    - Drift back to ambient when everything is off (also ramped)

    Notes
    -----
    This class does not know about sensors. Sensors read `temperature_c`
    and `humidity_pct`.
    """

    ambient_c: float = CHAMBER_AMBIENT_C
    ambient_rh: float = CHAMBER_AMBIENT_RH

    temperature_c: float = CHAMBER_AMBIENT_C
    humidity_pct: float = CHAMBER_AMBIENT_RH

    def __post_init__(self) -> None:
        self.temperature_c = self.ambient_c
        self.humidity_pct = self.ambient_rh

    def targets(self, devices: Mapping[str, bool]) -> tuple[float, float]:
        heaters = int(bool(devices.get("heater1"))) + int(bool(devices.get("heater2")))
        fans = int(bool(devices.get("fan1"))) + int(bool(devices.get("fan2")))
        dryer = int(bool(devices.get("dryer")))

        temp = self.ambient_c + HEATER_RISE_C * heaters
        rh = self.ambient_rh - HEATER_RH_DROP * heaters - DRYER_RH_DROP * dryer - FAN_RH_DROP * fans
        return temp, min(RH_MAX, max(RH_MIN, rh))

    def step(self, devices: Mapping[str, bool], dt_s: float) -> None:
        """Advance the climate by dt_s seconds with the given actuator states."""
        if dt_s <= 0:
            return

        target_c, target_rh = self.targets(devices)
        heating = bool(devices.get("heater1")) or bool(devices.get("heater2"))
        rate = TEMP_RAMP_C_PER_SEC if heating else TEMP_OFF_DRIFT_C_PER_SEC

        self.temperature_c = _ramp(self.temperature_c, target_c, rate * dt_s)
        self.humidity_pct = _ramp(self.humidity_pct, target_rh, RH_RAMP_PCT_PER_SEC * dt_s)
