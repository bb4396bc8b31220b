from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from typing import List, Mapping, Optional

from dryer_app.domain.models import SensorReading
from dryer_sim.core.sim_context import SimContext
from dryer_sim.environment.climate import ChamberClimate
from dryer_sim.sensors.base import SensorModel


@dataclass
class SimulatorEngine:
    """
    Mock environment for one chamber: climate model plus its sensors.

    Each :meth:`step` advances the climate using the chamber's current
    actuator states and collects the readings the sensors emit.
    """

    climate: ChamberClimate
    sensors: List[SensorModel] = field(default_factory=list)

    _last_step_time: Optional[datetime] = field(default=None, init=False, repr=False)

    def step(
        self,
        devices: Mapping[str, bool],
        now: Optional[datetime] = None,
        dt_s: Optional[float] = None,
    ) -> List[SensorReading]:
        if now is None:
            now = datetime.now()

        # compute dt if not provided
        if dt_s is None:
            if self._last_step_time is None:
                dt_s = 0.0
            else:
                dt_s = max(0.0, (now - self._last_step_time).total_seconds())

        self._last_step_time = now

        self.climate.step(devices, dt_s)

        ctx = SimContext(now=now, climate=self.climate)
        out: List[SensorReading] = []
        for sensor in self.sensors:
            out.extend(sensor.tick(ctx))
        return out
