from __future__ import annotations

from dataclasses import dataclass
from typing import List

from dryer_app.domain.models import SensorReading, SensorStatus
from dryer_sim.core.sim_context import SimContext
from dryer_sim.sensors.base import SensorModel

SENSOR1_NAME = "sensor1"
SENSOR2_NAME = "sensor2"


@dataclass
class ClimateSensorPair(SensorModel):
    """
    Pair of combined temperature/humidity sensors inside one chamber.

    Behavior
    --------
    - Reads `ctx.climate.temperature_c` and `ctx.climate.humidity_pct`
    - Applies a fixed placement offset to the second sensor
    - Adds noise to both quantities and clamps humidity to [0, 100]

    Parameters
    ----------
    first_name, second_name
        Output sensor names.
    second_offset_c, second_offset_rh
        Placement offsets of the second sensor relative to the first.
    """

    name: str = "ClimateSensorPair"
    hz: float = 1.0

    first_name: str = SENSOR1_NAME
    second_name: str = SENSOR2_NAME
    second_offset_c: float = 0.5
    second_offset_rh: float = -2.0

    def tick(self, ctx: SimContext) -> List[SensorReading]:
        if not self.should_emit(ctx.now):
            return []

        base_c = float(ctx.climate.temperature_c)
        base_rh = float(ctx.climate.humidity_pct)

        out: List[SensorReading] = []
        for name, off_c, off_rh in (
            (self.first_name, 0.0, 0.0),
            (self.second_name, self.second_offset_c, self.second_offset_rh),
        ):
            temp = self.noisy(base_c + off_c)
            rh = self.noisy(base_rh + off_rh)
            out.append(
                SensorReading(
                    sensor=name,
                    temperature=round(temp, 1),
                    humidity=round(min(100.0, max(0.0, rh)), 1),
                    timestamp=ctx.now,
                    status=SensorStatus.OK,
                )
            )
        return out
