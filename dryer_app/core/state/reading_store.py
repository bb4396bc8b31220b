from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, Optional

from dryer_app.domain.models import SensorReading


@dataclass
class ReadingsStore:
    """
    In-memory store for the latest mock environment readings of one chamber.

    Only the most recent reading per sensor channel is kept ("last write
    wins"). The caller is responsible for updating in the intended order.

    Notes
    -----
    Thread-safety is not handled here; the enclosing `Chamber` is responsible
    for synchronization.

    Attributes
    ----------
    latest
        Mapping from sensor name -> latest SensorReading.
    """

    latest: Dict[str, SensorReading] = field(default_factory=dict)

    def update(self, reading: SensorReading) -> None:
        self.latest[reading.sensor] = reading

    def get(self, sensor: str) -> Optional[SensorReading]:
        return self.latest.get(sensor)
