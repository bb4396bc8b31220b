from __future__ import annotations

import random
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from datetime import datetime, timedelta
from typing import List, Optional

from dryer_app.domain.models import SensorReading
from dryer_sim.core.sim_context import SimContext


@dataclass
class SensorModel(ABC):
    """
    Base class for mock chamber sensors.

    A sensor samples the chamber climate at a fixed rate and adds seeded
    gaussian noise, so two runs with the same seed emit the same readings.

    Parameters
    ----------
    name
        Model name, used in log lines.
    hz
        Sampling rate. A sensor with `hz <= 0` is silent.
    noise_sigma
        Standard deviation of the noise added by :meth:`noisy`.
    seed
        RNG seed; None draws from system entropy.
    """

    name: str
    hz: float
    noise_sigma: float = 0.2
    seed: Optional[int] = 123

    _next_due: Optional[datetime] = field(default=None, init=False, repr=False)
    _rng: random.Random = field(init=False, repr=False)

    def __post_init__(self) -> None:
        self._rng = random.Random(self.seed)

    def should_emit(self, now: datetime) -> bool:
        """True when a sample is due at `now`; schedules the next one."""
        if self.hz <= 0:
            return False
        if self._next_due is not None and now < self._next_due:
            return False
        self._next_due = now + timedelta(seconds=1.0 / self.hz)
        return True

    def noisy(self, value: float) -> float:
        return value + self._rng.gauss(0.0, float(self.noise_sigma))

    @abstractmethod
    def tick(self, ctx: SimContext) -> List[SensorReading]:
        """
        Readings due on this simulation step (possibly none).
        """
        raise NotImplementedError
