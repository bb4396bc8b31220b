from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime

from dryer_sim.environment.climate import ChamberClimate


@dataclass(frozen=True)
class SimContext:
    """
    Immutable context passed into each sensor tick.

    The engine constructs a `SimContext` once per simulation step and passes it
    to each sensor model. This keeps sensors deterministic and avoids hidden
    globals.

    Parameters
    ----------
    now
        Current simulation timestamp for this tick.
    climate
        Chamber climate after this step. Sensors read temperature and
        humidity from it.
    """

    now: datetime
    climate: ChamberClimate
