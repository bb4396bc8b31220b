from __future__ import annotations

import threading
from datetime import datetime
from typing import Dict, Optional

from dryer_app.core.config.yaml_config import SimulationConfig
from dryer_app.core.registry import ChamberRegistry
from dryer_sim.core.simulator_engine import SimulatorEngine
from dryer_sim.environment.climate import ChamberClimate
from dryer_sim.sensors.climate import ClimateSensorPair


def build_engines(registry: ChamberRegistry, cfg: SimulationConfig) -> Dict[str, SimulatorEngine]:
    """
    Create one simulator engine per registered chamber.

    Each chamber's sensor pair gets its own seed (``seed + index``) so the
    chambers do not report identical noise.
    """
    engines: Dict[str, SimulatorEngine] = {}
    for idx, chamber_id in enumerate(registry.ids()):
        seed = None if cfg.seed is None else cfg.seed + idx
        engines[chamber_id] = SimulatorEngine(
            climate=ChamberClimate(ambient_c=cfg.ambient_temperature, ambient_rh=cfg.ambient_humidity),
            sensors=[ClimateSensorPair(hz=cfg.sensor_hz, noise_sigma=cfg.noise_sigma, seed=seed)],
        )
    return engines


class SimulatorThread:
    """
    Background thread feeding mock environment readings into the registry.

    Responsibilities
    ----------------
    - Every `interval_s`, read each chamber's actuator states, step its
      engine and record emitted readings into the chamber.

    Concurrency Model
    -----------------
    - Each chamber is read and written through its own locked facade.
    - Exceptions from one step are caught and logged to avoid killing the
      thread.

    Parameters
    ----------
    registry
        Chambers to feed.
    engines
        Chamber id -> simulator engine.
    interval_s
        Step cadence in seconds.
    stop_event
        Optional shared stop signal.
    """

    def __init__(
        self,
        registry: ChamberRegistry,
        engines: Dict[str, SimulatorEngine],
        interval_s: float = 1.0,
        stop_event: Optional[threading.Event] = None,
    ):
        self._registry = registry
        self._engines = engines
        self._interval_s = float(interval_s)
        self._stop = stop_event or threading.Event()
        self._thread = threading.Thread(target=self._run, name="env-simulator", daemon=True)

    def start(self) -> None:
        if not self._thread.is_alive():
            self._thread.start()

    def stop(self) -> None:
        self._stop.set()

    def join(self, timeout: float | None = 2.0) -> None:
        self._thread.join(timeout=timeout)

    def step_once(self, now: Optional[datetime] = None) -> int:
        """
        Run one simulation step for every chamber.

        Returns
        -------
        int
            Number of readings recorded.
        """
        ts = now or datetime.now()
        count = 0
        for chamber in self._registry.all():
            engine = self._engines.get(chamber.chamber_id)
            if engine is None:
                continue
            for reading in engine.step(chamber.get_devices(), now=ts):
                chamber.record_reading(reading)
                count += 1
        return count

    def _run(self) -> None:
        self._safe_step()
        while not self._stop.wait(self._interval_s):
            self._safe_step()

    def _safe_step(self) -> None:
        try:
            self.step_once()
        except Exception as e:
            print(f"[APP][SIM] step failed: {e!r}")
