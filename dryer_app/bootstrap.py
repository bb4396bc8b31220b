from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from dryer_app.core.config.yaml_config import AppConfig, default_app_config, load_app_config, resolve_default_config_path
from dryer_app.core.registry import ChamberRegistry
from dryer_app.runtime.event_bus import EventBus
from dryer_app.services.controller import DryingController
from dryer_app.services.navigator import ChamberNavigator
from dryer_sim.core.simulator_thread import SimulatorThread, build_engines


@dataclass(frozen=True)
class AppWiring:
    """Everything the UI layer needs to run the system."""
    config: AppConfig
    registry: ChamberRegistry
    bus: EventBus
    controller: DryingController
    navigator: ChamberNavigator
    simulator: SimulatorThread

    def start(self) -> None:
        self.simulator.start()

    def stop(self) -> None:
        self.controller.stop()
        self.simulator.stop()
        self.simulator.join(timeout=2.0)


def load_config_or_default(config_path: Optional[str] = None) -> AppConfig:
    """
    Load config.yaml, falling back to built-in defaults when no file exists.

    An explicitly given path must exist.
    """
    if config_path is not None:
        return load_app_config(config_path)
    if resolve_default_config_path().exists():
        return load_app_config()
    print("[APP] config.yaml not found, using built-in defaults")
    return default_app_config()


def build_app_system(config_path: Optional[str] = None, cfg: Optional[AppConfig] = None) -> AppWiring:
    cfg = cfg or load_config_or_default(config_path)

    # --- STATE ---
    registry = ChamberRegistry.create(
        chambers=cfg.chambers,
        default_settings=cfg.default_settings,
        bounds=cfg.bounds,
    )

    # --- EVENT BUS ---
    bus = EventBus()

    # --- CONTROLLER ---
    controller = DryingController(registry=registry, bus=bus, tick_interval_s=cfg.runtime.tick_interval_s)

    # --- MOCK ENVIRONMENT ---
    simulator = SimulatorThread(
        registry=registry,
        engines=build_engines(registry, cfg.simulation),
        interval_s=cfg.runtime.sim_interval_s,
    )

    return AppWiring(
        config=cfg,
        registry=registry,
        bus=bus,
        controller=controller,
        navigator=ChamberNavigator(registry.ids()),
        simulator=simulator,
    )
