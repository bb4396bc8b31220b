from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Optional

import yaml

from dryer_app.domain.models import Bound, DryingSettings, SettingsBounds


@dataclass(frozen=True)
class ChamberConfig:
    """Identity of one chamber in the registry."""
    chamber_id: str
    name: str


@dataclass(frozen=True)
class RuntimeConfig:
    """Timer cadences for the tick source, simulator and UI refresh."""
    tick_interval_s: float = 1.0
    sim_interval_s: float = 1.0
    ui_refresh_ms: int = 200


@dataclass(frozen=True)
class SimulationConfig:
    """Mock environment parameters."""
    ambient_temperature: float = 25.0
    ambient_humidity: float = 65.0
    sensor_hz: float = 1.0
    noise_sigma: float = 0.2
    seed: Optional[int] = 123


def default_chambers() -> List[ChamberConfig]:
    return [ChamberConfig(chamber_id=str(i), name=f"Chamber {i}") for i in (1, 2, 3)]


@dataclass(frozen=True)
class AppConfig:
    """
    Root application configuration loaded from YAML.

    This is the single source of truth for runtime-tunable values so the
    dashboard can be configured without code changes.
    """
    chambers: List[ChamberConfig] = field(default_factory=default_chambers)
    default_settings: DryingSettings = field(default_factory=DryingSettings)
    bounds: SettingsBounds = field(default_factory=SettingsBounds)
    runtime: RuntimeConfig = field(default_factory=RuntimeConfig)
    simulation: SimulationConfig = field(default_factory=SimulationConfig)


def default_app_config() -> AppConfig:
    """Built-in configuration used when no config.yaml is present."""
    return AppConfig()


def _read_yaml(path: Path) -> Dict[str, Any]:
    with path.open("r", encoding="utf-8") as f:
        data = yaml.safe_load(f) or {}
    if not isinstance(data, dict):
        raise ValueError("config.yaml must contain a YAML mapping at the root")
    return data


def resolve_default_config_path() -> Path:
    """
    Resolve config.yaml location.

    Priority:
    1) APP_CONFIG env var if provided
    2) config.yaml next to the executable
    3) ./config.yaml in current working directory
    """
    import os
    import sys

    env = os.getenv("APP_CONFIG")
    if env:
        return Path(env).expanduser().resolve()

    exe_dir = Path(sys.executable).resolve().parent
    candidate = exe_dir / "config.yaml"
    if candidate.exists():
        return candidate

    return Path("config.yaml").resolve()


def _parse_bound(raw: Dict[str, Any], key: str, default: Bound) -> Bound:
    b = raw.get(key)
    if b is None:
        return default
    low = float(b.get("low", default.low))
    high = float(b.get("high", default.high))
    if low > high:
        raise ValueError(f"bounds.{key}: low ({low}) must not exceed high ({high})")
    return Bound(low, high)


def load_app_config(path: Optional[str] = None) -> AppConfig:
    """
    Load application configuration from YAML and convert into typed config objects.

    Parameters
    ----------
    path
        Explicit path to config.yaml. If None, uses default resolution.

    Returns
    -------
    AppConfig
        Parsed and validated configuration. Missing sections use defaults.

    Raises
    ------
    FileNotFoundError
        If config file does not exist.
    ValueError
        If required fields are missing or invalid.
    """
    cfg_path = Path(path).expanduser().resolve() if path else resolve_default_config_path()
    if not cfg_path.exists():
        raise FileNotFoundError(f"Config not found: {cfg_path}")

    raw = _read_yaml(cfg_path)
    defaults = default_app_config()

    # ---- chambers ----
    chambers_raw = raw.get("chambers")
    if chambers_raw is None:
        chambers = defaults.chambers
    else:
        chambers = []
        for item in chambers_raw:
            try:
                cid = str(item["id"])
            except (KeyError, TypeError):
                raise ValueError("every chamber entry needs an 'id'") from None
            chambers.append(ChamberConfig(chamber_id=cid, name=str(item.get("name", f"Chamber {cid}"))))
        if not chambers:
            raise ValueError("chambers must list at least one chamber")
        ids = [c.chamber_id for c in chambers]
        if len(set(ids)) != len(ids):
            raise ValueError(f"duplicate chamber ids: {ids}")

    # ---- default settings ----
    s = raw.get("default_settings", {})
    default_settings = DryingSettings(
        desired_temperature=float(s.get("desired_temperature", defaults.default_settings.desired_temperature)),
        desired_humidity=float(s.get("desired_humidity", defaults.default_settings.desired_humidity)),
        drying_time=int(s.get("drying_time", defaults.default_settings.drying_time)),
    )

    # ---- bounds ----
    b = raw.get("bounds", {})
    bounds = SettingsBounds(
        desired_temperature=_parse_bound(b, "desired_temperature", defaults.bounds.desired_temperature),
        desired_humidity=_parse_bound(b, "desired_humidity", defaults.bounds.desired_humidity),
        drying_time=_parse_bound(b, "drying_time", defaults.bounds.drying_time),
    )

    # ---- runtime ----
    r = raw.get("runtime", {})
    runtime = RuntimeConfig(
        tick_interval_s=float(r.get("tick_interval_s", 1.0)),
        sim_interval_s=float(r.get("sim_interval_s", 1.0)),
        ui_refresh_ms=int(r.get("ui_refresh_ms", 200)),
    )
    if runtime.tick_interval_s <= 0:
        raise ValueError("runtime.tick_interval_s must be > 0")

    # ---- simulation ----
    m = raw.get("simulation", {})
    seed = m.get("seed", 123)
    simulation = SimulationConfig(
        ambient_temperature=float(m.get("ambient_temperature", 25.0)),
        ambient_humidity=float(m.get("ambient_humidity", 65.0)),
        sensor_hz=float(m.get("sensor_hz", 1.0)),
        noise_sigma=float(m.get("noise_sigma", 0.2)),
        seed=None if seed is None else int(seed),
    )

    return AppConfig(
        chambers=chambers,
        default_settings=default_settings,
        bounds=bounds,
        runtime=runtime,
        simulation=simulation,
    )
