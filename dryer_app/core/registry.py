from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, Iterable, List, Optional

from dryer_app.core.chamber import Chamber
from dryer_app.core.config.yaml_config import ChamberConfig, default_chambers
from dryer_app.core.state.settings_store import SettingsStore
from dryer_app.domain.errors import ChamberNotFoundError
from dryer_app.domain.models import ChamberSnapshot, DryingSettings, SettingsBounds


@dataclass
class ChamberRegistry:
    """
    Fixed collection of chambers, keyed by chamber id.

    The registry is populated once at startup and never grows or shrinks.
    It is created by the composition root (`build_app_system`) and passed by
    reference to the controller and UI; there is no module-level instance.

    Notes
    -----
    Lookups of unknown ids fail with `ChamberNotFoundError`; there is no
    fallback to a default chamber.

    Attributes
    ----------
    _chambers
        Internal mapping of chamber id -> Chamber, in configured order.
    """

    _chambers: Dict[str, Chamber] = field(default_factory=dict)

    @classmethod
    def create(
        cls,
        chambers: Optional[Iterable[ChamberConfig]] = None,
        default_settings: Optional[DryingSettings] = None,
        bounds: Optional[SettingsBounds] = None,
    ) -> "ChamberRegistry":
        """
        Build a registry with all devices off and default settings.

        Parameters
        ----------
        chambers
            Chamber identities. Defaults to chambers "1", "2", "3".
        default_settings
            Initial settings for every chamber (30 C, 50 %, 120 min by default).
        bounds
            Allowed settings ranges.

        Returns
        -------
        ChamberRegistry
            Populated registry.
        """
        settings = default_settings or DryingSettings()
        limits = bounds or SettingsBounds()
        registry = cls()
        for cfg in chambers if chambers is not None else default_chambers():
            registry._chambers[cfg.chamber_id] = Chamber(
                chamber_id=cfg.chamber_id,
                name=cfg.name,
                settings=SettingsStore(bounds=limits, settings=settings),
            )
        return registry

    def lookup(self, chamber_id: str) -> Chamber:
        """
        Return the chamber registered under `chamber_id`.

        Raises
        ------
        ChamberNotFoundError
            If the id is unknown or not a string.
        """
        if not isinstance(chamber_id, str):
            raise ChamberNotFoundError(chamber_id)
        try:
            return self._chambers[chamber_id]
        except KeyError:
            raise ChamberNotFoundError(chamber_id) from None

    def ids(self) -> List[str]:
        return list(self._chambers)

    def all(self) -> List[Chamber]:
        return list(self._chambers.values())

    def snapshots(self) -> List[ChamberSnapshot]:
        return [c.snapshot() for c in self._chambers.values()]
