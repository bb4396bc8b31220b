from __future__ import annotations

import math
from dataclasses import dataclass, field, replace
from datetime import datetime
from numbers import Real
from typing import Any, Dict, Mapping, Optional, Tuple

from dryer_app.domain.errors import InvalidSettingError, OutOfBoundsError
from dryer_app.domain.events import SettingsUpdated
from dryer_app.domain.models import DryingSettings, SettingsBounds

# camelCase names used by the dashboard forms
FIELD_ALIASES: Dict[str, str] = {
    "desiredTemperature": "desired_temperature",
    "desiredHumidity": "desired_humidity",
    "dryingTime": "drying_time",
}

SETTING_FIELDS: Tuple[str, ...] = ("desired_temperature", "desired_humidity", "drying_time")


@dataclass
class SettingsStore:
    """
    In-memory store for one chamber's automatic drying settings.

    Update Policy
    -------------
    - Partial merge: fields absent from an update keep their current value.
    - Finite out-of-range numbers are clamped to the nearest bound.
    - NaN, infinities and non-numeric values raise `OutOfBoundsError`.
    - Unknown field names raise `InvalidSettingError`.
    - The whole update is validated before anything is written.

    Notes
    -----
    This store does not know about the drying session. The enclosing
    `Chamber` rejects updates while a session is active.

    Attributes
    ----------
    chamber_id
        Owning chamber id, copied into emitted events.
    bounds
        Allowed ranges for each field.
    settings
        Current settings.
    """

    chamber_id: str = ""
    bounds: SettingsBounds = field(default_factory=SettingsBounds)
    settings: DryingSettings = field(default_factory=DryingSettings)

    def __post_init__(self) -> None:
        # bring configured defaults into range
        self.settings, _ = self._merge(self._as_dict(self.settings))

    def get(self) -> DryingSettings:
        return self.settings

    def update(self, partial: Mapping[str, Any], now: Optional[datetime] = None) -> SettingsUpdated:
        """
        Merge `partial` into the current settings.

        Parameters
        ----------
        partial
            Mapping of field name -> new value. Accepts snake_case field names
            and the camelCase aliases in `FIELD_ALIASES`.
        now
            Optional event timestamp; defaults to local current time.

        Returns
        -------
        SettingsUpdated
            Event with the merged settings and the changed/clamped fields.

        Raises
        ------
        InvalidSettingError
            If a field name is unknown.
        OutOfBoundsError
            If a value is not a finite number.
        """
        normalized: Dict[str, Any] = {}
        for key, value in partial.items():
            name = FIELD_ALIASES.get(key, key)
            if name not in SETTING_FIELDS:
                raise InvalidSettingError(key)
            normalized[name] = value

        merged, clamped = self._merge(normalized)
        self.settings = merged
        return SettingsUpdated(
            chamber_id=self.chamber_id,
            settings=merged,
            changed=tuple(normalized),
            clamped=clamped,
            timestamp=now or datetime.now(),
        )

    def _merge(self, values: Mapping[str, Any]) -> Tuple[DryingSettings, Tuple[str, ...]]:
        changes: Dict[str, Any] = {}
        clamped = []
        for name, value in values.items():
            bound = self.bounds.for_field(name)
            if isinstance(value, bool) or not isinstance(value, Real) or not math.isfinite(value):
                raise OutOfBoundsError(name, value, bound.low, bound.high)

            v = bound.clamp(float(value))
            if v != value:
                clamped.append(name)
            changes[name] = int(round(v)) if name == "drying_time" else v

        return replace(self.settings, **changes), tuple(clamped)

    @staticmethod
    def _as_dict(settings: DryingSettings) -> Dict[str, Any]:
        return {name: getattr(settings, name) for name in SETTING_FIELDS}
