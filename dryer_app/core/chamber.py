from __future__ import annotations

import threading
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Dict, Mapping, Optional

from dryer_app.core.session import DryingSession
from dryer_app.core.state.device_store import ActuatorKey, DeviceStore
from dryer_app.core.state.reading_store import ReadingsStore
from dryer_app.core.state.settings_store import SettingsStore
from dryer_app.domain.errors import SessionActiveError
from dryer_app.domain.events import DeviceToggled, SessionChanged, SettingsUpdated
from dryer_app.domain.models import ChamberSnapshot, DryingSettings, SensorReading, SessionStatus, SessionView


@dataclass
class Chamber:
    """
    Thread-safe facade for one drying chamber.

    'Chamber' exclusively owns and coordinates access to:
    - actuator states (`DeviceStore`)
    - automatic drying settings (`SettingsStore`)
    - the drying countdown (`DryingSession`)
    - latest mock environment readings (`ReadingsStore`)

    Concurrency Model
    -----------------
    All reads/writes are guarded by a single re-entrant lock
    (`threading.RLock`), so a tick from the ticker thread never interleaves
    with a UI mutation on the same chamber. Chambers share nothing, so no
    cross-chamber locking exists.

    Design Notes
    ------------
    - Mutators return change events; publishing them is the controller's job.
    - Settings are locked while the session is ACTIVE. Actuator toggles are
      not; manual control stays independent of automatic mode.
    - :meth:`snapshot` returns copies so the UI can render without holding
      the lock.

    Attributes
    ----------
    chamber_id
        Registry identifier.
    name
        Display name.
    devices
        Actuator store.
    settings
        Settings store.
    session
        Drying countdown.
    readings
        Latest sensor readings.
    """

    chamber_id: str
    name: str
    devices: DeviceStore = field(default_factory=DeviceStore)
    settings: SettingsStore = field(default_factory=SettingsStore)
    session: DryingSession = field(default_factory=DryingSession)
    readings: ReadingsStore = field(default_factory=ReadingsStore)

    _lock: threading.RLock = field(default_factory=threading.RLock, init=False, repr=False)

    def __post_init__(self) -> None:
        self.devices.chamber_id = self.chamber_id
        self.settings.chamber_id = self.chamber_id
        self.session.chamber_id = self.chamber_id

    # --- Devices ---
    def toggle_device(self, name: ActuatorKey, now: Optional[datetime] = None) -> DeviceToggled:
        with self._lock:
            return self.devices.toggle(name, now=now)

    def get_device(self, name: ActuatorKey) -> bool:
        with self._lock:
            return self.devices.get(name)

    def get_devices(self) -> Dict[str, bool]:
        with self._lock:
            return self.devices.get_all()

    # --- Settings ---
    def update_settings(self, partial: Mapping[str, Any], now: Optional[datetime] = None) -> SettingsUpdated:
        """
        Merge a partial settings update.

        Raises
        ------
        SessionActiveError
            If the drying session is ACTIVE.
        InvalidSettingError, OutOfBoundsError
            See :meth:`SettingsStore.update`.
        """
        with self._lock:
            if self.session.is_active:
                raise SessionActiveError(self.chamber_id)
            return self.settings.update(partial, now=now)

    def get_settings(self) -> DryingSettings:
        with self._lock:
            return self.settings.get()

    # --- Session ---
    def start_drying(self, now: Optional[datetime] = None) -> SessionChanged:
        with self._lock:
            return self.session.start(self.settings.get(), now=now)

    def tick(self, elapsed_units: int = 1, now: Optional[datetime] = None) -> Optional[SessionChanged]:
        with self._lock:
            return self.session.tick(elapsed_units, now=now)

    def sync(self, now: Optional[datetime] = None) -> Optional[SessionChanged]:
        with self._lock:
            return self.session.sync(now)

    def reset_session(self, now: Optional[datetime] = None) -> Optional[SessionChanged]:
        with self._lock:
            return self.session.reset(now)

    @property
    def session_status(self) -> SessionStatus:
        with self._lock:
            return self.session.status

    @property
    def remaining_seconds(self) -> Optional[int]:
        with self._lock:
            return self.session.remaining_seconds

    def session_view(self) -> SessionView:
        with self._lock:
            return self.session.view(self.settings.get())

    # --- Readings ---
    def record_reading(self, reading: SensorReading) -> None:
        with self._lock:
            self.readings.update(reading)

    def snapshot(self) -> ChamberSnapshot:
        """
        Consistent copy of the whole chamber state.

        Returns
        -------
        ChamberSnapshot
            Devices, settings, session view and readings captured under a
            single lock acquisition.
        """
        with self._lock:
            return ChamberSnapshot(
                chamber_id=self.chamber_id,
                name=self.name,
                devices=self.devices.get_all(),
                settings=self.settings.get(),
                session=self.session.view(self.settings.get()),
                readings=dict(self.readings.latest),
            )
