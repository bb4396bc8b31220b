from __future__ import annotations

import math
from dataclasses import dataclass
from datetime import datetime
from typing import Optional, Tuple

from dryer_app.core.timing import elapsed_seconds, format_hms, format_minutes_estimate, progress_percent
from dryer_app.domain.errors import AlreadyActiveError, SessionCompletedError
from dryer_app.domain.events import SessionChanged, SessionTransition
from dryer_app.domain.models import DryingSettings, SessionStatus, SessionView


@dataclass
class DryingSession:
    """
    Automatic drying countdown for one chamber.

    State Machine
    -------------
    IDLE --start()--> ACTIVE --tick()/sync() reaching 0--> COMPLETED
    ACTIVE/COMPLETED --reset()--> IDLE

    - `start` snapshots the settings; later settings edits do not affect a
      running countdown.
    - Ticks outside ACTIVE are ignored, so a late timer firing against a
      completed session cannot change it.
    - Progress and the time display are derived on demand by :meth:`view`.

    Notes
    -----
    Not thread-safe; the enclosing `Chamber` serializes access.

    Attributes
    ----------
    chamber_id
        Owning chamber id, copied into emitted events and errors.
    status
        Current lifecycle state.
    started_at
        Wall-clock start time of the current run.
    total_seconds
        Planned duration captured at start.
    remaining_seconds
        Countdown value, never below zero.
    settings_snapshot
        Settings captured at start.
    """

    chamber_id: str = ""
    status: SessionStatus = SessionStatus.IDLE
    started_at: Optional[datetime] = None
    total_seconds: Optional[int] = None
    remaining_seconds: Optional[int] = None
    settings_snapshot: Optional[DryingSettings] = None

    @property
    def is_active(self) -> bool:
        return self.status is SessionStatus.ACTIVE

    def start(self, settings: DryingSettings, now: Optional[datetime] = None) -> SessionChanged:
        """
        Begin a countdown of ``settings.drying_time`` minutes.

        Parameters
        ----------
        settings
            Current (already bound-checked) settings; captured as a snapshot.
        now
            Optional start timestamp; defaults to local current time.

        Returns
        -------
        SessionChanged
            STARTED transition event.

        Raises
        ------
        AlreadyActiveError
            If the session is ACTIVE.
        SessionCompletedError
            If the session is COMPLETED and has not been reset.
        ValueError
            If `settings.drying_time` is shorter than one minute.
        """
        if self.status is SessionStatus.ACTIVE:
            raise AlreadyActiveError(self.chamber_id)
        if self.status is SessionStatus.COMPLETED:
            raise SessionCompletedError(self.chamber_id)
        if int(settings.drying_time) < 1:
            raise ValueError(f"drying_time must be at least 1 minute, got {settings.drying_time}")

        ts = now or datetime.now()
        self.settings_snapshot = settings
        self.started_at = ts
        self.total_seconds = int(settings.drying_time) * 60
        self.remaining_seconds = self.total_seconds
        self.status = SessionStatus.ACTIVE
        return self._event(SessionTransition.STARTED, ts)

    def tick(self, elapsed_units: int = 1, now: Optional[datetime] = None) -> Optional[SessionChanged]:
        """
        Advance the countdown by `elapsed_units` seconds.

        Parameters
        ----------
        elapsed_units
            Seconds elapsed since the previous tick (>= 0).
        now
            Optional timestamp for the completion event.

        Returns
        -------
        SessionChanged or None
            COMPLETED transition event if this tick reached zero, else None.

        Raises
        ------
        ValueError
            If `elapsed_units` is negative.
        """
        if elapsed_units < 0:
            raise ValueError(f"elapsed_units must be >= 0, got {elapsed_units}")
        if self.status is not SessionStatus.ACTIVE:
            return None

        _, remaining = self._countdown()
        self.remaining_seconds = max(0, remaining - int(elapsed_units))
        return self._complete_if_done(now)

    def sync(self, now: Optional[datetime] = None) -> Optional[SessionChanged]:
        """
        Re-derive the countdown from the wall clock.

        Used to catch up after the tick source fell behind. The remaining time
        only ever decreases.

        Returns
        -------
        SessionChanged or None
            COMPLETED transition event if the countdown reached zero.
        """
        if self.status is not SessionStatus.ACTIVE:
            return None

        total, remaining = self._countdown()
        if self.started_at is None:
            raise RuntimeError(f"Chamber {self.chamber_id}: active session has no start time")
        t = now or datetime.now()
        elapsed = max(0, math.floor((t - self.started_at).total_seconds()))
        self.remaining_seconds = min(remaining, max(0, total - elapsed))
        return self._complete_if_done(t)

    def reset(self, now: Optional[datetime] = None) -> Optional[SessionChanged]:
        """
        Return to IDLE and clear captured values.

        Resetting an ACTIVE session aborts the countdown. Resetting an IDLE
        session does nothing and returns None.
        """
        if self.status is SessionStatus.IDLE:
            return None

        self.status = SessionStatus.IDLE
        self.started_at = None
        self.total_seconds = None
        self.remaining_seconds = None
        self.settings_snapshot = None
        return self._event(SessionTransition.RESET, now or datetime.now())

    def view(self, settings: DryingSettings) -> SessionView:
        """
        Build a read-only view with derived values.

        Parameters
        ----------
        settings
            Current chamber settings, used for the IDLE time estimate.

        Returns
        -------
        SessionView
            Status, captured values, elapsed seconds, progress percent and
            the ``HH:MM:SS`` display.
        """
        if self.status is SessionStatus.IDLE:
            display = format_minutes_estimate(settings.drying_time)
        else:
            display = format_hms(self.remaining_seconds or 0)

        return SessionView(
            status=self.status,
            started_at=self.started_at,
            total_seconds=self.total_seconds,
            remaining_seconds=self.remaining_seconds,
            elapsed_seconds=elapsed_seconds(self.total_seconds, self.remaining_seconds),
            progress_percent=progress_percent(self.total_seconds, self.remaining_seconds),
            time_display=display,
        )

    def _countdown(self) -> Tuple[int, int]:
        if self.total_seconds is None or self.remaining_seconds is None:
            raise RuntimeError(f"Chamber {self.chamber_id}: active session has no countdown")
        return self.total_seconds, self.remaining_seconds

    def _complete_if_done(self, now: Optional[datetime]) -> Optional[SessionChanged]:
        if self.remaining_seconds != 0:
            return None
        self.status = SessionStatus.COMPLETED
        return self._event(SessionTransition.COMPLETED, now or datetime.now())

    def _event(self, transition: SessionTransition, ts: datetime) -> SessionChanged:
        return SessionChanged(
            chamber_id=self.chamber_id,
            transition=transition,
            status=self.status,
            timestamp=ts,
            remaining_seconds=self.remaining_seconds,
        )
