from __future__ import annotations

import threading
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Callable, Dict, List, Mapping, Optional, Protocol

from dryer_app.core.registry import ChamberRegistry
from dryer_app.core.state.device_store import ActuatorKey
from dryer_app.domain.events import ChangeEvent, DeviceToggled, SessionChanged, SessionTicked, SettingsUpdated
from dryer_app.domain.models import ChamberSnapshot, SessionStatus
from dryer_app.runtime.drying_ticker import DryingTickerThread
from dryer_app.runtime.event_bus import EventBus


class Ticker(Protocol):
    def start(self) -> None: ...
    def stop(self) -> None: ...
    def join(self, timeout: Optional[float] = ...) -> None: ...


TickerFactory = Callable[[str], Ticker]


@dataclass
class DryingController:
    """
    Orchestrate chamber mutations, change notification and tick sources.

    Responsibilities
    ----------------
    - Resolve chamber ids through the `ChamberRegistry`.
    - Apply mutations (toggle, settings update, start, reset, tick).
    - Publish the resulting change events to the `EventBus`.
    - Own one tick source per ACTIVE session: created on start, cancelled
      on completion or reset.

    Notes
    -----
    This controller contains orchestration logic only. Validation and state
    transitions live in the stores and the session state machine; errors
    raised there propagate unchanged to the caller.

    Parameters
    ----------
    registry
        Fixed chamber collection.
    bus
        Optional event bus. If None, publishing is skipped.
    tick_interval_s
        Cadence of the default tick source.
    ticker_factory
        Optional factory creating a tick source for a chamber id. Defaults to
        a `DryingTickerThread` calling :meth:`tick`.
    """

    registry: ChamberRegistry
    bus: Optional[EventBus] = None
    tick_interval_s: float = 1.0
    ticker_factory: Optional[TickerFactory] = None

    _tickers: Dict[str, Ticker] = field(default_factory=dict, init=False, repr=False)
    _lock: threading.Lock = field(default_factory=threading.Lock, init=False, repr=False)

    # --- Mutators ---
    def toggle_device(self, chamber_id: str, name: ActuatorKey) -> DeviceToggled:
        """
        Flip one actuator in a chamber.

        Raises
        ------
        ChamberNotFoundError
            If `chamber_id` is unknown.
        InvalidActuatorError
            If `name` is not a known actuator.
        """
        ev = self.registry.lookup(chamber_id).toggle_device(name)
        self._publish(ev)
        return ev

    def update_settings(self, chamber_id: str, partial: Mapping[str, Any]) -> SettingsUpdated:
        """
        Merge a partial settings update into a chamber.

        Raises
        ------
        ChamberNotFoundError
            If `chamber_id` is unknown.
        SessionActiveError
            If the chamber's drying session is ACTIVE.
        InvalidSettingError, OutOfBoundsError
            If the update is invalid.
        """
        ev = self.registry.lookup(chamber_id).update_settings(partial)
        self._publish(ev)
        return ev

    def start_drying(self, chamber_id: str) -> SessionChanged:
        """
        Start the automatic drying countdown and its tick source.

        Returns
        -------
        SessionChanged
            STARTED transition event.

        Raises
        ------
        ChamberNotFoundError
            If `chamber_id` is unknown.
        AlreadyActiveError
            If the session is already ACTIVE.
        SessionCompletedError
            If the session is COMPLETED and has not been reset.

        Notes
        -----
        If the tick source cannot be created or started, the session is reset
        to IDLE and the error propagates.
        """
        chamber = self.registry.lookup(chamber_id)
        with self._lock:
            ev = chamber.start_drying()
            try:
                self._replace_ticker(chamber_id)
            except Exception:
                # no tick source, so do not leave the session ACTIVE
                chamber.reset_session()
                raise
        print(f"[APP][SESSION] {chamber.name}: drying started ({ev.remaining_seconds} s)")
        self._publish(ev)
        return ev

    def reset_session(self, chamber_id: str) -> Optional[SessionChanged]:
        """
        Return a chamber's session to IDLE, cancelling its tick source.

        Returns
        -------
        SessionChanged or None
            RESET transition event, or None if the session was already IDLE.
        """
        chamber = self.registry.lookup(chamber_id)
        with self._lock:
            self._cancel_ticker(chamber_id)
            ev = chamber.reset_session()
        if ev is not None:
            self._publish(ev)
        return ev

    def tick(
        self,
        chamber_id: str,
        elapsed_units: int = 1,
        now: Optional[datetime] = None,
        source: Optional[Ticker] = None,
    ) -> bool:
        """
        Advance a chamber's countdown.

        Parameters
        ----------
        chamber_id
            Chamber to tick.
        elapsed_units
            Seconds elapsed since the previous tick.
        now
            Optional timestamp for emitted events.
        source
            Tick source issuing the call. Ticks from a source that is no longer
            the chamber's current one are ignored.

        Returns
        -------
        bool
            True while the session is still ACTIVE after the tick. Tick
            sources stop when this returns False.

        Side Effects
        ------------
        - Publishes `SessionTicked` while ACTIVE, or `SessionChanged`
          (COMPLETED) on the tick that reaches zero.
        - Cancels the chamber's tick source on completion.
        """
        chamber = self.registry.lookup(chamber_id)
        with self._lock:
            if source is not None and self._tickers.get(chamber_id) is not source:
                return False
            ev = chamber.tick(elapsed_units, now=now)
            if ev is not None:
                self._cancel_ticker(chamber_id)

        if ev is not None:
            print(f"[APP][SESSION] {chamber.name}: drying completed")
            self._publish(ev)
            return False

        if chamber.session_status is not SessionStatus.ACTIVE:
            return False

        remaining = chamber.remaining_seconds
        self._publish(
            SessionTicked(
                chamber_id=chamber_id,
                remaining_seconds=int(remaining or 0),
                timestamp=now or datetime.now(),
            )
        )
        return True

    def sync(self, chamber_id: str, now: Optional[datetime] = None) -> Optional[SessionChanged]:
        """
        Catch a chamber's countdown up with the wall clock.

        Returns
        -------
        SessionChanged or None
            COMPLETED transition event if the countdown reached zero.
        """
        chamber = self.registry.lookup(chamber_id)
        with self._lock:
            ev = chamber.sync(now)
            if ev is not None:
                self._cancel_ticker(chamber_id)
        if ev is not None:
            self._publish(ev)
        return ev

    # --- Read accessors ---
    def snapshot(self, chamber_id: str) -> ChamberSnapshot:
        return self.registry.lookup(chamber_id).snapshot()

    def snapshots(self) -> List[ChamberSnapshot]:
        return self.registry.snapshots()

    def active_tickers(self) -> List[str]:
        with self._lock:
            return list(self._tickers)

    # --- Lifecycle ---
    def stop(self) -> None:
        """
        Cancel every tick source and wait briefly for shutdown.
        """
        with self._lock:
            tickers = list(self._tickers.values())
            self._tickers.clear()
        for t in tickers:
            t.stop()
        for t in tickers:
            t.join(timeout=2.0)

    # Callers hold self._lock.
    def _cancel_ticker(self, chamber_id: str) -> None:
        ticker = self._tickers.pop(chamber_id, None)
        if ticker is not None:
            ticker.stop()

    def _replace_ticker(self, chamber_id: str) -> None:
        self._cancel_ticker(chamber_id)
        factory = self.ticker_factory or self._default_ticker
        ticker = factory(chamber_id)
        # ticks block on self._lock until the ticker is registered
        ticker.start()
        self._tickers[chamber_id] = ticker

    def _default_ticker(self, chamber_id: str) -> Ticker:
        return DryingTickerThread(chamber_id, tick=self.tick, interval_s=self.tick_interval_s)

    def _publish(self, ev: ChangeEvent) -> None:
        if self.bus is not None:
            self.bus.publish(ev)
