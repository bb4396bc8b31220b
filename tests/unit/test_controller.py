"""
Unit tests for dryer_app.services.controller.DryingController.

These tests validate orchestration behavior:
- routing mutations to the right chamber
- publishing the resulting change events to the bus
- creating a tick source on start and cancelling it on completion or reset
- leaving state untouched when a mutation is rejected

Tick sources are replaced by a fake factory, so no threads are involved.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from typing import List, Optional

import pytest

from dryer_app.core.registry import ChamberRegistry
from dryer_app.domain.errors import (
    AlreadyActiveError,
    ChamberNotFoundError,
    InvalidActuatorError,
    SessionActiveError,
    SessionCompletedError,
)
from dryer_app.domain.events import DeviceToggled, SessionChanged, SessionTicked, SessionTransition, SettingsUpdated
from dryer_app.domain.models import SessionStatus
from dryer_app.services.controller import DryingController

T0 = datetime(2026, 1, 1, 10, 0, 0)


@dataclass
class FakeTicker:
    """
    Fake tick source recording lifecycle calls.
    """

    chamber_id: str
    started: bool = False
    stopped: bool = False
    joined: bool = False

    def start(self) -> None:
        self.started = True

    def stop(self) -> None:
        self.stopped = True

    def join(self, timeout: Optional[float] = None) -> None:
        self.joined = True


@dataclass
class FakeTickerFactory:
    created: List[FakeTicker] = field(default_factory=list)

    def __call__(self, chamber_id: str) -> FakeTicker:
        t = FakeTicker(chamber_id)
        self.created.append(t)
        return t


@dataclass
class FakeBus:
    """
    Fake event bus that records published change events.
    """

    published: list = field(default_factory=list)

    def publish(self, ev) -> None:
        self.published.append(ev)


def _make(bus: Optional[FakeBus] = None):
    factory = FakeTickerFactory()
    ctrl = DryingController(
        registry=ChamberRegistry.create(),
        bus=bus,  # type: ignore[arg-type]
        ticker_factory=factory,
    )
    return ctrl, factory


def test_toggle_publishes_event() -> None:
    bus = FakeBus()
    ctrl, _ = _make(bus)

    ev = ctrl.toggle_device("1", "heater1")

    assert isinstance(ev, DeviceToggled)
    assert bus.published == [ev]
    assert ctrl.snapshot("1").devices["heater1"] is True
    assert ctrl.snapshot("2").devices["heater1"] is False


def test_invalid_toggle_publishes_nothing() -> None:
    bus = FakeBus()
    ctrl, _ = _make(bus)

    with pytest.raises(InvalidActuatorError):
        ctrl.toggle_device("1", "heater9")

    assert bus.published == []
    assert not any(ctrl.snapshot("1").devices.values())


def test_unknown_chamber_rejected() -> None:
    ctrl, factory = _make()
    with pytest.raises(ChamberNotFoundError):
        ctrl.toggle_device("99", "heater1")
    with pytest.raises(ChamberNotFoundError):
        ctrl.start_drying("99")
    assert factory.created == []


def test_update_settings_publishes_event() -> None:
    bus = FakeBus()
    ctrl, _ = _make(bus)

    ev = ctrl.update_settings("2", {"drying_time": 90})

    assert isinstance(ev, SettingsUpdated)
    assert bus.published == [ev]
    assert ctrl.snapshot("2").settings.drying_time == 90


def test_start_creates_and_starts_ticker() -> None:
    bus = FakeBus()
    ctrl, factory = _make(bus)

    ev = ctrl.start_drying("1")

    assert ev.transition is SessionTransition.STARTED
    assert bus.published == [ev]
    assert len(factory.created) == 1
    assert factory.created[0].chamber_id == "1"
    assert factory.created[0].started
    assert ctrl.active_tickers() == ["1"]


def test_second_start_rejected_without_new_ticker() -> None:
    ctrl, factory = _make()
    ctrl.start_drying("1")

    with pytest.raises(AlreadyActiveError):
        ctrl.start_drying("1")

    assert len(factory.created) == 1
    assert not factory.created[0].stopped


def test_settings_update_rejected_while_active() -> None:
    bus = FakeBus()
    ctrl, _ = _make(bus)
    ctrl.start_drying("1")
    bus.published.clear()

    with pytest.raises(SessionActiveError):
        ctrl.update_settings("1", {"drying_time": 60})

    assert bus.published == []
    # other chambers are unaffected
    ctrl.update_settings("2", {"drying_time": 60})


def test_tick_publishes_ticked_while_active() -> None:
    bus = FakeBus()
    ctrl, _ = _make(bus)
    ctrl.start_drying("1")
    bus.published.clear()

    assert ctrl.tick("1", 3600, now=T0) is True

    assert len(bus.published) == 1
    ev = bus.published[0]
    assert isinstance(ev, SessionTicked)
    assert ev.remaining_seconds == 3600
    assert ev.timestamp == T0
    assert ctrl.snapshot("1").session.progress_percent == 50


def test_tick_to_completion_cancels_ticker() -> None:
    bus = FakeBus()
    ctrl, factory = _make(bus)
    ctrl.update_settings("1", {"drying_time": 30})
    ctrl.start_drying("1")
    bus.published.clear()

    assert ctrl.tick("1", 1800) is False

    assert len(bus.published) == 1
    ev = bus.published[0]
    assert isinstance(ev, SessionChanged)
    assert ev.transition is SessionTransition.COMPLETED
    assert factory.created[0].stopped
    assert ctrl.active_tickers() == []


def test_tick_after_completion_is_noop() -> None:
    bus = FakeBus()
    ctrl, _ = _make(bus)
    ctrl.update_settings("1", {"drying_time": 30})
    ctrl.start_drying("1")
    ctrl.tick("1", 1800)
    bus.published.clear()

    assert ctrl.tick("1", 1) is False
    assert bus.published == []
    assert ctrl.snapshot("1").session.remaining_seconds == 0


def test_start_after_completion_requires_reset() -> None:
    ctrl, factory = _make()
    ctrl.update_settings("1", {"drying_time": 30})
    ctrl.start_drying("1")
    ctrl.tick("1", 1800)

    with pytest.raises(SessionCompletedError):
        ctrl.start_drying("1")

    ctrl.reset_session("1")
    ctrl.start_drying("1")
    assert len(factory.created) == 2
    assert ctrl.snapshot("1").session.status is SessionStatus.ACTIVE


def test_reset_active_cancels_ticker_and_publishes() -> None:
    bus = FakeBus()
    ctrl, factory = _make(bus)
    ctrl.start_drying("1")
    bus.published.clear()

    ev = ctrl.reset_session("1")

    assert ev is not None
    assert ev.transition is SessionTransition.RESET
    assert bus.published == [ev]
    assert factory.created[0].stopped
    assert ctrl.active_tickers() == []


def test_reset_idle_publishes_nothing() -> None:
    bus = FakeBus()
    ctrl, _ = _make(bus)
    assert ctrl.reset_session("1") is None
    assert bus.published == []


def test_sync_completes_overdue_session() -> None:
    bus = FakeBus()
    ctrl, factory = _make(bus)
    ctrl.update_settings("1", {"drying_time": 30})
    ctrl.start_drying("1")
    started_at = ctrl.snapshot("1").session.started_at
    assert started_at is not None

    ev = ctrl.sync("1", now=started_at.replace(year=started_at.year + 1))

    assert ev is not None
    assert ev.transition is SessionTransition.COMPLETED
    assert factory.created[0].stopped


def test_stop_stops_and_joins_all_tickers() -> None:
    ctrl, factory = _make()
    ctrl.start_drying("1")
    ctrl.start_drying("3")

    ctrl.stop()

    assert ctrl.active_tickers() == []
    assert all(t.stopped and t.joined for t in factory.created)


def test_no_bus_is_allowed() -> None:
    ctrl, _ = _make(None)
    ctrl.toggle_device("1", "fan1")
    ctrl.start_drying("1")
    assert ctrl.tick("1", 5) is True


def test_snapshots_in_registry_order() -> None:
    ctrl, _ = _make()
    assert [s.chamber_id for s in ctrl.snapshots()] == ["1", "2", "3"]


def test_tick_from_replaced_source_is_ignored() -> None:
    """
    A tick issued by a cancelled tick source must not reach the session that
    replaced it.
    """
    bus = FakeBus()
    ctrl, factory = _make(bus)
    ctrl.start_drying("1")
    old = factory.created[0]
    ctrl.reset_session("1")
    ctrl.start_drying("1")
    bus.published.clear()

    assert ctrl.tick("1", 5, source=old) is False

    assert ctrl.snapshot("1").session.remaining_seconds == 7200
    assert bus.published == []


def test_tick_from_current_source_is_applied() -> None:
    ctrl, factory = _make()
    ctrl.start_drying("1")

    assert ctrl.tick("1", 5, source=factory.created[0]) is True
    assert ctrl.snapshot("1").session.remaining_seconds == 7195


def test_tick_from_source_after_completion_is_ignored() -> None:
    ctrl, factory = _make()
    ctrl.update_settings("1", {"drying_time": 30})
    ctrl.start_drying("1")
    src = factory.created[0]
    ctrl.tick("1", 1800, source=src)

    assert ctrl.tick("1", 1, source=src) is False


@dataclass
class FailingStartTicker(FakeTicker):
    def start(self) -> None:
        raise RuntimeError("cannot start thread")


def test_start_rolled_back_when_ticker_factory_fails() -> None:
    bus = FakeBus()

    def broken_factory(chamber_id: str) -> FakeTicker:
        raise RuntimeError("no threads available")

    ctrl = DryingController(registry=ChamberRegistry.create(), bus=bus, ticker_factory=broken_factory)  # type: ignore[arg-type]

    with pytest.raises(RuntimeError):
        ctrl.start_drying("1")

    assert ctrl.snapshot("1").session.status is SessionStatus.IDLE
    assert ctrl.active_tickers() == []
    assert bus.published == []
    # settings are not left locked
    ctrl.update_settings("1", {"drying_time": 60})


def test_start_rolled_back_when_ticker_start_fails() -> None:
    ctrl = DryingController(registry=ChamberRegistry.create(), ticker_factory=FailingStartTicker)

    with pytest.raises(RuntimeError):
        ctrl.start_drying("2")

    assert ctrl.snapshot("2").session.status is SessionStatus.IDLE
    assert ctrl.active_tickers() == []
