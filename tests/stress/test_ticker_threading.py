"""
Threading tests for dryer_app.runtime.drying_ticker.DryingTickerThread.

These tests run real ticker threads with a short wake-up interval and an
injected clock, and validate:
- elapsed clock time is forwarded as whole seconds
- the thread exits on its own once the session completes
- stop() cancels a running ticker promptly
- a failing tick callback does not kill the thread
"""

from __future__ import annotations

import itertools
import threading
import time
from typing import Callable, List

import pytest

from dryer_app.core.registry import ChamberRegistry
from dryer_app.domain.events import SessionChanged, SessionTransition
from dryer_app.domain.models import SessionStatus
from dryer_app.runtime.drying_ticker import DryingTickerThread
from dryer_app.runtime.event_bus import EventBus
from dryer_app.services.controller import DryingController


def _stepping_clock(step_s: float) -> Callable[[], float]:
    """Fake monotonic clock advancing `step_s` seconds per call."""
    counter = itertools.count()
    return lambda: next(counter) * step_s


def _wait_until(cond: Callable[[], bool], timeout: float = 5.0) -> bool:
    deadline = time.monotonic() + timeout
    while time.monotonic() < deadline:
        if cond():
            return True
        time.sleep(0.005)
    return cond()


@pytest.mark.stress
def test_ticker_forwards_whole_seconds_and_exits_when_inactive() -> None:
    calls: List[int] = []

    def tick(chamber_id: str, elapsed: int, source: object = None) -> bool:
        calls.append(elapsed)
        return len(calls) < 3

    t = DryingTickerThread("1", tick=tick, interval_s=0.001, clock=_stepping_clock(2.5))
    t.start()
    t.join(timeout=5.0)

    assert not t.is_alive()
    assert t.stopped
    # 2.5 s per wake-up: 2, then 3 (2 + carried 0.5 + 0.5), then 2
    assert calls == [2, 3, 2]


@pytest.mark.stress
def test_stop_cancels_running_ticker() -> None:
    calls: List[int] = []

    def tick(chamber_id: str, elapsed: int, source: object = None) -> bool:
        calls.append(elapsed)
        return True

    t = DryingTickerThread("1", tick=tick, interval_s=0.001, clock=_stepping_clock(1.0))
    t.start()
    assert _wait_until(lambda: len(calls) > 0)

    t.stop()
    t.join(timeout=5.0)

    assert not t.is_alive()


@pytest.mark.stress
def test_failing_tick_does_not_kill_thread() -> None:
    calls: List[int] = []

    def tick(chamber_id: str, elapsed: int, source: object = None) -> bool:
        calls.append(elapsed)
        if len(calls) == 1:
            raise RuntimeError("boom")
        return False

    t = DryingTickerThread("1", tick=tick, interval_s=0.001, clock=_stepping_clock(1.0))
    t.start()
    t.join(timeout=5.0)

    assert not t.is_alive()
    assert len(calls) == 2


@pytest.mark.stress
def test_controller_session_completes_through_real_ticker() -> None:
    """
    A 30 minute session driven by a ticker whose clock jumps 600 s per
    wake-up completes after three ticks and leaves no tick source behind.
    """
    registry = ChamberRegistry.create()
    bus = EventBus()
    tickers: List[DryingTickerThread] = []
    ctrl: DryingController

    def factory(chamber_id: str) -> DryingTickerThread:
        t = DryingTickerThread(chamber_id, tick=ctrl.tick, interval_s=0.001, clock=_stepping_clock(600.0))
        tickers.append(t)
        return t

    ctrl = DryingController(registry=registry, bus=bus, ticker_factory=factory)
    ctrl.update_settings("1", {"drying_time": 30})
    ctrl.start_drying("1")

    tickers[0].join(timeout=5.0)

    assert not tickers[0].is_alive()
    snap = ctrl.snapshot("1")
    assert snap.session.status is SessionStatus.COMPLETED
    assert snap.session.remaining_seconds == 0
    assert snap.session.progress_percent == 100
    assert ctrl.active_tickers() == []

    completed = [
        e for e in bus.drain() if isinstance(e, SessionChanged) and e.transition is SessionTransition.COMPLETED
    ]
    assert len(completed) == 1


@pytest.mark.stress
def test_reset_while_ticking_stops_ticker() -> None:
    registry = ChamberRegistry.create()
    tickers: List[DryingTickerThread] = []
    ctrl: DryingController

    def factory(chamber_id: str) -> DryingTickerThread:
        t = DryingTickerThread(chamber_id, tick=ctrl.tick, interval_s=0.001, clock=_stepping_clock(1.0))
        tickers.append(t)
        return t

    ctrl = DryingController(registry=registry, ticker_factory=factory)
    ctrl.start_drying("2")
    assert _wait_until(lambda: (ctrl.snapshot("2").session.remaining_seconds or 7200) < 7200)

    ctrl.reset_session("2")
    tickers[0].join(timeout=5.0)

    assert not tickers[0].is_alive()
    assert ctrl.snapshot("2").session.status is SessionStatus.IDLE


@pytest.mark.stress
def test_concurrent_toggles_and_ticks_keep_state_consistent() -> None:
    """
    UI-style toggles racing ticker-style ticks on the same chamber should not
    raise, and every actuator toggled an even number of times ends off.
    """
    ctrl = DryingController(registry=ChamberRegistry.create(), ticker_factory=lambda cid: _NullTicker())
    ctrl.start_drying("1")

    start = threading.Barrier(6)
    errors: List[BaseException] = []
    names = ["heater1", "heater2", "dryer", "fan1", "fan2"]

    def toggler(name: str) -> None:
        try:
            start.wait()
            for _ in range(1000):
                ctrl.toggle_device("1", name)
        except BaseException as e:
            errors.append(e)

    def ticker() -> None:
        try:
            start.wait()
            for _ in range(3000):
                ctrl.tick("1", 1)
                ctrl.snapshot("1")
        except BaseException as e:
            errors.append(e)

    threads = [threading.Thread(target=toggler, args=(n,)) for n in names]
    threads.append(threading.Thread(target=ticker))
    for t in threads:
        t.start()
    for t in threads:
        t.join(timeout=20)

    assert not errors
    snap = ctrl.snapshot("1")
    assert not any(snap.devices.values())
    assert snap.session.remaining_seconds == 7200 - 3000
    assert snap.session.status is SessionStatus.ACTIVE


class _NullTicker:
    def start(self) -> None:
        pass

    def stop(self) -> None:
        pass

    def join(self, timeout=None) -> None:
        pass


@pytest.mark.stress
def test_cancelled_ticker_does_not_tick_restarted_session() -> None:
    """
    A ticker cancelled while measuring elapsed time must not apply that time
    to a session started after the cancellation.
    """
    registry = ChamberRegistry.create()
    tickers: List[DryingTickerThread] = []
    measuring = threading.Event()
    release = threading.Event()
    ctrl: DryingController

    def blocking_clock() -> Callable[[], float]:
        calls = itertools.count()

        def clock() -> float:
            if next(calls) == 0:
                return 0.0
            measuring.set()
            release.wait(5.0)
            return 5.0

        return clock

    def factory(chamber_id: str) -> DryingTickerThread:
        # only the first ticker advances; later ones never produce a whole second
        clock = blocking_clock() if not tickers else (lambda: 0.0)
        t = DryingTickerThread(chamber_id, tick=ctrl.tick, interval_s=0.001, clock=clock)
        tickers.append(t)
        return t

    ctrl = DryingController(registry=registry, ticker_factory=factory)
    ctrl.start_drying("1")
    assert measuring.wait(5.0)

    ctrl.reset_session("1")
    ctrl.start_drying("1")
    release.set()
    tickers[0].join(timeout=5.0)

    try:
        assert not tickers[0].is_alive()
        assert ctrl.snapshot("1").session.remaining_seconds == 7200
        assert ctrl.active_tickers() == ["1"]
    finally:
        ctrl.stop()
