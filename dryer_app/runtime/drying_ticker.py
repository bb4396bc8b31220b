from __future__ import annotations

import threading
import time
from typing import Callable

# tick(chamber_id, elapsed_whole_seconds, source=ticker) -> True while the
# session is still ACTIVE
TickFn = Callable[..., bool]


class DryingTickerThread:
    """
    Periodic tick source for one chamber's drying session.

    Responsibilities
    ----------------
    - Wake up every `interval_s` seconds while not stopped.
    - Measure elapsed time with a monotonic clock and forward whole seconds to
      `tick`; fractional remainders are carried to the next wake-up so the
      countdown does not drift when wake-ups are late.
    - Exit as soon as `tick` reports the session is no longer ACTIVE, so no
      timer keeps firing against a completed or reset session.

    Concurrency Model
    -----------------
    - Sleeping is done with ``stop_event.wait(interval)`` so :meth:`stop`
      cancels the thread immediately.
    - Exceptions raised by `tick` are caught and logged to avoid killing the
      thread.

    Parameters
    ----------
    chamber_id
        Chamber whose session is being driven.
    tick
        Callback applying the elapsed seconds. Called as
        ``tick(chamber_id, seconds, source=self)`` so the receiver can ignore
        ticks from a source it has already replaced.
    interval_s
        Wake-up cadence in seconds.
    clock
        Monotonic time source (injectable for tests).
    """

    def __init__(
        self,
        chamber_id: str,
        tick: TickFn,
        interval_s: float = 1.0,
        clock: Callable[[], float] = time.monotonic,
    ):
        self.chamber_id = chamber_id
        self._tick = tick
        self._interval_s = float(interval_s)
        self._clock = clock
        self._stop = threading.Event()
        self._thread = threading.Thread(target=self._run, name=f"drying-ticker-{chamber_id}", daemon=True)

    def start(self) -> None:
        """
        Start the ticker thread if it is not already running.
        """
        if not self._thread.is_alive():
            self._thread.start()

    def stop(self) -> None:
        """
        Signal the ticker thread to stop.
        """
        self._stop.set()

    def join(self, timeout: float | None = 2.0) -> None:
        self._thread.join(timeout=timeout)

    def is_alive(self) -> bool:
        return self._thread.is_alive()

    @property
    def stopped(self) -> bool:
        return self._stop.is_set()

    def _run(self) -> None:
        """
        Ticker loop: wait, measure, forward whole seconds.
        """
        last = self._clock()
        carry = 0.0
        while not self._stop.wait(self._interval_s):
            now = self._clock()
            carry += max(0.0, now - last)
            last = now

            whole = int(carry)
            if whole == 0:
                continue
            carry -= whole

            if self._stop.is_set():
                break

            try:
                still_active = self._tick(self.chamber_id, whole, source=self)
            except Exception as e:
                print(f"[APP][TICKER] chamber {self.chamber_id} tick failed: {e!r}")
                continue

            if not still_active:
                break

        self._stop.set()
