from __future__ import annotations

import threading
from dataclasses import dataclass, field
from queue import Empty, Full, Queue
from typing import Callable, List

from dryer_app.domain.events import ChangeEvent

ChangeListener = Callable[[ChangeEvent], None]


@dataclass
class EventBus:
    """
    In-process change-notification bus.

    The bus provides two delivery paths for every published change event:
    - A bounded thread-safe queue (:attr:`changes_q`) that the UI drains from
      its refresh timer (polling).
    - Synchronous listeners registered with :meth:`subscribe`, called on the
      publishing thread (subscription).

    Concurrency Model
    -----------------
    :class:`queue.Queue` is thread-safe. The listener list is guarded by a
    lock and copied before dispatch so listeners may unsubscribe themselves.

    Backpressure Policy
    -------------------
    If the queue is full, the event is dropped from the queue (best-effort).
    Listeners still receive it.

    Attributes
    ----------
    changes_q
        Bounded queue of change events.
    """

    changes_q: "Queue[ChangeEvent]" = field(default_factory=lambda: Queue(maxsize=5000))

    _listeners: List[ChangeListener] = field(default_factory=list, init=False, repr=False)
    _lock: threading.Lock = field(default_factory=threading.Lock, init=False, repr=False)

    def subscribe(self, listener: ChangeListener) -> None:
        with self._lock:
            if listener not in self._listeners:
                self._listeners.append(listener)

    def unsubscribe(self, listener: ChangeListener) -> None:
        with self._lock:
            if listener in self._listeners:
                self._listeners.remove(listener)

    def publish(self, ev: ChangeEvent) -> None:
        """
        Publish a change event (non-blocking).

        Parameters
        ----------
        ev
            Change event to publish.

        Notes
        -----
        A failing listener is reported and skipped; it does not prevent
        delivery to the remaining listeners or raise into the publisher.
        """
        try:
            self.changes_q.put_nowait(ev)
        except Full:
            # Drop if overloaded to protect app responsiveness.
            pass

        with self._lock:
            listeners = list(self._listeners)
        for listener in listeners:
            try:
                listener(ev)
            except Exception as e:
                print(f"[APP][BUS] listener {listener!r} failed: {e!r}")

    def drain(self, limit: int = 1000) -> List[ChangeEvent]:
        """
        Remove and return up to `limit` queued events without blocking.

        Returns
        -------
        list of ChangeEvent
            Events in publish order.
        """
        out: List[ChangeEvent] = []
        while len(out) < limit:
            try:
                out.append(self.changes_q.get_nowait())
            except Empty:
                break
        return out
