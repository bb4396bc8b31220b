from __future__ import annotations

from dataclasses import dataclass
from typing import List, Optional

# Minimum horizontal swipe distance (pixels) that counts as a page change.
SWIPE_THRESHOLD_PX = 100.0


@dataclass(frozen=True)
class ChamberNavigator:
    """
    Next/previous page logic for the chamber detail views.

    Chambers are ordered as registered; navigation stops at both ends (no
    wrap-around).

    Parameters
    ----------
    chamber_ids
        Chamber ids in display order.
    threshold_px
        Minimum swipe distance for :meth:`on_swipe`.
    """

    chamber_ids: List[str]
    threshold_px: float = SWIPE_THRESHOLD_PX

    def next_id(self, current: str) -> Optional[str]:
        idx = self._index(current)
        if idx is None or idx + 1 >= len(self.chamber_ids):
            return None
        return self.chamber_ids[idx + 1]

    def previous_id(self, current: str) -> Optional[str]:
        idx = self._index(current)
        if idx is None or idx == 0:
            return None
        return self.chamber_ids[idx - 1]

    def on_swipe(self, current: str, start_x: float, end_x: float) -> Optional[str]:
        """
        Resolve a horizontal swipe to a target chamber id.

        Parameters
        ----------
        current
            Chamber id currently shown.
        start_x, end_x
            Pointer x position at press and release.

        Returns
        -------
        str or None
            Next chamber for a leftward swipe, previous chamber for a
            rightward swipe, or None if the swipe is too short or there is no
            chamber in that direction.
        """
        diff = float(start_x) - float(end_x)
        if diff > self.threshold_px:
            return self.next_id(current)
        if diff < -self.threshold_px:
            return self.previous_id(current)
        return None

    def _index(self, current: str) -> Optional[int]:
        try:
            return self.chamber_ids.index(current)
        except ValueError:
            return None
