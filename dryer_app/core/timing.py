from __future__ import annotations

from typing import Optional


def format_hms(seconds: int) -> str:
    """
    Format a second count as ``HH:MM:SS``.

    Hours are not wrapped at 24 (or 99); negative input renders as zero.

    Examples
    --------
    >>> format_hms(3661)
    '01:01:01'
    """
    s = max(0, int(seconds))
    hours = s // 3600
    minutes = (s % 3600) // 60
    secs = s % 60
    return f"{hours:02d}:{minutes:02d}:{secs:02d}"


def format_minutes_estimate(minutes: int) -> str:
    """Idle estimate for a planned duration given in minutes (``HH:MM:00``)."""
    return format_hms(int(minutes) * 60)


def elapsed_seconds(total: Optional[int], remaining: Optional[int]) -> int:
    if total is None or remaining is None:
        return 0
    return max(0, total - remaining)


def progress_percent(total: Optional[int], remaining: Optional[int]) -> int:
    """
    Elapsed time as a whole percentage of the planned duration.

    Returns 0 when no session has been started, and is clamped to [0, 100].
    """
    if not total:
        return 0
    pct = round(100 * elapsed_seconds(total, remaining) / total)
    return max(0, min(100, int(pct)))
