"""
Unit tests for dryer_app.core.timing.
"""

from __future__ import annotations

import pytest

from dryer_app.core.timing import elapsed_seconds, format_hms, format_minutes_estimate, progress_percent


@pytest.mark.parametrize(
    "seconds, expected",
    [
        (0, "00:00:00"),
        (59, "00:00:59"),
        (60, "00:01:00"),
        (3661, "01:01:01"),
        (7200, "02:00:00"),
        (28800, "08:00:00"),
        (100 * 3600, "100:00:00"),
        (-5, "00:00:00"),
    ],
)
def test_format_hms(seconds: int, expected: str) -> None:
    assert format_hms(seconds) == expected


def test_minutes_estimate_uses_whole_minutes() -> None:
    assert format_minutes_estimate(120) == "02:00:00"
    assert format_minutes_estimate(45) == "00:45:00"


def test_elapsed_seconds_without_session_is_zero() -> None:
    assert elapsed_seconds(None, None) == 0
    assert elapsed_seconds(7200, 3600) == 3600


def test_progress_percent_halfway() -> None:
    assert progress_percent(7200, 3600) == 50


def test_progress_percent_bounds() -> None:
    assert progress_percent(None, None) == 0
    assert progress_percent(0, 0) == 0
    assert progress_percent(7200, 7200) == 0
    assert progress_percent(7200, 0) == 100


def test_progress_percent_rounds_to_whole_number() -> None:
    # 1 / 3 of the run elapsed
    assert progress_percent(1800, 1200) == 33
    # 2 / 3 of the run elapsed
    assert progress_percent(1800, 600) == 67
