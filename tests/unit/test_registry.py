"""
Unit tests for dryer_app.core.registry.ChamberRegistry.
"""

from __future__ import annotations

import pytest

from dryer_app.core.config.yaml_config import ChamberConfig
from dryer_app.core.registry import ChamberRegistry
from dryer_app.domain.errors import ChamberNotFoundError
from dryer_app.domain.models import Bound, DryingSettings, SessionStatus, SettingsBounds


def test_default_registry_has_three_chambers() -> None:
    reg = ChamberRegistry.create()
    assert reg.ids() == ["1", "2", "3"]
    assert [c.name for c in reg.all()] == ["Chamber 1", "Chamber 2", "Chamber 3"]


def test_new_chambers_start_in_initial_state() -> None:
    reg = ChamberRegistry.create()
    for snap in reg.snapshots():
        assert not any(snap.devices.values())
        assert snap.settings == DryingSettings()
        assert snap.session.status is SessionStatus.IDLE


def test_lookup_known_id() -> None:
    reg = ChamberRegistry.create()
    c = reg.lookup("2")
    assert c.chamber_id == "2"
    assert reg.lookup("2") is c


@pytest.mark.parametrize("bad", ["99", "", "chamber1", 1, None])
def test_lookup_unknown_id_fails(bad) -> None:
    reg = ChamberRegistry.create()
    with pytest.raises(ChamberNotFoundError) as exc:
        reg.lookup(bad)
    assert exc.value.chamber_id == bad


def test_chambers_do_not_share_state() -> None:
    reg = ChamberRegistry.create()
    reg.lookup("1").toggle_device("heater1")
    reg.lookup("1").update_settings({"drying_time": 60})

    other = reg.lookup("2").snapshot()
    assert other.devices["heater1"] is False
    assert other.settings.drying_time == 120


def test_custom_chambers_settings_and_bounds() -> None:
    reg = ChamberRegistry.create(
        chambers=[ChamberConfig("A", "Barn A"), ChamberConfig("B", "Barn B")],
        default_settings=DryingSettings(desired_temperature=32.0, desired_humidity=55.0, drying_time=200),
        bounds=SettingsBounds(drying_time=Bound(10, 240)),
    )

    assert reg.ids() == ["A", "B"]
    c = reg.lookup("B")
    assert c.get_settings().drying_time == 200

    c.update_settings({"drying_time": 999})
    assert c.get_settings().drying_time == 240
