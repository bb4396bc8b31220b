"""
Unit tests for dryer_app.core.state.device_store.DeviceStore.

These tests verify that DeviceStore:
- starts with every actuator off
- toggles one actuator at a time and reports it as an event
- rejects unknown actuator names without changing any state
"""

from __future__ import annotations

from datetime import datetime

import pytest

from dryer_app.core.state.device_store import DeviceStore, parse_actuator
from dryer_app.domain.errors import InvalidActuatorError
from dryer_app.domain.models import ActuatorName


def test_all_actuators_start_off() -> None:
    store = DeviceStore()
    assert store.get_all() == {"heater1": False, "heater2": False, "dryer": False, "fan1": False, "fan2": False}


def test_toggle_flips_only_named_actuator() -> None:
    store = DeviceStore(chamber_id="1")
    t0 = datetime(2026, 1, 1, 10, 0, 0)

    ev = store.toggle("heater1", now=t0)

    assert ev.chamber_id == "1"
    assert ev.actuator is ActuatorName.HEATER1
    assert ev.on is True
    assert ev.timestamp == t0

    states = store.get_all()
    assert states["heater1"] is True
    assert not any(v for k, v in states.items() if k != "heater1")


def test_toggle_twice_restores_state() -> None:
    store = DeviceStore()
    before = store.get_all()

    store.toggle(ActuatorName.DRYER)
    ev = store.toggle(ActuatorName.DRYER)

    assert ev.on is False
    assert store.get_all() == before


def test_unknown_actuator_rejected_and_state_unchanged() -> None:
    store = DeviceStore()
    store.toggle("fan1")
    before = store.get_all()

    with pytest.raises(InvalidActuatorError) as exc:
        store.toggle("heater3")

    assert exc.value.name == "heater3"
    assert store.get_all() == before


def test_get_returns_single_state() -> None:
    store = DeviceStore()
    store.toggle("fan2")
    assert store.get("fan2") is True
    assert store.get(ActuatorName.FAN1) is False


def test_get_all_returns_copy() -> None:
    store = DeviceStore()
    snap = store.get_all()
    snap["heater1"] = True
    assert store.get("heater1") is False


def test_parse_actuator_accepts_enum_and_string() -> None:
    assert parse_actuator(ActuatorName.HEATER2) is ActuatorName.HEATER2
    assert parse_actuator("heater2") is ActuatorName.HEATER2
    with pytest.raises(InvalidActuatorError):
        parse_actuator("Heater2")
