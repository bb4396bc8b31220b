from __future__ import annotations

from typing import List, Mapping, Optional, Tuple

from dryer_app.domain.errors import ChamberError, OutOfBoundsError
from dryer_app.domain.events import ChangeEvent, DeviceToggled, SessionChanged, SessionTransition, SettingsUpdated
from dryer_app.domain.models import ChamberSnapshot, SensorReading, SessionStatus

# (title, description)
Toast = Tuple[str, str]
# (sensor, temperature, humidity, temperature level, humidity level)
ReadingRow = Tuple[str, str, str, str, str]


def temperature_level(temp_c: float) -> str:
    """
    Returns display level for a temperature: COLD / NORMAL / HOT
    """
    if temp_c < 20:
        return "COLD"
    if temp_c > 30:
        return "HOT"
    return "NORMAL"


def humidity_level(rh: float) -> str:
    """
    Returns display level for a humidity: DRY / NORMAL / HUMID
    """
    if rh < 40:
        return "DRY"
    if rh > 70:
        return "HUMID"
    return "NORMAL"


def reading_rows(snapshot: ChamberSnapshot) -> List[ReadingRow]:
    rows: List[ReadingRow] = []
    for name, r in sorted(snapshot.readings.items()):
        rows.append(
            (
                name,
                f"{r.temperature:.1f} °C",
                f"{r.humidity:.0f} %",
                temperature_level(r.temperature),
                humidity_level(r.humidity),
            )
        )
    return rows


def average_reading(snapshot: ChamberSnapshot) -> Optional[SensorReading]:
    rs = list(snapshot.readings.values())
    if not rs:
        return None
    return SensorReading(
        sensor="average",
        temperature=sum(r.temperature for r in rs) / len(rs),
        humidity=sum(r.humidity for r in rs) / len(rs),
        timestamp=max(r.timestamp for r in rs),
    )


def card_summary(snapshot: ChamberSnapshot) -> Tuple[str, str, str]:
    """
    Home-screen card text: (temperature, humidity, session status).
    """
    avg = average_reading(snapshot)
    temp = "-" if avg is None else f"{avg.temperature:.1f} °C"
    rh = "-" if avg is None else f"{avg.humidity:.0f} %"

    st = snapshot.session
    if st.status is SessionStatus.ACTIVE:
        status = f"Drying {st.time_display}"
    elif st.status is SessionStatus.COMPLETED:
        status = "Drying complete"
    else:
        status = "Idle"
    return temp, rh, status


def session_status_text(snapshot: ChamberSnapshot) -> Tuple[str, str]:
    """
    Headline and detail line for the automatic control panel.
    """
    st = snapshot.session
    s = snapshot.settings
    if st.status is SessionStatus.ACTIVE:
        return (
            "Automatic Drying In Progress",
            f"Maintaining {s.desired_temperature:g}°C and {s.desired_humidity:g}% humidity",
        )
    if st.status is SessionStatus.COMPLETED:
        return "Automatic Drying Complete", "Press Reset to prepare a new run"
    return "Ready to Start", "Set parameters and press Start"


def progress_label(snapshot: ChamberSnapshot) -> str:
    st = snapshot.session
    if st.status is SessionStatus.IDLE:
        return "Ready"
    return f"{st.progress_percent}%"


def device_toast(ev: DeviceToggled, chamber_name: str) -> Toast:
    name = ev.actuator.value
    verb = "activated" if ev.on else "deactivated"
    state = "on" if ev.on else "off"
    return (
        f"{name[:1].upper()}{name[1:]} {verb}",
        f"{chamber_name} {name} has been turned {state}.",
    )


def settings_toast(ev: SettingsUpdated, chamber_name: str) -> Toast:
    desc = f"{chamber_name} automatic control settings have been updated."
    if ev.clamped:
        desc += f" Adjusted to allowed range: {', '.join(ev.clamped)}."
    return "Settings Saved", desc


def session_toast(ev: SessionChanged, chamber_name: str) -> Toast:
    if ev.transition is SessionTransition.STARTED:
        return "Automatic Drying Started", f"{chamber_name} automatic drying process has been initiated."
    if ev.transition is SessionTransition.COMPLETED:
        return "Automatic Drying Completed", f"{chamber_name} automatic drying process has finished."
    return "Automatic Drying Reset", f"{chamber_name} is ready for a new drying run."


def event_toast(ev: ChangeEvent, chamber_names: Mapping[str, str]) -> Optional[Toast]:
    """
    Toast for a change event, or None for events that only trigger a redraw.
    """
    name = chamber_names.get(ev.chamber_id, f"Chamber {ev.chamber_id}")
    if isinstance(ev, DeviceToggled):
        return device_toast(ev, name)
    if isinstance(ev, SettingsUpdated):
        return settings_toast(ev, name)
    if isinstance(ev, SessionChanged):
        return session_toast(ev, name)
    return None


def error_toast(exc: ChamberError) -> Toast:
    if isinstance(exc, OutOfBoundsError):
        return "Invalid Setting", f"{exc.field} must be a number between {exc.low:g} and {exc.high:g}."
    return "Action Rejected", str(exc)
