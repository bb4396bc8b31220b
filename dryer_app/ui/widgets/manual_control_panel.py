from __future__ import annotations

from typing import Dict

from PySide6.QtCore import Signal
from PySide6.QtWidgets import QFrame, QGridLayout, QLabel, QPushButton, QVBoxLayout

from dryer_app.domain.models import ActuatorName

BUTTON_TEXT = {
    ActuatorName.HEATER1: "Heater 1",
    ActuatorName.HEATER2: "Heater 2",
    ActuatorName.DRYER: "Dryer",
    ActuatorName.FAN1: "Fan 1",
    ActuatorName.FAN2: "Fan 2",
}


class ManualControlPanel(QFrame):
    """
    One checkable button per actuator. Clicking emits `toggle_requested`;
    the checked state is only changed by :meth:`set_devices`.
    """

    toggle_requested = Signal(str)  # actuator name

    def __init__(self, parent=None) -> None:
        super().__init__(parent)
        self.setObjectName("Card")

        root = QVBoxLayout(self)
        root.setContentsMargins(12, 12, 12, 12)
        root.setSpacing(10)

        title = QLabel("Manual Control")
        title.setStyleSheet("font-size: 14px; font-weight: 700;")
        root.addWidget(title)

        grid = QGridLayout()
        grid.setSpacing(8)
        root.addLayout(grid)

        self.buttons: Dict[str, QPushButton] = {}
        for idx, actuator in enumerate(ActuatorName):
            btn = QPushButton(BUTTON_TEXT[actuator])
            btn.setCheckable(True)
            btn.clicked.connect(lambda _checked=False, name=actuator.value: self._request(name))
            self.buttons[actuator.value] = btn
            r, c = divmod(idx, 3)
            grid.addWidget(btn, r, c)

        root.addStretch(1)

    def _request(self, name: str) -> None:
        # revert Qt's own toggle; state comes back through set_devices
        btn = self.buttons[name]
        btn.blockSignals(True)
        btn.setChecked(not btn.isChecked())
        btn.blockSignals(False)
        self.toggle_requested.emit(name)

    def set_devices(self, devices: Dict[str, bool]) -> None:
        for name, on in devices.items():
            btn = self.buttons.get(name)
            if btn is None or btn.isChecked() == on:
                continue
            btn.blockSignals(True)
            btn.setChecked(on)
            btn.blockSignals(False)
