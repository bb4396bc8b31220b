from __future__ import annotations

from PySide6.QtCore import Qt, Signal
from PySide6.QtWidgets import QFrame, QLabel, QVBoxLayout

from dryer_app.domain.models import ChamberSnapshot
from dryer_app.ui.adapters.store_snapshots import card_summary
from dryer_app.ui.theme import COLOR_TEXT_MUTED


class ChamberCard(QFrame):
    """
    Home-screen tile: chamber name, average temperature/humidity, session
    status. Clicking opens the chamber.
    """

    clicked = Signal(str)  # chamber id

    def __init__(self, chamber_id: str, name: str, parent=None) -> None:
        super().__init__(parent)
        self.setObjectName("Card")
        self.setCursor(Qt.PointingHandCursor)
        self.chamber_id = chamber_id

        title = QLabel(name)
        title.setStyleSheet("font-size: 16px; font-weight: 700;")
        self._temp = QLabel("-")
        self._rh = QLabel("-")
        self._status = QLabel("Idle")
        self._status.setStyleSheet(f"color: {COLOR_TEXT_MUTED};")

        layout = QVBoxLayout(self)
        layout.setContentsMargins(16, 16, 16, 16)
        layout.addWidget(title)
        layout.addWidget(self._temp)
        layout.addWidget(self._rh)
        layout.addWidget(self._status)

    def update_from(self, snapshot: ChamberSnapshot) -> None:
        temp, rh, status = card_summary(snapshot)
        self._temp.setText(f"Temperature: {temp}")
        self._rh.setText(f"Humidity: {rh}")
        self._status.setText(status)

    def mouseReleaseEvent(self, event) -> None:
        self.clicked.emit(self.chamber_id)
        super().mouseReleaseEvent(event)
