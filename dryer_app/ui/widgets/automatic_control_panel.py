from __future__ import annotations

from PySide6.QtCore import Qt, Signal
from PySide6.QtWidgets import (
    QDoubleSpinBox,
    QFrame,
    QHBoxLayout,
    QLabel,
    QProgressBar,
    QPushButton,
    QSpinBox,
    QVBoxLayout,
)

from dryer_app.domain.models import ChamberSnapshot, DryingSettings, SessionStatus, SettingsBounds
from dryer_app.ui.adapters.store_snapshots import progress_label, session_status_text
from dryer_app.ui.theme import COLOR_TEXT_MUTED


class AutomaticControlPanel(QFrame):
    """
    UI for the automatic drying mode:
    - settings editors (temperature, humidity, drying time) + Save
    - Start / Reset buttons
    - countdown display, progress bar, status text
    """

    save_requested = Signal(object)  # dict of settings fields
    start_requested = Signal()
    reset_requested = Signal()

    def __init__(self, bounds: SettingsBounds, parent=None) -> None:
        super().__init__(parent)
        self.setObjectName("Card")

        root = QHBoxLayout(self)
        root.setContentsMargins(12, 12, 12, 12)
        root.setSpacing(16)

        # -------- Settings column --------
        left = QVBoxLayout()
        title = QLabel("Automatic Control")
        title.setStyleSheet("font-size: 14px; font-weight: 700;")
        left.addWidget(title)

        self.temperature = QDoubleSpinBox()
        self.temperature.setRange(bounds.desired_temperature.low, bounds.desired_temperature.high)
        self.temperature.setSingleStep(0.5)
        self.temperature.setDecimals(1)
        self.temperature.setSuffix(" °C")

        self.humidity = QDoubleSpinBox()
        self.humidity.setRange(bounds.desired_humidity.low, bounds.desired_humidity.high)
        self.humidity.setSingleStep(1.0)
        self.humidity.setDecimals(0)
        self.humidity.setSuffix(" %")

        self.drying_time = QSpinBox()
        self.drying_time.setRange(int(bounds.drying_time.low), int(bounds.drying_time.high))
        self.drying_time.setSingleStep(10)
        self.drying_time.setSuffix(" min")

        left.addLayout(self._row("Desired temperature:", self.temperature))
        left.addLayout(self._row("Desired humidity:", self.humidity))
        left.addLayout(self._row("Drying time:", self.drying_time))

        buttons = QHBoxLayout()
        self.save_btn = QPushButton("Save Changes")
        self.start_btn = QPushButton("Start Drying")
        self.start_btn.setObjectName("Start")
        self.reset_btn = QPushButton("Reset")
        buttons.addWidget(self.save_btn)
        buttons.addWidget(self.start_btn)
        buttons.addWidget(self.reset_btn)
        left.addLayout(buttons)
        left.addStretch(1)
        root.addLayout(left, stretch=1)

        # -------- Progress column --------
        right = QVBoxLayout()
        right.addWidget(QLabel("Drying Progress"), 0, Qt.AlignHCenter)

        self.time_display = QLabel("00:00:00")
        self.time_display.setStyleSheet("font-size: 32px; font-weight: 700;")
        right.addWidget(self.time_display, 0, Qt.AlignHCenter)

        self.progress = QProgressBar()
        self.progress.setRange(0, 100)
        self.progress.setTextVisible(False)
        right.addWidget(self.progress)

        self.progress_text = QLabel("Ready")
        self.progress_text.setStyleSheet(f"color: {COLOR_TEXT_MUTED};")
        right.addWidget(self.progress_text, 0, Qt.AlignHCenter)

        self.headline = QLabel("Ready to Start")
        self.headline.setStyleSheet("font-weight: 600;")
        self.detail = QLabel("")
        self.detail.setStyleSheet(f"color: {COLOR_TEXT_MUTED}; font-size: 11px;")
        right.addWidget(self.headline, 0, Qt.AlignHCenter)
        right.addWidget(self.detail, 0, Qt.AlignHCenter)
        right.addStretch(1)
        root.addLayout(right, stretch=1)

        self.save_btn.clicked.connect(self._emit_save)
        self.start_btn.clicked.connect(self.start_requested.emit)
        self.reset_btn.clicked.connect(self.reset_requested.emit)

    def _row(self, label: str, widget) -> QHBoxLayout:
        lay = QHBoxLayout()
        lay.addWidget(QLabel(label))
        lay.addStretch(1)
        lay.addWidget(widget)
        return lay

    def _emit_save(self) -> None:
        self.save_requested.emit(
            {
                "desired_temperature": self.temperature.value(),
                "desired_humidity": self.humidity.value(),
                "drying_time": self.drying_time.value(),
            }
        )

    def load_settings(self, settings: DryingSettings) -> None:
        """
        Overwrite the editors with stored settings (chamber switch, after save).
        """
        self.temperature.setValue(float(settings.desired_temperature))
        self.humidity.setValue(float(settings.desired_humidity))
        self.drying_time.setValue(int(settings.drying_time))

    def update_from(self, snapshot: ChamberSnapshot) -> None:
        st = snapshot.session
        active = st.status is SessionStatus.ACTIVE

        for w in (self.temperature, self.humidity, self.drying_time, self.save_btn):
            w.setEnabled(not active)
        self.start_btn.setEnabled(st.status is SessionStatus.IDLE)
        self.reset_btn.setEnabled(st.status is not SessionStatus.IDLE)

        self.time_display.setText(st.time_display)

        self.progress.setValue(st.progress_percent)
        self.progress_text.setText(progress_label(snapshot))

        headline, detail = session_status_text(snapshot)
        self.headline.setText(headline)
        self.detail.setText(detail)
