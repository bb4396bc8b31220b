from __future__ import annotations

from typing import Dict, Optional

from PySide6.QtCore import Qt, QTimer
from PySide6.QtWidgets import (
    QGridLayout,
    QHBoxLayout,
    QLabel,
    QMainWindow,
    QPushButton,
    QStackedWidget,
    QVBoxLayout,
    QWidget,
)

from dryer_app.domain.errors import ChamberError
from dryer_app.domain.events import SettingsUpdated
from dryer_app.domain.models import SettingsBounds
from dryer_app.runtime.event_bus import EventBus
from dryer_app.services.controller import DryingController
from dryer_app.services.navigator import ChamberNavigator
from dryer_app.ui.adapters.store_snapshots import Toast, error_toast, event_toast
from dryer_app.ui.widgets.automatic_control_panel import AutomaticControlPanel
from dryer_app.ui.widgets.chamber_card import ChamberCard
from dryer_app.ui.widgets.environment_panel import EnvironmentPanel
from dryer_app.ui.widgets.manual_control_panel import ManualControlPanel

TOAST_MS = 4000


class MainWindow(QMainWindow):
    """
    Main dashboard window.
    - Home page: one card per chamber
    - Detail page: environment + manual control + automatic control
    - Status bar: toast messages from change events and rejected actions
    """

    def __init__(
        self,
        controller: DryingController,
        bus: EventBus,
        navigator: ChamberNavigator,
        bounds: SettingsBounds,
        refresh_ms: int = 200,
    ) -> None:
        super().__init__()
        self.setWindowTitle("Tobacco Drying Chamber Control")
        self.resize(1200, 820)

        self.controller = controller
        self.bus = bus
        self.navigator = navigator
        self.current_id: Optional[str] = None
        self._press_x: Optional[float] = None

        snapshots = controller.snapshots()
        self._names: Dict[str, str] = {s.chamber_id: s.name for s in snapshots}

        self.stack = QStackedWidget()
        self.setCentralWidget(self.stack)

        # -------- Home page --------
        home = QWidget()
        home_lay = QVBoxLayout(home)
        home_lay.setContentsMargins(16, 16, 16, 16)
        header = QLabel("Tobacco Drying Chamber Control")
        header.setStyleSheet("font-size: 20px; font-weight: 700;")
        home_lay.addWidget(header)

        cards_grid = QGridLayout()
        cards_grid.setSpacing(12)
        self.cards: Dict[str, ChamberCard] = {}
        for idx, snap in enumerate(snapshots):
            card = ChamberCard(snap.chamber_id, snap.name)
            card.clicked.connect(self.show_chamber)
            self.cards[snap.chamber_id] = card
            cards_grid.addWidget(card, 0, idx)
        home_lay.addLayout(cards_grid)
        home_lay.addStretch(1)
        self.stack.addWidget(home)

        # -------- Detail page --------
        detail = QWidget()
        det_lay = QVBoxLayout(detail)
        det_lay.setContentsMargins(16, 16, 16, 16)
        det_lay.setSpacing(12)

        nav = QHBoxLayout()
        self.back_btn = QPushButton("Home")
        self.prev_btn = QPushButton("◀")
        self.next_btn = QPushButton("▶")
        self.title = QLabel("")
        self.title.setStyleSheet("font-size: 20px; font-weight: 700;")
        nav.addWidget(self.back_btn)
        nav.addWidget(self.prev_btn)
        nav.addWidget(self.title, 1, Qt.AlignCenter)
        nav.addWidget(self.next_btn)
        det_lay.addLayout(nav)

        top = QHBoxLayout()
        self.environment = EnvironmentPanel()
        self.manual = ManualControlPanel()
        top.addWidget(self.environment, stretch=3)
        top.addWidget(self.manual, stretch=2)
        det_lay.addLayout(top, stretch=2)

        self.automatic = AutomaticControlPanel(bounds)
        det_lay.addWidget(self.automatic, stretch=1)
        self.stack.addWidget(detail)

        # -------- Wiring --------
        self.back_btn.clicked.connect(self.show_home)
        self.prev_btn.clicked.connect(lambda: self._navigate(self.navigator.previous_id))
        self.next_btn.clicked.connect(lambda: self._navigate(self.navigator.next_id))
        self.manual.toggle_requested.connect(self._on_toggle)
        self.automatic.save_requested.connect(self._on_save)
        self.automatic.start_requested.connect(self._on_start)
        self.automatic.reset_requested.connect(self._on_reset)

        # UI refresh timer
        self.timer = QTimer(self)
        self.timer.setInterval(refresh_ms)
        self.timer.timeout.connect(self.refresh_ui)
        self.timer.start()

        self.refresh_ui()

    # --- Navigation ---
    def show_home(self) -> None:
        self.current_id = None
        self.stack.setCurrentIndex(0)
        self.refresh_ui()

    def show_chamber(self, chamber_id: str) -> None:
        snap = self.controller.snapshot(chamber_id)
        self.current_id = chamber_id
        self.title.setText(snap.name)
        self.environment.set_chamber_name(snap.name)
        self.environment.clear_history()
        self.automatic.load_settings(snap.settings)
        self.prev_btn.setEnabled(self.navigator.previous_id(chamber_id) is not None)
        self.next_btn.setEnabled(self.navigator.next_id(chamber_id) is not None)
        self.stack.setCurrentIndex(1)
        self.refresh_ui()

    def _navigate(self, step) -> None:
        if self.current_id is None:
            return
        target = step(self.current_id)
        if target is not None:
            self.show_chamber(target)

    def mousePressEvent(self, event) -> None:
        self._press_x = event.position().x()
        super().mousePressEvent(event)

    def mouseReleaseEvent(self, event) -> None:
        if self._press_x is not None and self.current_id is not None:
            target = self.navigator.on_swipe(self.current_id, self._press_x, event.position().x())
            if target is not None:
                self.show_chamber(target)
        self._press_x = None
        super().mouseReleaseEvent(event)

    def keyPressEvent(self, event) -> None:
        if event.key() == Qt.Key_Right:
            self._navigate(self.navigator.next_id)
        elif event.key() == Qt.Key_Left:
            self._navigate(self.navigator.previous_id)
        elif event.key() == Qt.Key_Escape:
            self.show_home()
        else:
            super().keyPressEvent(event)

    # --- Actions ---
    def _on_toggle(self, name: str) -> None:
        self._run(lambda cid: self.controller.toggle_device(cid, name))

    def _on_save(self, values: dict) -> None:
        self._run(lambda cid: self.controller.update_settings(cid, values))

    def _on_start(self) -> None:
        self._run(self.controller.start_drying)

    def _on_reset(self) -> None:
        self._run(self.controller.reset_session)

    def _run(self, action) -> None:
        if self.current_id is None:
            return
        try:
            action(self.current_id)
        except ChamberError as e:
            self._toast(error_toast(e))
        self.refresh_ui()

    def _toast(self, toast: Toast) -> None:
        title, desc = toast
        self.statusBar().showMessage(f"{title}: {desc}", TOAST_MS)

    # --- Refresh ---
    def refresh_ui(self) -> None:
        for ev in self.bus.drain():
            toast = event_toast(ev, self._names)
            if toast is not None:
                self._toast(toast)
            if isinstance(ev, SettingsUpdated) and ev.chamber_id == self.current_id:
                self.automatic.load_settings(ev.settings)

        if self.current_id is None:
            for snap in self.controller.snapshots():
                self.cards[snap.chamber_id].update_from(snap)
            return

        snap = self.controller.snapshot(self.current_id)
        self.environment.update_from(snap)
        self.manual.set_devices(snap.devices)
        self.automatic.update_from(snap)
