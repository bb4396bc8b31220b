from __future__ import annotations

from datetime import datetime, timedelta
from typing import Dict, List, Tuple

import pyqtgraph as pg
from PySide6.QtWidgets import QFrame, QGridLayout, QLabel, QVBoxLayout

from dryer_app.domain.models import ChamberSnapshot
from dryer_app.ui.adapters.store_snapshots import reading_rows
from dryer_app.ui.theme import COLOR_TEXT_MUTED, humidity_color, temperature_color

# Rolling window seconds for the temperature trend
ROLLING_SECONDS = 300


class EnvironmentPanel(QFrame):
    """
    Mock sensor readout for one chamber:
    - one row per sensor (temperature + humidity, colored by level)
    - rolling temperature trend plot
    """

    def __init__(self, parent=None) -> None:
        super().__init__(parent)
        self.setObjectName("Card")

        root = QVBoxLayout(self)
        root.setContentsMargins(12, 12, 12, 12)
        root.setSpacing(10)

        self.title = QLabel("Environment")
        self.title.setStyleSheet("font-size: 14px; font-weight: 700;")
        root.addWidget(self.title)

        self._grid = QGridLayout()
        self._grid.setSpacing(8)
        root.addLayout(self._grid)
        self._labels: Dict[str, Tuple[QLabel, QLabel]] = {}

        pg.setConfigOptions(antialias=True)
        self.plot = pg.PlotWidget()
        self.plot.setBackground(None)
        self.plot.showGrid(x=True, y=True, alpha=0.2)
        self.plot.setTitle("Temperature (°C)", size="10pt")
        self.plot.setMinimumHeight(160)
        root.addWidget(self.plot, stretch=1)

        self._series: Dict[str, List[Tuple[datetime, float]]] = {}
        self._curves: Dict[str, pg.PlotDataItem] = {}

    def set_chamber_name(self, name: str) -> None:
        self.title.setText(f"{name} Environment")

    def update_from(self, snapshot: ChamberSnapshot) -> None:
        for sensor, temp, rh, t_level, h_level in reading_rows(snapshot):
            temp_label, rh_label = self._row_for(sensor)
            temp_label.setText(temp)
            temp_label.setStyleSheet(f"color: {temperature_color(t_level)}; font-weight: 700;")
            rh_label.setText(rh)
            rh_label.setStyleSheet(f"color: {humidity_color(h_level)}; font-weight: 700;")

        for sensor, reading in snapshot.readings.items():
            self._push(sensor, reading.timestamp, reading.temperature)
        self._redraw()

    def clear_history(self) -> None:
        self._series.clear()
        for curve in self._curves.values():
            curve.setData([], [])

    def _row_for(self, sensor: str) -> Tuple[QLabel, QLabel]:
        if sensor not in self._labels:
            row = len(self._labels)
            name = QLabel(f"Sensor {sensor.replace('sensor', '')}")
            name.setStyleSheet(f"color: {COLOR_TEXT_MUTED}; font-weight: 600;")
            temp, rh = QLabel("-"), QLabel("-")
            self._grid.addWidget(name, row, 0)
            self._grid.addWidget(temp, row, 1)
            self._grid.addWidget(rh, row, 2)
            self._labels[sensor] = (temp, rh)
        return self._labels[sensor]

    def _push(self, sensor: str, ts: datetime, value: float) -> None:
        points = self._series.setdefault(sensor, [])
        if points and points[-1][0] == ts:
            return
        points.append((ts, value))

        # trim old points
        cutoff = ts - timedelta(seconds=ROLLING_SECONDS)
        self._series[sensor] = [(t, v) for (t, v) in points if t >= cutoff]

    def _redraw(self) -> None:
        for name, points in self._series.items():
            if not points:
                continue
            if name not in self._curves:
                pen = pg.mkPen(pg.intColor(len(self._curves), hues=4), width=2)
                self._curves[name] = self.plot.plot([], [], pen=pen, name=name)
            t0 = points[0][0]
            xs = [(t - t0).total_seconds() for (t, _) in points]
            ys = [v for (_, v) in points]
            self._curves[name].setData(xs, ys)
