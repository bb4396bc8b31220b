from __future__ import annotations

APP_QSS = """
QMainWindow {
    background: #1c1917; /* stone-900 */
    color: #e7e5e4;      /* stone-200 */
    font-family: Segoe UI, Arial;
    font-size: 12px;
}

QLabel {
    color: #e7e5e4;
}

QFrame#Card {
    background: #292524; /* stone-800 */
    border: 1px solid #44403c; /* stone-700 */
    border-radius: 12px;
}

QPushButton {
    background: #44403c;
    border: 0px;
    padding: 8px 12px;
    border-radius: 10px;
    color: #ffffff;
    font-weight: 600;
}
QPushButton:hover {
    background: #57534e; /* stone-600 */
}
QPushButton:checked {
    background: #ea580c; /* orange-600 */
}
QPushButton:disabled {
    background: #292524;
    color: #78716c;
}
QPushButton#Start {
    background: #16a34a; /* green-600 */
}
QPushButton#Start:disabled {
    background: #292524;
}

QProgressBar {
    background: #1c1917;
    border: 1px solid #44403c;
    border-radius: 6px;
    height: 10px;
    text-align: center;
}
QProgressBar::chunk {
    background: #22c55e;
    border-radius: 6px;
}
"""

COLOR_TEXT_MUTED = "#a8a29e"  # stone-400

# Sensor level colors (temperature / humidity)
LEVEL_COLORS = {
    "COLD": "#3b82f6",    # blue-500
    "HOT": "#ef4444",     # red-500
    "DRY": "#eab308",     # yellow-500
    "HUMID": "#3b82f6",   # blue-500
    "NORMAL_TEMP": "#f97316",   # orange-500
    "NORMAL_RH": "#06b6d4",     # cyan-500
}


def temperature_color(level: str) -> str:
    return LEVEL_COLORS.get(level, LEVEL_COLORS["NORMAL_TEMP"])


def humidity_color(level: str) -> str:
    return LEVEL_COLORS.get(level, LEVEL_COLORS["NORMAL_RH"])
