from __future__ import annotations

import sys
from PySide6.QtWidgets import QApplication

from dryer_app.bootstrap import build_app_system
from dryer_app.ui.main_dashboard import MainWindow
from dryer_app.ui.theme import APP_QSS


def main() -> None:
    """
    Start the desktop UI, the mock environment and the drying tick sources.

    Notes
    -----
    - Loads configuration from `config.yaml` when present, else built-in
      defaults.
    - Optional CLI usage:
        python -m dryer_app.dev.run_app --config path/to/config.yaml
    """
    app = QApplication(sys.argv)
    app.setStyleSheet(APP_QSS)

    config_path = None
    if "--config" in sys.argv:
        i = sys.argv.index("--config")
        if i + 1 < len(sys.argv):
            config_path = sys.argv[i + 1]

    wiring = build_app_system(config_path=config_path)

    win = MainWindow(
        controller=wiring.controller,
        bus=wiring.bus,
        navigator=wiring.navigator,
        bounds=wiring.config.bounds,
        refresh_ms=wiring.config.runtime.ui_refresh_ms,
    )
    win.show()

    wiring.start()
    app.aboutToQuit.connect(wiring.stop)
    sys.exit(app.exec())


if __name__ == "__main__":
    main()
