from __future__ import annotations

import logging
import sys

from PySide6.QtGui import QFont
from PySide6.QtWidgets import QApplication, QMessageBox, QStyleFactory

from tasklist.infra.db import init_db
from tasklist.infra.logging import setup_logging
from tasklist.infra.storage import LocalStorage
from tasklist.services.task_store import TaskStore
from tasklist.services.theme import ThemeManager
from tasklist.ui.main_window import MainWindow
from tasklist.ui.palette import apply_palette, system_theme

logger = logging.getLogger(__name__)


def main() -> None:
    setup_logging()
    try:
        init_db()
    except Exception as exc:  # noqa: BLE001
        logger.exception("Database init failed")
        app = QApplication(sys.argv)
        QMessageBox.critical(None, "Storage error", str(exc))
        return

    app = QApplication(sys.argv)
    app.setStyle(QStyleFactory.create("Fusion"))
    app.setFont(QFont("Segoe UI", 10))

    storage = LocalStorage()
    themes = ThemeManager(storage, system_theme)
    themes.subscribe(lambda theme: apply_palette(app, theme))
    themes.init()

    store = TaskStore(storage)
    store.load_tasks()

    window = MainWindow(store, themes)
    window.show()
    logger.info("Task list started")
    sys.exit(app.exec())


if __name__ == "__main__":
    main()
