from __future__ import annotations

"""Orbit Focus entry point.

Sets up logging, opens the settings store, builds the session controller
and starts the Qt main window.
"""

import sys
from pathlib import Path

from platformdirs import user_data_dir
from PyQt6.QtWidgets import QApplication

from orbit.core.clock import MonotonicTimeSource
from orbit.core.errors import PersistenceUnavailable
from orbit.core.logger import get_logger
from orbit.core.persistence import KeyValueStore, MemoryStore
from orbit.core.session import SessionController
from orbit.data.storage import Storage
from orbit.ui.main_window import MainWindow
from orbit.ui.styles import apply_theme


def default_db_path() -> Path:
    """Returns the SQLite file inside the per-user data directory."""
    return Path(user_data_dir("orbit")) / "orbit.db"


def open_store(db_path: Path) -> KeyValueStore:
    """Opens SQLite settings; falls back to an in-memory store."""
    logger = get_logger()
    try:
        storage = Storage(db_path)
        storage.init_db()
    except PersistenceUnavailable as exc:
        logger.warning("Settings database unavailable, using memory only: %s", exc)
        return MemoryStore()
    return storage


def main() -> int:
    logger = get_logger()
    app = QApplication(sys.argv)
    app.setApplicationName("Orbit Focus")
    apply_theme(app)

    store = open_store(default_db_path())
    controller = SessionController(time_source=MonotonicTimeSource(), store=store)
    logger.info("Starting Orbit Focus with %s", controller.config)

    window = MainWindow(controller)
    window.show()
    return app.exec()


if __name__ == "__main__":
    raise SystemExit(main())
