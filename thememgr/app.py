"""QApplication bootstrap."""

from __future__ import annotations

import logging
from logging.handlers import RotatingFileHandler
import sys

from PySide6.QtWidgets import QApplication

from thememgr import __version__
from thememgr.config.settings import AppSettings
from thememgr.ui.main_window import MainWindow


def configure_logging(settings: AppSettings) -> logging.Logger:
    logger = logging.getLogger("thememgr")
    if logger.handlers:
        return logger

    logger.setLevel(logging.INFO)
    handler = RotatingFileHandler(
        settings.log_dir / "thememgr.log",
        maxBytes=512_000,
        backupCount=3,
        encoding="utf-8",
    )
    handler.setFormatter(logging.Formatter("%(asctime)s %(levelname)s %(name)s %(message)s"))
    logger.addHandler(handler)
    logger.propagate = False
    return logger


def run_app() -> int:
    """Initialize and run the application."""
    app = QApplication(sys.argv)
    app.setStyle("Fusion")
    app.setApplicationName("Theme Manager")
    app.setOrganizationName("ThemeManager")
    settings = AppSettings()
    logger = configure_logging(settings)
    logger.info("startup version=%s storage_root=%s", __version__, settings.storage_root)

    root = settings.storage_root
    if root is not None and not root.exists():
        logger.warning("storage root missing at %s", root)

    window = MainWindow(settings)
    window.show()

    exit_code = app.exec()
    settings.sync()
    return exit_code
