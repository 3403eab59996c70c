"""Application entry point and setup for the Code Master trainer."""

import logging
import sys

from PySide6.QtCore import QTimer
from PySide6.QtWidgets import QApplication

from codemaster.core.catalog import load_catalog
from codemaster.core.config import load_config
from codemaster.core.dictionary import DictionaryTracker
from codemaster.core.progress import ProgressStore
from codemaster.core.quiz import QuizEngine
from codemaster.ui.main_window import MainWindow


def configure_logging() -> None:
    """Configure application-wide logging with a standard format."""
    logging.basicConfig(
        level=logging.INFO,
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
    )


def run() -> None:
    """Load config, catalog and saved progress, then show the main window."""
    configure_logging()
    app = QApplication(sys.argv)
    config = load_config()
    app.setApplicationName(config.title)
    app.setApplicationDisplayName(config.title)

    catalog = load_catalog(config.data_path)
    progress_store = ProgressStore()
    logging.info(f"Using progress file: {progress_store.file_path}")

    engine = QuizEngine(
        catalog,
        progress_store,
        scheduler=QTimer.singleShot,
        advance_delay_ms=config.auto_advance_delay_ms,
    )
    tracker = DictionaryTracker(progress_store)

    window = MainWindow(engine=engine, tracker=tracker, progress_store=progress_store, config=config)
    window.resize(1400, 900)
    window.show()

    sys.exit(app.exec())
