"""Allow running MultiTimer as a module: python -m multitimer."""

import logging
import os
import sys

from PyQt6.QtWidgets import QApplication

from .database.db import init_db
from .app import MultiTimerApp


def setup_logging(level: int = logging.INFO) -> logging.Logger:
    """Configure logging for the application."""
    logging.basicConfig(
        level=level,
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )
    return logging.getLogger("multitimer")


def main() -> None:
    level = logging.DEBUG if os.environ.get("MULTITIMER_DEBUG") else logging.INFO
    logger = setup_logging(level)
    init_db()

    app = QApplication(sys.argv)
    app.setApplicationName("MultiTimer")
    app.setOrganizationName("MultiTimer")

    window = MultiTimerApp()
    window.show()
    logger.info("MultiTimer ready")

    sys.exit(app.exec())


if __name__ == "__main__":
    main()
