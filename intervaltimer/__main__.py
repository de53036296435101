"""Allow running the timer as a module: python -m intervaltimer."""

import logging
import os
import sys

from PyQt6.QtWidgets import QApplication

from .app import IntervalTimerApp


def _configure_logging() -> None:
    level = os.environ.get("INTERVALTIMER_LOG_LEVEL", "INFO").upper()
    logging.basicConfig(
        level=getattr(logging, level, logging.INFO),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


def main() -> None:
    _configure_logging()

    app = QApplication(sys.argv)
    app.setApplicationName("Workout Timer")
    app.setOrganizationName("IntervalTimer")

    window = IntervalTimerApp()
    window.show()
    logging.getLogger(__name__).info("Workout Timer ready")

    sys.exit(app.exec())


if __name__ == "__main__":
    main()
