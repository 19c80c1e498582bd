"""Allow running HangTimer as a module: python -m hangtimer."""

import logging
import os
import sys

from PyQt6.QtWidgets import QApplication

from .database.db import init_db
from .app import HangTimerApp


def main() -> None:
    logging.basicConfig(
        level=os.environ.get("HANGTIMER_LOG_LEVEL", "WARNING").upper(),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    init_db()

    app = QApplication(sys.argv)
    app.setApplicationName("HangTimer")
    app.setOrganizationName("HangTimer")

    window = HangTimerApp()
    window.show()

    sys.exit(app.exec())


if __name__ == "__main__":
    main()
