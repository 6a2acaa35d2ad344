# src/pksimviz/app.py
import sys

from PySide6.QtWidgets import QApplication

from pksim.config import LOG_LEVEL, configure_logging

from .ui.main_window import MainWindow


def main():
    configure_logging(LOG_LEVEL)
    app = QApplication(sys.argv)
    window = MainWindow()
    window.show()
    return app.exec()


if __name__ == "__main__":
    sys.exit(main())
