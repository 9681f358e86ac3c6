"""Allow running CountDown as a module: python -m countdown."""

import argparse
import logging
import sys

from PyQt6.QtWidgets import QApplication

from .app import CountdownWindow


def main() -> None:
    parser = argparse.ArgumentParser(prog="countdown")
    parser.add_argument(
        "-v", "--verbose", action="store_true", help="log at DEBUG level",
    )
    args, qt_args = parser.parse_known_args()

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    app = QApplication([sys.argv[0], *qt_args])
    app.setApplicationName("CountDown")
    app.setOrganizationName("CountDown")
    app.setQuitOnLastWindowClosed(False)

    window = CountdownWindow()
    window.show()
    logging.getLogger(__name__).info("CountDown ready")

    sys.exit(app.exec())


if __name__ == "__main__":
    main()
