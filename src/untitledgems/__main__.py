"""Main entry point for the UntitledGems application."""

import argparse
import logging
import sys
from pathlib import Path

from PySide6.QtWidgets import QApplication, QMessageBox

from untitledgems import __version__
from untitledgems.core.config import ConfigManager
from untitledgems.core.errors import StorageUnavailable
from untitledgems.core.importer import TrackImporter
from untitledgems.core.library import LibraryStore
from untitledgems.core.now_playing import NullNowPlaying
from untitledgems.core.storage import ManagedStorage
from untitledgems.ui.main_window import MainWindow
from untitledgems.ui.system_tray import SystemTrayManager, TrayNowPlaying
from untitledgems.ui.theme import theme_manager

logger = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    """Return the command line parser."""
    parser = argparse.ArgumentParser(
        prog="untitledgems",
        description="UntitledGems: a personal library for local audio files",
    )
    parser.add_argument(
        "--storage-dir",
        type=Path,
        default=None,
        help="directory holding songs.json, audio and artwork (overrides preferences)",
    )
    parser.add_argument("--debug", action="store_true", help="enable debug logging")
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    return parser


def configure_logging(debug: bool) -> None:
    """Configure root logging for the application."""
    logging.basicConfig(
        level=logging.DEBUG if debug else logging.INFO,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


def main() -> int:
    """Run the UntitledGems application.

    Returns:
        Exit code (0 for success).
    """
    # Set app metadata before creating QApplication (required for macOS)
    QApplication.setApplicationName("UntitledGems")
    QApplication.setApplicationDisplayName("UntitledGems")
    QApplication.setOrganizationName("UntitledGems")
    QApplication.setApplicationVersion(__version__)

    app = QApplication(sys.argv)

    parsed = build_parser().parse_args(app.arguments()[1:])
    configure_logging(parsed.debug)

    config = ConfigManager()
    storage_dir: Path = parsed.storage_dir or config.get_storage_dir()

    storage = ManagedStorage(storage_dir)
    try:
        storage.initialize()
    except StorageUnavailable as e:
        logger.error("Cannot start: %s", e)
        QMessageBox.critical(
            None,
            "Storage Unavailable",
            f"UntitledGems cannot use its library folder:\n\n{storage_dir}\n\n{e}",
        )
        return 1

    # Apply theme (follows the system unless a mode was chosen)
    theme_manager.set_mode(config.get_theme())
    theme_manager.connect_system_theme_changes()

    library = LibraryStore(storage)
    library.load()
    importer = TrackImporter(library, default_artist=config.get_default_artist())

    window = MainWindow(library, importer, config, NullNowPlaying())

    tray = SystemTrayManager(window)
    if tray.available:
        window.set_now_playing(TrayNowPlaying(tray))
        tray.play_pause_requested.connect(window.player_panel.toggle_playback)
        tray.skip_forward_requested.connect(window.player_panel.skip_forward)
        tray.skip_backward_requested.connect(window.player_panel.skip_backward)
        tray.show()
    else:
        logger.info("System tray unavailable, now playing is not mirrored")

    window.show()
    logger.info(
        "UntitledGems %s started with %d tracks in %s", __version__, len(library), storage.root
    )

    # Run the application
    exit_code = app.exec()

    # Cleanup
    window.player_panel.close_session()
    tray.cleanup()
    config.sync()

    return exit_code


if __name__ == "__main__":
    sys.exit(main())
