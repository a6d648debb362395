"""Main application window with a two-pane layout.

Layout:
+-----------------------------+
| Library   | Player          |
| Panel     | Panel           |
| (left)    | (right)         |
+-----------------------------+
"""

import logging
from pathlib import Path

from PySide6.QtGui import QCloseEvent
from PySide6.QtWidgets import (
    QDialog,
    QFileDialog,
    QHBoxLayout,
    QMainWindow,
    QPushButton,
    QSplitter,
    QWidget,
)

from untitledgems.core.config import ConfigManager
from untitledgems.core.engine import QtAudioEngine
from untitledgems.core.errors import UntitledGemsError
from untitledgems.core.importer import (
    LocalSourceHandle,
    SourceHandle,
    TrackImporter,
    audio_file_filter,
)
from untitledgems.core.library import LibraryStore
from untitledgems.core.now_playing import NowPlayingCenter
from untitledgems.core.session import EngineFactory
from untitledgems.models.track import Track
from untitledgems.ui.panels.library import LibraryPanel
from untitledgems.ui.panels.player import PlayerPanel
from untitledgems.ui.theme import theme_manager
from untitledgems.ui.tokens import sizing, spacing, typography
from untitledgems.ui.widgets.dialogs import EditTrackDialog
from untitledgems.ui.widgets.preferences import PreferencesDialog

logger = logging.getLogger(__name__)

# Status bar message timeout (ms)
_STATUS_TIMEOUT_MS = 5000


class MainWindow(QMainWindow):
    """Main application window: library on the left, player on the right.

    The window reacts to LibraryStore signals, routes user actions to the
    store and the importer, and reports failures in the status bar.

    Example:
        library = LibraryStore(storage)
        window = MainWindow(library, TrackImporter(library), config, now_playing)
        window.show()
    """

    def __init__(
        self,
        library: LibraryStore,
        importer: TrackImporter,
        config: ConfigManager,
        now_playing: NowPlayingCenter,
        engine_factory: EngineFactory = QtAudioEngine,
    ) -> None:
        """Initialize the main window.

        Args:
            library: Library store to display and mutate.
            importer: Importer for the "+" action.
            config: Preferences.
            now_playing: Surface the player mirrors into.
            engine_factory: Creates playback engines.
        """
        super().__init__()
        self._library = library
        self._importer = importer
        self._config = config
        self._now_playing = now_playing
        self._engine_factory = engine_factory

        self._setup_ui()
        self._setup_style()
        self._connect_signals()

        self._library_panel.set_tracks(library.tracks)
        theme_manager.theme_changed.connect(self._refresh_theme)

    def _setup_ui(self) -> None:
        """Set up the user interface."""
        self.setWindowTitle("UntitledGems")
        self.setMinimumSize(800, 600)

        central_widget = QWidget()
        self.setCentralWidget(central_widget)

        main_layout = QHBoxLayout(central_widget)
        main_layout.setContentsMargins(spacing.xs, spacing.xs, spacing.xs, spacing.xs)
        main_layout.setSpacing(spacing.xs)

        splitter = QSplitter()

        self._library_panel = LibraryPanel(self._library.storage)
        self._library_panel.setMinimumWidth(sizing.panel_min_library)

        self._player_panel = PlayerPanel(
            self._now_playing,
            self._library.storage,
            engine_factory=self._engine_factory,
            report_interval_ms=self._config.get_report_interval_ms(),
            skip_interval=self._config.get_skip_interval(),
            volume=self._config.get_volume(),
        )

        splitter.addWidget(self._library_panel)
        splitter.addWidget(self._player_panel)
        splitter.setSizes([300, 500])
        splitter.setStretchFactor(0, 0)  # Library: don't stretch
        splitter.setStretchFactor(1, 1)  # Player: stretch

        main_layout.addWidget(splitter)

        # Preferences gear button
        self._gear_btn = QPushButton("\u2699")
        self._gear_btn.setFlat(True)
        self._gear_btn.setToolTip("Preferences")
        self._gear_btn.clicked.connect(self.open_preferences)
        self.statusBar().addPermanentWidget(self._gear_btn)

    def _setup_style(self) -> None:
        """Set up basic styling."""
        p = theme_manager.palette
        self.setStyleSheet(f"""
            QMainWindow {{
                background-color: {p.background};
            }}
            QWidget {{
                color: {p.text};
                font-family: {typography.font_family};
                font-size: {typography.subtitle}pt;
            }}
        """)
        self.statusBar().setStyleSheet(f"background-color: {p.background};")
        self._gear_btn.setStyleSheet(f"""
            QPushButton {{
                font-size: {typography.heading}pt;
                color: {p.text_secondary};
                border: none;
                background: transparent;
            }}
            QPushButton:hover {{
                color: {p.text};
            }}
        """)

    def _refresh_theme(self) -> None:
        """Refresh styles and the library rows when the theme changes."""
        self._setup_style()
        self._library_panel.set_tracks(self._library.tracks)

    def _connect_signals(self) -> None:
        """Connect library, panel, and preference signals."""
        self._library.tracks_changed.connect(self._library_panel.set_tracks)
        self._library.track_updated.connect(self._player_panel.update_track)
        self._library.error_occurred.connect(self._show_error)

        self._library_panel.track_activated.connect(self.open_track)
        self._library_panel.delete_requested.connect(self.delete_track)
        self._library_panel.import_requested.connect(self.import_from_dialog)

        self._player_panel.edit_requested.connect(self.edit_track)
        self._player_panel.error_occurred.connect(self._show_error)
        self._player_panel.volume_changed.connect(self._config.set_volume)

    # -- Accessors --------------------------------------------------------------

    @property
    def library_panel(self) -> LibraryPanel:
        """Return the library panel."""
        return self._library_panel

    @property
    def player_panel(self) -> PlayerPanel:
        """Return the player panel."""
        return self._player_panel

    @property
    def config(self) -> ConfigManager:
        """Return the config manager."""
        return self._config

    @property
    def library(self) -> LibraryStore:
        """Return the library store."""
        return self._library

    def set_now_playing(self, now_playing: NowPlayingCenter) -> None:
        """Mirror sessions opened from now on into a different surface.

        Args:
            now_playing: The new now-playing surface.
        """
        self._now_playing = now_playing
        self._player_panel.set_now_playing(now_playing)

    # -- Actions ----------------------------------------------------------------

    def open_track(self, track_id: str) -> bool:
        """Open a track in the player, closing any previous session first.

        Args:
            track_id: Id of the track to open.

        Returns:
            True if playback started.
        """
        track = self._library.get(track_id)
        if track is None:
            logger.warning("Cannot open unknown track %s", track_id)
            return False
        return self._player_panel.open_track(track)

    def import_from_dialog(self) -> Track | None:
        """Ask for an audio file and import it."""
        path, _selected = QFileDialog.getOpenFileName(
            self, "Import Song", "", audio_file_filter()
        )
        if not path:
            logger.debug("Import cancelled")
            return None
        return self.import_source(LocalSourceHandle(Path(path)))

    def import_source(self, handle: SourceHandle | None) -> Track | None:
        """Import a picked file, reporting failures in the status bar.

        Args:
            handle: Handle for the picked file.

        Returns:
            The stored Track, or None on failure.
        """
        try:
            track = self._importer.import_file(handle)
        except UntitledGemsError as e:
            self._show_error(e)
            return None
        self._library_panel.select_track(track.id)
        self.statusBar().showMessage(f"Imported {track.display_title}", _STATUS_TIMEOUT_MS)
        return track

    def delete_track(self, track_id: str) -> bool:
        """Delete a track, closing the player if it is loaded.

        Payload and artwork files are removed only when the
        remove-files-on-delete preference is enabled.

        Args:
            track_id: Id of the track to delete.

        Returns:
            True if the track was removed.
        """
        track = self._library.get(track_id)
        loaded = self._player_panel.track
        if loaded is not None and loaded.id == track_id:
            self._player_panel.close_session()

        try:
            removed = self._library.delete(track_id)
        except UntitledGemsError as e:
            self._show_error(e)
            return False

        if removed and track is not None and self._config.get_remove_files_on_delete():
            storage = self._library.storage
            storage.remove(track.file_path)
            if track.artwork_path:
                storage.remove(track.artwork_path)
        return removed

    def edit_track(self, track: Track) -> bool:
        """Open the edit dialog and persist accepted changes.

        Args:
            track: Track to edit.

        Returns:
            True if changes were saved.
        """
        dialog = EditTrackDialog(self, track, self._library.storage)
        if dialog.exec() != QDialog.DialogCode.Accepted:
            return False
        return self.save_track(dialog.track)

    def save_track(self, track: Track) -> bool:
        """Persist an edited track; the player refreshes via track_updated."""
        try:
            return self._library.update(track)
        except UntitledGemsError as e:
            self._show_error(e)
            return False

    def open_preferences(self) -> PreferencesDialog:
        """Open the preferences dialog; applied settings take effect immediately."""
        dialog = PreferencesDialog(self._config, parent=self)
        dialog.settings_changed.connect(self._apply_preferences)
        dialog.open()
        return dialog

    def _apply_preferences(self) -> None:
        c = self._config
        self._importer.set_default_artist(c.get_default_artist())
        self._player_panel.set_skip_interval(c.get_skip_interval())
        self._player_panel.set_report_interval_ms(c.get_report_interval_ms())
        theme_manager.set_mode(c.get_theme())
        logger.info("Preferences applied")

    def _show_error(self, error: Exception) -> None:
        """Log a failure and show it briefly in the status bar."""
        logger.error("%s", error)
        self.statusBar().showMessage(str(error), _STATUS_TIMEOUT_MS)

    def closeEvent(self, event: QCloseEvent) -> None:  # noqa: N802
        """Close the playback session before the window goes away.

        Args:
            event: The close event.
        """
        self._player_panel.close_session()
        super().closeEvent(event)

