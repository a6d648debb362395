"""System tray icon acting as the now-playing surface.

SystemTrayManager owns the QSystemTrayIcon, its menu and the transport
signals. TrayNowPlaying adapts it to the NowPlayingCenter interface so
the PlaybackSession can mirror metadata and state into the tray.

Usage:
    from untitledgems.ui.system_tray import SystemTrayManager, TrayNowPlaying

    tray = SystemTrayManager(window)
    now_playing = TrayNowPlaying(tray)
    tray.play_pause_requested.connect(window.player_panel.toggle_playback)
"""

from __future__ import annotations

import contextlib
import logging
from typing import cast

from PySide6.QtCore import QObject, Signal
from PySide6.QtGui import QAction, QIcon, QPixmap
from PySide6.QtWidgets import QApplication, QMainWindow, QMenu, QSystemTrayIcon

from untitledgems.core.now_playing import NowPlayingCenter, NowPlayingInfo, format_time

logger = logging.getLogger(__name__)

APP_NAME = "UntitledGems"
_ICON_SIZE = 64


def tooltip_for(info: NowPlayingInfo | None) -> str:
    """Return the tray tooltip for a now-playing entry.

    Args:
        info: Current entry, or None when nothing is loaded.

    Returns:
        Multi-line tooltip text.
    """
    if info is None:
        return f"{APP_NAME} — Not playing"
    glyph = "▶" if info.is_playing else "⏸"
    line = f"{glyph} {info.title}"
    if info.artist:
        line += f" — {info.artist}"
    return f"{line}\n{format_time(info.elapsed)} / {format_time(info.duration)}"


class SystemTrayManager(QObject):
    """Manages the system tray icon and its context menu.

    Features:
    - Show/Hide window toggle (double-click or menu)
    - Now playing title/artist and elapsed time in the tooltip
    - Artwork as tray icon while a track is loaded
    - Play/Pause and skip actions
    - Quit action

    The menu is rebuilt only when its visible content changes.
    """

    play_pause_requested = Signal()
    skip_forward_requested = Signal()
    skip_backward_requested = Signal()

    def __init__(self, window: QMainWindow, icon: QIcon | None = None) -> None:
        """Initialize the system tray manager.

        Args:
            window: The main application window.
            icon: Optional icon for the tray. Falls back to app icon.
        """
        super().__init__()
        self._window = window
        self._info: NowPlayingInfo | None = None
        self._last_menu_fingerprint = ""
        self._artwork_key: int | None = None

        if icon is None:
            raw_app = QApplication.instance()
            icon = cast(QApplication, raw_app).windowIcon() if raw_app is not None else QIcon()
        self._base_icon = icon

        self._tray = QSystemTrayIcon(self._base_icon)
        self._tray.setToolTip(tooltip_for(None))
        self._tray.activated.connect(self._on_activated)

        self._menu = QMenu()
        self._tray.setContextMenu(self._menu)
        self._rebuild_menu()

    @property
    def available(self) -> bool:
        """Return True if system tray is available on this platform."""
        return QSystemTrayIcon.isSystemTrayAvailable()

    @property
    def tooltip(self) -> str:
        """Return the current tooltip text."""
        return self._tray.toolTip()

    @property
    def menu(self) -> QMenu:
        """Return the tray context menu."""
        return self._menu

    def show(self) -> None:
        """Show the tray icon."""
        if self.available:
            self._tray.show()
            logger.info("System tray icon shown")
        else:
            logger.warning("System tray not available on this platform")

    def hide(self) -> None:
        """Hide the tray icon."""
        self._tray.hide()

    def show_now_playing(self, info: NowPlayingInfo | None) -> None:
        """Render a now-playing entry into tooltip, icon and menu.

        Args:
            info: Entry to show, or None to clear.
        """
        self._info = info
        self._tray.setToolTip(tooltip_for(info))
        self._update_icon(info)
        self._rebuild_menu()

    def _update_icon(self, info: NowPlayingInfo | None) -> None:
        artwork = info.artwork if info else None
        key = artwork.cacheKey() if artwork is not None and not artwork.isNull() else None
        if key == self._artwork_key:
            return
        self._artwork_key = key
        if artwork is None or key is None:
            self._tray.setIcon(self._base_icon)
            return
        pixmap = QPixmap.fromImage(artwork).scaled(_ICON_SIZE, _ICON_SIZE)
        self._tray.setIcon(QIcon(pixmap))

    def _compute_menu_fingerprint(self) -> str:
        """Return a string identifying the menu's visible content."""
        info = self._info
        parts = [
            "visible" if self._window.isVisible() else "hidden",
            info.title if info else "",
            info.artist if info else "",
            "playing" if info and info.is_playing else "paused",
        ]
        return "|".join(parts)

    def _rebuild_menu(self) -> None:
        """Rebuild the tray context menu from the current entry."""
        fingerprint = self._compute_menu_fingerprint()
        if fingerprint == self._last_menu_fingerprint:
            return
        self._last_menu_fingerprint = fingerprint

        self._menu.clear()

        if self._info is not None:
            label = f"♫ {self._info.title}"
            if self._info.artist:
                label += f" — {self._info.artist}"
            now_playing = QAction(label, self._menu)
            now_playing.setEnabled(False)
            self._menu.addAction(now_playing)

            play_pause = QAction("Pause" if self._info.is_playing else "Play", self._menu)
            play_pause.triggered.connect(self.play_pause_requested)
            self._menu.addAction(play_pause)

            back = QAction("Skip Back", self._menu)
            back.triggered.connect(self.skip_backward_requested)
            self._menu.addAction(back)

            forward = QAction("Skip Forward", self._menu)
            forward.triggered.connect(self.skip_forward_requested)
            self._menu.addAction(forward)

            self._menu.addSeparator()

        toggle_action = QAction(
            f"Hide {APP_NAME}" if self._window.isVisible() else f"Show {APP_NAME}",
            self._menu,
        )
        toggle_action.triggered.connect(self._toggle_window)
        self._menu.addAction(toggle_action)

        self._menu.addSeparator()

        quit_action = QAction("Quit", self._menu)
        quit_action.triggered.connect(self._on_quit)
        self._menu.addAction(quit_action)

    def _toggle_window(self) -> None:
        """Toggle main window visibility."""
        if self._window.isVisible():
            self._window.hide()
        else:
            self._window.show()
            self._window.raise_()
            self._window.activateWindow()
        self._rebuild_menu()

    def _on_activated(self, reason: QSystemTrayIcon.ActivationReason) -> None:
        """Handle tray icon activation (click/double-click).

        Args:
            reason: The activation reason.
        """
        if reason == QSystemTrayIcon.ActivationReason.DoubleClick:
            self._toggle_window()

    def cleanup(self) -> None:
        """Clear the menu and disconnect signals before quitting."""
        with contextlib.suppress(RuntimeError):
            self._tray.activated.disconnect(self._on_activated)
        self._menu.clear()
        self._last_menu_fingerprint = ""
        self._tray.hide()

    def _on_quit(self) -> None:
        """Quit the application."""
        self.cleanup()
        app = QApplication.instance()
        if app:
            app.quit()


class TrayNowPlaying(NowPlayingCenter):
    """NowPlayingCenter rendering into a SystemTrayManager."""

    def __init__(self, tray: SystemTrayManager) -> None:
        """Initialize the adapter.

        Args:
            tray: Tray manager to render into.
        """
        super().__init__()
        self._tray = tray

    def _render(self, info: NowPlayingInfo | None) -> None:
        self._tray.show_now_playing(info)
