"""Centralized theme system with system/light/dark modes.

Provides a ThemeManager singleton that resolves the chosen mode to a
named color palette, follows the system color scheme in "system" mode,
and emits signals on theme changes.

Usage:
    from untitledgems.ui.theme import theme_manager

    theme_manager.set_mode("dark")
    palette = theme_manager.palette
    widget.setStyleSheet(f"background-color: {palette.background};")
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import cast

from PySide6.QtCore import QObject, Qt, Signal
from PySide6.QtGui import QColor, QGuiApplication
from PySide6.QtWidgets import QApplication

from untitledgems.ui.tokens import sizing, spacing

logger = logging.getLogger(__name__)

MODES = ("system", "light", "dark")


@dataclass(frozen=True)
class ThemePalette:
    """Named color palette for UI theming.

    All values are CSS color strings (e.g. '#1e1e1e' or 'rgba(...)').
    """

    name: str  # "dark" or "light"

    # Backgrounds
    background: str  # App/window background
    surface: str  # List and dialog background
    surface_hover: str  # Row hover state
    surface_selected: str  # Row selected state

    # Borders
    border: str  # Default border

    # Text
    text: str  # Primary text
    text_secondary: str  # Secondary/muted text

    # Status and accent
    error: str  # Error messages
    accent: str  # Buttons, slider fill

    # Artwork placeholder
    placeholder: str  # Dashed frame and note glyph


DARK_PALETTE = ThemePalette(
    name="dark",
    background="#1c1c1e",
    surface="#2c2c2e",
    surface_hover="#3a3a3c",
    surface_selected="#48484a",
    border="#3a3a3c",
    text="#f2f2f7",
    text_secondary="#98989f",
    error="#ff453a",
    accent="#0a84ff",
    placeholder="#636366",
)

LIGHT_PALETTE = ThemePalette(
    name="light",
    background="#f2f2f7",
    surface="#ffffff",
    surface_hover="#e5e5ea",
    surface_selected="#d1d1d6",
    border="#c6c6c8",
    text="#1c1c1e",
    text_secondary="#6c6c70",
    error="#ff3b30",
    accent="#007aff",
    placeholder="#aeaeb2",
)


def gradient_stylesheet(selector: str, top: QColor, bottom: QColor) -> str:
    """Return a stylesheet painting a vertical two-stop gradient.

    Args:
        selector: Qt stylesheet selector (e.g. "#PlayerPanel").
        top: Color at the top edge.
        bottom: Color at the bottom edge.

    Returns:
        Stylesheet string.
    """
    return (
        f"{selector} {{ background: qlineargradient(x1:0, y1:0, x2:0, y2:1,"
        f" stop:0 {top.name()}, stop:1 {bottom.name()}); }}"
    )


class ThemeManager(QObject):
    """Manages the application theme and reacts to system changes.

    The mode is one of "system", "light", "dark". In "system" mode the
    palette follows the platform color scheme. Emits ``theme_changed``
    when the palette switches.

    Example:
        theme_manager.set_mode(config.get_theme())
        theme_manager.theme_changed.connect(my_widget.refresh_style)
    """

    theme_changed = Signal()

    def __init__(self) -> None:
        super().__init__()
        self._palette = DARK_PALETTE
        self._mode = "system"

    @property
    def palette(self) -> ThemePalette:
        """Return the current color palette."""
        return self._palette

    @property
    def mode(self) -> str:
        """Return the selected mode."""
        return self._mode

    @property
    def is_dark(self) -> bool:
        """Return True if the current palette is dark."""
        return self._palette.name == "dark"

    def detect_system_theme(self) -> ThemePalette:
        """Detect the system color scheme and return the matching palette.

        Uses Qt 6.5+ ``QStyleHints.colorScheme()`` API.
        Falls back to dark theme if detection fails.
        """
        try:
            raw_app = QGuiApplication.instance()
            if raw_app is None:
                return DARK_PALETTE
            app = cast(QGuiApplication, raw_app)
            scheme = app.styleHints().colorScheme()
            if scheme == Qt.ColorScheme.Light:
                return LIGHT_PALETTE
            return DARK_PALETTE
        except AttributeError:
            # Qt < 6.5 or no colorScheme support
            logger.debug("System theme detection not available, using dark theme")
            return DARK_PALETTE

    def palette_for_mode(self, mode: str) -> ThemePalette:
        """Resolve a mode to its palette.

        Args:
            mode: "system", "light" or "dark".

        Returns:
            Palette for the mode; unknown modes follow the system.
        """
        if mode == "light":
            return LIGHT_PALETTE
        if mode == "dark":
            return DARK_PALETTE
        return self.detect_system_theme()

    def set_mode(self, mode: str) -> None:
        """Select a mode and apply its palette.

        Args:
            mode: "system", "light" or "dark".
        """
        if mode not in MODES:
            logger.warning("Unknown theme mode '%s', following system", mode)
            mode = "system"
        self._mode = mode
        self.apply_theme(self.palette_for_mode(mode))

    def apply_theme(self, palette: ThemePalette | None = None) -> None:
        """Apply a theme palette to the application.

        Args:
            palette: Palette to apply. If None, resolves the current mode.
        """
        if palette is None:
            palette = self.palette_for_mode(self._mode)

        old_name = self._palette.name
        self._palette = palette
        logger.info("Theme applied: %s (%s)", palette.name, self._mode)

        raw_app = QApplication.instance()
        if raw_app is not None:
            qapp = cast(QApplication, raw_app)
            qapp.setStyleSheet(self._global_stylesheet())

        if palette.name != old_name:
            self.theme_changed.emit()

    def connect_system_theme_changes(self) -> None:
        """Listen for runtime system theme changes (e.g. macOS dark mode toggle)."""
        try:
            raw_app = QGuiApplication.instance()
            if raw_app is None:
                return
            app = cast(QGuiApplication, raw_app)
            app.styleHints().colorSchemeChanged.connect(self._on_system_theme_changed)
            logger.debug("Connected to system theme change signal")
        except AttributeError:
            logger.debug("System theme change signal not available")

    def _on_system_theme_changed(self) -> None:
        """Re-apply only while following the system."""
        if self._mode == "system":
            logger.info("System theme changed, re-applying")
            self.apply_theme()

    def _global_stylesheet(self) -> str:
        """Generate a global stylesheet for QApplication."""
        p = self._palette
        return f"""
            QToolTip {{
                background-color: {p.surface};
                color: {p.text};
                border: 1px solid {p.border};
                padding: {spacing.sm}px;
            }}
            QListWidget {{
                background-color: {p.surface};
                color: {p.text};
                border: none;
                border-radius: {sizing.border_radius_md}px;
            }}
            QListWidget::item:hover {{
                background: {p.surface_hover};
            }}
            QListWidget::item:selected {{
                background: {p.surface_selected};
                color: {p.text};
            }}
        """


# Module-level singleton: import this in widgets
theme_manager = ThemeManager()
