"""Tests for the centralized theme system."""

from unittest.mock import MagicMock, patch

from PySide6.QtCore import Qt
from PySide6.QtGui import QColor
from PySide6.QtWidgets import QApplication
from pytestqt.qtbot import QtBot

from untitledgems.ui.theme import (
    DARK_PALETTE,
    LIGHT_PALETTE,
    ThemeManager,
    gradient_stylesheet,
)


class TestThemePalette:
    """Test ThemePalette dataclass."""

    def test_palette_names(self) -> None:
        """Test that palettes report their names."""
        assert DARK_PALETTE.name == "dark"
        assert LIGHT_PALETTE.name == "light"

    def test_palette_is_frozen(self) -> None:
        """Test that palette is immutable."""
        try:
            DARK_PALETTE.background = "#000000"  # type: ignore[misc]
            raise AssertionError("Should have raised FrozenInstanceError")
        except AttributeError:
            pass

    def test_palettes_differ(self) -> None:
        """Test that light and dark use different text colors."""
        assert DARK_PALETTE.text != LIGHT_PALETTE.text
        assert DARK_PALETTE.background != LIGHT_PALETTE.background


class TestThemeManager:
    """Test mode selection and palette switching."""

    def test_default_mode(self) -> None:
        """Test that a new manager follows the system."""
        manager = ThemeManager()
        assert manager.mode == "system"

    def test_set_light(self, qapp: QApplication) -> None:
        """Test switching to light mode."""
        manager = ThemeManager()
        manager.set_mode("light")
        assert manager.mode == "light"
        assert manager.palette is LIGHT_PALETTE
        assert not manager.is_dark

    def test_set_dark(self, qapp: QApplication) -> None:
        """Test switching to dark mode."""
        manager = ThemeManager()
        manager.set_mode("light")
        manager.set_mode("dark")
        assert manager.palette is DARK_PALETTE
        assert manager.is_dark

    def test_unknown_mode_follows_system(self, qapp: QApplication) -> None:
        """Test that an unknown mode is stored as system."""
        manager = ThemeManager()
        manager.set_mode("solarized")
        assert manager.mode == "system"

    def test_theme_changed_signal(self, qtbot: QtBot) -> None:
        """Test that switching palettes emits theme_changed."""
        manager = ThemeManager()
        with qtbot.waitSignal(manager.theme_changed, timeout=1000):
            manager.set_mode("light")

    def test_no_signal_same_palette(self, qapp: QApplication) -> None:
        """Test that re-applying the same palette does not emit."""
        manager = ThemeManager()
        manager.set_mode("dark")
        spy = MagicMock()
        manager.theme_changed.connect(spy)
        manager.set_mode("dark")
        spy.assert_not_called()

    def test_global_stylesheet_applied(self, qapp: QApplication) -> None:
        """Test that the palette reaches the application stylesheet."""
        manager = ThemeManager()
        manager.set_mode("light")
        assert LIGHT_PALETTE.surface in qapp.styleSheet()

    def test_system_detection_light(self) -> None:
        """Test that a light system scheme resolves to the light palette."""
        manager = ThemeManager()
        mock_app = MagicMock()
        mock_app.styleHints.return_value.colorScheme.return_value = Qt.ColorScheme.Light
        with patch("untitledgems.ui.theme.QGuiApplication.instance", return_value=mock_app):
            assert manager.detect_system_theme() is LIGHT_PALETTE

    def test_system_detection_no_app(self) -> None:
        """Test that detection without an application falls back to dark."""
        manager = ThemeManager()
        with patch("untitledgems.ui.theme.QGuiApplication.instance", return_value=None):
            assert manager.detect_system_theme() is DARK_PALETTE

    def test_system_change_ignored_when_fixed(self, qapp: QApplication) -> None:
        """Test that system changes do not override a fixed mode."""
        manager = ThemeManager()
        manager.set_mode("light")
        with patch.object(manager, "apply_theme") as apply:
            manager._on_system_theme_changed()  # pyright: ignore[reportPrivateUsage]
        apply.assert_not_called()


class TestGradientStylesheet:
    """Test the background gradient stylesheet."""

    def test_contains_stops(self) -> None:
        """Test that both colors appear as gradient stops."""
        sheet = gradient_stylesheet("#PlayerPanel", QColor("#ff0000"), QColor("#330000"))
        assert sheet.startswith("#PlayerPanel {")
        assert "qlineargradient" in sheet
        assert "stop:0 #ff0000" in sheet
        assert "stop:1 #330000" in sheet
