"""Configuration manager using QSettings for persistent storage."""

import logging
from pathlib import Path

from PySide6.QtCore import QSettings, QStandardPaths

from untitledgems.models.track import DEFAULT_ARTIST

logger = logging.getLogger(__name__)

# Library
_KEY_STORAGE_DIR = "library/storage_dir"
_KEY_DEFAULT_ARTIST = "library/default_artist"
_KEY_REMOVE_FILES_ON_DELETE = "library/remove_files_on_delete"

# Appearance
_KEY_THEME = "appearance/theme"

# Playback
_KEY_SKIP_INTERVAL = "playback/skip_interval"
_KEY_REPORT_INTERVAL = "playback/report_interval_ms"
_KEY_VOLUME = "playback/volume"

THEMES = ("system", "light", "dark")

# Playback ranges
MIN_SKIP_INTERVAL = 5
MAX_SKIP_INTERVAL = 60
MIN_REPORT_INTERVAL_MS = 100
MAX_REPORT_INTERVAL_MS = 5000


def default_storage_dir() -> Path:
    """Return the platform default directory for managed storage.

    Returns:
        ``<AppDataLocation>/Library``, or ``~/.untitledgems/Library`` when Qt
        reports no writable application data location.
    """
    location = QStandardPaths.writableLocation(QStandardPaths.StandardLocation.AppDataLocation)
    if not location:
        return Path.home() / ".untitledgems" / "Library"
    return Path(location) / "Library"


class ConfigManager:
    """Wrapper around QSettings for type-safe config access.

    QSettings stores config in platform-specific locations:
    - Windows: HKEY_CURRENT_USER\\Software\\UntitledGems\\UntitledGems
    - macOS: ~/Library/Preferences/com.UntitledGems.UntitledGems.plist
    - Linux: ~/.config/UntitledGems/UntitledGems.conf

    Example:
        config = ConfigManager()
        storage = ManagedStorage(config.get_storage_dir())
        config.set_theme("dark")
    """

    def __init__(
        self, organization: str = "UntitledGems", application: str = "UntitledGems"
    ) -> None:
        """Initialize the config manager.

        Args:
            organization: Organization name for QSettings.
            application: Application name for QSettings.
        """
        self._settings = QSettings(organization, application)

    @property
    def settings(self) -> QSettings:
        """Return the underlying QSettings instance."""
        return self._settings

    # -- Library settings ------------------------------------------------------

    def get_storage_dir(self) -> Path:
        """Return the managed storage directory.

        Returns:
            Configured directory, or the platform default.
        """
        value = self._settings.value(_KEY_STORAGE_DIR, "", str)
        return Path(str(value)).expanduser() if value else default_storage_dir()

    def set_storage_dir(self, path: Path | str) -> None:
        """Set the managed storage directory.

        Args:
            path: Directory path, or empty string for the platform default.
        """
        self._settings.setValue(_KEY_STORAGE_DIR, str(path) if path else "")

    def get_default_artist(self) -> str:
        """Return the artist placeholder for imported tracks.

        Returns:
            Placeholder string (default "Unknown Artist").
        """
        value = self._settings.value(_KEY_DEFAULT_ARTIST, DEFAULT_ARTIST, str)
        text = str(value).strip() if value else ""
        return text or DEFAULT_ARTIST

    def set_default_artist(self, artist: str) -> None:
        """Set the artist placeholder for imported tracks.

        Args:
            artist: Placeholder, or empty string for the default.
        """
        self._settings.setValue(_KEY_DEFAULT_ARTIST, artist.strip())

    def get_remove_files_on_delete(self) -> bool:
        """Return whether deleting a track also removes its payload files.

        Returns:
            True if payloads are removed (default False).
        """
        return bool(self._settings.value(_KEY_REMOVE_FILES_ON_DELETE, False, bool))

    def set_remove_files_on_delete(self, enabled: bool) -> None:
        """Enable or disable payload removal on delete.

        Args:
            enabled: Whether to remove payload files.
        """
        self._settings.setValue(_KEY_REMOVE_FILES_ON_DELETE, enabled)

    # -- Appearance settings ---------------------------------------------------

    def get_theme(self) -> str:
        """Return the theme preference.

        Returns:
            One of "system", "dark", "light". Default "system".
        """
        value = self._settings.value(_KEY_THEME, "system", str)
        return str(value) if value in THEMES else "system"

    def set_theme(self, theme: str) -> None:
        """Set the theme preference.

        Args:
            theme: One of "system", "dark", "light".
        """
        if theme not in THEMES:
            logger.warning("Unknown theme '%s', using 'system'", theme)
            theme = "system"
        self._settings.setValue(_KEY_THEME, theme)

    # -- Playback settings -----------------------------------------------------

    def get_skip_interval(self) -> int:
        """Return the skip forward/backward distance in seconds.

        Returns:
            Interval in seconds (default 10).
        """
        value = self._settings.value(_KEY_SKIP_INTERVAL, 10, int)
        seconds = int(value)  # type: ignore[arg-type]
        return max(MIN_SKIP_INTERVAL, min(MAX_SKIP_INTERVAL, seconds))

    def set_skip_interval(self, seconds: int) -> None:
        """Set the skip distance.

        Args:
            seconds: Interval in seconds (5-60).
        """
        seconds = max(MIN_SKIP_INTERVAL, min(MAX_SKIP_INTERVAL, seconds))
        self._settings.setValue(_KEY_SKIP_INTERVAL, seconds)

    def get_report_interval_ms(self) -> int:
        """Return the playback position reporting interval.

        Returns:
            Interval in milliseconds (default 500).
        """
        value = self._settings.value(_KEY_REPORT_INTERVAL, 500, int)
        interval_ms = int(value)  # type: ignore[arg-type]
        return max(MIN_REPORT_INTERVAL_MS, min(MAX_REPORT_INTERVAL_MS, interval_ms))

    def set_report_interval_ms(self, interval_ms: int) -> None:
        """Set the playback position reporting interval.

        Args:
            interval_ms: Interval in milliseconds (100-5000).
        """
        interval_ms = max(MIN_REPORT_INTERVAL_MS, min(MAX_REPORT_INTERVAL_MS, interval_ms))
        self._settings.setValue(_KEY_REPORT_INTERVAL, interval_ms)

    def get_volume(self) -> int:
        """Return the output volume.

        Returns:
            Volume 0-100 (default 100).
        """
        value = self._settings.value(_KEY_VOLUME, 100, int)
        return max(0, min(100, int(value)))  # type: ignore[arg-type]

    def set_volume(self, volume: int) -> None:
        """Set the output volume.

        Args:
            volume: Volume 0-100.
        """
        self._settings.setValue(_KEY_VOLUME, max(0, min(100, volume)))

    # -- General settings ------------------------------------------------------

    def clear(self) -> None:
        """Clear all settings (useful for testing or reset)."""
        self._settings.clear()

    def sync(self) -> None:
        """Force settings to be written to disk."""
        self._settings.sync()
