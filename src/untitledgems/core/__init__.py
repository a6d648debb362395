"""Core business logic layer.

This module contains the library and playback logic that sits between
the platform collaborators (file dialogs, media player, system tray)
and the Qt UI layer.

Classes:
    LibraryStore: Ordered track list with JSON snapshot and Qt signals.
    ManagedStorage: Flat directory holding audio and artwork payloads.
    TrackImporter: Copies picked files into storage and adds tracks.
    PlaybackSession: Transport controls and now-playing sync for one track.
    ConfigManager: QSettings wrapper for configuration.
"""

from untitledgems.core.config import ConfigManager
from untitledgems.core.importer import LocalSourceHandle, TrackImporter
from untitledgems.core.library import LibraryStore
from untitledgems.core.session import PlaybackSession, SessionState
from untitledgems.core.storage import ManagedStorage

__all__ = [
    "ConfigManager",
    "LibraryStore",
    "LocalSourceHandle",
    "ManagedStorage",
    "PlaybackSession",
    "SessionState",
    "TrackImporter",
]
