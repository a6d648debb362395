"""Error taxonomy for library, import, and playback failures.

All errors derive from UntitledGemsError so the UI layer can catch them
in one place and apply the log-and-continue policy.
"""


class UntitledGemsError(Exception):
    """Base class for application errors."""


class PersistenceError(UntitledGemsError):
    """Library snapshot or artwork payload could not be read, parsed, or written."""


class TrackImportError(UntitledGemsError):
    """An audio file could not be imported into managed storage."""


class PlaybackError(UntitledGemsError):
    """The playback engine could not open a track."""

    def __init__(self, path: str, message: str) -> None:
        self.path = path
        self.message = message
        super().__init__(f"Cannot play {path}: {message}")


class StorageUnavailable(UntitledGemsError):
    """The managed storage directory could not be created or is not writable."""
