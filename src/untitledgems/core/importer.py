"""Audio import: copy a picked file into managed storage and add a track.

The file picker hands back a SourceHandle. Access to the handle is held
for the duration of the copy and released on every exit path.
"""

from __future__ import annotations

import contextlib
import logging
import os
from collections.abc import Iterator
from pathlib import Path
from typing import Protocol

from untitledgems.core.errors import TrackImportError
from untitledgems.core.library import LibraryStore
from untitledgems.core.storage import ManagedStorage
from untitledgems.models.track import DEFAULT_ARTIST, Track, create_track

logger = logging.getLogger(__name__)

# Suffixes offered by the import dialog
AUDIO_SUFFIXES: tuple[str, ...] = (
    "mp3",
    "m4a",
    "aac",
    "wav",
    "aiff",
    "aif",
    "flac",
    "ogg",
    "opus",
    "wma",
    "alac",
    "caf",
)


def audio_file_filter() -> str:
    """Return a QFileDialog name filter restricted to audio files."""
    patterns = " ".join(f"*.{suffix}" for suffix in AUDIO_SUFFIXES)
    return f"Audio files ({patterns})"


class SourceHandle(Protocol):
    """A file handed over by an external picker."""

    @property
    def path(self) -> Path: ...

    def start_access(self) -> bool:
        """Request access to the file. Returns True if access must be released."""
        ...

    def stop_access(self) -> None:
        """Release access obtained by start_access()."""
        ...


class LocalSourceHandle:
    """SourceHandle for a plain local path (desktop file dialog)."""

    def __init__(self, path: Path | str) -> None:
        self._path = Path(path)
        self._accessing = False

    @property
    def path(self) -> Path:
        """Return the picked file path."""
        return self._path

    @property
    def is_accessing(self) -> bool:
        """Return True while access is held."""
        return self._accessing

    def start_access(self) -> bool:
        """Mark the file as in use if it is readable."""
        self._accessing = os.access(self._path, os.R_OK)
        return self._accessing

    def stop_access(self) -> None:
        """Release the file."""
        self._accessing = False


@contextlib.contextmanager
def scoped_access(handle: SourceHandle) -> Iterator[Path]:
    """Hold access to a source handle for the duration of a block.

    Access is released on normal exit and when the block raises.

    Args:
        handle: Handle returned by the picker.

    Yields:
        Path of the source file.
    """
    should_stop = handle.start_access()
    try:
        yield handle.path
    finally:
        if should_stop:
            handle.stop_access()


class TrackImporter:
    """Imports picked audio files into the library.

    Example:
        importer = TrackImporter(library)
        track = importer.import_file(LocalSourceHandle("/tmp/song.mp3"))
    """

    def __init__(self, library: LibraryStore, default_artist: str = DEFAULT_ARTIST) -> None:
        """Initialize the importer.

        Args:
            library: Library receiving imported tracks.
            default_artist: Artist placeholder for new tracks.
        """
        self._library = library
        self._default_artist = default_artist

    @property
    def storage(self) -> ManagedStorage:
        """Return the managed storage payloads are copied into."""
        return self._library.storage

    def set_default_artist(self, artist: str) -> None:
        """Set the artist placeholder used for new tracks."""
        self._default_artist = artist or DEFAULT_ARTIST

    def import_file(self, handle: SourceHandle | None) -> Track:
        """Copy a picked file into storage and add it to the library.

        Args:
            handle: Handle returned by the picker, or None if it returned nothing.

        Returns:
            The stored Track.

        Raises:
            TrackImportError: No handle, missing source, or copy failure.
                No track is added in these cases.
            PersistenceError: The track was added but the snapshot write failed.
        """
        if handle is None:
            raise TrackImportError("No file returned from the import dialog")

        with scoped_access(handle) as source:
            name = self.storage.copy_in(source)

        track = create_track(
            title=Path(name).stem,
            artist=self._default_artist,
            file_path=name,
        )
        stored = self._library.add(track)
        logger.info("Imported %s as '%s'", source.name, stored.title)
        return stored
