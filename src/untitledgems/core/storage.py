"""Managed storage: the flat application directory holding audio and artwork.

Imported audio payloads are copied here under collision-free names and
artwork is written as ``artwork_<trackId>.jpg``. The library snapshot
lives in the same directory.
"""

from __future__ import annotations

import logging
import os
import shutil
from pathlib import Path
from typing import TYPE_CHECKING

from untitledgems.core.errors import PersistenceError, StorageUnavailable, TrackImportError
from untitledgems.models.track import artwork_filename

if TYPE_CHECKING:
    from PySide6.QtGui import QImage

logger = logging.getLogger(__name__)

SNAPSHOT_FILENAME = "songs.json"
ARTWORK_QUALITY = 90


class ManagedStorage:
    """Application-private directory for audio and artwork payloads.

    Must be initialized before use; initialization fails fast with
    StorageUnavailable instead of assuming the directory exists.

    Example:
        storage = ManagedStorage(Path("~/Music/UntitledGems").expanduser())
        storage.initialize()
        name = storage.copy_in(Path("/tmp/song.mp3"))
    """

    def __init__(self, root: Path) -> None:
        """Initialize storage rooted at a directory.

        Args:
            root: Directory that holds all payloads.
        """
        self._root = root
        self._ready = False

    @property
    def root(self) -> Path:
        """Return the storage directory."""
        return self._root

    @property
    def is_ready(self) -> bool:
        """Return True once initialize() has succeeded."""
        return self._ready

    @property
    def snapshot_path(self) -> Path:
        """Return the path of the library snapshot file."""
        return self._root / SNAPSHOT_FILENAME

    def initialize(self) -> None:
        """Create the directory if needed and verify it is writable.

        Raises:
            StorageUnavailable: Directory cannot be created or written.
        """
        try:
            self._root.mkdir(parents=True, exist_ok=True)
        except OSError as e:
            raise StorageUnavailable(f"Cannot create storage directory {self._root}: {e}") from e

        if not self._root.is_dir():
            raise StorageUnavailable(f"Storage path is not a directory: {self._root}")
        if not os.access(self._root, os.W_OK):
            raise StorageUnavailable(f"Storage directory is not writable: {self._root}")

        self._ready = True
        logger.info("Managed storage ready at %s", self._root)

    def resolve(self, name: str) -> Path:
        """Resolve a relative payload name to an absolute path.

        Args:
            name: Relative name as stored on a Track.

        Returns:
            Path inside the storage directory.
        """
        return self._root / name

    def exists(self, name: str) -> bool:
        """Return True if a payload with this name exists."""
        return self.resolve(name).exists()

    def unique_name(self, filename: str) -> str:
        """Return a payload name that does not collide with existing files.

        The base name is used as-is when free; otherwise ``_1``, ``_2``, ...
        is appended to the stem until a free name is found.

        Args:
            filename: Desired file name (base name of the source).

        Returns:
            Free file name inside the storage directory.
        """
        candidate = Path(filename).name
        if not self.exists(candidate):
            return candidate

        stem = Path(candidate).stem
        suffix = Path(candidate).suffix
        counter = 1
        while True:
            candidate = f"{stem}_{counter}{suffix}"
            if not self.exists(candidate):
                return candidate
            counter += 1

    def copy_in(self, source: Path) -> str:
        """Copy a source file into storage under a collision-free name.

        Args:
            source: File to copy.

        Returns:
            Name of the new payload.

        Raises:
            TrackImportError: Source is missing or the copy failed.
        """
        if not source.is_file():
            raise TrackImportError(f"Source file not found: {source}")

        name = self.unique_name(source.name)
        destination = self.resolve(name)
        try:
            shutil.copy2(source, destination)
        except OSError as e:
            # Remove a partial copy so the name is free again
            destination.unlink(missing_ok=True)
            raise TrackImportError(f"Failed to copy {source} to {destination}: {e}") from e

        logger.info("Copied audio to %s", destination)
        return name

    def write_artwork(self, track_id: str, image: QImage) -> str:
        """Write a track's artwork as JPEG, replacing any previous one.

        Args:
            track_id: Identifier of the owning track.
            image: Artwork image.

        Returns:
            Name of the artwork payload.

        Raises:
            PersistenceError: Image is empty or could not be written.
        """
        name = artwork_filename(track_id)
        if image.isNull():
            raise PersistenceError(f"Refusing to write empty artwork for {track_id}")
        if not image.save(str(self.resolve(name)), "JPG", ARTWORK_QUALITY):
            raise PersistenceError(f"Failed to write artwork {name}")
        logger.debug("Wrote artwork %s (%dx%d)", name, image.width(), image.height())
        return name

    def remove(self, name: str) -> bool:
        """Delete a payload if present.

        Args:
            name: Relative payload name.

        Returns:
            True if a file was removed.
        """
        path = self.resolve(name)
        try:
            path.unlink()
        except FileNotFoundError:
            return False
        except OSError as e:
            logger.warning("Failed to remove payload %s: %s", path, e)
            return False
        logger.info("Removed payload %s", path)
        return True
