"""Library store with Qt signals for reactive UI updates.

The LibraryStore owns the ordered list of tracks, persists it as a full
JSON snapshot after every mutation, and notifies subscribers via Qt
signals when the list changes.
"""

from __future__ import annotations

import json
import logging
from dataclasses import replace

from PySide6.QtCore import QObject, Signal

from untitledgems.core.errors import PersistenceError
from untitledgems.core.storage import ManagedStorage
from untitledgems.models.track import Track, new_track_id

logger = logging.getLogger(__name__)


class LibraryStore(QObject):
    """Authoritative ordered list of tracks backed by a JSON snapshot.

    The snapshot is rewritten in full after every add/update/delete.
    Write failures raise PersistenceError but the in-memory change is
    kept, so memory and disk may differ until the next successful write.
    Callers report write failures; only load problems go to error_occurred.

    Example:
        library = LibraryStore(storage)
        library.tracks_changed.connect(lambda tracks: print(len(tracks)))
        library.load()
        stored = library.add(create_track("Song", "Artist", "song.mp3"))
    """

    # Emit full lists on change
    # Note: Using object for complex types (PySide6 limitation)
    tracks_changed = Signal(object)  # list[Track]
    track_added = Signal(object)  # Track
    track_updated = Signal(object)  # Track
    track_removed = Signal(str)  # track id
    error_occurred = Signal(object)  # Exception

    def __init__(self, storage: ManagedStorage) -> None:
        """Initialize an empty library.

        Args:
            storage: Managed storage holding the snapshot file.
        """
        super().__init__()
        self._storage = storage
        self._tracks: list[Track] = []

    @property
    def storage(self) -> ManagedStorage:
        """Return the managed storage backing this library."""
        return self._storage

    @property
    def tracks(self) -> list[Track]:
        """Return the ordered tracks (a copy)."""
        return list(self._tracks)

    def list(self) -> list[Track]:
        """Return the ordered tracks. No side effects."""
        return self.tracks

    def __len__(self) -> int:
        return len(self._tracks)

    def __contains__(self, track_id: object) -> bool:
        return any(t.id == track_id for t in self._tracks)

    def get(self, track_id: str) -> Track | None:
        """Get a track by ID.

        Args:
            track_id: The track ID to look up.

        Returns:
            The Track if found, else None.
        """
        for track in self._tracks:
            if track.id == track_id:
                return track
        return None

    def _index_of(self, track_id: str) -> int | None:
        for idx, track in enumerate(self._tracks):
            if track.id == track_id:
                return idx
        return None

    def load(self) -> None:
        """Restore the library from the snapshot file.

        A missing file leaves the library empty. An unreadable or malformed
        file is reported via logging and error_occurred, and the library
        starts empty. Never raises.
        """
        path = self._storage.snapshot_path
        if not path.exists():
            logger.info("No library snapshot at %s, starting empty", path)
            self._tracks = []
            self.tracks_changed.emit(self.tracks)
            return

        try:
            raw = json.loads(path.read_text(encoding="utf-8"))
            if not isinstance(raw, list):
                raise TypeError(f"snapshot root must be a list, got {type(raw).__name__}")
            tracks = [Track.from_dict(item) for item in raw]
        except (OSError, ValueError, KeyError, TypeError, AttributeError) as e:
            error = PersistenceError(f"Error loading {path.name}: {e}")
            logger.error("%s", error)
            self._tracks = []
            self.error_occurred.emit(error)
            self.tracks_changed.emit(self.tracks)
            return

        self._tracks = tracks
        logger.info("Loaded %d tracks from %s", len(tracks), path)
        self.tracks_changed.emit(self.tracks)

    def save(self) -> None:
        """Write the full ordered list to the snapshot file.

        Raises:
            PersistenceError: Snapshot could not be written.
        """
        path = self._storage.snapshot_path
        data = [t.to_dict() for t in self._tracks]
        try:
            path.write_text(json.dumps(data, indent=2, ensure_ascii=False), encoding="utf-8")
        except OSError as e:
            raise PersistenceError(f"Error saving {path.name}: {e}") from e
        logger.debug("Saved %d tracks to %s", len(data), path)

    def add(self, track: Track) -> Track:
        """Append a track under a freshly generated identifier and persist.

        Args:
            track: Track to add; its id is replaced.

        Returns:
            The stored Track carrying its assigned id.

        Raises:
            PersistenceError: Snapshot write failed (the track stays in memory).
        """
        existing_ids = {t.id for t in self._tracks}
        track_id = new_track_id()
        while track_id in existing_ids:
            track_id = new_track_id()

        stored = replace(track, id=track_id)
        self._tracks.append(stored)
        logger.info("Added track %s (%s)", stored.title, stored.id)

        self.track_added.emit(stored)
        self.tracks_changed.emit(self.tracks)
        self.save()
        return stored

    def update(self, track: Track) -> bool:
        """Replace a track in place by identifier and persist.

        The stored file reference is kept; only display fields and artwork
        change after import. Unknown identifiers are ignored.

        Args:
            track: Updated track.

        Returns:
            True if the track was found and replaced, False otherwise.

        Raises:
            PersistenceError: Snapshot write failed.
        """
        idx = self._index_of(track.id)
        if idx is None:
            logger.debug("Cannot update track '%s': not in library", track.id)
            return False

        current = self._tracks[idx]
        if track.file_path != current.file_path:
            logger.warning(
                "Ignoring file reference change for track %s (%s -> %s)",
                track.id,
                current.file_path,
                track.file_path,
            )
            track = replace(track, file_path=current.file_path)

        self._tracks[idx] = track
        self.track_updated.emit(track)
        self.tracks_changed.emit(self.tracks)
        self.save()
        return True

    def delete(self, track: Track | str) -> bool:
        """Remove a track by identifier and persist.

        Payload files in managed storage are left untouched.

        Args:
            track: Track or track id to remove.

        Returns:
            True if a track was removed.

        Raises:
            PersistenceError: Snapshot write failed.
        """
        track_id = track if isinstance(track, str) else track.id
        original_count = len(self._tracks)
        self._tracks = [t for t in self._tracks if t.id != track_id]
        removed = len(self._tracks) < original_count

        if removed:
            logger.info("Deleted track %s", track_id)
            self.track_removed.emit(track_id)
            self.tracks_changed.emit(self.tracks)
        else:
            logger.debug("Cannot delete track '%s': not in library", track_id)
        self.save()
        return removed
