"""Track model representing one imported audio file."""

import logging
import uuid
from dataclasses import dataclass, field
from pathlib import PurePath

logger = logging.getLogger(__name__)

DEFAULT_ARTIST = "Unknown Artist"

# Snapshot record keys
_KEY_ID = "id"
_KEY_TITLE = "title"
_KEY_ARTIST = "artist"
_KEY_FILE = "filePath"
_KEY_ARTWORK = "artworkPath"


def new_track_id() -> str:
    """Return a fresh track identifier (string form of a UUID4)."""
    return str(uuid.uuid4())


def artwork_filename(track_id: str) -> str:
    """Return the managed-storage file name for a track's artwork."""
    return f"artwork_{track_id}.jpg"


@dataclass(frozen=True, slots=True)
class Track:
    """An imported audio item with its storage references.

    Attributes:
        title: Display title (editable).
        artist: Display artist (editable).
        file_path: Audio payload name inside managed storage. Set at import,
            never changed afterwards.
        artwork_path: Artwork payload name inside managed storage, if any.
        id: Unique identifier, string form of a UUID.
    """

    title: str
    artist: str
    file_path: str
    artwork_path: str | None = None
    id: str = field(default_factory=new_track_id)

    @property
    def display_title(self) -> str:
        """Return title, falling back to the file name without extension."""
        if self.title.strip():
            return self.title
        return PurePath(self.file_path).stem

    @property
    def display_artist(self) -> str:
        """Return artist, falling back to the placeholder."""
        return self.artist.strip() or DEFAULT_ARTIST

    @property
    def has_artwork(self) -> bool:
        """Return True if an artwork payload is referenced."""
        return bool(self.artwork_path)

    def to_dict(self) -> dict[str, str]:
        """Serialize to a snapshot record.

        The artwork key is omitted when the track has no artwork.
        """
        data = {
            _KEY_ID: self.id,
            _KEY_TITLE: self.title,
            _KEY_ARTIST: self.artist,
            _KEY_FILE: self.file_path,
        }
        if self.artwork_path is not None:
            data[_KEY_ARTWORK] = self.artwork_path
        return data

    @classmethod
    def from_dict(cls, data: dict[str, object]) -> "Track":
        """Build a Track from a snapshot record.

        Args:
            data: Record as read from the snapshot.

        Returns:
            The decoded Track.

        Raises:
            KeyError: A required key is missing.
            TypeError: A field has the wrong type.
            ValueError: The identifier is not a UUID.
        """
        raw_id = data[_KEY_ID]
        title = data[_KEY_TITLE]
        artist = data[_KEY_ARTIST]
        file_path = data[_KEY_FILE]
        artwork = data.get(_KEY_ARTWORK)

        required = (
            (_KEY_ID, raw_id),
            (_KEY_TITLE, title),
            (_KEY_ARTIST, artist),
            (_KEY_FILE, file_path),
        )
        for name, value in required:
            if not isinstance(value, str):
                raise TypeError(f"{name} must be a string, got {type(value).__name__}")
        if artwork is not None and not isinstance(artwork, str):
            raise TypeError(f"{_KEY_ARTWORK} must be a string or null")

        # Validate only; the stored spelling of the id is kept as-is
        uuid.UUID(str(raw_id))
        return cls(
            id=str(raw_id),
            title=str(title),
            artist=str(artist),
            file_path=str(file_path),
            artwork_path=artwork,
        )


def create_track(
    title: str,
    artist: str,
    file_path: str,
    artwork_path: str | None = None,
) -> Track:
    """Create a Track with a freshly generated identifier.

    Args:
        title: Display title.
        artist: Display artist.
        file_path: Audio payload name inside managed storage.
        artwork_path: Optional artwork payload name.

    Returns:
        New Track instance.
    """
    return Track(title=title, artist=artist, file_path=file_path, artwork_path=artwork_path)
