"""Data models for the track library."""

from untitledgems.models.track import (
    DEFAULT_ARTIST,
    Track,
    artwork_filename,
    create_track,
    new_track_id,
)

__all__ = [
    "DEFAULT_ARTIST",
    "Track",
    "artwork_filename",
    "create_track",
    "new_track_id",
]
