"""Tests for the Track model."""

import uuid

import pytest

from untitledgems.models.track import (
    DEFAULT_ARTIST,
    Track,
    artwork_filename,
    create_track,
    new_track_id,
)


class TestTrackBasics:
    """Test Track construction and display helpers."""

    def test_create_assigns_uuid(self) -> None:
        """Test that create_track generates a UUID string id."""
        track = create_track("Song", "Artist", "song.mp3")
        assert uuid.UUID(track.id)
        assert track.artwork_path is None

    def test_ids_are_unique(self) -> None:
        """Test that generated ids do not repeat."""
        ids = {new_track_id() for _ in range(100)}
        assert len(ids) == 100

    def test_display_title_falls_back_to_file_stem(self) -> None:
        """Test that an empty title shows the file name without extension."""
        track = create_track("  ", "Artist", "Morning Demo.m4a")
        assert track.display_title == "Morning Demo"

    def test_display_artist_placeholder(self) -> None:
        """Test that an empty artist shows the placeholder."""
        track = create_track("Song", "", "song.mp3")
        assert track.display_artist == DEFAULT_ARTIST

    def test_has_artwork(self) -> None:
        """Test the has_artwork flag."""
        assert not create_track("Song", "A", "song.mp3").has_artwork
        assert create_track("Song", "A", "song.mp3", "artwork_x.jpg").has_artwork

    def test_frozen(self) -> None:
        """Test that tracks are immutable values."""
        track = create_track("Song", "Artist", "song.mp3")
        with pytest.raises(AttributeError):
            track.title = "Other"  # type: ignore[misc]

    def test_artwork_filename(self) -> None:
        """Test the artwork payload naming scheme."""
        assert artwork_filename("abc") == "artwork_abc.jpg"


class TestTrackSerialization:
    """Test snapshot record conversion."""

    def test_to_dict_keys(self) -> None:
        """Test that records use the snapshot key names."""
        track = Track(
            id="6f1c1c1e-0d5e-4c1b-9f57-3d2a5c1e8b7a",
            title="Song",
            artist="Artist",
            file_path="song.mp3",
            artwork_path="artwork_6f1c1c1e-0d5e-4c1b-9f57-3d2a5c1e8b7a.jpg",
        )
        assert track.to_dict() == {
            "id": "6f1c1c1e-0d5e-4c1b-9f57-3d2a5c1e8b7a",
            "title": "Song",
            "artist": "Artist",
            "filePath": "song.mp3",
            "artworkPath": "artwork_6f1c1c1e-0d5e-4c1b-9f57-3d2a5c1e8b7a.jpg",
        }

    def test_to_dict_omits_missing_artwork(self) -> None:
        """Test that artworkPath is left out when there is no artwork."""
        data = create_track("Song", "Artist", "song.mp3").to_dict()
        assert "artworkPath" not in data

    def test_from_dict_round_trip(self) -> None:
        """Test that a record converts back to an equal Track."""
        track = create_track("Song", "Artist", "song.mp3", "artwork.jpg")
        assert Track.from_dict(track.to_dict()) == track

    def test_from_dict_accepts_null_artwork(self) -> None:
        """Test that an explicit null artworkPath is accepted."""
        data = create_track("Song", "Artist", "song.mp3").to_dict()
        data["artworkPath"] = None
        assert Track.from_dict(data).artwork_path is None

    def test_from_dict_keeps_id_spelling(self) -> None:
        """Test that an uppercase UUID keeps its original spelling."""
        raw = str(uuid.uuid4()).upper()
        data = {"id": raw, "title": "t", "artist": "a", "filePath": "f.mp3"}
        assert Track.from_dict(data).id == raw

    def test_from_dict_invalid_uuid(self) -> None:
        """Test that a non-UUID id is rejected."""
        data = {"id": "not-a-uuid", "title": "t", "artist": "a", "filePath": "f.mp3"}
        with pytest.raises(ValueError):
            Track.from_dict(data)

    def test_from_dict_missing_key(self) -> None:
        """Test that a record without filePath is rejected."""
        data = {"id": new_track_id(), "title": "t", "artist": "a"}
        with pytest.raises(KeyError):
            Track.from_dict(data)

    def test_from_dict_wrong_type(self) -> None:
        """Test that a non-string title is rejected."""
        data = {"id": new_track_id(), "title": 3, "artist": "a", "filePath": "f.mp3"}
        with pytest.raises(TypeError):
            Track.from_dict(data)
