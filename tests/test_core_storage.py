"""Tests for ManagedStorage."""

from pathlib import Path

import pytest
from PySide6.QtGui import QColor, QImage

from untitledgems.core.errors import PersistenceError, StorageUnavailable, TrackImportError
from untitledgems.core.storage import SNAPSHOT_FILENAME, ManagedStorage

from conftest import solid_image


class TestInitialize:
    """Test storage directory setup."""

    def test_creates_directory(self, tmp_path: Path) -> None:
        """Test that initialize creates missing parents."""
        root = tmp_path / "a" / "b" / "Library"
        storage = ManagedStorage(root)
        assert not storage.is_ready

        storage.initialize()

        assert root.is_dir()
        assert storage.is_ready
        assert storage.snapshot_path == root / SNAPSHOT_FILENAME

    def test_file_in_the_way(self, tmp_path: Path) -> None:
        """Test that a regular file at the root path is reported."""
        root = tmp_path / "Library"
        root.write_text("not a directory")

        with pytest.raises(StorageUnavailable):
            ManagedStorage(root).initialize()


class TestUniqueName:
    """Test collision-free payload naming."""

    def test_free_name_unchanged(self, storage: ManagedStorage) -> None:
        """Test that an unused name is returned as-is."""
        assert storage.unique_name("song.mp3") == "song.mp3"

    def test_strips_directories(self, storage: ManagedStorage) -> None:
        """Test that only the base name is used."""
        assert storage.unique_name("/music/album/song.mp3") == "song.mp3"

    def test_appends_counter(self, storage: ManagedStorage) -> None:
        """Test that collisions get _1, _2, ... suffixes."""
        (storage.root / "song.mp3").write_bytes(b"x")
        assert storage.unique_name("song.mp3") == "song_1.mp3"

        (storage.root / "song_1.mp3").write_bytes(b"x")
        assert storage.unique_name("song.mp3") == "song_2.mp3"

    def test_no_suffix(self, storage: ManagedStorage) -> None:
        """Test names without an extension."""
        (storage.root / "demo").write_bytes(b"x")
        assert storage.unique_name("demo") == "demo_1"


class TestCopyIn:
    """Test copying payloads into storage."""

    def test_copy(self, storage: ManagedStorage, audio_file: Path) -> None:
        """Test that the payload is copied byte for byte."""
        name = storage.copy_in(audio_file)

        assert name == "Song.mp3"
        assert storage.resolve(name).read_bytes() == audio_file.read_bytes()
        assert audio_file.exists()

    def test_copy_twice_disambiguates(self, storage: ManagedStorage, audio_file: Path) -> None:
        """Test that the same source imported twice gets distinct names."""
        first = storage.copy_in(audio_file)
        second = storage.copy_in(audio_file)

        assert first == "Song.mp3"
        assert second == "Song_1.mp3"

    def test_missing_source(self, storage: ManagedStorage, tmp_path: Path) -> None:
        """Test that a missing source raises TrackImportError."""
        with pytest.raises(TrackImportError):
            storage.copy_in(tmp_path / "nope.mp3")

    def test_directory_source(self, storage: ManagedStorage, tmp_path: Path) -> None:
        """Test that a directory is not accepted as a source."""
        with pytest.raises(TrackImportError):
            storage.copy_in(tmp_path)


class TestArtwork:
    """Test artwork payloads."""

    def test_write_artwork(self, storage: ManagedStorage) -> None:
        """Test that artwork is written as a readable JPEG."""
        name = storage.write_artwork("abc", solid_image(QColor(10, 200, 30)))

        assert name == "artwork_abc.jpg"
        image = QImage(str(storage.resolve(name)))
        assert not image.isNull()
        assert image.width() == 40

    def test_write_replaces(self, storage: ManagedStorage) -> None:
        """Test that writing again replaces the previous artwork."""
        storage.write_artwork("abc", solid_image(QColor(0, 0, 0), 10, 10))
        storage.write_artwork("abc", solid_image(QColor(0, 0, 0), 20, 20))

        assert QImage(str(storage.resolve("artwork_abc.jpg"))).width() == 20

    def test_empty_image(self, storage: ManagedStorage) -> None:
        """Test that an empty image raises PersistenceError."""
        with pytest.raises(PersistenceError):
            storage.write_artwork("abc", QImage())


class TestRemove:
    """Test payload removal."""

    def test_remove(self, storage: ManagedStorage) -> None:
        """Test that an existing payload is deleted."""
        (storage.root / "song.mp3").write_bytes(b"x")
        assert storage.remove("song.mp3") is True
        assert not storage.exists("song.mp3")

    def test_remove_missing(self, storage: ManagedStorage) -> None:
        """Test that removing a missing payload returns False."""
        assert storage.remove("ghost.mp3") is False
