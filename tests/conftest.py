"""Test fixtures for untitledgems tests."""

import os
from collections.abc import Callable
from pathlib import Path

import pytest

# Headless Qt for CI; must be set before QApplication is created
os.environ.setdefault("QT_QPA_PLATFORM", "offscreen")

from PySide6.QtGui import QColor, QImage  # noqa: E402
from PySide6.QtWidgets import QApplication  # noqa: E402

from untitledgems.core.engine import AudioEngine  # noqa: E402
from untitledgems.core.errors import PlaybackError  # noqa: E402
from untitledgems.core.library import LibraryStore  # noqa: E402
from untitledgems.core.now_playing import NowPlayingCenter, NowPlayingInfo  # noqa: E402
from untitledgems.core.storage import ManagedStorage  # noqa: E402


class FakeEngine(AudioEngine):
    """In-memory AudioEngine with a controllable clock."""

    def __init__(self, duration: float = 180.0, fail_open: bool = False) -> None:
        super().__init__()
        self._duration = duration
        self._fail_open = fail_open
        self._position = 0.0
        self._playing = False
        self.opened: Path | None = None
        self.volume = 1.0
        self.released = False
        self.calls: list[str] = []

    def open(self, path: Path) -> None:
        self.calls.append("open")
        if self._fail_open or not path.is_file():
            raise PlaybackError(str(path), "unsupported")
        self.opened = path

    def play(self) -> None:
        self.calls.append("play")
        self._playing = True

    def pause(self) -> None:
        self.calls.append("pause")
        self._playing = False

    @property
    def is_playing(self) -> bool:
        return self._playing

    @property
    def position(self) -> float:
        return self._position

    def set_position(self, seconds: float) -> None:
        self.calls.append("set_position")
        self._position = seconds

    @property
    def duration(self) -> float:
        return self._duration

    def set_volume(self, volume: float) -> None:
        self.volume = volume

    def release(self) -> None:
        self.calls.append("release")
        self.released = True
        self._playing = False

    # -- Test helpers -----------------------------------------------------------

    def advance(self, seconds: float) -> None:
        """Move the clock forward as if audio had played."""
        self._position = min(self._position + seconds, self._duration)

    def emit_duration(self, duration: float) -> None:
        """Simulate a late duration report from the backend."""
        self._duration = duration
        if self._on_duration_changed:
            self._on_duration_changed(duration)

    def emit_finished(self) -> None:
        """Simulate reaching the end of the media."""
        self._playing = False
        if self._on_finished:
            self._on_finished()

    def emit_error(self, error: Exception) -> None:
        """Simulate an asynchronous backend failure."""
        if self._on_error:
            self._on_error(error)


class RecordingNowPlaying(NowPlayingCenter):
    """NowPlayingCenter that records every rendered entry."""

    def __init__(self) -> None:
        super().__init__()
        self.rendered: list[NowPlayingInfo | None] = []
        self.metadata_calls = 0
        self.state_calls = 0

    def publish_metadata(
        self,
        title: str,
        artist: str,
        duration: float,
        artwork: QImage | None = None,
    ) -> None:
        self.metadata_calls += 1
        super().publish_metadata(title, artist, duration, artwork)

    def publish_state(self, position: float, is_playing: bool) -> None:
        self.state_calls += 1
        super().publish_state(position, is_playing)

    def _render(self, info: NowPlayingInfo | None) -> None:
        self.rendered.append(info)


class FailingNowPlaying(NowPlayingCenter):
    """NowPlayingCenter whose every call raises."""

    def publish_metadata(self, *args: object, **kwargs: object) -> None:
        raise RuntimeError("now playing unavailable")

    def publish_state(self, position: float, is_playing: bool) -> None:
        raise RuntimeError("now playing unavailable")

    def clear(self) -> None:
        raise RuntimeError("now playing unavailable")

    def _render(self, info: NowPlayingInfo | None) -> None:
        pass


def solid_image(color: QColor, width: int = 40, height: int = 40) -> QImage:
    """Return an image filled with one color."""
    image = QImage(width, height, QImage.Format.Format_RGB32)
    image.fill(color)
    return image


@pytest.fixture
def storage(tmp_path: Path, qapp: QApplication) -> ManagedStorage:
    """Return initialized managed storage in a temp directory.

    Depends on qapp so image plugins are available.
    """
    managed = ManagedStorage(tmp_path / "Library")
    managed.initialize()
    return managed


@pytest.fixture
def library(storage: ManagedStorage) -> LibraryStore:
    """Return an empty library backed by temp storage."""
    store = LibraryStore(storage)
    store.load()
    return store


@pytest.fixture
def audio_file(tmp_path: Path) -> Path:
    """Return a small fake audio file outside managed storage."""
    path = tmp_path / "incoming" / "Song.mp3"
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_bytes(b"ID3" + b"\x00" * 64)
    return path


@pytest.fixture
def engines() -> list[FakeEngine]:
    """Return the list collecting engines created by engine_factory."""
    return []


@pytest.fixture
def engine_factory(engines: list[FakeEngine]) -> Callable[[], FakeEngine]:
    """Return a factory creating FakeEngines and recording them."""

    def factory() -> FakeEngine:
        engine = FakeEngine()
        engines.append(engine)
        return engine

    return factory


@pytest.fixture
def now_playing() -> RecordingNowPlaying:
    """Return a recording now-playing surface."""
    return RecordingNowPlaying()
