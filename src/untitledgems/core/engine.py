"""Audio playback engine interface and its QtMultimedia implementation.

The PlaybackSession talks to the engine only through AudioEngine, so
tests can substitute a fake and the platform player stays replaceable.
"""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from collections.abc import Callable
from pathlib import Path

from PySide6.QtCore import QUrl
from PySide6.QtMultimedia import QAudioOutput, QMediaPlayer

from untitledgems.core.errors import PlaybackError

logger = logging.getLogger(__name__)

# Type aliases for event handlers
DurationHandler = Callable[[float], None]
FinishedHandler = Callable[[], None]
ErrorHandler = Callable[[Exception], None]

_MS_PER_SECOND = 1000.0


class AudioEngine(ABC):
    """Abstract playback engine holding one open audio file.

    Positions and durations are in seconds.
    """

    def __init__(self) -> None:
        self._on_duration_changed: DurationHandler | None = None
        self._on_finished: FinishedHandler | None = None
        self._on_error: ErrorHandler | None = None

    def set_event_handlers(
        self,
        on_duration_changed: DurationHandler | None = None,
        on_finished: FinishedHandler | None = None,
        on_error: ErrorHandler | None = None,
    ) -> None:
        """Set handlers for asynchronous engine events.

        Args:
            on_duration_changed: Called when the media duration becomes known.
            on_finished: Called when playback reaches the end of the media.
            on_error: Called when the engine fails after open().
        """
        self._on_duration_changed = on_duration_changed
        self._on_finished = on_finished
        self._on_error = on_error

    @abstractmethod
    def open(self, path: Path) -> None:
        """Open an audio file for playback.

        Raises:
            PlaybackError: The file cannot be opened.
        """

    @abstractmethod
    def play(self) -> None:
        """Start or resume playback."""

    @abstractmethod
    def pause(self) -> None:
        """Pause playback, keeping the position."""

    @property
    @abstractmethod
    def is_playing(self) -> bool:
        """Return True while audio is playing."""

    @property
    @abstractmethod
    def position(self) -> float:
        """Return the current position in seconds."""

    @abstractmethod
    def set_position(self, seconds: float) -> None:
        """Move the play head. Values are forwarded unchecked."""

    @property
    @abstractmethod
    def duration(self) -> float:
        """Return the media duration in seconds (0 while unknown)."""

    @abstractmethod
    def set_volume(self, volume: float) -> None:
        """Set the output volume 0.0-1.0."""

    @abstractmethod
    def release(self) -> None:
        """Stop playback and free the player."""


class QtAudioEngine(AudioEngine):
    """AudioEngine backed by QMediaPlayer and QAudioOutput.

    QMediaPlayer loads media asynchronously: duration is 0 right after
    open() and is reported later through the duration handler.

    Example:
        engine = QtAudioEngine(volume=0.8)
        engine.set_event_handlers(on_finished=lambda: print("done"))
        engine.open(Path("song.mp3"))
        engine.play()
    """

    def __init__(self, volume: float = 1.0) -> None:
        """Initialize the engine without opening any media.

        Args:
            volume: Output volume 0.0-1.0.
        """
        super().__init__()
        self._volume = max(0.0, min(1.0, volume))
        self._player: QMediaPlayer | None = None
        self._output: QAudioOutput | None = None
        self._path: Path | None = None

    def open(self, path: Path) -> None:
        """Open an audio file.

        Raises:
            PlaybackError: File missing or rejected by the media backend.
        """
        if not path.is_file():
            raise PlaybackError(str(path), "file not found")

        self.release()
        self._path = path
        self._player = QMediaPlayer()
        self._output = QAudioOutput()
        self._output.setVolume(self._volume)
        self._player.setAudioOutput(self._output)

        self._player.durationChanged.connect(self._handle_duration_changed)
        self._player.mediaStatusChanged.connect(self._handle_media_status)
        self._player.errorOccurred.connect(self._handle_error)

        self._player.setSource(QUrl.fromLocalFile(str(path)))
        if self._player.error() != QMediaPlayer.Error.NoError:
            message = self._player.errorString() or "media backend rejected the file"
            self.release()
            raise PlaybackError(str(path), message)
        logger.debug("Opened %s", path)

    def play(self) -> None:
        if self._player:
            self._player.play()

    def pause(self) -> None:
        if self._player:
            self._player.pause()

    @property
    def is_playing(self) -> bool:
        if not self._player:
            return False
        return self._player.playbackState() == QMediaPlayer.PlaybackState.PlayingState

    @property
    def position(self) -> float:
        if not self._player:
            return 0.0
        return self._player.position() / _MS_PER_SECOND

    def set_position(self, seconds: float) -> None:
        if self._player:
            self._player.setPosition(int(seconds * _MS_PER_SECOND))

    @property
    def duration(self) -> float:
        if not self._player:
            return 0.0
        return self._player.duration() / _MS_PER_SECOND

    def set_volume(self, volume: float) -> None:
        self._volume = max(0.0, min(1.0, volume))
        if self._output:
            self._output.setVolume(self._volume)

    def release(self) -> None:
        """Stop playback and drop the player and audio output."""
        player, output = self._player, self._output
        self._player = None
        self._output = None
        if player is not None:
            player.stop()
            player.setSource(QUrl())
            player.deleteLater()
        if output is not None:
            output.deleteLater()

    def _handle_duration_changed(self, duration_ms: int) -> None:
        if self._on_duration_changed:
            self._on_duration_changed(duration_ms / _MS_PER_SECOND)

    def _handle_media_status(self, status: QMediaPlayer.MediaStatus) -> None:
        if status == QMediaPlayer.MediaStatus.EndOfMedia and self._on_finished:
            self._on_finished()
        elif status == QMediaPlayer.MediaStatus.InvalidMedia and self._on_error:
            self._on_error(PlaybackError(str(self._path), "invalid media"))

    def _handle_error(self, _error: QMediaPlayer.Error, message: str) -> None:
        logger.warning("Media player error for %s: %s", self._path, message)
        if self._on_error:
            self._on_error(PlaybackError(str(self._path), message))
