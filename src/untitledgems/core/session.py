"""Playback session: one loaded track, transport controls, and now-playing sync.

The session wraps a single AudioEngine at a time. A QTimer re-reads the
engine position every report interval and mirrors it to the injected
NowPlayingCenter. Closing the session stops the timer before the engine
is released, so no tick ever touches a released player.

State machine:
    IDLE -> PREPARED -> PLAYING <-> PAUSED
    any state -> CLOSED (terminal)
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from enum import Enum

from PySide6.QtCore import QObject, QTimer, Signal
from PySide6.QtGui import QColor

from untitledgems.core.artwork import background_colors, load_artwork
from untitledgems.core.engine import AudioEngine, QtAudioEngine
from untitledgems.core.errors import PlaybackError
from untitledgems.core.now_playing import NowPlayingCenter
from untitledgems.core.storage import ManagedStorage
from untitledgems.models.track import Track

logger = logging.getLogger(__name__)

DEFAULT_REPORT_INTERVAL_MS = 500
DEFAULT_SKIP_INTERVAL = 10.0

EngineFactory = Callable[[], AudioEngine]


class SessionState(Enum):
    """Lifecycle state of a playback session."""

    IDLE = "idle"
    PREPARED = "prepared"
    PLAYING = "playing"
    PAUSED = "paused"
    CLOSED = "closed"


class PlaybackSession(QObject):
    """Controller for the actively loaded track.

    Example:
        session = PlaybackSession(now_playing, storage)
        session.position_changed.connect(lambda pos, dur: print(pos, dur))
        if session.prepare(track):
            session.play()
        ...
        session.close()
    """

    state_changed = Signal(object)  # SessionState
    position_changed = Signal(float, float)  # position, duration (seconds)
    colors_changed = Signal(QColor, QColor)  # top, bottom gradient stops
    track_changed = Signal(object)  # Track
    error_occurred = Signal(object)  # Exception

    def __init__(
        self,
        now_playing: NowPlayingCenter,
        storage: ManagedStorage,
        engine_factory: EngineFactory = QtAudioEngine,
        report_interval_ms: int = DEFAULT_REPORT_INTERVAL_MS,
        skip_interval: float = DEFAULT_SKIP_INTERVAL,
        volume: float = 1.0,
        parent: QObject | None = None,
    ) -> None:
        """Initialize an idle session.

        Args:
            now_playing: Surface receiving metadata and state pushes.
            storage: Managed storage resolving track payloads.
            engine_factory: Creates one engine per prepared track.
            report_interval_ms: Position reporting interval in milliseconds.
            skip_interval: Default skip distance in seconds.
            volume: Output volume 0.0-1.0 applied to every engine.
            parent: Optional parent QObject.
        """
        super().__init__(parent)
        self._now_playing = now_playing
        self._storage = storage
        self._engine_factory = engine_factory
        self._skip_interval = skip_interval
        self._volume = max(0.0, min(1.0, volume))

        self._state = SessionState.IDLE
        self._track: Track | None = None
        self._engine: AudioEngine | None = None
        self._playing = False
        self._position = 0.0
        self._colors = background_colors(None)

        self._timer = QTimer(self)
        self._timer.setInterval(report_interval_ms)
        self._timer.timeout.connect(self._on_tick)

    # -- Properties -------------------------------------------------------------

    @property
    def state(self) -> SessionState:
        """Return the current lifecycle state."""
        return self._state

    @property
    def track(self) -> Track | None:
        """Return the track this session was prepared with."""
        return self._track

    @property
    def has_player(self) -> bool:
        """Return True while an engine is open."""
        return self._engine is not None

    @property
    def is_playing(self) -> bool:
        """Return True while playing."""
        return self._playing

    @property
    def position(self) -> float:
        """Return the last known position in seconds."""
        return self._position

    @property
    def duration(self) -> float:
        """Return the track duration in seconds (0 without a player)."""
        return self._engine.duration if self._engine else 0.0

    @property
    def background_colors(self) -> tuple[QColor, QColor]:
        """Return the artwork-derived (top, bottom) gradient stops."""
        return self._colors

    @property
    def is_reporting(self) -> bool:
        """Return True while the periodic position report is armed."""
        return self._timer.isActive()

    @property
    def report_interval_ms(self) -> int:
        """Return the position reporting interval."""
        return self._timer.interval()

    @property
    def skip_interval(self) -> float:
        """Return the default skip distance in seconds."""
        return self._skip_interval

    def set_skip_interval(self, seconds: float) -> None:
        """Set the default skip distance."""
        self._skip_interval = seconds

    def set_report_interval_ms(self, interval_ms: int) -> None:
        """Change the position reporting interval, keeping the timer state."""
        self._timer.setInterval(interval_ms)

    @property
    def volume(self) -> float:
        """Return the output volume 0.0-1.0."""
        return self._volume

    def set_volume(self, volume: float) -> None:
        """Set the output volume for the current and later engines.

        Args:
            volume: Volume 0.0-1.0, clamped.
        """
        self._volume = max(0.0, min(1.0, volume))
        if self._engine is not None:
            self._engine.set_volume(self._volume)

    # -- Lifecycle --------------------------------------------------------------

    def prepare(self, track: Track) -> bool:
        """Open the engine on a track's audio payload.

        A player left from an earlier prepare() is released first.

        Args:
            track: Track to load.

        Returns:
            True on success; False leaves the session IDLE without a player.
        """
        if self._state == SessionState.CLOSED:
            logger.warning("Cannot prepare '%s': session is closed", track.title)
            return False

        self._release_engine()
        self._track = track
        self.track_changed.emit(track)
        self._update_background()

        path = self._storage.resolve(track.file_path)
        engine = self._engine_factory()
        engine.set_event_handlers(
            on_duration_changed=self._on_engine_duration,
            on_finished=self._on_engine_finished,
            on_error=self._on_engine_error,
        )
        try:
            engine.open(path)
        except (PlaybackError, OSError) as e:
            error = e if isinstance(e, PlaybackError) else PlaybackError(str(path), str(e))
            logger.error("Error creating player: %s", error)
            engine.set_event_handlers()
            engine.release()
            self._set_state(SessionState.IDLE)
            self.error_occurred.emit(error)
            return False

        engine.set_volume(self._volume)
        self._engine = engine
        self._position = 0.0
        self._set_state(SessionState.PREPARED)
        self._timer.start()
        self.position_changed.emit(self._position, engine.duration)
        logger.info("Prepared '%s' (%s)", track.title, path.name)
        return True

    def close(self) -> None:
        """Stop reporting and release the player. Idempotent."""
        if self._state == SessionState.CLOSED:
            return
        self._release_engine()
        self._now_playing_call(self._now_playing.clear)
        self._set_state(SessionState.CLOSED)
        logger.info("Playback session closed")

    # -- Transport --------------------------------------------------------------

    def play(self) -> None:
        """Start playback if a player exists and is not already playing."""
        if self._engine is None or self._playing:
            return
        self._engine.play()
        self._playing = True
        self._set_state(SessionState.PLAYING)
        self._refresh_metadata()
        self._publish_state()

    def pause(self) -> None:
        """Pause playback if playing."""
        if self._engine is None or not self._playing:
            return
        self._engine.pause()
        self._playing = False
        self._set_state(SessionState.PAUSED)
        self._publish_state()

    def toggle(self) -> None:
        """Pause when playing, play otherwise."""
        if self._playing:
            self.pause()
        else:
            self.play()

    def seek(self, position: float) -> None:
        """Move the play head.

        The value is forwarded to the engine unchanged; callers keep it
        within [0, duration].

        Args:
            position: Target position in seconds.
        """
        if self._engine is None:
            return
        self._engine.set_position(position)
        self._position = position
        self.position_changed.emit(self._position, self._engine.duration)
        self._publish_state()

    def skip_forward(self, delta: float | None = None) -> None:
        """Skip ahead, clamped to the track duration.

        Args:
            delta: Seconds to skip, defaults to the skip interval.
        """
        self._skip(delta if delta is not None else self._skip_interval)

    def skip_backward(self, delta: float | None = None) -> None:
        """Skip back, clamped to the start of the track.

        Args:
            delta: Seconds to skip, defaults to the skip interval.
        """
        self._skip(-(delta if delta is not None else self._skip_interval))

    def _skip(self, delta: float) -> None:
        if self._engine is None:
            return
        duration = self._engine.duration
        target = max(0.0, min(self._engine.position + delta, duration))
        self._engine.set_position(target)
        self._position = target
        self.position_changed.emit(self._position, duration)
        self._publish_state()

    # -- Metadata ---------------------------------------------------------------

    def update_track(self, track: Track) -> None:
        """Apply edited metadata/artwork to the loaded track.

        Recomputes the background colors and re-publishes now-playing
        metadata. Ignored for a different track.

        Args:
            track: Updated track with the same id.
        """
        if self._track is None or track.id != self._track.id:
            logger.debug("Ignoring update for track %s: not loaded", track.id)
            return
        self._track = track
        self.track_changed.emit(track)
        self._update_background()
        self._refresh_metadata()

    # -- Internals --------------------------------------------------------------

    def _set_state(self, state: SessionState) -> None:
        if state != self._state:
            logger.debug("Session state %s -> %s", self._state.value, state.value)
            self._state = state
            self.state_changed.emit(state)

    def _release_engine(self) -> None:
        """Cancel the periodic report, then drop the engine."""
        self._timer.stop()
        engine = self._engine
        self._engine = None
        self._playing = False
        if engine is not None:
            engine.set_event_handlers()
            engine.release()

    def _update_background(self) -> None:
        image = load_artwork(self._storage, self._track) if self._track else None
        self._colors = background_colors(image)
        self.colors_changed.emit(*self._colors)

    def _refresh_metadata(self) -> None:
        if self._engine is None or self._track is None:
            return
        artwork = load_artwork(self._storage, self._track)
        self._now_playing_call(
            self._now_playing.publish_metadata,
            self._track.display_title,
            self._track.display_artist,
            self._engine.duration,
            artwork,
        )
        self._publish_state()

    def _publish_state(self) -> None:
        if self._engine is None:
            return
        self._now_playing_call(
            self._now_playing.publish_state,
            self._engine.position,
            self._playing,
        )

    def _now_playing_call(self, method: Callable[..., None], *args: object) -> None:
        """Call the now-playing surface; failures are logged, never raised."""
        try:
            method(*args)
        except Exception as e:  # noqa: BLE001
            logger.warning("Now playing update failed: %s", e)

    def _on_tick(self) -> None:
        """Periodic report: re-read the engine position and mirror it."""
        if self._engine is None:
            return
        self._position = self._engine.position
        self.position_changed.emit(self._position, self._engine.duration)
        self._publish_state()

    def _on_engine_duration(self, duration: float) -> None:
        """Media finished loading: refresh the duration everywhere."""
        self.position_changed.emit(self._position, duration)
        if self._state in (SessionState.PLAYING, SessionState.PAUSED):
            self._refresh_metadata()

    def _on_engine_finished(self) -> None:
        if not self._playing:
            return
        self._playing = False
        self._set_state(SessionState.PAUSED)
        self._publish_state()

    def _on_engine_error(self, error: Exception) -> None:
        logger.error("Playback error: %s", error)
        self.error_occurred.emit(error)
