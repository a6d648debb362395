"""Player panel - artwork, position slider and transport for one track.

The panel owns at most one live PlaybackSession. Opening another track
closes the current session before a new one is created, so two sessions
never report at the same time.
"""

import logging

from PySide6.QtCore import Qt, Signal
from PySide6.QtGui import QColor
from PySide6.QtWidgets import QHBoxLayout, QLabel, QPushButton, QSlider, QVBoxLayout, QWidget

from untitledgems.core.artwork import background_colors, load_artwork
from untitledgems.core.engine import QtAudioEngine
from untitledgems.core.now_playing import NowPlayingCenter, format_time
from untitledgems.core.session import (
    DEFAULT_REPORT_INTERVAL_MS,
    DEFAULT_SKIP_INTERVAL,
    EngineFactory,
    PlaybackSession,
    SessionState,
)
from untitledgems.core.storage import ManagedStorage
from untitledgems.models.track import Track
from untitledgems.ui.theme import gradient_stylesheet
from untitledgems.ui.tokens import sizing, spacing, typography
from untitledgems.ui.widgets.artwork_view import ArtworkView
from untitledgems.ui.widgets.volume_slider import VolumeSlider

logger = logging.getLogger(__name__)

# Slider positions are milliseconds
_SLIDER_SCALE = 1000

_TEXT_COLOR = "#ffffff"
_TEXT_SECONDARY = "rgba(255, 255, 255, 0.7)"


def _transport_style(font_size: int, diameter: int) -> str:
    return f"""
        QPushButton {{
            color: {_TEXT_COLOR};
            background: rgba(255, 255, 255, 0.12);
            border: none;
            border-radius: {diameter // 2}px;
            font-size: {font_size}pt;
        }}
        QPushButton:hover {{
            background: rgba(255, 255, 255, 0.22);
        }}
        QPushButton:disabled {{
            color: rgba(255, 255, 255, 0.3);
        }}
    """


class PlayerPanel(QWidget):
    """Right panel playing the selected track.

    Example:
        panel = PlayerPanel(now_playing, storage)
        panel.edit_requested.connect(window.edit_track)
        panel.open_track(track)
    """

    edit_requested = Signal(object)  # Track
    error_occurred = Signal(object)  # Exception
    volume_changed = Signal(int)  # 0-100, user moved the volume slider

    def __init__(
        self,
        now_playing: NowPlayingCenter,
        storage: ManagedStorage,
        engine_factory: EngineFactory = QtAudioEngine,
        report_interval_ms: int = DEFAULT_REPORT_INTERVAL_MS,
        skip_interval: float = DEFAULT_SKIP_INTERVAL,
        volume: int = 100,
    ) -> None:
        """Initialize an empty player panel.

        Args:
            now_playing: Surface receiving metadata and state pushes.
            storage: Managed storage for payloads and artwork.
            engine_factory: Creates one engine per opened track.
            report_interval_ms: Position reporting interval for new sessions.
            skip_interval: Skip distance in seconds for new sessions.
            volume: Initial output volume 0-100.
        """
        super().__init__()
        self._now_playing = now_playing
        self._storage = storage
        self._engine_factory = engine_factory
        self._report_interval_ms = report_interval_ms
        self._skip_interval = skip_interval
        self._session: PlaybackSession | None = None
        self._seeking = False

        self.setObjectName("PlayerPanel")
        self.setAttribute(Qt.WidgetAttribute.WA_StyledBackground, True)
        self._setup_ui()
        self._volume_slider.set_volume(volume)
        self._apply_colors(*background_colors(None))
        self._set_controls_enabled(False)

    def _setup_ui(self) -> None:
        layout = QVBoxLayout(self)
        layout.setContentsMargins(spacing.xl, spacing.xl, spacing.xl, spacing.xl)
        layout.setSpacing(spacing.xl)

        top_bar = QHBoxLayout()
        top_bar.addStretch()
        self._edit_btn = QPushButton("Edit")
        self._edit_btn.setStyleSheet(f"""
            QPushButton {{
                color: {_TEXT_COLOR};
                background: rgba(255, 255, 255, 0.12);
                border: none;
                border-radius: {sizing.border_radius_sm}px;
                padding: {spacing.sm}px {spacing.md}px;
            }}
        """)
        self._edit_btn.clicked.connect(self._on_edit_clicked)
        top_bar.addWidget(self._edit_btn)
        layout.addLayout(top_bar)

        self._artwork = ArtworkView(sizing.artwork_player, sizing.border_radius_lg)
        layout.addWidget(self._artwork, alignment=Qt.AlignmentFlag.AlignHCenter)

        text = QVBoxLayout()
        text.setSpacing(spacing.sm)
        self._title_label = QLabel("Nothing playing")
        self._title_label.setAlignment(Qt.AlignmentFlag.AlignCenter)
        self._title_label.setStyleSheet(
            f"color: {_TEXT_COLOR}; font-size: {typography.title}pt; font-weight: bold;"
            " background: transparent;"
        )
        self._artist_label = QLabel("")
        self._artist_label.setAlignment(Qt.AlignmentFlag.AlignCenter)
        self._artist_label.setStyleSheet(
            f"color: {_TEXT_SECONDARY}; font-size: {typography.body}pt; background: transparent;"
        )
        text.addWidget(self._title_label)
        text.addWidget(self._artist_label)
        layout.addLayout(text)

        self._slider = QSlider(Qt.Orientation.Horizontal)
        self._slider.setRange(0, 0)
        self._slider.sliderPressed.connect(self._on_slider_pressed)
        self._slider.sliderReleased.connect(self._on_slider_released)
        self._slider.sliderMoved.connect(self._on_slider_moved)
        layout.addWidget(self._slider)

        times = QHBoxLayout()
        time_style = (
            f"color: {_TEXT_SECONDARY}; font-size: {typography.caption}pt; background: transparent;"
        )
        self._elapsed_label = QLabel(format_time(0))
        self._elapsed_label.setStyleSheet(time_style)
        self._duration_label = QLabel(format_time(0))
        self._duration_label.setStyleSheet(time_style)
        times.addWidget(self._elapsed_label)
        times.addStretch()
        times.addWidget(self._duration_label)
        layout.addLayout(times)

        transport = QHBoxLayout()
        transport.setSpacing(spacing.xxl)
        transport.addStretch()
        self._back_btn = QPushButton("↺")
        self._back_btn.setToolTip("Skip back")
        self._back_btn.setFixedSize(sizing.control_button, sizing.control_button)
        self._back_btn.setStyleSheet(_transport_style(typography.transport, sizing.control_button))
        self._back_btn.clicked.connect(self.skip_backward)
        self._play_btn = QPushButton("▶")
        self._play_btn.setToolTip("Play/Pause")
        self._play_btn.setFixedSize(sizing.play_button, sizing.play_button)
        self._play_btn.setStyleSheet(_transport_style(typography.play, sizing.play_button))
        self._play_btn.clicked.connect(self.toggle_playback)
        self._forward_btn = QPushButton("↻")
        self._forward_btn.setToolTip("Skip forward")
        self._forward_btn.setFixedSize(sizing.control_button, sizing.control_button)
        self._forward_btn.setStyleSheet(
            _transport_style(typography.transport, sizing.control_button)
        )
        self._forward_btn.clicked.connect(self.skip_forward)
        transport.addWidget(self._back_btn)
        transport.addWidget(self._play_btn)
        transport.addWidget(self._forward_btn)
        transport.addStretch()
        layout.addLayout(transport)

        self._volume_slider = VolumeSlider()
        self._volume_slider.volume_changed.connect(self._on_volume_changed)
        self._volume_slider.mute_toggled.connect(self._on_mute_toggled)
        layout.addWidget(self._volume_slider)

        layout.addStretch()

    # -- Properties -------------------------------------------------------------

    @property
    def session(self) -> PlaybackSession | None:
        """Return the live session, if any."""
        return self._session

    @property
    def track(self) -> Track | None:
        """Return the loaded track, if any."""
        return self._session.track if self._session else None

    @property
    def title_text(self) -> str:
        """Return the displayed title."""
        return self._title_label.text()

    @property
    def elapsed_text(self) -> str:
        """Return the displayed elapsed time."""
        return self._elapsed_label.text()

    @property
    def play_button(self) -> QPushButton:
        """Return the play/pause button."""
        return self._play_btn

    @property
    def volume_slider(self) -> VolumeSlider:
        """Return the volume slider."""
        return self._volume_slider

    def set_now_playing(self, now_playing: NowPlayingCenter) -> None:
        """Use a different now-playing surface for sessions opened from now on."""
        self._now_playing = now_playing

    def set_skip_interval(self, seconds: float) -> None:
        """Apply a new skip distance to current and future sessions."""
        self._skip_interval = seconds
        if self._session is not None:
            self._session.set_skip_interval(seconds)

    def set_report_interval_ms(self, interval_ms: int) -> None:
        """Apply a new position reporting interval to current and future sessions."""
        self._report_interval_ms = interval_ms
        if self._session is not None:
            self._session.set_report_interval_ms(interval_ms)

    # -- Session lifecycle ------------------------------------------------------

    def open_track(self, track: Track) -> bool:
        """Close the current session and start playing a track.

        Args:
            track: Track to open.

        Returns:
            True if the player was created and playback started.
        """
        self.close_session()

        session = PlaybackSession(
            self._now_playing,
            self._storage,
            engine_factory=self._engine_factory,
            report_interval_ms=self._report_interval_ms,
            skip_interval=self._skip_interval,
            volume=self._volume_slider.effective_volume / 100,
            parent=self,
        )
        session.track_changed.connect(self._on_track_changed)
        session.colors_changed.connect(self._apply_colors)
        session.position_changed.connect(self._on_position_changed)
        session.state_changed.connect(self._on_state_changed)
        session.error_occurred.connect(self.error_occurred)
        self._session = session

        if not session.prepare(track):
            self._set_controls_enabled(False)
            self._edit_btn.setEnabled(True)
            return False

        self._set_controls_enabled(True)
        session.play()
        return True

    def close_session(self) -> None:
        """Close the live session, if any, and reset the display."""
        session = self._session
        if session is None:
            return
        self._session = None
        session.close()
        session.track_changed.disconnect(self._on_track_changed)
        session.colors_changed.disconnect(self._apply_colors)
        session.position_changed.disconnect(self._on_position_changed)
        session.state_changed.disconnect(self._on_state_changed)
        session.error_occurred.disconnect(self.error_occurred)
        session.deleteLater()
        self._reset_display()

    def update_track(self, track: Track) -> None:
        """Forward an edited track to the live session."""
        if self._session is not None:
            self._session.update_track(track)

    # -- Transport --------------------------------------------------------------

    def toggle_playback(self) -> None:
        """Play or pause the live session."""
        if self._session is not None:
            self._session.toggle()

    def skip_forward(self) -> None:
        """Skip ahead by the skip interval."""
        if self._session is not None:
            self._session.skip_forward()

    def skip_backward(self) -> None:
        """Skip back by the skip interval."""
        if self._session is not None:
            self._session.skip_backward()

    # -- Session signal handlers ------------------------------------------------

    def _on_track_changed(self, track: Track) -> None:
        self._title_label.setText(track.display_title)
        self._artist_label.setText(track.display_artist)
        self._artwork.set_image(load_artwork(self._storage, track))

    def _on_position_changed(self, position: float, duration: float) -> None:
        self._duration_label.setText(format_time(duration))
        self._slider.setMaximum(max(0, int(duration * _SLIDER_SCALE)))
        if self._seeking:
            return
        self._elapsed_label.setText(format_time(position))
        self._slider.setValue(int(position * _SLIDER_SCALE))

    def _on_state_changed(self, state: SessionState) -> None:
        self._play_btn.setText("⏸" if state == SessionState.PLAYING else "▶")

    def _apply_colors(self, top: QColor, bottom: QColor) -> None:
        self.setStyleSheet(gradient_stylesheet("#PlayerPanel", top, bottom))

    # -- Slider -----------------------------------------------------------------

    def _on_slider_pressed(self) -> None:
        self._seeking = True

    def _on_slider_moved(self, value: int) -> None:
        self._elapsed_label.setText(format_time(value / _SLIDER_SCALE))

    def _on_slider_released(self) -> None:
        self._seeking = False
        if self._session is not None:
            self._session.seek(self._slider.value() / _SLIDER_SCALE)

    # -- Volume -----------------------------------------------------------------

    def _on_volume_changed(self, volume: int) -> None:
        if self._session is not None:
            self._session.set_volume(volume / 100)
        self.volume_changed.emit(volume)

    def _on_mute_toggled(self, _muted: bool) -> None:
        if self._session is not None:
            self._session.set_volume(self._volume_slider.effective_volume / 100)

    def _on_edit_clicked(self) -> None:
        track = self.track
        if track is not None:
            self.edit_requested.emit(track)

    # -- Display ----------------------------------------------------------------

    def _set_controls_enabled(self, enabled: bool) -> None:
        for widget in (self._back_btn, self._play_btn, self._forward_btn, self._slider):
            widget.setEnabled(enabled)
        self._edit_btn.setEnabled(enabled)

    def _reset_display(self) -> None:
        self._title_label.setText("Nothing playing")
        self._artist_label.setText("")
        self._artwork.set_image(None)
        self._slider.setRange(0, 0)
        self._elapsed_label.setText(format_time(0))
        self._duration_label.setText(format_time(0))
        self._play_btn.setText("▶")
        self._apply_colors(*background_colors(None))
        self._set_controls_enabled(False)
