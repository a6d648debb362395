"""Now-playing surface interface.

The PlaybackSession mirrors the current track and playback state into a
NowPlayingCenter passed in at construction. Implementations only decide
how to render a NowPlayingInfo (system tray, logs, nothing at all).
"""

from __future__ import annotations

import logging
import math
from abc import ABC, abstractmethod
from dataclasses import dataclass, replace

from PySide6.QtGui import QImage

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class NowPlayingInfo:
    """Snapshot of what the now-playing surface shows.

    Attributes:
        title: Track title.
        artist: Track artist.
        duration: Track duration in seconds.
        elapsed: Elapsed playback time in seconds.
        rate: Playback rate, 1.0 while playing and 0.0 while paused.
        artwork: Artwork image, if any.
    """

    title: str
    artist: str
    duration: float
    elapsed: float = 0.0
    rate: float = 0.0
    artwork: QImage | None = None

    @property
    def is_playing(self) -> bool:
        """Return True if the rate indicates playback."""
        return self.rate > 0


class NowPlayingCenter(ABC):
    """Base class for now-playing surfaces.

    publish_metadata() starts a new entry (elapsed 0, paused);
    publish_state() updates elapsed time and rate of the current entry
    and is ignored until metadata has been published.
    """

    def __init__(self) -> None:
        self._info: NowPlayingInfo | None = None

    @property
    def info(self) -> NowPlayingInfo | None:
        """Return the currently displayed info, or None."""
        return self._info

    def publish_metadata(
        self,
        title: str,
        artist: str,
        duration: float,
        artwork: QImage | None = None,
    ) -> None:
        """Set up metadata when a track is loaded or edited."""
        self._info = NowPlayingInfo(
            title=title,
            artist=artist,
            duration=duration,
            artwork=artwork,
        )
        logger.debug("Now playing configured: %s - %s duration: %.1f", title, artist, duration)
        self._render(self._info)

    def publish_state(self, position: float, is_playing: bool) -> None:
        """Update elapsed time and play/pause state."""
        if self._info is None:
            return
        self._info = replace(self._info, elapsed=position, rate=1.0 if is_playing else 0.0)
        self._render(self._info)

    def clear(self) -> None:
        """Remove the current entry."""
        self._info = None
        self._render(None)

    @abstractmethod
    def _render(self, info: NowPlayingInfo | None) -> None:
        """Display info, or clear the surface when None."""


class NullNowPlaying(NowPlayingCenter):
    """Now-playing surface that keeps state but displays nothing."""

    def _render(self, info: NowPlayingInfo | None) -> None:
        pass


def format_time(seconds: float) -> str:
    """Format a playback time as m:ss.

    Args:
        seconds: Time in seconds.

    Returns:
        Formatted string like "3:07"; NaN and infinite values give "0:00".
    """
    if math.isnan(seconds) or math.isinf(seconds) or seconds < 0:
        return "0:00"
    total = int(seconds)
    return f"{total // 60}:{total % 60:02d}"
