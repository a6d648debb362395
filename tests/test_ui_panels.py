"""Tests for the library and player panels."""

from collections.abc import Callable
from dataclasses import replace
from pathlib import Path

import pytest
from pytestqt.qtbot import QtBot

from untitledgems.core.importer import LocalSourceHandle, TrackImporter
from untitledgems.core.library import LibraryStore
from untitledgems.core.session import SessionState
from untitledgems.core.storage import ManagedStorage
from untitledgems.models.track import Track, create_track
from untitledgems.ui.panels.library import LibraryPanel
from untitledgems.ui.panels.player import PlayerPanel

from conftest import FakeEngine, RecordingNowPlaying


@pytest.fixture
def imported(library: LibraryStore, audio_file: Path) -> Track:
    """Return a track whose audio exists in managed storage."""
    return TrackImporter(library).import_file(LocalSourceHandle(audio_file))


@pytest.fixture
def player(
    qtbot: QtBot,
    now_playing: RecordingNowPlaying,
    storage: ManagedStorage,
    engine_factory: Callable[[], FakeEngine],
) -> PlayerPanel:
    """Return a player panel using fake engines."""
    panel = PlayerPanel(now_playing, storage, engine_factory=engine_factory)
    qtbot.addWidget(panel)
    return panel


class TestLibraryPanel:
    """Test the song list."""

    def test_empty_state(self, qtbot: QtBot, storage: ManagedStorage) -> None:
        """Test that a new panel shows the empty state."""
        panel = LibraryPanel(storage)
        qtbot.addWidget(panel)
        assert panel.is_empty
        assert panel.track_ids() == []

    def test_set_tracks(self, qtbot: QtBot, storage: ManagedStorage) -> None:
        """Test that tracks are listed in order."""
        panel = LibraryPanel(storage)
        qtbot.addWidget(panel)
        tracks = [create_track("A", "X", "a.mp3"), create_track("B", "Y", "b.mp3")]

        panel.set_tracks(tracks)

        assert not panel.is_empty
        assert panel.track_ids() == [tracks[0].id, tracks[1].id]
        assert panel.list_widget.count() == 2

        panel.set_tracks([])
        assert panel.is_empty

    def test_selection_survives_refresh(self, qtbot: QtBot, storage: ManagedStorage) -> None:
        """Test that the selected row is kept across rebuilds."""
        panel = LibraryPanel(storage)
        qtbot.addWidget(panel)
        tracks = [create_track("A", "X", "a.mp3"), create_track("B", "Y", "b.mp3")]
        panel.set_tracks(tracks)

        panel.select_track(tracks[1].id)
        panel.set_tracks(tracks)

        assert panel.selected_track_id() == tracks[1].id

    def test_activation_signal(self, qtbot: QtBot, storage: ManagedStorage) -> None:
        """Test that activating a row emits its track id."""
        panel = LibraryPanel(storage)
        qtbot.addWidget(panel)
        track = create_track("A", "X", "a.mp3")
        panel.set_tracks([track])

        with qtbot.waitSignal(panel.track_activated, timeout=1000) as blocker:
            panel.list_widget.itemActivated.emit(panel.list_widget.item(0))
        assert blocker.args == [track.id]

    def test_import_button(self, qtbot: QtBot, storage: ManagedStorage) -> None:
        """Test that the + button requests an import."""
        panel = LibraryPanel(storage)
        qtbot.addWidget(panel)
        with qtbot.waitSignal(panel.import_requested, timeout=1000):
            panel.import_button.click()


class TestPlayerPanel:
    """Test session handling in the player panel."""

    def test_initial_state(self, player: PlayerPanel) -> None:
        """Test that an empty player has no session and disabled controls."""
        assert player.session is None
        assert player.track is None
        assert player.title_text == "Nothing playing"
        assert not player.play_button.isEnabled()

    def test_open_autoplays(
        self,
        player: PlayerPanel,
        imported: Track,
        engines: list[FakeEngine],
        now_playing: RecordingNowPlaying,
    ) -> None:
        """Test that opening a track starts playback and publishes metadata."""
        assert player.open_track(imported)

        assert player.session is not None
        assert player.session.state == SessionState.PLAYING
        assert player.title_text == "Song"
        assert player.play_button.isEnabled()
        assert player.play_button.text() == "⏸"
        assert engines[0].is_playing
        assert now_playing.info is not None
        assert now_playing.info.title == "Song"

    def test_open_missing_payload(
        self, player: PlayerPanel, qtbot: QtBot, engines: list[FakeEngine]
    ) -> None:
        """Test that a missing payload reports an error and keeps controls disabled."""
        track = create_track("Ghost", "Band", "ghost.mp3")

        with qtbot.waitSignal(player.error_occurred, timeout=1000):
            assert not player.open_track(track)

        assert not player.play_button.isEnabled()
        assert engines[0].released

    def test_second_open_closes_first(
        self,
        player: PlayerPanel,
        library: LibraryStore,
        imported: Track,
        audio_file: Path,
        engines: list[FakeEngine],
    ) -> None:
        """Test that opening another track closes the previous session."""
        other = TrackImporter(library).import_file(LocalSourceHandle(audio_file))
        player.open_track(imported)
        first = player.session

        player.open_track(other)

        assert first is not None
        assert first.state == SessionState.CLOSED
        assert engines[0].released
        assert player.session is not first
        assert player.title_text == other.title

    def test_close_session_resets(
        self, player: PlayerPanel, imported: Track, now_playing: RecordingNowPlaying
    ) -> None:
        """Test that closing the session resets display and now playing."""
        player.open_track(imported)

        player.close_session()

        assert player.session is None
        assert player.title_text == "Nothing playing"
        assert player.elapsed_text == "0:00"
        assert now_playing.info is None

    def test_transport(
        self, player: PlayerPanel, imported: Track, engines: list[FakeEngine]
    ) -> None:
        """Test play/pause and skip routing to the session."""
        player.open_track(imported)

        player.toggle_playback()
        assert not engines[0].is_playing
        assert player.play_button.text() == "▶"

        player.skip_forward()
        assert engines[0].position == 10.0
        player.skip_backward()
        assert engines[0].position == 0.0

    def test_skip_interval(
        self, player: PlayerPanel, imported: Track, engines: list[FakeEngine]
    ) -> None:
        """Test that a new skip interval applies to the live session."""
        player.open_track(imported)
        player.set_skip_interval(30)
        player.skip_forward()
        assert engines[0].position == 30.0

    def test_update_track(self, player: PlayerPanel, imported: Track) -> None:
        """Test that edits of the loaded track refresh the title."""
        player.open_track(imported)
        player.update_track(replace(imported, title="Renamed"))
        assert player.title_text == "Renamed"

    def test_edit_requested(self, player: PlayerPanel, imported: Track, qtbot: QtBot) -> None:
        """Test that the Edit button emits the loaded track."""
        player.open_track(imported)
        with qtbot.waitSignal(player.edit_requested, timeout=1000) as blocker:
            player._edit_btn.click()  # pyright: ignore[reportPrivateUsage]
        assert blocker.args == [imported]

    def test_report_interval(self, player: PlayerPanel, imported: Track) -> None:
        """Test that a new report interval applies to the live session."""
        player.open_track(imported)
        player.set_report_interval_ms(2000)
        assert player.session is not None
        assert player.session.report_interval_ms == 2000


class TestPlayerVolume:
    """Test the volume slider in the player panel."""

    def test_initial_volume_reaches_engine(
        self,
        qtbot: QtBot,
        now_playing: RecordingNowPlaying,
        storage: ManagedStorage,
        engine_factory: Callable[[], FakeEngine],
        imported: Track,
        engines: list[FakeEngine],
    ) -> None:
        """Test that the configured volume is applied to each new engine."""
        panel = PlayerPanel(now_playing, storage, engine_factory=engine_factory, volume=35)
        qtbot.addWidget(panel)

        panel.open_track(imported)

        assert panel.volume_slider.volume == 35
        assert engines[0].volume == pytest.approx(0.35)

    def test_slider_sets_volume(
        self, player: PlayerPanel, imported: Track, engines: list[FakeEngine], qtbot: QtBot
    ) -> None:
        """Test that moving the slider sets the engine and emits the new volume."""
        player.open_track(imported)

        with qtbot.waitSignal(player.volume_changed, timeout=1000) as blocker:
            player.volume_slider._slider.setValue(50)  # pyright: ignore[reportPrivateUsage]

        assert blocker.args == [50]
        assert engines[0].volume == pytest.approx(0.5)

    def test_slider_without_session(self, player: PlayerPanel, qtbot: QtBot) -> None:
        """Test that the volume can change before anything is playing."""
        with qtbot.waitSignal(player.volume_changed, timeout=1000):
            player.volume_slider._slider.setValue(10)  # pyright: ignore[reportPrivateUsage]
        assert player.session is None

    def test_mute_silences_without_persisting(
        self, player: PlayerPanel, imported: Track, engines: list[FakeEngine], qtbot: QtBot
    ) -> None:
        """Test that mute silences the engine and unmute restores the volume."""
        player.open_track(imported)
        player.volume_slider.set_volume(80)

        with qtbot.assertNotEmitted(player.volume_changed):
            player.volume_slider._toggle_mute()  # pyright: ignore[reportPrivateUsage]
        assert engines[0].volume == 0.0

        player.volume_slider._toggle_mute()  # pyright: ignore[reportPrivateUsage]
        assert engines[0].volume == pytest.approx(0.8)

    def test_muted_volume_used_for_next_track(
        self,
        player: PlayerPanel,
        library: LibraryStore,
        imported: Track,
        audio_file: Path,
        engines: list[FakeEngine],
    ) -> None:
        """Test that a track opened while muted starts silent."""
        other = TrackImporter(library).import_file(LocalSourceHandle(audio_file))
        player.open_track(imported)
        player.volume_slider._toggle_mute()  # pyright: ignore[reportPrivateUsage]

        player.open_track(other)

        assert engines[1].volume == 0.0
