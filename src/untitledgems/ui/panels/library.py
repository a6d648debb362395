"""Library panel - the song list with an empty state."""

import logging

from PySide6.QtCore import QPoint, QSize, Qt, Signal
from PySide6.QtWidgets import (
    QHBoxLayout,
    QLabel,
    QListWidget,
    QListWidgetItem,
    QMenu,
    QPushButton,
    QStackedWidget,
    QVBoxLayout,
    QWidget,
)

from untitledgems.core.artwork import load_artwork
from untitledgems.core.storage import ManagedStorage
from untitledgems.models.track import Track
from untitledgems.ui.theme import theme_manager
from untitledgems.ui.tokens import sizing, spacing, typography
from untitledgems.ui.widgets.artwork_view import ArtworkView

logger = logging.getLogger(__name__)

_TRACK_ID_ROLE = Qt.ItemDataRole.UserRole


class TrackRow(QWidget):
    """One list row: artwork thumbnail, title and artist."""

    def __init__(self, track: Track, storage: ManagedStorage) -> None:
        super().__init__()
        p = theme_manager.palette

        layout = QHBoxLayout(self)
        layout.setContentsMargins(spacing.md, spacing.sm, spacing.md, spacing.sm)
        layout.setSpacing(spacing.md)

        self._artwork = ArtworkView(sizing.artwork_thumb, sizing.border_radius_md)
        self._artwork.set_image(load_artwork(storage, track))
        layout.addWidget(self._artwork)

        text = QVBoxLayout()
        text.setSpacing(spacing.xs)
        self.title_label = QLabel(track.display_title)
        self.title_label.setStyleSheet(
            f"color: {p.text}; font-size: {typography.subtitle}pt; font-weight: bold;"
            " background: transparent;"
        )
        self.artist_label = QLabel(track.display_artist)
        self.artist_label.setStyleSheet(
            f"color: {p.text_secondary}; font-size: {typography.body}pt; background: transparent;"
        )
        text.addWidget(self.title_label)
        text.addWidget(self.artist_label)
        layout.addLayout(text, 1)


class LibraryPanel(QWidget):
    """Left panel listing the library's tracks.

    Double-clicking (or pressing Enter on) a row opens the track in the
    player. The context menu offers deletion. With no tracks the list is
    replaced by an empty-state hint.

    Example:
        panel = LibraryPanel(storage)
        library.tracks_changed.connect(panel.set_tracks)
        panel.track_activated.connect(window.open_track)
    """

    track_activated = Signal(str)  # track id
    delete_requested = Signal(str)  # track id
    import_requested = Signal()

    def __init__(self, storage: ManagedStorage) -> None:
        """Initialize the library panel.

        Args:
            storage: Managed storage for row artwork.
        """
        super().__init__()
        self._storage = storage
        self._tracks: list[Track] = []

        layout = QVBoxLayout(self)
        layout.setContentsMargins(0, 0, 0, 0)
        layout.setSpacing(spacing.sm)

        header = QHBoxLayout()
        self._header = QLabel("Songs")
        self._header.setStyleSheet(f"font-weight: bold; font-size: {typography.title}pt;")
        header.addWidget(self._header)
        header.addStretch()

        self._import_btn = QPushButton("+")
        self._import_btn.setToolTip("Import a song")
        self._import_btn.setFixedSize(sizing.control_button, sizing.control_button)
        self._import_btn.setFlat(True)
        self._import_btn.clicked.connect(self.import_requested)
        header.addWidget(self._import_btn)
        layout.addLayout(header)

        self._stack = QStackedWidget()

        self._list = QListWidget()
        self._list.setContextMenuPolicy(Qt.ContextMenuPolicy.CustomContextMenu)
        self._list.customContextMenuRequested.connect(self._show_context_menu)
        self._list.itemActivated.connect(self._on_item_activated)
        self._stack.addWidget(self._list)

        self._empty = QWidget()
        empty_layout = QVBoxLayout(self._empty)
        empty_layout.addStretch()
        p = theme_manager.palette
        empty_title = QLabel("No songs yet")
        empty_title.setAlignment(Qt.AlignmentFlag.AlignCenter)
        empty_title.setStyleSheet(f"font-size: {typography.title}pt; color: {p.text};")
        empty_hint = QLabel("Use + to import an audio file.")
        empty_hint.setAlignment(Qt.AlignmentFlag.AlignCenter)
        empty_hint.setStyleSheet(f"font-size: {typography.body}pt; color: {p.text_secondary};")
        empty_layout.addWidget(empty_title)
        empty_layout.addWidget(empty_hint)
        empty_layout.addStretch()
        self._stack.addWidget(self._empty)

        layout.addWidget(self._stack)
        self._stack.setCurrentWidget(self._empty)

    @property
    def is_empty(self) -> bool:
        """Return True while the empty state is shown."""
        return self._stack.currentWidget() is self._empty

    @property
    def list_widget(self) -> QListWidget:
        """Return the underlying list widget."""
        return self._list

    @property
    def import_button(self) -> QPushButton:
        """Return the import button."""
        return self._import_btn

    def track_ids(self) -> list[str]:
        """Return the displayed track ids in order."""
        return [track.id for track in self._tracks]

    def set_tracks(self, tracks: list[Track]) -> None:
        """Rebuild the list from the library.

        Args:
            tracks: Tracks in display order.
        """
        selected = self.selected_track_id()
        self._tracks = list(tracks)
        self._list.clear()

        for track in self._tracks:
            item = QListWidgetItem()
            item.setData(_TRACK_ID_ROLE, track.id)
            row = TrackRow(track, self._storage)
            item.setSizeHint(QSize(row.sizeHint().width(), sizing.artwork_thumb + 2 * spacing.md))
            self._list.addItem(item)
            self._list.setItemWidget(item, row)
            if track.id == selected:
                self._list.setCurrentItem(item)

        self._stack.setCurrentWidget(self._list if self._tracks else self._empty)
        logger.debug("Library panel shows %d tracks", len(self._tracks))

    def selected_track_id(self) -> str | None:
        """Return the id of the selected row, if any."""
        item = self._list.currentItem()
        return item.data(_TRACK_ID_ROLE) if item else None

    def select_track(self, track_id: str) -> None:
        """Select the row for a track id, if present."""
        for index in range(self._list.count()):
            item = self._list.item(index)
            if item.data(_TRACK_ID_ROLE) == track_id:
                self._list.setCurrentItem(item)
                return

    def _on_item_activated(self, item: QListWidgetItem) -> None:
        track_id = item.data(_TRACK_ID_ROLE)
        if track_id:
            self.track_activated.emit(track_id)

    def _show_context_menu(self, pos: QPoint) -> None:
        item = self._list.itemAt(pos)
        if item is None:
            return
        track_id = item.data(_TRACK_ID_ROLE)
        menu = QMenu(self)
        play_action = menu.addAction("Play")
        delete_action = menu.addAction("Delete")
        chosen = menu.exec(self._list.mapToGlobal(pos))
        if chosen == play_action:
            self.track_activated.emit(track_id)
        elif chosen == delete_action:
            self.delete_requested.emit(track_id)
