"""Themed dialogs for editing track details and cropping artwork.

Usage:
    from untitledgems.ui.widgets.dialogs import EditTrackDialog

    dialog = EditTrackDialog(parent, track, storage)
    if dialog.exec() == QDialog.DialogCode.Accepted:
        library.update(dialog.track)
"""

from __future__ import annotations

import logging
from dataclasses import replace

from PySide6.QtCore import Qt
from PySide6.QtGui import QImage
from PySide6.QtWidgets import (
    QDialog,
    QFileDialog,
    QFormLayout,
    QHBoxLayout,
    QLabel,
    QLineEdit,
    QPushButton,
    QSlider,
    QVBoxLayout,
    QWidget,
)

from untitledgems.core.artwork import MAX_ZOOM, MIN_ZOOM, crop_image, load_artwork
from untitledgems.core.errors import PersistenceError
from untitledgems.core.storage import ManagedStorage
from untitledgems.models.track import Track
from untitledgems.ui.theme import theme_manager
from untitledgems.ui.tokens import sizing, spacing, typography
from untitledgems.ui.widgets.artwork_view import ArtworkView

logger = logging.getLogger(__name__)

IMAGE_FILTER = "Images (*.png *.jpg *.jpeg *.heic *.bmp *.gif *.webp)"

# Slider resolution: slider int values per unit
_SLIDER_SCALE = 100


def button_style(primary: bool) -> str:
    """Return the stylesheet for a dialog button."""
    p = theme_manager.palette
    if primary:
        return f"""
            QPushButton {{
                background: {p.accent};
                border: none;
                border-radius: {sizing.border_radius_sm}px;
                padding: {spacing.md}px {spacing.lg}px;
                color: #ffffff;
                font-size: {typography.body}pt;
                font-weight: bold;
            }}
        """
    return f"""
        QPushButton {{
            background: {p.surface_hover};
            border: 1px solid {p.border};
            border-radius: {sizing.border_radius_sm}px;
            padding: {spacing.md}px {spacing.lg}px;
            color: {p.text};
            font-size: {typography.body}pt;
        }}
        QPushButton:hover {{
            background: {p.surface_selected};
        }}
    """


def _button_row(dialog: QDialog, accept_label: str) -> QHBoxLayout:
    """Build the Cancel / accept button row shared by both dialogs."""
    row = QHBoxLayout()
    row.setSpacing(spacing.md)
    row.addStretch()

    cancel_btn = QPushButton("Cancel")
    cancel_btn.setStyleSheet(button_style(primary=False))
    cancel_btn.clicked.connect(dialog.reject)
    row.addWidget(cancel_btn)

    ok_btn = QPushButton(accept_label)
    ok_btn.setDefault(True)
    ok_btn.setStyleSheet(button_style(primary=True))
    ok_btn.clicked.connect(dialog.accept)
    row.addWidget(ok_btn)
    return row


class CropDialog(QDialog):
    """Square crop with zoom, horizontal and vertical sliders.

    Zoom ranges 1-4, position sliders 0-1; the preview updates live.

    Example:
        dialog = CropDialog(parent, image)
        if dialog.exec() == QDialog.DialogCode.Accepted:
            cropped = dialog.cropped_image()
    """

    def __init__(self, parent: QWidget | None, image: QImage) -> None:
        """Initialize the dialog centered at zoom 1.

        Args:
            parent: Parent widget.
            image: Image to crop.
        """
        super().__init__(parent)
        self.setWindowTitle("Crop Artwork")
        self._image = image
        self._preview_image = crop_image(image, MIN_ZOOM, 0.5, 0.5)
        self._setup_ui()

    def _setup_ui(self) -> None:
        p = theme_manager.palette
        self.setStyleSheet(f"CropDialog {{ background-color: {p.surface}; }}")

        layout = QVBoxLayout(self)
        layout.setSpacing(spacing.lg)
        layout.setContentsMargins(spacing.lg, spacing.lg, spacing.lg, spacing.lg)

        hint = QLabel("Adjust zoom and position to choose the square crop.")
        hint.setStyleSheet(f"color: {p.text_secondary}; font-size: {typography.caption}pt;")
        layout.addWidget(hint)

        self._preview = ArtworkView(sizing.crop_preview, sizing.border_radius_md)
        self._preview.set_image(self._preview_image)
        layout.addWidget(self._preview, alignment=Qt.AlignmentFlag.AlignHCenter)

        form = QFormLayout()
        self._zoom_slider = self._make_slider(
            int(MIN_ZOOM * _SLIDER_SCALE),
            int(MAX_ZOOM * _SLIDER_SCALE),
            int(MIN_ZOOM * _SLIDER_SCALE),
        )
        self._horizontal_slider = self._make_slider(0, _SLIDER_SCALE, _SLIDER_SCALE // 2)
        self._vertical_slider = self._make_slider(0, _SLIDER_SCALE, _SLIDER_SCALE // 2)
        form.addRow("Zoom", self._zoom_slider)
        form.addRow("Horizontal", self._horizontal_slider)
        form.addRow("Vertical", self._vertical_slider)
        layout.addLayout(form)

        layout.addLayout(_button_row(self, "Save"))

    def _make_slider(self, minimum: int, maximum: int, value: int) -> QSlider:
        slider = QSlider(Qt.Orientation.Horizontal)
        slider.setRange(minimum, maximum)
        slider.setValue(value)
        slider.valueChanged.connect(self._update_preview)
        return slider

    @property
    def zoom(self) -> float:
        """Return the zoom slider value (1-4)."""
        return self._zoom_slider.value() / _SLIDER_SCALE

    @property
    def horizontal(self) -> float:
        """Return the horizontal slider value (0-1)."""
        return self._horizontal_slider.value() / _SLIDER_SCALE

    @property
    def vertical(self) -> float:
        """Return the vertical slider value (0-1)."""
        return self._vertical_slider.value() / _SLIDER_SCALE

    def set_crop(self, zoom: float, horizontal: float, vertical: float) -> None:
        """Move all three sliders (used by tests and keyboard shortcuts)."""
        self._zoom_slider.setValue(round(zoom * _SLIDER_SCALE))
        self._horizontal_slider.setValue(round(horizontal * _SLIDER_SCALE))
        self._vertical_slider.setValue(round(vertical * _SLIDER_SCALE))

    def cropped_image(self) -> QImage:
        """Return the image cropped with the current slider values."""
        return self._preview_image

    def _update_preview(self, _value: int = 0) -> None:
        self._preview_image = crop_image(self._image, self.zoom, self.horizontal, self.vertical)
        self._preview.set_image(self._preview_image)


class EditTrackDialog(QDialog):
    """Edit a track's title, artist, and artwork.

    Choosing a photo opens the CropDialog; the cropped artwork is written
    to managed storage immediately and referenced by the working copy.
    The caller persists ``dialog.track`` when the dialog is accepted.
    """

    def __init__(self, parent: QWidget | None, track: Track, storage: ManagedStorage) -> None:
        """Initialize the dialog with a working copy of the track.

        Args:
            parent: Parent widget.
            track: Track to edit.
            storage: Managed storage for artwork.
        """
        super().__init__(parent)
        self.setWindowTitle("Edit Song")
        self.setMinimumWidth(360)
        self._track = track
        self._storage = storage
        self._setup_ui()

    def _setup_ui(self) -> None:
        p = theme_manager.palette
        self.setStyleSheet(f"""
            EditTrackDialog {{
                background-color: {p.surface};
            }}
            QLineEdit {{
                background: {p.background};
                border: 1px solid {p.border};
                border-radius: {sizing.border_radius_sm}px;
                padding: {spacing.md}px;
                color: {p.text};
                selection-background-color: {p.accent};
            }}
            QLineEdit:focus {{
                border: 1px solid {p.accent};
            }}
        """)

        layout = QVBoxLayout(self)
        layout.setSpacing(spacing.lg)
        layout.setContentsMargins(spacing.lg, spacing.lg, spacing.lg, spacing.lg)

        details = QLabel("Details")
        details.setStyleSheet(
            f"font-size: {typography.title}pt; font-weight: bold; color: {p.text};"
        )
        layout.addWidget(details)

        form = QFormLayout()
        self._title_edit = QLineEdit(self._track.title)
        self._artist_edit = QLineEdit(self._track.artist)
        form.addRow("Title", self._title_edit)
        form.addRow("Artist", self._artist_edit)
        layout.addLayout(form)

        artwork_label = QLabel("Artwork")
        artwork_label.setStyleSheet(
            f"font-size: {typography.title}pt; font-weight: bold; color: {p.text};"
        )
        layout.addWidget(artwork_label)

        artwork_row = QHBoxLayout()
        artwork_row.setSpacing(spacing.lg)
        self._artwork_view = ArtworkView(sizing.artwork_edit, sizing.border_radius_md)
        self._artwork_view.set_image(load_artwork(self._storage, self._track))
        artwork_row.addWidget(self._artwork_view)

        choose_btn = QPushButton("Choose Photo…")
        choose_btn.setStyleSheet(button_style(primary=False))
        choose_btn.clicked.connect(self._choose_photo)
        artwork_row.addWidget(choose_btn)
        artwork_row.addStretch()
        layout.addLayout(artwork_row)

        self._error_label = QLabel()
        self._error_label.setStyleSheet(f"color: {p.error};")
        self._error_label.setVisible(False)
        layout.addWidget(self._error_label)

        layout.addLayout(_button_row(self, "Save"))

    @property
    def track(self) -> Track:
        """Return the edited working copy."""
        return replace(
            self._track,
            title=self._title_edit.text(),
            artist=self._artist_edit.text(),
        )

    def _choose_photo(self) -> None:
        """Pick an image, crop it, and store it as the track artwork."""
        path, _selected = QFileDialog.getOpenFileName(self, "Choose Photo", "", IMAGE_FILTER)
        if not path:
            return
        image = QImage(path)
        if image.isNull():
            logger.error("Error loading image for cropping: %s", path)
            self._show_error("The selected file is not a readable image.")
            return

        dialog = CropDialog(self, image)
        if dialog.exec() == QDialog.DialogCode.Accepted:
            self.apply_artwork(dialog.cropped_image())

    def apply_artwork(self, image: QImage) -> bool:
        """Write cropped artwork and reference it from the working copy.

        Args:
            image: Cropped artwork.

        Returns:
            True if the artwork was saved.
        """
        try:
            name = self._storage.write_artwork(self._track.id, image)
        except PersistenceError as e:
            logger.error("Error saving cropped artwork: %s", e)
            self._show_error("The artwork could not be saved.")
            return False
        self._track = replace(self._track, artwork_path=name)
        self._artwork_view.set_image(image)
        self._error_label.setVisible(False)
        return True

    def _show_error(self, message: str) -> None:
        self._error_label.setText(message)
        self._error_label.setVisible(True)
