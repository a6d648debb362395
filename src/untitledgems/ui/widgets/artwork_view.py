"""Square artwork display with a music-note placeholder."""

from PySide6.QtCore import QRectF, Qt
from PySide6.QtGui import QColor, QImage, QPainter, QPainterPath, QPen, QPixmap
from PySide6.QtWidgets import QLabel, QWidget

from untitledgems.ui.theme import theme_manager


def rounded_artwork(image: QImage | None, size: int, radius: int) -> QPixmap:
    """Render artwork (or the placeholder) as a rounded square pixmap.

    The image is scaled to fill the square and center-cropped.

    Args:
        image: Artwork, or None for the placeholder.
        size: Edge length in pixels.
        radius: Corner radius in pixels.

    Returns:
        Pixmap of size x size with transparent corners.
    """
    pixmap = QPixmap(size, size)
    pixmap.fill(Qt.GlobalColor.transparent)

    painter = QPainter(pixmap)
    try:
        painter.setRenderHint(QPainter.RenderHint.Antialiasing)
        rect = QRectF(0.5, 0.5, size - 1, size - 1)
        path = QPainterPath()
        path.addRoundedRect(rect, radius, radius)

        if image is not None and not image.isNull():
            scaled = image.scaled(
                size,
                size,
                Qt.AspectRatioMode.KeepAspectRatioByExpanding,
                Qt.TransformationMode.SmoothTransformation,
            )
            x = (scaled.width() - size) // 2
            y = (scaled.height() - size) // 2
            painter.setClipPath(path)
            painter.drawImage(0, 0, scaled, x, y, size, size)
        else:
            p = theme_manager.palette
            pen = QPen(QColor(p.placeholder), 1, Qt.PenStyle.DashLine)
            painter.setPen(pen)
            painter.drawPath(path)
            font = painter.font()
            font.setPixelSize(max(10, size // 3))
            painter.setFont(font)
            painter.drawText(rect, Qt.AlignmentFlag.AlignCenter, "♪")
    finally:
        painter.end()

    return pixmap


class ArtworkView(QLabel):
    """Fixed-size label showing a track's artwork.

    Example:
        view = ArtworkView(size=48, radius=12)
        view.set_image(load_artwork(storage, track))
    """

    def __init__(self, size: int, radius: int, parent: QWidget | None = None) -> None:
        """Initialize the view with the placeholder.

        Args:
            size: Edge length in pixels.
            radius: Corner radius in pixels.
            parent: Optional parent widget.
        """
        super().__init__(parent)
        self._size = size
        self._radius = radius
        self._has_image = False
        self.setFixedSize(size, size)
        self.setStyleSheet("background: transparent;")
        self.set_image(None)

    @property
    def has_image(self) -> bool:
        """Return True if real artwork is displayed."""
        return self._has_image

    def set_image(self, image: QImage | None) -> None:
        """Display artwork, or the placeholder when None/empty."""
        self._has_image = image is not None and not image.isNull()
        self.setPixmap(rounded_artwork(image, self._size, self._radius))
