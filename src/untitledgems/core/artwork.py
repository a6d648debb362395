"""Artwork utilities: average color, background gradient, and square crop.

Pure functions of the image data so they can be tested without any UI.

Usage:
    from untitledgems.core.artwork import background_colors, crop_image

    top, bottom = background_colors(image)
    square = crop_image(image, zoom=2.0, horizontal=0.5, vertical=0.5)
"""

from __future__ import annotations

import logging

from PySide6.QtCore import QRect, Qt
from PySide6.QtGui import QColor, QImage

from untitledgems.core.storage import ManagedStorage
from untitledgems.models.track import Track

logger = logging.getLogger(__name__)

# Background tone used when a track has no artwork
DEFAULT_BACKGROUND = QColor(0, 0, 0)

# Bottom gradient stop: brightness scaled down with a floor
DARKEN_FACTOR = 0.35
DARKEN_FLOOR = 0.08

# Crop slider ranges
MIN_ZOOM = 1.0
MAX_ZOOM = 4.0


def average_color(image: QImage) -> QColor | None:
    """Return the average color of an image.

    The image is reduced to a single pixel with smooth (area-averaging)
    scaling and that pixel is read back.

    Args:
        image: Source image.

    Returns:
        Opaque average color, or None for an empty image.
    """
    if image.isNull():
        return None

    opaque = image.convertToFormat(QImage.Format.Format_RGB32)
    pixel = opaque.scaled(
        1,
        1,
        Qt.AspectRatioMode.IgnoreAspectRatio,
        Qt.TransformationMode.SmoothTransformation,
    )
    if pixel.isNull():
        return None

    color = pixel.pixelColor(0, 0)
    color.setAlpha(255)
    return color


def darkened(color: QColor) -> QColor:
    """Return a darker variant with the same hue and saturation.

    Brightness is scaled to 35% with a floor of 0.08 so very dark
    artwork still yields a visible gradient stop.

    Args:
        color: Base color.

    Returns:
        Darkened opaque color.
    """
    hue, saturation, value, _alpha = color.getHsvF()
    return QColor.fromHsvF(hue, saturation, max(value * DARKEN_FACTOR, DARKEN_FLOOR), 1.0)


def background_colors(image: QImage | None) -> tuple[QColor, QColor]:
    """Return the (top, bottom) gradient stops for an artwork image.

    Args:
        image: Artwork, or None when the track has none.

    Returns:
        Average color and its darkened variant, or the flat default tone twice.
    """
    avg = average_color(image) if image is not None else None
    if avg is None:
        return QColor(DEFAULT_BACKGROUND), QColor(DEFAULT_BACKGROUND)
    return avg, darkened(avg)


def crop_rect(
    width: int,
    height: int,
    zoom: float,
    horizontal: float,
    vertical: float,
) -> QRect:
    """Map crop slider values to a square crop rectangle.

    ``side = round(min(width, height) / zoom)``; the square is then positioned
    along the free horizontal and vertical range by the 0-1 sliders. The side
    is rounded once so the result is always square and inside the image.

    Args:
        width: Image width in pixels.
        height: Image height in pixels.
        zoom: Zoom factor (values below 1 are treated as 1).
        horizontal: 0 = left edge, 1 = right edge.
        vertical: 0 = top edge, 1 = bottom edge.

    Returns:
        Square crop rectangle.
    """
    shortest = min(width, height)
    side = max(1, min(shortest, round(shortest / max(MIN_ZOOM, zoom))))

    max_x = max(width - side, 0)
    max_y = max(height - side, 0)
    x = min(max_x, max(0, round(max_x * horizontal)))
    y = min(max_y, max(0, round(max_y * vertical)))
    return QRect(x, y, side, side)


def crop_image(image: QImage, zoom: float, horizontal: float, vertical: float) -> QImage:
    """Crop an image to the square selected by the crop sliders.

    Args:
        image: Source image.
        zoom: Zoom factor 1-4.
        horizontal: Horizontal position 0-1.
        vertical: Vertical position 0-1.

    Returns:
        Cropped image, or the original image if it is empty.
    """
    if image.isNull():
        return image
    rect = crop_rect(image.width(), image.height(), zoom, horizontal, vertical)
    rect = rect.intersected(image.rect())
    if rect.isEmpty():
        return image
    return image.copy(rect)


def load_artwork(storage: ManagedStorage, track: Track) -> QImage | None:
    """Load a track's artwork from managed storage.

    Args:
        storage: Managed storage.
        track: Track whose artwork to load.

    Returns:
        The image, or None if the track has no artwork or it cannot be read.
    """
    if not track.artwork_path:
        return None
    path = storage.resolve(track.artwork_path)
    image = QImage(str(path))
    if image.isNull():
        logger.debug("Artwork %s for track %s could not be loaded", path, track.id)
        return None
    return image
