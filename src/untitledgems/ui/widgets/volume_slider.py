"""Volume slider with mute button."""

from PySide6.QtCore import Qt, Signal
from PySide6.QtWidgets import QHBoxLayout, QLabel, QPushButton, QSlider, QWidget

from untitledgems.ui.tokens import sizing, spacing, typography

_GLYPH_ON = "🔊"
_GLYPH_MUTED = "🔇"


class VolumeSlider(QWidget):
    """Volume slider with integrated mute button.

    Displays a mute toggle, a slider (0-100%) and a percentage label.
    Colors are light so the widget reads on the artwork gradient.

    Example:
        slider = VolumeSlider()
        slider.volume_changed.connect(config.set_volume)
        slider.mute_toggled.connect(lambda muted: print(f"Muted: {muted}"))
        slider.set_volume(75)
    """

    volume_changed = Signal(int)  # New volume 0-100
    mute_toggled = Signal(bool)  # New mute state

    def __init__(self, parent: QWidget | None = None) -> None:
        """Initialize the volume slider at 100%."""
        super().__init__(parent)

        layout = QHBoxLayout(self)
        layout.setContentsMargins(0, 0, 0, 0)
        layout.setSpacing(spacing.sm)

        self._mute_button = QPushButton(_GLYPH_ON)
        self._mute_button.setToolTip("Mute")
        self._mute_button.setFixedSize(sizing.control_button, sizing.control_button)
        self._mute_button.setFlat(True)
        self._mute_button.setStyleSheet(f"""
            QPushButton {{
                border: none;
                background: transparent;
                font-size: {typography.subtitle}pt;
            }}
            QPushButton:hover {{
                background: rgba(255, 255, 255, 0.12);
                border-radius: {sizing.control_button // 2}px;
            }}
        """)
        self._mute_button.clicked.connect(self._toggle_mute)
        layout.addWidget(self._mute_button)

        self._slider = QSlider(Qt.Orientation.Horizontal)
        self._slider.setRange(0, 100)
        self._slider.setValue(100)
        self._slider.setMinimumWidth(120)
        self._slider.valueChanged.connect(self._on_volume_changed)
        layout.addWidget(self._slider, 1)

        self._volume_label = QLabel("100%")
        self._volume_label.setMinimumWidth(40)
        self._volume_label.setStyleSheet(
            "color: rgba(255, 255, 255, 0.7); background: transparent;"
            f" font-size: {typography.caption}pt;"
        )
        layout.addWidget(self._volume_label)

        # State
        self._muted = False
        self._volume_before_mute = 100

    def _on_volume_changed(self, value: int) -> None:
        """Handle slider value change.

        Moving the slider while muted unmutes.

        Args:
            value: New volume value 0-100.
        """
        self._volume_label.setText(f"{value}%")
        if self._muted:
            self._muted = False
            self._mute_button.setText(_GLYPH_ON)
            self.mute_toggled.emit(False)
        self._volume_before_mute = value
        self.volume_changed.emit(value)

    def _toggle_mute(self) -> None:
        """Toggle mute state."""
        self.set_muted(not self._muted)
        self.mute_toggled.emit(self._muted)

    @property
    def volume(self) -> int:
        """Return the volume to restore when unmuted."""
        return self._volume_before_mute

    @property
    def is_muted(self) -> bool:
        """Return mute state."""
        return self._muted

    @property
    def effective_volume(self) -> int:
        """Return the volume actually audible (0 while muted)."""
        return 0 if self._muted else self._volume_before_mute

    def set_volume(self, volume: int) -> None:
        """Set the volume (0-100) without emitting signals.

        Args:
            volume: Volume value.
        """
        volume = max(0, min(100, volume))
        self._volume_before_mute = volume
        if self._muted:
            return
        self._slider.blockSignals(True)
        self._slider.setValue(volume)
        self._slider.blockSignals(False)
        self._volume_label.setText(f"{volume}%")

    def set_muted(self, muted: bool) -> None:
        """Set the mute state without emitting signals.

        Args:
            muted: Whether to mute.
        """
        if self._muted == muted:
            return

        self._muted = muted
        self._slider.blockSignals(True)
        if muted:
            self._slider.setValue(0)
            self._volume_label.setText("M")
            self._mute_button.setText(_GLYPH_MUTED)
        else:
            self._slider.setValue(self._volume_before_mute)
            self._volume_label.setText(f"{self._volume_before_mute}%")
            self._mute_button.setText(_GLYPH_ON)
        self._slider.blockSignals(False)
