"""Preferences dialog for UntitledGems.

Provides a tabbed dialog for the library, playback and appearance settings.

Usage:
    from untitledgems.ui.widgets.preferences import PreferencesDialog

    dialog = PreferencesDialog(config, parent=window)
    dialog.settings_changed.connect(on_settings_changed)
    dialog.exec()
"""

from __future__ import annotations

from PySide6.QtCore import Signal
from PySide6.QtWidgets import (
    QCheckBox,
    QComboBox,
    QDialog,
    QFileDialog,
    QFormLayout,
    QHBoxLayout,
    QLabel,
    QLineEdit,
    QPushButton,
    QSpinBox,
    QTabWidget,
    QVBoxLayout,
    QWidget,
)

from untitledgems.core.config import (
    MAX_REPORT_INTERVAL_MS,
    MAX_SKIP_INTERVAL,
    MIN_REPORT_INTERVAL_MS,
    MIN_SKIP_INTERVAL,
    ConfigManager,
)
from untitledgems.ui.theme import MODES, theme_manager
from untitledgems.ui.tokens import sizing, spacing, typography
from untitledgems.ui.widgets.dialogs import button_style


class PreferencesDialog(QDialog):
    """Tabbed preferences dialog.

    Tabs: Library, Playback, Appearance. Apply and OK write every field
    through ConfigManager and emit settings_changed.

    Example:
        dialog = PreferencesDialog(config, parent=window)
        dialog.settings_changed.connect(lambda: print("Settings updated"))
        dialog.exec()
    """

    settings_changed = Signal()

    def __init__(
        self,
        config: ConfigManager,
        parent: QWidget | None = None,
    ) -> None:
        """Initialize the preferences dialog.

        Args:
            config: ConfigManager for reading/writing settings.
            parent: Parent widget.
        """
        super().__init__(parent)
        self._config = config
        self.setWindowTitle("Preferences")
        self.setMinimumWidth(480)
        self.setMinimumHeight(320)
        self._setup_ui()
        self._load()

    def _setup_ui(self) -> None:
        """Build the dialog UI with tabs and buttons."""
        p = theme_manager.palette

        self.setStyleSheet(f"""
            PreferencesDialog {{
                background-color: {p.surface};
            }}
            QTabWidget::pane {{
                border: 1px solid {p.border};
                border-radius: {sizing.border_radius_md}px;
                background: {p.surface};
                padding: {spacing.sm}px;
            }}
            QTabBar::tab {{
                background: {p.background};
                border: 1px solid {p.border};
                padding: {spacing.sm}px {spacing.lg}px;
                margin-right: 2px;
                border-top-left-radius: {sizing.border_radius_sm}px;
                border-top-right-radius: {sizing.border_radius_sm}px;
                color: {p.text_secondary};
            }}
            QTabBar::tab:selected {{
                background: {p.surface};
                color: {p.text};
                font-weight: bold;
            }}
            QTabBar::tab:hover {{
                background: {p.surface_hover};
            }}
            QLabel, QCheckBox {{
                background: transparent;
                color: {p.text};
            }}
        """)

        layout = QVBoxLayout(self)
        layout.setSpacing(spacing.md)
        layout.setContentsMargins(spacing.lg, spacing.lg, spacing.lg, spacing.lg)

        self._tabs = QTabWidget()
        self._tabs.addTab(self._create_library_tab(), "Library")
        self._tabs.addTab(self._create_playback_tab(), "Playback")
        self._tabs.addTab(self._create_appearance_tab(), "Appearance")
        layout.addWidget(self._tabs)

        btn_row = QHBoxLayout()
        btn_row.setSpacing(spacing.sm)
        btn_row.addStretch()

        cancel_btn = QPushButton("Cancel")
        cancel_btn.setStyleSheet(button_style(primary=False))
        cancel_btn.clicked.connect(self.reject)
        btn_row.addWidget(cancel_btn)

        apply_btn = QPushButton("Apply")
        apply_btn.setStyleSheet(button_style(primary=False))
        apply_btn.clicked.connect(self._apply)
        btn_row.addWidget(apply_btn)

        ok_btn = QPushButton("OK")
        ok_btn.setDefault(True)
        ok_btn.setStyleSheet(button_style(primary=True))
        ok_btn.clicked.connect(self._ok)
        btn_row.addWidget(ok_btn)

        layout.addLayout(btn_row)

    def _create_library_tab(self) -> QWidget:
        """Create the Library settings tab.

        Returns:
            Tab widget.
        """
        tab = QWidget()
        form = QFormLayout(tab)
        form.setSpacing(spacing.md)
        form.setContentsMargins(spacing.md, spacing.md, spacing.md, spacing.md)

        dir_row = QHBoxLayout()
        self._storage_dir = QLineEdit()
        dir_row.addWidget(self._storage_dir, 1)
        browse_btn = QPushButton("Browse...")
        browse_btn.setStyleSheet(button_style(primary=False))
        browse_btn.clicked.connect(self._browse_storage_dir)
        dir_row.addWidget(browse_btn)
        form.addRow("Storage folder:", dir_row)

        p = theme_manager.palette
        info = QLabel("A new storage folder takes effect after restarting the app.")
        info.setStyleSheet(f"color: {p.text_secondary}; font-size: {typography.caption}pt;")
        info.setWordWrap(True)
        form.addRow("", info)

        self._default_artist = QLineEdit()
        form.addRow("Default artist:", self._default_artist)

        self._remove_files = QCheckBox("Remove audio and artwork files on delete")
        form.addRow("", self._remove_files)

        return tab

    def _create_playback_tab(self) -> QWidget:
        """Create the Playback settings tab.

        Returns:
            Tab widget.
        """
        tab = QWidget()
        form = QFormLayout(tab)
        form.setSpacing(spacing.md)
        form.setContentsMargins(spacing.md, spacing.md, spacing.md, spacing.md)

        self._skip_interval = QSpinBox()
        self._skip_interval.setRange(MIN_SKIP_INTERVAL, MAX_SKIP_INTERVAL)
        self._skip_interval.setSuffix(" s")
        form.addRow("Skip interval:", self._skip_interval)

        self._report_interval = QSpinBox()
        self._report_interval.setRange(MIN_REPORT_INTERVAL_MS, MAX_REPORT_INTERVAL_MS)
        self._report_interval.setSingleStep(100)
        self._report_interval.setSuffix(" ms")
        form.addRow("Position updates:", self._report_interval)

        return tab

    def _create_appearance_tab(self) -> QWidget:
        """Create the Appearance settings tab.

        Returns:
            Tab widget.
        """
        tab = QWidget()
        form = QFormLayout(tab)
        form.setSpacing(spacing.md)
        form.setContentsMargins(spacing.md, spacing.md, spacing.md, spacing.md)

        self._theme_combo = QComboBox()
        for mode in MODES:
            self._theme_combo.addItem(mode.capitalize(), mode)
        form.addRow("Theme:", self._theme_combo)

        return tab

    # -- Load / Save -----------------------------------------------------------

    def _load(self) -> None:
        """Populate every field from ConfigManager."""
        c = self._config

        self._storage_dir.setText(str(c.get_storage_dir()))
        self._default_artist.setText(c.get_default_artist())
        self._remove_files.setChecked(c.get_remove_files_on_delete())

        self._skip_interval.setValue(c.get_skip_interval())
        self._report_interval.setValue(c.get_report_interval_ms())

        index = self._theme_combo.findData(c.get_theme())
        self._theme_combo.setCurrentIndex(max(index, 0))

    def _save(self) -> None:
        """Write every field back to ConfigManager."""
        c = self._config

        storage_dir = self._storage_dir.text().strip()
        if storage_dir:
            c.set_storage_dir(storage_dir)
        c.set_default_artist(self._default_artist.text())
        c.set_remove_files_on_delete(self._remove_files.isChecked())

        c.set_skip_interval(self._skip_interval.value())
        c.set_report_interval_ms(self._report_interval.value())

        c.set_theme(self._theme_combo.currentData())

        c.sync()

    def _apply(self) -> None:
        """Save settings and notify listeners."""
        self._save()
        self.settings_changed.emit()

    def _ok(self) -> None:
        """Save settings and close the dialog."""
        self._apply()
        self.accept()

    def _browse_storage_dir(self) -> None:
        """Pick the storage folder with a directory dialog."""
        path = QFileDialog.getExistingDirectory(
            self, "Choose Storage Folder", self._storage_dir.text()
        )
        if path:
            self._storage_dir.setText(path)
