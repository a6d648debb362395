"""Reusable UI widgets."""

from untitledgems.ui.widgets.artwork_view import ArtworkView
from untitledgems.ui.widgets.dialogs import CropDialog, EditTrackDialog
from untitledgems.ui.widgets.preferences import PreferencesDialog
from untitledgems.ui.widgets.volume_slider import VolumeSlider

__all__ = ["ArtworkView", "CropDialog", "EditTrackDialog", "PreferencesDialog", "VolumeSlider"]
