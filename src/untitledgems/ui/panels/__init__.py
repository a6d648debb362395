"""UI panels for the main window."""

from untitledgems.ui.panels.library import LibraryPanel
from untitledgems.ui.panels.player import PlayerPanel

__all__ = ["LibraryPanel", "PlayerPanel"]
