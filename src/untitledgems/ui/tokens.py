"""Design tokens: spacing, sizing, and typography for all widgets.

Color tokens live in theme.py (ThemePalette). Layout tokens live here.

Usage:
    from untitledgems.ui.tokens import sizing, spacing, typography

    layout.setContentsMargins(spacing.lg, spacing.lg, spacing.lg, spacing.lg)
    title.setStyleSheet(f"font-size: {typography.title}pt;")
    artwork.setFixedSize(sizing.artwork_thumb, sizing.artwork_thumb)
"""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class SpacingTokens:
    """Spacing scale based on a 4px base unit."""

    xs: int = 2  # Tight: inner padding
    sm: int = 4  # Between label lines
    md: int = 8  # Row padding, small gaps
    lg: int = 16  # Panel padding
    xl: int = 28  # Player content margins
    xxl: int = 60  # Gap between transport buttons


@dataclass(frozen=True)
class TypographyTokens:
    """Font size scale in points and font family stack."""

    font_family: str = "'SF Pro Text', 'Segoe UI', 'Helvetica Neue', sans-serif"
    caption: int = 9  # Time labels
    body: int = 11  # Row subtitles, artist
    subtitle: int = 12  # Row titles
    title: int = 15  # Player title, empty state headline
    heading: int = 18  # Dialog titles
    transport: int = 22  # Skip buttons
    play: int = 26  # Play/pause button


@dataclass(frozen=True)
class SizingTokens:
    """Widget sizing constants in pixels."""

    border_radius_sm: int = 6  # Buttons
    border_radius_md: int = 12  # Row artwork, dialogs
    border_radius_lg: int = 26  # Player artwork
    artwork_thumb: int = 48  # Library row artwork
    artwork_edit: int = 80  # Edit dialog preview
    artwork_player: int = 320  # Player artwork
    crop_preview: int = 280  # Crop dialog preview
    control_button: int = 44  # Skip buttons
    play_button: int = 70  # Play/pause button
    panel_min_library: int = 260  # Min library panel width


# Module-level singletons: import these in widgets
spacing = SpacingTokens()
typography = TypographyTokens()
sizing = SizingTokens()
