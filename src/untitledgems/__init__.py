"""UntitledGems - local audio library and player."""

__version__ = "0.1.0"
