"""Fantasy roster lineup optimizer."""

__version__ = "0.1.0"
