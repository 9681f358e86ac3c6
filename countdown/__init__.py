"""CountDown: a free-form text countdown timer for the macOS menu bar."""

__version__ = "0.1.0"
