"""Terminal output."""

from src.tracker.ui.console import LineRenderer

__all__ = ["LineRenderer"]
