"""Tracking service entry points."""

from src.tracker.service.track import (
    build_renderer,
    build_runner,
    build_session,
    track_order_books,
)

__all__ = ["build_renderer", "build_runner", "build_session", "track_order_books"]
