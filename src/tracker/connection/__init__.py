"""Resilient WebSocket connection management."""

from src.tracker.connection.resilient import ResilientFeedRunner

__all__ = [
    "ResilientFeedRunner",
]
