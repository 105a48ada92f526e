"""Book updater and top-of-book change detection."""

from src.tracker.core.detector import (
    FieldChange,
    RenderDecision,
    baseline,
    compare,
    detect_change,
    select_branch,
)
from src.tracker.core.updater import BookTracker, SnapshotResult

__all__ = [
    "BookTracker",
    "FieldChange",
    "RenderDecision",
    "SnapshotResult",
    "baseline",
    "compare",
    "detect_change",
    "select_branch",
]
