"""HitBTC order-book tracker package."""

from src.tracker.core import BookTracker, RenderDecision
from src.tracker.model import OrderBook
from src.tracker.service import track_order_books

__all__ = ["BookTracker", "OrderBook", "RenderDecision", "track_order_books"]
