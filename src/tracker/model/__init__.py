"""Order book models."""

from src.tracker.model.book import OrderBook
from src.tracker.model.types import Level, RawLevel, TopOfBook

__all__ = [
    "Level",
    "OrderBook",
    "RawLevel",
    "TopOfBook",
]
