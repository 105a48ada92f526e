"""
Common types for order-book models.

This module provides the price level shapes shared by the wire adapters,
the order book store and the change detector.
"""

from typing import Any

from pydantic import BaseModel, ConfigDict, model_validator

from src.tracker.domain.primitives import Price, Size


class RawLevel(BaseModel):
    """
    A price level exactly as it arrives on the wire.

    Price and size stay as decimal strings until the book parses them at the
    pair's precision. Accepts ``{"price": ..., "size": ...}`` objects as well
    as two-item ``[price, size]`` sequences.
    """

    price: str
    size: str

    model_config = ConfigDict(frozen=True, extra="ignore")

    @model_validator(mode="before")
    @classmethod
    def accept_pairs(cls, data: Any) -> Any:
        """Allow ``(price, size)`` tuples in place of objects."""
        if isinstance(data, list | tuple):
            if len(data) != 2:
                raise ValueError(f"Expected a (price, size) pair, got {data!r}")
            return {"price": data[0], "size": data[1]}
        return data


class Level(BaseModel):
    """A parsed price level held in the book."""

    price: Price
    size: Size

    model_config = ConfigDict(frozen=True)

    def __str__(self) -> str:
        return f"{self.size} @ {self.price}"


class TopOfBook(BaseModel):
    """Best bid and best ask at one point in time; either may be absent."""

    bid: Level | None = None
    ask: Level | None = None

    model_config = ConfigDict(frozen=True)

    @property
    def is_two_sided(self) -> bool:
        """Check if both a best bid and a best ask exist."""
        return self.bid is not None and self.ask is not None
