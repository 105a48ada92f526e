"""Test helpers for HitBTC feed tests."""

import json
from collections.abc import Iterable
from typing import Any


def symbol_reply(
    request_id: int,
    symbol: str = "XMRBTC",
    tick_size: str = "0.01",
    quantity_increment: str = "0.01",
) -> str:
    """Build a ``getSymbol`` reply frame."""
    return json.dumps(
        {
            "jsonrpc": "2.0",
            "result": {
                "id": symbol,
                "baseCurrency": symbol[:3],
                "quoteCurrency": symbol[3:],
                "quantityIncrement": quantity_increment,
                "tickSize": tick_size,
                "takeLiquidityRate": "0.001",
                "provideLiquidityRate": "-0.0001",
                "feeCurrency": symbol[3:],
            },
            "id": request_id,
        }
    )


def result_reply(request_id: int, result: Any = True) -> str:
    """Build a plain reply frame such as a subscription acknowledgement."""
    return json.dumps({"jsonrpc": "2.0", "result": result, "id": request_id})


def error_reply(
    request_id: int | None,
    code: int = 2001,
    message: str = "Symbol not found",
    description: str | None = "Try get /api/2/public/symbol, to get list of all available symbols.",
) -> str:
    """Build an error frame."""
    error: dict[str, Any] = {"code": code, "message": message}
    if description is not None:
        error["description"] = description
    frame: dict[str, Any] = {"jsonrpc": "2.0", "error": error}
    if request_id is not None:
        frame["id"] = request_id
    return json.dumps(frame)


class OrderbookBuilder:
    """Builder for ``snapshotOrderbook`` and ``updateOrderbook`` frames."""

    def __init__(self, symbol: str = "XMRBTC") -> None:
        """Initialize with an empty book message."""
        self.symbol = symbol
        self.bids: list[dict[str, str]] = []
        self.asks: list[dict[str, str]] = []
        self.sequence = 1
        self.timestamp = "2018-11-19T05:00:28.193Z"

    def with_bid(self, price: str, size: str) -> "OrderbookBuilder":
        """Add a bid level."""
        self.bids.append({"price": price, "size": size})
        return self

    def with_ask(self, price: str, size: str) -> "OrderbookBuilder":
        """Add an ask level."""
        self.asks.append({"price": price, "size": size})
        return self

    def with_bids(self, levels: Iterable[tuple[str, str]]) -> "OrderbookBuilder":
        """Add several bid levels."""
        for price, size in levels:
            self.with_bid(price, size)
        return self

    def with_asks(self, levels: Iterable[tuple[str, str]]) -> "OrderbookBuilder":
        """Add several ask levels."""
        for price, size in levels:
            self.with_ask(price, size)
        return self

    def with_sequence(self, sequence: int) -> "OrderbookBuilder":
        """Set the sequence number."""
        self.sequence = sequence
        return self

    def params(self) -> dict[str, Any]:
        """Build the notification params."""
        return {
            "ask": self.asks,
            "bid": self.bids,
            "symbol": self.symbol,
            "sequence": self.sequence,
            "timestamp": self.timestamp,
        }

    def snapshot(self) -> str:
        """Build as a snapshot frame."""
        return json.dumps(
            {"jsonrpc": "2.0", "method": "snapshotOrderbook", "params": self.params()}
        )

    def update(self) -> str:
        """Build as an update frame."""
        return json.dumps(
            {"jsonrpc": "2.0", "method": "updateOrderbook", "params": self.params()}
        )


def two_level_snapshot(symbol: str = "XMRBTC") -> str:
    """The two-level book used throughout the feed tests."""
    return (
        OrderbookBuilder(symbol)
        .with_bid("100.00", "1.5")
        .with_ask("100.50", "2.0")
        .snapshot()
    )
