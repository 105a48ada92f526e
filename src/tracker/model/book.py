"""
Order book state management with snapshot and incremental update support.

This module holds the mutable mirror of one trading pair's book. Bids and asks
are kept in sorted mappings keyed by exact Price values so the top of book is
an O(log n) lookup and ordering is always numeric.
"""

from collections.abc import Iterable, Sequence
from datetime import UTC, datetime

from sortedcontainers import SortedDict

from src.tracker.domain.primitives import Precision, Price, Size
from src.tracker.enums import OrderBookSide
from src.tracker.exceptions import MalformedDecimalError
from src.tracker.model.types import Level, RawLevel, TopOfBook


class OrderBook:
    """
    Mutable order book for a single trading pair.

    Created empty, fully replaced by a snapshot and incrementally mutated by
    updates. A stored size is never zero: a zero size on the wire means the
    level is gone.
    """

    def __init__(self, symbol: str, precision: Precision) -> None:
        """Initialize an empty book quoted at the given precision."""
        self.symbol = symbol
        self.precision = precision
        self.bids: SortedDict = SortedDict()
        self.asks: SortedDict = SortedDict()
        self.sequence: int | None = None
        self.last_update = datetime.now(UTC)

    def apply_snapshot(
        self,
        bids: Sequence[RawLevel],
        asks: Sequence[RawLevel],
        sequence: int | None = None,
    ) -> None:
        """
        Replace the entire book with snapshot data.

        Every level is parsed before anything is replaced, so a malformed
        literal leaves the previous state untouched. Zero-size levels are
        dropped to keep the no-zero-entries invariant.

        Raises:
            MalformedDecimalError: If any price or size fails to parse

        """
        new_bids = SortedDict(
            (price, size)
            for price, size in self._parse_side(OrderBookSide.BID, bids)
            if not size.is_zero()
        )
        new_asks = SortedDict(
            (price, size)
            for price, size in self._parse_side(OrderBookSide.ASK, asks)
            if not size.is_zero()
        )

        self.bids = new_bids
        self.asks = new_asks
        self.sequence = sequence
        self.last_update = datetime.now(UTC)

    def apply_update(
        self,
        bids: Sequence[RawLevel],
        asks: Sequence[RawLevel],
        sequence: int | None = None,
    ) -> None:
        """
        Apply incremental deltas to both sides.

        A zero size removes the level (a missing level is not an error),
        anything else inserts or overwrites it. Deltas are applied in the
        order given; the whole message is parsed first so a malformed entry
        leaves the book unchanged.

        Raises:
            MalformedDecimalError: If any price or size fails to parse

        """
        bid_deltas = self._parse_side(OrderBookSide.BID, bids)
        ask_deltas = self._parse_side(OrderBookSide.ASK, asks)

        self._apply_deltas(self.bids, bid_deltas)
        self._apply_deltas(self.asks, ask_deltas)

        if sequence is not None:
            self.sequence = sequence
        self.last_update = datetime.now(UTC)

    def best_bid(self) -> Level | None:
        """Get the highest bid level."""
        if not self.bids:
            return None
        price, size = self.bids.peekitem(-1)
        return Level(price=price, size=size)

    def best_ask(self) -> Level | None:
        """Get the lowest ask level."""
        if not self.asks:
            return None
        price, size = self.asks.peekitem(0)
        return Level(price=price, size=size)

    def top_of_book(self) -> TopOfBook:
        """Get best bid and best ask together."""
        return TopOfBook(bid=self.best_bid(), ask=self.best_ask())

    def levels(self, side: OrderBookSide) -> list[Level]:
        """Get all levels of one side, best price first."""
        if side == OrderBookSide.BID:
            items: Iterable[tuple[Price, Size]] = (
                (price, self.bids[price]) for price in reversed(self.bids)
            )
        else:
            items = self.asks.items()
        return [Level(price=price, size=size) for price, size in items]

    def depth(self) -> tuple[int, int]:
        """Get the number of bid and ask levels."""
        return len(self.bids), len(self.asks)

    def _parse_side(
        self, side: OrderBookSide, levels: Sequence[RawLevel]
    ) -> list[tuple[Price, Size]]:
        """Parse one side's wire levels, annotating failures with their location."""
        parsed = []
        for index, level in enumerate(levels):
            try:
                price = self.precision.parse_price(level.price)
            except MalformedDecimalError as e:
                raise e.at(side.value, index, "price") from e
            try:
                size = self.precision.parse_size(level.size)
            except MalformedDecimalError as e:
                raise e.at(side.value, index, "size") from e
            parsed.append((price, size))
        return parsed

    @staticmethod
    def _apply_deltas(book: SortedDict, deltas: list[tuple[Price, Size]]) -> None:
        for price, size in deltas:
            if size.is_zero():
                book.pop(price, None)
            else:
                book[price] = size

    def __repr__(self) -> str:
        bids, asks = self.depth()
        return f"OrderBook({self.symbol!r}, bids={bids}, asks={asks})"
