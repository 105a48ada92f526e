"""
Book updater for one subscribed trading pair.

The tracker owns the pair's order book and walks it through its lifecycle:
precision first, then a snapshot, then a stream of updates. Each update
captures the top of book before and after the deltas and hands both to the
change detector, so the whole book is never rescanned.
"""

import logging
from collections.abc import Sequence

from pydantic import BaseModel, ConfigDict

from src.tracker.core.detector import RenderDecision, baseline, detect_change
from src.tracker.domain.primitives import Precision
from src.tracker.enums import TrackerState
from src.tracker.exceptions import (
    BookNotInitializedError,
    MissingPrecisionError,
    PrecisionConflictError,
)
from src.tracker.model.book import OrderBook
from src.tracker.model.types import Level, RawLevel

logger = logging.getLogger(__name__)


class SnapshotResult(BaseModel):
    """Top of book after a snapshot plus the baseline line to print."""

    best_bid: Level | None
    best_ask: Level | None
    decision: RenderDecision | None = None

    model_config = ConfigDict(frozen=True)


class BookTracker:
    """
    Applies snapshot and update messages to one pair's book.

    One instance per active subscription, owned by whatever drives the
    message loop. Messages must be fed one at a time in arrival order.
    """

    def __init__(self, symbol: str, volume_mode: bool = False) -> None:
        """
        Initialize a tracker with no precision and no book.

        Args:
            symbol: Trading pair identifier (e.g. ``"XMRBTC"``)
            volume_mode: Whether best sizes are displayed and tracked

        """
        self.symbol = symbol
        self.volume_mode = volume_mode
        self.precision: Precision | None = None
        self.book: OrderBook | None = None
        self.state = TrackerState.UNINITIALIZED

    def set_precision(self, precision: Precision) -> None:
        """
        Record the pair's precision.

        Raises:
            PrecisionConflictError: If a different precision was already set

        """
        if self.precision is not None:
            if precision != self.precision:
                raise PrecisionConflictError(
                    f"{self.symbol}: precision already set to {self.precision}, "
                    f"got {precision}"
                )
            return

        self.precision = precision
        self.book = OrderBook(self.symbol, precision)
        self.state = TrackerState.AWAITING_SNAPSHOT
        logger.debug(f"{self.symbol}: precision {precision}")

    def on_snapshot(
        self,
        bids: Sequence[RawLevel],
        asks: Sequence[RawLevel],
        sequence: int | None = None,
    ) -> SnapshotResult:
        """
        Replace the book with a full snapshot.

        Returns:
            Best bid and best ask after the snapshot, with a baseline line
            when the book is two-sided

        Raises:
            MissingPrecisionError: If precision is not known yet
            MalformedDecimalError: If any level fails to parse

        """
        book = self._require_book()
        book.apply_snapshot(bids, asks, sequence)
        self.state = TrackerState.TRACKING

        top = book.top_of_book()
        if not top.is_two_sided:
            logger.warning(
                f"{self.symbol}: one-sided snapshot "
                f"(bids={len(book.bids)}, asks={len(book.asks)})"
            )

        return SnapshotResult(
            best_bid=top.bid,
            best_ask=top.ask,
            decision=baseline(top, self.volume_mode),
        )

    def on_update(
        self,
        bids: Sequence[RawLevel],
        asks: Sequence[RawLevel],
        sequence: int | None = None,
    ) -> RenderDecision | None:
        """
        Apply incremental deltas and decide whether the top of book changed.

        Returns:
            The line to print, or None when nothing visible changed or the
            book was not two-sided before and after

        Raises:
            MissingPrecisionError: If precision is not known yet
            BookNotInitializedError: If no snapshot has been applied
            MalformedDecimalError: If any level fails to parse

        """
        book = self._require_book()
        if self.state != TrackerState.TRACKING:
            raise BookNotInitializedError(
                f"{self.symbol}: update received before the first snapshot"
            )

        before = book.top_of_book()
        book.apply_update(bids, asks, sequence)
        after = book.top_of_book()

        return detect_change(before, after, self.volume_mode)

    def _require_book(self) -> OrderBook:
        if self.book is None:
            raise MissingPrecisionError(
                f"{self.symbol}: book data received before precision was known"
            )
        return self.book

    def __repr__(self) -> str:
        return f"BookTracker({self.symbol!r}, state={self.state.value})"
