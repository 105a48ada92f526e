"""
Enums for the order-book tracker.

This module defines the standardized enum values used throughout the tracker.
These enums represent the semantic vocabulary of the domain and establish
consistent naming between the wire adapter, the core and the display.

"""

from __future__ import annotations

import enum

# =============================================================================
# MARKET STRUCTURE ENUMS
# =============================================================================


class Exchange(str, enum.Enum):
    """
    Supported exchange identifiers.

    Used to route a tracking request to the right feed adapter.
    """

    HITBTC = "hitbtc"


class OrderBookSide(str, enum.Enum):
    """
    Order book side identifiers.

    Represents the side of an order book (bid/buy or ask/sell).
    """

    BID = "bid"  # Buy side (willing to buy at this price or lower)
    ASK = "ask"  # Sell side (willing to sell at this price or higher)


# =============================================================================
# WIRE PROTOCOL ENUMS
# =============================================================================


class ServerCommand(str, enum.Enum):
    """Request methods the client sends to the exchange."""

    GET_SYMBOL = "getSymbol"
    SUBSCRIBE_ORDERBOOK = "subscribeOrderbook"


class NotificationMethod(str, enum.Enum):
    """Notification methods the exchange pushes to the client."""

    SNAPSHOT_ORDERBOOK = "snapshotOrderbook"
    UPDATE_ORDERBOOK = "updateOrderbook"


# =============================================================================
# TRACKING ENUMS
# =============================================================================


class TrackerState(str, enum.Enum):
    """
    Lifecycle of one pair's book tracker.

    Precision must be known before a snapshot can be applied, and a snapshot
    must be applied before updates make sense.
    """

    UNINITIALIZED = "uninitialized"  # No precision yet
    AWAITING_SNAPSHOT = "awaiting_snapshot"  # Precision known, book empty
    TRACKING = "tracking"  # Snapshot applied, consuming updates


class Direction(str, enum.Enum):
    """Direction of change between two values of the same field."""

    UP = "up"
    DOWN = "down"
    UNCHANGED = "unchanged"


class RenderBranch(str, enum.Enum):
    """Which kind of top-of-book line to print."""

    BASELINE = "baseline"  # First line after a snapshot
    PRICE = "price"  # Best bid or best ask price moved
    VOLUME = "volume"  # Prices steady, size at the top changed


class SessionOutcome(str, enum.Enum):
    """How a feed session ended without raising."""

    SERVER_CLOSED = "server_closed"  # Exchange closed the connection
    STOPPED = "stopped"  # Client asked to stop
