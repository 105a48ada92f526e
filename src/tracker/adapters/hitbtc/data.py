"""
HitBTC WebSocket API Pydantic Models.

This module implements Pydantic models for the HitBTC v2 JSON-RPC envelope:
the requests the tracker sends, the replies and errors it receives and the
order-book notifications it feeds to the book trackers.

Key design principles:
- Wire names are kept as aliases, Python names are snake_case
- Prices and sizes stay strings until a book parses them at pair precision
- Frames are classified by an explicit discriminant (``method``, ``error``,
  ``id`` + ``result``) before any model is validated
"""

import json
from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, Field, ValidationError

from src.tracker.domain.primitives import Precision
from src.tracker.enums import NotificationMethod, OrderBookSide, ServerCommand
from src.tracker.exceptions import (
    MalformedBookFrameError,
    ProtocolError,
    ServerError,
)
from src.tracker.model.types import RawLevel


# Request Models
class Request(BaseModel):
    """A JSON-RPC request sent to the exchange."""

    method: ServerCommand
    params: dict[str, Any] = Field(default_factory=dict)
    id: int

    model_config = ConfigDict(frozen=True)

    @classmethod
    def get_symbol(cls, symbol: str, request_id: int) -> "Request":
        """Ask for a pair's metadata (tick size, quantity increment)."""
        return cls(
            method=ServerCommand.GET_SYMBOL, params={"symbol": symbol}, id=request_id
        )

    @classmethod
    def subscribe_orderbook(cls, symbol: str, request_id: int) -> "Request":
        """Subscribe to a pair's order-book snapshot and updates."""
        return cls(
            method=ServerCommand.SUBSCRIBE_ORDERBOOK,
            params={"symbol": symbol},
            id=request_id,
        )

    @property
    def symbol(self) -> str | None:
        """Get the symbol the request is about."""
        return self.params.get("symbol")

    def to_json(self) -> str:
        """Serialize for the wire."""
        return self.model_dump_json()


# Reply Payload Models
class SymbolInfo(BaseModel):
    """
    Pair metadata returned by ``getSymbol``.

    The tick size and quantity increment are power-of-ten literals that fix
    the precision of every price and size for the pair.
    """

    id: str
    base_currency: str = Field(alias="baseCurrency", default="")
    quote_currency: str = Field(alias="quoteCurrency", default="")
    quantity_increment: str = Field(alias="quantityIncrement")
    tick_size: str = Field(alias="tickSize")
    take_liquidity_rate: str | None = Field(alias="takeLiquidityRate", default=None)
    provide_liquidity_rate: str | None = Field(
        alias="provideLiquidityRate", default=None
    )
    fee_currency: str | None = Field(alias="feeCurrency", default=None)

    model_config = ConfigDict(extra="ignore", populate_by_name=True)

    @property
    def precision(self) -> Precision:
        """
        Get the pair's precision.

        Raises:
            InvalidIncrementError: If either increment is not a power of ten

        """
        return Precision.from_increments(self.tick_size, self.quantity_increment)


class ErrorDetail(BaseModel):
    """Error object of a failed request."""

    code: int
    message: str
    description: str | None = None

    model_config = ConfigDict(extra="ignore")

    def to_exception(self) -> ServerError:
        """Convert to the exception raised to the caller."""
        return ServerError(self.code, self.message, self.description)


# Order Book Notification Models
class OrderbookParams(BaseModel):
    """Payload of snapshot and update notifications."""

    symbol: str
    ask: list[RawLevel] = Field(default_factory=list)
    bid: list[RawLevel] = Field(default_factory=list)
    sequence: int | None = None

    model_config = ConfigDict(extra="ignore")


# Decoded Frames
class SnapshotMessage(BaseModel):
    """Full replacement of a pair's book."""

    method: Literal["snapshotOrderbook"]
    params: OrderbookParams

    model_config = ConfigDict(extra="ignore")


class UpdateMessage(BaseModel):
    """Incremental deltas for a pair's book."""

    method: Literal["updateOrderbook"]
    params: OrderbookParams

    model_config = ConfigDict(extra="ignore")


class ReplyMessage(BaseModel):
    """Successful answer to a request, correlated by ``id``."""

    id: int
    result: Any

    model_config = ConfigDict(extra="ignore")


class ErrorMessage(BaseModel):
    """Failed answer to a request (``id`` may be missing)."""

    id: int | None = None
    error: ErrorDetail

    model_config = ConfigDict(extra="ignore")


class UnknownMessage(BaseModel):
    """Notification with a method the tracker does not handle."""

    method: str
    params: Any = None

    model_config = ConfigDict(extra="ignore")


FeedMessage = (
    SnapshotMessage | UpdateMessage | ReplyMessage | ErrorMessage | UnknownMessage
)


def _book_frame_error(method: str, error: ValidationError) -> MalformedBookFrameError:
    """Locate the first invalid field of a snapshot or update notification."""
    detail = error.errors()[0]
    loc = detail["loc"]
    side = index = field = None
    # ("params", "bid", 0, "size") for a level, ("params", "symbol") otherwise
    if len(loc) >= 2 and loc[1] in (OrderBookSide.BID, OrderBookSide.ASK):
        side = str(loc[1])
        if len(loc) >= 3 and isinstance(loc[2], int):
            index = loc[2]
        if len(loc) >= 4 and isinstance(loc[3], str):
            field = loc[3]
    elif loc:
        field = ".".join(str(part) for part in loc)
    return MalformedBookFrameError(
        repr(detail.get("input")),
        method,
        reason=detail["msg"],
        side=side,
        index=index,
        field=field,
    )


def decode_frame(text: str | bytes) -> FeedMessage:
    """
    Decode one text frame into a typed message.

    The frame kind is chosen from the fields present, in this order:
    ``method`` (notification), ``error`` (failed request), ``id`` with
    ``result`` (reply).

    Raises:
        MalformedBookFrameError: If a snapshot or update notification does
            not match the expected shape
        ProtocolError: If the frame is not JSON, has no recognizable
            discriminant or any other message does not match its shape

    """
    try:
        data = json.loads(text)
    except json.JSONDecodeError as e:
        raise ProtocolError(f"Invalid JSON frame: {e}") from e

    if not isinstance(data, dict):
        raise ProtocolError(f"Expected a JSON object, got {type(data).__name__}")

    if "method" in data:
        method = data["method"]
        match method:
            case NotificationMethod.SNAPSHOT_ORDERBOOK:
                model: type[SnapshotMessage | UpdateMessage] = SnapshotMessage
            case NotificationMethod.UPDATE_ORDERBOOK:
                model = UpdateMessage
            case _:
                try:
                    return UnknownMessage.model_validate(data)
                except ValidationError as e:
                    raise ProtocolError(f"Malformed frame: {e}") from e
        try:
            return model.model_validate(data)
        except ValidationError as e:
            raise _book_frame_error(method, e) from e

    try:
        if "error" in data:
            return ErrorMessage.model_validate(data)
        if "id" in data and "result" in data:
            return ReplyMessage.model_validate(data)
    except ValidationError as e:
        raise ProtocolError(f"Malformed frame: {e}") from e

    raise ProtocolError("Frame has neither method, error nor result")
