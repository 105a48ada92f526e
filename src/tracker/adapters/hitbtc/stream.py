"""
HitBTC WebSocket streaming integration.

This module owns one connection to the HitBTC feed. It requests each pair's
metadata, subscribes once the precision is known, decodes every frame and
feeds order-book messages to the per-pair book trackers in arrival order.
"""

import logging
from collections.abc import Callable, Iterable
from typing import Any

import websockets
from pydantic import ValidationError

from src.tracker.adapters.hitbtc.data import (
    ErrorMessage,
    OrderbookParams,
    ReplyMessage,
    Request,
    SnapshotMessage,
    SymbolInfo,
    UnknownMessage,
    UpdateMessage,
    decode_frame,
)
from src.tracker.config import TrackerConfig
from src.tracker.core.detector import RenderDecision
from src.tracker.core.updater import BookTracker
from src.tracker.enums import NotificationMethod, ServerCommand, SessionOutcome
from src.tracker.exceptions import (
    MalformedBookFrameError,
    MalformedDecimalError,
    ProtocolError,
    SubscriptionRejectedError,
)

logger = logging.getLogger(__name__)

DecisionCallback = Callable[[str, RenderDecision], None]
StatusCallback = Callable[[str], None]


class HitbtcFeedSession:
    """
    Handles one HitBTC WebSocket connection and the books it feeds.

    This class:
    - Sends ``getSymbol`` for every pair, then ``subscribeOrderbook`` once
      the pair's precision has arrived
    - Correlates replies with requests by id, never by shape
    - Applies snapshots and updates through one BookTracker per pair
    - Reports printable top-of-book changes through a callback

    Books live only as long as the session: a new connection starts from
    fresh trackers.
    """

    def __init__(
        self,
        symbols: Iterable[str],
        on_decision: DecisionCallback,
        config: TrackerConfig | None = None,
        on_status: StatusCallback | None = None,
        connect: Callable[..., Any] = websockets.connect,
    ) -> None:
        """
        Initialize the session.

        Args:
            symbols: Pairs to track (e.g. ``["XMRBTC"]``)
            on_decision: Callback for each line to print
            config: Tracker configuration (defaults to environment)
            on_status: Optional callback for connection status messages
            connect: WebSocket connect function, replaceable in tests

        """
        self.config = config or TrackerConfig.from_env()
        self.on_decision = on_decision
        self.on_status = on_status
        self._connect = connect

        volume_mode = self.config.display.volume_mode
        self.trackers: dict[str, BookTracker] = {
            symbol: BookTracker(symbol, volume_mode=volume_mode) for symbol in symbols
        }

        self._next_id = 1
        self._pending: dict[int, Request] = {}
        self._ws: Any = None
        self.connected = False
        self.is_stopping = False

    # ------------------------------------------------------------------
    # Connection
    # ------------------------------------------------------------------

    async def run(self) -> SessionOutcome:
        """
        Connect, subscribe and process frames until the stream ends.

        Returns:
            SERVER_CLOSED when the exchange closed the connection, STOPPED
            when stop() was called

        Raises:
            TrackerError: On server errors or malformed book data
            OSError, websockets.WebSocketException: On transport failures

        """
        conn = self.config.connection
        logger.info(f"Connecting to {conn.ws_url}...")

        async with self._connect(
            conn.ws_url,
            max_size=conn.max_frame_size,
            ping_interval=conn.ping_interval,
            ping_timeout=conn.ping_timeout,
            open_timeout=conn.open_timeout,
        ) as ws:
            self._ws = ws
            self.connected = True
            self._status("Connected")

            try:
                await self._send(self.startup_requests())
                async for frame in ws:
                    await self._send(self.handle_frame(frame))
            finally:
                self._ws = None

        if self.is_stopping:
            return SessionOutcome.STOPPED

        self._status("Server disconnected")
        return SessionOutcome.SERVER_CLOSED

    async def stop(self) -> None:
        """Close the connection; run() then returns STOPPED."""
        self.is_stopping = True
        if self._ws is not None:
            await self._ws.close()

    async def _send(self, requests: list[Request]) -> None:
        for request in requests:
            logger.debug(f"sending: {request.to_json()}")
            await self._ws.send(request.to_json())

    def _status(self, message: str) -> None:
        logger.info(message)
        if self.on_status:
            self.on_status(message)

    # ------------------------------------------------------------------
    # Requests
    # ------------------------------------------------------------------

    def startup_requests(self) -> list[Request]:
        """Metadata requests for every tracked pair."""
        return [
            self._request(Request.get_symbol, symbol) for symbol in self.trackers
        ]

    def _request(self, factory: Callable[[str, int], Request], symbol: str) -> Request:
        request = factory(symbol, self._next_id)
        self._pending[request.id] = request
        self._next_id += 1
        return request

    # ------------------------------------------------------------------
    # Frames
    # ------------------------------------------------------------------

    def handle_frame(self, frame: str | bytes) -> list[Request]:
        """
        Process one frame from the exchange.

        Args:
            frame: Raw WebSocket frame

        Returns:
            Follow-up requests to send

        Raises:
            ServerError: If the exchange reports an error or rejects a
                subscription
            MalformedDecimalError: If book data cannot be parsed or a book
                notification has the wrong shape (updates
                are dropped instead when ``skip_malformed_updates`` is set)
            TrackerError: On any other precondition violation

        """
        if isinstance(frame, bytes):
            logger.info(f"got binary: {frame!r}")
            return []

        try:
            message = decode_frame(frame)
        except MalformedBookFrameError as e:
            if e.method == NotificationMethod.UPDATE_ORDERBOOK:
                self._drop_or_raise(e)
                return []
            raise
        except ProtocolError as e:
            logger.warning(f"got unknown message: {frame} ({e})")
            return []

        logger.debug(f"message: {message!r}")

        match message:
            case SnapshotMessage():
                self._handle_snapshot(message.params)
            case UpdateMessage():
                self._handle_update(message.params)
            case ReplyMessage():
                return self._handle_reply(message)
            case ErrorMessage():
                if message.id is not None:
                    self._pending.pop(message.id, None)
                raise message.error.to_exception()
            case UnknownMessage():
                logger.info(f"ignoring notification: {message.method}")

        return []

    def _handle_reply(self, reply: ReplyMessage) -> list[Request]:
        request = self._pending.pop(reply.id, None)
        if request is None:
            logger.info(f"got reply: {reply.result!r}")
            return []

        symbol = request.symbol or ""

        match request.method:
            case ServerCommand.GET_SYMBOL:
                try:
                    info = SymbolInfo.model_validate(reply.result)
                except ValidationError as e:
                    raise ProtocolError(f"{symbol}: bad symbol info: {e}") from e
                logger.debug(f"symbol info: {info!r}")
                self.trackers[symbol].set_precision(info.precision)
                return [self._request(Request.subscribe_orderbook, symbol)]
            case ServerCommand.SUBSCRIBE_ORDERBOOK:
                if reply.result is not True:
                    raise SubscriptionRejectedError(symbol)
                logger.info(f"Subscribed to {symbol} order book")

        return []

    def _handle_snapshot(self, params: OrderbookParams) -> None:
        tracker = self._tracker_for(params.symbol)
        if tracker is None:
            return

        result = tracker.on_snapshot(params.bid, params.ask, params.sequence)
        logger.debug(
            f"{params.symbol}: snapshot applied "
            f"(best bid {result.best_bid}, best ask {result.best_ask})"
        )
        if result.decision is not None:
            self.on_decision(params.symbol, result.decision)

    def _handle_update(self, params: OrderbookParams) -> None:
        tracker = self._tracker_for(params.symbol)
        if tracker is None:
            return

        try:
            decision = tracker.on_update(params.bid, params.ask, params.sequence)
        except MalformedDecimalError as e:
            self._drop_or_raise(e, params.symbol)
            return

        if decision is not None:
            self.on_decision(params.symbol, decision)

    def _drop_or_raise(
        self, error: MalformedDecimalError, symbol: str | None = None
    ) -> None:
        """Drop a malformed update when configured to, otherwise re-raise."""
        if not self.config.skip_malformed_updates:
            raise error
        prefix = f"{symbol}: " if symbol else ""
        logger.warning(f"{prefix}dropping update: {error}")

    def _tracker_for(self, symbol: str) -> BookTracker | None:
        tracker = self.trackers.get(symbol)
        if tracker is None:
            logger.warning(f"got book data for untracked symbol {symbol}")
        return tracker
