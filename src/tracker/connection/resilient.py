"""
Resilient feed runner with optional automatic reconnection.

This module wraps feed sessions so that, when enabled:
- Transport failures are retried with exponential backoff
- Every attempt starts from a fresh session (and therefore fresh books)
- Server errors and malformed market data are never retried
"""

import asyncio
import logging
from collections.abc import Awaitable, Callable

from websockets.exceptions import WebSocketException

from src.tracker.adapters.hitbtc.stream import HitbtcFeedSession
from src.tracker.config import ConnectionConfig
from src.tracker.enums import SessionOutcome

logger = logging.getLogger(__name__)


class ResilientFeedRunner:
    """
    Runs feed sessions until one ends for a reason that should not be retried.

    With reconnection disabled (the default) this runs exactly one session
    and lets every failure propagate, so the caller can tell a clean close
    from a transport failure.
    """

    def __init__(
        self,
        session_factory: Callable[[], HitbtcFeedSession],
        config: ConnectionConfig,
        sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
    ) -> None:
        """
        Initialize the runner.

        Args:
            session_factory: Builds a new session for each connection attempt
            config: Connection and backoff settings
            sleep: Awaitable delay, replaceable in tests

        """
        self.session_factory = session_factory
        self.config = config
        self._sleep = sleep

        self.current_backoff = config.reconnect_interval
        self.attempts = 0
        self.session: HitbtcFeedSession | None = None
        self.is_running = False

    async def run(self) -> SessionOutcome:
        """
        Run sessions, reconnecting after transport failures if enabled.

        Returns:
            How the last session ended

        Raises:
            TrackerError: From the session, never retried
            OSError, WebSocketException: When reconnection is disabled or
                attempts are exhausted

        """
        self.is_running = True
        try:
            while True:
                self.session = self.session_factory()
                try:
                    outcome = await self.session.run()
                except (OSError, WebSocketException) as e:
                    logger.error(f"Connection failed: {e}")
                    if not self._should_reconnect():
                        raise
                else:
                    if outcome == SessionOutcome.STOPPED or not self._should_reconnect():
                        return outcome

                if self.session.connected:
                    # Reset backoff after a connection that actually opened
                    self.current_backoff = self.config.reconnect_interval

                logger.info(f"Reconnecting in {self.current_backoff} seconds...")
                await self._sleep(self.current_backoff)
                self.current_backoff = min(
                    self.current_backoff * self.config.backoff_factor,
                    self.config.max_reconnect_interval,
                )
        finally:
            self.is_running = False

    async def stop(self) -> None:
        """Stop the current session and do not reconnect."""
        self.is_running = False
        if self.session is not None:
            await self.session.stop()

    def _should_reconnect(self) -> bool:
        if not self.config.reconnect_enabled or not self.is_running:
            return False

        self.attempts += 1
        limit = self.config.max_reconnect_attempts
        if limit and self.attempts > limit:
            logger.error(f"Giving up after {limit} reconnection attempts")
            return False
        return True
