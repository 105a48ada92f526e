"""
Order-book tracking service.

This module provides the entry point that turns a list of trading pairs into
a running tracking session. It delegates to exchange-specific feed sessions
while giving the CLI a single call to make.
"""

from collections.abc import Iterable

from src.tracker.adapters.hitbtc.stream import (
    DecisionCallback,
    HitbtcFeedSession,
    StatusCallback,
)
from src.tracker.config import TrackerConfig
from src.tracker.connection.resilient import ResilientFeedRunner
from src.tracker.enums import Exchange, SessionOutcome
from src.tracker.ui.console import LineRenderer


def build_session(
    symbols: Iterable[str],
    config: TrackerConfig,
    on_decision: DecisionCallback,
    on_status: StatusCallback | None = None,
) -> HitbtcFeedSession:
    """
    Create a feed session for the configured exchange.

    Raises:
        ValueError: If the exchange is not supported

    """
    match config.exchange:
        case Exchange.HITBTC:
            return HitbtcFeedSession(
                symbols,
                on_decision=on_decision,
                config=config,
                on_status=on_status,
            )
        case _:
            raise ValueError(f"Unsupported exchange: {config.exchange}")


def build_renderer(symbols: list[str], config: TrackerConfig) -> LineRenderer:
    """
    Create the terminal renderer for the given pairs.

    The symbol column defaults to shown only when more than one pair is
    tracked.
    """
    show_symbol = config.display.show_symbol
    if show_symbol is None:
        show_symbol = len(symbols) > 1
    return LineRenderer(show_symbol=show_symbol, color=config.display.color)


def build_runner(
    symbols: list[str],
    config: TrackerConfig,
    on_decision: DecisionCallback | None = None,
    on_status: StatusCallback | None = None,
) -> ResilientFeedRunner:
    """
    Wire sessions, display and reconnection policy together.

    Without an ``on_decision`` callback, lines are printed to the terminal.
    """
    if on_decision is None:
        renderer = build_renderer(symbols, config)
        on_decision = renderer.render
        on_status = on_status or renderer.banner

    decision_callback = on_decision
    return ResilientFeedRunner(
        lambda: build_session(symbols, config, decision_callback, on_status),
        config.connection,
    )


async def track_order_books(
    symbols: list[str],
    config: TrackerConfig | None = None,
    on_decision: DecisionCallback | None = None,
    on_status: StatusCallback | None = None,
) -> SessionOutcome:
    """
    Track the top of book of the given pairs until the stream ends.

    Args:
        symbols: Trading pairs to track
        config: Tracker configuration (defaults to environment)
        on_decision: Callback for each line to print (defaults to the terminal)
        on_status: Callback for connection status messages

    Returns:
        How the stream ended

    """
    config = config or TrackerConfig.from_env()
    runner = build_runner(symbols, config, on_decision, on_status)
    return await runner.run()
