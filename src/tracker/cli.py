"""
Command-line entry point for the order-book tracker.

Usage:
    hitbtc-track XMRBTC
    hitbtc-track -v XMRBTC ETHBTC

Exit codes distinguish a clean end of stream from the ways tracking can fail.
"""

from __future__ import annotations

import argparse
import asyncio
import logging
import re
import sys

from pydantic import ValidationError
from rich.console import Console
from websockets.exceptions import WebSocketException

from src.tracker.config import TrackerConfig
from src.tracker.exceptions import MalformedDecimalError, TrackerError
from src.tracker.service.track import build_renderer, build_runner

logger = logging.getLogger(__name__)

EXIT_OK = 0
EXIT_MALFORMED_DATA = 1
EXIT_SERVER_ERROR = 2
EXIT_TRANSPORT_ERROR = 3
EXIT_USAGE = 64

# Symbols are short exchange tokens of at most 8 bytes
SYMBOL_PATTERN = re.compile(r"[A-Z0-9]{1,8}")

LOG_FORMAT = "%(asctime)s | %(name)-30s | %(levelname)-8s | %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"


def parse_symbol(value: str) -> str:
    """Normalize and validate a trading pair argument."""
    symbol = value.strip().upper()
    if not SYMBOL_PATTERN.fullmatch(symbol):
        raise argparse.ArgumentTypeError(
            f"invalid symbol {value!r} (expected 1-8 letters or digits, e.g. XMRBTC)"
        )
    return symbol


def build_parser() -> argparse.ArgumentParser:
    """Create the argument parser."""
    parser = argparse.ArgumentParser(
        prog="hitbtc-track",
        description="Print best bid/ask changes of HitBTC order books.",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
    hitbtc-track XMRBTC
    hitbtc-track -v XMRBTC
    hitbtc-track --reconnect ETHBTC BTCUSD
        """,
    )
    parser.add_argument(
        "symbols",
        nargs="+",
        type=parse_symbol,
        metavar="SYMBOL",
        help="Trading pair(s) to track (e.g. XMRBTC)",
    )
    parser.add_argument(
        "-v",
        "--volume",
        action="store_true",
        default=None,
        help="Also print best bid/ask sizes and highlight size changes",
    )
    parser.add_argument(
        "--reconnect",
        action="store_true",
        default=None,
        help="Reconnect with backoff after connection failures",
    )
    parser.add_argument(
        "--skip-malformed-updates",
        action="store_true",
        default=None,
        help="Drop updates with unparseable levels instead of exiting",
    )
    parser.add_argument(
        "--no-color",
        action="store_true",
        help="Print without highlighting",
    )
    parser.add_argument(
        "--log-level",
        choices=["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"],
        help="Log level for stderr diagnostics",
    )
    return parser


def apply_arguments(config: TrackerConfig, args: argparse.Namespace) -> TrackerConfig:
    """Override environment configuration with command-line flags."""
    display_updates: dict[str, object] = {}
    if args.volume is not None:
        display_updates["volume_mode"] = args.volume
    if args.no_color:
        display_updates["color"] = False

    connection_updates: dict[str, object] = {}
    if args.reconnect is not None:
        connection_updates["reconnect_enabled"] = args.reconnect

    updates: dict[str, object] = {
        "display": config.display.model_copy(update=display_updates),
        "connection": config.connection.model_copy(update=connection_updates),
    }
    if args.skip_malformed_updates is not None:
        updates["skip_malformed_updates"] = args.skip_malformed_updates
    if args.log_level is not None:
        updates["log_level"] = args.log_level

    return config.model_copy(update=updates)


def configure_logging(level: str) -> None:
    """Send diagnostics to stderr; stdout carries only book lines."""
    handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(logging.Formatter(LOG_FORMAT, datefmt=DATE_FORMAT))

    root = logging.getLogger()
    root.handlers[:] = [handler]
    root.setLevel(level)


def main(argv: list[str] | None = None) -> int:
    """Run the tracker and return the process exit code."""
    parser = build_parser()
    try:
        args = parser.parse_args(argv)
    except SystemExit as e:
        # argparse exits 2 on bad usage, which would read as a server error
        return EXIT_USAGE if e.code else EXIT_OK
    errors = Console(stderr=True, highlight=False)

    try:
        config = apply_arguments(TrackerConfig.from_env(), args)
    except ValidationError as e:
        errors.print(f"invalid configuration: {e}", markup=False)
        return EXIT_USAGE

    configure_logging("DEBUG" if config.debug else config.log_level)

    symbols = list(dict.fromkeys(args.symbols))
    renderer = build_renderer(symbols, config)
    runner = build_runner(symbols, config, renderer.render, renderer.banner)

    try:
        asyncio.run(runner.run())
    except KeyboardInterrupt:
        renderer.banner("Disconnected")
        return EXIT_OK
    except MalformedDecimalError as e:
        logger.debug("malformed market data", exc_info=True)
        errors.print(f"malformed market data: {e}", markup=False)
        return EXIT_MALFORMED_DATA
    except TrackerError as e:
        logger.debug("tracking failed", exc_info=True)
        errors.print(str(e), markup=False)
        return EXIT_SERVER_ERROR
    except (OSError, WebSocketException) as e:
        logger.debug("connection failed", exc_info=True)
        errors.print(f"websockets error: {e}", markup=False)
        return EXIT_TRANSPORT_ERROR

    return EXIT_OK


if __name__ == "__main__":
    sys.exit(main())
