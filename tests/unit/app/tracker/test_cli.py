"""Test the command-line entry point."""

import argparse
from typing import Any

import pytest
from websockets.exceptions import InvalidURI

from src.tracker import cli
from src.tracker.config import TrackerConfig
from src.tracker.enums import SessionOutcome
from src.tracker.exceptions import (
    BookNotInitializedError,
    MalformedBookFrameError,
    MalformedDecimalError,
    ServerError,
)
from src.tracker.ui.console import LineRenderer


class FakeRunner:
    """Runner that ends with a scripted result."""

    def __init__(self, result: Any) -> None:
        self.result = result

    async def run(self) -> SessionOutcome:
        if isinstance(self.result, BaseException):
            raise self.result
        return self.result


@pytest.fixture
def runner_calls(monkeypatch: pytest.MonkeyPatch) -> list[dict[str, Any]]:
    """Record build_runner calls and keep logging configuration untouched."""
    calls: list[dict[str, Any]] = []
    monkeypatch.setattr(cli, "configure_logging", lambda level: None)
    return calls


def use_runner(
    monkeypatch: pytest.MonkeyPatch, calls: list[dict[str, Any]], result: Any
) -> None:
    def build_runner(
        symbols: list[str], config: TrackerConfig, on_decision: Any, on_status: Any
    ) -> FakeRunner:
        calls.append(
            {"symbols": symbols, "config": config, "on_decision": on_decision}
        )
        return FakeRunner(result)

    monkeypatch.setattr(cli, "build_runner", build_runner)


class TestParseSymbol:
    """Test symbol validation."""

    @pytest.mark.parametrize(
        ("value", "expected"),
        [("XMRBTC", "XMRBTC"), ("xmrbtc", "XMRBTC"), (" ethbtc ", "ETHBTC"), ("BTCUSD20", "BTCUSD20")],
    )
    def test_valid(self, value: str, expected: str) -> None:
        """Test normalization."""
        assert cli.parse_symbol(value) == expected

    @pytest.mark.parametrize("value", ["", "XMR-BTC", "VERYLONGSYM", "XMR BTC", "ÄBC"])
    def test_invalid(self, value: str) -> None:
        """Test rejected symbols."""
        with pytest.raises(argparse.ArgumentTypeError):
            cli.parse_symbol(value)


class TestArguments:
    """Test flag handling."""

    def test_flags_override_config(self) -> None:
        """Test that command-line flags win over the environment."""
        args = cli.build_parser().parse_args(
            ["-v", "--reconnect", "--skip-malformed-updates", "--no-color", "--log-level", "INFO", "XMRBTC"]
        )
        config = cli.apply_arguments(TrackerConfig(), args)

        assert config.display.volume_mode is True
        assert config.display.color is False
        assert config.connection.reconnect_enabled is True
        assert config.skip_malformed_updates is True
        assert config.log_level == "INFO"

    def test_absent_flags_keep_config(self) -> None:
        """Test that unset flags leave configured values alone."""
        base = TrackerConfig(skip_malformed_updates=True)
        args = cli.build_parser().parse_args(["XMRBTC"])

        config = cli.apply_arguments(base, args)

        assert config.skip_malformed_updates is True
        assert config.display == base.display
        assert config.connection == base.connection


class TestMain:
    """Test exit codes."""

    def test_server_closed(
        self, monkeypatch: pytest.MonkeyPatch, runner_calls: list[dict[str, Any]]
    ) -> None:
        """Test a clean end of stream."""
        use_runner(monkeypatch, runner_calls, SessionOutcome.SERVER_CLOSED)

        assert cli.main(["xmrbtc", "XMRBTC", "ethbtc"]) == cli.EXIT_OK
        assert runner_calls[0]["symbols"] == ["XMRBTC", "ETHBTC"]

        # And: Lines go to a terminal renderer showing the symbol column
        renderer = runner_calls[0]["on_decision"].__self__
        assert isinstance(renderer, LineRenderer)
        assert renderer.show_symbol is True

    @pytest.mark.parametrize(
        ("error", "code"),
        [
            (MalformedDecimalError("1.2.3", -2), cli.EXIT_MALFORMED_DATA),
            (
                MalformedBookFrameError("0", "updateOrderbook", side="bid", index=0),
                cli.EXIT_MALFORMED_DATA,
            ),
            (ServerError(2001, "Symbol not found"), cli.EXIT_SERVER_ERROR),
            (BookNotInitializedError("XMRBTC"), cli.EXIT_SERVER_ERROR),
            (ConnectionRefusedError("refused"), cli.EXIT_TRANSPORT_ERROR),
            (InvalidURI("ws://", "bad"), cli.EXIT_TRANSPORT_ERROR),
        ],
    )
    def test_failures(
        self,
        monkeypatch: pytest.MonkeyPatch,
        runner_calls: list[dict[str, Any]],
        capsys: pytest.CaptureFixture[str],
        error: Exception,
        code: int,
    ) -> None:
        """Test that each failure kind has its own exit code."""
        use_runner(monkeypatch, runner_calls, error)

        assert cli.main(["XMRBTC"]) == code
        captured = capsys.readouterr()
        assert captured.out == ""
        assert captured.err != ""

    def test_interrupt(
        self,
        monkeypatch: pytest.MonkeyPatch,
        runner_calls: list[dict[str, Any]],
        capsys: pytest.CaptureFixture[str],
    ) -> None:
        """Test that Ctrl-C prints the disconnect banner and exits cleanly."""
        use_runner(monkeypatch, runner_calls, KeyboardInterrupt())

        assert cli.main(["XMRBTC"]) == cli.EXIT_OK
        assert "# Disconnected" in capsys.readouterr().out

    @pytest.mark.parametrize("argv", [[], ["XMR-BTC"], ["--bogus", "XMRBTC"]])
    def test_usage_errors(
        self, runner_calls: list[dict[str, Any]], argv: list[str]
    ) -> None:
        """Test that bad usage never reads as a server error."""
        assert cli.main(argv) == cli.EXIT_USAGE
        assert runner_calls == []

    def test_help(self, runner_calls: list[dict[str, Any]]) -> None:
        """Test that --help exits cleanly."""
        assert cli.main(["--help"]) == cli.EXIT_OK

    def test_invalid_environment(
        self, monkeypatch: pytest.MonkeyPatch, runner_calls: list[dict[str, Any]]
    ) -> None:
        """Test that a bad environment value is a usage error."""
        monkeypatch.setenv("TRACKER_LOG_LEVEL", "LOUD")
        assert cli.main(["XMRBTC"]) == cli.EXIT_USAGE
