"""Console rendering of top-of-book lines with rich."""

from collections.abc import Callable
from datetime import datetime

from rich.console import Console
from rich.text import Text

from src.tracker.core.detector import RenderDecision
from src.tracker.enums import Direction

HIGHLIGHT_STYLES: dict[Direction, str] = {
    Direction.UP: "green",
    Direction.DOWN: "red",
    Direction.UNCHANGED: "white",
}


def local_now() -> datetime:
    """Current local time with its UTC offset."""
    return datetime.now().astimezone()


class LineRenderer:
    """
    Prints one line per render decision.

    Lines are ``<timestamp> [symbol] bid ask`` or, in volume mode,
    ``<timestamp> [symbol] bid_size bid ask ask_size``; highlighted fields
    are green when up, red when down and white when unchanged.
    """

    def __init__(
        self,
        console: Console | None = None,
        show_symbol: bool = False,
        color: bool = True,
        clock: Callable[[], datetime] = local_now,
    ) -> None:
        self.console = console or Console(highlight=False)
        self.show_symbol = show_symbol
        self.color = color
        self.clock = clock

    def format_line(self, symbol: str, decision: RenderDecision) -> Text:
        """Build the styled line for a decision."""
        line = Text(str(self.clock()))
        if self.show_symbol:
            line.append(f" {symbol}")

        for field in decision.fields():
            line.append(" ")
            style = None
            if self.color and field.highlight is not None:
                style = HIGHLIGHT_STYLES[field.highlight]
            line.append(str(field.new), style=style)

        return line

    def render(self, symbol: str, decision: RenderDecision) -> None:
        """Print the line for a decision."""
        self.console.print(self.format_line(symbol, decision), soft_wrap=True)

    def banner(self, message: str) -> None:
        """Print a connection status line such as ``# Connected``."""
        self.console.print(Text(f"# {message}"), soft_wrap=True)
