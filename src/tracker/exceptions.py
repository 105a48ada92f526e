"""
Error types raised by the order-book tracker.

Every failure the core can report derives from TrackerError so callers can
tell a tracking failure apart from a clean end of stream. Parse failures keep
enough context (side, entry index, field) to be logged or acted on.
"""

from __future__ import annotations


class TrackerError(Exception):
    """Base class for all tracker failures."""


class MalformedDecimalError(TrackerError, ValueError):
    """A price or size literal could not be parsed at the configured precision."""

    def __init__(
        self,
        text: str,
        exponent: int | None = None,
        reason: str = "invalid decimal literal",
        side: str | None = None,
        index: int | None = None,
        field: str | None = None,
    ) -> None:
        self.text = text
        self.exponent = exponent
        self.reason = reason
        self.side = side
        self.index = index
        self.field = field
        super().__init__(self._describe())

    def _describe(self) -> str:
        message = f"{self.reason}: {self.text!r}"
        if self.exponent is not None:
            message += f" at exponent {self.exponent}"
        location = [
            part
            for part in (
                self.side,
                f"#{self.index}" if self.index is not None else None,
                self.field,
            )
            if part is not None
        ]
        if location:
            message += f" ({' '.join(location)})"
        return message

    def at(self, side: str, index: int, field: str) -> MalformedDecimalError:
        """Return a copy of this error annotated with its book location."""
        return type(self)(
            self.text,
            exponent=self.exponent,
            reason=self.reason,
            side=side,
            index=index,
            field=field,
        )


class InvalidIncrementError(MalformedDecimalError):
    """A tick size or quantity increment is not a power-of-ten literal."""


class MalformedBookFrameError(MalformedDecimalError):
    """
    A snapshot or update notification whose levels have the wrong shape.

    Raised while decoding, before any book sees the frame; ``method`` tells
    whether the frame was a snapshot or an update.
    """

    def __init__(
        self,
        text: str,
        method: str,
        reason: str = "malformed level",
        side: str | None = None,
        index: int | None = None,
        field: str | None = None,
    ) -> None:
        self.method = method
        super().__init__(text, reason=reason, side=side, index=index, field=field)

    def at(self, side: str, index: int, field: str) -> MalformedBookFrameError:
        """Return a copy of this error annotated with its book location."""
        return type(self)(
            self.text,
            self.method,
            reason=self.reason,
            side=side,
            index=index,
            field=field,
        )


class MissingPrecisionError(TrackerError):
    """Book data arrived before the pair's precision was known."""


class PrecisionConflictError(TrackerError):
    """A second, different precision was supplied for the same subscription."""


class BookNotInitializedError(TrackerError):
    """An incremental update arrived before the first snapshot."""


class ProtocolError(TrackerError):
    """A frame from the exchange could not be understood."""


class ServerError(TrackerError):
    """The exchange answered a request with an error object."""

    def __init__(self, code: int, message: str, description: str | None = None) -> None:
        self.code = code
        self.message = message
        self.description = description
        text = f"server error: code={code} message={message}"
        if description:
            text += f" ({description})"
        super().__init__(text)


class SubscriptionRejectedError(ServerError):
    """The exchange refused an order-book subscription."""

    def __init__(self, symbol: str) -> None:
        self.symbol = symbol
        super().__init__(0, f"subscription to {symbol} rejected")
