"""
Fixed-precision decimal primitives for order-book prices and sizes.

Exchange feeds quote every price and size as a decimal string at a precision
that is fixed per trading pair. These primitives keep the value exact as an
integer mantissa scaled by a power of ten, order numerically (never
lexicographically) and refuse literals that carry more precision than the pair
allows.
"""

from __future__ import annotations

import re
from decimal import Decimal
from typing import Any, Self

from pydantic import BaseModel, ConfigDict, Field, PrivateAttr

from src.tracker.exceptions import InvalidIncrementError, MalformedDecimalError

_DECIMAL_LITERAL = re.compile(r"([0-9]+)(?:\.([0-9]+))?")
_INCREMENT_LITERAL = re.compile(r"([01]+)(?:\.([01]+))?")


class FixedDecimal(BaseModel):
    """
    Exact non-negative decimal stored as ``mantissa * 10**exponent``.

    Equality, hashing and ordering are numeric, so ``1.50`` at exponent -2
    equals ``1.5`` at exponent -1. Values of different subclasses (a Price
    and a Size) are never equal and cannot be ordered against each other.
    """

    mantissa: int = Field(ge=0, description="Integer mantissa")
    exponent: int = Field(description="Decimal exponent applied to the mantissa")

    model_config = ConfigDict(frozen=True)

    _value: Decimal = PrivateAttr()

    def model_post_init(self, __context: Any) -> None:
        """Cache the exact Decimal value used for comparisons."""
        self._value = Decimal(f"{self.mantissa}E{self.exponent}")

    @classmethod
    def parse(cls, text: str, exponent: int) -> Self:
        """
        Parse a wire literal at the given precision.

        Args:
            text: Decimal literal such as ``"100.25"``
            exponent: Precision exponent (``-2`` means two fractional digits)

        Returns:
            The parsed value

        Raises:
            MalformedDecimalError: If the literal is signed, uses exponent
                notation, contains foreign characters, has more fractional
                digits than ``-exponent`` (zeros included) or is not a multiple
                of ``10**exponent``

        """
        if not isinstance(text, str):
            raise MalformedDecimalError(repr(text), exponent, "expected a string")

        match = _DECIMAL_LITERAL.fullmatch(text)
        if match is None:
            raise MalformedDecimalError(
                text, exponent, "not a non-negative decimal literal"
            )

        integer, fraction = match.group(1), match.group(2) or ""
        if len(fraction) > max(0, -exponent):
            raise MalformedDecimalError(
                text, exponent, "more fractional digits than the pair allows"
            )

        digits = int(integer + fraction)
        shift = -len(fraction) - exponent

        if shift >= 0:
            mantissa = digits * 10**shift
        else:
            mantissa, remainder = divmod(digits, 10**-shift)
            if remainder:
                raise MalformedDecimalError(
                    text, exponent, "more precision than the pair allows"
                )

        return cls(mantissa=mantissa, exponent=exponent)

    def is_zero(self) -> bool:
        """Check if the value is zero."""
        return self.mantissa == 0

    def to_decimal(self) -> Decimal:
        """Convert to Decimal without losing precision."""
        return self._value

    def _comparable(self, other: object) -> bool:
        return isinstance(other, FixedDecimal) and type(other) is type(self)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, FixedDecimal):
            return NotImplemented
        return self._comparable(other) and self._value == other._value

    def __hash__(self) -> int:
        return hash(self._value)

    def __lt__(self, other: object) -> bool:
        if not self._comparable(other):
            return NotImplemented
        return self._value < other._value  # type: ignore[attr-defined]

    def __le__(self, other: object) -> bool:
        if not self._comparable(other):
            return NotImplemented
        return self._value <= other._value  # type: ignore[attr-defined]

    def __gt__(self, other: object) -> bool:
        if not self._comparable(other):
            return NotImplemented
        return self._value > other._value  # type: ignore[attr-defined]

    def __ge__(self, other: object) -> bool:
        if not self._comparable(other):
            return NotImplemented
        return self._value >= other._value  # type: ignore[attr-defined]

    def __str__(self) -> str:
        """Render at the value's own precision, never in scientific notation."""
        return format(self._value, "f")

    def __repr__(self) -> str:
        return f"{type(self).__name__}('{self}')"


class Price(FixedDecimal):
    """A price level, quoted at the pair's tick-size precision."""


class Size(FixedDecimal):
    """An aggregate size, quoted at the pair's quantity-increment precision."""


def exponent_from_increment(text: str) -> int:
    """
    Translate a tick size or quantity increment into a decimal exponent.

    The increment must be a power-of-ten literal over the alphabet
    ``{'0', '1', '.'}`` with exactly one ``1``: ``"0.001"`` -> ``-3``,
    ``"1"`` -> ``0``, ``"100"`` -> ``2``. Zero padding on either side is
    allowed (``"0.0010"`` -> ``-3``).

    Raises:
        InvalidIncrementError: For any other literal

    """
    if not isinstance(text, str):
        raise InvalidIncrementError(repr(text), reason="expected a string")

    match = _INCREMENT_LITERAL.fullmatch(text)
    if match is None or text.count("1") != 1:
        raise InvalidIncrementError(text, reason="not a power-of-ten increment")

    integer, fraction = match.group(1), match.group(2) or ""
    if "1" in integer:
        return len(integer) - integer.index("1") - 1
    return -(fraction.index("1") + 1)


class Precision(BaseModel):
    """
    Price and size exponents for one trading pair.

    Obtained once per pair from exchange metadata and fixed for the lifetime
    of the subscription.
    """

    price_exponent: int
    size_exponent: int

    model_config = ConfigDict(frozen=True)

    @classmethod
    def from_increments(cls, tick_size: str, quantity_increment: str) -> Precision:
        """Build precision from the exchange's tick size and quantity increment."""
        return cls(
            price_exponent=exponent_from_increment(tick_size),
            size_exponent=exponent_from_increment(quantity_increment),
        )

    def parse_price(self, text: str) -> Price:
        """Parse a price literal at this pair's price precision."""
        return Price.parse(text, self.price_exponent)

    def parse_size(self, text: str) -> Size:
        """Parse a size literal at this pair's size precision."""
        return Size.parse(text, self.size_exponent)

    def __str__(self) -> str:
        return f"price 1e{self.price_exponent}, size 1e{self.size_exponent}"
