"""
Tracker Domain Layer.

This package contains the exact decimal primitives that every price and size
in the book is expressed in.

Key principles:
- Values are exact (integer mantissa, decimal exponent), never floats
- Ordering is numeric, never lexicographic
- Precision is fixed per trading pair and enforced at parse time
"""

from src.tracker.domain.primitives import (
    FixedDecimal,
    Precision,
    Price,
    Size,
    exponent_from_increment,
)

__all__ = [
    "FixedDecimal",
    "Precision",
    "Price",
    "Size",
    "exponent_from_increment",
]
