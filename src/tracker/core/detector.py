"""
Top-of-book change detection.

Given the best bid and best ask before and after an update, decide whether a
line should be printed and how each field should be highlighted. The decision
is a small table keyed by whether a best price moved, whether a best size
moved and whether volumes are displayed.
"""

from pydantic import BaseModel, ConfigDict

from src.tracker.domain.primitives import FixedDecimal
from src.tracker.enums import Direction, RenderBranch
from src.tracker.model.types import TopOfBook


def compare(a: FixedDecimal, b: FixedDecimal) -> Direction:
    """Direction of ``a`` relative to ``b``."""
    if a > b:
        return Direction.UP
    if a < b:
        return Direction.DOWN
    return Direction.UNCHANGED


class FieldChange(BaseModel):
    """
    One printed field of a top-of-book line.

    ``highlight`` is None when the field is printed without color.
    """

    old: FixedDecimal | None = None
    new: FixedDecimal
    highlight: Direction | None = None

    model_config = ConfigDict(frozen=True)

    @property
    def changed(self) -> bool:
        """Check if the value differs from the previous one."""
        return self.old is not None and self.old != self.new


class RenderDecision(BaseModel):
    """Everything the display needs to format one top-of-book line."""

    branch: RenderBranch
    volume_mode: bool
    bid_price: FieldChange
    ask_price: FieldChange
    bid_size: FieldChange
    ask_size: FieldChange

    model_config = ConfigDict(frozen=True)

    def fields(self) -> list[FieldChange]:
        """Fields in print order for the decision's display mode."""
        if self.volume_mode:
            return [self.bid_size, self.bid_price, self.ask_price, self.ask_size]
        return [self.bid_price, self.ask_price]


# (price_changed, size_changed, volume_mode) -> branch to print, if any
_DECISION_TABLE: dict[tuple[bool, bool, bool], RenderBranch | None] = {
    (True, True, True): RenderBranch.PRICE,
    (True, True, False): RenderBranch.PRICE,
    (True, False, True): RenderBranch.PRICE,
    (True, False, False): RenderBranch.PRICE,
    (False, True, True): RenderBranch.VOLUME,
    (False, True, False): None,
    (False, False, True): None,
    (False, False, False): None,
}


def select_branch(
    price_changed: bool, size_changed: bool, volume_mode: bool
) -> RenderBranch | None:
    """Look up which line, if any, a top-of-book change produces."""
    return _DECISION_TABLE[(price_changed, size_changed, volume_mode)]


def baseline(top: TopOfBook, volume_mode: bool) -> RenderDecision | None:
    """Build the unhighlighted line printed after a snapshot."""
    if top.bid is None or top.ask is None:
        return None
    return RenderDecision(
        branch=RenderBranch.BASELINE,
        volume_mode=volume_mode,
        bid_price=FieldChange(new=top.bid.price),
        ask_price=FieldChange(new=top.ask.price),
        bid_size=FieldChange(new=top.bid.size),
        ask_size=FieldChange(new=top.ask.size),
    )


def detect_change(
    before: TopOfBook, after: TopOfBook, volume_mode: bool
) -> RenderDecision | None:
    """
    Decide what to print after an update.

    Nothing is printed unless the book was two-sided both before and after
    the update. A moved best price prints both prices colored by direction.
    In volume mode, steady prices with a moved best size print the sizes
    colored instead: the bid size by ``new`` vs ``old`` and the ask size by
    ``old`` vs ``new``, so a shrinking ask reads like a growing bid.

    Args:
        before: Top of book captured before the deltas were applied
        after: Top of book captured after the deltas were applied
        volume_mode: Whether sizes are displayed

    Returns:
        The line to print, or None

    """
    old_bid, old_ask = before.bid, before.ask
    new_bid, new_ask = after.bid, after.ask
    if old_bid is None or old_ask is None or new_bid is None or new_ask is None:
        return None

    price_changed = new_bid.price != old_bid.price or new_ask.price != old_ask.price
    size_changed = new_bid.size != old_bid.size or new_ask.size != old_ask.size

    branch = select_branch(price_changed, size_changed, volume_mode)
    if branch is None:
        return None

    if branch == RenderBranch.PRICE:
        return RenderDecision(
            branch=branch,
            volume_mode=volume_mode,
            bid_price=FieldChange(
                old=old_bid.price,
                new=new_bid.price,
                highlight=compare(new_bid.price, old_bid.price),
            ),
            ask_price=FieldChange(
                old=old_ask.price,
                new=new_ask.price,
                highlight=compare(new_ask.price, old_ask.price),
            ),
            bid_size=FieldChange(old=old_bid.size, new=new_bid.size),
            ask_size=FieldChange(old=old_ask.size, new=new_ask.size),
        )

    return RenderDecision(
        branch=branch,
        volume_mode=volume_mode,
        bid_price=FieldChange(old=old_bid.price, new=new_bid.price),
        ask_price=FieldChange(old=old_ask.price, new=new_ask.price),
        bid_size=FieldChange(
            old=old_bid.size,
            new=new_bid.size,
            highlight=compare(new_bid.size, old_bid.size),
        ),
        ask_size=FieldChange(
            old=old_ask.size,
            new=new_ask.size,
            highlight=compare(old_ask.size, new_ask.size),
        ),
    )
