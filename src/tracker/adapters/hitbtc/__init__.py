"""HitBTC streaming feed adapter."""

from src.tracker.adapters.hitbtc.data import decode_frame
from src.tracker.adapters.hitbtc.stream import HitbtcFeedSession

__all__ = ["HitbtcFeedSession", "decode_frame"]
