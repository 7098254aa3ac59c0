"""
Replay system for text state reconstruction over time.

- replay/timeline: headless reconstruction up to a point in time
- PlaybackScheduler: virtual-clock timeline driver
- HrefPlayer: scheduler + reconstructor + viewer wiring
"""

from .runner import ReplayResult, replay, timeline
from .clock import ManualClock, VirtualClock, monotonic_ms
from .scheduler import PlaybackScheduler, PlaybackStatus
from .player import HrefPlayer, PlayerState
from .snapshot import compute_state_hash, serialize_state

__all__ = [
    "ReplayResult",
    "replay",
    "timeline",
    "ManualClock",
    "VirtualClock",
    "monotonic_ms",
    "PlaybackScheduler",
    "PlaybackStatus",
    "HrefPlayer",
    "PlayerState",
    "compute_state_hash",
    "serialize_state",
]
