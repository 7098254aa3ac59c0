"""
Playback clocks.

The wall clock is injected as a zero-argument callable returning
milliseconds, so tests can drive playback by hand.
"""

import time
from dataclasses import dataclass
from typing import Optional


def monotonic_ms() -> float:
    """Wall clock in milliseconds, unaffected by system time changes."""
    return time.monotonic() * 1000.0


class ManualClock:
    """
    Wall clock advanced by hand.

    Usage:
        clock = ManualClock()
        scheduler = PlaybackScheduler(clock=clock)
        clock.advance(250)
    """

    def __init__(self, start: float = 0.0) -> None:
        self.current = start

    def __call__(self) -> float:
        return self.current

    def advance(self, ms: float) -> float:
        self.current += ms
        return self.current

    def sleep(self, seconds: float) -> None:
        """Drop-in for time.sleep that advances this clock instead of blocking."""
        self.advance(seconds * 1000.0)


@dataclass(frozen=True)
class VirtualClock:
    """
    Event-time clock.

    Fields:
        position: Event time (ms) at the anchor instant
        speed: Event-time ms per wall ms
        anchor: Wall time when the clock started running, None when frozen

    Immutable: every transition returns a new instance.
    """
    position: float = 0.0
    speed: float = 1.0
    anchor: Optional[float] = None

    @property
    def running(self) -> bool:
        return self.anchor is not None

    def now(self, wall: float) -> float:
        if self.anchor is None:
            return self.position
        return self.position + max(wall - self.anchor, 0.0) * self.speed

    def start(self, wall: float) -> "VirtualClock":
        return VirtualClock(self.now(wall), self.speed, wall)

    def freeze(self, wall: float) -> "VirtualClock":
        return VirtualClock(self.now(wall), self.speed, None)

    def at(self, position: float, wall: float) -> "VirtualClock":
        return VirtualClock(position, self.speed, wall if self.running else None)

    def with_speed(self, speed: float, wall: float) -> "VirtualClock":
        return VirtualClock(self.now(wall), speed, wall if self.running else None)
