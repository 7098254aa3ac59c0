"""
Playback scheduler: the timeline driver.

Owns a loaded event sequence and a virtual clock, and delivers events to
listeners in time order as the clock advances. It never touches text state;
the player feeds delivered events to its reconstructor.

Delivery guarantees:
- Exactly one notification per event per pass, in non-decreasing time order
- Listener callbacks complete before the next event is delivered
- seek() re-delivers every event up to the target from the start
"""

import logging
import math
from enum import Enum
from typing import Callable, Iterable, List, Optional, Tuple

from ..core.document import check_event_order
from ..core.errors import LoadError, OperationError
from ..core.events import Event
from .clock import VirtualClock, monotonic_ms

logger = logging.getLogger(__name__)

EventListener = Callable[[Event], None]
FinishListener = Callable[[], None]


class PlaybackStatus(str, Enum):
    IDLE = "idle"  # no document loaded
    STOPPED = "stopped"  # loaded, clock at 0
    PLAYING = "playing"
    PAUSED = "paused"


def _check_speed(multiplier: float) -> float:
    if isinstance(multiplier, bool) or not isinstance(multiplier, (int, float)):
        raise OperationError(f"Speed must be a number, got {multiplier!r}")
    if not math.isfinite(multiplier) or multiplier <= 0:
        raise OperationError(f"Speed must be a positive finite number, got {multiplier}")
    return float(multiplier)


class PlaybackScheduler:
    """
    Single-threaded playback state machine.

    States: IDLE -> STOPPED -> PLAYING <-> PAUSED -> STOPPED (via stop()).

    Driven by an external periodic tick(); pause/stop/seek/set_speed take
    effect immediately on the calling thread.
    """

    def __init__(self, speed: float = 1.0, clock: Callable[[], float] = monotonic_ms) -> None:
        self._wall = clock
        self._clock = VirtualClock(speed=_check_speed(speed))
        self._events: Tuple[Event, ...] = ()
        self._cursor = 0
        self._duration: float = 0
        self._status = PlaybackStatus.IDLE
        self._listeners: List[EventListener] = []
        self._finish_listeners: List[FinishListener] = []

    # Listeners

    def on_event(self, callback: EventListener) -> EventListener:
        self._listeners.append(callback)
        return callback

    def on_finish(self, callback: FinishListener) -> FinishListener:
        self._finish_listeners.append(callback)
        return callback

    # Introspection

    @property
    def status(self) -> PlaybackStatus:
        return self._status

    @property
    def is_playing(self) -> bool:
        return self._status == PlaybackStatus.PLAYING

    @property
    def is_finished(self) -> bool:
        """True once every event has been delivered and the clock sits at the end."""
        return (
            self._status == PlaybackStatus.PAUSED
            and self._cursor >= len(self._events)
            and self._clock.position >= self._duration
        )

    @property
    def speed(self) -> float:
        return self._clock.speed

    @property
    def delivered(self) -> int:
        """Number of events delivered in the current pass."""
        return self._cursor

    @property
    def events(self) -> Tuple[Event, ...]:
        return self._events

    @property
    def current_time(self) -> float:
        return min(self._clock.now(self._wall()), self._duration)

    def get_duration(self) -> float:
        return self._duration

    # Operations

    def load_events(self, events: Iterable[Event]) -> None:
        """
        Replace the active sequence and move to STOPPED at 0.

        Raises:
            LoadError: If event times decrease; the previous sequence stays loaded
        """
        loaded = tuple(events)
        problems = check_event_order(loaded)
        if problems:
            raise LoadError("Events are not in time order", problems)

        self._events = loaded
        self._cursor = 0
        self._duration = max((ev.time for ev in loaded), default=0)
        self._clock = VirtualClock(speed=self._clock.speed)
        self._status = PlaybackStatus.STOPPED
        logger.debug(f"Loaded {len(loaded)} events, duration={self._duration}ms")

    def play(self) -> None:
        """
        Start advancing the clock from its current position.

        Raises:
            OperationError: If no events are loaded
        """
        if self._status == PlaybackStatus.IDLE:
            raise OperationError("No document loaded")
        if self._status == PlaybackStatus.PLAYING:
            return
        self._clock = self._clock.start(self._wall())
        self._status = PlaybackStatus.PLAYING

    def pause(self) -> None:
        """Deliver events due now, then freeze the clock. No-op unless playing."""
        if self._status != PlaybackStatus.PLAYING:
            return
        now = self._wall()
        self.tick(now)
        if self._status == PlaybackStatus.PLAYING:
            self._clock = self._clock.freeze(now)
            self._status = PlaybackStatus.PAUSED

    def stop(self) -> None:
        """Rewind to 0 without unloading. No-op when idle."""
        if self._status == PlaybackStatus.IDLE:
            return
        self._cursor = 0
        self._clock = VirtualClock(speed=self._clock.speed)
        self._status = PlaybackStatus.STOPPED

    def check_seek(self, time: float) -> None:
        """Raise OperationError if seek(time) would be rejected. Touches no state."""
        if self._status == PlaybackStatus.IDLE:
            raise OperationError("No document loaded")
        if isinstance(time, bool) or not isinstance(time, (int, float)) or math.isnan(time):
            raise OperationError(f"Seek target must be a number, got {time!r}")

    def seek(self, time: float) -> float:
        """
        Jump to time (clamped to [0, duration]) and re-deliver events up to it.

        Listeners receive every event with event.time <= target, from the
        first one; callers reset their text state before calling. Playback
        continues if it was running.

        Returns:
            The clamped target time

        Raises:
            OperationError: If nothing is loaded or time is not a finite number
        """
        self.check_seek(time)
        target = min(max(time, 0), self._duration)
        self._cursor = 0
        self._clock = self._clock.at(target, self._wall())
        self._deliver_until(target)

        if self._status != PlaybackStatus.PLAYING:
            self._status = PlaybackStatus.PAUSED if target > 0 else PlaybackStatus.STOPPED
        return target

    def set_speed(self, multiplier: float) -> None:
        """
        Change the event-time per wall-time ratio for subsequent advancement.

        Raises:
            OperationError: If multiplier is not a positive finite number
        """
        speed = _check_speed(multiplier)
        now = self._wall()
        if self._status == PlaybackStatus.PLAYING:
            self._deliver_until(min(self._clock.now(now), self._duration))
        self._clock = self._clock.with_speed(speed, now)

    def tick(self, now: Optional[float] = None) -> int:
        """
        Deliver every event that has fallen due since the last tick.

        Returns:
            Number of events delivered
        """
        if self._status != PlaybackStatus.PLAYING:
            return 0
        if now is None:
            now = self._wall()

        current = min(self._clock.now(now), self._duration)
        count = self._deliver_until(current)

        if self._status == PlaybackStatus.PLAYING and self._cursor >= len(self._events) and current >= self._duration:
            self._clock = VirtualClock(position=self._duration, speed=self._clock.speed)
            self._status = PlaybackStatus.PAUSED
            logger.debug(f"Playback finished at {self._duration}ms")
            for callback in self._finish_listeners:
                callback()
        return count

    def _deliver_until(self, time: float) -> int:
        count = 0
        while self._cursor < len(self._events) and self._events[self._cursor].time <= time:
            event = self._events[self._cursor]
            self._cursor += 1
            for callback in self._listeners:
                callback(event)
            count += 1
        return count
