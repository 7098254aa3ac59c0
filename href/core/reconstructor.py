"""
State reconstructor: owns the current TextState and feeds events through
the reducer one at a time.
"""

import logging
from typing import Iterable, Optional

from .events import Event
from .handlers import register_handlers
from .options import ReconstructorOptions
from .reducer import Reducer
from .state import TextState

logger = logging.getLogger(__name__)


class StateReconstructor:
    """
    Mutable holder for the reconstructed text state.

    Usage:
        rec = StateReconstructor()
        rec.reset("hello")
        rec.apply_event(event)
        snapshot = rec.get_state()

    Snapshots are immutable, so callers may keep them across later events.
    """

    def __init__(
        self,
        options: Optional[ReconstructorOptions] = None,
        reducer: Optional[Reducer] = None,
    ) -> None:
        self.options = options or ReconstructorOptions()
        if reducer is None:
            reducer = Reducer()
            register_handlers(reducer, self.options)
        self._reducer = reducer
        self._state = TextState.initial()

    def reset(self, initial_text: str = "") -> TextState:
        """Start over at initial_text with a collapsed selection at 0."""
        self._state = TextState.initial(initial_text)
        return self._state

    def apply_event(self, event: Event) -> TextState:
        """
        Apply one event and return the new snapshot.

        An event whose fields cannot be interpreted leaves state unchanged
        instead of aborting the replay.
        """
        try:
            self._state = self._reducer.apply(self._state, event)
        except (TypeError, ValueError, AttributeError, IndexError) as e:
            logger.warning("Skipping %s event at t=%s: %s", event.type, event.time, e)
        return self._state

    def apply_events(self, events: Iterable[Event]) -> TextState:
        for event in events:
            self.apply_event(event)
        return self._state

    def get_state(self) -> TextState:
        return self._state
