"""
Reducer: Pure text state transition functions.

The reducer is the heart of deterministic replay. It must be:
- Pure (no side effects, no I/O)
- Deterministic (same input -> same output)
- Tolerant (unknown event types leave state unchanged)
"""

import logging
from typing import Callable, Dict

from .events import Event
from .state import TextState

logger = logging.getLogger(__name__)

# Handler signature: (current_state, event) -> new_state
Handler = Callable[[TextState, Event], TextState]


class Reducer:
    """
    Registry of event handlers for text state transitions.

    Usage:
        reducer = Reducer()
        reducer.register("selectionchange", on_selection_change)
        new_state = reducer.apply(state, event)
    """

    def __init__(self) -> None:
        self._handlers: Dict[str, Handler] = {}

    def register(self, event_type: str, handler: Handler) -> None:
        """
        Register event handler.

        Args:
            event_type: Event type string
            handler: Pure function (state, event) -> new_state
        """
        self._handlers[event_type] = handler

    def apply(self, state: TextState, event: Event) -> TextState:
        """
        Apply event to state using registered handler.

        Event types without a handler return the state unchanged, so documents
        from newer capture sources still replay.
        """
        handler = self._handlers.get(event.type)
        if handler is None:
            logger.debug("No handler for event type %r at t=%s", event.type, event.time)
            return state
        return handler(state, event)
