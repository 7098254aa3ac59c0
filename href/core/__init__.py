"""
Core replay primitives.

This module provides the foundational abstractions for text reconstruction:
- Events: Immutable interaction records, one variant per type
- Document: Session envelope with closed-schema validation
- TextState: Immutable text/selection snapshot
- Reducer: Pure functions for state transitions
- StateReconstructor: Current-state holder driven event by event
"""

from .events import (
    Event,
    KeyboardEvent,
    InputEvent,
    CompositionEvent,
    CompositionSegment,
    SelectionChangeEvent,
    SelectionPoint,
    FocusEvent,
    CustomEvent,
    UnknownEvent,
    event_from_dict,
    event_to_dict,
    validate_event,
)
from .document import (
    Document,
    SessionMeta,
    document_from_dict,
    document_to_dict,
    dumps_document,
    loads_document,
    read_document,
    validate_document,
    write_document,
)
from .state import TextState, CompositionPreview
from .reducer import Reducer
from .handlers import register_handlers
from .options import ReconstructorOptions
from .reconstructor import StateReconstructor
from .canonical import canonicalize, canonical_json_bytes, canonical_json_str
from .units import DeleteUnit
from .errors import HrefError, LoadError, OperationError

__all__ = [
    "Event",
    "KeyboardEvent",
    "InputEvent",
    "CompositionEvent",
    "CompositionSegment",
    "SelectionChangeEvent",
    "SelectionPoint",
    "FocusEvent",
    "CustomEvent",
    "UnknownEvent",
    "event_from_dict",
    "event_to_dict",
    "validate_event",
    "Document",
    "SessionMeta",
    "document_from_dict",
    "document_to_dict",
    "dumps_document",
    "loads_document",
    "read_document",
    "validate_document",
    "write_document",
    "TextState",
    "CompositionPreview",
    "Reducer",
    "register_handlers",
    "ReconstructorOptions",
    "StateReconstructor",
    "canonicalize",
    "canonical_json_bytes",
    "canonical_json_str",
    "DeleteUnit",
    "HrefError",
    "LoadError",
    "OperationError",
]
