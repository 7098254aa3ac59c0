"""
Replay runner: reconstruct text state from a document.

Replay is pure: resets to initial_text and applies every event in order.
"""

from dataclasses import dataclass
from typing import Iterator, Optional, Tuple

from ..core.document import Document
from ..core.events import Event
from ..core.options import ReconstructorOptions
from ..core.reconstructor import StateReconstructor
from ..core.state import TextState


@dataclass(frozen=True)
class ReplayResult:
    """
    Result of replay operation.

    Fields:
        state: Final text state after applying events
        applied: Number of events applied
        time: Time of the last applied event (0 if none)
    """
    state: TextState
    applied: int
    time: float = 0


def replay(
    document: Document,
    until: Optional[float] = None,
    options: Optional[ReconstructorOptions] = None,
) -> ReplayResult:
    """
    Replay events to reconstruct text state.

    Same document always produces the same state.

    Args:
        document: Document to replay
        until: Stop after events at this time (inclusive, None = all)
        options: Reconstruction policy

    Returns:
        ReplayResult with final state and count
    """
    rec = StateReconstructor(options)
    rec.reset(document.initial_text)
    count = 0
    last_time: float = 0

    for ev in document.events:
        if until is not None and ev.time > until:
            break
        rec.apply_event(ev)
        count += 1
        last_time = ev.time

    return ReplayResult(state=rec.get_state(), applied=count, time=last_time)


def timeline(
    document: Document,
    options: Optional[ReconstructorOptions] = None,
) -> Iterator[Tuple[Event, TextState]]:
    """Yield (event, state after event) for every event in order."""
    rec = StateReconstructor(options)
    rec.reset(document.initial_text)
    for ev in document.events:
        yield ev, rec.apply_event(ev)
