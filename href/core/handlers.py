"""
Reducer handlers for text reconstruction.

All handlers are pure and deterministic: (TextState, Event) -> TextState.
Captured offsets are clamped into the current text, never rejected, so one
bad event cannot abort a replay.
"""

from functools import partial
from typing import Optional

from .events import (
    CUSTOM_TYPES,
    KEYBOARD_TYPES,
    CompositionEvent,
    Event,
    InputEvent,
    SelectionChangeEvent,
)
from .options import ReconstructorOptions
from .reducer import Reducer
from .state import CompositionPreview, TextState
from .units import clamp_offset, next_boundary, previous_boundary, snap_offset, splice, utf16_length

# Verbs that browsers report with data=null but still insert text.
IMPLICIT_INSERT_DATA = {
    "insertLineBreak": "\n",
    "insertParagraph": "\n",
}


def register_handlers(reducer: Reducer, options: Optional[ReconstructorOptions] = None) -> None:
    options = options or ReconstructorOptions()
    for event_type in options.mutating_types:
        reducer.register(event_type, partial(on_input, options=options))
    reducer.register("selectionchange", on_selection_change)
    reducer.register("compositionstart", on_composition_start)
    reducer.register("compositionupdate", on_composition_update)
    reducer.register("compositionend", on_composition_end)
    reducer.register("focus", on_focus)
    reducer.register("blur", on_blur)
    for event_type in KEYBOARD_TYPES + CUSTOM_TYPES:
        reducer.register(event_type, on_passive)


def on_passive(cur: TextState, ev: Event) -> TextState:
    return cur


def on_focus(cur: TextState, ev: Event) -> TextState:
    return cur.with_changes(focused=True)


def on_blur(cur: TextState, ev: Event) -> TextState:
    return cur.with_changes(focused=False)


def on_selection_change(cur: TextState, ev: SelectionChangeEvent) -> TextState:
    length = cur.length
    anchor = clamp_offset(ev.anchor.index, length)
    focus = clamp_offset(ev.focus.index, length)
    if anchor is None or focus is None:
        return cur

    if anchor == focus:
        direction = "none"
    else:
        direction = "backward" if focus < anchor else "forward"
    return cur.with_changes(
        selection_start=min(anchor, focus),
        selection_end=max(anchor, focus),
        direction=direction,
    )


def _composition_text(ev: CompositionEvent) -> str:
    if ev.data is not None:
        return ev.data
    if ev.segments:
        return "".join(s.text for s in ev.segments)
    return ""


def on_composition_start(cur: TextState, ev: CompositionEvent) -> TextState:
    preview = CompositionPreview(
        anchor=cur.selection_start,
        text=_composition_text(ev),
        segments=tuple(ev.segments or ()),
    )
    return cur.with_changes(composition=preview)


def on_composition_update(cur: TextState, ev: CompositionEvent) -> TextState:
    # An update without a start still opens the overlay at the caret.
    anchor = cur.composition.anchor if cur.composition else cur.selection_start
    preview = CompositionPreview(
        anchor=anchor,
        text=_composition_text(ev),
        segments=tuple(ev.segments or ()),
    )
    return cur.with_changes(composition=preview)


def on_composition_end(cur: TextState, ev: CompositionEvent) -> TextState:
    # Commit arrives as a separate input event; committing here would double-insert.
    return cur.with_changes(composition=None)


def on_input(cur: TextState, ev: InputEvent, options: ReconstructorOptions) -> TextState:
    verb = ev.input_type or ""
    if verb.startswith("delete"):
        return _apply_delete(cur, ev, options)
    if verb.startswith("insert"):
        return _apply_insert(cur, ev)
    return _apply_snapshot(cur, ev)


def _collapse(cur: TextState, text: str, caret: int) -> TextState:
    return cur.with_changes(text=text, selection_start=caret, selection_end=caret, direction="none")


def _insertion_point(cur: TextState, ev: InputEvent) -> int:
    point = clamp_offset(ev.pos, cur.length)
    return snap_offset(cur.text, cur.selection_start if point is None else point)


def _apply_insert(cur: TextState, ev: InputEvent) -> TextState:
    inserted = ev.data if ev.data is not None else IMPLICIT_INSERT_DATA.get(ev.input_type)
    if inserted is None:
        return _apply_snapshot(cur, ev)

    if cur.collapsed:
        start = end = _insertion_point(cur, ev)
    else:
        start, end = cur.selection_start, cur.selection_end

    text = splice(cur.text, start, end, inserted)
    return _collapse(cur, text, start + utf16_length(inserted))


def _apply_delete(cur: TextState, ev: InputEvent, options: ReconstructorOptions) -> TextState:
    verb = ev.input_type
    if not cur.collapsed:
        start, end = cur.selection_start, cur.selection_end
    elif verb.endswith("Backward"):
        end = _insertion_point(cur, ev)
        start = previous_boundary(cur.text, end, options.delete_unit_for(verb))
    elif verb.endswith("Forward"):
        start = _insertion_point(cur, ev)
        end = next_boundary(cur.text, start, options.delete_unit_for(verb))
    else:
        # deleteByCut, deleteContent, ... with nothing selected: no direction to follow.
        return _apply_snapshot(cur, ev)

    return _collapse(cur, splice(cur.text, start, end), start)


def _apply_snapshot(cur: TextState, ev: InputEvent) -> TextState:
    """Replace text wholesale with the event's full-field snapshot, if any."""
    if ev.text is None:
        return cur
    length = utf16_length(ev.text)
    start = min(cur.selection_start, length)
    end = min(cur.selection_end, length)
    direction = cur.direction if start != end else "none"
    return cur.with_changes(text=ev.text, selection_start=start, selection_end=end, direction=direction)
