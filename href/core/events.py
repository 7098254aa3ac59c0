"""
Event model for captured editing interactions.

Events are immutable records, one variant per `type` value plus an
UnknownEvent fallback so newer documents still replay.
"""

import math
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Tuple

KEYBOARD_TYPES = ("keydown", "keyup")
INPUT_TYPES = ("beforeinput", "input")
COMPOSITION_TYPES = ("compositionstart", "compositionupdate", "compositionend")
SELECTION_TYPES = ("selectionchange",)
FOCUS_TYPES = ("focus", "blur")
CUSTOM_TYPES = ("custom",)

KNOWN_TYPES = (
    KEYBOARD_TYPES + INPUT_TYPES + COMPOSITION_TYPES + SELECTION_TYPES + FOCUS_TYPES + CUSTOM_TYPES
)

AFFINITIES = ("forward", "backward", "none")

_BASE_KEYS = ("time", "type", "pos", "modifiers", "meta")
_VARIANT_KEYS = {
    "keydown": ("key", "code"),
    "keyup": ("key", "code"),
    "beforeinput": ("inputType", "data", "text"),
    "input": ("inputType", "data", "text"),
    "compositionstart": ("data", "segments"),
    "compositionupdate": ("data", "segments"),
    "compositionend": ("data", "segments"),
    "selectionchange": ("anchor", "focus"),
    "custom": ("label", "payload"),
}


@dataclass(frozen=True)
class SelectionPoint:
    """One end of a selection range."""
    index: float
    affinity: Optional[str] = None


@dataclass(frozen=True)
class CompositionSegment:
    """IME sub-clause with optional highlight."""
    text: str
    highlight: Optional[bool] = None


@dataclass(frozen=True, kw_only=True)
class Event:
    """
    Common event fields.

    Fields:
        time: Milliseconds since the session-relative zero
        type: Event discriminant
        pos: Character offset at time of event (UTF-16 code units)
        modifiers: Named boolean flags (shift/ctrl/alt/meta plus extensions)
        meta: Free-form metadata
        extra: Undeclared event-level keys, preserved for round trips
    """
    time: float
    type: str
    pos: Optional[float] = None
    modifiers: Optional[Dict[str, bool]] = None
    meta: Optional[Dict[str, Any]] = None
    extra: Dict[str, Any] = field(default_factory=dict)


@dataclass(frozen=True, kw_only=True)
class KeyboardEvent(Event):
    key: str
    code: str


@dataclass(frozen=True, kw_only=True)
class InputEvent(Event):
    input_type: str
    data: Optional[str] = None
    text: Optional[str] = None


@dataclass(frozen=True, kw_only=True)
class CompositionEvent(Event):
    data: Optional[str] = None
    segments: Optional[Tuple[CompositionSegment, ...]] = None


@dataclass(frozen=True, kw_only=True)
class SelectionChangeEvent(Event):
    anchor: SelectionPoint
    focus: SelectionPoint


@dataclass(frozen=True, kw_only=True)
class FocusEvent(Event):
    pass


@dataclass(frozen=True, kw_only=True)
class CustomEvent(Event):
    label: str
    payload: Optional[Dict[str, Any]] = None


@dataclass(frozen=True, kw_only=True)
class UnknownEvent(Event):
    """Event with an unrecognized type. Carried through replay untouched."""
    pass


def _is_number(value: Any) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool)


def _is_object(value: Any) -> bool:
    return isinstance(value, dict)


def _check_selection_point(value: Any, where: str) -> List[str]:
    if not _is_object(value):
        return [f"{where} must be an object"]
    problems = []
    if "index" not in value:
        problems.append(f"{where}.index is required")
    elif not _is_number(value["index"]):
        problems.append(f"{where}.index must be a number")
    affinity = value.get("affinity")
    if affinity is not None and affinity not in AFFINITIES:
        problems.append(f"{where}.affinity must be one of {', '.join(AFFINITIES)}")
    for key in value:
        if key not in ("index", "affinity"):
            problems.append(f"{where} has unknown key '{key}'")
    return problems


def _check_segments(value: Any, where: str) -> List[str]:
    if not isinstance(value, list):
        return [f"{where} must be an array"]
    problems = []
    for i, seg in enumerate(value):
        seg_where = f"{where}[{i}]"
        if not _is_object(seg):
            problems.append(f"{seg_where} must be an object")
            continue
        if not isinstance(seg.get("text"), str):
            problems.append(f"{seg_where}.text must be a string")
        if "highlight" in seg and not isinstance(seg["highlight"], bool):
            problems.append(f"{seg_where}.highlight must be a boolean")
        for key in seg:
            if key not in ("text", "highlight"):
                problems.append(f"{seg_where} has unknown key '{key}'")
    return problems


def validate_event(data: Any, where: str = "event") -> List[str]:
    """
    Check one raw event against its variant's field rules.

    Pure predicate: returns a list of problems, empty when well-formed.
    Unknown types only get the common-field checks.
    """
    if not _is_object(data):
        return [f"{where} must be an object"]

    problems: List[str] = []
    etype = data.get("type")
    if not isinstance(etype, str):
        problems.append(f"{where}.type must be a string")

    t = data.get("time")
    if not _is_number(t):
        problems.append(f"{where}.time must be a number")
    elif not math.isfinite(t) or t < 0:
        problems.append(f"{where}.time must be a finite non-negative number")

    if "pos" in data and not _is_number(data["pos"]):
        problems.append(f"{where}.pos must be a number")
    if "meta" in data and not _is_object(data["meta"]):
        problems.append(f"{where}.meta must be an object")
    if "modifiers" in data:
        mods = data["modifiers"]
        if not _is_object(mods) or not all(isinstance(v, bool) for v in mods.values()):
            problems.append(f"{where}.modifiers must map names to booleans")

    if etype in KEYBOARD_TYPES:
        for key in ("key", "code"):
            if not isinstance(data.get(key), str):
                problems.append(f"{where}.{key} must be a string")
    elif etype in INPUT_TYPES:
        if not isinstance(data.get("inputType"), str):
            problems.append(f"{where}.inputType must be a string")
        for key in ("data", "text"):
            if data.get(key) is not None and not isinstance(data[key], str):
                problems.append(f"{where}.{key} must be a string or null")
    elif etype in COMPOSITION_TYPES:
        if "data" in data and not isinstance(data["data"], str):
            problems.append(f"{where}.data must be a string")
        if "segments" in data:
            problems.extend(_check_segments(data["segments"], f"{where}.segments"))
    elif etype in SELECTION_TYPES:
        for key in ("anchor", "focus"):
            if key not in data:
                problems.append(f"{where}.{key} is required")
            else:
                problems.extend(_check_selection_point(data[key], f"{where}.{key}"))
    elif etype in CUSTOM_TYPES:
        if not isinstance(data.get("label"), str):
            problems.append(f"{where}.label must be a string")
        if "payload" in data and not _is_object(data["payload"]):
            problems.append(f"{where}.payload must be an object")

    return problems


def _segments_from_list(value: Optional[List[Dict[str, Any]]]) -> Optional[Tuple[CompositionSegment, ...]]:
    if value is None:
        return None
    return tuple(CompositionSegment(text=s["text"], highlight=s.get("highlight")) for s in value)


def _point_from_dict(value: Dict[str, Any]) -> SelectionPoint:
    return SelectionPoint(index=value["index"], affinity=value.get("affinity"))


def event_from_dict(data: Dict[str, Any]) -> Event:
    """
    Build a typed event from a raw dict.

    Assumes validate_event() returned no problems. Undeclared keys land in
    `extra`; unrecognized types become UnknownEvent.
    """
    etype = data["type"]
    declared = _BASE_KEYS + _VARIANT_KEYS.get(etype, ())
    common = {
        "time": data["time"],
        "type": etype,
        "pos": data.get("pos"),
        "modifiers": data.get("modifiers"),
        "meta": data.get("meta"),
        "extra": {k: v for k, v in data.items() if k not in declared},
    }

    if etype in KEYBOARD_TYPES:
        return KeyboardEvent(key=data["key"], code=data["code"], **common)
    if etype in INPUT_TYPES:
        return InputEvent(
            input_type=data["inputType"],
            data=data.get("data"),
            text=data.get("text"),
            **common,
        )
    if etype in COMPOSITION_TYPES:
        return CompositionEvent(
            data=data.get("data"),
            segments=_segments_from_list(data.get("segments")),
            **common,
        )
    if etype in SELECTION_TYPES:
        return SelectionChangeEvent(
            anchor=_point_from_dict(data["anchor"]),
            focus=_point_from_dict(data["focus"]),
            **common,
        )
    if etype in FOCUS_TYPES:
        return FocusEvent(**common)
    if etype in CUSTOM_TYPES:
        return CustomEvent(label=data["label"], payload=data.get("payload"), **common)
    return UnknownEvent(**common)


def _point_to_dict(point: SelectionPoint) -> Dict[str, Any]:
    out: Dict[str, Any] = {"index": point.index}
    if point.affinity is not None:
        out["affinity"] = point.affinity
    return out


def event_to_dict(event: Event) -> Dict[str, Any]:
    """Serialize an event back to its document shape."""
    out: Dict[str, Any] = {"time": event.time, "type": event.type}
    if event.pos is not None:
        out["pos"] = event.pos
    if event.modifiers is not None:
        out["modifiers"] = dict(event.modifiers)
    if event.meta is not None:
        out["meta"] = dict(event.meta)

    if isinstance(event, KeyboardEvent):
        out["key"] = event.key
        out["code"] = event.code
    elif isinstance(event, InputEvent):
        out["inputType"] = event.input_type
        if event.data is not None:
            out["data"] = event.data
        if event.text is not None:
            out["text"] = event.text
    elif isinstance(event, CompositionEvent):
        if event.data is not None:
            out["data"] = event.data
        if event.segments is not None:
            out["segments"] = [
                {"text": s.text} if s.highlight is None else {"text": s.text, "highlight": s.highlight}
                for s in event.segments
            ]
    elif isinstance(event, SelectionChangeEvent):
        out["anchor"] = _point_to_dict(event.anchor)
        out["focus"] = _point_to_dict(event.focus)
    elif isinstance(event, CustomEvent):
        out["label"] = event.label
        if event.payload is not None:
            out["payload"] = dict(event.payload)

    out.update(event.extra)
    return out
