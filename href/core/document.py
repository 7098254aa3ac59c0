"""
HREF document envelope: session metadata plus the ordered event sequence.

The top level and the session object are closed (unknown keys rejected);
events are open (unknown keys preserved in Event.extra).
"""

import json
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Optional, Sequence, Tuple, Union

from .errors import LoadError
from .events import Event, event_from_dict, event_to_dict, validate_event

HREF_VERSION = "0.1"

_DOCUMENT_KEYS = ("version", "session", "initial_text", "events")
_SESSION_REQUIRED = ("id", "user_agent", "lang", "device", "source")
_SESSION_KEYS = _SESSION_REQUIRED + ("meta",)


@dataclass(frozen=True)
class SessionMeta:
    """
    Identification and environment metadata.

    Passed through untouched; replay never reads it beyond log correlation.
    """
    id: str
    user_agent: str
    lang: str
    device: str
    source: str
    meta: Optional[Dict[str, Any]] = None

    def to_dict(self) -> Dict[str, Any]:
        out: Dict[str, Any] = {
            "id": self.id,
            "user_agent": self.user_agent,
            "lang": self.lang,
            "device": self.device,
            "source": self.source,
        }
        if self.meta is not None:
            out["meta"] = dict(self.meta)
        return out

    @staticmethod
    def from_dict(data: Dict[str, Any]) -> "SessionMeta":
        return SessionMeta(
            id=data["id"],
            user_agent=data["user_agent"],
            lang=data["lang"],
            device=data["device"],
            source=data["source"],
            meta=data.get("meta"),
        )


@dataclass(frozen=True)
class Document:
    """
    Immutable HREF document.

    Fields:
        version: Format version (always "0.1")
        session: Session metadata
        initial_text: Field content before the first event
        events: Events ordered by non-decreasing time
    """
    session: SessionMeta
    initial_text: str = ""
    events: Tuple[Event, ...] = field(default_factory=tuple)
    version: str = HREF_VERSION

    @property
    def duration(self) -> float:
        return max((ev.time for ev in self.events), default=0)

    def to_dict(self) -> Dict[str, Any]:
        return document_to_dict(self)


def check_event_order(events: Sequence[Any]) -> List[str]:
    """Problems for any event whose time is earlier than its predecessor."""
    problems = []
    previous = None
    for i, ev in enumerate(events):
        t = ev.time if isinstance(ev, Event) else ev.get("time")
        if previous is not None and t < previous:
            problems.append(f"events[{i}].time {t} is earlier than previous event time {previous}")
        previous = t
    return problems


def _validate_session(session: Any) -> List[str]:
    if not isinstance(session, dict):
        return ["session must be an object"]
    problems = []
    for key in _SESSION_REQUIRED:
        if key not in session:
            problems.append(f"session.{key} is required")
        elif not isinstance(session[key], str):
            problems.append(f"session.{key} must be a string")
    if "meta" in session and not isinstance(session["meta"], dict):
        problems.append("session.meta must be an object")
    for key in session:
        if key not in _SESSION_KEYS:
            problems.append(f"session has unknown key '{key}'")
    return problems


def validate_document(data: Any) -> List[str]:
    """
    Check a raw document against the closed v0.1 schema.

    Pure predicate: returns a list of problems, empty when well-formed.
    """
    if not isinstance(data, dict):
        return ["document must be an object"]

    problems: List[str] = []
    for key in _DOCUMENT_KEYS:
        if key not in data:
            problems.append(f"{key} is required")
    for key in data:
        if key not in _DOCUMENT_KEYS:
            problems.append(f"unknown top-level key '{key}'")

    if "version" in data and data["version"] != HREF_VERSION:
        problems.append(f"version must be \"{HREF_VERSION}\"")
    if "session" in data:
        problems.extend(_validate_session(data["session"]))
    if "initial_text" in data and not isinstance(data["initial_text"], str):
        problems.append("initial_text must be a string")

    events = data.get("events")
    if "events" in data and not isinstance(events, list):
        problems.append("events must be an array")
    elif isinstance(events, list):
        event_problems: List[str] = []
        for i, ev in enumerate(events):
            event_problems.extend(validate_event(ev, where=f"events[{i}]"))
        problems.extend(event_problems)
        if not event_problems:
            problems.extend(check_event_order(events))

    return problems


def document_from_dict(data: Any) -> Document:
    """
    Validate and build a Document.

    Raises:
        LoadError: If the document violates the schema
    """
    problems = validate_document(data)
    if problems:
        raise LoadError("Invalid HREF document", problems)
    return Document(
        version=data["version"],
        session=SessionMeta.from_dict(data["session"]),
        initial_text=data["initial_text"],
        events=tuple(event_from_dict(ev) for ev in data["events"]),
    )


def document_to_dict(doc: Document) -> Dict[str, Any]:
    return {
        "version": doc.version,
        "session": doc.session.to_dict(),
        "initial_text": doc.initial_text,
        "events": [event_to_dict(ev) for ev in doc.events],
    }


def loads_document(text: Union[str, bytes]) -> Document:
    """
    Parse JSON text into a Document.

    Raises:
        LoadError: On malformed JSON or schema violations
    """
    try:
        data = json.loads(text)
    except (json.JSONDecodeError, UnicodeDecodeError) as e:
        raise LoadError(f"Malformed JSON: {e}") from e
    return document_from_dict(data)


def dumps_document(doc: Document, indent: Optional[int] = 2) -> str:
    return json.dumps(document_to_dict(doc), indent=indent, ensure_ascii=False)


def read_document(path: Union[str, Path]) -> Document:
    """
    Read a Document from a JSON file.

    Raises:
        FileNotFoundError: If path does not exist
        LoadError: On malformed content
    """
    with open(path, "r", encoding="utf-8") as f:
        return loads_document(f.read())


def write_document(path: Union[str, Path], doc: Document) -> None:
    with open(path, "w", encoding="utf-8") as f:
        f.write(dumps_document(doc))
        f.write("\n")
