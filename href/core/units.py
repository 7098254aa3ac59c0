"""
Text offset arithmetic in UTF-16 code units.

Captured `pos` and selection `index` values come from browsers, which count
UTF-16 code units. Python strings count code points, so every offset that
touches committed text goes through these helpers.
"""

import math
import unicodedata
from enum import Enum
from typing import Any, Optional

_CODEC = "utf-16-le"
_ERRORS = "surrogatepass"

ZWJ = "\u200d"


class DeleteUnit(str, Enum):
    """How much text a collapsed-selection delete removes."""

    CODE_UNIT = "code_unit"
    CODE_POINT = "code_point"
    CLUSTER = "cluster"
    WORD = "word"
    LINE = "line"


def _encode(text: str) -> bytes:
    return text.encode(_CODEC, _ERRORS)


def _decode(raw: bytes) -> str:
    return raw.decode(_CODEC, _ERRORS)


def utf16_length(text: str) -> int:
    """Length of text in UTF-16 code units."""
    return len(_encode(text)) // 2


def clamp_offset(value: Any, length: int) -> Optional[int]:
    """
    Clamp a captured offset into [0, length].

    Returns None for values that are not usable numbers (missing, bool, NaN),
    so callers can fall back to the caret.
    """
    if value is None or isinstance(value, bool):
        return None
    try:
        number = float(value)
    except (TypeError, ValueError):
        return None
    if math.isnan(number):
        return None
    if number <= 0:
        return 0
    if number >= length:
        return length
    return int(number)


def splice(text: str, start: int, end: int, insert: str = "") -> str:
    """Replace code units [start, end) of text with insert."""
    raw = _encode(text)
    return _decode(raw[: start * 2] + _encode(insert) + raw[end * 2 :])


def to_index(text: str, offset: int) -> int:
    """Convert a UTF-16 offset to a code point index (rounding up inside a pair)."""
    units = 0
    for index, ch in enumerate(text):
        if units >= offset:
            return index
        units += 2 if ord(ch) > 0xFFFF else 1
    return len(text)


def to_offset(text: str, index: int) -> int:
    """Convert a code point index to a UTF-16 offset."""
    return utf16_length(text[:index])


def snap_offset(text: str, offset: int) -> int:
    """Move an offset that falls inside a surrogate pair to the end of the pair."""
    return to_offset(text, to_index(text, offset))


def _extends(text: str, j: int) -> bool:
    # True when the code point at j belongs to the cluster before it.
    ch = text[j]
    if text[j - 1] == ZWJ or text[j - 1 : j + 1] == "\r\n":
        return True
    if ch == ZWJ or 0xFE00 <= ord(ch) <= 0xFE0F or 0x1F3FB <= ord(ch) <= 0x1F3FF:
        return True
    return unicodedata.category(ch) in ("Mn", "Mc", "Me")


def _word_class(ch: str) -> str:
    if ch.isspace():
        return "space"
    if ch.isalnum() or ch == "_":
        return "word"
    return "punct"


def previous_boundary(text: str, offset: int, unit: DeleteUnit) -> int:
    """Offset of the start of the unit that ends at offset. An offset inside a pair counts from the pair's end."""
    if offset <= 0:
        return 0
    if unit == DeleteUnit.CODE_UNIT:
        return offset - 1

    i = to_index(text, offset)
    j = i - 1
    if unit == DeleteUnit.CLUSTER:
        while j > 0 and _extends(text, j):
            j -= 1
    elif unit == DeleteUnit.WORD:
        j = i
        while j > 0 and text[j - 1].isspace():
            j -= 1
        if j > 0:
            cls = _word_class(text[j - 1])
            while j > 0 and _word_class(text[j - 1]) == cls:
                j -= 1
    elif unit == DeleteUnit.LINE:
        if text[i - 1] != "\n":
            j = text.rfind("\n", 0, i) + 1
    return to_offset(text, max(j, 0))


def next_boundary(text: str, offset: int, unit: DeleteUnit) -> int:
    """Offset of the end of the unit that starts at offset. An offset inside a pair counts from the pair's end."""
    length = utf16_length(text)
    if offset >= length:
        return length
    if unit == DeleteUnit.CODE_UNIT:
        return offset + 1

    i = to_index(text, offset)
    n = len(text)
    if i >= n:
        return length
    j = i + 1
    if unit == DeleteUnit.CLUSTER:
        while j < n and _extends(text, j):
            j += 1
    elif unit == DeleteUnit.WORD:
        j = i
        while j < n and text[j].isspace():
            j += 1
        if j < n:
            cls = _word_class(text[j])
            while j < n and _word_class(text[j]) == cls:
                j += 1
    elif unit == DeleteUnit.LINE:
        if text[i] != "\n":
            newline = text.find("\n", i)
            j = n if newline == -1 else newline
    return to_offset(text, min(j, n))
