"""
Canonical serialization for deterministic comparison of replay output.

Two replays of the same document must serialize to identical bytes; all
state hashing goes through these functions.
"""

import json
from typing import Any


def canonicalize(obj: Any) -> Any:
    """
    Convert nested state/dict/list to canonical form.

    Rules:
    - objects exposing to_dict() are expanded
    - dict keys sorted alphabetically
    - tuples converted to lists
    - integral floats collapsed to int (JSON numbers carry no int/float split)
    """
    if hasattr(obj, "to_dict"):
        return canonicalize(obj.to_dict())
    if isinstance(obj, dict):
        return {k: canonicalize(obj[k]) for k in sorted(obj.keys())}
    if isinstance(obj, (list, tuple)):
        return [canonicalize(x) for x in obj]
    if isinstance(obj, float) and obj.is_integer():
        return int(obj)
    return obj


def canonical_json_bytes(obj: Any) -> bytes:
    """
    Deterministic JSON bytes for hashing.

    ensure_ascii=False keeps text UTF-8 stable; surrogatepass keeps lone
    surrogates (possible after code-unit edits) encodable.
    """
    return canonical_json_str(obj).encode("utf-8", "surrogatepass")


def canonical_json_str(obj: Any) -> str:
    """Sorted-key compact JSON text; integral floats are written as ints."""
    canon = canonicalize(obj)
    return json.dumps(canon, sort_keys=True, separators=(",", ":"), ensure_ascii=False)
