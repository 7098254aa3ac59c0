"""
Deterministic text state snapshot utilities.

Ensures same state always produces same bytes, so replays can be compared
by hash.
"""

import hashlib

from ..core.canonical import canonical_json_bytes
from ..core.state import TextState


def serialize_state(state: TextState) -> bytes:
    """
    Serialize state to deterministic bytes.

    Uses canonical JSON serialization to ensure:
    - Same state always produces same bytes
    - No dict ordering issues
    - No whitespace variance
    """
    return canonical_json_bytes(state.to_dict())


def compute_state_hash(state: TextState) -> str:
    """SHA-256 hex digest of the canonical state bytes."""
    return hashlib.sha256(serialize_state(state)).hexdigest()
