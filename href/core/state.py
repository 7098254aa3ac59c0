"""
Text state model for replay.

TextState is the immutable snapshot handed to renderers and listeners.
"""

from dataclasses import dataclass, replace
from typing import Any, Dict, Optional, Tuple

from .events import CompositionSegment
from .units import splice, utf16_length


@dataclass(frozen=True)
class CompositionPreview:
    """
    Provisional IME text, not yet committed.

    Fields:
        anchor: Offset in committed text where the preview is shown
        text: Current composition buffer
        segments: IME sub-clauses, if the capture source reported them
    """
    anchor: int
    text: str = ""
    segments: Tuple[CompositionSegment, ...] = ()

    def to_dict(self) -> Dict[str, Any]:
        return {
            "anchor": self.anchor,
            "text": self.text,
            "segments": [
                {"text": s.text} if s.highlight is None else {"text": s.text, "highlight": s.highlight}
                for s in self.segments
            ],
        }


@dataclass(frozen=True)
class TextState:
    """
    Immutable text/selection snapshot.

    Invariant: 0 <= selection_start <= selection_end <= utf16_length(text).

    `direction`, `composition` and `focused` are renderer-only extras and
    never influence text mutation.
    """
    text: str = ""
    selection_start: int = 0
    selection_end: int = 0
    direction: str = "none"
    composition: Optional[CompositionPreview] = None
    focused: bool = False

    @staticmethod
    def initial(text: str = "") -> "TextState":
        return TextState(text=text)

    @property
    def length(self) -> int:
        return utf16_length(self.text)

    @property
    def collapsed(self) -> bool:
        return self.selection_start == self.selection_end

    @property
    def caret(self) -> int:
        """Focus end of the selection."""
        if self.direction == "backward":
            return self.selection_start
        return self.selection_end

    def with_changes(self, **changes: Any) -> "TextState":
        return replace(self, **changes)

    def preview_text(self) -> str:
        """Committed text with the composition preview spliced in at its anchor."""
        if self.composition is None or not self.composition.text:
            return self.text
        anchor = min(self.composition.anchor, self.length)
        return splice(self.text, anchor, anchor, self.composition.text)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "text": self.text,
            "selectionStart": self.selection_start,
            "selectionEnd": self.selection_end,
            "direction": self.direction,
            "composition": self.composition.to_dict() if self.composition else None,
            "focused": self.focused,
        }
