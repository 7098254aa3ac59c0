"""
Text viewer.

Renders text content with selection and composition visualization in a
terminal using rich.
"""

from typing import Optional, Protocol

from rich.console import Console
from rich.text import Text

from ..core.state import TextState
from ..core.units import to_index

SELECTION_STYLE = "reverse"
COMPOSITION_STYLE = "underline"
HIGHLIGHT_STYLE = "bold underline"
CARET = "▏"


class TextViewer(Protocol):
    """Anything that can paint a TextState."""

    def render(self, state: TextState) -> None:
        ...

    def clear(self) -> None:
        ...


def build_text(state: TextState, show_selection: bool = True, show_caret: bool = False) -> Text:
    """
    Build a styled rich Text for a state.

    Selection is highlighted, the composition preview is spliced in at its
    anchor and underlined. Empty text and collapsed selections are fine.
    """
    raw = state.text
    start = to_index(raw, state.selection_start)
    end = to_index(raw, state.selection_end)
    caret = to_index(raw, state.caret)
    text = Text(raw)
    if show_selection and start != end:
        text.stylize(SELECTION_STYLE, start, end)

    preview = state.composition
    if preview is not None and preview.text:
        anchor = to_index(raw, preview.anchor)
        overlay = Text()
        if preview.segments:
            for seg in preview.segments:
                overlay.append(seg.text, style=HIGHLIGHT_STYLE if seg.highlight else COMPOSITION_STYLE)
        else:
            overlay.append(preview.text, style=COMPOSITION_STYLE)
        text = Text.assemble(text[:anchor], overlay, text[anchor:])
        if caret >= anchor:
            caret += len(overlay)

    if show_caret and state.focused:
        text = Text.assemble(text[:caret], (CARET, "blink"), text[caret:])
    return text


class RichTextViewer:
    """
    Terminal renderer backed by a rich Console.

    `last` keeps the most recently rendered Text so live displays can pull it.
    """

    def __init__(
        self,
        console: Optional[Console] = None,
        show_selection: bool = True,
        show_caret: bool = False,
    ) -> None:
        self.console = console or Console()
        self.show_selection = show_selection
        self.show_caret = show_caret
        self.last: Text = Text()

    def render(self, state: TextState) -> None:
        self.last = build_text(state, self.show_selection, self.show_caret)

    def clear(self) -> None:
        self.last = Text()

    def print(self) -> None:
        self.console.print(self.last)
