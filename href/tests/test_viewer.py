"""
Tests for terminal rendering of text state.
"""

import io

from rich.console import Console

from href.core.events import CompositionSegment
from href.core.state import CompositionPreview, TextState
from href.render import RichTextViewer, build_text
from href.render.viewer import CARET, COMPOSITION_STYLE, HIGHLIGHT_STYLE, SELECTION_STYLE


def styles(text):
    return [(span.start, span.end, str(span.style)) for span in text.spans]


def test_plain_text():
    text = build_text(TextState(text="hello"))
    assert text.plain == "hello"
    assert styles(text) == []


def test_empty_state():
    assert build_text(TextState()).plain == ""


def test_selection_highlight():
    text = build_text(TextState(text="abcd", selection_start=1, selection_end=3))
    assert (1, 3, SELECTION_STYLE) in styles(text)


def test_selection_hidden_when_disabled():
    text = build_text(TextState(text="abcd", selection_start=1, selection_end=3), show_selection=False)
    assert styles(text) == []


def test_selection_offsets_are_utf16():
    """The emoji spans two code units but one rendered character."""
    text = build_text(TextState(text="😀ab", selection_start=2, selection_end=3))
    assert (1, 2, SELECTION_STYLE) in styles(text)


def test_composition_spliced_at_anchor():
    state = TextState(text="ab", composition=CompositionPreview(anchor=1, text="xy"))
    text = build_text(state)
    assert text.plain == "axyb"
    assert (1, 3, COMPOSITION_STYLE) in styles(text)


def test_highlighted_segments():
    preview = CompositionPreview(
        anchor=0,
        text="かな",
        segments=(CompositionSegment(text="か", highlight=True), CompositionSegment(text="な")),
    )
    text = build_text(TextState(composition=preview))
    assert text.plain == "かな"
    assert (0, 1, HIGHLIGHT_STYLE) in styles(text)
    assert (1, 2, COMPOSITION_STYLE) in styles(text)


def test_caret_only_when_focused():
    state = TextState(text="ab", selection_start=2, selection_end=2)
    assert build_text(state, show_caret=True).plain == "ab"
    assert build_text(state.with_changes(focused=True), show_caret=True).plain == "ab" + CARET


def test_caret_after_composition():
    state = TextState(
        text="ab",
        selection_start=1,
        selection_end=1,
        focused=True,
        composition=CompositionPreview(anchor=1, text="x"),
    )
    assert build_text(state, show_caret=True).plain == "ax" + CARET + "b"


def test_backward_selection_caret_at_start():
    state = TextState(text="abc", selection_start=0, selection_end=2, direction="backward", focused=True)
    assert build_text(state, show_caret=True).plain == CARET + "abc"


def test_backward_caret_shifts_past_composition():
    state = TextState(
        text="abc",
        selection_start=1,
        selection_end=3,
        direction="backward",
        focused=True,
        composition=CompositionPreview(anchor=0, text="x"),
    )
    assert state.caret == 1
    assert build_text(state, show_caret=True).plain == "xa" + CARET + "bc"


def test_rich_viewer_render_clear_and_print():
    out = io.StringIO()
    viewer = RichTextViewer(console=Console(file=out, width=80))

    viewer.render(TextState(text="typed"))
    assert viewer.last.plain == "typed"
    viewer.print()
    assert "typed" in out.getvalue()

    viewer.clear()
    assert viewer.last.plain == ""
