"""
Tests for UTF-16 offset arithmetic and delete unit boundaries.
"""

import pytest

from href.core.units import (
    DeleteUnit,
    clamp_offset,
    next_boundary,
    previous_boundary,
    snap_offset,
    splice,
    to_index,
    to_offset,
    utf16_length,
)


def test_utf16_length_counts_surrogate_pairs_twice():
    """Astral characters are two code units, like in the browser."""
    assert utf16_length("") == 0
    assert utf16_length("abc") == 3
    assert utf16_length("a😀") == 3
    assert utf16_length("日本語") == 3


def test_clamp_offset():
    """Out-of-range offsets clamp; unusable values return None."""
    assert clamp_offset(-4, 3) == 0
    assert clamp_offset(10, 3) == 3
    assert clamp_offset(1.7, 3) == 1
    assert clamp_offset(2, 3) == 2
    assert clamp_offset(None, 3) is None
    assert clamp_offset(float("nan"), 3) is None
    assert clamp_offset(True, 3) is None
    assert clamp_offset("x", 3) is None
    assert clamp_offset(float("inf"), 3) == 3


def test_splice_in_code_units():
    """Offsets after an emoji account for both of its code units."""
    assert splice("a😀b", 3, 3, "X") == "a😀Xb"
    assert splice("hello", 0, 5, "hi") == "hi"
    assert splice("", 0, 0, "x") == "x"


def test_index_offset_conversion():
    text = "a😀b"
    assert to_index(text, 3) == 2
    assert to_offset(text, 2) == 3
    # Inside the pair rounds up to the following code point
    assert to_index(text, 2) == 2


def test_code_point_boundaries_keep_pairs_together():
    text = "a😀b"
    assert previous_boundary(text, 3, DeleteUnit.CODE_POINT) == 1
    assert next_boundary(text, 1, DeleteUnit.CODE_POINT) == 3


def test_code_unit_boundaries():
    text = "a😀b"
    assert previous_boundary(text, 3, DeleteUnit.CODE_UNIT) == 2
    assert next_boundary(text, 1, DeleteUnit.CODE_UNIT) == 2


def test_cluster_boundaries_include_combining_marks():
    """e + combining acute is one cluster."""
    text = "xé"
    assert previous_boundary(text, 3, DeleteUnit.CLUSTER) == 1
    assert next_boundary(text, 1, DeleteUnit.CLUSTER) == 3


def test_cluster_boundaries_follow_zwj_sequences():
    family = "👨‍👩"
    assert previous_boundary(family, utf16_length(family), DeleteUnit.CLUSTER) == 0
    assert next_boundary(family, 0, DeleteUnit.CLUSTER) == utf16_length(family)


def test_word_boundaries():
    text = "hello brave world"
    assert previous_boundary(text, 17, DeleteUnit.WORD) == 12
    assert previous_boundary(text, 12, DeleteUnit.WORD) == 6
    assert next_boundary(text, 0, DeleteUnit.WORD) == 5
    assert next_boundary(text, 5, DeleteUnit.WORD) == 11


def test_line_boundaries():
    text = "one\ntwo"
    assert previous_boundary(text, 7, DeleteUnit.LINE) == 4
    # At a line start the newline itself goes
    assert previous_boundary(text, 4, DeleteUnit.LINE) == 3
    assert next_boundary(text, 0, DeleteUnit.LINE) == 3
    assert next_boundary(text, 3, DeleteUnit.LINE) == 4


def test_boundaries_at_text_edges():
    assert previous_boundary("abc", 0, DeleteUnit.CODE_POINT) == 0
    assert next_boundary("abc", 3, DeleteUnit.CODE_POINT) == 3
    assert previous_boundary("", 0, DeleteUnit.WORD) == 0
    assert next_boundary("", 0, DeleteUnit.LINE) == 0


def test_snap_offset():
    text = "a😀b"
    assert snap_offset(text, 2) == 3
    assert snap_offset(text, 1) == 1
    assert snap_offset(text, 4) == 4
    assert snap_offset("", 0) == 0


@pytest.mark.parametrize("unit", list(DeleteUnit))
@pytest.mark.parametrize("text,offset", [("😀", 1), ("a😀\n😀b", 2), ("a😀\n😀b", 5), ("x\n😀", 3)])
def test_boundaries_inside_a_surrogate_pair(unit, text, offset):
    """Offsets between the halves of a pair stay in range in both directions."""
    length = utf16_length(text)
    assert 0 <= previous_boundary(text, offset, unit) <= offset
    assert offset <= next_boundary(text, offset, unit) <= length


@pytest.mark.parametrize("unit", [u for u in DeleteUnit if u != DeleteUnit.CODE_UNIT])
def test_forward_from_inside_last_pair_reaches_end(unit):
    assert next_boundary("😀", 1, unit) == 2
    assert next_boundary("x\n😀", 3, unit) == 4
