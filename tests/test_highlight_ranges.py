from __future__ import annotations

from macrolens.services.highlight_ranges import (
    HighlightRange,
    highlight_for_selection,
    highlights_for_matches,
)
from macrolens.services.line_index import LineIndex
from macrolens.services.text_search_service import find_matches


def test_match_highlights_mark_current():
    matches = find_matches("Dim x\nDim y", "Dim")
    ranges = highlights_for_matches(matches, current_index=1)
    assert [r.kind for r in ranges] == ["match", "current-match"]
    assert ranges[1] == HighlightRange(2, 1, 2, 4, "current-match")


def test_match_highlights_without_current():
    matches = find_matches("a a", "a")
    assert {r.kind for r in highlights_for_matches(matches)} == {"match"}


def test_backward_selection_is_normalized():
    index = LineIndex.build("ab\ncd")
    assert highlight_for_selection(index, 4, 1) == HighlightRange(1, 2, 2, 2, "selection")


def test_empty_selection():
    index = LineIndex.build("ab\ncd")
    assert highlight_for_selection(index, 2, 2) is None


def test_selection_clamped_to_buffer():
    index = LineIndex.build("ab")
    assert highlight_for_selection(index, 0, 50) == HighlightRange(1, 1, 1, 3, "selection")
