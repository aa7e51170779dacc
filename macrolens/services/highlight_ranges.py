from __future__ import annotations

from dataclasses import dataclass
from typing import Literal, Sequence

from macrolens.services.line_index import LineIndex
from macrolens.services.text_search_service import SearchMatch

HighlightKind = Literal["selection", "match", "current-match"]


@dataclass(frozen=True, slots=True)
class HighlightRange:
    start_line: int
    start_column: int
    end_line: int
    end_column: int
    kind: HighlightKind


def highlights_for_matches(
    matches: Sequence[SearchMatch],
    current_index: int = -1,
) -> list[HighlightRange]:
    return [
        HighlightRange(
            start_line=match.line,
            start_column=match.start_column,
            end_line=match.end_line,
            end_column=match.end_column,
            kind="current-match" if position == current_index else "match",
        )
        for position, match in enumerate(matches)
    ]


def highlight_for_selection(
    index: LineIndex,
    anchor_offset: int,
    focus_offset: int,
) -> HighlightRange | None:
    """Normalize a selection into a forward range; empty selections give ``None``."""
    start, end = sorted((int(anchor_offset), int(focus_offset)))
    if start == end:
        return None
    start_pos = index.offset_to_line_column(start)
    end_pos = index.offset_to_line_column(end)
    if (start_pos.line, start_pos.column) == (end_pos.line, end_pos.column):
        return None
    return HighlightRange(
        start_line=start_pos.line,
        start_column=start_pos.column,
        end_line=end_pos.line,
        end_column=end_pos.column,
        kind="selection",
    )
