from __future__ import annotations

from bisect import bisect_right
from dataclasses import dataclass


@dataclass(frozen=True, slots=True)
class LineColumn:
    line: int
    column: int
    stale: bool = False


class LineIndex:
    """Maps character offsets to 1-based line/column positions and back."""

    __slots__ = ("source", "_line_starts")

    def __init__(self, source: str, line_starts: list[int]) -> None:
        self.source = source
        self._line_starts = line_starts

    @classmethod
    def build(cls, source: str) -> "LineIndex":
        text = str(source or "")
        starts = [0]
        find = text.find
        pos = find("\n")
        while pos != -1:
            starts.append(pos + 1)
            pos = find("\n", pos + 1)
        return cls(text, starts)

    @property
    def line_count(self) -> int:
        return len(self._line_starts)

    def is_stale_for(self, source: str) -> bool:
        return source != self.source

    def line_start(self, line: int) -> int:
        line = max(1, min(self.line_count, int(line)))
        return self._line_starts[line - 1]

    def line_end(self, line: int) -> int:
        """Offset just past the last character of ``line``, excluding the newline."""
        line = max(1, min(self.line_count, int(line)))
        if line < self.line_count:
            return self._line_starts[line] - 1
        return len(self.source)

    def line_text(self, line: int) -> str:
        return self.source[self.line_start(line):self.line_end(line)]

    def offset_to_line_column(self, offset: int, *, source: str | None = None) -> LineColumn:
        offset = max(0, min(len(self.source), int(offset)))
        line = bisect_right(self._line_starts, offset)
        column = offset - self._line_starts[line - 1] + 1
        stale = source is not None and self.is_stale_for(source)
        return LineColumn(line=line, column=column, stale=stale)

    def line_column_to_offset(self, line: int, column: int) -> int:
        start = self.line_start(line)
        end = self.line_end(line)
        return max(start, min(end, start + int(column) - 1))
