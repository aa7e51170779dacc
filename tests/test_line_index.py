from __future__ import annotations

import pytest

from macrolens.services.line_index import LineColumn, LineIndex


class TestOffsetToLineColumn:
    @pytest.mark.parametrize(
        ("offset", "expected"),
        [
            (0, (1, 1)),
            (2, (1, 3)),
            (3, (2, 1)),
            (5, (2, 3)),
        ],
    )
    def test_positions(self, offset, expected):
        pos = LineIndex.build("ab\ncd").offset_to_line_column(offset)
        assert (pos.line, pos.column) == expected

    def test_clamps_out_of_range_offsets(self):
        index = LineIndex.build("ab\ncd")
        assert index.offset_to_line_column(-3) == LineColumn(1, 1)
        assert index.offset_to_line_column(99) == LineColumn(2, 3)

    def test_offset_after_trailing_newline_is_on_new_line(self):
        pos = LineIndex.build("a\n").offset_to_line_column(2)
        assert (pos.line, pos.column) == (2, 1)

    def test_empty_buffer(self):
        index = LineIndex.build("")
        assert index.line_count == 1
        assert index.offset_to_line_column(0) == LineColumn(1, 1)
        assert index.line_column_to_offset(1, 5) == 0

    def test_stale_flag(self):
        index = LineIndex.build("abc")
        assert index.offset_to_line_column(1, source="abc").stale is False
        assert index.offset_to_line_column(1, source="abcd").stale is True
        assert index.offset_to_line_column(1).stale is False


class TestLineColumnToOffset:
    def test_round_trip_every_offset(self):
        source = "Sub Main()\n    Dim x\n\nEnd Sub"
        index = LineIndex.build(source)
        for offset in range(len(source) + 1):
            pos = index.offset_to_line_column(offset)
            assert index.line_column_to_offset(pos.line, pos.column) == offset

    def test_clamps_column_to_line(self):
        index = LineIndex.build("ab\ncd")
        assert index.line_column_to_offset(1, 99) == 2
        assert index.line_column_to_offset(2, 0) == 3

    def test_clamps_line(self):
        index = LineIndex.build("ab\ncd")
        assert index.line_column_to_offset(0, 1) == 0
        assert index.line_column_to_offset(7, 1) == 3


class TestLineAccessors:
    def test_line_text_excludes_newline(self):
        index = LineIndex.build("first\nsecond\n")
        assert index.line_count == 3
        assert index.line_text(1) == "first"
        assert index.line_text(2) == "second"
        assert index.line_text(3) == ""

    def test_line_bounds(self):
        index = LineIndex.build("ab\ncd")
        assert (index.line_start(1), index.line_end(1)) == (0, 2)
        assert (index.line_start(2), index.line_end(2)) == (3, 5)
