"""Tests for file reference text (launcher_tools.insert)."""

from __future__ import annotations

import os

import pytest

from launcher_tools.insert import (
    InsertPayload,
    LineRange,
    format_insert_text,
    line_range_from_offsets,
    relative_to_root,
    resolve_insert_payload,
)


class TestFormatInsertText:
    def test_path_only(self):
        assert format_insert_text(InsertPayload("src/Foo.kt")) == "src/Foo.kt "

    def test_single_line(self):
        assert format_insert_text(InsertPayload("a.py", LineRange(3))) == "a.py:3 "

    def test_range(self):
        assert format_insert_text(InsertPayload("a.py", LineRange(3, 7))) == "a.py:3-7 "

    def test_same_start_and_end(self):
        assert format_insert_text(InsertPayload("a.py", LineRange(4, 4))) == "a.py:4 "


class TestRelativeToRoot:
    def test_inside_root(self, tmp_path):
        file_path = str(tmp_path / "src" / "app.py")
        assert relative_to_root(file_path, str(tmp_path)) == os.path.join("src", "app.py")

    def test_outside_root(self, tmp_path):
        other = str(tmp_path.parent / "elsewhere.py")
        assert relative_to_root(other, str(tmp_path / "proj")) == other

    def test_no_root(self):
        assert relative_to_root("/x/y.py", None) == "/x/y.py"


TEXT = "class Foo {\n    fun bar() {\n        val x = 1\n        val y = 2\n    }\n}"


class TestLineRangeFromOffsets:
    def test_two_line_selection(self):
        start = TEXT.index("val x")
        end = TEXT.index("val y") + len("val y = 2")
        assert line_range_from_offsets(TEXT, start, end) == LineRange(3, 4)

    def test_single_line_selection(self):
        start = TEXT.index("val x")
        assert line_range_from_offsets(TEXT, start, start + 5) == LineRange(3, None)

    def test_selection_ending_after_newline_excludes_next_line(self):
        start = TEXT.index("val x")
        end = TEXT.index("\n", start) + 1
        assert line_range_from_offsets(TEXT, start, end) == LineRange(3, None)

    def test_selection_to_end_of_text(self):
        start = TEXT.index("    }")
        assert line_range_from_offsets(TEXT, start, len(TEXT)) == LineRange(5, 6)

    def test_empty_selection(self):
        assert line_range_from_offsets(TEXT, 0, 0) == LineRange(1, None)

    @pytest.mark.parametrize(("start", "end"), [(-1, 3), (5, 2), (len(TEXT) + 1, len(TEXT) + 2)])
    def test_invalid_offsets(self, start, end):
        assert line_range_from_offsets(TEXT, start, end) is None


class TestResolveInsertPayload:
    def test_blank_file(self):
        assert resolve_insert_payload("  ") is None

    def test_lines(self, tmp_path):
        payload = resolve_insert_payload(str(tmp_path / "a.py"), str(tmp_path), 2, 5)
        assert payload == InsertPayload("a.py", LineRange(2, 5))

    def test_end_before_start_dropped(self):
        payload = resolve_insert_payload("a.py", None, 5, 2)
        assert payload.line_range == LineRange(5, None)

    def test_no_start_line(self):
        assert resolve_insert_payload("a.py", None, None, 9).line_range is None
