"""Tests for pi.console.utils -- width measurement and truncation."""

from __future__ import annotations

from pi.console.utils import (
    char_width,
    cursor_column,
    strip_ansi,
    truncate_to_width,
    visible_width,
)


class TestStripAnsi:
    def test_removes_colors(self) -> None:
        assert strip_ansi("\x1b[36m[start]\x1b[0m") == "[start]"


class TestCharWidth:
    def test_ascii(self) -> None:
        assert char_width("a") == 1

    def test_wide(self) -> None:
        assert char_width("你") == 2

    def test_combining_mark(self) -> None:
        assert char_width("\u0301") == 0

    def test_control(self) -> None:
        assert char_width("\x1b") == 0
        assert char_width("") == 0


class TestVisibleWidth:
    def test_ascii(self) -> None:
        assert visible_width("hello") == 5

    def test_ignores_ansi(self) -> None:
        assert visible_width("\x1b[32mhi\x1b[0m") == 2

    def test_cjk(self) -> None:
        assert visible_width("你好") == 4

    def test_combining_sequence(self) -> None:
        assert visible_width("e\u0301") == 1

    def test_empty(self) -> None:
        assert visible_width("") == 0


class TestCursorColumn:
    def test_prompt_only(self) -> None:
        assert cursor_column("> ", "", 0) == 2

    def test_ascii(self) -> None:
        assert cursor_column("> ", "abc", 2) == 4

    def test_wide_characters(self) -> None:
        assert cursor_column("> ", "你好", 1) == 4
        assert cursor_column("> ", "你好", 2) == 6

    def test_zero_width_characters(self) -> None:
        # "e" + combining acute: two code points, one column
        assert cursor_column("> ", "e\u0301x", 2) == 3
        assert cursor_column("> ", "e\u0301x", 3) == 4


class TestTruncateToWidth:
    def test_short_text_unchanged(self) -> None:
        assert truncate_to_width("start", 10) == "start"

    def test_long_text_gets_ellipsis(self) -> None:
        result = truncate_to_width("very-long-command-name", 10)
        assert result == "very-lo..."
        assert visible_width(result) == 10

    def test_wide_characters_not_split(self) -> None:
        result = truncate_to_width("你好世界", 6)
        assert result == "你..."
        assert visible_width(result) <= 6

    def test_non_positive_width(self) -> None:
        assert truncate_to_width("abc", 0) == ""
