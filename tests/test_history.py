"""Tests for pi.console.history."""

from __future__ import annotations

from pi.console.history import History


class TestHistory:
    def test_starts_empty(self) -> None:
        history = History()
        assert len(history) == 0
        assert history.last_index == -1

    def test_push_keeps_order_and_duplicates(self) -> None:
        history = History()
        for line in ["a", "b", "a"]:
            history.push(line)
        assert history.entries == ["a", "b", "a"]
        assert history.get(1) == "b"
        assert history.length == 3

    def test_entries_untrimmed(self) -> None:
        history = History()
        history.push("  spaced  ")
        assert history.get(0) == "  spaced  "

    def test_entries_is_a_copy(self) -> None:
        history = History()
        history.push("a")
        history.entries.append("b")
        assert history.entries == ["a"]
