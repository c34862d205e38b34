"""Append-only command history for the line editor."""

from __future__ import annotations


class History:
    """Previously submitted lines, oldest first.

    Entries are stored exactly as submitted (untrimmed) and duplicates are
    kept.  Nothing is ever removed for the lifetime of the process.
    """

    def __init__(self) -> None:
        self._entries: list[str] = []

    def push(self, line: str) -> None:
        """Append a submitted line."""
        self._entries.append(line)

    def get(self, index: int) -> str:
        return self._entries[index]

    @property
    def entries(self) -> list[str]:
        """A copy of all entries, oldest first."""
        return list(self._entries)

    @property
    def last_index(self) -> int:
        """Index of the most recent entry (``-1`` when empty)."""
        return len(self._entries) - 1

    @property
    def length(self) -> int:
        return len(self._entries)

    def __len__(self) -> int:
        return len(self._entries)
