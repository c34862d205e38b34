"""Redraws the input line and completion hints in place.

The renderer never diffs: every redraw clears the input line (and the hint
line below it, when one is on screen) and writes everything again.  Log
output is interleaved by clearing the edit line, printing the log text on
its own line and redrawing the edit line underneath.
"""

from __future__ import annotations

import contextlib
from typing import Protocol

from pi.console.completion import CompletionCandidate
from pi.console.terminal import Terminal
from pi.console.utils import cursor_column, truncate_to_width

DEFAULT_MAX_HINTS = 5

SELECTED_COLOR = "cyan"
UNSELECTED_COLOR = "dark_grey"


class EditState(Protocol):
    """What the renderer reads from the editor."""

    buffer: str
    cursor_position: int
    candidates: list[CompletionCandidate]
    selected_candidate_index: int


def hint_window(total: int, selected: int, size: int = DEFAULT_MAX_HINTS) -> tuple[int, int]:
    """Return the ``[start, end)`` slice of candidates to display.

    The window holds at most *size* entries and always contains *selected*,
    centred on it when there is room on both sides.
    """
    size = max(size, 1)
    if total <= size:
        return 0, total

    half = size // 2
    if selected <= half:
        start = 0
    elif selected >= total - half:
        start = total - size
    else:
        start = selected - half
    return start, start + size


def format_hint(candidate: CompletionCandidate, max_length: int | None = None) -> str:
    """Render one candidate as ``[text]`` or ``[text: description]``."""
    text = candidate.completion
    if max_length is not None:
        text = truncate_to_width(text, max_length)
    if candidate.description is not None:
        return f"[{text}: {candidate.description}]"
    return f"[{text}]"


def overflow_indicator(hidden_left: int, hidden_right: int) -> str:
    """Describe how many candidates are scrolled out of the hint window."""
    if hidden_left and hidden_right:
        return f"(+{hidden_left}/+{hidden_right})"
    if hidden_left:
        return f"(+{hidden_left}←)"
    if hidden_right:
        return f"(→+{hidden_right})"
    return ""


class Renderer:
    """Owns the hint-line flag and all drawing of the edit line."""

    def __init__(
        self,
        terminal: Terminal,
        prompt: str = "> ",
        *,
        max_hints: int = DEFAULT_MAX_HINTS,
        max_hint_length: int | None = None,
    ) -> None:
        self.terminal = terminal
        self.prompt = prompt
        self.max_hints = max_hints
        self.max_hint_length = max_hint_length
        self.hints_rendered: bool = False

    def clear(self) -> None:
        """Erase the input line, plus the hint line below it if one is drawn."""
        term = self.terminal
        term.move_to_column(0)
        term.clear_line()
        if self.hints_rendered:
            term.move_by(1)
            term.clear_line()
            term.move_by(-1)
            term.move_to_column(0)
            self.hints_rendered = False

    def draw(self, state: EditState) -> None:
        """Redraw prompt, buffer and hints, then place the cursor."""
        try:
            self.terminal.hide_cursor()
            self.clear()
            self._draw_content(state)
        except Exception:
            self._force_cursor_visible()
            raise

    def print_log_entry(self, line: str, state: EditState) -> None:
        """Print *line* above the edit line without disturbing the edit."""
        term = self.terminal
        try:
            self.clear()
            term.write(line.replace("\r\n", "\n").replace("\n", "\r\n") + "\n")
            term.move_to_column(0)
            term.hide_cursor()
            self._draw_content(state)
        except Exception:
            self._force_cursor_visible()
            raise

    def _draw_content(self, state: EditState) -> None:
        term = self.terminal
        term.write(self.prompt)
        term.write(state.buffer)

        if state.candidates:
            self._draw_hints(state.candidates, state.selected_candidate_index)

        term.move_to_column(cursor_column(self.prompt, state.buffer, state.cursor_position))
        term.show_cursor()
        term.flush()

    def _draw_hints(self, candidates: list[CompletionCandidate], selected: int) -> None:
        term = self.terminal
        total = len(candidates)
        start, end = hint_window(total, selected, self.max_hints)

        term.save_cursor()
        term.write("\n")
        term.move_to_column(0)

        for idx in range(start, end):
            if idx > start:
                term.write("  ")
            color = SELECTED_COLOR if idx == selected else UNSELECTED_COLOR
            term.write(format_hint(candidates[idx], self.max_hint_length), color)

        indicator = overflow_indicator(start, total - end)
        if indicator:
            term.write(f"  {indicator}", UNSELECTED_COLOR)

        term.clear_to_end_of_line()
        term.restore_cursor()
        self.hints_rendered = True

    def _force_cursor_visible(self) -> None:
        with contextlib.suppress(OSError):
            self.terminal.show_cursor()
            self.terminal.flush()
