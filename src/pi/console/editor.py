"""Single-line editor state: buffer, cursor, history browsing and interrupts.

``LineEditor`` holds no terminal handle; every method mutates state and
reports what happened so the caller can decide what to redraw.  The cursor
indexes Unicode scalar values (Python ``str`` positions), never display
columns.
"""

from __future__ import annotations

import time
from dataclasses import dataclass
from typing import Callable

from pi.console.completion import CompletionCandidate
from pi.console.history import History
from pi.console.log import LogLevel

DEFAULT_CONFIRM_EXIT_WINDOW = 5.0


@dataclass(frozen=True)
class InterruptOutcome:
    """Result of the confirm-to-exit key: whether to exit and what to say."""

    exiting: bool
    message: str
    level: LogLevel


class LineEditor:
    """Editable command buffer with history and completion selection."""

    def __init__(
        self,
        *,
        confirm_exit_window: float = DEFAULT_CONFIRM_EXIT_WINDOW,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self.buffer: str = ""
        self.cursor_position: int = 0
        self.history = History()
        self.history_index: int | None = None
        self.last_interrupt_time: float | None = None
        self.candidates: list[CompletionCandidate] = []
        self.selected_candidate_index: int = 0

        self._confirm_exit_window = confirm_exit_window
        self._clock = clock

    # -- buffer editing -----------------------------------------------------

    def insert_char(self, ch: str) -> None:
        """Insert *ch* at the cursor and advance past it."""
        self.cursor_position = min(self.cursor_position, len(self.buffer))
        pos = self.cursor_position
        self.buffer = self.buffer[:pos] + ch + self.buffer[pos:]
        self.cursor_position += 1

    def delete_backward(self) -> bool:
        """Remove the character before the cursor. Returns ``False`` at column 0."""
        if self.cursor_position == 0:
            return False
        pos = self.cursor_position
        self.buffer = self.buffer[: pos - 1] + self.buffer[pos:]
        self.cursor_position -= 1
        return True

    def move_left(self) -> bool:
        if self.cursor_position == 0:
            return False
        self.cursor_position -= 1
        return True

    def move_right(self) -> bool:
        if self.cursor_position >= len(self.buffer):
            return False
        self.cursor_position += 1
        return True

    def set_buffer(self, text: str) -> None:
        """Replace the buffer and put the cursor at its end."""
        self.buffer = text
        self.cursor_position = len(text)

    def clear(self) -> None:
        """Empty the buffer and drop any shown candidates."""
        self.buffer = ""
        self.cursor_position = 0
        self.clear_candidates()

    # -- history ------------------------------------------------------------

    def history_up(self) -> bool:
        """Load the previous history entry.

        Starts from the most recent entry when not already browsing; stays
        put at the oldest one.
        """
        if not len(self.history):
            return False
        if self.history_index is None:
            index = self.history.last_index
        elif self.history_index > 0:
            index = self.history_index - 1
        else:
            return False
        self.history_index = index
        self.set_buffer(self.history.get(index))
        return True

    def history_down(self) -> bool:
        """Load the next history entry, or leave browsing past the newest."""
        if self.history_index is None:
            return False
        if self.history_index < self.history.last_index:
            self.history_index += 1
            self.set_buffer(self.history.get(self.history_index))
            return True
        self.history_index = None
        self.buffer = ""
        self.cursor_position = 0
        return True

    def submit(self) -> str | None:
        """Accept the current line.

        Returns the raw buffer when it holds more than whitespace (and
        records it in history), otherwise ``None``.  Candidates are cleared
        either way.
        """
        self.clear_candidates()
        if not self.buffer.strip():
            return None
        line = self.buffer
        self.history.push(line)
        self.buffer = ""
        self.cursor_position = 0
        self.history_index = None
        return line

    # -- interrupt keys -----------------------------------------------------

    def soft_exit(self) -> bool:
        """Clear everything and signal exit unconditionally."""
        self.clear()
        return True

    def confirm_exit(self, key_label: str = "Ctrl+C") -> InterruptOutcome:
        """Apply the double-press confirm-to-exit protocol."""
        now = self._clock()
        if self.buffer:
            self.clear()
            self.last_interrupt_time = now
            return InterruptOutcome(
                exiting=False,
                message=f"Input cleared. Press {key_label} again to exit.",
                level=LogLevel.INFO,
            )

        armed = self.last_interrupt_time
        if armed is not None and now - armed < self._confirm_exit_window:
            return InterruptOutcome(
                exiting=True,
                message="Exiting application. Goodbye!",
                level=LogLevel.WARN,
            )

        self.last_interrupt_time = now
        return InterruptOutcome(
            exiting=False,
            message=f"Press {key_label} again to exit.",
            level=LogLevel.INFO,
        )

    # -- completion candidates ---------------------------------------------

    def set_candidates(self, candidates: list[CompletionCandidate]) -> None:
        self.candidates = candidates
        self.selected_candidate_index = 0

    def clear_candidates(self) -> None:
        self.set_candidates([])

    @property
    def selected_candidate(self) -> CompletionCandidate | None:
        if not self.candidates:
            return None
        return self.candidates[self.selected_candidate_index]

    def select_previous(self) -> bool:
        if not self.candidates or self.selected_candidate_index == 0:
            return False
        self.selected_candidate_index -= 1
        return True

    def select_next(self) -> bool:
        if self.selected_candidate_index >= len(self.candidates) - 1:
            return False
        self.selected_candidate_index += 1
        return True
