"""Virtual terminal for testing -- implements the Terminal protocol in-memory.

This module provides a ``VirtualTerminal`` class that satisfies the
``pi.console.terminal.Terminal`` protocol without performing any real I/O.
Every call is recorded as an operation tuple for assertions, and input
events are served from a queue filled by the test.
"""

from __future__ import annotations

from collections import deque

from pi.console.keys import InputEvent, KeyEvent


class VirtualTerminal:
    """In-memory terminal that records all operations for test inspection.

    Implements the ``Terminal`` protocol from ``pi.console.terminal``.

    Parameters
    ----------
    fail_on:
        Name of an operation (``"write"``, ``"flush"``, ...) that raises
        ``OSError`` when called.
    """

    def __init__(self, fail_on: str | None = None) -> None:
        self.ops: list[tuple] = []
        self.fail_on = fail_on
        self.raw_mode = False
        self.mouse_capture = False
        self.cursor_visible = True
        self._buffer: list[str] = []
        self._events: deque[InputEvent] = deque()

    def _record(self, op: str, *args: object) -> None:
        if op == self.fail_on:
            raise OSError(f"simulated failure in {op}")
        self.ops.append((op, *args))

    # -- Terminal protocol: lifecycle ---------------------------------------

    def enter_raw_mode(self) -> None:
        self._record("enter_raw_mode")
        self.raw_mode = True

    def exit_raw_mode(self) -> None:
        self._record("exit_raw_mode")
        self.raw_mode = False

    def enable_mouse_capture(self) -> None:
        self._record("enable_mouse_capture")
        self.mouse_capture = True

    def disable_mouse_capture(self) -> None:
        self._record("disable_mouse_capture")
        self.mouse_capture = False

    # -- Terminal protocol: cursor/line manipulation ------------------------

    def hide_cursor(self) -> None:
        self._record("hide_cursor")
        self.cursor_visible = False

    def show_cursor(self) -> None:
        self._record("show_cursor")
        self.cursor_visible = True

    def move_to_column(self, column: int) -> None:
        self._record("move_to_column", column)

    def move_by(self, lines: int) -> None:
        self._record("move_by", lines)

    def clear_line(self) -> None:
        self._record("clear_line")

    def clear_to_end_of_line(self) -> None:
        self._record("clear_to_end_of_line")

    def save_cursor(self) -> None:
        self._record("save_cursor")

    def restore_cursor(self) -> None:
        self._record("restore_cursor")

    # -- Terminal protocol: output ------------------------------------------

    def write(self, text: str, color: str | None = None) -> None:
        self._record("write", text, color)
        self._buffer.append(text)

    def flush(self) -> None:
        self._record("flush")

    # -- Terminal protocol: input -------------------------------------------

    def poll_event(self, timeout: float = 0.0) -> InputEvent | None:
        if self._events:
            return self._events.popleft()
        return None

    # -- Test helpers -------------------------------------------------------

    @property
    def output(self) -> str:
        """Return everything written to the terminal as a single string."""
        return "".join(self._buffer)

    def op_names(self) -> list[str]:
        return [op[0] for op in self.ops]

    def writes(self) -> list[tuple[str, str | None]]:
        """Return ``(text, color)`` for every write, in order."""
        return [(op[1], op[2]) for op in self.ops if op[0] == "write"]

    def clear_ops(self) -> None:
        """Discard all recorded operations and output."""
        self.ops.clear()
        self._buffer.clear()

    def queue_events(self, *events: InputEvent) -> None:
        self._events.extend(events)

    def type_text(self, text: str) -> None:
        """Queue one key press per character of *text*."""
        self._events.extend(KeyEvent(ch) for ch in text)

    @property
    def pending_events(self) -> int:
        return len(self._events)
