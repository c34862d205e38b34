"""Terminal abstraction for raw-mode, poll-driven console interaction.

Provides a ``Terminal`` protocol (the capability set the console core draws
with) and a concrete ``ProcessTerminal`` backed by ``sys.stdin`` and
``sys.stdout``.  ``ProcessTerminal`` manages raw mode, mouse capture, the
Kitty keyboard protocol and cursor control via ANSI escape sequences, and
decodes input through :class:`~pi.console.input_buffer.InputBuffer` and
:func:`~pi.console.keys.decode_event`.

I/O failures are raised as :class:`OSError`; nothing here swallows them.
"""

from __future__ import annotations

import codecs
import logging
import os
import re
import select
import sys
import termios
import tty
from collections import deque
from typing import Protocol, TextIO

from pi.console.input_buffer import InputBuffer
from pi.console.keys import InputEvent, decode_event

logger = logging.getLogger(__name__)

# ---------------------------------------------------------------------------
# ANSI escape constants
# ---------------------------------------------------------------------------

_MOUSE_CAPTURE_ENABLE = "\x1b[?1000h\x1b[?1002h\x1b[?1003h\x1b[?1015h\x1b[?1006h"
_MOUSE_CAPTURE_DISABLE = "\x1b[?1006l\x1b[?1015l\x1b[?1003l\x1b[?1002l\x1b[?1000l"

_KITTY_QUERY = "\x1b[?u"
_KITTY_ENABLE = "\x1b[>1u"
_KITTY_DISABLE = "\x1b[<u"

_KITTY_RESPONSE_RE = re.compile(r"^\x1b\[\?(\d+)u$")

_HIDE_CURSOR = "\x1b[?25l"
_SHOW_CURSOR = "\x1b[?25h"
_SAVE_CURSOR = "\x1b7"
_RESTORE_CURSOR = "\x1b8"
_CLEAR_LINE = "\x1b[2K"
_CLEAR_TO_END_OF_LINE = "\x1b[K"
_CURSOR_UP_FMT = "\x1b[{}A"
_CURSOR_DOWN_FMT = "\x1b[{}B"
_CURSOR_COLUMN_FMT = "\x1b[{}G"

_RESET_COLOR = "\x1b[0m"

COLORS: dict[str, str] = {
    "black": "\x1b[30m",
    "red": "\x1b[31m",
    "green": "\x1b[32m",
    "yellow": "\x1b[33m",
    "blue": "\x1b[34m",
    "magenta": "\x1b[35m",
    "cyan": "\x1b[36m",
    "white": "\x1b[37m",
    "dark_grey": "\x1b[90m",
}

# How long an incomplete escape sequence may wait for its tail before it is
# treated as a standalone keypress (e.g. a bare ESC).
_ESCAPE_TIMEOUT = 0.01


# ---------------------------------------------------------------------------
# Terminal protocol
# ---------------------------------------------------------------------------


class Terminal(Protocol):
    """Capability set the console core draws and reads with."""

    def enter_raw_mode(self) -> None: ...

    def exit_raw_mode(self) -> None: ...

    def enable_mouse_capture(self) -> None: ...

    def disable_mouse_capture(self) -> None: ...

    def hide_cursor(self) -> None: ...

    def show_cursor(self) -> None: ...

    def move_to_column(self, column: int) -> None: ...

    def move_by(self, lines: int) -> None: ...

    def clear_line(self) -> None: ...

    def clear_to_end_of_line(self) -> None: ...

    def save_cursor(self) -> None: ...

    def restore_cursor(self) -> None: ...

    def write(self, text: str, color: str | None = None) -> None: ...

    def flush(self) -> None: ...

    def poll_event(self, timeout: float = 0.0) -> InputEvent | None: ...


# ---------------------------------------------------------------------------
# ProcessTerminal implementation
# ---------------------------------------------------------------------------


class ProcessTerminal:
    """Concrete terminal implementation backed by stdin/stdout.

    Output is written straight through to the stream and flushed by
    :meth:`flush`.  Set ``PI_CONSOLE_WRITE_LOG`` to a file path to mirror
    every write into that file.
    """

    def __init__(
        self,
        stdin: TextIO | None = None,
        stdout: TextIO | None = None,
    ) -> None:
        self._stdin = stdin if stdin is not None else sys.stdin
        self._stdout = stdout if stdout is not None else sys.stdout
        self._original_termios: list | None = None
        self._kitty_protocol_active: bool = False
        self._input_buffer = InputBuffer()
        self._decoder = codecs.getincrementaldecoder("utf-8")(errors="replace")
        self._pending: deque[str] = deque()
        self._write_log_path: str = os.environ.get("PI_CONSOLE_WRITE_LOG", "")

    @property
    def kitty_protocol_active(self) -> bool:
        return self._kitty_protocol_active

    @property
    def columns(self) -> int:
        try:
            return os.get_terminal_size(self._stdout.fileno()).columns
        except (ValueError, OSError):
            return 80

    # -- raw mode -----------------------------------------------------------

    def enter_raw_mode(self) -> None:
        """Switch stdin to raw mode and ask whether Kitty keys are supported."""
        fd = self._stdin.fileno()
        self._original_termios = termios.tcgetattr(fd)
        tty.setraw(fd)
        self.write(_KITTY_QUERY)
        self.flush()

    def exit_raw_mode(self) -> None:
        """Disable the Kitty protocol and restore the saved terminal state."""
        if self._kitty_protocol_active:
            self.write(_KITTY_DISABLE)
            self.flush()
            self._kitty_protocol_active = False

        if self._original_termios is not None:
            termios.tcsetattr(self._stdin.fileno(), termios.TCSADRAIN, self._original_termios)
            self._original_termios = None

        self._input_buffer.clear()
        self._pending.clear()

    def enable_mouse_capture(self) -> None:
        self.write(_MOUSE_CAPTURE_ENABLE)

    def disable_mouse_capture(self) -> None:
        self.write(_MOUSE_CAPTURE_DISABLE)

    # -- cursor / line manipulation ----------------------------------------

    def hide_cursor(self) -> None:
        self.write(_HIDE_CURSOR)

    def show_cursor(self) -> None:
        self.write(_SHOW_CURSOR)

    def move_to_column(self, column: int) -> None:
        # CHA is 1-based
        self.write(_CURSOR_COLUMN_FMT.format(column + 1))

    def move_by(self, lines: int) -> None:
        """Move the cursor up (negative) or down (positive) by *lines*."""
        if lines < 0:
            self.write(_CURSOR_UP_FMT.format(-lines))
        elif lines > 0:
            self.write(_CURSOR_DOWN_FMT.format(lines))

    def clear_line(self) -> None:
        self.write(_CLEAR_LINE)

    def clear_to_end_of_line(self) -> None:
        self.write(_CLEAR_TO_END_OF_LINE)

    def save_cursor(self) -> None:
        self.write(_SAVE_CURSOR)

    def restore_cursor(self) -> None:
        self.write(_RESTORE_CURSOR)

    # -- output -------------------------------------------------------------

    def write(self, text: str, color: str | None = None) -> None:
        """Write *text*, wrapped in the named foreground *color* if given."""
        if color is not None:
            text = f"{COLORS[color]}{text}{_RESET_COLOR}"
        self._stdout.write(text)

        if self._write_log_path:
            with open(self._write_log_path, "a") as f:
                f.write(text)

    def flush(self) -> None:
        self._stdout.flush()

    # -- input --------------------------------------------------------------

    def poll_event(self, timeout: float = 0.0) -> InputEvent | None:
        """Return the next decoded input event, or ``None`` if none is ready.

        Waits at most *timeout* seconds for new input.  Terminal responses
        (the Kitty protocol reply) are consumed here and never returned.
        """
        while True:
            if not self._pending and not self._read_available(timeout):
                return None
            if not self._pending:
                continue
            data = self._pending.popleft()
            if self._handle_terminal_response(data):
                timeout = 0.0
                continue
            return decode_event(data)

    def _read_available(self, timeout: float) -> bool:
        """Read whatever input is ready into the pending queue.

        Returns ``False`` when nothing arrived within *timeout*.
        """
        fd = self._stdin.fileno()
        readable, _, _ = select.select([fd], [], [], timeout)
        if not readable:
            if self._input_buffer.pending:
                self._pending.extend(self._input_buffer.flush())
                return True
            return False

        raw = os.read(fd, 4096)
        if not raw:
            return False

        self._pending.extend(self._input_buffer.feed(self._decoder.decode(raw)))

        # Give a split escape sequence a moment to complete
        if self._input_buffer.pending and not self._pending:
            readable, _, _ = select.select([fd], [], [], _ESCAPE_TIMEOUT)
            if readable:
                raw = os.read(fd, 4096)
                self._pending.extend(self._input_buffer.feed(self._decoder.decode(raw)))
            if self._input_buffer.pending and not self._pending:
                self._pending.extend(self._input_buffer.flush())
        return True

    def _handle_terminal_response(self, data: str) -> bool:
        if _KITTY_RESPONSE_RE.match(data):
            if not self._kitty_protocol_active:
                self._kitty_protocol_active = True
                self.write(_KITTY_ENABLE)
                self.flush()
                logger.debug("Kitty keyboard protocol enabled")
            return True
        return False
