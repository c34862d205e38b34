"""Tests for pi.console.terminal -- ProcessTerminal output and input decoding."""

from __future__ import annotations

import io
import os

import pytest

from pi.console.keys import KeyEvent, Modifiers
from pi.console.terminal import COLORS, ProcessTerminal


@pytest.fixture
def pipe_terminal():
    """ProcessTerminal reading from a pipe and writing to a StringIO."""
    read_fd, write_fd = os.pipe()
    stdin = os.fdopen(read_fd, "r")
    stdout = io.StringIO()
    term = ProcessTerminal(stdin=stdin, stdout=stdout)
    yield term, write_fd, stdout
    stdin.close()
    os.close(write_fd)


def make_terminal() -> tuple[ProcessTerminal, io.StringIO]:
    stdout = io.StringIO()
    return ProcessTerminal(stdin=io.StringIO(), stdout=stdout), stdout


class TestOutput:
    def test_plain_write(self) -> None:
        term, out = make_terminal()
        term.write("hello")
        assert out.getvalue() == "hello"

    def test_colored_write(self) -> None:
        term, out = make_terminal()
        term.write("[start]", "cyan")
        assert out.getvalue() == f"{COLORS['cyan']}[start]\x1b[0m"

    def test_move_to_column_is_one_based(self) -> None:
        term, out = make_terminal()
        term.move_to_column(0)
        term.move_to_column(5)
        assert out.getvalue() == "\x1b[1G\x1b[6G"

    def test_move_by(self) -> None:
        term, out = make_terminal()
        term.move_by(1)
        term.move_by(-2)
        term.move_by(0)
        assert out.getvalue() == "\x1b[1B\x1b[2A"

    def test_cursor_and_line_controls(self) -> None:
        term, out = make_terminal()
        term.hide_cursor()
        term.save_cursor()
        term.clear_line()
        term.clear_to_end_of_line()
        term.restore_cursor()
        term.show_cursor()
        assert out.getvalue() == "\x1b[?25l\x1b7\x1b[2K\x1b[K\x1b8\x1b[?25h"

    def test_write_log_mirror(self, tmp_path, monkeypatch: pytest.MonkeyPatch) -> None:
        log_path = tmp_path / "writes.log"
        monkeypatch.setenv("PI_CONSOLE_WRITE_LOG", str(log_path))
        term, out = make_terminal()
        term.write("mirrored")
        assert log_path.read_text() == "mirrored"


class TestPollEvent:
    def test_nothing_ready(self, pipe_terminal) -> None:
        term, write_fd, _ = pipe_terminal
        assert term.poll_event(0) is None

    def test_decodes_keys_in_order(self, pipe_terminal) -> None:
        term, write_fd, _ = pipe_terminal
        os.write(write_fd, b"a\x1b[1;3D\x03")
        assert term.poll_event(0) == KeyEvent("a")
        assert term.poll_event(0) == KeyEvent("left", Modifiers.ALT)
        assert term.poll_event(0) == KeyEvent("c", Modifiers.CTRL)
        assert term.poll_event(0) is None

    def test_utf8_split_across_reads(self, pipe_terminal) -> None:
        term, write_fd, _ = pipe_terminal
        data = "你".encode()
        os.write(write_fd, data[:1])
        assert term.poll_event(0) is None
        os.write(write_fd, data[1:])
        assert term.poll_event(0) == KeyEvent("你")

    def test_lone_escape_flushed(self, pipe_terminal) -> None:
        term, write_fd, _ = pipe_terminal
        os.write(write_fd, b"\x1b")
        assert term.poll_event(0) == KeyEvent("escape")

    def test_kitty_response_enables_protocol(self, pipe_terminal) -> None:
        term, write_fd, stdout = pipe_terminal
        os.write(write_fd, b"\x1b[?0ux")
        assert term.poll_event(0) == KeyEvent("x")
        assert term.kitty_protocol_active is True
        assert "\x1b[>1u" in stdout.getvalue()
