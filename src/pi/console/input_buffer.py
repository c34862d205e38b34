"""InputBuffer accumulates raw terminal input and yields complete sequences.

Reads from a terminal can end in the middle of an escape sequence (an arrow
key, a mouse report).  Decoding a partial sequence would turn it into stray
keypresses, so incomplete tails are held back until more data arrives or the
caller decides the tail is stale and flushes it (a lone ESC keypress).
"""

from __future__ import annotations

import re

ESC = "\x1b"

_SGR_MOUSE_PAYLOAD_RE = re.compile(r"^<\d+;\d+;\d+[Mm]$")


def _is_complete_sequence(data: str) -> str:
    """Classify *data* as ``'complete'``, ``'incomplete'`` or ``'not-escape'``."""
    if not data.startswith(ESC):
        return "not-escape"

    if len(data) == 1:
        return "incomplete"

    after_esc = data[1:]

    # CSI sequences: ESC [
    if after_esc.startswith("["):
        if after_esc.startswith("[M"):
            # X10 mouse: ESC [ M + three raw bytes
            return "complete" if len(data) >= 6 else "incomplete"
        return _is_complete_csi_sequence(data)

    # OSC sequences: ESC ]  (terminated by BEL or ST)
    if after_esc.startswith("]"):
        if data.endswith(f"{ESC}\\") or data.endswith("\x07"):
            return "complete"
        return "incomplete"

    # SS3 sequences: ESC O <final>
    if after_esc.startswith("O"):
        return "complete" if len(after_esc) >= 2 else "incomplete"

    # Alt + ESC-prefixed sequence (e.g. ESC ESC [ D)
    if after_esc.startswith(ESC):
        inner = _is_complete_sequence(after_esc)
        return "complete" if inner == "not-escape" else inner

    # Meta key: ESC followed by a single character
    return "complete"


def _is_complete_csi_sequence(data: str) -> str:
    if len(data) < 3:
        return "incomplete"

    payload = data[2:]
    last_char = payload[-1]

    if 0x40 <= ord(last_char) <= 0x7E:
        if payload.startswith("<"):
            # SGR mouse reports may contain final-byte-looking characters
            return "complete" if _SGR_MOUSE_PAYLOAD_RE.match(payload) else "incomplete"
        return "complete"

    return "incomplete"


def split_sequences(buffer: str) -> tuple[list[str], str]:
    """Split *buffer* into complete sequences.

    Returns ``(sequences, remainder)`` where *remainder* is a trailing
    incomplete escape sequence (or ``""``).
    """
    sequences: list[str] = []
    pos = 0

    while pos < len(buffer):
        remaining = buffer[pos:]

        if not remaining.startswith(ESC):
            sequences.append(remaining[0])
            pos += 1
            continue

        for seq_end in range(1, len(remaining) + 1):
            status = _is_complete_sequence(remaining[:seq_end])
            if status != "incomplete":
                sequences.append(remaining[:seq_end])
                pos += seq_end
                break
        else:
            return sequences, remaining

    return sequences, ""


class InputBuffer:
    """Buffers raw input and hands out complete sequences."""

    def __init__(self) -> None:
        self._buffer: str = ""

    def feed(self, data: str) -> list[str]:
        """Append *data* and return every sequence that is now complete."""
        self._buffer += data
        sequences, self._buffer = split_sequences(self._buffer)
        return sequences

    def flush(self) -> list[str]:
        """Give up waiting and return the incomplete tail as one sequence."""
        if not self._buffer:
            return []
        sequences = [self._buffer]
        self._buffer = ""
        return sequences

    @property
    def pending(self) -> str:
        return self._buffer

    def clear(self) -> None:
        self._buffer = ""
