"""Keyboard input decoding for terminal applications.

Turns one complete raw input sequence (see :mod:`pi.console.input_buffer`)
into a structured event.  Handles the Kitty keyboard protocol (CSI u),
xterm-style modified sequences, legacy escape sequences, control bytes and
ESC-prefixed Alt combinations.
"""

from __future__ import annotations

import enum
import re
from dataclasses import dataclass
from typing import Optional, Union

# ---------------------------------------------------------------------------
# Event types
# ---------------------------------------------------------------------------


class KeyKind(enum.Enum):
    PRESS = "press"
    REPEAT = "repeat"
    RELEASE = "release"


class Modifiers(enum.IntFlag):
    NONE = 0
    SHIFT = 1
    ALT = 2
    CTRL = 4


@dataclass(frozen=True)
class KeyEvent:
    """A decoded key event.

    ``code`` is either the typed character (``"a"``, ``"A"``, ``"é"``, ``" "``)
    or a named key such as ``"enter"``, ``"left"`` or ``"f5"``.
    """

    code: str
    modifiers: Modifiers = Modifiers.NONE
    kind: KeyKind = KeyKind.PRESS

    @property
    def key_id(self) -> str:
        """Key identifier in ``ctrl+shift+alt+<name>`` form, e.g. ``"ctrl+c"``."""
        name = "space" if self.code == " " else self.code
        modifiers = self.modifiers
        if len(name) == 1:
            if modifiers & (Modifiers.CTRL | Modifiers.ALT):
                name = name.lower()
            else:
                # Shift alone is already folded into the character
                modifiers = Modifiers.NONE

        prefix = ""
        if modifiers & Modifiers.CTRL:
            prefix += "ctrl+"
        if modifiers & Modifiers.SHIFT:
            prefix += "shift+"
        if modifiers & Modifiers.ALT:
            prefix += "alt+"
        return prefix + name

    @property
    def char(self) -> str | None:
        """The printable character this event inserts, or ``None``."""
        if len(self.code) != 1 or not self.code.isprintable():
            return None
        if self.modifiers & (Modifiers.CTRL | Modifiers.ALT):
            return None
        return self.code


@dataclass(frozen=True)
class MouseEvent:
    data: str


@dataclass(frozen=True)
class UnknownEvent:
    data: str


InputEvent = Union[KeyEvent, MouseEvent, UnknownEvent]

# ---------------------------------------------------------------------------
# Constants
# ---------------------------------------------------------------------------

# Kitty CSI u codepoints with special meaning
_KITTY_NAMED_CODEPOINTS: dict[int, str] = {
    9: "tab",
    13: "enter",
    27: "escape",
    127: "backspace",
    57414: "enter",  # keypad enter
}

# Kitty F-key codepoints (57364+)
_KITTY_F_KEY_CODEPOINTS: dict[int, str] = {57364 + i: f"f{i + 1}" for i in range(12)}

_CSI_LETTER_KEYS: dict[str, str] = {
    "A": "up",
    "B": "down",
    "C": "right",
    "D": "left",
    "H": "home",
    "F": "end",
    "P": "f1",
    "Q": "f2",
    "R": "f3",
    "S": "f4",
}

_CSI_TILDE_KEYS: dict[int, str] = {
    1: "home",
    2: "insert",
    3: "delete",
    4: "end",
    5: "pageUp",
    6: "pageDown",
    15: "f5",
    17: "f6",
    18: "f7",
    19: "f8",
    20: "f9",
    21: "f10",
    23: "f11",
    24: "f12",
}

# Unmodified legacy escape sequences -> key names
LEGACY_KEY_SEQUENCES: dict[str, str] = {
    "\x1b[A": "up",
    "\x1b[B": "down",
    "\x1b[C": "right",
    "\x1b[D": "left",
    "\x1b[H": "home",
    "\x1b[F": "end",
    "\x1bOA": "up",
    "\x1bOB": "down",
    "\x1bOC": "right",
    "\x1bOD": "left",
    "\x1bOH": "home",
    "\x1bOF": "end",
    "\x1bOP": "f1",
    "\x1bOQ": "f2",
    "\x1bOR": "f3",
    "\x1bOS": "f4",
    "\x1b[E": "clear",
}

_EVENT_KINDS: dict[int, KeyKind] = {
    1: KeyKind.PRESS,
    2: KeyKind.REPEAT,
    3: KeyKind.RELEASE,
}

# Only shift/alt/ctrl are tracked; super, hyper, meta and lock bits are dropped
_MODIFIER_MASK = 0b111

# ---------------------------------------------------------------------------
# Regex patterns
# ---------------------------------------------------------------------------

# CSI u: \x1b[<codepoint>(:<shifted>(:<base>))?(;<modifier>(:<event>))?u
_KITTY_CSI_U_RE = re.compile(
    r"^\x1b\[(\d+)(?::(\d*)(?::(\d+))?)?(?:;(\d+)(?::(\d+))?)?u$"
)

# Modified letter keys: \x1b[1;<modifier>(:<event>)?[ABCDHFPQRS]
_CSI_MODIFIED_LETTER_RE = re.compile(r"^\x1b\[1;(\d+)(?::(\d+))?([ABCDHFPQRS])$")

# Tilde keys: \x1b[<number>(;<modifier>(:<event>)?)?~
_CSI_TILDE_RE = re.compile(r"^\x1b\[(\d+)(?:;(\d+)(?::(\d+))?)?~$")

# modifyOtherKeys: \x1b[27;<modifier>;<keycode>~
_MODIFY_OTHER_KEYS_RE = re.compile(r"^\x1b\[27;(\d+);(\d+)~$")

# SGR mouse (\x1b[<b;x;yM) and X10 mouse (\x1b[M + 3 bytes)
_SGR_MOUSE_RE = re.compile(r"^\x1b\[<\d+;\d+;\d+[Mm]$")


# ---------------------------------------------------------------------------
# Decoding
# ---------------------------------------------------------------------------


def _modifiers_from_param(value: int) -> Modifiers:
    return Modifiers((value - 1) & _MODIFIER_MASK)


def _kind_from_param(value: Optional[str]) -> KeyKind:
    if not value:
        return KeyKind.PRESS
    return _EVENT_KINDS.get(int(value), KeyKind.PRESS)


def _decode_kitty(match: re.Match[str]) -> KeyEvent | None:
    codepoint = int(match.group(1))
    shifted = int(match.group(2)) if match.group(2) else None
    modifiers = _modifiers_from_param(int(match.group(4))) if match.group(4) else Modifiers.NONE
    kind = _kind_from_param(match.group(5))

    name = _KITTY_NAMED_CODEPOINTS.get(codepoint) or _KITTY_F_KEY_CODEPOINTS.get(codepoint)
    if name is not None:
        return KeyEvent(name, modifiers, kind)

    if modifiers & Modifiers.SHIFT and shifted is not None:
        codepoint = shifted
    ch = chr(codepoint)
    if ch.isprintable():
        return KeyEvent(ch, modifiers, kind)
    return None


def decode_event(data: str) -> InputEvent:  # noqa: C901
    """Decode one complete input sequence into an event.

    Sequences that are not keys (mouse reports, terminal responses,
    unsupported escapes) decode to :class:`MouseEvent` or
    :class:`UnknownEvent`.
    """
    if not data:
        return UnknownEvent(data)

    if _SGR_MOUSE_RE.match(data) or (data.startswith("\x1b[M") and len(data) == 6):
        return MouseEvent(data)

    # --- Kitty protocol ---
    m = _KITTY_CSI_U_RE.match(data)
    if m:
        event = _decode_kitty(m)
        return event if event is not None else UnknownEvent(data)

    # --- modifyOtherKeys ---
    m = _MODIFY_OTHER_KEYS_RE.match(data)
    if m:
        modifiers = _modifiers_from_param(int(m.group(1)))
        keycode = int(m.group(2))
        name = _KITTY_NAMED_CODEPOINTS.get(keycode)
        if name is not None:
            return KeyEvent(name, modifiers)
        return KeyEvent(chr(keycode), modifiers)

    # --- Modified arrows / home / end / F1-F4 (xterm and kitty) ---
    m = _CSI_MODIFIED_LETTER_RE.match(data)
    if m:
        return KeyEvent(
            _CSI_LETTER_KEYS[m.group(3)],
            _modifiers_from_param(int(m.group(1))),
            _kind_from_param(m.group(2)),
        )

    # --- Tilde keys (delete, page up, F5+) ---
    m = _CSI_TILDE_RE.match(data)
    if m:
        name = _CSI_TILDE_KEYS.get(int(m.group(1)))
        if name is None:
            return UnknownEvent(data)
        modifiers = _modifiers_from_param(int(m.group(2))) if m.group(2) else Modifiers.NONE
        return KeyEvent(name, modifiers, _kind_from_param(m.group(3)))

    # --- Legacy sequences ---
    name = LEGACY_KEY_SEQUENCES.get(data)
    if name is not None:
        return KeyEvent(name)
    if data == "\x1b[Z":
        return KeyEvent("tab", Modifiers.SHIFT)

    # --- Single bytes ---
    if data == "\x1b":
        return KeyEvent("escape")
    if data in ("\r", "\n"):
        return KeyEvent("enter")
    if data == "\t":
        return KeyEvent("tab")
    if data in ("\x7f", "\x08"):
        return KeyEvent("backspace")
    if data == "\x00":
        return KeyEvent(" ", Modifiers.CTRL)
    if len(data) == 1 and 1 <= ord(data) <= 26:
        return KeyEvent(chr(ord(data) + ord("a") - 1), Modifiers.CTRL)

    # --- Alt + key (ESC prefix) ---
    if data[0] == "\x1b" and len(data) > 1:
        inner = decode_event(data[1:])
        if isinstance(inner, KeyEvent):
            return KeyEvent(inner.code, inner.modifiers | Modifiers.ALT, inner.kind)
        return UnknownEvent(data)

    # --- Plain printable character ---
    if len(data) == 1 and data.isprintable():
        return KeyEvent(data)

    return UnknownEvent(data)
