"""Tests for pi.console.keys -- decoding raw input into key events."""

from __future__ import annotations

import pytest

from pi.console.keys import (
    KeyEvent,
    KeyKind,
    Modifiers,
    MouseEvent,
    UnknownEvent,
    decode_event,
)

ESC = "\x1b"


# ---------------------------------------------------------------------------
# KeyEvent helpers
# ---------------------------------------------------------------------------


class TestKeyId:
    def test_plain_character(self) -> None:
        assert KeyEvent("a").key_id == "a"

    def test_shift_folded_into_character(self) -> None:
        assert KeyEvent("A", Modifiers.SHIFT).key_id == "A"

    def test_ctrl_lowercases(self) -> None:
        assert KeyEvent("C", Modifiers.CTRL | Modifiers.SHIFT).key_id == "ctrl+shift+c"

    def test_named_key_with_modifiers(self) -> None:
        event = KeyEvent("left", Modifiers.CTRL | Modifiers.ALT)
        assert event.key_id == "ctrl+alt+left"

    def test_space(self) -> None:
        assert KeyEvent(" ").key_id == "space"
        assert KeyEvent(" ", Modifiers.CTRL).key_id == "ctrl+space"


class TestChar:
    def test_printable(self) -> None:
        assert KeyEvent("é").char == "é"
        assert KeyEvent(" ").char == " "

    def test_named_key_has_no_char(self) -> None:
        assert KeyEvent("enter").char is None

    def test_ctrl_or_alt_has_no_char(self) -> None:
        assert KeyEvent("a", Modifiers.CTRL).char is None
        assert KeyEvent("a", Modifiers.ALT).char is None

    def test_shift_keeps_char(self) -> None:
        assert KeyEvent("A", Modifiers.SHIFT).char == "A"


# ---------------------------------------------------------------------------
# decode_event
# ---------------------------------------------------------------------------


class TestLegacyDecoding:
    @pytest.mark.parametrize(
        ("data", "code"),
        [
            (f"{ESC}[A", "up"),
            (f"{ESC}[B", "down"),
            (f"{ESC}[C", "right"),
            (f"{ESC}[D", "left"),
            (f"{ESC}OA", "up"),
            (f"{ESC}[H", "home"),
            (f"{ESC}[3~", "delete"),
            (f"{ESC}[15~", "f5"),
            ("\r", "enter"),
            ("\n", "enter"),
            ("\t", "tab"),
            ("\x7f", "backspace"),
            ("\x08", "backspace"),
            (ESC, "escape"),
        ],
    )
    def test_named_keys(self, data: str, code: str) -> None:
        assert decode_event(data) == KeyEvent(code)

    def test_control_letters(self) -> None:
        assert decode_event("\x03") == KeyEvent("c", Modifiers.CTRL)
        assert decode_event("\x04") == KeyEvent("d", Modifiers.CTRL)

    def test_ctrl_space(self) -> None:
        assert decode_event("\x00") == KeyEvent(" ", Modifiers.CTRL)

    def test_shift_tab(self) -> None:
        assert decode_event(f"{ESC}[Z") == KeyEvent("tab", Modifiers.SHIFT)

    def test_printable(self) -> None:
        assert decode_event("a") == KeyEvent("a")
        assert decode_event("你") == KeyEvent("你")


class TestModifiedDecoding:
    def test_alt_arrow_xterm(self) -> None:
        assert decode_event(f"{ESC}[1;3D") == KeyEvent("left", Modifiers.ALT)
        assert decode_event(f"{ESC}[1;3C") == KeyEvent("right", Modifiers.ALT)

    def test_ctrl_arrow(self) -> None:
        assert decode_event(f"{ESC}[1;5A") == KeyEvent("up", Modifiers.CTRL)

    def test_esc_prefixed_alt(self) -> None:
        assert decode_event(f"{ESC}x") == KeyEvent("x", Modifiers.ALT)
        assert decode_event(f"{ESC}{ESC}[D") == KeyEvent("left", Modifiers.ALT)

    def test_modify_other_keys(self) -> None:
        assert decode_event(f"{ESC}[27;5;99~") == KeyEvent("c", Modifiers.CTRL)

    def test_modified_tilde(self) -> None:
        assert decode_event(f"{ESC}[3;5~") == KeyEvent("delete", Modifiers.CTRL)


class TestKittyDecoding:
    def test_plain_codepoint(self) -> None:
        assert decode_event(f"{ESC}[97u") == KeyEvent("a")

    def test_ctrl_c(self) -> None:
        assert decode_event(f"{ESC}[99;5u") == KeyEvent("c", Modifiers.CTRL)

    def test_named_codepoints(self) -> None:
        assert decode_event(f"{ESC}[13u") == KeyEvent("enter")
        assert decode_event(f"{ESC}[127u") == KeyEvent("backspace")
        assert decode_event(f"{ESC}[9;2u") == KeyEvent("tab", Modifiers.SHIFT)

    def test_shifted_key(self) -> None:
        assert decode_event(f"{ESC}[97:65;2u") == KeyEvent("A", Modifiers.SHIFT)

    def test_event_kinds(self) -> None:
        assert decode_event(f"{ESC}[97;1:2u") == KeyEvent("a", kind=KeyKind.REPEAT)
        assert decode_event(f"{ESC}[97;1:3u") == KeyEvent("a", kind=KeyKind.RELEASE)

    def test_release_of_modified_arrow(self) -> None:
        event = decode_event(f"{ESC}[1;3:3D")
        assert event == KeyEvent("left", Modifiers.ALT, KeyKind.RELEASE)

    def test_lock_bits_ignored(self) -> None:
        # 1 + ctrl(4) + caps_lock(64)
        assert decode_event(f"{ESC}[99;69u") == KeyEvent("c", Modifiers.CTRL)

    def test_function_key(self) -> None:
        assert decode_event(f"{ESC}[57364u") == KeyEvent("f1")


class TestNonKeyEvents:
    def test_sgr_mouse(self) -> None:
        assert isinstance(decode_event(f"{ESC}[<0;10;5M"), MouseEvent)

    def test_x10_mouse(self) -> None:
        assert isinstance(decode_event(f"{ESC}[M !!"), MouseEvent)

    def test_unknown_sequence(self) -> None:
        assert isinstance(decode_event(f"{ESC}[99~"), UnknownEvent)

    def test_empty(self) -> None:
        assert decode_event("") == UnknownEvent("")
