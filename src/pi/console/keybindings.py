"""Console keybindings manager."""

from __future__ import annotations

from typing import Literal

from pi.console.keys import KeyEvent

ConsoleAction = Literal[
    # History
    "historyUp",
    "historyDown",
    # Cursor movement
    "cursorLeft",
    "cursorRight",
    # Completion
    "selectPrevious",
    "selectNext",
    "complete",
    # Editing
    "submit",
    "deleteCharBackward",
    # Interrupts
    "softExit",
    "confirmExit",
]

KeyId = str

ConsoleKeybindingsConfig = dict[ConsoleAction, KeyId | list[KeyId]]

DEFAULT_CONSOLE_KEYBINDINGS: dict[ConsoleAction, KeyId | list[KeyId]] = {
    "historyUp": "up",
    "historyDown": "down",
    "cursorLeft": "left",
    "cursorRight": "right",
    "selectPrevious": "alt+left",
    "selectNext": "alt+right",
    "complete": "tab",
    "submit": "enter",
    "deleteCharBackward": "backspace",
    "softExit": "ctrl+d",
    "confirmExit": "ctrl+c",
}

# Actions that bypass key-repeat suppression so double presses register
INTERRUPT_ACTIONS: frozenset[ConsoleAction] = frozenset({"softExit", "confirmExit"})


class ConsoleKeybindingsManager:
    """Maps decoded key events onto console actions."""

    def __init__(self, config: ConsoleKeybindingsConfig | None = None) -> None:
        self._action_to_keys: dict[ConsoleAction, list[KeyId]] = {}
        self._build_maps(config or {})

    def _build_maps(self, config: ConsoleKeybindingsConfig) -> None:
        self._action_to_keys.clear()

        for action, keys in DEFAULT_CONSOLE_KEYBINDINGS.items():
            key_array = keys if isinstance(keys, list) else [keys]
            self._action_to_keys[action] = list(key_array)

        for action, keys in config.items():
            key_array = keys if isinstance(keys, list) else [keys]
            self._action_to_keys[action] = list(key_array)

    def matches(self, event: KeyEvent, action: ConsoleAction) -> bool:
        """Check if *event* triggers *action*."""
        return event.key_id in self._action_to_keys.get(action, [])

    def action_for(self, event: KeyEvent) -> ConsoleAction | None:
        """Return the first action bound to *event*, if any."""
        key_id = event.key_id
        for action, keys in self._action_to_keys.items():
            if key_id in keys:
                return action
        return None

    def get_keys(self, action: ConsoleAction) -> list[KeyId]:
        """Get keys bound to an action."""
        return self._action_to_keys.get(action, [])

    def key_label(self, action: ConsoleAction) -> str:
        """Human-readable label of the first key bound to *action*.

        ``"ctrl+c"`` becomes ``"Ctrl+C"``.
        """
        keys = self.get_keys(action)
        if not keys:
            return ""
        return "+".join(part[:1].upper() + part[1:] for part in keys[0].split("+"))

    def set_config(self, config: ConsoleKeybindingsConfig) -> None:
        """Update configuration."""
        self._build_maps(config)
