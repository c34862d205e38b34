"""Configuration for a console session."""

from __future__ import annotations

import os
from dataclasses import dataclass, field

from pi.console.editor import DEFAULT_CONFIRM_EXIT_WINDOW
from pi.console.keybindings import ConsoleKeybindingsConfig
from pi.console.render import DEFAULT_MAX_HINTS

ENV_PREFIX = "PI_CONSOLE_"


@dataclass
class ConsoleOptions:
    """Session options.

    ``app_name`` tags the messages of the confirm-to-exit protocol;
    ``log_module`` tags lines logged through ``info()`` … ``critical()``.
    """

    prompt: str = "> "
    app_name: str = "Daemon Console"
    log_module: str = "Stream"
    poll_interval: float = 0.05
    confirm_exit_window: float = DEFAULT_CONFIRM_EXIT_WINDOW
    max_hints: int = DEFAULT_MAX_HINTS
    max_hint_length: int | None = None
    debounce: bool = True
    debounce_window: float | None = None
    mouse_capture: bool = True
    keybindings: ConsoleKeybindingsConfig = field(default_factory=dict)

    @classmethod
    def from_env(cls, **overrides: object) -> ConsoleOptions:
        """Build options from ``PI_CONSOLE_*`` environment variables.

        Explicit keyword *overrides* take precedence over the environment.
        """
        values: dict[str, object] = {}

        prompt = os.environ.get(f"{ENV_PREFIX}PROMPT")
        if prompt is not None:
            values["prompt"] = prompt

        max_hints = os.environ.get(f"{ENV_PREFIX}MAX_HINTS")
        if max_hints:
            values["max_hints"] = int(max_hints)

        max_hint_length = os.environ.get(f"{ENV_PREFIX}MAX_HINT_LENGTH")
        if max_hint_length:
            values["max_hint_length"] = int(max_hint_length)

        poll_interval = os.environ.get(f"{ENV_PREFIX}POLL_INTERVAL")
        if poll_interval:
            values["poll_interval"] = float(poll_interval)

        values.update(overrides)
        return cls(**values)  # type: ignore[arg-type]
