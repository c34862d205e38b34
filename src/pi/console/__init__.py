"""pi-console: Line-editing console with context-aware tab completion."""

# Completion registry
from pi.console.completion import (
    CompletionCandidate,
    CompletionItem,
    CompletionTree,
    ContextNode,
    MatchStrategy,
)

# Configuration
from pi.console.config import ConsoleOptions

# Editor state
from pi.console.editor import InterruptOutcome, LineEditor
from pi.console.history import History

# Keybindings
from pi.console.keybindings import (
    DEFAULT_CONSOLE_KEYBINDINGS,
    ConsoleAction,
    ConsoleKeybindingsManager,
)

# Keyboard input handling
from pi.console.keys import (
    InputEvent,
    KeyEvent,
    KeyKind,
    Modifiers,
    MouseEvent,
    UnknownEvent,
    decode_event,
)

# Logging
from pi.console.log import ConsoleLogHandler, LogLevel, format_log_line

# Rendering
from pi.console.render import Renderer

# Session
from pi.console.session import ConsoleSession

# Terminal
from pi.console.terminal import ProcessTerminal, Terminal

# Utilities
from pi.console.utils import truncate_to_width, visible_width

__all__ = [
    # Completion registry
    "CompletionCandidate",
    "CompletionItem",
    "CompletionTree",
    "ContextNode",
    "MatchStrategy",
    # Configuration
    "ConsoleOptions",
    # Editor state
    "History",
    "InterruptOutcome",
    "LineEditor",
    # Keybindings
    "DEFAULT_CONSOLE_KEYBINDINGS",
    "ConsoleAction",
    "ConsoleKeybindingsManager",
    # Keyboard input handling
    "InputEvent",
    "KeyEvent",
    "KeyKind",
    "Modifiers",
    "MouseEvent",
    "UnknownEvent",
    "decode_event",
    # Logging
    "ConsoleLogHandler",
    "LogLevel",
    "format_log_line",
    # Rendering
    "Renderer",
    # Session
    "ConsoleSession",
    # Terminal
    "ProcessTerminal",
    "Terminal",
    # Utilities
    "truncate_to_width",
    "visible_width",
]
