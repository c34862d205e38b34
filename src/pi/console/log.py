"""Colored, timestamped log lines for the console.

``format_log_line`` produces one display line per message.  The console
prints it above the edit line via ``ConsoleSession.print_log_entry``.
``ConsoleLogHandler`` bridges the standard :mod:`logging` module into a
running session.
"""

from __future__ import annotations

import enum
import logging
import threading
from datetime import datetime
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from pi.console.session import ConsoleSession


class LogLevel(enum.Enum):
    INFO = "info"
    DEBUG = "debug"
    WARN = "warn"
    ERROR = "error"
    CRITICAL = "critical"


# ── ANSI helpers ─────────────────────────────────────────────────────

_GREEN = "\033[32m"
_YELLOW = "\033[33m"
_RED = "\033[31m"
_BLUE = "\033[34m"
_MAGENTA_BOLD = "\033[1;35m"
_DIM = "\033[2m"
_RESET = "\033[0m"

_LEVEL_STYLES: dict[LogLevel, tuple[str, str]] = {
    LogLevel.INFO: ("INFO", _GREEN),
    LogLevel.DEBUG: ("DEBUG", _BLUE),
    LogLevel.WARN: ("WARN", _YELLOW),
    LogLevel.ERROR: ("ERROR", _RED),
    LogLevel.CRITICAL: ("CRITICAL", _MAGENTA_BOLD),
}


def _timestamp(now: datetime | None = None) -> str:
    now = now or datetime.now()
    return f"[{now.strftime('%H:%M:%S')}]"


def format_log_line(
    level: LogLevel,
    message: str,
    module: str | None = None,
    *,
    now: datetime | None = None,
) -> str:
    """Format *message* as ``[HH:MM:SS] [LEVEL] [module] message``."""
    tag, color = _LEVEL_STYLES[level]
    parts = [f"{_DIM}{_timestamp(now)}{_RESET}", f"{color}[{tag}]{_RESET}"]
    if module:
        parts.append(f"[{module}]")
    parts.append(message)
    return " ".join(parts)


# ── logging bridge ───────────────────────────────────────────────────


def level_from_record(levelno: int) -> LogLevel:
    """Map a :mod:`logging` level number onto a console level."""
    if levelno >= logging.CRITICAL:
        return LogLevel.CRITICAL
    if levelno >= logging.ERROR:
        return LogLevel.ERROR
    if levelno >= logging.WARNING:
        return LogLevel.WARN
    if levelno >= logging.INFO:
        return LogLevel.INFO
    return LogLevel.DEBUG


class ConsoleLogHandler(logging.Handler):
    """Route :mod:`logging` records into a console session.

    Records emitted on the session's owning thread are printed immediately;
    records from any other thread are queued and printed by the session's
    read loop.
    """

    def __init__(self, session: ConsoleSession, level: int = logging.NOTSET) -> None:
        super().__init__(level)
        self.session = session

    def emit(self, record: logging.LogRecord) -> None:
        try:
            message = self.format(record)
            level = level_from_record(record.levelno)
            if self.session.owner_thread in (None, threading.get_ident()):
                self.session.log(level, message, record.name)
            else:
                self.session.post_log(level, message, record.name)
        except Exception:
            self.handleError(record)
