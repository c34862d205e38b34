"""Interactive console session: event dispatch, host API and logging.

``ConsoleSession`` owns the terminal, the completion registry, the line
editor and the renderer.  One asyncio task drives it through
:meth:`ConsoleSession.read_input`; every key event and every log line is
handled synchronously on that task, so log output can never land in the
middle of a redraw.

Example::

    session = ConsoleSession()
    session.enable_tab_completion()
    session.register_tab_completions("config", ["start", "stop"])
    session.start("Welcome!")
    try:
        while (line := await session.read_input()) is not None:
            session.info(f"You entered: {line}")
    finally:
        session.stop("Goodbye!")
"""

from __future__ import annotations

import asyncio
import logging
import queue
import threading
import time
from collections import deque
from typing import Callable, Iterable

from pi.console.completion import CompletionItem, CompletionTree, ItemLike, MatchStrategy
from pi.console.config import ConsoleOptions
from pi.console.debounce import KeyDebouncer
from pi.console.editor import LineEditor
from pi.console.keybindings import INTERRUPT_ACTIONS, ConsoleKeybindingsManager
from pi.console.keys import InputEvent, KeyEvent, KeyKind
from pi.console.log import LogLevel, format_log_line
from pi.console.render import Renderer
from pi.console.terminal import ProcessTerminal, Terminal

logger = logging.getLogger(__name__)


class ConsoleSession:
    """A line-editing console attached to a long-running process."""

    def __init__(
        self,
        terminal: Terminal | None = None,
        options: ConsoleOptions | None = None,
        *,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self.options = options if options is not None else ConsoleOptions()
        self.terminal: Terminal = terminal if terminal is not None else ProcessTerminal()

        self.editor = LineEditor(
            confirm_exit_window=self.options.confirm_exit_window,
            clock=clock,
        )
        self.renderer = Renderer(
            self.terminal,
            self.options.prompt,
            max_hints=self.options.max_hints,
            max_hint_length=self.options.max_hint_length,
        )
        self.keybindings = ConsoleKeybindingsManager(self.options.keybindings)
        self.debouncer = KeyDebouncer(
            enabled=self.options.debounce,
            window=self.options.debounce_window,
            clock=clock,
        )
        self.completions: CompletionTree | None = None

        self.should_exit: bool = False
        self.owner_thread: int | None = None

        self._submitted: deque[str] = deque()
        self._log_queue: queue.SimpleQueue[str] = queue.SimpleQueue()

    # ------------------------------------------------------------------
    # State accessors
    # ------------------------------------------------------------------

    @property
    def history(self) -> list[str]:
        return self.editor.history.entries

    @property
    def current_input(self) -> str:
        return self.editor.buffer

    # ------------------------------------------------------------------
    # Tab completion registration
    # ------------------------------------------------------------------

    def enable_tab_completion(self) -> None:
        """Create the completion registry; registrations are ignored until then."""
        if self.completions is None:
            self.completions = CompletionTree()

    @property
    def is_tab_completion_enabled(self) -> bool:
        return self.completions is not None

    def register_tab_completions(self, context: str, completions: Iterable[str]) -> None:
        """Register plain completion texts for *context* (``""`` for the root)."""
        self.register_tab_completions_advanced(context, list(completions))

    def register_tab_completions_with_desc(
        self,
        context: str,
        items: Iterable[tuple[str, str]],
    ) -> None:
        """Register ``(text, description)`` pairs for *context*."""
        self.register_tab_completions_advanced(
            context,
            [CompletionItem(text, description) for text, description in items],
        )

    def register_tab_completions_advanced(
        self,
        context: str,
        items: Iterable[ItemLike],
        strategy: MatchStrategy = MatchStrategy.PREFIX,
    ) -> None:
        """Register items for *context* with an explicit match strategy."""
        if self.completions is None:
            logger.debug("Tab completion disabled; ignoring registration for %r", context)
            return
        self.completions.register(context, items, strategy)

    def add_tab_completion(
        self,
        context: str,
        text: str,
        description: str | None = None,
    ) -> None:
        """Append one completion item to *context*."""
        if self.completions is None:
            logger.debug("Tab completion disabled; ignoring completion %r", text)
            return
        self.completions.add(context, text, description)

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------

    def start(self, banner: str = "") -> None:
        """Enter raw mode, print *banner* and draw the prompt."""
        term = self.terminal
        term.enter_raw_mode()
        if self.options.mouse_capture:
            term.enable_mouse_capture()
        term.hide_cursor()
        if banner:
            term.write(banner.replace("\n", "\r\n") + "\r\n")
        term.flush()

        self.owner_thread = threading.get_ident()
        self.should_exit = False
        self.renderer.draw(self.editor)

    def stop(self, farewell: str = "") -> None:
        """Restore the terminal and print *farewell*."""
        term = self.terminal
        try:
            self.renderer.clear()
        finally:
            self.owner_thread = None
            term.exit_raw_mode()
            if self.options.mouse_capture:
                term.disable_mouse_capture()
            term.show_cursor()
            if farewell:
                term.write(farewell + "\n")
            term.flush()

    def request_exit(self) -> None:
        """Ask the read loop to end at its next poll."""
        self.should_exit = True

    async def read_input(self) -> str | None:
        """Wait for the next submitted line.

        Returns ``None`` once the session should end: an interrupt key
        asked for exit, or :meth:`request_exit` was called.
        """
        while True:
            if self._submitted:
                return self._submitted.popleft()
            if self.should_exit:
                return None

            await asyncio.sleep(self.options.poll_interval)
            self._drain_log_queue()

            while not self._submitted:
                event = self.terminal.poll_event(0)
                if event is None:
                    break
                if self.process_event(event):
                    self.should_exit = True
                    return None

    async def run(self, banner: str = "", farewell: str = "") -> None:
        """Minimal loop: echo every submitted line until exit."""
        try:
            self.start(banner)
            while True:
                line = await self.read_input()
                if line is None:
                    break
                self.info(f"You entered: {line}")
        finally:
            self.stop(farewell)

    # ------------------------------------------------------------------
    # Event dispatch
    # ------------------------------------------------------------------

    def process_event(self, event: InputEvent) -> bool:  # noqa: C901
        """Apply one input event. Returns ``True`` if the session should end."""
        if not isinstance(event, KeyEvent) or event.kind is not KeyKind.PRESS:
            return False

        action = self.keybindings.action_for(event)
        if not self.debouncer.accept(event, exempt=action in INTERRUPT_ACTIONS):
            logger.debug("Dropped duplicate key event %s", event.key_id)
            return False

        editor = self.editor

        if action == "softExit":
            editor.soft_exit()
            self.renderer.clear()
            self.terminal.flush()
            return True

        if action == "confirmExit":
            outcome = editor.confirm_exit(self.keybindings.key_label("confirmExit"))
            self.log(outcome.level, outcome.message, self.options.app_name)
            return outcome.exiting

        if action == "submit":
            self._submit()
            return self.should_exit

        changed = False
        if action == "historyUp":
            changed = editor.history_up()
            if changed:
                self._refresh_candidates()
        elif action == "historyDown":
            changed = editor.history_down()
            if changed:
                self._refresh_candidates()
        elif action == "cursorLeft":
            changed = editor.move_left()
        elif action == "cursorRight":
            changed = editor.move_right()
        elif action == "selectPrevious":
            changed = editor.select_previous()
        elif action == "selectNext":
            changed = editor.select_next()
        elif action == "complete":
            changed = self._complete()
        elif action == "deleteCharBackward":
            changed = editor.delete_backward()
            if changed:
                self._refresh_candidates()
        elif event.char is not None:
            editor.insert_char(event.char)
            self._refresh_candidates()
            changed = True

        if changed:
            self.renderer.draw(editor)
        return False

    def _submit(self) -> None:
        line = self.editor.submit()
        if line is None:
            self.renderer.draw(self.editor)
            return
        self.renderer.print_log_entry(self.options.prompt + line, self.editor)
        self._submitted.append(line)

    def _complete(self) -> bool:
        editor = self.editor
        selected = editor.selected_candidate
        if selected is not None:
            editor.set_buffer(selected.full_text)
        elif self.completions is not None:
            best = self.completions.get_best_match(editor.buffer)
            if best is None:
                return False
            editor.set_buffer(best)
        else:
            return False
        self._refresh_candidates()
        return True

    def _refresh_candidates(self) -> None:
        if self.completions is not None:
            self.editor.set_candidates(self.completions.get_candidates(self.editor.buffer))

    # ------------------------------------------------------------------
    # Logging
    # ------------------------------------------------------------------

    def print_log_entry(self, line: str) -> None:
        """Print an already formatted line above the edit line."""
        self.renderer.print_log_entry(line, self.editor)

    def log(self, level: LogLevel, message: str, module: str | None = None) -> None:
        """Format and print *message* at *level*, tagged with *module*."""
        self.print_log_entry(format_log_line(level, message, module))

    def post_log(self, level: LogLevel, message: str, module: str | None = None) -> None:
        """Thread-safe :meth:`log`: the line is printed at the next poll."""
        self._log_queue.put(format_log_line(level, message, module))

    def _drain_log_queue(self) -> None:
        while True:
            try:
                line = self._log_queue.get_nowait()
            except queue.Empty:
                return
            self.print_log_entry(line)

    def info(self, message: str) -> None:
        self.log(LogLevel.INFO, message, self.options.log_module)

    def debug(self, message: str) -> None:
        self.log(LogLevel.DEBUG, message, self.options.log_module)

    def warn(self, message: str) -> None:
        self.log(LogLevel.WARN, message, self.options.log_module)

    def error(self, message: str) -> None:
        self.log(LogLevel.ERROR, message, self.options.log_module)

    def critical(self, message: str) -> None:
        self.log(LogLevel.CRITICAL, message, self.options.log_module)
