"""Suppression of duplicated key-press events.

Some input backends report a single keystroke twice.  ``KeyDebouncer``
drops a press that is field-for-field identical (code, modifiers, kind) to
the previously processed one, unless the caller marks it exempt.
"""

from __future__ import annotations

import time
from typing import Callable

from pi.console.keys import KeyEvent


class KeyDebouncer:
    """Tracks the last processed key event and rejects exact repeats.

    Args:
        enabled: When ``False`` nothing is ever dropped.
        window: ``None`` drops every consecutive duplicate regardless of
            timing.  A number limits dropping to duplicates arriving within
            that many seconds of the previous processed event.
        clock: Monotonic time source.
    """

    def __init__(
        self,
        *,
        enabled: bool = True,
        window: float | None = None,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self.enabled = enabled
        self.window = window
        self._clock = clock
        self._last_event: KeyEvent | None = None
        self._last_time: float = 0.0

    def accept(self, event: KeyEvent, *, exempt: bool = False) -> bool:
        """Return ``True`` if *event* should be processed.

        Accepted events become the new reference for duplicate detection;
        dropped ones do not.
        """
        now = self._clock()
        if self.enabled and not exempt and self._is_duplicate(event, now):
            return False
        self._last_event = event
        self._last_time = now
        return True

    def _is_duplicate(self, event: KeyEvent, now: float) -> bool:
        if self._last_event != event:
            return False
        return self.window is None or now - self._last_time <= self.window

    def reset(self) -> None:
        self._last_event = None
