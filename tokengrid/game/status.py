"""StatusLine — a status message with short-lived advisory notices.

Notices ("Too far - move closer") replace the normal status text for a
fixed number of seconds and then revert on their own.  Purely cosmetic:
nothing in the game state depends on it.
"""

from __future__ import annotations

import time
from collections.abc import Callable
from dataclasses import dataclass, field


@dataclass
class StatusLine:
    """Default status text with an optional expiring override.

    Attributes:
        duration: Seconds a notice stays visible.
        clock: Monotonic time source (injectable for tests).
    """

    duration: float = 3.0
    clock: Callable[[], float] = time.monotonic
    _notice: str | None = field(init=False, default=None)
    _expires_at: float = field(init=False, default=0.0)

    def notify(self, message: str) -> None:
        """Show ``message`` until ``duration`` seconds have passed."""
        self._notice = message
        self._expires_at = self.clock() + self.duration

    def clear(self) -> None:
        """Drop any active notice immediately."""
        self._notice = None

    @property
    def notice(self) -> str | None:
        """The active notice, or None once it has expired."""
        if self._notice is not None and self.clock() >= self._expires_at:
            self._notice = None
        return self._notice

    def text(self, default: str) -> str:
        """Return the active notice, falling back to ``default``."""
        notice = self.notice
        return default if notice is None else notice
