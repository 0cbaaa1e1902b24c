"""Terminal handling: unbuffered, unechoed input and non-blocking key checks."""

from __future__ import annotations

import os
import select
import termios
from typing import Any


def key_ready(stream: Any) -> bool:
    """Return True when ``stream`` has input waiting, without blocking."""
    readable, _, _ = select.select([stream], [], [], 0)
    return bool(readable)


class RawInput:
    """Context manager that turns off line buffering and echo on a terminal.

    Streams that are not terminals are left untouched.
    """

    def __init__(self, stream: Any) -> None:
        self.stream = stream
        self._saved: list[Any] | None = None

    @property
    def active(self) -> bool:
        """Whether terminal settings are currently changed."""
        return self._saved is not None

    def __enter__(self) -> RawInput:
        fd = self.stream.fileno()
        if self._saved is None and os.isatty(fd):
            saved = termios.tcgetattr(fd)
            changed = list(saved)
            changed[3] &= ~(termios.ICANON | termios.ECHO)
            termios.tcsetattr(fd, termios.TCSANOW, changed)
            self._saved = saved
        return self

    def __exit__(self, *args: Any) -> None:
        self.restore()

    def restore(self) -> None:
        """Put back the terminal settings saved on entry."""
        if self._saved is None:
            return
        termios.tcsetattr(self.stream.fileno(), termios.TCSANOW, self._saved)
        self._saved = None