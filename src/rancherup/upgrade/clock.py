"""Time source used by the service state poll loop."""

from __future__ import annotations

import threading
import time
from typing import Protocol


class Clock(Protocol):
    """Monotonic time source with an interruptible sleep."""

    def monotonic(self) -> float:
        """Return the current monotonic time in seconds."""
        ...

    def sleep(self, seconds: float, cancel: threading.Event | None = None) -> bool:
        """Sleep for ``seconds``; return True if woken by ``cancel``."""
        ...


class SystemClock:
    """Clock backed by the real monotonic clock."""

    def monotonic(self) -> float:
        return time.monotonic()

    def sleep(self, seconds: float, cancel: threading.Event | None = None) -> bool:
        if cancel is not None:
            return cancel.wait(seconds)
        time.sleep(seconds)
        return False
