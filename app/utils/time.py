"""
Time utility functions.
"""

import threading
from datetime import datetime, timezone
from typing import Callable, Optional


def utc_now() -> datetime:
    """Get current UTC datetime."""
    return datetime.now(timezone.utc)


class MonotonicClock:
    """
    Timestamp source for state-changing calls.

    Never returns a value earlier than one it already returned, even if the
    wall clock steps backwards.
    """

    def __init__(self, source: Callable[[], datetime] = utc_now):
        self._source = source
        self._last: Optional[datetime] = None
        self._lock = threading.Lock()

    def now(self) -> datetime:
        with self._lock:
            current = self._source()
            if self._last is not None and current < self._last:
                current = self._last
            self._last = current
            return current


clock = MonotonicClock()


def ledger_now() -> datetime:
    """Timestamp for the state-changing call in progress."""
    return clock.now()
