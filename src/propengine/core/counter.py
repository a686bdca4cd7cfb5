"""Thread-safe counter shared between a runner and its partial clones.

Python 3.13+.
"""

from __future__ import annotations

import threading

__all__ = ["SharedCounter"]


class SharedCounter:
    """Monotonic integer cell with an atomic fetch-and-add.

    One instance is created per root TestRunner and handed by reference to
    every partial clone, so all clones draw from the same budget even when
    they run on different threads. Increments are serialized by a lock,
    which gives every thread the same total order of updates.

    Example:
        >>> counter = SharedCounter()
        >>> counter.fetch_add(1)
        0
        >>> counter.value
        1
    """

    __slots__ = ("_lock", "_value")

    def __init__(self, initial: int = 0) -> None:
        if initial < 0:
            msg = f"initial must be non-negative, got {initial}"
            raise ValueError(msg)
        self._lock = threading.Lock()
        self._value = initial

    def fetch_add(self, amount: int = 1) -> int:
        """Add amount and return the value held before the addition."""
        with self._lock:
            previous = self._value
            self._value = previous + amount
            return previous

    @property
    def value(self) -> int:
        """Point-in-time snapshot of the counter."""
        with self._lock:
            return self._value

    def __repr__(self) -> str:
        return f"SharedCounter({self.value})"
