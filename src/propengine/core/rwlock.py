"""Readers-writer lock guarding the failure persistence file.

Several test runs inside one process may touch the same persistence file at
once (pytest-xdist workers are separate processes, but threaded runners and
nested runners are not). Loading persisted seeds only reads, so any number
of loads may proceed together; appending a new failure must exclude every
other reader and writer for the duration of the open+append.

Properties:
- Multiple concurrent readers
- Exclusive writer access
- Writer preference to prevent starvation
- Reentrant reader locks (same thread can acquire read lock multiple times)
- Optional timeout for lock acquisition (raises TimeoutError)

Read-to-write upgrades, write-to-read downgrades and write reentrancy are
prohibited and raise RuntimeError. propengine.persistence acquires with a
bounded timeout and treats both RuntimeError and TimeoutError as "lock
unavailable", proceeding without the lock rather than failing the test run.

Python 3.13+.
"""

from __future__ import annotations

import threading
import time
from contextlib import contextmanager
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from collections.abc import Generator

__all__ = ["RWLock"]


class RWLock:
    """Readers-writer lock with writer preference.

    Allows multiple concurrent readers OR a single exclusive writer.

    Example:
        >>> lock = RWLock()
        >>> with lock.read():
        ...     pass  # shared
        >>> with lock.write():
        ...     pass  # exclusive
    """

    __slots__ = (
        "_active_readers",
        "_active_writer",
        "_condition",
        "_reader_threads",
        "_waiting_writers",
    )

    def __init__(self) -> None:
        """Initialize an unlocked readers-writer lock."""
        self._condition = threading.Condition(threading.Lock())
        self._active_readers: int = 0
        # Thread ID holding the write lock, if any
        self._active_writer: int | None = None
        # Blocks new readers while non-zero (writer preference)
        self._waiting_writers: int = 0
        # Thread ID -> reentrant read depth
        self._reader_threads: dict[int, int] = {}

    @contextmanager
    def read(self, timeout: float | None = None) -> Generator[None]:
        """Acquire the read lock (shared access).

        Args:
            timeout: Maximum seconds to wait. None waits indefinitely;
                0.0 is a non-blocking attempt.

        Raises:
            RuntimeError: If this thread holds the write lock.
            TimeoutError: If the lock cannot be acquired within timeout.
            ValueError: If timeout is negative.
        """
        self._acquire_read(timeout)
        try:
            yield
        finally:
            self._release_read()

    @contextmanager
    def write(self, timeout: float | None = None) -> Generator[None]:
        """Acquire the write lock (exclusive access).

        Args:
            timeout: Maximum seconds to wait. None waits indefinitely;
                0.0 is a non-blocking attempt.

        Raises:
            RuntimeError: If this thread holds the read lock or already
                holds the write lock.
            TimeoutError: If the lock cannot be acquired within timeout.
            ValueError: If timeout is negative.
        """
        self._acquire_write(timeout)
        try:
            yield
        finally:
            self._release_write()

    @staticmethod
    def _deadline(timeout: float | None) -> float | None:
        if timeout is None:
            return None
        if timeout < 0:
            msg = f"Timeout must be non-negative, got {timeout}"
            raise ValueError(msg)
        return time.monotonic() + timeout

    def _wait(self, deadline: float | None, what: str) -> None:
        """Wait on the condition once, honouring an optional deadline."""
        if deadline is None:
            self._condition.wait()
            return
        remaining = deadline - time.monotonic()
        if remaining <= 0:
            msg = f"Timed out waiting for {what} lock"
            raise TimeoutError(msg)
        self._condition.wait(timeout=remaining)

    def _acquire_read(self, timeout: float | None) -> None:
        deadline = self._deadline(timeout)
        me = threading.get_ident()

        with self._condition:
            if me in self._reader_threads:
                self._reader_threads[me] += 1
                return

            if self._active_writer == me:
                msg = (
                    "Cannot acquire read lock while holding write lock. "
                    "Release the write lock before acquiring a read lock."
                )
                raise RuntimeError(msg)

            while self._active_writer is not None or self._waiting_writers > 0:
                self._wait(deadline, "read")

            self._active_readers += 1
            self._reader_threads[me] = 1

    def _release_read(self) -> None:
        me = threading.get_ident()

        with self._condition:
            if me not in self._reader_threads:
                msg = "Thread does not hold read lock"
                raise RuntimeError(msg)

            self._reader_threads[me] -= 1
            if self._reader_threads[me] == 0:
                del self._reader_threads[me]
                self._active_readers -= 1
                if self._active_readers == 0:
                    self._condition.notify_all()

    def _acquire_write(self, timeout: float | None) -> None:
        deadline = self._deadline(timeout)
        me = threading.get_ident()

        with self._condition:
            if me in self._reader_threads:
                msg = (
                    "Cannot upgrade read lock to write lock. "
                    "Release read lock before acquiring write lock."
                )
                raise RuntimeError(msg)

            if self._active_writer == me:
                msg = (
                    "Cannot acquire write lock: already holding write lock. "
                    "Release the write lock before acquiring it again."
                )
                raise RuntimeError(msg)

            self._waiting_writers += 1
            try:
                while self._active_readers > 0 or self._active_writer is not None:
                    self._wait(deadline, "write")
                self._active_writer = me
            finally:
                # Readers blocked on _waiting_writers need a wakeup even when
                # this writer gives up with TimeoutError.
                self._waiting_writers -= 1
                self._condition.notify_all()

    def _release_write(self) -> None:
        me = threading.get_ident()

        with self._condition:
            if self._active_writer != me:
                msg = "Thread does not hold write lock"
                raise RuntimeError(msg)
            self._active_writer = None
            self._condition.notify_all()
