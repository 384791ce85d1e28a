"""
Device Locks
============

One FIFO lock per physical printer. The driver cannot accept two
overlapping invocations for the same device, and uploads and the queue
drain would otherwise race each other.
"""

import threading
from typing import Dict, Hashable, Optional


class FifoLock:
    """Ticket lock: waiters acquire strictly in arrival order."""

    def __init__(self):
        self._cond = threading.Condition()
        self._next_ticket = 0
        self._serving = 0
        self._abandoned = set()

    def acquire(self, timeout: Optional[float] = None) -> bool:
        with self._cond:
            ticket = self._next_ticket
            self._next_ticket += 1
            if self._cond.wait_for(lambda: self._serving == ticket, timeout):
                return True
            # Timed out: hand the turn on when it comes up
            if self._serving == ticket:
                self._advance()
            else:
                self._abandoned.add(ticket)
            return False

    def release(self):
        with self._cond:
            self._advance()

    def locked(self) -> bool:
        with self._cond:
            return self._serving < self._next_ticket

    @property
    def queued(self) -> int:
        """Holder plus waiters."""
        with self._cond:
            return self._next_ticket - self._serving - len(self._abandoned)

    def _advance(self):
        self._serving += 1
        while self._serving in self._abandoned:
            self._abandoned.discard(self._serving)
            self._serving += 1
        self._cond.notify_all()

    def __enter__(self):
        self.acquire()
        return self

    def __exit__(self, exc_type, exc, tb):
        self.release()
        return False


class DeviceLocks:
    """Registry of per-device FIFO locks, created on first use."""

    def __init__(self):
        self._guard = threading.Lock()
        self._locks: Dict[Hashable, FifoLock] = {}

    def get(self, key: Hashable) -> FifoLock:
        with self._guard:
            lock = self._locks.get(key)
            if lock is None:
                lock = self._locks[key] = FifoLock()
            return lock

    def __len__(self) -> int:
        with self._guard:
            return len(self._locks)
