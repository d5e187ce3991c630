"""Advisory locks serializing capacity-changing operations.

Keys are strings such as ``shelf:<id>`` or ``warehouse:<id>``. Locks for one
operation are always taken in sorted key order so two operations touching
the same shelves cannot deadlock.
"""

import threading
from contextlib import contextmanager


class LockRegistry:
    def __init__(self):
        self._guard = threading.Lock()
        self._locks: dict[str, threading.Lock] = {}

    def lock_for(self, key: str) -> threading.Lock:
        with self._guard:
            lock = self._locks.get(key)
            if lock is None:
                lock = self._locks[key] = threading.Lock()
            return lock

    @contextmanager
    def holding(self, *keys):
        ordered = sorted({str(key) for key in keys if key})
        acquired = []
        try:
            for key in ordered:
                lock = self.lock_for(key)
                lock.acquire()
                acquired.append(lock)
            yield ordered
        finally:
            for lock in reversed(acquired):
                lock.release()

    def clear(self):
        with self._guard:
            self._locks.clear()


capacity_locks = LockRegistry()
