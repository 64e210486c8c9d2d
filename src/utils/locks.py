"""Per-key locking so duplicate scans of one code serialize in-process."""

from collections import defaultdict
from contextlib import contextmanager
from threading import Lock
from typing import Dict, Iterator


class KeyedLock:
    """Thread-safe lock registry keyed by identifier."""

    def __init__(self) -> None:
        self._guard = Lock()
        self._locks: Dict[str, Lock] = {}
        self._waiters: Dict[str, int] = defaultdict(int)

    @contextmanager
    def hold(self, key: str) -> Iterator[None]:
        """Hold the lock for ``key``; entries are dropped once nobody waits."""
        with self._guard:
            lock = self._locks.setdefault(key, Lock())
            self._waiters[key] += 1
        lock.acquire()
        try:
            yield
        finally:
            lock.release()
            with self._guard:
                self._waiters[key] -= 1
                if self._waiters[key] == 0:
                    del self._waiters[key]
                    del self._locks[key]

    def active_keys(self) -> int:
        """Return how many identifiers currently hold or wait on a lock."""
        with self._guard:
            return len(self._locks)
