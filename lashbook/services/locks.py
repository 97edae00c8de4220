"""Per-key locking for check-then-insert sequences."""

import threading
from contextlib import contextmanager
from typing import Dict, Hashable, Iterator


class _Entry:
    __slots__ = ("lock", "users")

    def __init__(self) -> None:
        self.lock = threading.Lock()
        self.users = 0


class KeyedLocks:
    """
    In-memory lock registry keyed by arbitrary hashable values.

    Pattern: one ``threading.Lock`` per key, created on first use and
    dropped once no thread holds or waits for it.
    Good for: single-process deployments and tests.
    NOT for: multiple worker processes (use a database exclusion constraint).
    """

    def __init__(self) -> None:
        self._locks: Dict[Hashable, _Entry] = {}
        self._guard = threading.Lock()

    def __len__(self) -> int:
        with self._guard:
            return len(self._locks)

    @contextmanager
    def hold(self, *key: Hashable) -> Iterator[None]:
        """Hold the lock for ``key`` for the duration of the block."""
        with self._guard:
            entry = self._locks.get(key)
            if entry is None:
                entry = self._locks[key] = _Entry()
            entry.users += 1

        try:
            with entry.lock:
                yield
        finally:
            with self._guard:
                entry.users -= 1
                if entry.users == 0:
                    del self._locks[key]
