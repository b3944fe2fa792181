"""In-process per-key locks for read-modify-write updates."""
from __future__ import annotations

import threading
from collections.abc import Hashable


class KeyedLock:
    """One re-entrant lock per key; different keys never block each other."""

    def __init__(self) -> None:
        self._guard = threading.Lock()
        self._locks: dict[Hashable, threading.RLock] = {}

    def __call__(self, key: Hashable) -> threading.RLock:
        with self._guard:
            lock = self._locks.get(key)
            if lock is None:
                lock = self._locks[key] = threading.RLock()
            return lock
