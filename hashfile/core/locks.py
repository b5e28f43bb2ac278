"""Per-path mutual exclusion for mutating file operations."""

from __future__ import annotations

import contextlib
import threading
from pathlib import Path
from typing import Dict, Iterator


class PathLocks:
    """Hands out one lock per path.

    Entries are reference counted and dropped once no thread holds or waits
    on them, so the table only grows with the number of paths in use.
    """

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._locks: Dict[str, threading.Lock] = {}
        self._refs: Dict[str, int] = {}

    def _acquire_entry(self, key: str) -> threading.Lock:
        with self._lock:
            lock = self._locks.get(key)
            if lock is None:
                lock = threading.Lock()
                self._locks[key] = lock
                self._refs[key] = 0
            self._refs[key] += 1
            return lock

    def _release_entry(self, key: str) -> None:
        with self._lock:
            self._refs[key] -= 1
            if self._refs[key] == 0:
                del self._refs[key]
                del self._locks[key]

    @contextlib.contextmanager
    def hold(self, path: Path) -> Iterator[None]:
        """Hold the lock for *path* for the duration of the block."""
        key = str(path)
        lock = self._acquire_entry(key)
        try:
            with lock:
                yield
        finally:
            self._release_entry(key)

    def active(self) -> int:
        """Number of paths currently locked or waited on."""
        with self._lock:
            return len(self._locks)
