import contextlib
import threading
from typing import Dict, Iterator, List, Optional, Tuple


class KeyedLock:
    """
    In-process locks keyed by string, created on demand.

    Holding several keys acquires them in sorted order, so two callers that
    share keys cannot deadlock. A key's lock is dropped once nobody holds or
    waits for it.
    """

    def __init__(self):
        self._guard = threading.Lock()
        self._locks: Dict[str, threading.Lock] = {}
        self._refs: Dict[str, int] = {}

    def _checkout(self, key: str) -> threading.Lock:
        with self._guard:
            lock = self._locks.get(key)
            if lock is None:
                lock = self._locks[key] = threading.Lock()
                self._refs[key] = 0
            self._refs[key] += 1
            return lock

    def _checkin(self, key: str) -> None:
        with self._guard:
            self._refs[key] -= 1
            if self._refs[key] == 0:
                del self._refs[key]
                del self._locks[key]

    @contextlib.contextmanager
    def hold(self, *keys: Optional[str]) -> Iterator[None]:
        """Hold the locks for all given keys; None entries are ignored."""
        ordered: List[str] = sorted({k for k in keys if k})
        acquired: List[Tuple[str, threading.Lock]] = []
        try:
            for key in ordered:
                lock = self._checkout(key)
                try:
                    lock.acquire()
                except BaseException:
                    self._checkin(key)
                    raise
                acquired.append((key, lock))
            yield
        finally:
            for key, lock in reversed(acquired):
                lock.release()
                self._checkin(key)

    def __len__(self) -> int:
        with self._guard:
            return len(self._locks)
