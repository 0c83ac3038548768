import threading
from contextlib import contextmanager
from typing import Dict, Iterator, List


class KeyedLock:
    """One mutex per key; unrelated keys never contend.

    Entries are reference counted and dropped once no thread holds or waits
    on them, so the table only grows with concurrent distinct keys.
    """

    def __init__(self) -> None:
        self._guard = threading.Lock()
        self._locks: Dict[str, List] = {}  # key -> [lock, refcount]

    @contextmanager
    def hold(self, key: str) -> Iterator[None]:
        with self._guard:
            entry = self._locks.get(key)
            if entry is None:
                entry = [threading.Lock(), 0]
                self._locks[key] = entry
            entry[1] += 1
        try:
            with entry[0]:
                yield
        finally:
            with self._guard:
                entry[1] -= 1
                if entry[1] == 0:
                    del self._locks[key]

    def __len__(self) -> int:
        with self._guard:
            return len(self._locks)
