"""Per-key mutual exclusion for state-machine transitions.

Usage:
    locks = KeyedLock()

    with locks.hold(("activity", activity_id)):
        activity = repo.get_for_update(activity_id)
        ...
        db.commit()

Transitions on the same key run one at a time; different keys never
contend.  Entries are reference-counted and dropped once no thread
holds or waits on them, so the registry stays proportional to the
number of in-flight keys.
"""

import threading
from contextlib import contextmanager
from typing import Dict, Hashable, Iterator, List


class KeyedLock:
    """Registry of one ``threading.Lock`` per key."""

    def __init__(self):
        self._guard = threading.Lock()
        self._entries: Dict[Hashable, List] = {}  # key -> [lock, refcount]

    @contextmanager
    def hold(self, key: Hashable) -> Iterator[None]:
        with self._guard:
            entry = self._entries.get(key)
            if entry is None:
                entry = [threading.Lock(), 0]
                self._entries[key] = entry
            entry[1] += 1

        lock = entry[0]
        lock.acquire()
        try:
            yield
        finally:
            lock.release()
            with self._guard:
                entry[1] -= 1
                if entry[1] == 0:
                    del self._entries[key]

    def active_keys(self) -> int:
        """Number of keys currently held or awaited."""
        with self._guard:
            return len(self._entries)
