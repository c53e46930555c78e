"""Per-topic subscription cache.

Entries are written at most once per topic id and never invalidated for
the lifetime of the session. The cache is the one structure shared between
the event loop and fetch completions, so access goes through a
reader/writer lock.
"""

import threading
from contextlib import contextmanager
from typing import Dict, Iterator, List, Optional

from ..models.tree import TreeNode


class ReadWriteLock:
    """Many concurrent readers or a single writer."""

    def __init__(self):
        self._cond = threading.Condition(threading.Lock())
        self._readers = 0
        self._writing = False

    @contextmanager
    def read(self) -> Iterator[None]:
        with self._cond:
            while self._writing:
                self._cond.wait()
            self._readers += 1
        try:
            yield
        finally:
            with self._cond:
                self._readers -= 1
                if self._readers == 0:
                    self._cond.notify_all()

    @contextmanager
    def write(self) -> Iterator[None]:
        with self._cond:
            while self._writing or self._readers:
                self._cond.wait()
            self._writing = True
        try:
            yield
        finally:
            with self._cond:
                self._writing = False
                self._cond.notify_all()


class SubscriptionCache:
    """Maps topic node id to its resolved subscription nodes."""

    def __init__(self):
        self._entries: Dict[str, List[TreeNode]] = {}
        self._lock = ReadWriteLock()

    def get(self, topic_id: str) -> Optional[List[TreeNode]]:
        with self._lock.read():
            return self._entries.get(topic_id)

    def put(self, topic_id: str, subscriptions: List[TreeNode]) -> List[TreeNode]:
        """Store subscriptions for a topic unless already present.

        Returns:
            The cached sequence, which is the existing one on a repeat write
        """
        with self._lock.write():
            return self._entries.setdefault(topic_id, subscriptions)

    def __contains__(self, topic_id: str) -> bool:
        with self._lock.read():
            return topic_id in self._entries

    def __len__(self) -> int:
        with self._lock.read():
            return len(self._entries)
