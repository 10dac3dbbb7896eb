"""Per-key lock registry used to serialize memory-state writes."""

import threading
import weakref
from contextlib import contextmanager
from typing import Hashable, Iterator


class _KeyLock:
    # _thread.lock cannot be weakly referenced, so wrap it.
    __slots__ = ('lock', '__weakref__')

    def __init__(self) -> None:
        self.lock = threading.Lock()


class KeyedLocks:
    """
    Hands out one lock per key; unused locks are garbage collected.

    Only serializes callers inside this process. Writers in other processes
    are caught by the version check in ProgressService.persist_memory_state.
    """

    def __init__(self) -> None:
        self._guard = threading.Lock()
        self._locks: "weakref.WeakValueDictionary[Hashable, _KeyLock]" = weakref.WeakValueDictionary()

    def get(self, key: Hashable) -> _KeyLock:
        with self._guard:
            entry = self._locks.get(key)
            if entry is None:
                entry = _KeyLock()
                self._locks[key] = entry
            return entry

    @contextmanager
    def hold(self, key: Hashable) -> Iterator[None]:
        entry = self.get(key)
        with entry.lock:
            yield
