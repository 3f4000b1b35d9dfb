"""
skyephem.cache — Small Most-Recent-N Memo
=========================================

Fixed-capacity memo for expensive per-instant results (lunar series,
satellite positions, Pluto series). Lookups are by exact key; a miss
computes, stores the result as the newest entry and evicts the oldest.
"""

from collections import OrderedDict
from typing import Callable, Generic, Hashable, TypeVar

K = TypeVar('K', bound=Hashable)
V = TypeVar('V')


class RingCache(Generic[K, V]):
    """Least-recently-stored cache of at most ``capacity`` entries.

    Parameters
    ----------
    capacity : int — number of entries retained (≥ 1)
    """

    def __init__(self, capacity: int = 6):
        if capacity < 1:
            raise ValueError(f"capacity must be at least 1, got {capacity}")
        self.capacity = capacity
        self._entries: OrderedDict = OrderedDict()

    def __len__(self) -> int:
        return len(self._entries)

    def __contains__(self, key) -> bool:
        return key in self._entries

    def get(self, key: K, default: V | None = None) -> V | None:
        return self._entries.get(key, default)

    def put(self, key: K, value: V) -> None:
        if key in self._entries:
            self._entries.move_to_end(key)
        self._entries[key] = value
        while len(self._entries) > self.capacity:
            self._entries.popitem(last=False)

    def get_or_compute(self, key: K, compute: Callable[[], V]) -> V:
        """Return the cached value for key, computing and storing it on a miss."""
        if key in self._entries:
            return self._entries[key]
        value = compute()
        self.put(key, value)
        return value

    def clear(self) -> None:
        self._entries.clear()
