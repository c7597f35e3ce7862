"""In-process cache pool, useful for tests and single-process deployments."""

import math
import time
from collections.abc import Callable

from cachetools import TLRUCache

from image_manager.repositories.cache_repository import CacheItem, CachePool

DEFAULT_MAX_ENTRIES = 10_000

# Stored as (value, ttl in seconds or None)
_Entry = tuple[str, float | None]


def _time_to_use(_key: str, entry: _Entry, now: float) -> float:
    ttl = entry[1]
    return now + ttl if ttl else math.inf


class EphemeralCacheItem(CacheItem):
    def __init__(self, pool: "EphemeralCachePool", key: str) -> None:
        self._pool = pool
        self._key = key

    @property
    def key(self) -> str:
        return self._key

    def exists(self) -> bool:
        return self._key in self._pool._entries

    def get(self) -> str | None:
        entry = self._pool._entries.get(self._key)
        return None if entry is None else entry[0]

    def set(self, value: str, ttl: int | None = None) -> None:
        self._pool._entries[self._key] = (value, ttl)

    def delete(self) -> None:
        self._pool._entries.pop(self._key, None)


class EphemeralCachePool(CachePool):
    """Cache pool backed by a cachetools TLRU cache.

    Each item carries its own expiry; expired items are evicted whenever the
    pool is written to or measured, and the least recently used ones are
    dropped once ``maxsize`` is reached. Entries live only as long as the
    pool object.

    Args:
        maxsize: Maximum number of entries held at once
        timer: Clock used for expiry, in seconds
    """

    def __init__(
        self,
        maxsize: int = DEFAULT_MAX_ENTRIES,
        timer: Callable[[], float] = time.monotonic,
    ) -> None:
        self._entries: TLRUCache = TLRUCache(
            maxsize=maxsize, ttu=_time_to_use, timer=timer
        )

    def __len__(self) -> int:
        self._entries.expire()
        return len(self._entries)

    @property
    def maxsize(self) -> int:
        return int(self._entries.maxsize)

    def get_item(self, key: str) -> EphemeralCacheItem:
        return EphemeralCacheItem(self, key)

    def clear(self) -> None:
        self._entries.clear()
