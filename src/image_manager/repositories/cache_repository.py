"""Abstract contract for the fast existence/metadata cache."""

from abc import ABC, abstractmethod


class CacheItem(ABC):
    """A single cache entry addressed by key."""

    @property
    @abstractmethod
    def key(self) -> str:
        """The cache key of this item."""

    @abstractmethod
    def exists(self) -> bool:
        """Check whether the entry is present (and not expired).

        Raises:
            CacheError: If the backend lookup fails
        """

    @abstractmethod
    def get(self) -> str | None:
        """Return the stored value, or None if absent.

        Raises:
            CacheError: If the backend lookup fails
        """

    @abstractmethod
    def set(self, value: str, ttl: int | None = None) -> None:
        """Store a value, optionally expiring after `ttl` seconds.

        Raises:
            CacheError: If the backend write fails
        """

    @abstractmethod
    def delete(self) -> None:
        """Remove the entry. Deleting a missing entry is not an error.

        Raises:
            CacheError: If the backend delete fails
        """


class CachePool(ABC):
    """Contract for a key-value cache pool.

    Implementations could be in-process memory, DynamoDB, Redis, etc.
    """

    @abstractmethod
    def get_item(self, key: str) -> CacheItem:
        """Return a handle for the entry stored under `key`."""
