"""Abstract contract for remote binary object storage."""

from abc import ABC, abstractmethod
from typing import Protocol, runtime_checkable


class BlobStorageRepository(ABC):
    """Contract for storing and retrieving byte blobs by key.

    Implementations could be S3, GCS, local disk, etc.
    The ImageManager depends on this interface, not the implementation.
    """

    @abstractmethod
    def write(self, key: str, data: bytes, overwrite: bool = True) -> None:
        """Write a blob under a key.

        Args:
            key: Storage key
            data: Binary content
            overwrite: If False, the write must fail when the key exists

        Raises:
            AlreadyExistsError: If overwrite is False and the key exists
            StorageError: If the write fails
        """

    @abstractmethod
    def read(self, key: str) -> bytes:
        """Read a blob.

        Raises:
            ObjectNotFoundError: If the key does not exist
            StorageError: If the read fails
        """

    @abstractmethod
    def delete(self, key: str) -> None:
        """Delete a blob. Deleting a missing key is not an error.

        Raises:
            StorageError: If the deletion fails
        """

    @abstractmethod
    def has(self, key: str) -> bool:
        """Check whether a key exists.

        Raises:
            StorageError: If the check fails
        """

    @abstractmethod
    def rename(self, source_key: str, target_key: str) -> None:
        """Move a blob to a new key.

        Raises:
            ObjectNotFoundError: If the source key does not exist
            StorageError: If the rename fails
        """


@runtime_checkable
class MetadataSupporter(Protocol):
    """Optional capability of stores that keep per-object metadata."""

    def set_metadata(self, key: str, metadata: dict[str, str]) -> None: ...
