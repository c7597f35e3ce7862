"""DynamoDB-backed implementation of the CachePool contract."""

from typing import Any

from aws_lambda_powertools import Logger
from botocore.exceptions import ClientError

from image_manager.infrastructure.adapters.dynamodb_adapter import (
    DynamoDBAdapter,
    DynamoDBAdapterProtocol,
)
from image_manager.models.errors import CacheError
from image_manager.repositories.cache_repository import CacheItem, CachePool
from image_manager.utils.constants import (
    CACHE_TABLE_EXPIRY_ATTRIBUTE,
    CACHE_TABLE_KEY_ATTRIBUTE,
    CACHE_TABLE_VALUE_ATTRIBUTE,
    ERROR_CODE_CACHE_DELETE_FAILED,
    ERROR_CODE_CACHE_READ_FAILED,
    ERROR_CODE_CACHE_WRITE_FAILED,
)
from image_manager.utils.time import epoch_seconds

logger = Logger(UTC=True)


class DynamoDBCacheItem(CacheItem):
    """A cache entry stored as a single DynamoDB item.

    Items carry an optional ``expires_at`` epoch attribute (usable as the
    table's TTL attribute); DynamoDB deletes expired items lazily, so expired
    items are treated as absent on read.
    """

    def __init__(self, db: DynamoDBAdapterProtocol, key: str) -> None:
        self._db = db
        self._key = key

    @property
    def key(self) -> str:
        return self._key

    def _fetch(self) -> dict[str, Any] | None:
        try:
            response = self._db.get_item(key={CACHE_TABLE_KEY_ATTRIBUTE: self._key})
        except ClientError as exc:
            logger.error("DynamoDB get_item failed", extra={"cache_key": self._key})
            raise CacheError(
                message="Unable to read cache entry",
                error_code=ERROR_CODE_CACHE_READ_FAILED,
                details={"cache_key": self._key},
            ) from exc
        except Exception as exc:
            logger.exception("Unexpected error reading cache entry")
            raise CacheError(
                message="Unable to read cache entry",
                error_code=ERROR_CODE_CACHE_READ_FAILED,
                details={"cache_key": self._key},
            ) from exc

        item = response.get("Item")
        if item is None:
            return None

        expires_at = item.get(CACHE_TABLE_EXPIRY_ATTRIBUTE)
        if expires_at is not None and int(expires_at) <= epoch_seconds():
            return None

        return item

    def exists(self) -> bool:
        return self._fetch() is not None

    def get(self) -> str | None:
        item = self._fetch()
        if item is None:
            return None

        value = item.get(CACHE_TABLE_VALUE_ATTRIBUTE)
        return None if value is None else str(value)

    def set(self, value: str, ttl: int | None = None) -> None:
        item: dict[str, Any] = {
            CACHE_TABLE_KEY_ATTRIBUTE: self._key,
            CACHE_TABLE_VALUE_ATTRIBUTE: value,
        }
        if ttl:
            item[CACHE_TABLE_EXPIRY_ATTRIBUTE] = epoch_seconds() + int(ttl)

        try:
            self._db.put_item(item=item)
            logger.debug("Cache entry written", extra={"cache_key": self._key})
        except ClientError as exc:
            logger.error("DynamoDB put_item failed", extra={"cache_key": self._key})
            raise CacheError(
                message="Unable to write cache entry",
                error_code=ERROR_CODE_CACHE_WRITE_FAILED,
                details={"cache_key": self._key},
            ) from exc
        except Exception as exc:
            logger.exception("Unexpected error writing cache entry")
            raise CacheError(
                message="Unable to write cache entry",
                error_code=ERROR_CODE_CACHE_WRITE_FAILED,
                details={"cache_key": self._key},
            ) from exc

    def delete(self) -> None:
        try:
            self._db.delete_item(key={CACHE_TABLE_KEY_ATTRIBUTE: self._key})
            logger.debug("Cache entry deleted", extra={"cache_key": self._key})
        except ClientError as exc:
            logger.error("DynamoDB delete_item failed", extra={"cache_key": self._key})
            raise CacheError(
                message="Unable to delete cache entry",
                error_code=ERROR_CODE_CACHE_DELETE_FAILED,
                details={"cache_key": self._key},
            ) from exc
        except Exception as exc:
            logger.exception("Unexpected error deleting cache entry")
            raise CacheError(
                message="Unable to delete cache entry",
                error_code=ERROR_CODE_CACHE_DELETE_FAILED,
                details={"cache_key": self._key},
            ) from exc


class DynamoDBCachePool(CachePool):
    """Cache pool storing tags in a DynamoDB table keyed by ``cache_key``."""

    def __init__(self, adapter: DynamoDBAdapterProtocol | None = None) -> None:
        """Initialize with DynamoDB adapter."""
        self._db: DynamoDBAdapterProtocol = adapter or DynamoDBAdapter()

    def get_item(self, key: str) -> DynamoDBCacheItem:
        return DynamoDBCacheItem(self._db, key)
