from typing import Any

from botocore.exceptions import ClientError
import pytest

from image_manager.infrastructure.aws import dynamodb_cache
from image_manager.infrastructure.aws.dynamodb_cache import DynamoDBCachePool
from image_manager.models.errors import CacheError
from image_manager.utils.constants import (
    ERROR_CODE_CACHE_DELETE_FAILED,
    ERROR_CODE_CACHE_READ_FAILED,
    ERROR_CODE_CACHE_WRITE_FAILED,
)


class FailingDynamoDBAdapter:
    def __init__(self, exc: Exception) -> None:
        self._exc = exc

    def put_item(self, *, item: dict[str, Any]) -> dict[str, Any]:
        raise self._exc

    def get_item(self, *, key: dict[str, Any]) -> dict[str, Any]:
        raise self._exc

    def delete_item(self, *, key: dict[str, Any]) -> dict[str, Any]:
        raise self._exc


@pytest.fixture
def failing_pool() -> DynamoDBCachePool:
    error = ClientError({"Error": {"Code": "ProvisionedThroughputExceededException"}}, "Op")
    return DynamoDBCachePool(FailingDynamoDBAdapter(error))


class TestDynamoDBCachePool:
    def test_missing_item(self, tag_table) -> None:
        item = DynamoDBCachePool().get_item("remote.a")

        assert item.key == "remote.a"
        assert not item.exists()
        assert item.get() is None

    def test_set_get_delete(self, tag_table, tag_table_get_item) -> None:
        pool = DynamoDBCachePool()

        pool.get_item("remote.a").set("1")

        assert pool.get_item("remote.a").exists()
        assert pool.get_item("remote.a").get() == "1"
        assert tag_table_get_item("remote.a") == {"cache_key": "remote.a", "value": "1"}

        pool.get_item("remote.a").delete()

        assert tag_table_get_item("remote.a") is None

    def test_ttl_stored_as_expiry(self, tag_table, tag_table_get_item, monkeypatch) -> None:
        monkeypatch.setattr(dynamodb_cache, "epoch_seconds", lambda: 1_000)

        DynamoDBCachePool().get_item("remote.a").set("1", ttl=60)

        assert tag_table_get_item("remote.a")["expires_at"] == 1_060

    def test_expired_item_treated_as_absent(self, tag_table, monkeypatch) -> None:
        now = [1_000]
        monkeypatch.setattr(dynamodb_cache, "epoch_seconds", lambda: now[0])
        pool = DynamoDBCachePool()
        pool.get_item("remote.a").set("1", ttl=60)

        now[0] = 1_060

        assert not pool.get_item("remote.a").exists()
        assert pool.get_item("remote.a").get() is None

    def test_read_error(self, failing_pool) -> None:
        with pytest.raises(CacheError) as exc_info:
            failing_pool.get_item("remote.a").exists()

        assert exc_info.value.error_code == ERROR_CODE_CACHE_READ_FAILED

    def test_write_error(self, failing_pool) -> None:
        with pytest.raises(CacheError) as exc_info:
            failing_pool.get_item("remote.a").set("1")

        assert exc_info.value.error_code == ERROR_CODE_CACHE_WRITE_FAILED

    def test_delete_error(self, failing_pool) -> None:
        with pytest.raises(CacheError) as exc_info:
            failing_pool.get_item("remote.a").delete()

        assert exc_info.value.error_code == ERROR_CODE_CACHE_DELETE_FAILED

    def test_unexpected_error_is_wrapped(self) -> None:
        pool = DynamoDBCachePool(FailingDynamoDBAdapter(RuntimeError("boom")))

        with pytest.raises(CacheError):
            pool.get_item("remote.a").get()
