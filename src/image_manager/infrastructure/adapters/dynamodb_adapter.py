"""Thin adapter for the DynamoDB table holding cache tags."""

import os
from typing import Any, Protocol

import boto3

from image_manager.utils.constants import (
    ENV_AWS_ENDPOINT_URL,
    ENV_AWS_REGION,
    ENV_IMAGE_TAG_TABLE_NAME,
)


class DynamoDBAdapterProtocol(Protocol):
    """Item operations DynamoDBCachePool needs from an adapter."""

    def put_item(self, *, item: dict[str, Any]) -> dict[str, Any]: ...
    def get_item(self, *, key: dict[str, Any]) -> dict[str, Any]: ...
    def delete_item(self, *, key: dict[str, Any]) -> dict[str, Any]: ...


class DynamoDBAdapter:
    """boto3 Table resource for the tag table.

    Errors are not handled here; the cache pool turns ClientError into
    CacheError.
    """

    def __init__(self, table_name: str | None = None) -> None:
        table_name = table_name or os.getenv(ENV_IMAGE_TAG_TABLE_NAME)
        if not table_name:
            raise RuntimeError(f"{ENV_IMAGE_TAG_TABLE_NAME} environment variable is not set")

        resource = boto3.resource(
            "dynamodb",
            endpoint_url=os.getenv(ENV_AWS_ENDPOINT_URL),
            region_name=os.getenv(ENV_AWS_REGION),
        )
        self.table: Any = resource.Table(table_name)

    def put_item(self, *, item: dict[str, Any]) -> dict[str, Any]:
        return self.table.put_item(Item=item)

    def get_item(self, *, key: dict[str, Any]) -> dict[str, Any]:
        # Tags must reflect the latest push or remove
        return self.table.get_item(Key=key, ConsistentRead=True)

    def delete_item(self, *, key: dict[str, Any]) -> dict[str, Any]:
        return self.table.delete_item(Key=key)
