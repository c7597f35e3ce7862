"""Thin adapter for the S3 bucket holding image objects.

Calls go straight to boto3. ClientError propagates to S3BlobStorage, which
translates it into domain errors.
"""

import os
from collections.abc import Mapping
from typing import Any, Protocol

import boto3

from image_manager.utils.constants import (
    ENV_AWS_ENDPOINT_URL,
    ENV_AWS_REGION,
    ENV_IMAGE_S3_BUCKET_NAME,
)


class S3AdapterProtocol(Protocol):
    """Operations S3BlobStorage needs from an adapter."""

    def put_object(
        self,
        *,
        key: str,
        body: bytes,
        content_type: str | None = None,
        metadata: dict[str, str] | None = None,
        if_none_match: str | None = None,
    ) -> None: ...

    def get_object(self, *, key: str) -> Mapping[str, Any]: ...

    def head_object(self, *, key: str) -> Mapping[str, Any]: ...

    def delete_object(self, *, key: str) -> None: ...

    def copy_object(self, *, source_key: str, target_key: str) -> None: ...


def _present(**params: Any) -> dict[str, Any]:
    # boto3 rejects None for optional request parameters
    return {name: value for name, value in params.items() if value}


class S3Adapter:
    """boto3 S3 client bound to one bucket.

    The bucket defaults to IMAGE_S3_BUCKET_NAME. AWS_ENDPOINT_URL points the
    client at a local S3 such as LocalStack.
    """

    def __init__(self, bucket_name: str | None = None) -> None:
        self._bucket = bucket_name or os.getenv(ENV_IMAGE_S3_BUCKET_NAME) or ""
        if not self._bucket:
            raise RuntimeError(f"{ENV_IMAGE_S3_BUCKET_NAME} environment variable is not set")

        self._client = boto3.client(
            "s3",
            endpoint_url=os.getenv(ENV_AWS_ENDPOINT_URL),
            region_name=os.getenv(ENV_AWS_REGION),
        )

    @property
    def bucket(self) -> str:
        return self._bucket

    def put_object(
        self,
        *,
        key: str,
        body: bytes,
        content_type: str | None = None,
        metadata: dict[str, str] | None = None,
        if_none_match: str | None = None,
    ) -> None:
        """Store bytes; ``if_none_match="*"`` makes the write conditional."""
        self._client.put_object(
            Bucket=self._bucket,
            Key=key,
            Body=body,
            **_present(
                ContentType=content_type,
                Metadata=metadata,
                IfNoneMatch=if_none_match,
            ),
        )

    def get_object(self, *, key: str) -> Mapping[str, Any]:
        return self._client.get_object(Bucket=self._bucket, Key=key)

    def head_object(self, *, key: str) -> Mapping[str, Any]:
        return self._client.head_object(Bucket=self._bucket, Key=key)

    def delete_object(self, *, key: str) -> None:
        self._client.delete_object(Bucket=self._bucket, Key=key)

    def copy_object(self, *, source_key: str, target_key: str) -> None:
        """Server-side copy within the bucket."""
        self._client.copy_object(
            Bucket=self._bucket,
            Key=target_key,
            CopySource={"Bucket": self._bucket, "Key": source_key},
        )
