"""
Pytest configuration and fixtures for image manager tests.
Provides AWS mocking, S3 and DynamoDB fixtures with cleanup, and
generated image payloads.
"""

import os
from collections.abc import Callable
from io import BytesIO
from typing import Any

# Defaults must be in place before boto3 clients or powertools objects exist
os.environ.setdefault("AWS_REGION", "us-east-1")
os.environ.setdefault("AWS_DEFAULT_REGION", "us-east-1")
os.environ.setdefault("AWS_ACCESS_KEY_ID", "testing")
os.environ.setdefault("AWS_SECRET_ACCESS_KEY", "testing")
os.environ.setdefault("IMAGE_S3_BUCKET_NAME", "test-image-bucket")
os.environ.setdefault("IMAGE_TAG_TABLE_NAME", "test-image-tags")
os.environ.setdefault("POWERTOOLS_TRACE_DISABLED", "1")
os.environ.setdefault("POWERTOOLS_METRICS_NAMESPACE", "ImageManagerTests")
os.environ.setdefault("POWERTOOLS_SERVICE_NAME", "image-manager")

import boto3
import pymupdf
import pytest
from botocore.exceptions import ClientError
from moto import mock_aws
from PIL import Image as PILImage

from image_manager.utils.constants import CACHE_TABLE_KEY_ATTRIBUTE


@pytest.fixture(scope="function")
def aws_mock():
    with mock_aws():
        yield


@pytest.fixture(scope="function")
def dynamodb_resource(aws_mock):
    return boto3.resource("dynamodb", region_name=os.getenv("AWS_REGION"))


@pytest.fixture(scope="function")
def tag_table(dynamodb_resource):
    """
    Create the cache tag table for testing.

    The table lives for the duration of the moto context only.
    """
    table_name = os.getenv("IMAGE_TAG_TABLE_NAME")

    try:
        table = dynamodb_resource.Table(table_name)
        table.load()
    except ClientError:
        table = dynamodb_resource.create_table(
            TableName=table_name,
            BillingMode="PAY_PER_REQUEST",
            KeySchema=[{"AttributeName": CACHE_TABLE_KEY_ATTRIBUTE, "KeyType": "HASH"}],
            AttributeDefinitions=[
                {"AttributeName": CACHE_TABLE_KEY_ATTRIBUTE, "AttributeType": "S"},
            ],
        )
        table.wait_until_exists()

    yield table


@pytest.fixture
def tag_table_get_item(tag_table) -> Callable[[str], dict[str, Any] | None]:
    """
    Helper to read a raw cache item.

    Usage:
        item = tag_table_get_item("remote.photo.png")
    """

    def _get(cache_key: str) -> dict[str, Any] | None:
        response = tag_table.get_item(Key={CACHE_TABLE_KEY_ATTRIBUTE: cache_key})
        return response.get("Item")

    return _get


@pytest.fixture(scope="function")
def s3_client(aws_mock):
    """S3 client for bucket operations."""
    return boto3.client("s3", region_name=os.getenv("AWS_REGION"))


def _cleanup_s3_objects(s3_client, bucket_name):
    """Helper to delete all objects from S3 bucket efficiently."""
    try:
        paginator = s3_client.get_paginator("list_objects_v2")
        for page in paginator.paginate(Bucket=bucket_name):
            objects = page.get("Contents", [])
            if objects:
                s3_client.delete_objects(
                    Bucket=bucket_name,
                    Delete={"Objects": [{"Key": obj["Key"]} for obj in objects]},
                )
    except ClientError as e:
        if e.response["Error"]["Code"] != "NoSuchBucket":
            raise


@pytest.fixture(scope="function")
def s3_bucket(s3_client):
    """
    Create and manage S3 bucket for testing.

    Objects are deleted after each test.
    """
    bucket_name = os.getenv("IMAGE_S3_BUCKET_NAME")

    try:
        s3_client.head_bucket(Bucket=bucket_name)
    except ClientError:
        s3_client.create_bucket(Bucket=bucket_name)

    yield s3_client

    _cleanup_s3_objects(s3_client, bucket_name)


@pytest.fixture
def s3_put_object(s3_client) -> Callable[..., dict[str, Any]]:
    """
    Helper to upload an object to S3.

    Usage:
        s3_put_object("photo.png", png_bytes, "image/png")
    """

    def _put(key: str, body: bytes, content_type: str = "application/octet-stream"):
        return s3_client.put_object(
            Bucket=os.getenv("IMAGE_S3_BUCKET_NAME"),
            Key=key,
            Body=body,
            ContentType=content_type,
        )

    return _put


@pytest.fixture
def s3_get_object(s3_client) -> Callable[[str], bytes]:
    """
    Helper to get object bytes from S3.

    Usage:
        content = s3_get_object("photo.png")
    """

    def _get(key: str) -> bytes:
        response = s3_client.get_object(Bucket=os.getenv("IMAGE_S3_BUCKET_NAME"), Key=key)
        data: bytes = response["Body"].read()
        return data

    return _get


@pytest.fixture
def s3_head_object(s3_client) -> Callable[[str], dict[str, Any]]:
    def _head(key: str) -> dict[str, Any]:
        return s3_client.head_object(Bucket=os.getenv("IMAGE_S3_BUCKET_NAME"), Key=key)

    return _head


# ---------------------------------------------------------------------------
# Image payloads
# ---------------------------------------------------------------------------


def make_image_bytes(
    fmt: str = "PNG",
    size: tuple[int, int] = (400, 300),
    mode: str = "RGB",
    color: Any = (200, 40, 40),
    **save_kwargs: Any,
) -> bytes:
    """Render a solid-colour image in the given format."""
    buffer = BytesIO()
    PILImage.new(mode, size, color).save(buffer, format=fmt, **save_kwargs)
    return buffer.getvalue()


def make_pdf_bytes(width: float = 595, height: float = 842) -> bytes:
    """Create a one page PDF with the given page size in points."""
    doc = pymupdf.open()
    try:
        page = doc.new_page(width=width, height=height)
        page.insert_text((72, 72), "image manager")
        return doc.tobytes()
    finally:
        doc.close()


@pytest.fixture
def png_bytes() -> bytes:
    """400x300 RGB PNG."""
    return make_image_bytes("PNG")


@pytest.fixture
def rgba_png_bytes() -> bytes:
    """400x300 half transparent PNG."""
    return make_image_bytes("PNG", mode="RGBA", color=(0, 0, 255, 128))


@pytest.fixture
def jpeg_bytes() -> bytes:
    """400x300 JPEG."""
    return make_image_bytes("JPEG", quality=95)


@pytest.fixture
def gif_bytes() -> bytes:
    """400x300 GIF."""
    return make_image_bytes("GIF", mode="P", color=1)


@pytest.fixture
def portrait_png_bytes() -> bytes:
    """300x400 PNG."""
    return make_image_bytes("PNG", size=(300, 400))


@pytest.fixture
def pdf_bytes() -> bytes:
    """A4 portrait PDF (595x842 points)."""
    return make_pdf_bytes()


def decoded_size(data: bytes) -> tuple[int, int]:
    with PILImage.open(BytesIO(data)) as img:
        return img.size


def decoded_format(data: bytes) -> str | None:
    with PILImage.open(BytesIO(data)) as img:
        return img.format


@pytest.fixture
def make_image() -> Callable[..., bytes]:
    return make_image_bytes


@pytest.fixture
def image_size() -> Callable[[bytes], tuple[int, int]]:
    """Decode bytes and return their pixel size."""
    return decoded_size


@pytest.fixture
def image_format() -> Callable[[bytes], str | None]:
    """Decode bytes and return the Pillow format name."""
    return decoded_format


@pytest.fixture
def tiny_pixel_limit(monkeypatch) -> int:
    """Lower Pillow's decompression bomb limit so ordinary images exceed it.

    Pillow refuses to open images above twice the limit.
    """
    monkeypatch.setattr(PILImage, "MAX_IMAGE_PIXELS", 100)
    return 100
