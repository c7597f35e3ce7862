"""Builds an ImageManager wired from environment configuration."""

import os

from aws_lambda_powertools import Logger

from image_manager.encoders.pdf_encoder import PdfEncoder
from image_manager.encoders.pillow_encoder import PillowEncoder
from image_manager.infrastructure.adapters.dynamodb_adapter import DynamoDBAdapter
from image_manager.infrastructure.adapters.s3_adapter import S3Adapter
from image_manager.infrastructure.aws.dynamodb_cache import DynamoDBCachePool
from image_manager.infrastructure.aws.s3_blob_storage import S3BlobStorage
from image_manager.services.image_manager import ImageManager
from image_manager.utils.constants import (
    ENV_IMAGE_TAG_TABLE_NAME,
    ENV_IMAGE_TAG_TTL_SECONDS,
    ENV_IMAGE_VALIDATE_TAGS,
)

logger = Logger(UTC=True)

_TRUTHY = frozenset({"1", "true", "yes", "on"})


def _env_flag(name: str) -> bool:
    return os.getenv(name, "").strip().lower() in _TRUTHY


def _env_ttl(name: str) -> int | None:
    raw = os.getenv(name, "").strip()
    if not raw:
        return None

    try:
        ttl = int(raw)
    except ValueError as exc:
        raise RuntimeError(f"{name} must be an integer number of seconds") from exc

    return ttl if ttl > 0 else None


def create_image_manager() -> ImageManager:
    """Create an S3-backed ImageManager.

    The DynamoDB tag cache is enabled only when IMAGE_TAG_TABLE_NAME is set.
    PDF sources are rasterised in addition to PNG, JPEG and GIF.

    Raises:
        RuntimeError: If required environment variables are missing or invalid
    """
    storage = S3BlobStorage(S3Adapter())

    table_name = os.getenv(ENV_IMAGE_TAG_TABLE_NAME)
    cache_pool = DynamoDBCachePool(DynamoDBAdapter(table_name)) if table_name else None

    manager = ImageManager(
        storage,
        cache_pool=cache_pool,
        encoders=[PillowEncoder(), PdfEncoder()],
        validate_tags=_env_flag(ENV_IMAGE_VALIDATE_TAGS),
        tag_ttl=_env_ttl(ENV_IMAGE_TAG_TTL_SECONDS),
    )

    logger.debug(
        "Image manager created",
        extra={
            "cache_enabled": cache_pool is not None,
            "validate_tags": manager.validate_tags,
        },
    )
    return manager
