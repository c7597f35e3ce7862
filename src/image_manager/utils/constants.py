"""Global constants used throughout the image manager.

This module centralizes error codes, cache key conventions, encoding defaults
and environment variable names so they can be changed in one place.
"""

from typing import Final

# ============================================================================
# Error Codes
# ============================================================================

ERROR_CODE_IMAGE_MANAGER = "IMAGE_MANAGER_ERROR"

# Entity / validation errors
ERROR_CODE_INVALID_KEY = "INVALID_KEY"
ERROR_CODE_INVALID_FORMAT = "INVALID_FORMAT"
ERROR_CODE_INVALID_SOURCE = "INVALID_SOURCE"
ERROR_CODE_NOT_HYDRATED = "NOT_HYDRATED"

# Existence errors
ERROR_CODE_NOT_EXISTS = "NOT_EXISTS"
ERROR_CODE_PARENT_NOT_EXISTS = "PARENT_NOT_EXISTS"
ERROR_CODE_ALREADY_EXISTS = "ALREADY_EXISTS"
ERROR_CODE_OBJECT_NOT_FOUND = "OBJECT_NOT_FOUND"

# Encoding errors
ERROR_CODE_BAD_IMAGE = "BAD_IMAGE"
ERROR_CODE_NO_SUPPORTED_ENCODER = "NO_SUPPORTED_ENCODER"

# Backend errors
ERROR_CODE_STORAGE = "STORAGE_ERROR"
ERROR_CODE_STORAGE_WRITE_FAILED = "STORAGE_WRITE_FAILED"
ERROR_CODE_STORAGE_READ_FAILED = "STORAGE_READ_FAILED"
ERROR_CODE_STORAGE_DELETE_FAILED = "STORAGE_DELETE_FAILED"
ERROR_CODE_STORAGE_RENAME_FAILED = "STORAGE_RENAME_FAILED"
ERROR_CODE_STORAGE_HAS_FAILED = "STORAGE_HAS_FAILED"
ERROR_CODE_CACHE = "CACHE_ERROR"
ERROR_CODE_CACHE_READ_FAILED = "CACHE_READ_FAILED"
ERROR_CODE_CACHE_WRITE_FAILED = "CACHE_WRITE_FAILED"
ERROR_CODE_CACHE_DELETE_FAILED = "CACHE_DELETE_FAILED"

# Handler errors
ERROR_CODE_VALIDATION_FAILED = "VALIDATION_FAILED"

# ============================================================================
# Error Messages
# ============================================================================

ERR_INVALID_KEY = "Invalid key"
ERR_NOT_HYDRATED = "Image is not hydrated"
ERR_NOT_EXISTS = "Image does not exist"
ERR_PARENT_NOT_EXISTS = "Parent image does not exist"
ERR_ALREADY_EXISTS = "Object already exists on remote"
ERR_NO_SUPPORTED_ENCODER = "There is no known encoder for this data type"
ERR_SOURCE_IMAGE = "Only source Image object can be used for retrieving metadata"

# ============================================================================
# Cache Tags
# ============================================================================

CACHE_KEY_PREFIX: Final[str] = "remote."
TAG_EXISTS_MARKER: Final[str] = "1"

# ============================================================================
# Variations
# ============================================================================

VARIATION_KEY_SEPARATOR: Final[str] = "~"
DEFAULT_QUALITY: Final[int] = 90
MIN_QUALITY: Final[int] = 1
MAX_QUALITY: Final[int] = 100

# ============================================================================
# Encoding
# ============================================================================

MIN_SNIFF_LENGTH: Final[int] = 5
PDF_SIGNATURE: Final[bytes] = b"%PDF-"
DEFAULT_PDF_RESOLUTION: Final[int] = 300
DEFAULT_DPI: Final[float] = 72.0
PDF_POINTS_PER_INCH: Final[float] = 72.0
FLATTEN_BACKGROUND: Final[tuple[int, int, int]] = (255, 255, 255)

DEFAULT_MIME_TYPE = "application/octet-stream"

MAGIC_BYTES_MIME_MAP: Final[dict[bytes, str]] = {
    b"\xff\xd8\xff": "image/jpeg",
    b"\x89PNG\r\n\x1a\n": "image/png",
    b"GIF87a": "image/gif",
    b"GIF89a": "image/gif",
    b"%PDF-": "application/pdf",
    b"II*\x00": "image/tiff",
    b"MM\x00*": "image/tiff",
    b"BM": "image/bmp",
}

# ============================================================================
# Environment Variable Names
# ============================================================================

ENV_AWS_ENDPOINT_URL = "AWS_ENDPOINT_URL"
ENV_AWS_REGION = "AWS_REGION"
ENV_IMAGE_S3_BUCKET_NAME = "IMAGE_S3_BUCKET_NAME"
ENV_IMAGE_TAG_TABLE_NAME = "IMAGE_TAG_TABLE_NAME"
ENV_IMAGE_VALIDATE_TAGS = "IMAGE_VALIDATE_TAGS"
ENV_IMAGE_TAG_TTL_SECONDS = "IMAGE_TAG_TTL_SECONDS"

# ============================================================================
# DynamoDB Cache Table
# ============================================================================

CACHE_TABLE_KEY_ATTRIBUTE = "cache_key"
CACHE_TABLE_VALUE_ATTRIBUTE = "value"
CACHE_TABLE_EXPIRY_ATTRIBUTE = "expires_at"

# ============================================================================
# API Gateway Configuration
# ============================================================================

CORS_ORIGIN = "*"
CORS_METHODS = "GET,POST,DELETE,OPTIONS"
CORS_HEADERS = "Content-Type,Authorization,X-Api-Key"
EXPOSE_HEADERS = "Content-Type,Content-Length,X-Image-Key,X-Image-Persistent"
DEFAULT_CONTENT_TYPE = "application/json"
MAX_UPLOAD_SIZE = 10 * 1024 * 1024  # 10MB in bytes
