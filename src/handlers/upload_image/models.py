"""Pydantic models for image upload request/response."""

import base64
from typing import Any

from aws_lambda_powertools import Logger
from pydantic import BaseModel, ConfigDict, Field, field_validator

from image_manager.utils.constants import MAX_UPLOAD_SIZE, VARIATION_KEY_SEPARATOR

logger = Logger(UTC=True)


class ImageUploadRequest(BaseModel):
    """Validation model for image upload request."""

    model_config = ConfigDict(str_strip_whitespace=True)

    key: str = Field(..., min_length=1, max_length=1024, description="Remote image key")
    file: str = Field(..., description="Base64 encoded image file")
    overwrite: bool = Field(
        default=False,
        description="Replace an existing image with the same key",
    )

    @field_validator("key")
    @classmethod
    def validate_key(cls, value: str) -> str:
        # Derived variation keys are reserved
        if VARIATION_KEY_SEPARATOR in value:
            raise ValueError(f"Invalid key: '{VARIATION_KEY_SEPARATOR}' is reserved")
        return value

    @field_validator("file")
    @classmethod
    def validate_file(cls, value: str) -> str:
        """
        Validate base64 file:
        - must not be empty
        - must decode correctly
        - must not exceed MAX_UPLOAD_SIZE
        """
        if not value:
            raise ValueError("file must not be empty")

        try:
            file_data = base64.b64decode(value, validate=True)
        except ValueError as exc:
            logger.error("File validation error: invalid base64")
            raise ValueError("Invalid base64 encoded file") from exc

        if not file_data:
            raise ValueError("Decoded file is empty")

        if len(file_data) > MAX_UPLOAD_SIZE:
            raise ValueError(
                f"File size exceeds {MAX_UPLOAD_SIZE // (1024 * 1024)}MB limit"
            )

        return value

    @property
    def data(self) -> bytes:
        return base64.b64decode(self.file)


class ImageUploadResponse(BaseModel):
    """Response model for successful image upload."""

    key: str = Field(..., description="Remote image key")
    mime_type: str | None = Field(None, description="Detected MIME type")
    size: int = Field(..., description="Stored size in bytes")
    metadata: dict[str, Any] | None = Field(None, description="Inspected image metadata")
    message: str = Field(..., description="Success message")
