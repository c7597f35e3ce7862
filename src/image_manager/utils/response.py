"""
API Gateway responses for the image handlers.

JSON bodies get the request id appended when one is known. Image bodies are
base64 encoded and flagged with ``isBase64Encoded`` so API Gateway returns
the raw bytes to the client.
"""

from __future__ import annotations

import base64
import json
from http import HTTPStatus
from typing import Any

from image_manager.models.errors import (
    AlreadyExistsError,
    BadImageError,
    CacheError,
    ImageManagerError,
    InvalidFormatError,
    InvalidKeyError,
    NoSupportedEncoderError,
    NotExistsError,
    NotHydratedError,
    StorageError,
)
from image_manager.models.image import AnyImage
from image_manager.utils.constants import (
    CORS_HEADERS,
    CORS_METHODS,
    CORS_ORIGIN,
    DEFAULT_CONTENT_TYPE,
    DEFAULT_MIME_TYPE,
    ERROR_CODE_VALIDATION_FAILED,
    EXPOSE_HEADERS,
)
from image_manager.utils.time import utc_now_iso

JsonDict = dict[str, Any]

# Most specific first; ParentNotExistsError is a NotExistsError
_ERROR_STATUS: tuple[tuple[type[ImageManagerError], HTTPStatus], ...] = (
    (NotExistsError, HTTPStatus.NOT_FOUND),
    (AlreadyExistsError, HTTPStatus.CONFLICT),
    (BadImageError, HTTPStatus.UNSUPPORTED_MEDIA_TYPE),
    (NoSupportedEncoderError, HTTPStatus.UNSUPPORTED_MEDIA_TYPE),
    (InvalidKeyError, HTTPStatus.UNPROCESSABLE_ENTITY),
    (InvalidFormatError, HTTPStatus.UNPROCESSABLE_ENTITY),
    (NotHydratedError, HTTPStatus.UNPROCESSABLE_ENTITY),
    (StorageError, HTTPStatus.INTERNAL_SERVER_ERROR),
    (CacheError, HTTPStatus.INTERNAL_SERVER_ERROR),
)


def status_for(exc: ImageManagerError) -> HTTPStatus:
    """HTTP status for a domain error; unknown errors are server errors."""
    for error_type, status in _ERROR_STATUS:
        if isinstance(exc, error_type):
            return status
    return HTTPStatus.INTERNAL_SERVER_ERROR


def cors_headers(origin: str | None = None) -> dict[str, str]:
    return {
        "Access-Control-Allow-Origin": origin or CORS_ORIGIN,
        "Access-Control-Allow-Headers": CORS_HEADERS,
        "Access-Control-Allow-Methods": CORS_METHODS,
        "Access-Control-Expose-Headers": EXPOSE_HEADERS,
    }


class ResponseBuilder:
    """Factory for API Gateway-compatible HTTP responses."""

    @classmethod
    def json_response(
        cls,
        status: HTTPStatus,
        body: JsonDict | None = None,
        *,
        request_id: str | None = None,
        cors_origin: str | None = None,
    ) -> JsonDict:
        payload: JsonDict = dict(body or {})
        if request_id:
            payload["request_id"] = request_id

        return {
            "statusCode": status.value,
            "headers": {"Content-Type": DEFAULT_CONTENT_TYPE, **cors_headers(cors_origin)},
            "body": json.dumps(payload),
        }

    @classmethod
    def ok(cls, body: JsonDict, **kwargs: Any) -> JsonDict:
        return cls.json_response(HTTPStatus.OK, body, **kwargs)

    @classmethod
    def created(cls, body: JsonDict, **kwargs: Any) -> JsonDict:
        return cls.json_response(HTTPStatus.CREATED, body, **kwargs)

    @classmethod
    def no_content(cls, *, cors_origin: str | None = None) -> JsonDict:
        return {
            "statusCode": HTTPStatus.NO_CONTENT.value,
            "headers": cors_headers(cors_origin),
            "body": "",
        }

    @classmethod
    def error(
        cls,
        status: HTTPStatus,
        message: str,
        *,
        error: str | None = None,
        details: Any = None,
        request_id: str | None = None,
        cors_origin: str | None = None,
    ) -> JsonDict:
        payload: JsonDict = {
            "error": error or status.name,
            "message": message,
            "timestamp": utc_now_iso(),
        }
        if details:
            payload["details"] = details

        return cls.json_response(
            status, payload, request_id=request_id, cors_origin=cors_origin
        )

    @classmethod
    def bad_request(cls, message: str, **kwargs: Any) -> JsonDict:
        return cls.error(HTTPStatus.BAD_REQUEST, message, **kwargs)

    @classmethod
    def validation_error(cls, message: str, **kwargs: Any) -> JsonDict:
        """422 with the sanitized field errors as details."""
        return cls.error(
            HTTPStatus.UNPROCESSABLE_ENTITY,
            message,
            error=ERROR_CODE_VALIDATION_FAILED,
            **kwargs,
        )

    @classmethod
    def internal_error(cls, message: str = "Internal server error", **kwargs: Any) -> JsonDict:
        return cls.error(HTTPStatus.INTERNAL_SERVER_ERROR, message, **kwargs)

    @classmethod
    def from_error(cls, exc: ImageManagerError, **kwargs: Any) -> JsonDict:
        """Map a domain error onto its HTTP status.

        Backend failures keep their error code but hide their details.
        """
        status = status_for(exc)
        return cls.error(
            status,
            exc.message,
            error=exc.error_code,
            details=exc.details if status < HTTPStatus.INTERNAL_SERVER_ERROR else None,
            **kwargs,
        )

    @classmethod
    def binary_response(
        cls,
        content: bytes,
        *,
        content_type: str,
        headers: dict[str, str] | None = None,
        cors_origin: str | None = None,
    ) -> JsonDict:
        return {
            "statusCode": HTTPStatus.OK.value,
            "headers": {
                **cors_headers(cors_origin),
                "Content-Type": content_type,
                "Content-Length": str(len(content)),
                **(headers or {}),
            },
            "body": base64.b64encode(content).decode("utf-8"),
            "isBase64Encoded": True,
        }

    @classmethod
    def image_response(cls, image: AnyImage, *, cors_origin: str | None = None) -> JsonDict:
        """Binary response for an image or variation, tagged with its key."""
        return cls.binary_response(
            image.data or b"",
            content_type=image.mime_type or DEFAULT_MIME_TYPE,
            headers={
                "X-Image-Key": image.key,
                "X-Image-Persistent": str(image.is_persistent()).lower(),
            },
            cors_origin=cors_origin,
        )
