"""
Error boundary for API Gateway Lambda handlers.
"""

from __future__ import annotations

import traceback
from collections.abc import Callable
from functools import wraps
from http import HTTPStatus
from typing import Any

from aws_lambda_powertools import Logger
from pydantic import ValidationError

from image_manager.models.errors import ImageManagerError
from image_manager.utils.response import JsonDict, ResponseBuilder, status_for
from image_manager.utils.validators import sanitize_validation_errors

logger = Logger(service="api-gateway-handler", UTC=True)

BAD_REQUEST_MESSAGE = "The provided data is invalid. Please check your input and try again."
UNEXPECTED_MESSAGE = "We're experiencing technical difficulties. Please try again in a few moments."


def _error_response(exc: Exception, **kwargs: Any) -> JsonDict:
    if isinstance(exc, ImageManagerError):
        return ResponseBuilder.from_error(exc, **kwargs)

    if isinstance(exc, ValidationError):
        return ResponseBuilder.validation_error(
            "Invalid request payload",
            details=sanitize_validation_errors(exc.errors()),
            **kwargs,
        )

    if isinstance(exc, (ValueError, KeyError, TypeError)):
        return ResponseBuilder.bad_request(BAD_REQUEST_MESSAGE, **kwargs)

    return ResponseBuilder.internal_error(UNEXPECTED_MESSAGE, **kwargs)


def _is_server_fault(exc: Exception) -> bool:
    if isinstance(exc, ImageManagerError):
        return status_for(exc) >= HTTPStatus.INTERNAL_SERVER_ERROR
    return not isinstance(exc, (ValidationError, ValueError, KeyError, TypeError))


def _log_error(exc: Exception, *, handler_name: str, request_id: str | None) -> None:
    """Server faults are logged with their traceback; client errors as warnings."""
    log_extra: dict[str, Any] = {
        "handler": handler_name,
        "request_id": request_id,
        "error": str(exc),
        "error_type": type(exc).__name__,
    }
    if isinstance(exc, ImageManagerError):
        log_extra["error_code"] = exc.error_code

    if _is_server_fault(exc):
        logger.exception("Unhandled error in handler", extra=log_extra)
    else:
        log_extra["traceback"] = traceback.format_exc()
        logger.warning("Request rejected by handler", extra=log_extra)


def api_gateway_handler(
    func: Callable[..., JsonDict],
) -> Callable[..., JsonDict]:
    """
    Decorator for API Gateway Lambda handlers.

    Answers CORS preflight (OPTIONS) requests and converts anything the
    handler lets escape into an error response:

    - ImageManagerError: status chosen by ResponseBuilder.from_error
    - pydantic ValidationError: 422 with sanitized field errors
    - ValueError / KeyError / TypeError: 400
    - anything else: 500

    Example:
        @api_gateway_handler
        def handler(event, context):
            return {"statusCode": 200, "body": "Success"}
    """

    @wraps(func)
    def wrapper(
        event: Any,
        context: Any,
        *,
        cors_origin: str | None = None,
    ) -> JsonDict:
        if event.get("httpMethod") == "OPTIONS":
            return ResponseBuilder.no_content(cors_origin=cors_origin)

        request_id = getattr(context, "aws_request_id", None)

        try:
            return func(event, context)
        except Exception as exc:
            _log_error(exc, handler_name=func.__name__, request_id=request_id)
            return _error_response(exc, request_id=request_id, cors_origin=cors_origin)

    return wrapper
