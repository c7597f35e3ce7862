"""
Lambda handler responsible for deleting an image.
"""

from typing import Any
from urllib.parse import unquote

from aws_lambda_powertools import Logger, Metrics, Tracer
from aws_lambda_powertools.utilities.typing import LambdaContext

from image_manager.models.errors import ImageManagerError
from image_manager.utils.decorators import api_gateway_handler
from image_manager.utils.response import ResponseBuilder
from image_manager.utils.validators import validate_request

from .models import DeleteImageRequest
from .service import DeleteService

logger = Logger(UTC=True)
tracer = Tracer()
metrics = Metrics()


@api_gateway_handler
@tracer.capture_lambda_handler
@metrics.log_metrics()
def handler(event: dict[str, Any], context: LambdaContext) -> dict[str, Any]:
    """
    Handle image deletion requests.

    Returns:
        204 on success, 404 if the image does not exist
    """
    logger.info(
        "Received image delete request",
        extra={
            "http_method": event.get("httpMethod"),
            "path": event.get("path"),
            "request_id": getattr(context, "aws_request_id", None),
        },
    )

    key = (event.get("pathParameters") or {}).get("key")
    request = validate_request(DeleteImageRequest, {"key": unquote(key) if key else key})

    try:
        DeleteService().delete_image(request.key)
    except ImageManagerError as exc:
        logger.warning(
            "Image deletion failed",
            extra={"key": request.key, "error_code": exc.error_code},
        )
        return ResponseBuilder.from_error(exc)

    return ResponseBuilder.no_content()
