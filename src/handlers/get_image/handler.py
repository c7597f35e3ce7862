"""
Lambda handler responsible for image and variation retrieval.
"""

from typing import Any
from urllib.parse import unquote

from aws_lambda_powertools import Logger, Metrics, Tracer
from aws_lambda_powertools.utilities.typing import LambdaContext

from image_manager.models.errors import ImageManagerError
from image_manager.utils.decorators import api_gateway_handler
from image_manager.utils.response import ResponseBuilder
from image_manager.utils.validators import validate_request

from .models import GetImageRequest
from .service import GetService

logger = Logger(UTC=True)
tracer = Tracer()
metrics = Metrics()


@api_gateway_handler
@tracer.capture_lambda_handler
@metrics.log_metrics()
def handler(event: dict[str, Any], context: LambdaContext) -> dict[str, Any]:
    """
    Handle image view requests.

    Query parameters select a variation:
        format, quality, width, height, maintain_ratio, upscale, grab,
        crop_x, crop_y, crop_width, crop_height, persist

    Returns:
        Binary response with the image bytes and its Content-Type
    """
    logger.info(
        "Received image get request",
        extra={
            "http_method": event.get("httpMethod"),
            "path": event.get("path"),
            "query_params": event.get("queryStringParameters"),
            "request_id": getattr(context, "aws_request_id", None),
        },
    )

    path_params = event.get("pathParameters") or {}
    query_params = event.get("queryStringParameters") or {}

    key = path_params.get("key")
    params = {**query_params, "key": unquote(key) if key else key}

    request = validate_request(GetImageRequest, params)

    try:
        image = GetService().get_image(request)
    except ImageManagerError as exc:
        logger.warning(
            "Image retrieval failed",
            extra={"key": request.key, "error_code": exc.error_code},
        )
        return ResponseBuilder.from_error(exc)

    return ResponseBuilder.image_response(image)
