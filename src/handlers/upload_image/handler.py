"""
Lambda handler responsible for image upload.
"""

import json
from typing import Any

from aws_lambda_powertools import Logger, Metrics, Tracer
from aws_lambda_powertools.utilities.typing import LambdaContext

from image_manager.models.errors import ImageManagerError
from image_manager.utils.decorators import api_gateway_handler
from image_manager.utils.response import ResponseBuilder
from image_manager.utils.validators import validate_request

from .models import ImageUploadRequest, ImageUploadResponse
from .service import UploadService

logger = Logger(UTC=True)
tracer = Tracer()
metrics = Metrics()


@api_gateway_handler
@tracer.capture_lambda_handler
@metrics.log_metrics()
def handler(event: dict[str, Any], context: LambdaContext) -> dict[str, Any]:
    """
    Handle image upload requests.

    Expected API Gateway event structure:
    {
        "body": "{\"key\": ..., \"file\": <base64>, \"overwrite\": false}"
    }

    Returns:
        201 with the stored key and metadata, 409 if the key is taken
    """
    logger.info(
        "Received image upload request",
        extra={
            "http_method": event.get("httpMethod"),
            "path": event.get("path"),
            "request_id": getattr(context, "aws_request_id", None),
        },
    )

    try:
        body = json.loads(event.get("body") or "{}")
    except json.JSONDecodeError:
        logger.warning("Invalid JSON body received")
        return ResponseBuilder.bad_request("Invalid JSON body")

    request = validate_request(ImageUploadRequest, body)

    try:
        image, metadata = UploadService().upload_image(
            key=request.key,
            file_data=request.data,
            overwrite=request.overwrite,
        )
    except ImageManagerError as exc:
        logger.warning(
            "Image upload failed",
            extra={"key": request.key, "error_code": exc.error_code},
        )
        return ResponseBuilder.from_error(exc)

    response = ImageUploadResponse(
        key=image.key,
        mime_type=image.mime_type,
        size=len(image.data or b""),
        metadata=metadata.model_dump(mode="json") if metadata else None,
        message="Image uploaded successfully",
    )

    return ResponseBuilder.created(response.model_dump())
