"""Request validation utilities."""

from typing import Any, TypeVar

from pydantic import BaseModel

ModelT = TypeVar("ModelT", bound=BaseModel)


def sanitize_validation_errors(errors: list[Any]) -> list[dict[str, str]]:
    """Sanitize Pydantic validation errors for API responses.

    Only the field path and message survive; ``input``, ``ctx`` and ``url``
    are dropped so request bytes never echo back to the caller.
    """
    sanitized: list[dict[str, str]] = []

    for err in errors:
        field = ".".join(str(x) for x in err.get("loc", [])) or "body"
        msg = err.get("msg", "Invalid value").replace("Value error,", "").strip()

        msg_lower = msg.lower()
        if "base64" in msg_lower:
            msg = "File must be a valid Base64-encoded string"
        elif "field required" in msg_lower:
            msg = "This field is required"

        sanitized.append({"field": field, "message": msg})

    return sanitized


def validate_request(model: type[ModelT], data: dict[str, Any]) -> ModelT:
    """Validate request data against a Pydantic model.

    Query string values arrive as strings; pydantic's lax mode coerces them.

    Raises:
        pydantic.ValidationError: If the data does not satisfy the model
    """
    return model.model_validate(data)
