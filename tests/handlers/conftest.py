import base64
import json
from types import SimpleNamespace
from typing import Any, Callable

import pytest


@pytest.fixture
def lambda_context():
    return SimpleNamespace(
        aws_request_id="test-request-id",
        function_name="test-function",
        memory_limit_in_mb=256,
        invoked_function_arn="arn:aws:lambda:us-east-1:000000000000:function:test",
        log_group_name="/aws/lambda/test-function",
        log_stream_name="2024/01/01/[$LATEST]test",
    )


@pytest.fixture
def aws_env(s3_bucket, tag_table, monkeypatch):
    """Moto S3 bucket and tag table with default manager settings."""
    monkeypatch.delenv("IMAGE_VALIDATE_TAGS", raising=False)
    monkeypatch.delenv("IMAGE_TAG_TTL_SECONDS", raising=False)
    return s3_bucket


@pytest.fixture
def upload_event() -> Callable[..., dict[str, Any]]:
    def _event(key: str, data: bytes, **extra: Any) -> dict[str, Any]:
        return {
            "httpMethod": "POST",
            "path": "/images",
            "body": json.dumps(
                {"key": key, "file": base64.b64encode(data).decode("utf-8"), **extra}
            ),
        }

    return _event


@pytest.fixture
def get_event() -> Callable[..., dict[str, Any]]:
    def _event(key: str, **query: Any) -> dict[str, Any]:
        return {
            "httpMethod": "GET",
            "path": f"/images/{key}",
            "pathParameters": {"key": key},
            "queryStringParameters": {k: str(v) for k, v in query.items()} or None,
        }

    return _event


@pytest.fixture
def delete_event() -> Callable[[str], dict[str, Any]]:
    def _event(key: str) -> dict[str, Any]:
        return {
            "httpMethod": "DELETE",
            "path": f"/images/{key}",
            "pathParameters": {"key": key},
        }

    return _event
