"""S3-backed implementation of BlobStorageRepository."""

from aws_lambda_powertools import Logger
from botocore.exceptions import ClientError

from image_manager.infrastructure.adapters.s3_adapter import S3Adapter, S3AdapterProtocol
from image_manager.models.errors import (
    AlreadyExistsError,
    ObjectNotFoundError,
    StorageError,
)
from image_manager.repositories.storage_repository import BlobStorageRepository
from image_manager.utils.constants import (
    ERR_ALREADY_EXISTS,
    ERROR_CODE_STORAGE_DELETE_FAILED,
    ERROR_CODE_STORAGE_HAS_FAILED,
    ERROR_CODE_STORAGE_READ_FAILED,
    ERROR_CODE_STORAGE_RENAME_FAILED,
    ERROR_CODE_STORAGE_WRITE_FAILED,
)

logger = Logger(UTC=True)

_NOT_FOUND_CODES = frozenset({"NoSuchKey", "404", "NotFound"})
_CONDITIONAL_WRITE_CODES = frozenset({"PreconditionFailed", "ConditionalRequestConflict"})


def _error_code(exc: ClientError) -> str:
    return str(exc.response.get("Error", {}).get("Code", ""))


class S3BlobStorage(BlobStorageRepository):
    """Blob storage backed by Amazon S3.

    Supports per-object metadata: values registered with `set_metadata` are
    applied on the next write of that key (``ContentType`` becomes the
    object's content type, everything else is stored as user metadata).
    """

    def __init__(self, adapter: S3AdapterProtocol | None = None) -> None:
        """Create storage using the provided S3 adapter."""
        self._s3: S3AdapterProtocol = adapter or S3Adapter()
        self._pending_metadata: dict[str, dict[str, str]] = {}

    def set_metadata(self, key: str, metadata: dict[str, str]) -> None:
        self._pending_metadata[key] = dict(metadata)

    def write(self, key: str, data: bytes, overwrite: bool = True) -> None:
        """Upload bytes to S3, optionally refusing to replace an existing key."""
        metadata = self._pending_metadata.pop(key, {})
        content_type = metadata.pop("ContentType", None)

        logger.debug(
            "Writing object",
            extra={"key": key, "size": len(data), "overwrite": overwrite},
        )

        if not overwrite and self.has(key):
            raise AlreadyExistsError(message=ERR_ALREADY_EXISTS, details={"key": key})

        try:
            self._s3.put_object(
                key=key,
                body=data,
                content_type=content_type,
                metadata=metadata,
                if_none_match=None if overwrite else "*",
            )
            logger.info("Object written", extra={"key": key})

        except ClientError as exc:
            if _error_code(exc) in _CONDITIONAL_WRITE_CODES:
                logger.warning("Conditional write rejected", extra={"key": key})
                raise AlreadyExistsError(
                    message=ERR_ALREADY_EXISTS,
                    details={"key": key},
                ) from exc

            logger.error("S3 write failed", extra={"key": key})
            raise StorageError(
                message="Unable to write object at this time",
                error_code=ERROR_CODE_STORAGE_WRITE_FAILED,
                details={"key": key},
            ) from exc

        except Exception as exc:
            logger.exception("Unexpected error writing object")
            raise StorageError(
                message="Unable to write object at this time",
                error_code=ERROR_CODE_STORAGE_WRITE_FAILED,
                details={"key": key},
            ) from exc

    def read(self, key: str) -> bytes:
        """Download object bytes from S3."""
        logger.debug("Reading object", extra={"key": key})

        try:
            response = self._s3.get_object(key=key)
            body: bytes = response["Body"].read()
            logger.info("Object read", extra={"key": key, "size": len(body)})
            return body

        except ClientError as exc:
            if _error_code(exc) in _NOT_FOUND_CODES:
                raise ObjectNotFoundError(
                    message="Object not found",
                    details={"key": key},
                ) from exc

            logger.error("S3 read failed", extra={"key": key})
            raise StorageError(
                message="Unable to read object at this time",
                error_code=ERROR_CODE_STORAGE_READ_FAILED,
                details={"key": key},
            ) from exc

        except Exception as exc:
            logger.exception("Unexpected error reading object")
            raise StorageError(
                message="Unable to read object at this time",
                error_code=ERROR_CODE_STORAGE_READ_FAILED,
                details={"key": key},
            ) from exc

    def delete(self, key: str) -> None:
        """Delete an object from S3."""
        logger.debug("Deleting object", extra={"key": key})

        try:
            self._s3.delete_object(key=key)
            logger.info("Object deleted", extra={"key": key})

        except ClientError as exc:
            logger.error("S3 deletion failed", extra={"key": key})
            raise StorageError(
                message="Unable to delete object at this time",
                error_code=ERROR_CODE_STORAGE_DELETE_FAILED,
                details={"key": key},
            ) from exc

        except Exception as exc:
            logger.exception("Unexpected error deleting object")
            raise StorageError(
                message="Unable to delete object at this time",
                error_code=ERROR_CODE_STORAGE_DELETE_FAILED,
                details={"key": key},
            ) from exc

    def has(self, key: str) -> bool:
        try:
            self._s3.head_object(key=key)
            return True

        except ClientError as exc:
            if _error_code(exc) in _NOT_FOUND_CODES:
                return False

            logger.error("S3 head failed", extra={"key": key})
            raise StorageError(
                message="Unable to check object existence",
                error_code=ERROR_CODE_STORAGE_HAS_FAILED,
                details={"key": key},
            ) from exc

        except Exception as exc:
            logger.exception("Unexpected error checking object existence")
            raise StorageError(
                message="Unable to check object existence",
                error_code=ERROR_CODE_STORAGE_HAS_FAILED,
                details={"key": key},
            ) from exc

    def rename(self, source_key: str, target_key: str) -> None:
        """Rename by copying to the target key and deleting the source."""
        logger.debug(
            "Renaming object",
            extra={"source_key": source_key, "target_key": target_key},
        )

        try:
            self._s3.copy_object(source_key=source_key, target_key=target_key)

        except ClientError as exc:
            if _error_code(exc) in _NOT_FOUND_CODES:
                raise ObjectNotFoundError(
                    message="Object not found",
                    details={"key": source_key},
                ) from exc

            logger.error("S3 copy failed", extra={"source_key": source_key})
            raise StorageError(
                message="Unable to rename object at this time",
                error_code=ERROR_CODE_STORAGE_RENAME_FAILED,
                details={"source_key": source_key, "target_key": target_key},
            ) from exc

        except Exception as exc:
            logger.exception("Unexpected error renaming object")
            raise StorageError(
                message="Unable to rename object at this time",
                error_code=ERROR_CODE_STORAGE_RENAME_FAILED,
                details={"source_key": source_key, "target_key": target_key},
            ) from exc

        self.delete(source_key)
        logger.info(
            "Object renamed",
            extra={"source_key": source_key, "target_key": target_key},
        )
