"""Local-directory implementation of BlobStorageRepository."""

import os
from pathlib import Path

from aws_lambda_powertools import Logger

from image_manager.models.errors import (
    AlreadyExistsError,
    InvalidKeyError,
    ObjectNotFoundError,
    StorageError,
)
from image_manager.repositories.storage_repository import BlobStorageRepository
from image_manager.utils.constants import (
    ERR_ALREADY_EXISTS,
    ERROR_CODE_STORAGE_DELETE_FAILED,
    ERROR_CODE_STORAGE_READ_FAILED,
    ERROR_CODE_STORAGE_RENAME_FAILED,
    ERROR_CODE_STORAGE_WRITE_FAILED,
)

logger = Logger(UTC=True)


class LocalBlobStorage(BlobStorageRepository):
    """Blob storage rooted at a local directory.

    Keys map to paths relative to the root; keys that would resolve outside
    the root are rejected. Non-overwriting writes use exclusive creation so
    concurrent writers cannot both succeed.
    """

    def __init__(self, root: str | os.PathLike[str], *, create: bool = True) -> None:
        self._root = Path(root).resolve()
        if create:
            self._root.mkdir(parents=True, exist_ok=True)

    @property
    def root(self) -> Path:
        return self._root

    def _path(self, key: str) -> Path:
        path = (self._root / key).resolve()
        if path == self._root or self._root not in path.parents:
            raise InvalidKeyError(
                message="Key resolves outside the storage root",
                details={"key": key},
            )
        return path

    def write(self, key: str, data: bytes, overwrite: bool = True) -> None:
        path = self._path(key)
        logger.debug(
            "Writing file",
            extra={"key": key, "size": len(data), "overwrite": overwrite},
        )

        try:
            path.parent.mkdir(parents=True, exist_ok=True)
            with open(path, "wb" if overwrite else "xb") as fh:
                fh.write(data)
        except FileExistsError as exc:
            raise AlreadyExistsError(message=ERR_ALREADY_EXISTS, details={"key": key}) from exc
        except OSError as exc:
            logger.error("File write failed", extra={"key": key})
            raise StorageError(
                message="Unable to write file",
                error_code=ERROR_CODE_STORAGE_WRITE_FAILED,
                details={"key": key},
            ) from exc

        logger.info("File written", extra={"key": key})

    def read(self, key: str) -> bytes:
        path = self._path(key)

        try:
            return path.read_bytes()
        except FileNotFoundError as exc:
            raise ObjectNotFoundError(message="Object not found", details={"key": key}) from exc
        except OSError as exc:
            logger.error("File read failed", extra={"key": key})
            raise StorageError(
                message="Unable to read file",
                error_code=ERROR_CODE_STORAGE_READ_FAILED,
                details={"key": key},
            ) from exc

    def delete(self, key: str) -> None:
        path = self._path(key)

        try:
            path.unlink(missing_ok=True)
        except OSError as exc:
            logger.error("File deletion failed", extra={"key": key})
            raise StorageError(
                message="Unable to delete file",
                error_code=ERROR_CODE_STORAGE_DELETE_FAILED,
                details={"key": key},
            ) from exc

        logger.info("File deleted", extra={"key": key})

    def has(self, key: str) -> bool:
        return self._path(key).is_file()

    def rename(self, source_key: str, target_key: str) -> None:
        source = self._path(source_key)
        target = self._path(target_key)

        try:
            target.parent.mkdir(parents=True, exist_ok=True)
            os.replace(source, target)
        except FileNotFoundError as exc:
            raise ObjectNotFoundError(
                message="Object not found",
                details={"key": source_key},
            ) from exc
        except OSError as exc:
            logger.error("File rename failed", extra={"source_key": source_key})
            raise StorageError(
                message="Unable to rename file",
                error_code=ERROR_CODE_STORAGE_RENAME_FAILED,
                details={"source_key": source_key, "target_key": target_key},
            ) from exc

        logger.info(
            "File renamed",
            extra={"source_key": source_key, "target_key": target_key},
        )
