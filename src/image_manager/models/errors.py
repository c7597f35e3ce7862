"""Custom exception classes for the image manager."""

from typing import Any

from image_manager.utils.constants import (
    ERROR_CODE_ALREADY_EXISTS,
    ERROR_CODE_BAD_IMAGE,
    ERROR_CODE_CACHE,
    ERROR_CODE_IMAGE_MANAGER,
    ERROR_CODE_INVALID_FORMAT,
    ERROR_CODE_INVALID_KEY,
    ERROR_CODE_INVALID_SOURCE,
    ERROR_CODE_NO_SUPPORTED_ENCODER,
    ERROR_CODE_NOT_EXISTS,
    ERROR_CODE_NOT_HYDRATED,
    ERROR_CODE_OBJECT_NOT_FOUND,
    ERROR_CODE_PARENT_NOT_EXISTS,
    ERROR_CODE_STORAGE,
)


class ImageManagerError(Exception):
    """
    Base exception for all image manager errors.

    All custom errors must inherit from this class.
    Callers must explicitly provide a message; subclasses supply a default
    error code. Optional contextual information can be supplied via `details`.
    """

    message: str
    error_code: str
    details: dict[str, Any]

    def __init__(
        self,
        *,
        message: str,
        error_code: str = ERROR_CODE_IMAGE_MANAGER,
        details: dict[str, Any] | None = None,
    ) -> None:
        self.message = message
        self.error_code = error_code
        self.details = details or {}

        super().__init__(self.message)


class InvalidKeyError(ImageManagerError):
    """Raised when an empty or missing key is given to an image entity."""

    def __init__(
        self,
        *,
        message: str,
        error_code: str = ERROR_CODE_INVALID_KEY,
        details: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(message=message, error_code=error_code, details=details)


class InvalidFormatError(ImageManagerError):
    """Raised when an enumeration value cannot be parsed."""

    def __init__(
        self,
        *,
        message: str,
        error_code: str = ERROR_CODE_INVALID_FORMAT,
        details: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(message=message, error_code=error_code, details=details)


class InvalidSourceError(ImageManagerError):
    """Raised when a variation is given where a source image is required."""

    def __init__(
        self,
        *,
        message: str,
        error_code: str = ERROR_CODE_INVALID_SOURCE,
        details: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(message=message, error_code=error_code, details=details)


class NotHydratedError(ImageManagerError):
    """Raised when an operation needs image bytes that are not in memory."""

    def __init__(
        self,
        *,
        message: str,
        error_code: str = ERROR_CODE_NOT_HYDRATED,
        details: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(message=message, error_code=error_code, details=details)


class NotExistsError(ImageManagerError):
    """Raised when a source image or variation is absent from cache and remote."""

    def __init__(
        self,
        *,
        message: str,
        error_code: str = ERROR_CODE_NOT_EXISTS,
        details: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(message=message, error_code=error_code, details=details)


class ParentNotExistsError(NotExistsError):
    """Raised when the parent source of a variation does not exist."""

    def __init__(
        self,
        *,
        message: str,
        error_code: str = ERROR_CODE_PARENT_NOT_EXISTS,
        details: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(message=message, error_code=error_code, details=details)


class AlreadyExistsError(ImageManagerError):
    """Raised when a non-overwriting write collides with remote content."""

    def __init__(
        self,
        *,
        message: str,
        error_code: str = ERROR_CODE_ALREADY_EXISTS,
        details: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(message=message, error_code=error_code, details=details)


class BadImageError(ImageManagerError):
    """Raised when an encoder cannot decode the supplied bytes."""

    def __init__(
        self,
        *,
        message: str,
        error_code: str = ERROR_CODE_BAD_IMAGE,
        details: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(message=message, error_code=error_code, details=details)


class NoSupportedEncoderError(ImageManagerError):
    """Raised when no registered encoder claims support for the input."""

    def __init__(
        self,
        *,
        message: str,
        error_code: str = ERROR_CODE_NO_SUPPORTED_ENCODER,
        details: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(message=message, error_code=error_code, details=details)


class ObjectNotFoundError(ImageManagerError):
    """Raised by a blob store when a key is not present."""

    def __init__(
        self,
        *,
        message: str,
        error_code: str = ERROR_CODE_OBJECT_NOT_FOUND,
        details: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(message=message, error_code=error_code, details=details)


class StorageError(ImageManagerError):
    """Raised when a blob store or local file operation fails."""

    def __init__(
        self,
        *,
        message: str,
        error_code: str = ERROR_CODE_STORAGE,
        details: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(message=message, error_code=error_code, details=details)


class CacheError(ImageManagerError):
    """Raised when a cache pool backend operation fails."""

    def __init__(
        self,
        *,
        message: str,
        error_code: str = ERROR_CODE_CACHE,
        details: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(message=message, error_code=error_code, details=details)
