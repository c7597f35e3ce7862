"""Closed enumerations for image formats and orientations."""

from enum import Enum

from image_manager.models.errors import InvalidFormatError


class ImageFormat(str, Enum):
    """Output formats a variation can be rendered to.

    The value doubles as the file extension used in variation signatures.
    """

    PNG = "png"
    JPEG = "jpg"
    GIF = "gif"
    PDF = "pdf"

    @classmethod
    def from_value(cls, value: str) -> "ImageFormat":
        """Parse a format from its value, accepting `jpeg` as an alias of `jpg`."""
        normalized = (value or "").strip().lower()
        if normalized == "jpeg":
            normalized = cls.JPEG.value

        try:
            return cls(normalized)
        except ValueError as exc:
            raise InvalidFormatError(
                message=f"Unknown image format: {value!r}",
                details={"value": value},
            ) from exc

    @property
    def pillow_format(self) -> str:
        """Format name understood by Pillow's `Image.save`."""
        return _PILLOW_FORMATS[self]

    @property
    def mime_type(self) -> str:
        return _MIME_TYPES[self]


class ImageOrientation(str, Enum):
    """Orientation derived from pixel dimensions only (EXIF is not read)."""

    PORTRAIT = "portrait"
    LANDSCAPE = "landscape"

    @classmethod
    def from_value(cls, value: str) -> "ImageOrientation":
        try:
            return cls(value)
        except ValueError as exc:
            raise InvalidFormatError(
                message=f"Unknown image orientation: {value!r}",
                details={"value": value},
            ) from exc

    @classmethod
    def from_size(cls, width: int, height: int) -> "ImageOrientation":
        return cls.LANDSCAPE if width >= height else cls.PORTRAIT


_PILLOW_FORMATS: dict[ImageFormat, str] = {
    ImageFormat.PNG: "PNG",
    ImageFormat.JPEG: "JPEG",
    ImageFormat.GIF: "GIF",
    ImageFormat.PDF: "PDF",
}

_MIME_TYPES: dict[ImageFormat, str] = {
    ImageFormat.PNG: "image/png",
    ImageFormat.JPEG: "image/jpeg",
    ImageFormat.GIF: "image/gif",
    ImageFormat.PDF: "application/pdf",
}
