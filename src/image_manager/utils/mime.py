"""Byte-level sniffing of image formats and MIME types."""

from io import BytesIO

from PIL import Image, UnidentifiedImageError

from image_manager.models.enums import ImageFormat
from image_manager.utils.constants import (
    DEFAULT_MIME_TYPE,
    MAGIC_BYTES_MIME_MAP,
    MIN_SNIFF_LENGTH,
    PDF_SIGNATURE,
)


def detect_format(data: bytes | None) -> ImageFormat | None:
    """Detect PNG, JPEG or GIF content from its magic numbers.

    Returns None for unknown content or buffers shorter than five bytes.
    """
    if not data or len(data) < MIN_SNIFF_LENGTH:
        return None

    # JPEG: FF D8
    if data[0] == 0xFF and data[1] == 0xD8:
        return ImageFormat.JPEG

    # PNG: 89 50 4E 47
    if data[0] == 0x89 and data[1:4] == b"PNG":
        return ImageFormat.PNG

    # GIF87a / GIF89a
    if data[:6] in (b"GIF87a", b"GIF89a"):
        return ImageFormat.GIF

    return None


def is_pdf(data: bytes | None) -> bool:
    """Check if the data is a PDF document."""
    return bool(data) and data[: len(PDF_SIGNATURE)] == PDF_SIGNATURE


def guess_mime_type(data: bytes | None) -> str | None:
    """Guess the MIME type of the data.

    Known signatures are matched first; anything else is handed to Pillow's
    format identification. Returns None when there is no data.
    """
    if not data:
        return None

    for signature, mime in MAGIC_BYTES_MIME_MAP.items():
        if data.startswith(signature):
            return mime

    try:
        with Image.open(BytesIO(data)) as img:
            return img.get_format_mimetype() or DEFAULT_MIME_TYPE
    except (UnidentifiedImageError, Image.DecompressionBombError, OSError, ValueError):
        return DEFAULT_MIME_TYPE
