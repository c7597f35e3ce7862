"""Derives structural metadata from hydrated source images."""

from io import BytesIO

import pymupdf
from PIL import Image as PILImage
from PIL import UnidentifiedImageError

from image_manager.models.enums import ImageFormat, ImageOrientation
from image_manager.models.errors import BadImageError, InvalidSourceError, NotHydratedError
from image_manager.models.image import AnyImage, ImageVariation
from image_manager.models.metadata import ImageMetadata, ImageResolution, PixelDimensions
from image_manager.utils.constants import (
    DEFAULT_DPI,
    ERR_NOT_HYDRATED,
    ERR_SOURCE_IMAGE,
    PDF_POINTS_PER_INCH,
)
from image_manager.utils.mime import detect_format, guess_mime_type, is_pdf


class ImageInspector:
    """Image inspector service.

    Metadata is always computed from the bytes currently loaded on the
    image; nothing is memoised here.
    """

    def get_image_metadata(self, image: AnyImage) -> ImageMetadata:
        """Build metadata for a hydrated source image.

        Orientation is derived from pixel dimensions only; EXIF data is not
        read.

        Raises:
            NotHydratedError: If the image holds no data
            InvalidSourceError: If the image is a variation
            BadImageError: If the data cannot be decoded
        """
        if not image.is_hydrated():
            raise NotHydratedError(message=ERR_NOT_HYDRATED, details={"key": image.key})

        if isinstance(image, ImageVariation):
            raise InvalidSourceError(message=ERR_SOURCE_IMAGE, details={"key": image.key})

        data = image.data or b""

        if is_pdf(data):
            image_format: ImageFormat | None = ImageFormat.PDF
            size, resolution = self._inspect_pdf(data)
        else:
            image_format = detect_format(data)
            size, resolution = self._inspect_bitmap(data)

        return ImageMetadata(
            mimetype=guess_mime_type(data),
            format=image_format,
            resolution=resolution,
            orientation=ImageOrientation.from_size(*size),
            dimensions=PixelDimensions(width=size[0], height=size[1]),
        )

    @staticmethod
    def _inspect_bitmap(data: bytes) -> tuple[tuple[int, int], ImageResolution]:
        try:
            with PILImage.open(BytesIO(data)) as img:
                size = img.size
                dpi = img.info.get("dpi") or (DEFAULT_DPI, DEFAULT_DPI)
        except (
            UnidentifiedImageError,
            PILImage.DecompressionBombError,
            OSError,
            ValueError,
        ) as exc:
            raise BadImageError(message="Bad image data", details={"error": str(exc)}) from exc

        return size, ImageResolution(x=float(dpi[0]), y=float(dpi[1]))

    @staticmethod
    def _inspect_pdf(data: bytes) -> tuple[tuple[int, int], ImageResolution]:
        # Page size in points, i.e. pixels at 72 dpi
        try:
            with pymupdf.open(stream=data, filetype="pdf") as doc:
                if doc.page_count == 0:
                    raise BadImageError(message="PDF document has no pages")
                rect = doc.load_page(0).rect
        except (RuntimeError, ValueError) as exc:
            raise BadImageError(message="Bad PDF data", details={"error": str(exc)}) from exc

        size = (round(rect.width), round(rect.height))
        return size, ImageResolution(x=PDF_POINTS_PER_INCH, y=PDF_POINTS_PER_INCH)
