"""General purpose encoder built on Pillow."""

from io import BytesIO
from typing import Any

from aws_lambda_powertools import Logger
from PIL import Image as PILImage
from PIL import ImageOps, UnidentifiedImageError

from image_manager.encoders.base import Encoder
from image_manager.models.dimensions import ImageCropDimensions, ImageDimensions
from image_manager.models.enums import ImageFormat
from image_manager.models.errors import BadImageError
from image_manager.utils.constants import FLATTEN_BACKGROUND
from image_manager.utils.mime import detect_format

logger = Logger(UTC=True)


def flatten(img: PILImage.Image) -> PILImage.Image:
    """Composite an image with transparency onto a white RGB background."""
    if img.mode in ("RGB", "L", "CMYK"):
        return img

    rgba = img.convert("RGBA")
    background = PILImage.new("RGB", rgba.size, FLATTEN_BACKGROUND)
    background.paste(rgba, mask=rgba.getchannel("A"))
    return background


class PillowEncoder(Encoder):
    """Encoder for PNG, JPEG and GIF sources.

    Crop is applied before resize. Animated sources are reduced to their
    first frame.
    """

    def __init__(self, resample: PILImage.Resampling = PILImage.Resampling.LANCZOS) -> None:
        super().__init__()
        self._resample = resample

    def supports(self, data: bytes | None) -> bool:
        return detect_format(data) is not None

    def create_variation(
        self,
        output_format: ImageFormat,
        quality: int,
        dimensions: ImageDimensions | None = None,
        crop_dimensions: ImageCropDimensions | None = None,
    ) -> bytes:
        if not self._data:
            raise BadImageError(message="No image data to encode")

        img = self._decode(self._data)

        if crop_dimensions is not None:
            img = self._crop(img, crop_dimensions)

        if dimensions is not None:
            img = self._resize(img, dimensions)

        output = self._encode(img, output_format, quality)

        logger.debug(
            "Variation encoded",
            extra={
                "encoder": type(self).__name__,
                "format": output_format.value,
                "quality": quality,
                "size": img.size,
                "bytes": len(output),
            },
        )
        return output

    def _decode(self, data: bytes) -> PILImage.Image:
        try:
            img = PILImage.open(BytesIO(data))
            img.seek(0)
            img.load()
        except (
            UnidentifiedImageError,
            PILImage.DecompressionBombError,
            OSError,
            SyntaxError,
            ValueError,
        ) as exc:
            raise BadImageError(message="Bad image data", details={"error": str(exc)}) from exc

        return img

    def _crop(self, img: PILImage.Image, crop: ImageCropDimensions) -> PILImage.Image:
        width, height = img.size
        left, upper, right, lower = crop.box
        box = (min(left, width), min(upper, height), min(right, width), min(lower, height))

        if box[2] <= box[0] or box[3] <= box[1]:
            raise BadImageError(
                message="Crop window lies outside the image",
                details={"crop": crop.signature, "size": [width, height]},
            )

        return img.crop(box)

    def _resize(self, img: PILImage.Image, dimensions: ImageDimensions) -> PILImage.Image:
        if not dimensions.width and not dimensions.height:
            return img

        if dimensions.grab:
            box = self._grab_size(img.size, dimensions)
            return ImageOps.fit(img, box, method=self._resample)

        target = self._target_size(img.size, dimensions)
        if target == img.size:
            return img

        return img.resize(target, self._resample)

    @staticmethod
    def _target_size(size: tuple[int, int], dimensions: ImageDimensions) -> tuple[int, int]:
        src_width, src_height = size
        width, height = dimensions.width, dimensions.height

        if dimensions.maintain_ratio:
            scales = []
            if width:
                scales.append(width / src_width)
            if height:
                scales.append(height / src_height)

            scale = min(scales)
            if not dimensions.upscale:
                scale = min(scale, 1.0)

            return max(1, round(src_width * scale)), max(1, round(src_height * scale))

        target_width = width or src_width
        target_height = height or src_height

        if not dimensions.upscale:
            target_width = min(target_width, src_width)
            target_height = min(target_height, src_height)

        return target_width, target_height

    @staticmethod
    def _grab_size(size: tuple[int, int], dimensions: ImageDimensions) -> tuple[int, int]:
        # A missing side makes the box square
        width = dimensions.width or dimensions.height or size[0]
        height = dimensions.height or dimensions.width or size[1]

        if not dimensions.upscale and (width > size[0] or height > size[1]):
            factor = min(size[0] / width, size[1] / height)
            width = max(1, round(width * factor))
            height = max(1, round(height * factor))

        return width, height

    def _encode(self, img: PILImage.Image, output_format: ImageFormat, quality: int) -> bytes:
        params: dict[str, Any] = {}

        if output_format in (ImageFormat.JPEG, ImageFormat.PDF):
            img = flatten(img)
            params["quality"] = quality
        elif img.mode not in ("1", "L", "P", "RGB", "RGBA"):
            img = img.convert("RGBA")

        if output_format is ImageFormat.PNG:
            params["optimize"] = True

        buffer = BytesIO()
        try:
            img.save(buffer, format=output_format.pillow_format, **params)
        except (OSError, ValueError) as exc:
            raise BadImageError(
                message="Unable to encode image",
                details={"format": output_format.value, "error": str(exc)},
            ) from exc

        return buffer.getvalue()
