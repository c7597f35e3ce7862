"""
Business logic for image retrieval.

Sources are pulled as-is. Variations are pulled by their derived key and
rendered from the source when they have not been stored yet.
"""

from aws_lambda_powertools import Logger

from image_manager.models.errors import AlreadyExistsError
from image_manager.models.image import AnyImage, Image, ImageVariation
from image_manager.services.factory import create_image_manager
from image_manager.services.image_manager import ImageManager

from .models import GetImageRequest

logger = Logger(UTC=True)


class GetService:
    """Application service responsible for retrieving images and variations."""

    def __init__(self, manager: ImageManager | None = None) -> None:
        self.manager = manager or create_image_manager()

    def get_image(self, request: GetImageRequest) -> AnyImage:
        """Pull the requested image, rendering and optionally storing a variation.

        Raises:
            NotExistsError: If the source image does not exist
            ParentNotExistsError: If a variation's source does not exist
            NoSupportedEncoderError: If the source cannot be rendered
        """
        if not request.is_variation:
            return self.manager.pull(Image(request.key))

        variation = ImageVariation(
            request.key,
            request.format,
            request.quality,
            request.dimensions,
            request.crop_dimensions,
        )
        self.manager.pull(variation)

        if request.persist and not variation.is_persistent():
            self._persist(variation)

        return variation

    def _persist(self, variation: ImageVariation) -> None:
        try:
            self.manager.push(variation, overwrite=False)
        except AlreadyExistsError:
            # Another request stored the same rendition first
            logger.info("Variation already stored", extra={"key": variation.key})
