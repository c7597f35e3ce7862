"""Business logic for image upload operations."""

from aws_lambda_powertools import Logger

from image_manager.models.image import Image
from image_manager.models.metadata import ImageMetadata
from image_manager.services.factory import create_image_manager
from image_manager.services.image_manager import ImageManager

logger = Logger(UTC=True)


class UploadService:
    """Application service responsible for pushing source images.

    Args:
        manager: Image manager to use; built from the environment if omitted
    """

    def __init__(self, manager: ImageManager | None = None) -> None:
        self.manager = manager or create_image_manager()

    def upload_image(
        self,
        *,
        key: str,
        file_data: bytes,
        overwrite: bool = False,
    ) -> tuple[Image, ImageMetadata | None]:
        """Push an image and return it with its cached metadata.

        Raises:
            AlreadyExistsError: If overwrite is False and the key exists
            StorageError: If the remote write fails
        """
        logger.debug("Starting image upload", extra={"key": key, "overwrite": overwrite})

        image = self.manager.load(file_data, key)
        self.manager.push(image, overwrite=overwrite)

        logger.info("Image uploaded successfully", extra={"key": key})
        return image, self.manager.get_metadata(image)
