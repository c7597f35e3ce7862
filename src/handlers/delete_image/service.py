"""Business logic for image deletion."""

from aws_lambda_powertools import Logger

from image_manager.models.errors import NotExistsError
from image_manager.models.image import Image
from image_manager.services.factory import create_image_manager
from image_manager.services.image_manager import ImageManager
from image_manager.utils.constants import ERR_NOT_EXISTS

logger = Logger(UTC=True)


class DeleteService:
    """Application service responsible for deleting images.

    Variations are stored under their own keys and are not removed along
    with their source.
    """

    def __init__(self, manager: ImageManager | None = None) -> None:
        self.manager = manager or create_image_manager()

    def delete_image(self, key: str) -> None:
        """Delete an image from the remote and drop its cache tag.

        Raises:
            NotExistsError: If the image does not exist
            StorageError: If storage deletion fails
        """
        logger.debug("Starting image deletion", extra={"key": key})

        image = Image(key)
        if not self.manager.exists(image):
            logger.warning("Image not found", extra={"key": key})
            raise NotExistsError(message=ERR_NOT_EXISTS, details={"key": key})

        self.manager.remove(image)
        logger.info("Image deleted successfully", extra={"key": key})
