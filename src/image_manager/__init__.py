"""Image variation manager backed by a blob store and a tag cache."""

from image_manager.models.dimensions import ImageCropDimensions, ImageDimensions
from image_manager.models.enums import ImageFormat, ImageOrientation
from image_manager.models.image import Image, ImageVariation
from image_manager.models.metadata import ImageMetadata
from image_manager.services.factory import create_image_manager
from image_manager.services.image_manager import ImageManager

__version__ = "1.0.0"

__all__ = [
    "Image",
    "ImageCropDimensions",
    "ImageDimensions",
    "ImageFormat",
    "ImageManager",
    "ImageMetadata",
    "ImageOrientation",
    "ImageVariation",
    "create_image_manager",
]
