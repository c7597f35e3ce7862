"""Encoder capability contract."""

from abc import ABC, abstractmethod

from image_manager.models.dimensions import ImageCropDimensions, ImageDimensions
from image_manager.models.enums import ImageFormat


class Encoder(ABC):
    """Decodes, transforms and re-encodes image bytes.

    The ImageManager tries registered encoders in order and uses the first
    one whose `supports` check passes.
    """

    def __init__(self) -> None:
        self._data: bytes | None = None

    def set_data(self, data: bytes | None) -> None:
        """Set the bytes the next `create_variation` call works on."""
        self._data = data

    @abstractmethod
    def supports(self, data: bytes | None) -> bool:
        """Check if this encoder can decode the data."""

    @abstractmethod
    def create_variation(
        self,
        output_format: ImageFormat,
        quality: int,
        dimensions: ImageDimensions | None = None,
        crop_dimensions: ImageCropDimensions | None = None,
    ) -> bytes:
        """Render the current data as a variation.

        Raises:
            BadImageError: If the data cannot be decoded or transformed
        """
