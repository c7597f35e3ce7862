"""Structural metadata recorded for source images."""

from pydantic import BaseModel, ConfigDict, Field, StrictStr

from image_manager.models.enums import ImageFormat, ImageOrientation


class ImageResolution(BaseModel):
    """Horizontal and vertical density in dots per inch."""

    model_config = ConfigDict(frozen=True)

    x: float = Field(..., ge=0, description="Horizontal DPI")
    y: float = Field(..., ge=0, description="Vertical DPI")


class PixelDimensions(BaseModel):
    """Pixel size of a decoded image."""

    model_config = ConfigDict(frozen=True)

    width: int = Field(..., ge=0)
    height: int = Field(..., ge=0)


class ImageMetadata(BaseModel):
    """Properties of a source image.

    The ImageManager stores the serialised metadata as the value of the
    source image's cache tag.
    """

    model_config = ConfigDict(frozen=True)

    mimetype: StrictStr | None = Field(None, description="Internet media type")
    format: ImageFormat | None = Field(None, description="Detected image format")
    resolution: ImageResolution = Field(..., description="Image resolution (DPI)")
    orientation: ImageOrientation = Field(..., description="Portrait or landscape")
    dimensions: PixelDimensions = Field(..., description="Source pixel dimensions")

    def serialise(self) -> str:
        return self.model_dump_json()

    @classmethod
    def deserialise(cls, payload: str | bytes | None) -> "ImageMetadata":
        if not payload:
            raise ValueError("Metadata payload is empty")

        return cls.model_validate_json(payload)
