from pydantic import BaseModel, ConfigDict, Field, model_validator

from image_manager.models.dimensions import ImageCropDimensions, ImageDimensions
from image_manager.models.enums import ImageFormat
from image_manager.models.errors import InvalidFormatError


class GetImageRequest(BaseModel):
    """Validation model for get image request.

    With only a key the source image is returned. Any recipe parameter
    selects a variation, which then needs a `format`.
    """

    model_config = ConfigDict(str_strip_whitespace=True)

    key: str = Field(..., min_length=1, description="Remote image key")

    format: ImageFormat | None = Field(default=None, description="Output format")
    quality: int | None = Field(default=None, description="Encoding quality, clamped to 1-100")

    width: int | None = Field(default=None, ge=0)
    height: int | None = Field(default=None, ge=0)
    maintain_ratio: bool = True
    upscale: bool = True
    grab: bool = False

    crop_x: int = Field(default=0, ge=0)
    crop_y: int = Field(default=0, ge=0)
    crop_width: int | None = Field(default=None, gt=0)
    crop_height: int | None = Field(default=None, gt=0)

    persist: bool = Field(
        default=False,
        description="Store a rendered variation so later requests reuse it",
    )

    @model_validator(mode="before")
    @classmethod
    def normalise_format(cls, data: dict) -> dict:
        # "jpeg" is accepted as an alias of "jpg"
        value = data.get("format") if isinstance(data, dict) else None
        if isinstance(value, str) and value.strip():
            try:
                data = {**data, "format": ImageFormat.from_value(value)}
            except InvalidFormatError as exc:
                raise ValueError(exc.message) from exc
        return data

    @model_validator(mode="after")
    def validate_recipe(self) -> "GetImageRequest":
        if (self.crop_width is None) != (self.crop_height is None):
            raise ValueError("crop_width and crop_height must be given together")

        if self.is_variation and self.format is None:
            raise ValueError("format is required when requesting a variation")

        return self

    @property
    def is_variation(self) -> bool:
        return any(
            value is not None
            for value in (self.format, self.quality, self.width, self.height, self.crop_width)
        )

    @property
    def dimensions(self) -> ImageDimensions | None:
        if not self.width and not self.height:
            return None

        return ImageDimensions(
            width=self.width,
            height=self.height,
            maintain_ratio=self.maintain_ratio,
            upscale=self.upscale,
            grab=self.grab,
        )

    @property
    def crop_dimensions(self) -> ImageCropDimensions | None:
        if self.crop_width is None or self.crop_height is None:
            return None

        return ImageCropDimensions(
            width=self.crop_width,
            height=self.crop_height,
            x=self.crop_x,
            y=self.crop_y,
        )
