"""Immutable resize and crop specifications for image variations."""

from decimal import ROUND_DOWN, Decimal

from pydantic import BaseModel, ConfigDict, Field, NonNegativeInt, PositiveInt, field_validator


def _sig(value: int | None) -> str:
    return str(value) if value else "-"


class ImageDimensions(BaseModel):
    """A set of rules for resampling images.

    Either side may be left unset, meaning it is derived from the source
    aspect ratio. `grab` crops to fill the requested box instead of fitting
    inside it.
    """

    model_config = ConfigDict(frozen=True)

    width: PositiveInt | None = Field(None, description="Target width in pixels")
    height: PositiveInt | None = Field(None, description="Target height in pixels")
    maintain_ratio: bool = Field(True, description="Keep the source aspect ratio")
    upscale: bool = Field(True, description="Allow enlarging beyond the source size")
    grab: bool = Field(False, description="Cover the box and crop the overflow")

    @field_validator("width", "height", mode="before")
    @classmethod
    def zero_means_unset(cls, value: int | None) -> int | None:
        return value or None

    @property
    def signature(self) -> str:
        """Creates a signature containing the dimension specification."""
        return (
            f"x{_sig(self.width)}"
            f"y{_sig(self.height)}"
            f"u{int(self.upscale)}"
            f"r{int(self.maintain_ratio)}"
            f"g{int(self.grab)}"
        )

    @property
    def aspect_ratio(self) -> Decimal:
        """Width over height, truncated to 3 decimal places."""
        if not self.width or not self.height:
            raise ValueError("Aspect ratio requires both width and height")

        ratio = Decimal(self.width) / Decimal(self.height)
        return ratio.quantize(Decimal("0.001"), rounding=ROUND_DOWN)

    def __str__(self) -> str:
        return self.signature


class ImageCropDimensions(BaseModel):
    """A crop window expressed in source pixel space."""

    model_config = ConfigDict(frozen=True)

    width: PositiveInt = Field(..., description="Width of the crop")
    height: PositiveInt = Field(..., description="Height of the crop")
    x: NonNegativeInt = Field(0, description="Crop start pixel on the x-axis")
    y: NonNegativeInt = Field(0, description="Crop start pixel on the y-axis")

    @property
    def signature(self) -> str:
        """Creates a signature containing the crop specification."""
        return f"x{_sig(self.x)}y{_sig(self.y)}w{_sig(self.width)}h{_sig(self.height)}"

    @property
    def box(self) -> tuple[int, int, int, int]:
        """Crop box as (left, upper, right, lower)."""
        return (self.x, self.y, self.x + self.width, self.y + self.height)

    def __str__(self) -> str:
        return self.signature
