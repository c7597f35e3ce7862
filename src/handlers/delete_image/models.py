"""Pydantic models for delete image request."""

from pydantic import BaseModel, ConfigDict, Field


class DeleteImageRequest(BaseModel):
    """Validation model for delete image request."""

    model_config = ConfigDict(str_strip_whitespace=True)

    key: str = Field(
        ...,
        min_length=1,
        description="Key of the image or variation to delete",
    )
