"""In-memory image entities: source images and their variations."""

from __future__ import annotations

from typing import Union

from image_manager.models.dimensions import ImageCropDimensions, ImageDimensions
from image_manager.models.enums import ImageFormat
from image_manager.models.errors import InvalidKeyError
from image_manager.utils.constants import (
    DEFAULT_QUALITY,
    ERR_INVALID_KEY,
    MAX_QUALITY,
    MIN_QUALITY,
    VARIATION_KEY_SEPARATOR,
)
from image_manager.utils.mime import detect_format, guess_mime_type


def clamp_quality(quality: int | None) -> int:
    """Clamp a quality to [1, 100], treating unset or zero as the default."""
    if not quality:
        return DEFAULT_QUALITY

    return max(MIN_QUALITY, min(MAX_QUALITY, int(quality)))


def _require_key(key: str | None) -> str:
    if not key or not isinstance(key, str):
        raise InvalidKeyError(message=ERR_INVALID_KEY, details={"key": key})
    return key


class Image:
    """A single remote object addressed by a string key.

    The `persistent` flag is only ever set by the ImageManager; every other
    mutation (new key, new data) resets it.
    """

    def __init__(self, key: str, data: bytes | None = None) -> None:
        self._key = _require_key(key)
        self._data: bytes | None = None
        self._mime_type: str | None = None
        self._persistent = False

        if data is not None:
            self.set_data(data)

    def __repr__(self) -> str:
        return (
            f"{type(self).__name__}(key={self._key!r}, "
            f"hydrated={self.is_hydrated()}, persistent={self._persistent})"
        )

    @property
    def key(self) -> str:
        """The remote key."""
        return self._key

    @key.setter
    def key(self, key: str) -> None:
        self._key = _require_key(key)
        self._persistent = False

    def set_key(self, key: str) -> Image:
        self.key = key
        return self

    @property
    def data(self) -> bytes | None:
        return self._data

    def set_data(self, data: bytes | None) -> Image:
        """Replace the image bytes; the new content is not yet persistent."""
        self._data = data
        self._persistent = False
        self._mime_type = guess_mime_type(data)
        return self

    @property
    def mime_type(self) -> str | None:
        return self._mime_type

    @property
    def data_format(self) -> ImageFormat | None:
        return detect_format(self._data)

    def is_hydrated(self) -> bool:
        """Check if the image data has been loaded."""
        return bool(self._data)

    def is_persistent(self) -> bool:
        """Check if the current content is known to exist on the remote."""
        return self._persistent

    def flush(self) -> None:
        """Release the byte buffer held in memory."""
        self._data = None

    def _set_persistent(self, persistent: bool) -> None:
        # ImageManager only
        self._persistent = persistent


class ImageVariation:
    """A rendition of a source image under a specific encoding recipe.

    A variation wraps its own Image record, keyed by the parent key plus a
    deterministic signature of the recipe, e.g.
    ``photo.png~q90,x800y600u1r1g0.jpg``. The parent key and the recipe are
    fixed at construction.
    """

    def __init__(
        self,
        parent_key: str,
        format: ImageFormat | str,
        quality: int | None = DEFAULT_QUALITY,
        dimensions: ImageDimensions | None = None,
        crop_dimensions: ImageCropDimensions | None = None,
    ) -> None:
        self._parent_key = _require_key(parent_key)
        self._format = format if isinstance(format, ImageFormat) else ImageFormat.from_value(format)
        self._quality = clamp_quality(quality)
        self._dimensions = dimensions
        self._crop_dimensions = crop_dimensions
        self._image = Image(f"{self._parent_key}{VARIATION_KEY_SEPARATOR}{self.signature}")

    def __repr__(self) -> str:
        return (
            f"ImageVariation(key={self.key!r}, "
            f"hydrated={self.is_hydrated()}, persistent={self.is_persistent()})"
        )

    @property
    def signature(self) -> str:
        """Deterministic encoding of the recipe, used as the key suffix."""
        parts = [f"q{self._quality}"]
        if self._dimensions is not None:
            parts.append(self._dimensions.signature)
        if self._crop_dimensions is not None:
            parts.append(f"c{self._crop_dimensions.signature}")

        return ",".join(parts) + f".{self._format.value}"

    @property
    def key(self) -> str:
        """The derived storage key of this rendition."""
        return self._image.key

    @property
    def parent_key(self) -> str:
        return self._parent_key

    def get_key(self, parent: bool = False) -> str:
        return self._parent_key if parent else self._image.key

    @property
    def format(self) -> ImageFormat:
        return self._format

    @property
    def quality(self) -> int:
        return self._quality

    @property
    def dimensions(self) -> ImageDimensions | None:
        return self._dimensions

    @property
    def crop_dimensions(self) -> ImageCropDimensions | None:
        return self._crop_dimensions

    @property
    def data(self) -> bytes | None:
        return self._image.data

    def set_data(self, data: bytes | None) -> ImageVariation:
        self._image.set_data(data)
        return self

    @property
    def mime_type(self) -> str | None:
        return self._image.mime_type

    @property
    def data_format(self) -> ImageFormat | None:
        return self._image.data_format

    def is_hydrated(self) -> bool:
        return self._image.is_hydrated()

    def is_persistent(self) -> bool:
        return self._image.is_persistent()

    def flush(self) -> None:
        self._image.flush()

    def _set_persistent(self, persistent: bool) -> None:
        # ImageManager only
        self._image._set_persistent(persistent)


AnyImage = Union[Image, ImageVariation]
