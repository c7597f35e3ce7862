"""Image manager: mediates images and variations between a remote store and a cache.

Source images live on a (slow) blob store such as S3. Variations of those
images (re-encoded, resized, cropped renditions) are addressed by a key derived
from the source key and the variation recipe, so they can be created ahead of
time or on demand and then stored next to their source.

A cache pool remembers which keys exist on the remote ("tags") so most
existence checks never touch the blob store. The cache is a hint, not a source
of truth: every path that trusts a negative tag tolerates the remote proving
otherwise, and the optional validate-tags mode re-checks the remote before
reporting an image as missing.
"""

from collections.abc import Iterable
import os
from pathlib import Path

from aws_lambda_powertools import Logger

from image_manager.encoders.base import Encoder
from image_manager.encoders.pillow_encoder import PillowEncoder
from image_manager.models.dimensions import ImageCropDimensions, ImageDimensions
from image_manager.models.enums import ImageFormat
from image_manager.models.errors import (
    AlreadyExistsError,
    BadImageError,
    NoSupportedEncoderError,
    NotExistsError,
    NotHydratedError,
    ObjectNotFoundError,
    ParentNotExistsError,
    StorageError,
)
from image_manager.models.image import AnyImage, Image, ImageVariation, clamp_quality
from image_manager.models.metadata import ImageMetadata
from image_manager.repositories.cache_repository import CacheItem, CachePool
from image_manager.repositories.storage_repository import BlobStorageRepository, MetadataSupporter
from image_manager.services.image_inspector import ImageInspector
from image_manager.utils.constants import (
    CACHE_KEY_PREFIX,
    DEFAULT_QUALITY,
    ERR_ALREADY_EXISTS,
    ERR_NO_SUPPORTED_ENCODER,
    ERR_NOT_EXISTS,
    ERR_NOT_HYDRATED,
    ERR_PARENT_NOT_EXISTS,
    TAG_EXISTS_MARKER,
)

logger = Logger(UTC=True)


class ImageManager:
    """Push, pull and derive images against a blob store and an optional cache.

    Args:
        storage: Remote blob store holding sources and variations
        cache_pool: Optional cache recording which keys exist on the remote
        encoders: Encoders tried in order; a PillowEncoder is used if empty
        validate_tags: Re-check the remote before trusting a negative tag
        tag_ttl: Optional expiry, in seconds, for cache tags

    The manager holds no locks. Concurrent non-overwriting pushes of the same
    key are arbitrated by the blob store alone; the loser gets an
    AlreadyExistsError after its tag has been reconciled.
    """

    def __init__(
        self,
        storage: BlobStorageRepository,
        cache_pool: CachePool | None = None,
        encoders: Iterable[Encoder] | None = None,
        validate_tags: bool = False,
        tag_ttl: int | None = None,
        inspector: ImageInspector | None = None,
    ) -> None:
        self._storage = storage
        self._cache_pool = cache_pool
        self._encoders: list[Encoder] = list(encoders or [])
        self._validate_tags = validate_tags
        self._tag_ttl = tag_ttl
        self._inspector = inspector or ImageInspector()
        # Follows this manager's own tag writes only; rewrites made by other
        # processes are not seen
        self._metadata_cache: dict[str, ImageMetadata] = {}

        if not self._encoders:
            self.add_encoder(PillowEncoder())

    @property
    def storage(self) -> BlobStorageRepository:
        return self._storage

    @property
    def cache_pool(self) -> CachePool | None:
        return self._cache_pool

    @property
    def validate_tags(self) -> bool:
        return self._validate_tags

    # ------------------------------------------------------------------
    # Remote operations
    # ------------------------------------------------------------------

    def push(self, image: AnyImage, overwrite: bool = True) -> AnyImage:
        """Push a local image or variation to the remote.

        An unhydrated variation is pulled first, which renders it from its
        parent when the rendition does not exist yet.

        Raises:
            NotHydratedError: If there is no data to push
            AlreadyExistsError: If overwrite is False and the key exists
            StorageError: If the remote write fails
        """
        if isinstance(image, ImageVariation) and not image.is_hydrated():
            self.pull(image)

        if not image.is_hydrated():
            raise NotHydratedError(message=ERR_NOT_HYDRATED, details={"key": image.key})

        key = image.key

        if not overwrite and self._tag_exists(key) is True:
            logger.info("Push rejected by existing tag", extra={"key": key})
            raise AlreadyExistsError(message=ERR_ALREADY_EXISTS, details={"key": key})

        if isinstance(self._storage, MetadataSupporter) and image.mime_type:
            self._storage.set_metadata(key, {"ContentType": image.mime_type})

        metadata = None
        if not isinstance(image, ImageVariation):
            metadata = self._inspect(image)

        logger.debug("Pushing image", extra={"key": key, "overwrite": overwrite})

        try:
            self._storage.write(key, image.data or b"", overwrite)
        except AlreadyExistsError as exc:
            logger.warning("Remote already holds key, reconciling tag", extra={"key": key})
            self._tag(key, metadata)
            raise AlreadyExistsError(message=ERR_ALREADY_EXISTS, details={"key": key}) from exc

        image._set_persistent(True)
        self._tag(key, metadata)

        logger.info("Image pushed", extra={"key": key, "size": len(image.data or b"")})
        return image

    def pull(self, image: AnyImage) -> AnyImage:
        """Hydrate an image or variation from the remote.

        A variation that does not exist on the remote is rendered from its
        parent; it is then hydrated but not persistent and should be pushed
        if it is to be kept.

        Raises:
            NotExistsError: If the image (or variation) does not exist
            ParentNotExistsError: If neither the variation nor its parent exist
        """
        if isinstance(image, ImageVariation):
            self._pull_variation(image)
        else:
            self._pull_source(image)

        return image

    def exists(self, image: AnyImage) -> bool:
        """Check if an image exists on the remote.

        The cache pool answers when there is one; otherwise the remote is
        asked directly.
        """
        key = image.key

        tag_exists = self._tag_exists(key)
        if tag_exists is not None:
            return tag_exists

        return self._storage.has(key)

    def remove(self, image: AnyImage) -> None:
        """Delete an image from the remote, then drop its tag."""
        key = image.key

        self._storage.delete(key)
        self._untag(key)

        logger.info("Image removed", extra={"key": key})

    def rename(self, source_key: str, target_key: str) -> None:
        """Rename a remote object, carrying its tag (and metadata) along."""
        self._storage.rename(source_key, target_key)

        source_item = self._cache_item(source_key)
        target_item = self._cache_item(target_key)
        if source_item is not None and target_item is not None and source_item.exists():
            target_item.set(source_item.get() or TAG_EXISTS_MARKER, self._tag_ttl)
            self._metadata_cache.pop(target_key, None)
            self._untag(source_key)

        logger.info(
            "Image renamed",
            extra={"source_key": source_key, "target_key": target_key},
        )

    def set_image_exists(self, image: AnyImage, exists: bool) -> None:
        """Mark an image as existing or not on the remote (no-op without a cache)."""
        if exists:
            self._tag(image.key)
        else:
            self._untag(image.key)

    def get_metadata(self, image: AnyImage | str) -> ImageMetadata | None:
        """Get source image metadata from the cache layer.

        Variations resolve to their parent. Returns None when there is no
        cache, no tag, or the tag carries no metadata.
        """
        if isinstance(image, ImageVariation):
            key = image.parent_key
        elif isinstance(image, Image):
            key = image.key
        else:
            key = image

        if key in self._metadata_cache:
            return self._metadata_cache[key]

        item = self._cache_item(key)
        if item is None:
            return None

        value = item.get()
        if not value or value == TAG_EXISTS_MARKER:
            return None

        try:
            metadata = ImageMetadata.deserialise(value)
        except ValueError:
            logger.warning("Unreadable metadata in cache tag", extra={"key": key})
            return None

        self._metadata_cache[key] = metadata
        return metadata

    # ------------------------------------------------------------------
    # Local operations
    # ------------------------------------------------------------------

    def create_variation(
        self,
        source: Image,
        format: ImageFormat | str,
        quality: int | None = DEFAULT_QUALITY,
        dimensions: ImageDimensions | None = None,
        crop_dimensions: ImageCropDimensions | None = None,
    ) -> ImageVariation:
        """Render a variation from a hydrated source image, without any I/O.

        Raises:
            NotHydratedError: If the source has no data
            NoSupportedEncoderError: If no encoder can handle the source
            BadImageError: If the encoder cannot decode the source
        """
        variation = ImageVariation(source.key, format, quality, dimensions, crop_dimensions)
        return self._hydrate_variation(source, variation)

    def load(self, data: bytes, key: str) -> Image:
        """Create a hydrated image from memory."""
        return Image(key, data)

    def load_from_file(self, filename: str | os.PathLike[str], key: str | None = None) -> Image:
        """Create a hydrated image from a local file.

        The key defaults to the file's base name.

        Raises:
            StorageError: If the file cannot be read
        """
        path = Path(filename)

        try:
            data = path.read_bytes()
        except OSError as exc:
            raise StorageError(
                message=f"File not readable: {path}",
                details={"filename": str(path)},
            ) from exc

        return Image(key or path.name, data)

    def save(self, image: AnyImage, filename: str | os.PathLike[str]) -> None:
        """Write image bytes to a local file, pulling the image first if needed."""
        if not image.is_hydrated():
            self.pull(image)

        path = Path(filename)

        try:
            path.write_bytes(image.data or b"")
        except OSError as exc:
            raise StorageError(
                message=f"File not writable: {path}",
                details={"filename": str(path)},
            ) from exc

    # ------------------------------------------------------------------
    # Encoders
    # ------------------------------------------------------------------

    @property
    def encoders(self) -> list[Encoder]:
        return list(self._encoders)

    def set_encoders(self, encoders: Iterable[Encoder]) -> None:
        self._encoders = list(encoders)

    def add_encoder(self, encoder: Encoder, prepend: bool = False) -> None:
        """Register an encoder; prepended encoders take precedence."""
        if prepend:
            self._encoders.insert(0, encoder)
        else:
            self._encoders.append(encoder)

    # ------------------------------------------------------------------
    # Internals
    # ------------------------------------------------------------------

    def _pull_source(self, image: AnyImage) -> None:
        key = image.key
        logger.debug("Pulling image", extra={"key": key})

        self._ensure_exists(key, NotExistsError, ERR_NOT_EXISTS)

        try:
            data = self._storage.read(key)
        except ObjectNotFoundError as exc:
            logger.warning("Image missing on remote, removing tag", extra={"key": key})
            self._untag(key)
            raise NotExistsError(message=ERR_NOT_EXISTS, details={"key": key}) from exc

        image.set_data(data)
        image._set_persistent(True)

    def _pull_variation(self, variation: ImageVariation) -> None:
        try:
            self._pull_source(variation)
            return
        except NotExistsError:
            logger.debug(
                "Variation not on remote, rendering from parent",
                extra={"key": variation.key, "parent_key": variation.parent_key},
            )

        parent_key = variation.parent_key
        self._ensure_exists(parent_key, ParentNotExistsError, ERR_PARENT_NOT_EXISTS)

        try:
            data = self._storage.read(parent_key)
        except ObjectNotFoundError as exc:
            logger.warning("Parent missing on remote, removing tag", extra={"key": parent_key})
            self._untag(parent_key)
            raise ParentNotExistsError(
                message=ERR_PARENT_NOT_EXISTS,
                details={"key": variation.key, "parent_key": parent_key},
            ) from exc

        parent = Image(parent_key, data)
        try:
            self._hydrate_variation(parent, variation)
        finally:
            parent.flush()

    def _hydrate_variation(self, parent: AnyImage, variation: ImageVariation) -> ImageVariation:
        if not parent.is_hydrated():
            raise NotHydratedError(
                message=f"Parent: {ERR_NOT_HYDRATED}",
                details={"key": parent.key},
            )

        quality = clamp_quality(variation.quality)
        variation.set_data(None)
        data = parent.data

        for encoder in self._encoders:
            if not encoder.supports(data):
                continue

            logger.debug(
                "Rendering variation",
                extra={"key": variation.key, "encoder": type(encoder).__name__},
            )
            encoder.set_data(data)
            try:
                variation.set_data(
                    encoder.create_variation(
                        variation.format,
                        quality,
                        variation.dimensions,
                        variation.crop_dimensions,
                    )
                )
            finally:
                encoder.set_data(None)
            break

        if not variation.is_hydrated():
            raise NoSupportedEncoderError(
                message=ERR_NO_SUPPORTED_ENCODER,
                details={"key": variation.key, "mime_type": parent.mime_type},
            )

        return variation

    def _inspect(self, image: AnyImage) -> ImageMetadata | None:
        try:
            return self._inspector.get_image_metadata(image)
        except BadImageError:
            logger.warning("Unable to inspect source image", extra={"key": image.key})
            return None

    def _ensure_exists(
        self,
        key: str,
        error: type[NotExistsError],
        message: str,
    ) -> None:
        if self._tag_exists(key) is False:
            if not self._validate_tags or not self._validate_tag(key):
                raise error(message=message, details={"key": key})

    def _validate_tag(self, key: str) -> bool:
        """Ask the remote whether the key exists and refresh its tag."""
        exists = self._storage.has(key)
        if exists:
            self._tag(key)
        else:
            self._untag(key)

        logger.debug("Tag validated", extra={"key": key, "exists": exists})
        return exists

    def _cache_item(self, key: str) -> CacheItem | None:
        """Cache item holding the tag for ``key``, or None when there is no cache."""
        if self._cache_pool is None:
            return None
        return self._cache_pool.get_item(CACHE_KEY_PREFIX + key)

    def _tag(self, key: str, metadata: ImageMetadata | None = None) -> None:
        item = self._cache_item(key)
        if item is None:
            return

        value = metadata.serialise() if metadata is not None else TAG_EXISTS_MARKER
        item.set(value, self._tag_ttl)

        if metadata is not None:
            self._metadata_cache[key] = metadata
        else:
            self._metadata_cache.pop(key, None)

    def _untag(self, key: str) -> None:
        item = self._cache_item(key)
        if item is None:
            return

        item.delete()
        self._metadata_cache.pop(key, None)

    def _tag_exists(self, key: str) -> bool | None:
        """True/False from the cache, or None when there is no cache."""
        item = self._cache_item(key)
        if item is None:
            return None

        return item.exists()
