"""ImageManager wired to moto-backed S3 and DynamoDB through the factory."""

import pytest

from image_manager.models.dimensions import ImageDimensions
from image_manager.models.enums import ImageFormat, ImageOrientation
from image_manager.models.errors import (
    AlreadyExistsError,
    NotExistsError,
    ParentNotExistsError,
)
from image_manager.models.image import Image, ImageVariation
from image_manager.services.factory import create_image_manager


@pytest.fixture
def manager(s3_bucket, tag_table, monkeypatch):
    monkeypatch.delenv("IMAGE_VALIDATE_TAGS", raising=False)
    monkeypatch.delenv("IMAGE_TAG_TTL_SECONDS", raising=False)
    return create_image_manager()


class TestImageManagerOnAws:
    def test_push_stores_object_and_metadata_tag(
        self, manager, png_bytes, s3_head_object, tag_table_get_item
    ) -> None:
        image = manager.push(Image("photo.png", png_bytes))

        assert image.is_persistent()
        assert s3_head_object("photo.png")["ContentType"] == "image/png"

        metadata = manager.get_metadata("photo.png")
        assert metadata.format == ImageFormat.PNG
        assert metadata.orientation == ImageOrientation.LANDSCAPE
        assert metadata.dimensions.width == 400
        assert tag_table_get_item("remote.photo.png")["value"] != "1"

    def test_pull_round_trip(self, manager, png_bytes) -> None:
        manager.push(Image("photo.png", png_bytes))

        pulled = manager.pull(Image("photo.png"))

        assert pulled.data == png_bytes
        assert pulled.is_persistent()

    def test_pull_untagged_object_is_missing(self, manager, png_bytes, s3_put_object) -> None:
        s3_put_object("photo.png", png_bytes, "image/png")

        with pytest.raises(NotExistsError):
            manager.pull(Image("photo.png"))

    def test_pull_with_tag_validation(self, manager, png_bytes, s3_put_object, monkeypatch) -> None:
        monkeypatch.setenv("IMAGE_VALIDATE_TAGS", "true")
        validating = create_image_manager()
        s3_put_object("photo.png", png_bytes, "image/png")

        assert validating.pull(Image("photo.png")).data == png_bytes
        assert validating.exists(Image("photo.png"))

    def test_variation_generated_from_parent(self, manager, png_bytes, image_size, image_format) -> None:
        manager.push(Image("photo.png", png_bytes))
        variation = ImageVariation(
            "photo.png", ImageFormat.JPEG, 80, ImageDimensions(width=200)
        )

        manager.pull(variation)

        assert image_format(variation.data) == "JPEG"
        assert image_size(variation.data) == (200, 150)
        assert not variation.is_persistent()
        assert not manager.exists(variation)

    def test_persisted_variation_is_read_back(self, manager, png_bytes, s3_get_object) -> None:
        manager.push(Image("photo.png", png_bytes))
        variation = manager.pull(ImageVariation("photo.png", "gif"))

        manager.push(variation, overwrite=False)

        stored = s3_get_object(variation.key)
        assert stored == variation.data
        assert manager.pull(ImageVariation("photo.png", "gif")).is_persistent()

        with pytest.raises(AlreadyExistsError):
            manager.push(ImageVariation("photo.png", "gif"), overwrite=False)

    def test_variation_without_parent(self, manager) -> None:
        with pytest.raises(ParentNotExistsError):
            manager.pull(ImageVariation("missing.png", "jpg"))

    def test_remove(self, manager, png_bytes, tag_table_get_item) -> None:
        manager.push(Image("photo.png", png_bytes))

        manager.remove(Image("photo.png"))

        assert tag_table_get_item("remote.photo.png") is None
        assert not manager.storage.has("photo.png")
        assert not manager.exists(Image("photo.png"))

    def test_rename_moves_tag(self, manager, png_bytes, tag_table_get_item) -> None:
        manager.push(Image("a.png", png_bytes))
        tag = tag_table_get_item("remote.a.png")["value"]

        manager.rename("a.png", "b.png")

        assert tag_table_get_item("remote.a.png") is None
        assert tag_table_get_item("remote.b.png")["value"] == tag
        assert manager.pull(Image("b.png")).data == png_bytes
