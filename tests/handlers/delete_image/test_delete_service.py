import pytest

from handlers.delete_image.service import DeleteService
from image_manager.infrastructure.local.filesystem_storage import LocalBlobStorage
from image_manager.infrastructure.memory.ephemeral_cache import EphemeralCachePool
from image_manager.models.errors import NotExistsError
from image_manager.models.image import Image, ImageVariation
from image_manager.services.image_manager import ImageManager


@pytest.fixture
def manager(tmp_path) -> ImageManager:
    return ImageManager(LocalBlobStorage(tmp_path), cache_pool=EphemeralCachePool())


class TestDeleteService:
    def test_delete(self, manager, png_bytes) -> None:
        manager.push(Image("a.png", png_bytes))

        DeleteService(manager).delete_image("a.png")

        assert not manager.storage.has("a.png")
        assert not manager.exists(Image("a.png"))

    def test_delete_missing(self, manager) -> None:
        with pytest.raises(NotExistsError):
            DeleteService(manager).delete_image("missing.png")

    def test_delete_source_keeps_variations(self, manager, png_bytes) -> None:
        manager.push(Image("a.png", png_bytes))
        variation = manager.push(ImageVariation("a.png", "jpg"))

        DeleteService(manager).delete_image("a.png")

        assert manager.storage.has(variation.key)

    def test_delete_variation_by_key(self, manager, png_bytes) -> None:
        manager.push(Image("a.png", png_bytes))
        variation = manager.push(ImageVariation("a.png", "jpg"))

        DeleteService(manager).delete_image(variation.key)

        assert not manager.storage.has(variation.key)
        assert manager.storage.has("a.png")
