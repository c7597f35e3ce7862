import pytest

from image_manager.models.enums import ImageFormat, ImageOrientation
from image_manager.models.errors import BadImageError, InvalidSourceError, NotHydratedError
from image_manager.models.image import Image, ImageVariation
from image_manager.services.image_inspector import ImageInspector


@pytest.fixture
def inspector() -> ImageInspector:
    return ImageInspector()


class TestImageInspector:
    def test_png_metadata(self, inspector, png_bytes) -> None:
        metadata = inspector.get_image_metadata(Image("a.png", png_bytes))

        assert metadata.mimetype == "image/png"
        assert metadata.format is ImageFormat.PNG
        assert metadata.orientation is ImageOrientation.LANDSCAPE
        assert (metadata.dimensions.width, metadata.dimensions.height) == (400, 300)
        assert (metadata.resolution.x, metadata.resolution.y) == (72.0, 72.0)

    def test_portrait(self, inspector, portrait_png_bytes) -> None:
        metadata = inspector.get_image_metadata(Image("p.png", portrait_png_bytes))

        assert metadata.orientation is ImageOrientation.PORTRAIT

    def test_jpeg_dpi_read_from_file(self, inspector, make_image) -> None:
        data = make_image("JPEG", dpi=(300, 300))

        metadata = inspector.get_image_metadata(Image("a.jpg", data))

        assert metadata.format is ImageFormat.JPEG
        assert metadata.resolution.x == pytest.approx(300)
        assert metadata.resolution.y == pytest.approx(300)

    def test_pdf_metadata(self, inspector, pdf_bytes) -> None:
        metadata = inspector.get_image_metadata(Image("doc.pdf", pdf_bytes))

        assert metadata.mimetype == "application/pdf"
        assert metadata.format is ImageFormat.PDF
        assert (metadata.dimensions.width, metadata.dimensions.height) == (595, 842)
        assert metadata.orientation is ImageOrientation.PORTRAIT
        assert metadata.resolution.x == 72.0

    def test_not_hydrated(self, inspector) -> None:
        with pytest.raises(NotHydratedError):
            inspector.get_image_metadata(Image("a.png"))

    def test_variation_rejected(self, inspector, jpeg_bytes) -> None:
        variation = ImageVariation("a.png", "jpg")
        variation.set_data(jpeg_bytes)

        with pytest.raises(InvalidSourceError):
            inspector.get_image_metadata(variation)

    def test_undecodable(self, inspector) -> None:
        with pytest.raises(BadImageError):
            inspector.get_image_metadata(Image("a.txt", b"plain text, not an image"))

    def test_oversized_image(self, inspector, png_bytes, tiny_pixel_limit) -> None:
        with pytest.raises(BadImageError):
            inspector.get_image_metadata(Image("big.png", png_bytes))

    def test_metadata_round_trips_through_cache_encoding(self, inspector, png_bytes) -> None:
        metadata = inspector.get_image_metadata(Image("a.png", png_bytes))

        assert type(metadata).deserialise(metadata.serialise()) == metadata
