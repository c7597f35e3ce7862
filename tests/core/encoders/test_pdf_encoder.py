import pytest

from image_manager.encoders.pdf_encoder import PdfEncoder
from image_manager.models.dimensions import ImageDimensions
from image_manager.models.enums import ImageFormat
from image_manager.models.errors import BadImageError


def test_supports_pdf_and_bitmaps(pdf_bytes, png_bytes) -> None:
    encoder = PdfEncoder()

    assert encoder.supports(pdf_bytes)
    assert encoder.supports(png_bytes)
    assert not encoder.supports(b"plain text")


def test_rasterises_first_page_at_resolution(pdf_bytes, image_size, image_format) -> None:
    encoder = PdfEncoder(resolution=144)
    encoder.set_data(pdf_bytes)

    output = encoder.create_variation(ImageFormat.PNG, 90)

    # A4 at 144 dpi: 595x842 points doubled
    assert image_format(output) == "PNG"
    assert image_size(output) == (1190, 1684)


def test_default_resolution() -> None:
    assert PdfEncoder().resolution == 300


def test_pdf_resized_to_jpeg(pdf_bytes, image_size, image_format) -> None:
    encoder = PdfEncoder()
    encoder.set_data(pdf_bytes)

    output = encoder.create_variation(ImageFormat.JPEG, 80, ImageDimensions(height=200))

    assert image_format(output) == "JPEG"
    assert image_size(output)[1] == 200


def test_bitmap_still_handled(png_bytes, image_size) -> None:
    encoder = PdfEncoder()
    encoder.set_data(png_bytes)

    output = encoder.create_variation(ImageFormat.PNG, 90, ImageDimensions(width=40))

    assert image_size(output) == (40, 30)


def test_corrupt_pdf() -> None:
    encoder = PdfEncoder()
    encoder.set_data(b"%PDF-1.4\nthis is not really a pdf")

    with pytest.raises(BadImageError):
        encoder.create_variation(ImageFormat.PNG, 90)
