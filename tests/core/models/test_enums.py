import pytest

from image_manager.models.enums import ImageFormat, ImageOrientation
from image_manager.models.errors import InvalidFormatError


class TestImageFormat:
    @pytest.mark.parametrize(
        ("value", "expected"),
        [
            ("png", ImageFormat.PNG),
            ("jpg", ImageFormat.JPEG),
            ("jpeg", ImageFormat.JPEG),
            ("JPEG", ImageFormat.JPEG),
            (" gif ", ImageFormat.GIF),
            ("pdf", ImageFormat.PDF),
        ],
    )
    def test_from_value(self, value: str, expected: ImageFormat) -> None:
        assert ImageFormat.from_value(value) is expected

    def test_from_value_unknown(self) -> None:
        with pytest.raises(InvalidFormatError):
            ImageFormat.from_value("bmp")

    def test_value_is_file_extension(self) -> None:
        assert ImageFormat.JPEG.value == "jpg"

    def test_pillow_format_and_mime(self) -> None:
        assert ImageFormat.JPEG.pillow_format == "JPEG"
        assert ImageFormat.PNG.mime_type == "image/png"
        assert ImageFormat.PDF.mime_type == "application/pdf"


class TestImageOrientation:
    def test_from_size(self) -> None:
        assert ImageOrientation.from_size(400, 300) is ImageOrientation.LANDSCAPE
        assert ImageOrientation.from_size(300, 400) is ImageOrientation.PORTRAIT

    def test_square_is_landscape(self) -> None:
        assert ImageOrientation.from_size(100, 100) is ImageOrientation.LANDSCAPE

    def test_from_value(self) -> None:
        assert ImageOrientation.from_value("portrait") is ImageOrientation.PORTRAIT

        with pytest.raises(InvalidFormatError):
            ImageOrientation.from_value("diagonal")
