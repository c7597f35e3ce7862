"""Encoder that rasterises PDF documents in addition to bitmap images."""

import pymupdf
from PIL import Image as PILImage

from image_manager.encoders.pillow_encoder import PillowEncoder
from image_manager.models.errors import BadImageError
from image_manager.utils.constants import DEFAULT_PDF_RESOLUTION, PDF_POINTS_PER_INCH
from image_manager.utils.mime import is_pdf


class PdfEncoder(PillowEncoder):
    """Renders the first page of a PDF, then transforms it like any bitmap.

    Args:
        resample: Resampling filter used when resizing
        resolution: Read resolution in DPI; higher values improve the quality
            of vector rasterisation at the cost of memory
    """

    def __init__(
        self,
        resample: PILImage.Resampling = PILImage.Resampling.LANCZOS,
        resolution: int = DEFAULT_PDF_RESOLUTION,
    ) -> None:
        super().__init__(resample=resample)
        self._resolution = resolution

    @property
    def resolution(self) -> int:
        return self._resolution

    def supports(self, data: bytes | None) -> bool:
        return is_pdf(data) or super().supports(data)

    def _decode(self, data: bytes) -> PILImage.Image:
        if not is_pdf(data):
            return super()._decode(data)

        try:
            with pymupdf.open(stream=data, filetype="pdf") as doc:
                if doc.page_count == 0:
                    raise BadImageError(message="PDF document has no pages")

                zoom = self._resolution / PDF_POINTS_PER_INCH
                # alpha=False renders onto a white background
                pix = doc.load_page(0).get_pixmap(matrix=pymupdf.Matrix(zoom, zoom), alpha=False)
                return PILImage.frombytes("RGB", (pix.width, pix.height), pix.samples)
        except (RuntimeError, ValueError) as exc:
            raise BadImageError(message="Bad PDF data", details={"error": str(exc)}) from exc
