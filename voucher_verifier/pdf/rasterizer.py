import numpy as np
import numpy.typing as npt
import pymupdf

from voucher_verifier.pdf.exceptions import RasterizationError


class PageRasterizer:
    """Renders the first page of a PDF into an RGB pixel buffer."""

    def __init__(self, scale: float = 2.0) -> None:
        if scale <= 0:
            raise ValueError(f"Raster scale must be positive, got {scale}")
        self._scale = scale

    @property
    def scale(self) -> float:
        return self._scale

    def render_first_page(self, pdf_bytes: bytes) -> npt.NDArray[np.uint8]:
        """Return page one as a ``(height, width, 3)`` uint8 array.

        Raises:
            RasterizationError: if the PDF cannot be opened, has no pages,
                or the page cannot be rendered.
        """
        try:
            with pymupdf.open(stream=pdf_bytes, filetype="pdf") as doc:  # type: ignore[no-untyped-call]
                if doc.page_count == 0:
                    raise RasterizationError("PDF has no pages to render")
                matrix = pymupdf.Matrix(self._scale, self._scale)
                pixmap = doc[0].get_pixmap(matrix=matrix, alpha=False)
                buffer = np.frombuffer(pixmap.samples, dtype=np.uint8)
                return buffer.reshape(pixmap.height, pixmap.width, pixmap.n).copy()
        except RasterizationError:
            raise
        except Exception as exc:
            raise RasterizationError(f"PyMuPDF could not render page 1: {exc}") from exc
