import pymupdf

from voucher_verifier.pdf.base import BasePdfExtractor
from voucher_verifier.pdf.exceptions import PdfExtractionError


class PyMuPdfAdapter(BasePdfExtractor):
    """Reads the text layer with PyMuPDF."""

    def extract_pages(self, pdf_bytes: bytes) -> list[str]:
        try:
            with pymupdf.open(stream=pdf_bytes, filetype="pdf") as doc:  # type: ignore[no-untyped-call]
                return [page.get_text() for page in doc]
        except Exception as exc:
            raise PdfExtractionError(f"PyMuPDF could not read PDF: {exc}") from exc
