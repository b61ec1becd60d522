from abc import ABC, abstractmethod


class BasePdfExtractor(ABC):
    """Contract for all PDF text extraction adapters."""

    @abstractmethod
    def extract_pages(self, pdf_bytes: bytes) -> list[str]:
        """Return the embedded text of every page, in page order.

        Pages without a text layer yield an empty string.

        Raises:
            PdfExtractionError: if the PDF cannot be parsed.
        """

    def extract(self, pdf_bytes: bytes) -> str:
        """Concatenate all page texts in page order."""
        return "\n".join(self.extract_pages(pdf_bytes)).strip()
