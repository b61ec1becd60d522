class PdfError(Exception):
    """Base exception for PDF adapter failures."""


class PdfExtractionError(PdfError):
    """Raised when the text layer of a PDF cannot be read."""


class RasterizationError(PdfError):
    """Raised when a PDF page cannot be rendered to pixels."""
