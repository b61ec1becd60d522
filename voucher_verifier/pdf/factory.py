from voucher_verifier.config.settings import Settings
from voucher_verifier.pdf.base import BasePdfExtractor
from voucher_verifier.pdf.pdfplumber_adapter import PdfPlumberAdapter
from voucher_verifier.pdf.pymupdf_adapter import PyMuPdfAdapter
from voucher_verifier.pdf.rasterizer import PageRasterizer


class PdfExtractorFactory:
    """Creates the text extractor and rasterizer named in settings."""

    ADAPTERS: dict[str, type[BasePdfExtractor]] = {
        "pdfplumber": PdfPlumberAdapter,
        "pymupdf": PyMuPdfAdapter,
    }

    @classmethod
    def create(cls, settings: Settings) -> BasePdfExtractor:
        engine = settings.pdf_engine.lower()
        adapter_cls = cls.ADAPTERS.get(engine)
        if adapter_cls is None:
            raise ValueError(
                f"Unknown PDF engine '{engine}'. Choose from: {list(cls.ADAPTERS)}"
            )
        return adapter_cls()

    @classmethod
    def create_rasterizer(cls, settings: Settings) -> PageRasterizer:
        return PageRasterizer(scale=settings.raster_scale)
