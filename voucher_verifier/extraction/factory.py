from voucher_verifier.config.settings import Settings
from voucher_verifier.extraction.extractor import CodeExtractor
from voucher_verifier.extraction.strategies import (
    ExtractionStrategy,
    StructuredTextStrategy,
    VisualCodeStrategy,
)
from voucher_verifier.pdf.factory import PdfExtractorFactory
from voucher_verifier.visual.opencv_adapter import OpenCvQrDecoder


class ExtractorFactory:
    """Creates the configured code extractor."""

    @classmethod
    def create(cls, settings: Settings) -> CodeExtractor:
        return CodeExtractor(
            strategies=cls.create_strategies(settings),
            max_size_bytes=settings.max_document_size_bytes,
            accepted_media_type=settings.accepted_media_type.lower(),
        )

    @classmethod
    def create_strategies(cls, settings: Settings) -> list[ExtractionStrategy]:
        """Strategies in evaluation order: text layer first, then QR."""
        return [
            StructuredTextStrategy(PdfExtractorFactory.create(settings)),
            VisualCodeStrategy(
                rasterizer=PdfExtractorFactory.create_rasterizer(settings),
                decoder=OpenCvQrDecoder(),
                path_fragment=settings.visual_code_path_fragment,
            ),
        ]
