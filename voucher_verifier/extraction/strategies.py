from abc import ABC, abstractmethod
from typing import ClassVar

from voucher_verifier.extraction.models import ExtractionMethod, ExtractionResult
from voucher_verifier.extraction.patterns import (
    FOLIO_LABEL_RE,
    PAYLOAD_BARE_CODE_RE,
    TEXT_BARE_CODE_RE,
    find_code,
    path_segment_pattern,
)
from voucher_verifier.logging.logger import Log
from voucher_verifier.pdf.base import BasePdfExtractor
from voucher_verifier.pdf.exceptions import PdfExtractionError, RasterizationError
from voucher_verifier.pdf.rasterizer import PageRasterizer
from voucher_verifier.visual.base import BaseVisualCodeDecoder
from voucher_verifier.visual.exceptions import VisualCodeError


class ExtractionStrategy(ABC):
    """One way of recovering a voucher code from PDF bytes."""

    method: ClassVar[ExtractionMethod]

    @abstractmethod
    def attempt(self, pdf_bytes: bytes) -> ExtractionResult | None:
        """Return a result, or None when this strategy finds no code.

        A document the strategy cannot parse counts as "no code" so the next
        strategy still gets its turn.
        """


class StructuredTextStrategy(ExtractionStrategy):
    """Searches the concatenated text layer of every page."""

    method = ExtractionMethod.STRUCTURED_TEXT

    def __init__(self, pdf_extractor: BasePdfExtractor) -> None:
        self._pdf_extractor = pdf_extractor

    def attempt(self, pdf_bytes: bytes) -> ExtractionResult | None:
        try:
            text = self._pdf_extractor.extract(pdf_bytes)
        except PdfExtractionError as exc:
            Log.warning(f"Text layer unreadable: {exc}")
            return None
        code = find_code(text, (FOLIO_LABEL_RE, TEXT_BARE_CODE_RE))
        if code is None:
            return None
        return ExtractionResult(code=code, method=self.method)


class VisualCodeStrategy(ExtractionStrategy):
    """Rasterizes page one and reads the code out of its QR payload."""

    method = ExtractionMethod.VISUAL_CODE

    def __init__(
        self,
        rasterizer: PageRasterizer,
        decoder: BaseVisualCodeDecoder,
        path_fragment: str = "vale/",
    ) -> None:
        self._rasterizer = rasterizer
        self._decoder = decoder
        self._patterns = (path_segment_pattern(path_fragment), PAYLOAD_BARE_CODE_RE)

    def attempt(self, pdf_bytes: bytes) -> ExtractionResult | None:
        try:
            image = self._rasterizer.render_first_page(pdf_bytes)
            payload = self._decoder.decode(image)
        except (RasterizationError, VisualCodeError) as exc:
            Log.warning(f"Visual code unreadable: {exc}")
            return None
        if not payload:
            Log.debug("No visual code detected on page 1")
            return None
        code = find_code(payload, self._patterns)
        if code is None:
            Log.info(f"Visual code payload carries no voucher code: {payload!r}")
            return None
        return ExtractionResult(code=code, method=self.method)
