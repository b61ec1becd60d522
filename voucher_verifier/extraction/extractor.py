from collections.abc import Sequence

from voucher_verifier.extraction.exceptions import (
    NoCodeFoundError,
    SizeExceededError,
    UnsupportedFormatError,
)
from voucher_verifier.extraction.models import Document, ExtractionResult
from voucher_verifier.extraction.strategies import ExtractionStrategy
from voucher_verifier.logging.logger import Log

MAX_DOCUMENT_SIZE_BYTES = 5 * 1024 * 1024
PDF_MEDIA_TYPE = "application/pdf"


class CodeExtractor:
    """Turns an uploaded document into a voucher code.

    Preconditions are checked before any parsing. Strategies then run in the
    order given and the first one that yields a code wins, so a costlier
    strategy never runs once a cheaper one has succeeded.
    """

    def __init__(
        self,
        strategies: Sequence[ExtractionStrategy],
        max_size_bytes: int = MAX_DOCUMENT_SIZE_BYTES,
        accepted_media_type: str = PDF_MEDIA_TYPE,
    ) -> None:
        if not strategies:
            raise ValueError("CodeExtractor needs at least one strategy")
        self._strategies = tuple(strategies)
        self._max_size_bytes = max_size_bytes
        self._accepted_media_type = accepted_media_type

    @property
    def strategies(self) -> tuple[ExtractionStrategy, ...]:
        return self._strategies

    def extract(self, document: Document) -> ExtractionResult:
        """Extract the voucher code from a document.

        Raises:
            SizeExceededError: declared or actual size is over the limit.
            UnsupportedFormatError: declared media type is not accepted.
            NoCodeFoundError: every strategy came back empty.
        """
        self._check_preconditions(document)

        for strategy in self._strategies:
            result = strategy.attempt(document.content)
            if result is not None:
                Log.info(f"Extracted code {result.code} via {result.method}")
                return result
            Log.info(f"No code found via {strategy.method}")

        raise NoCodeFoundError(
            "Could not read the voucher code from the document. "
            "Contact an administrator."
        )

    def _check_preconditions(self, document: Document) -> None:
        size = max(document.declared_size, len(document.content))
        if size > self._max_size_bytes:
            raise SizeExceededError(
                f"Document is too large ({size} bytes). "
                f"Maximum is {self._max_size_bytes} bytes."
            )
        media_type = document.media_type.split(";", 1)[0].strip().lower()
        if media_type != self._accepted_media_type:
            raise UnsupportedFormatError(
                f"Unsupported media type '{document.media_type}'. "
                f"Only {self._accepted_media_type} is accepted."
            )
