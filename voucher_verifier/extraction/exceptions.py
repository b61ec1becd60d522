from voucher_verifier.verification.exceptions import VerificationError


class ExtractionError(VerificationError):
    """Base exception for code extraction failures."""

    kind = "extraction_error"


class InputError(ExtractionError):
    """Raised when a document is rejected before any parsing happens."""

    kind = "input_error"


class SizeExceededError(InputError):
    kind = "size_exceeded"


class UnsupportedFormatError(InputError):
    kind = "unsupported_format"


class NoCodeFoundError(ExtractionError):
    """Raised when no strategy could recover a voucher code."""

    kind = "no_code_found"
