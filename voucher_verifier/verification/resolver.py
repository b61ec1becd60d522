from voucher_verifier.database.repositories.voucher_repository import VoucherRepository
from voucher_verifier.extraction.patterns import normalize_code
from voucher_verifier.logging.logger import Log
from voucher_verifier.verification.exceptions import VoucherNotFoundError
from voucher_verifier.verification.models import VoucherRecord


class RecordResolver:
    """Maps a voucher code to its hydrated record."""

    def __init__(self, voucher_repo: VoucherRepository) -> None:
        self._voucher_repo = voucher_repo

    def resolve(self, code: str) -> VoucherRecord:
        """Raises VoucherNotFoundError for unknown or malformed codes."""
        normalized = normalize_code(code)
        if normalized is None:
            raise VoucherNotFoundError(f"'{code}' is not a valid voucher code")
        record = self._voucher_repo.get_by_code(normalized)
        Log.info(f"Resolved voucher {record.code} (id {record.id}, state {record.state})")
        return record
