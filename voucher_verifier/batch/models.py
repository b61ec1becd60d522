from dataclasses import dataclass, field

from voucher_verifier.verification.models import VoucherRecord


@dataclass(frozen=True)
class BatchItem:
    """One document (or code) of a batch and what happened to it."""

    source: str
    code: str | None = None
    record: VoucherRecord | None = None
    error_kind: str | None = None
    message: str = ""
    warnings: tuple[str, ...] = ()


@dataclass
class BatchReport:
    """Batch results partitioned the way a reviewer acts on them.

    ``succeeded`` holds vouchers ready to confirm for a preview and
    vouchers verified by this run for a verify.
    """

    succeeded: list[BatchItem] = field(default_factory=list)
    already_verified: list[BatchItem] = field(default_factory=list)
    errors: list[BatchItem] = field(default_factory=list)

    @property
    def total(self) -> int:
        return len(self.succeeded) + len(self.already_verified) + len(self.errors)
