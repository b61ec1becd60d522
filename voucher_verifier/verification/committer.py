from typing import Any

from voucher_verifier.database.models import VerifyResult
from voucher_verifier.database.repositories.audit_repository import AuditRepository
from voucher_verifier.database.repositories.voucher_repository import VoucherRepository
from voucher_verifier.logging.logger import Log
from voucher_verifier.verification.exceptions import (
    AlreadyVerifiedError,
    AuditError,
    CommitError,
    InvalidStateError,
    VerificationError,
    VoucherNotFoundError,
)
from voucher_verifier.verification.models import CommitReceipt

VERIFICATION_ACTION = "verification"


class TransitionCommitter:
    """Marks a voucher verified exactly once and records who did it.

    The store's locked re-check is what decides concurrent races; the audit
    append afterwards is best effort and never undoes the verification.
    """

    def __init__(
        self,
        voucher_repo: VoucherRepository,
        audit_repo: AuditRepository,
        action_kind: str = VERIFICATION_ACTION,
    ) -> None:
        self._voucher_repo = voucher_repo
        self._audit_repo = audit_repo
        self._action_kind = action_kind

    def commit(
        self,
        code: str,
        actor_id: int,
        metadata: dict[str, Any] | None = None,
    ) -> CommitReceipt:
        """Verify ``code`` on behalf of ``actor_id``.

        Raises:
            AlreadyVerifiedError: someone else verified it first.
            InvalidStateError: the voucher left ``issued`` in the meantime.
            VoucherNotFoundError: the voucher disappeared.
            CommitError: the transaction failed; retrying is safe.
        """
        result = self._voucher_repo.verify(code, actor_id)
        if not result.success:
            raise self._rejection(code, result)

        voucher_id = result.voucher_id
        if voucher_id is None:
            raise CommitError(f"Store did not report which voucher {code} was verified")
        Log.info(f"Voucher {code} verified by actor {actor_id}")

        warnings: list[str] = []
        try:
            self._audit_repo.append(voucher_id, actor_id, self._action_kind, metadata)
        except AuditError as exc:
            Log.warning(f"Voucher {code} verified but audit entry failed: {exc}")
            warnings.append(exc.message)
        except Exception as exc:
            # The verification is committed; no audit failure may surface as an error.
            Log.error(f"Voucher {code} verified but audit append crashed: {exc}")
            warnings.append(f"Audit entry for voucher {voucher_id} could not be written: {exc}")

        return CommitReceipt(
            code=code,
            voucher_id=voucher_id,
            verifier_id=actor_id,
            verified_at=result.verified_at,
            warnings=tuple(warnings),
        )

    def _rejection(self, code: str, result: VerifyResult) -> VerificationError:
        if result.error == "already_verified":
            return AlreadyVerifiedError(f"Voucher {code} was already verified")
        if result.error == "invalid_state":
            return InvalidStateError(result.state or "unknown")
        if result.error == "not_found":
            return VoucherNotFoundError(f"Voucher {code} not found")
        return CommitError(f"Verification of {code} was rejected: {result.error}")
