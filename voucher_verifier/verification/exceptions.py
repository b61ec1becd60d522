from typing import ClassVar


class VerificationError(Exception):
    """Base exception for every failure the verification pipeline can report.

    ``kind`` is a stable tag callers can branch on; the message is meant for
    people.
    """

    kind: ClassVar[str] = "verification_error"

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


class RecordLookupError(VerificationError):
    """Raised when a voucher cannot be read from the store."""

    kind = "lookup_failed"


class VoucherNotFoundError(RecordLookupError):
    """Raised when no voucher carries the requested code."""

    kind = "not_found"


class StateError(VerificationError):
    """Raised when the voucher lifecycle forbids verification."""

    kind = "state_error"


class AlreadyVerifiedError(StateError):
    kind = "already_verified"


class InvalidStateError(StateError):
    """Raised when the voucher is not in the ``issued`` state."""

    kind = "invalid_state"

    def __init__(self, state: str, message: str | None = None) -> None:
        super().__init__(
            message or f"Voucher is not in state issued. Current state: {state}"
        )
        self.state = state


class AuthorizationError(VerificationError):
    kind = "authorization_error"


class ForbiddenAssociationError(AuthorizationError):
    """Raised when a restricted actor targets another association's voucher."""

    kind = "forbidden_association"


class CommitError(VerificationError):
    """Raised when the atomic verify transaction fails. Safe to retry."""

    kind = "commit_failed"


class AuditError(VerificationError):
    """Raised when the audit append fails. Never fatal to a verification."""

    kind = "audit_failed"


class VerificationCancelled(VerificationError):
    kind = "cancelled"
