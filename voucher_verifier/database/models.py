from dataclasses import dataclass, field
from datetime import datetime


@dataclass
class AuditEntry:
    """Represents a row from the voucher_audit_log table."""

    id: int
    voucher_id: int
    actor_id: int
    action_kind: str
    metadata: dict[str, object] = field(default_factory=dict)
    created_at: datetime | None = None


@dataclass
class VerifyResult:
    """Outcome of the store's atomic re-check-and-set.

    ``error`` is one of ``not_found``, ``already_verified``, ``invalid_state``
    when ``success`` is False.
    """

    success: bool
    error: str | None = None
    voucher_id: int | None = None
    state: str | None = None
    verified_at: datetime | None = None
