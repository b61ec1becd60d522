from voucher_verifier.verification.exceptions import (
    AlreadyVerifiedError,
    ForbiddenAssociationError,
    InvalidStateError,
)
from voucher_verifier.verification.models import Actor, VoucherRecord, VoucherState


class AuthorizationGuard:
    """Decides whether an actor may verify a resolved voucher.

    Checks run in a fixed order. Lifecycle checks come before the
    association check, so a restricted actor holding an already verified or
    wrongly staged voucher gets the state error rather than a permission
    error.
    """

    def authorize(self, actor: Actor, record: VoucherRecord) -> None:
        """Return silently when allowed, raise the first failing check otherwise.

        Raises:
            AlreadyVerifiedError: the voucher was verified before.
            InvalidStateError: the voucher is not ``issued``.
            ForbiddenAssociationError: a restricted actor does not share the
                operator's association.
        """
        if record.verified:
            raise AlreadyVerifiedError(f"Voucher {record.code} was already verified")

        if record.state != VoucherState.ISSUED:
            raise InvalidStateError(record.state.value)

        if actor.is_restricted:
            self._check_association(actor, record)

    def _check_association(self, actor: Actor, record: VoucherRecord) -> None:
        if record.operator_association_id is None:
            raise ForbiddenAssociationError(
                f"Voucher {record.code} has no operator assigned"
            )
        if actor.association_id != record.operator_association_id:
            raise ForbiddenAssociationError(
                f"Voucher {record.code} does not belong to your association"
            )
