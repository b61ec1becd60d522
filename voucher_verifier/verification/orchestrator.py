import threading
from collections.abc import Sequence
from dataclasses import replace
from typing import Any

from voucher_verifier.config.settings import Settings
from voucher_verifier.database.repositories.audit_repository import AuditRepository
from voucher_verifier.database.repositories.voucher_repository import VoucherRepository
from voucher_verifier.extraction.extractor import CodeExtractor
from voucher_verifier.extraction.factory import ExtractorFactory
from voucher_verifier.extraction.models import Document
from voucher_verifier.logging.logger import Log
from voucher_verifier.verification.committer import TransitionCommitter
from voucher_verifier.verification.exceptions import (
    VerificationCancelled,
    VerificationError,
)
from voucher_verifier.verification.guard import AuthorizationGuard
from voucher_verifier.verification.models import (
    Actor,
    PipelineState,
    VerificationOutcome,
    VoucherState,
)
from voucher_verifier.verification.pipeline import PipelineStep, VerificationContext
from voucher_verifier.verification.resolver import RecordResolver
from voucher_verifier.verification.steps import (
    AuthorizeStep,
    CommitStep,
    ExtractCodeStep,
    ResolveRecordStep,
)


class VerificationOrchestrator:
    """Runs extract -> resolve -> authorize -> commit for one request.

    Every call builds a fresh context, so retries are independent. Errors
    raised by any stage stop the pipeline and come back as a failed
    ``VerificationOutcome``; callers never see a half-finished result.
    """

    def __init__(
        self,
        extractor: CodeExtractor,
        resolver: RecordResolver,
        guard: AuthorizationGuard,
        committer: TransitionCommitter,
    ) -> None:
        self._extract = ExtractCodeStep(extractor)
        self._resolve = ResolveRecordStep(resolver)
        self._authorize = AuthorizeStep(guard)
        self._commit = CommitStep(committer)

    def verify_document(
        self,
        document: Document,
        actor: Actor,
        metadata: dict[str, Any] | None = None,
        cancel: threading.Event | None = None,
    ) -> VerificationOutcome:
        context = VerificationContext(
            actor=actor, document=document, metadata=dict(metadata or {})
        )
        steps = [self._extract, self._resolve, self._authorize, self._commit]
        return self._run(context, steps, cancel)

    def verify_code(
        self,
        code: str,
        actor: Actor,
        metadata: dict[str, Any] | None = None,
        cancel: threading.Event | None = None,
    ) -> VerificationOutcome:
        """Manual entry: the caller already knows the code."""
        context = VerificationContext(
            actor=actor, code=code, metadata=dict(metadata or {})
        )
        return self._run(context, [self._resolve, self._authorize, self._commit], cancel)

    def preview_document(
        self,
        document: Document,
        actor: Actor,
        cancel: threading.Event | None = None,
    ) -> VerificationOutcome:
        """Extract, resolve and authorize without committing anything."""
        context = VerificationContext(actor=actor, document=document)
        return self._run(context, [self._extract, self._resolve, self._authorize], cancel)

    def preview_code(
        self,
        code: str,
        actor: Actor,
        cancel: threading.Event | None = None,
    ) -> VerificationOutcome:
        context = VerificationContext(actor=actor, code=code)
        return self._run(context, [self._resolve, self._authorize], cancel)

    def _run(
        self,
        context: VerificationContext,
        steps: Sequence[PipelineStep],
        cancel: threading.Event | None,
    ) -> VerificationOutcome:
        try:
            for step in steps:
                if cancel is not None and cancel.is_set():
                    raise VerificationCancelled(
                        f"Verification cancelled before {step.entered}"
                    )
                context.advance(step.entered)
                context = step.run(context)
                context.advance(step.completed)
        except VerificationError as exc:
            return self._failure(context, exc)

        receipt = context.receipt
        Log.info(f"Pipeline finished in state {context.state} for code {context.code}")
        record = context.record
        if receipt is not None and record is not None:
            # The snapshot was taken before the commit; reflect what was stored.
            record = replace(
                record,
                verified=True,
                state=VoucherState.VERIFIED,
                verifier_id=receipt.verifier_id,
                verified_at=receipt.verified_at,
            )
        return VerificationOutcome(
            success=True,
            state=context.state,
            code=context.code or None,
            method=context.extraction.method if context.extraction else None,
            record=record,
            warnings=receipt.warnings if receipt else (),
            transitions=tuple(context.transitions),
        )

    def _failure(
        self, context: VerificationContext, exc: VerificationError
    ) -> VerificationOutcome:
        failed_in = context.state
        context.advance(PipelineState.FAILED)
        Log.error(
            f"Verification failed while {failed_in} "
            f"(code {context.code or 'unknown'}): [{exc.kind}] {exc.message}"
        )
        return VerificationOutcome(
            success=False,
            state=PipelineState.FAILED,
            code=context.code or None,
            method=context.extraction.method if context.extraction else None,
            error_kind=exc.kind,
            message=exc.message,
            transitions=tuple(context.transitions),
        )


def build_orchestrator(settings: Settings) -> VerificationOrchestrator:
    """Build an orchestrator wired to the database-backed repositories."""
    voucher_repo = VoucherRepository()
    return VerificationOrchestrator(
        extractor=ExtractorFactory.create(settings),
        resolver=RecordResolver(voucher_repo),
        guard=AuthorizationGuard(),
        committer=TransitionCommitter(
            voucher_repo,
            AuditRepository(),
            action_kind=settings.audit_action_kind,
        ),
    )
