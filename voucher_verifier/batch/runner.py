import threading
from collections.abc import Callable, Sequence
from concurrent.futures import ThreadPoolExecutor
from typing import Any, TypeVar

from voucher_verifier.batch.models import BatchItem, BatchReport
from voucher_verifier.extraction.models import Document
from voucher_verifier.logging.logger import Log
from voucher_verifier.verification.exceptions import AlreadyVerifiedError
from voucher_verifier.verification.models import (
    Actor,
    PipelineState,
    VerificationOutcome,
)
from voucher_verifier.verification.orchestrator import VerificationOrchestrator

T = TypeVar("T")


class BatchRunner:
    """Push many documents through the pipeline on a worker pool.

    Each item is an independent invocation; one failure never stops the
    others. Reports keep the input order.
    """

    def __init__(
        self,
        orchestrator: VerificationOrchestrator,
        max_workers: int = 4,
        cancel: threading.Event | None = None,
    ) -> None:
        self._orchestrator = orchestrator
        self._max_workers = max_workers
        self._cancel = cancel

    def preview(self, documents: Sequence[Document], actor: Actor) -> BatchReport:
        """Extract, resolve and authorize each document; commit nothing."""
        return self._run(
            "preview",
            documents,
            lambda document: self._orchestrator.preview_document(
                document, actor, cancel=self._cancel
            ),
            lambda document: document.file_name,
        )

    def verify(
        self,
        documents: Sequence[Document],
        actor: Actor,
        metadata: dict[str, Any] | None = None,
    ) -> BatchReport:
        return self._run(
            "verify",
            documents,
            lambda document: self._orchestrator.verify_document(
                document, actor, metadata=metadata, cancel=self._cancel
            ),
            lambda document: document.file_name,
        )

    def verify_codes(
        self,
        codes: Sequence[str],
        actor: Actor,
        metadata: dict[str, Any] | None = None,
    ) -> BatchReport:
        """Confirm a batch of codes, typically the ready items of a preview."""
        return self._run(
            "verify",
            codes,
            lambda code: self._orchestrator.verify_code(
                code, actor, metadata=metadata, cancel=self._cancel
            ),
            lambda code: code,
        )

    def _run(
        self,
        label: str,
        items: Sequence[T],
        invoke: Callable[[T], VerificationOutcome],
        source_of: Callable[[T], str],
    ) -> BatchReport:
        Log.info(f"Starting batch {label} of {len(items)} items")
        with ThreadPoolExecutor(max_workers=self._max_workers) as pool:
            outcomes = list(pool.map(lambda item: self._guarded(invoke, item), items))

        report = BatchReport()
        for index, (item, outcome) in enumerate(zip(items, outcomes, strict=True), 1):
            entry = BatchItem(
                source=source_of(item) or f"item {index}",
                code=outcome.code,
                record=outcome.record,
                error_kind=outcome.error_kind,
                message=outcome.message,
                warnings=outcome.warnings,
            )
            if outcome.success:
                report.succeeded.append(entry)
            elif outcome.error_kind == AlreadyVerifiedError.kind:
                report.already_verified.append(entry)
            else:
                report.errors.append(entry)

        Log.info(
            f"Batch {label} finished: {len(report.succeeded)} ok, "
            f"{len(report.already_verified)} already verified, "
            f"{len(report.errors)} errors"
        )
        return report

    def _guarded(
        self, invoke: Callable[[T], VerificationOutcome], item: T
    ) -> VerificationOutcome:
        """Turn an unexpected crash of one item into a failed outcome."""
        try:
            return invoke(item)
        except Exception as exc:
            Log.error(f"Batch item crashed: {exc}")
            return VerificationOutcome(
                success=False,
                state=PipelineState.FAILED,
                error_kind="unexpected_error",
                message=str(exc),
            )
