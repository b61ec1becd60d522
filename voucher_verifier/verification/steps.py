from voucher_verifier.extraction.extractor import CodeExtractor
from voucher_verifier.logging.logger import Log
from voucher_verifier.verification.committer import TransitionCommitter
from voucher_verifier.verification.guard import AuthorizationGuard
from voucher_verifier.verification.models import PipelineState
from voucher_verifier.verification.pipeline import PipelineStep, VerificationContext
from voucher_verifier.verification.resolver import RecordResolver


class ExtractCodeStep(PipelineStep):
    entered = PipelineState.EXTRACTING
    completed = PipelineState.EXTRACTED

    def __init__(self, extractor: CodeExtractor) -> None:
        self._extractor = extractor

    def run(self, context: VerificationContext) -> VerificationContext:
        if context.document is None:
            raise ValueError("VerificationContext.document must be set before extraction")
        context.extraction = self._extractor.extract(context.document)
        context.code = context.extraction.code
        return context


class ResolveRecordStep(PipelineStep):
    entered = PipelineState.RESOLVING
    completed = PipelineState.RESOLVED

    def __init__(self, resolver: RecordResolver) -> None:
        self._resolver = resolver

    def run(self, context: VerificationContext) -> VerificationContext:
        context.record = self._resolver.resolve(context.code)
        context.code = context.record.code
        return context


class AuthorizeStep(PipelineStep):
    entered = PipelineState.AUTHORIZING
    completed = PipelineState.AUTHORIZED

    def __init__(self, guard: AuthorizationGuard) -> None:
        self._guard = guard

    def run(self, context: VerificationContext) -> VerificationContext:
        if context.record is None:
            raise ValueError("VerificationContext.record must be set before authorization")
        self._guard.authorize(context.actor, context.record)
        Log.info(f"Actor {context.actor.id} may verify voucher {context.code}")
        return context


class CommitStep(PipelineStep):
    entered = PipelineState.COMMITTING
    completed = PipelineState.VERIFIED

    def __init__(self, committer: TransitionCommitter) -> None:
        self._committer = committer

    def run(self, context: VerificationContext) -> VerificationContext:
        context.receipt = self._committer.commit(
            context.code,
            context.actor.id,
            metadata=context.metadata,
        )
        return context
