from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Any, ClassVar

from voucher_verifier.extraction.models import Document, ExtractionResult
from voucher_verifier.verification.models import (
    Actor,
    CommitReceipt,
    PipelineState,
    VoucherRecord,
)


@dataclass(slots=True)
class VerificationContext:
    """Everything one invocation knows. Discarded when the invocation ends."""

    actor: Actor
    document: Document | None = None
    code: str = ""
    metadata: dict[str, Any] = field(default_factory=dict)
    extraction: ExtractionResult | None = None
    record: VoucherRecord | None = None
    receipt: CommitReceipt | None = None
    state: PipelineState = PipelineState.IDLE
    transitions: list[PipelineState] = field(
        default_factory=lambda: [PipelineState.IDLE]
    )

    def advance(self, state: PipelineState) -> None:
        self.state = state
        self.transitions.append(state)


class PipelineStep(ABC):
    """One stage of the verification pipeline.

    ``entered`` is the state while the step runs, ``completed`` the state
    once it returns.
    """

    entered: ClassVar[PipelineState]
    completed: ClassVar[PipelineState]

    @abstractmethod
    def run(self, context: VerificationContext) -> VerificationContext:
        raise NotImplementedError
