from dataclasses import dataclass, field
from datetime import datetime
from decimal import Decimal
from enum import StrEnum

from voucher_verifier.extraction.models import ExtractionMethod


class VoucherState(StrEnum):
    DRAFT = "draft"
    IN_PROGRESS = "in_progress"
    ISSUED = "issued"
    VERIFIED = "verified"
    PAID = "paid"


class VoucherCategory(StrEnum):
    MATERIAL = "material"
    RENTAL = "rental"


class Role(StrEnum):
    ADMINISTRATOR = "administrator"
    SUPERVISOR = "supervisor"
    RESTRICTED = "restricted"  # scoped to its own association


@dataclass(frozen=True)
class Actor:
    """The identity asking for a verification, as supplied by the caller."""

    id: int
    role: Role
    association_id: int | None = None

    @property
    def is_restricted(self) -> bool:
        return self.role == Role.RESTRICTED


@dataclass(frozen=True)
class WorkSite:
    id: int
    name: str
    cost_center: str | None = None
    company_name: str | None = None


@dataclass(frozen=True)
class Operator:
    id: int
    full_name: str
    association_id: int | None = None
    association_name: str | None = None


@dataclass(frozen=True)
class Vehicle:
    id: int
    plates: str


@dataclass(frozen=True)
class MaterialLine:
    """A material delivery detail line."""

    id: int
    material: str | None = None
    material_type: str | None = None
    capacity_m3: Decimal | None = None
    distance_km: Decimal | None = None
    ordered_m3: Decimal | None = None
    weight_tons: Decimal | None = None
    quarry: str | None = None


@dataclass(frozen=True)
class RentalLine:
    """An equipment rental detail line."""

    id: int
    material: str | None = None
    capacity_m3: Decimal | None = None
    start_time: str | None = None
    end_time: str | None = None
    total_hours: Decimal | None = None
    total_days: Decimal | None = None
    hourly_rate: Decimal | None = None
    daily_rate: Decimal | None = None
    total_cost: Decimal | None = None
    trips: int | None = None


@dataclass(frozen=True)
class VoucherRecord:
    """Read snapshot of a voucher with everything a reviewer needs to see."""

    id: int
    code: str
    state: VoucherState
    category: VoucherCategory
    verified: bool = False
    verifier_id: int | None = None
    verified_at: datetime | None = None
    created_at: datetime | None = None
    work_site: WorkSite | None = None
    operator: Operator | None = None
    vehicle: Vehicle | None = None
    creator_name: str | None = None
    material_lines: tuple[MaterialLine, ...] = ()
    rental_lines: tuple[RentalLine, ...] = ()

    @property
    def operator_association_id(self) -> int | None:
        return self.operator.association_id if self.operator else None

    def summary(self) -> dict[str, object]:
        return {
            "id": self.id,
            "code": self.code,
            "state": self.state.value,
            "category": self.category.value,
            "verified": self.verified,
            "operator": self.operator.full_name if self.operator else None,
            "association": self.operator.association_name if self.operator else None,
            "work_site": self.work_site.name if self.work_site else None,
            "plates": self.vehicle.plates if self.vehicle else None,
        }


@dataclass(frozen=True)
class CommitReceipt:
    """Result of a successful atomic verification."""

    code: str
    voucher_id: int
    verifier_id: int
    verified_at: datetime | None
    warnings: tuple[str, ...] = ()


class PipelineState(StrEnum):
    IDLE = "idle"
    EXTRACTING = "extracting"
    EXTRACTED = "extracted"
    RESOLVING = "resolving"
    RESOLVED = "resolved"
    AUTHORIZING = "authorizing"
    AUTHORIZED = "authorized"
    COMMITTING = "committing"
    VERIFIED = "verified"
    FAILED = "failed"


@dataclass(frozen=True)
class VerificationOutcome:
    """What one orchestrator invocation reports back. Never partial."""

    success: bool
    state: PipelineState
    code: str | None = None
    method: ExtractionMethod | None = None
    record: VoucherRecord | None = None
    error_kind: str | None = None
    message: str = ""
    warnings: tuple[str, ...] = ()
    transitions: tuple[PipelineState, ...] = field(default_factory=tuple)

    def to_dict(self) -> dict[str, object]:
        payload: dict[str, object] = {
            "success": self.success,
            "state": self.state.value,
            "code": self.code,
            "method": self.method.value if self.method else None,
        }
        if self.error_kind is not None:
            payload["error"] = self.error_kind
            payload["message"] = self.message
        if self.warnings:
            payload["warnings"] = list(self.warnings)
        if self.record is not None:
            payload["voucher"] = self.record.summary()
        return payload
