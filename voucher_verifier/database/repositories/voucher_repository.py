from decimal import Decimal
from typing import Any

import psycopg
from psycopg.rows import dict_row

from voucher_verifier.database.connection import get_connection
from voucher_verifier.database.models import VerifyResult
from voucher_verifier.verification.exceptions import (
    CommitError,
    RecordLookupError,
    VoucherNotFoundError,
)
from voucher_verifier.verification.models import (
    MaterialLine,
    Operator,
    RentalLine,
    Vehicle,
    VoucherCategory,
    VoucherRecord,
    VoucherState,
    WorkSite,
)

# Single statement: detail lines come back as JSON arrays so the whole
# aggregate is read in one round trip.
_SELECT_BY_CODE = """
SELECT v.id, v.code, v.state, v.category, v.verified,
       v.verifier_id, v.verified_at, v.created_at,
       ws.id AS work_site_id, ws.name AS work_site_name, ws.cost_center,
       c.name AS company_name,
       o.id AS operator_id, o.full_name AS operator_name,
       a.id AS association_id, a.name AS association_name,
       vh.id AS vehicle_id, vh.plates,
       concat_ws(' ', p.first_name, p.last_name, p.second_last_name) AS creator_name,
       COALESCE((
           SELECT json_agg(json_build_object(
                      'id', ml.id,
                      'material', m.name,
                      'material_type', mt.name,
                      'capacity_m3', ml.capacity_m3,
                      'distance_km', ml.distance_km,
                      'ordered_m3', ml.ordered_m3,
                      'weight_tons', ml.weight_tons,
                      'quarry', q.name
                  ) ORDER BY ml.id)
           FROM voucher_material_lines ml
           LEFT JOIN materials m ON m.id = ml.material_id
           LEFT JOIN material_types mt ON mt.id = m.material_type_id
           LEFT JOIN quarries q ON q.id = ml.quarry_id
           WHERE ml.voucher_id = v.id
       ), '[]'::json) AS material_lines,
       COALESCE((
           SELECT json_agg(json_build_object(
                      'id', rl.id,
                      'material', m.name,
                      'capacity_m3', rl.capacity_m3,
                      'start_time', rl.start_time,
                      'end_time', rl.end_time,
                      'total_hours', rl.total_hours,
                      'total_days', rl.total_days,
                      'hourly_rate', rr.hourly_rate,
                      'daily_rate', rr.daily_rate,
                      'total_cost', rl.total_cost,
                      'trips', rl.trips
                  ) ORDER BY rl.id)
           FROM voucher_rental_lines rl
           LEFT JOIN materials m ON m.id = rl.material_id
           LEFT JOIN rental_rates rr ON rr.id = rl.rental_rate_id
           WHERE rl.voucher_id = v.id
       ), '[]'::json) AS rental_lines
FROM vouchers v
LEFT JOIN work_sites ws ON ws.id = v.work_site_id
LEFT JOIN companies c ON c.id = ws.company_id
LEFT JOIN operators o ON o.id = v.operator_id
LEFT JOIN associations a ON a.id = o.association_id
LEFT JOIN vehicles vh ON vh.id = v.vehicle_id
LEFT JOIN people p ON p.id = v.creator_id
WHERE v.code = %s
"""


def _decimal(value: Any) -> Decimal | None:
    return None if value is None else Decimal(str(value))


def _text(value: Any) -> str | None:
    return None if value is None else str(value)


class VoucherRepository:
    """Database operations for the vouchers table and its joined detail."""

    def get_by_code(self, code: str) -> VoucherRecord:
        """Read the fully hydrated voucher for a code.

        Raises:
            VoucherNotFoundError: if no voucher has this code.
            RecordLookupError: if the store cannot be queried or the stored
                row holds values outside the known states and categories.
        """
        try:
            with get_connection() as conn:
                with conn.cursor(row_factory=dict_row) as cur:
                    cur.execute(_SELECT_BY_CODE, (code,))
                    row = cur.fetchone()
        except psycopg.Error as exc:
            raise RecordLookupError(f"Could not look up voucher {code}: {exc}") from exc

        if row is None:
            raise VoucherNotFoundError(f"Voucher {code} not found")

        try:
            return self._to_record(row)
        except (ValueError, TypeError, KeyError, ArithmeticError) as exc:
            raise RecordLookupError(f"Voucher {code} has unreadable data: {exc}") from exc

    def verify(self, code: str, verifier_id: int) -> VerifyResult:
        """Atomically re-check and mark a voucher verified.

        The row is locked with SELECT ... FOR UPDATE, so of several
        concurrent callers for the same code exactly one sees an unverified
        ``issued`` voucher; the rest get ``already_verified``.

        Raises:
            CommitError: if the transaction fails. Nothing is changed.
        """
        try:
            with get_connection() as conn:
                try:
                    result = self._verify_locked(conn, code, verifier_id)
                except Exception:
                    conn.rollback()
                    raise
                if result.success:
                    conn.commit()
                else:
                    conn.rollback()
                return result
        except psycopg.Error as exc:
            raise CommitError(f"Verification of {code} failed: {exc}") from exc

    def _verify_locked(
        self,
        conn: psycopg.Connection[Any],
        code: str,
        verifier_id: int,
    ) -> VerifyResult:
        with conn.cursor(row_factory=dict_row) as cur:
            cur.execute(
                """
                SELECT id, state, verified
                FROM vouchers
                WHERE code = %s
                FOR UPDATE
                """,
                (code,),
            )
            row = cur.fetchone()
            if row is None:
                return VerifyResult(success=False, error="not_found")
            if row["verified"]:
                return VerifyResult(
                    success=False,
                    error="already_verified",
                    voucher_id=row["id"],
                    state=row["state"],
                )
            if row["state"] != VoucherState.ISSUED:
                return VerifyResult(
                    success=False,
                    error="invalid_state",
                    voucher_id=row["id"],
                    state=row["state"],
                )

            cur.execute(
                """
                UPDATE vouchers
                SET verified = TRUE, state = 'verified',
                    verifier_id = %s, verified_at = NOW()
                WHERE id = %s
                RETURNING verified_at
                """,
                (verifier_id, row["id"]),
            )
            updated = cur.fetchone()

        return VerifyResult(
            success=True,
            voucher_id=row["id"],
            state=VoucherState.VERIFIED.value,
            verified_at=updated["verified_at"] if updated else None,
        )

    def _to_record(self, row: dict[str, Any]) -> VoucherRecord:
        work_site = None
        if row["work_site_id"] is not None:
            work_site = WorkSite(
                id=row["work_site_id"],
                name=row["work_site_name"],
                cost_center=row["cost_center"],
                company_name=row["company_name"],
            )
        operator = None
        if row["operator_id"] is not None:
            operator = Operator(
                id=row["operator_id"],
                full_name=row["operator_name"],
                association_id=row["association_id"],
                association_name=row["association_name"],
            )
        vehicle = None
        if row["vehicle_id"] is not None:
            vehicle = Vehicle(id=row["vehicle_id"], plates=row["plates"])

        return VoucherRecord(
            id=row["id"],
            code=row["code"],
            state=VoucherState(row["state"]),
            category=VoucherCategory(row["category"]),
            verified=bool(row["verified"]),
            verifier_id=row["verifier_id"],
            verified_at=row["verified_at"],
            created_at=row["created_at"],
            work_site=work_site,
            operator=operator,
            vehicle=vehicle,
            creator_name=row["creator_name"] or None,
            material_lines=tuple(
                MaterialLine(
                    id=line["id"],
                    material=line.get("material"),
                    material_type=line.get("material_type"),
                    capacity_m3=_decimal(line.get("capacity_m3")),
                    distance_km=_decimal(line.get("distance_km")),
                    ordered_m3=_decimal(line.get("ordered_m3")),
                    weight_tons=_decimal(line.get("weight_tons")),
                    quarry=line.get("quarry"),
                )
                for line in row["material_lines"] or []
            ),
            rental_lines=tuple(
                RentalLine(
                    id=line["id"],
                    material=line.get("material"),
                    capacity_m3=_decimal(line.get("capacity_m3")),
                    start_time=_text(line.get("start_time")),
                    end_time=_text(line.get("end_time")),
                    total_hours=_decimal(line.get("total_hours")),
                    total_days=_decimal(line.get("total_days")),
                    hourly_rate=_decimal(line.get("hourly_rate")),
                    daily_rate=_decimal(line.get("daily_rate")),
                    total_cost=_decimal(line.get("total_cost")),
                    trips=line.get("trips"),
                )
                for line in row["rental_lines"] or []
            ),
        )
