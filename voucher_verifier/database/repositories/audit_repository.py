from typing import Any

import psycopg
from psycopg.rows import dict_row
from psycopg.types.json import Jsonb

from voucher_verifier.database.connection import get_connection
from voucher_verifier.database.models import AuditEntry
from voucher_verifier.verification.exceptions import AuditError


class AuditRepository:
    """Append-only access to the voucher_audit_log table."""

    def append(
        self,
        voucher_id: int,
        actor_id: int,
        action_kind: str,
        metadata: dict[str, Any] | None = None,
    ) -> AuditEntry:
        """Insert one audit entry and return it as stored.

        Raises:
            AuditError: if the insert fails or the metadata is not JSON
                serializable.
        """
        payload = dict(metadata or {})
        try:
            with get_connection() as conn:
                with conn.cursor(row_factory=dict_row) as cur:
                    cur.execute(
                        """
                        INSERT INTO voucher_audit_log
                            (voucher_id, actor_id, action_kind, metadata, created_at)
                        VALUES (%s, %s, %s, %s, NOW())
                        RETURNING id, created_at
                        """,
                        (voucher_id, actor_id, action_kind, Jsonb(payload)),
                    )
                    row = cur.fetchone()
                conn.commit()
        except (psycopg.Error, TypeError, ValueError) as exc:
            # TypeError/ValueError come from metadata Jsonb cannot encode.
            raise AuditError(
                f"Audit entry for voucher {voucher_id} could not be written: {exc}"
            ) from exc

        if row is None:
            raise AuditError(f"Audit entry for voucher {voucher_id} was not returned")

        return AuditEntry(
            id=row["id"],
            voucher_id=voucher_id,
            actor_id=actor_id,
            action_kind=action_kind,
            metadata=payload,
            created_at=row["created_at"],
        )

    def find_by_voucher(self, voucher_id: int) -> list[AuditEntry]:
        """All audit entries of a voucher, oldest first."""
        with get_connection() as conn:
            with conn.cursor(row_factory=dict_row) as cur:
                cur.execute(
                    """
                    SELECT id, voucher_id, actor_id, action_kind, metadata, created_at
                    FROM voucher_audit_log
                    WHERE voucher_id = %s
                    ORDER BY created_at, id
                    """,
                    (voucher_id,),
                )
                rows = cur.fetchall()

        return [
            AuditEntry(
                id=row["id"],
                voucher_id=row["voucher_id"],
                actor_id=row["actor_id"],
                action_kind=row["action_kind"],
                metadata=row["metadata"] or {},
                created_at=row["created_at"],
            )
            for row in rows
        ]
