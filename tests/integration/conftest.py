import os
import random
from collections.abc import Callable, Generator
from pathlib import Path
from typing import Any

import psycopg
import pytest

from voucher_verifier.config.settings import Settings
from voucher_verifier.database.connection import close_pool, get_connection, init_pool

SCHEMA = Path(__file__).with_name("schema.sql")


def _test_settings() -> Settings:
    os.environ.setdefault("DB_DATABASE", "vouchers_test")
    os.environ.setdefault("DB_POOL_TIMEOUT_SECONDS", "3")
    os.environ.setdefault("DB_POOL_MAX_SIZE", "20")
    return Settings()


@pytest.fixture(scope="session")
def test_settings() -> Settings:
    return _test_settings()


@pytest.fixture(scope="session")
def integration_pool(test_settings: Settings) -> Generator[None, None, None]:
    try:
        init_pool(test_settings)
        with get_connection() as conn:
            with conn.cursor() as cur:
                cur.execute(SCHEMA.read_text())
            conn.commit()
    except Exception as e:
        close_pool()
        pytest.skip(
            f"PostgreSQL test DB not available: {e}. "
            "Set DB_* env to point at a scratch database"
        )
    try:
        yield
    finally:
        close_pool()


@pytest.fixture
def db_conn(integration_pool: None) -> Generator[psycopg.Connection[Any], None, None]:
    with get_connection() as conn:
        yield conn


@pytest.fixture
def integration_cleanup(
    integration_pool: None,
) -> Generator[list[tuple[str, int]], None, None]:
    cleanup: list[tuple[str, int]] = []
    yield cleanup
    if not cleanup:
        return
    # Detail lines and audit entries cascade with their voucher.
    order = ["vouchers", "operators", "associations", "work_sites", "companies", "vehicles"]
    with get_connection() as conn:
        with conn.cursor() as cur:
            for table in order:
                for kind, row_id in cleanup:
                    if kind == table:
                        cur.execute(f"DELETE FROM {table} WHERE id = %s", (row_id,))
        conn.commit()


def _insert(cur: psycopg.Cursor[Any], sql: str, params: tuple[Any, ...]) -> int:
    cur.execute(sql, params)
    row = cur.fetchone()
    assert row is not None
    return int(row[0])


@pytest.fixture
def seed_voucher(
    db_conn: psycopg.Connection[Any],
    integration_cleanup: list[tuple[str, int]],
) -> Callable[..., tuple[int, str]]:
    """Factory inserting a material voucher with its operator and one line."""

    def seed(
        state: str = "issued",
        verified: bool = False,
        association_name: str | None = "Sindicato Norte",
    ) -> tuple[int, str]:
        code = f"IT-{random.randint(0, 999):03d}-{random.randint(0, 99999):05d}"
        with db_conn.cursor() as cur:
            cur.execute("DELETE FROM vouchers WHERE code = %s", (code,))
            company_id = _insert(
                cur, "INSERT INTO companies (name) VALUES (%s) RETURNING id", ("Obras SA",)
            )
            integration_cleanup.append(("companies", company_id))
            work_site_id = _insert(
                cur,
                "INSERT INTO work_sites (name, cost_center, company_id) "
                "VALUES (%s, %s, %s) RETURNING id",
                ("Tramo 4", "CC-12", company_id),
            )
            integration_cleanup.append(("work_sites", work_site_id))
            association_id = None
            if association_name is not None:
                association_id = _insert(
                    cur,
                    "INSERT INTO associations (name) VALUES (%s) RETURNING id",
                    (association_name,),
                )
                integration_cleanup.append(("associations", association_id))
            operator_id = _insert(
                cur,
                "INSERT INTO operators (full_name, association_id) VALUES (%s, %s) RETURNING id",
                ("Juan Perez", association_id),
            )
            integration_cleanup.append(("operators", operator_id))
            vehicle_id = _insert(
                cur, "INSERT INTO vehicles (plates) VALUES (%s) RETURNING id", ("ABC-123",)
            )
            integration_cleanup.append(("vehicles", vehicle_id))
            voucher_id = _insert(
                cur,
                """
                INSERT INTO vouchers
                    (code, state, category, verified, work_site_id, operator_id, vehicle_id)
                VALUES (%s, %s, 'material', %s, %s, %s, %s)
                RETURNING id
                """,
                (code, state, verified, work_site_id, operator_id, vehicle_id),
            )
            integration_cleanup.append(("vouchers", voucher_id))
            cur.execute(
                """
                INSERT INTO voucher_material_lines
                    (voucher_id, capacity_m3, distance_km, ordered_m3)
                VALUES (%s, 14, 22.5, 14)
                """,
                (voucher_id,),
            )
        db_conn.commit()
        return voucher_id, code

    return seed
