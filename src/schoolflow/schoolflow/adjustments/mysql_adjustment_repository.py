from __future__ import annotations

from typing import Optional, Sequence

from ..core.enums import PayrollAdjustmentType, StudentAdjustmentType
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone, to_decimal
from .model import PENDING, Adjustment, Applied, PayrollAdjustment, StudentAdjustment
from .repository import AdjustmentRepository


class _MySQLAdjustmentRepository(AdjustmentRepository):
    """Shared SQL for the two adjustment tables.

    Table layout: id, <owner column>, type, amount, description, effective_date,
    <document column> (NULL while Pending).
    """

    table: str = ""
    owner_column: str = ""
    document_column: str = ""

    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def _build(self, row: dict) -> Adjustment:
        raise NotImplementedError

    def _columns(self) -> str:
        return f"id, {self.owner_column} AS owner_id, type, amount, description, effective_date, {self.document_column} AS document_id"

    def _select(self, where: str, params: tuple) -> list[Adjustment]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"SELECT {self._columns()} FROM {self.table} WHERE {where} ORDER BY effective_date, id",
                params,
            )
            return [self._build(r) for r in fetchall(cur)]

    def get_by_id(self, adjustment_id: str) -> Optional[Adjustment]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {self._columns()} FROM {self.table} WHERE id=%s", (adjustment_id,))
            row = fetchone(cur)
            return self._build(row) if row else None

    def list_all(self) -> Sequence[Adjustment]:
        return self._select("1=1", ())

    def list_for_owner(self, owner_id: str) -> Sequence[Adjustment]:
        return self._select(f"{self.owner_column}=%s", (owner_id,))

    def list_pending_for_owner(self, owner_id: str) -> Sequence[Adjustment]:
        return self._select(f"{self.owner_column}=%s AND {self.document_column} IS NULL", (owner_id,))

    def list_for_document(self, document_id: str) -> Sequence[Adjustment]:
        return self._select(f"{self.document_column}=%s", (document_id,))

    def add(self, adjustment: Adjustment) -> None:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                INSERT INTO {self.table}(id, {self.owner_column}, type, amount, description, effective_date, {self.document_column})
                VALUES(%s,%s,%s,%s,%s,%s,%s)
                """,
                (
                    adjustment.adjustment_id,
                    adjustment.owner_id,
                    adjustment.type.value,
                    adjustment.amount,
                    adjustment.description,
                    adjustment.effective_date,
                    adjustment.document_id,
                ),
            )

    def update(self, adjustment: Adjustment) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                UPDATE {self.table}
                SET type=%s, amount=%s, description=%s, effective_date=%s, {self.document_column}=%s
                WHERE id=%s
                """,
                (
                    adjustment.type.value,
                    adjustment.amount,
                    adjustment.description,
                    adjustment.effective_date,
                    adjustment.document_id,
                    adjustment.adjustment_id,
                ),
            )
            return cur.rowcount > 0

    def delete(self, adjustment_id: str) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"DELETE FROM {self.table} WHERE id=%s", (adjustment_id,))
            return cur.rowcount > 0


def _state(row: dict):
    return Applied(str(row["document_id"])) if row.get("document_id") else PENDING


class MySQLStudentAdjustmentRepository(_MySQLAdjustmentRepository):
    table = "student_adjustments"
    owner_column = "student_id"
    document_column = "invoice_id"

    def _build(self, row: dict) -> StudentAdjustment:
        return StudentAdjustment(
            adjustment_id=str(row["id"]),
            owner_id=str(row["owner_id"]),
            type=StudentAdjustmentType(row["type"]),
            amount=to_decimal(row["amount"]),
            description=row["description"],
            effective_date=row["effective_date"],
            state=_state(row),
        )


class MySQLPayrollAdjustmentRepository(_MySQLAdjustmentRepository):
    table = "salary_adjustments"
    owner_column = "staff_id"
    document_column = "slip_id"

    def _build(self, row: dict) -> PayrollAdjustment:
        return PayrollAdjustment(
            adjustment_id=str(row["id"]),
            owner_id=str(row["owner_id"]),
            type=PayrollAdjustmentType(row["type"]),
            amount=to_decimal(row["amount"]),
            description=row["description"],
            effective_date=row["effective_date"],
            state=_state(row),
        )
