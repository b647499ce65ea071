from __future__ import annotations

import json
from typing import Optional, Sequence

from ..core.enums import DocumentStatus
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone
from .model import Invoice, InvoiceItem
from .repository import InvoiceNumberSequence, InvoiceRepository

_COLUMNS = """
    id, invoice_no, student_id, student_name, period, due_date, status, items, amount_due,
    payment_date, created_at
"""


def _to_invoice(row: dict) -> Invoice:
    raw_items = row["items"]
    if isinstance(raw_items, (bytes, bytearray)):
        raw_items = raw_items.decode("utf-8")
    return Invoice(
        invoice_id=str(row["id"]),
        invoice_no=row["invoice_no"],
        student_id=str(row["student_id"]),
        student_name=row["student_name"],
        period=row["period"],
        due_date=row["due_date"],
        status=DocumentStatus(row["status"]),
        items=tuple(InvoiceItem.from_dict(i) for i in json.loads(raw_items or "[]")),
        payment_date=row.get("payment_date"),
        created_at=row["created_at"],
    )


class MySQLInvoiceRepository(InvoiceRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def get_by_id(self, invoice_id: str) -> Optional[Invoice]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_COLUMNS} FROM invoices WHERE id=%s", (invoice_id,))
            row = fetchone(cur)
            return _to_invoice(row) if row else None

    def list_invoices(self, *, student_id: Optional[str] = None, period: Optional[str] = None) -> Sequence[Invoice]:
        where = []
        params: list = []
        if student_id:
            where.append("student_id=%s")
            params.append(student_id)
        if period:
            where.append("period=%s")
            params.append(period)

        sql = f"SELECT {_COLUMNS} FROM invoices"
        if where:
            sql += " WHERE " + " AND ".join(where)
        sql += " ORDER BY due_date DESC, invoice_seq DESC"

        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(sql, tuple(params))
            return [_to_invoice(r) for r in fetchall(cur)]

    def find_latest_pending_for_student(self, student_id: str) -> Optional[Invoice]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT {_COLUMNS} FROM invoices
                WHERE student_id=%s AND status=%s
                ORDER BY invoice_seq DESC
                LIMIT 1
                """,
                (student_id, DocumentStatus.PENDING.value),
            )
            row = fetchone(cur)
            return _to_invoice(row) if row else None

    def add(self, invoice: Invoice) -> None:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT INTO invoices(
                    id, invoice_no, invoice_seq, student_id, student_name, period, due_date, status,
                    items, amount_due, payment_date, created_at
                )
                VALUES(%s,%s,%s,%s,%s,%s,%s,%s,%s,%s,%s,%s)
                """,
                (
                    invoice.invoice_id,
                    invoice.invoice_no,
                    _seq_of(invoice.invoice_no),
                    invoice.student_id,
                    invoice.student_name,
                    invoice.period,
                    invoice.due_date,
                    invoice.status.value,
                    json.dumps([i.as_dict() for i in invoice.items]),
                    invoice.amount_due,
                    invoice.payment_date,
                    invoice.created_at,
                ),
            )

    def update(self, invoice: Invoice) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                UPDATE invoices
                SET due_date=%s, status=%s, items=%s, amount_due=%s, payment_date=%s
                WHERE id=%s
                """,
                (
                    invoice.due_date,
                    invoice.status.value,
                    json.dumps([i.as_dict() for i in invoice.items]),
                    invoice.amount_due,
                    invoice.payment_date,
                    invoice.invoice_id,
                ),
            )
            return cur.rowcount > 0

    def delete(self, invoice_id: str) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("DELETE FROM invoices WHERE id=%s", (invoice_id,))
            return cur.rowcount > 0


def _seq_of(invoice_no: str) -> int:
    digits = "".join(ch for ch in invoice_no if ch.isdigit())
    return int(digits or 0)


class MySQLInvoiceNumberSequence(InvoiceNumberSequence):
    """One-row counter table; LAST_INSERT_ID(expr) makes the increment-and-read atomic."""

    def __init__(self, conn_factory: DatabaseConnection, *, start: int):
        self._conn_factory = conn_factory
        self._start = int(start)

    def next_value(self) -> int:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                "INSERT IGNORE INTO invoice_sequence(id, last_value) VALUES(1, %s)",
                (self._start,),
            )
            cur.execute("UPDATE invoice_sequence SET last_value = LAST_INSERT_ID(last_value + 1) WHERE id=1")
            cur.execute("SELECT LAST_INSERT_ID() AS value")
            row = fetchone(cur)
            return int(row["value"])
