from __future__ import annotations

from typing import Sequence

from ..core.enums import TransactionStatus, TransactionType
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, to_decimal
from .model import FinancialTransaction
from .repository import TransactionLedger


class MySQLTransactionLedger(TransactionLedger):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def append(self, txn: FinancialTransaction) -> None:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT INTO transactions(id, type, amount, txn_date, entity_id, description, status)
                VALUES(%s,%s,%s,%s,%s,%s,%s)
                """,
                (
                    txn.transaction_id,
                    txn.type.value,
                    txn.amount,
                    txn.txn_date,
                    txn.entity_id,
                    txn.description,
                    txn.status.value,
                ),
            )

    def list_recent(self, limit: int) -> Sequence[FinancialTransaction]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                SELECT id, type, amount, txn_date, entity_id, description, status
                FROM transactions
                ORDER BY txn_date DESC, created_at DESC
                LIMIT %s
                """,
                (int(limit),),
            )
            return [
                FinancialTransaction(
                    transaction_id=str(r["id"]),
                    type=TransactionType(r["type"]),
                    amount=to_decimal(r["amount"]),
                    txn_date=r["txn_date"],
                    entity_id=str(r["entity_id"]),
                    description=r.get("description") or "",
                    status=TransactionStatus(r["status"]),
                )
                for r in fetchall(cur)
            ]
