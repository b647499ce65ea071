from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from decimal import Decimal

from ..core.enums import TransactionStatus, TransactionType


@dataclass(frozen=True)
class FinancialTransaction:
    """Cash record appended when an invoice or salary slip is paid."""

    transaction_id: str
    type: TransactionType
    amount: Decimal
    txn_date: date
    entity_id: str
    description: str
    status: TransactionStatus = TransactionStatus.PAID

    def as_dict(self) -> dict:
        return {
            "id": self.transaction_id,
            "type": self.type.value,
            "amount": str(self.amount),
            "date": self.txn_date.isoformat(),
            "entity_id": self.entity_id,
            "description": self.description,
            "status": self.status.value,
        }
