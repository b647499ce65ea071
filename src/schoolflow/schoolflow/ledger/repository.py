from __future__ import annotations

from typing import Protocol, Sequence

from .model import FinancialTransaction


class TransactionLedger(Protocol):
    """Append-only payment/expense ledger. Billing never reads it back."""

    def append(self, txn: FinancialTransaction) -> None:
        raise NotImplementedError

    def list_recent(self, limit: int) -> Sequence[FinancialTransaction]:
        raise NotImplementedError
