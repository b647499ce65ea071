from __future__ import annotations

from dataclasses import dataclass, field, replace
from datetime import date, datetime
from decimal import Decimal
from typing import Optional

from ..core.constants import ZERO
from ..core.enums import DocumentStatus, ItemKind


@dataclass(frozen=True)
class InvoiceItem:
    description: str
    amount: Decimal
    kind: ItemKind
    adjustment_id: Optional[str] = None

    @property
    def is_tuition(self) -> bool:
        return self.kind == ItemKind.TUITION

    def as_dict(self) -> dict:
        return {
            "description": self.description,
            "amount": str(self.amount),
            "kind": self.kind.value,
            "adjustment_id": self.adjustment_id,
        }

    @classmethod
    def from_dict(cls, data: dict) -> "InvoiceItem":
        return cls(
            description=data["description"],
            amount=Decimal(str(data["amount"])),
            kind=ItemKind(data["kind"]),
            adjustment_id=data.get("adjustment_id"),
        )


@dataclass(frozen=True)
class Invoice:
    """Student invoice.

    `amount_due` is derived from the items, so it cannot drift from them.
    """

    invoice_id: str
    invoice_no: str
    student_id: str
    student_name: str
    period: str
    due_date: date
    status: DocumentStatus = DocumentStatus.PENDING
    items: tuple[InvoiceItem, ...] = ()
    payment_date: Optional[date] = None
    created_at: datetime = field(default_factory=datetime.now)

    @property
    def amount_due(self) -> Decimal:
        return sum((i.amount for i in self.items), ZERO)

    @property
    def is_paid(self) -> bool:
        return self.status == DocumentStatus.PAID

    @property
    def has_tuition(self) -> bool:
        return any(i.is_tuition for i in self.items)

    def with_item(self, item: InvoiceItem) -> "Invoice":
        return replace(self, items=self.items + (item,))

    def paid_on(self, day: date) -> "Invoice":
        return replace(self, status=DocumentStatus.PAID, payment_date=day)

    def as_dict(self) -> dict:
        return {
            "id": self.invoice_id,
            "invoice_no": self.invoice_no,
            "student_id": self.student_id,
            "student_name": self.student_name,
            "period": self.period,
            "due_date": self.due_date.isoformat(),
            "status": self.status.value,
            "items": [i.as_dict() for i in self.items],
            "amount_due": str(self.amount_due),
            "payment_date": self.payment_date.isoformat() if self.payment_date else None,
        }
