from __future__ import annotations

from dataclasses import dataclass, replace
from datetime import date
from decimal import Decimal
from enum import Enum
from typing import Optional, Union

from ..core.enums import PayrollAdjustmentType, StudentAdjustmentType
from ..core.exceptions import InvalidStateError


@dataclass(frozen=True)
class Pending:
    """Waiting to be swept into the next invoice/slip."""


@dataclass(frozen=True)
class Applied:
    """Consumed by exactly one live document."""

    document_id: str


AdjustmentState = Union[Pending, Applied]

PENDING = Pending()


@dataclass(frozen=True)
class Adjustment:
    """Shared shape of student charges and payroll adjustments.

    The state is a tagged variant, so "applied without an owning document" cannot be built.
    Transitions return new instances; persisting them is the ledger's job.
    """

    adjustment_id: str
    owner_id: str
    type: Enum
    amount: Decimal
    description: str
    effective_date: date
    state: AdjustmentState = PENDING

    @property
    def is_applied(self) -> bool:
        return isinstance(self.state, Applied)

    @property
    def document_id(self) -> Optional[str]:
        return self.state.document_id if isinstance(self.state, Applied) else None

    @property
    def line_description(self) -> str:
        return f"{self.type.value}: {self.description}"

    def apply_to(self, document_id: str):
        if self.is_applied:
            raise InvalidStateError(f"Adjustment {self.adjustment_id} is already applied to {self.document_id}")
        return replace(self, state=Applied(document_id))

    def release(self, *, effective_date: Optional[date] = None):
        if not self.is_applied:
            raise InvalidStateError(f"Adjustment {self.adjustment_id} is not applied")
        return replace(self, state=PENDING, effective_date=effective_date or self.effective_date)

    def as_dict(self) -> dict:
        return {
            "id": self.adjustment_id,
            "owner_id": self.owner_id,
            "type": self.type.value,
            "amount": str(self.amount),
            "description": self.description,
            "effective_date": self.effective_date.isoformat(),
            "status": "Applied" if self.is_applied else "Pending",
            "document_id": self.document_id,
        }


@dataclass(frozen=True)
class StudentAdjustment(Adjustment):
    """One-off student charge (fine, materials, ...) billed through an invoice."""

    type: StudentAdjustmentType

    @property
    def student_id(self) -> str:
        return self.owner_id


@dataclass(frozen=True)
class PayrollAdjustment(Adjustment):
    """Bonus, fine, advance or deduction settled through a salary slip."""

    type: PayrollAdjustmentType

    @property
    def staff_id(self) -> str:
        return self.owner_id

    @property
    def is_addition(self) -> bool:
        return self.type.is_addition
