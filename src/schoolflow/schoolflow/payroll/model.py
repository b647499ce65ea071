from __future__ import annotations

from dataclasses import dataclass, field, replace
from datetime import date, datetime
from decimal import Decimal
from typing import Optional

from ..adjustments.model import PayrollAdjustment
from ..attendance.model import AttendanceStats
from ..core.constants import ZERO
from ..core.enums import DocumentStatus, PayrollAdjustmentType


@dataclass(frozen=True)
class SlipAdjustmentLine:
    """Snapshot of an applied payroll adjustment as printed on the slip."""

    adjustment_id: str
    type: PayrollAdjustmentType
    amount: Decimal
    description: str

    @property
    def is_addition(self) -> bool:
        return self.type.is_addition

    @classmethod
    def of(cls, adj: PayrollAdjustment) -> "SlipAdjustmentLine":
        return cls(adjustment_id=adj.adjustment_id, type=adj.type, amount=adj.amount, description=adj.description)

    def as_dict(self) -> dict:
        return {
            "adjustment_id": self.adjustment_id,
            "type": self.type.value,
            "amount": str(self.amount),
            "description": self.description,
        }

    @classmethod
    def from_dict(cls, data: dict) -> "SlipAdjustmentLine":
        return cls(
            adjustment_id=data["adjustment_id"],
            type=PayrollAdjustmentType(data["type"]),
            amount=Decimal(str(data["amount"])),
            description=data["description"],
        )


@dataclass(frozen=True)
class SalarySlip:
    """Monthly salary slip.

    Money fields are produced together by the payroll calculator; nothing edits them one
    by one. Immutable once Paid.
    """

    slip_id: str
    staff_id: str
    staff_name: str
    period: str
    base_salary: Decimal
    attendance: AttendanceStats = field(default_factory=AttendanceStats)
    attendance_deduction: Decimal = ZERO
    adjustments: tuple[SlipAdjustmentLine, ...] = ()
    total_bonuses: Decimal = ZERO
    total_deductions: Decimal = ZERO
    net_salary: Decimal = ZERO
    status: DocumentStatus = DocumentStatus.PENDING
    generated_at: datetime = field(default_factory=datetime.now)
    paid_at: Optional[date] = None

    @property
    def is_paid(self) -> bool:
        return self.status == DocumentStatus.PAID

    @property
    def adjustment_ids(self) -> list[str]:
        return [a.adjustment_id for a in self.adjustments]

    def paid_on(self, day: date) -> "SalarySlip":
        return replace(self, status=DocumentStatus.PAID, paid_at=day)

    def as_dict(self) -> dict:
        return {
            "id": self.slip_id,
            "staff_id": self.staff_id,
            "staff_name": self.staff_name,
            "period": self.period,
            "base_salary": str(self.base_salary),
            "attendance": self.attendance.as_dict(),
            "attendance_deduction": str(self.attendance_deduction),
            "adjustments": [a.as_dict() for a in self.adjustments],
            "total_bonuses": str(self.total_bonuses),
            "total_deductions": str(self.total_deductions),
            "net_salary": str(self.net_salary),
            "status": self.status.value,
            "generated_at": self.generated_at.isoformat(timespec="seconds"),
            "paid_at": self.paid_at.isoformat() if self.paid_at else None,
        }
