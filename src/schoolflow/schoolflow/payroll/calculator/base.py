from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass
from decimal import Decimal
from typing import Iterable

from ...attendance.model import AttendanceStats
from ...core.constants import ZERO
from ..model import SlipAdjustmentLine


@dataclass(frozen=True)
class SlipFigures:
    attendance_deduction: Decimal
    total_bonuses: Decimal
    total_deductions: Decimal
    net_salary: Decimal


class PayrollCalculator(ABC):
    """Calculator interface (Strategy Pattern for payroll)."""

    @abstractmethod
    def attendance_deduction(self, *, base_salary: Decimal, stats: AttendanceStats, period: str) -> Decimal:
        raise NotImplementedError

    @abstractmethod
    def net_salary(
        self,
        *,
        base_salary: Decimal,
        attendance_deduction: Decimal,
        total_deductions: Decimal,
        total_bonuses: Decimal,
    ) -> Decimal:
        raise NotImplementedError

    def compute(
        self,
        *,
        base_salary: Decimal,
        stats: AttendanceStats,
        period: str,
        adjustments: Iterable[SlipAdjustmentLine],
    ) -> SlipFigures:
        lines = list(adjustments)
        bonuses = sum((a.amount for a in lines if a.is_addition), ZERO)
        deductions = sum((a.amount for a in lines if not a.is_addition), ZERO)
        att = self.attendance_deduction(base_salary=base_salary, stats=stats, period=period)
        return SlipFigures(
            attendance_deduction=att,
            total_bonuses=bonuses,
            total_deductions=deductions,
            net_salary=self.net_salary(
                base_salary=base_salary,
                attendance_deduction=att,
                total_deductions=deductions,
                total_bonuses=bonuses,
            ),
        )
