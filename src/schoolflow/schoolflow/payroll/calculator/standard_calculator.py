from __future__ import annotations

from decimal import ROUND_HALF_UP, Decimal

from ...attendance.model import AttendanceStats
from ...common.datetime_utils import days_in_period
from ...core.constants import CENT, ZERO
from .base import PayrollCalculator


class StandardPayrollCalculator(PayrollCalculator):
    """Standard rule: base / calendar days in the period per unpaid day, net not below 0."""

    def attendance_deduction(self, *, base_salary: Decimal, stats: AttendanceStats, period: str) -> Decimal:
        if stats.unpaid_days <= 0:
            return ZERO.quantize(CENT)
        per_day = base_salary / days_in_period(period)
        return (per_day * stats.unpaid_days).quantize(CENT, rounding=ROUND_HALF_UP)

    def net_salary(
        self,
        *,
        base_salary: Decimal,
        attendance_deduction: Decimal,
        total_deductions: Decimal,
        total_bonuses: Decimal,
    ) -> Decimal:
        net = base_salary - attendance_deduction - total_deductions + total_bonuses
        return max(net, ZERO).quantize(CENT, rounding=ROUND_HALF_UP)
