from __future__ import annotations

import logging
import uuid
from datetime import datetime
from typing import Callable, Iterable, Optional, Sequence

from ..adjustments.model import Adjustment
from ..adjustments.service import PayrollAdjustmentLedger
from ..attendance.service import AttendanceReader
from ..common.locking import WriteLock
from ..common.results import GenerationFailure, GenerationResult
from ..common.validators import require_period
from ..core.exceptions import NotFoundError
from ..people.model import Staff
from ..people.repository import StaffDirectory
from .calculator.base import PayrollCalculator
from .calculator.standard_calculator import StandardPayrollCalculator
from .model import SalarySlip, SlipAdjustmentLine
from .repository import SlipRepository

logger = logging.getLogger(__name__)


class PayrollGenerator:
    """Builds one salary slip per staff member and period."""

    def __init__(
        self,
        slips: SlipRepository,
        staff: StaffDirectory,
        attendance: AttendanceReader,
        adjustments: PayrollAdjustmentLedger,
        *,
        calculator: Optional[PayrollCalculator] = None,
        lock: Optional[WriteLock] = None,
        id_factory: Optional[Callable[[], str]] = None,
    ):
        self._slips = slips
        self._staff = staff
        self._attendance = attendance
        self._adjustments = adjustments
        self._calculator = calculator or StandardPayrollCalculator()
        self._lock = lock or WriteLock()
        self._new_id = id_factory or (lambda: str(uuid.uuid4()))

    def _targets(self, staff_ids: Optional[Iterable[str]], result: GenerationResult) -> list[Staff]:
        if not staff_ids:
            return list(self._staff.list_active())

        targets = []
        for staff_id in staff_ids:
            member = self._staff.get_by_id(staff_id)
            if not member:
                result.failures.append(GenerationFailure(entity_id=staff_id, message=f"Staff {staff_id} not found"))
                continue
            targets.append(member)
        return targets

    def generate_payroll(
        self,
        period: str,
        staff_ids: Optional[Sequence[str]] = None,
        *,
        now: Optional[datetime] = None,
    ) -> GenerationResult:
        """Generate slips for `period`; staff who already have one are skipped."""
        period = require_period(period)
        now = now or datetime.now()
        result = GenerationResult()

        for member in self._targets(staff_ids, result):
            try:
                slip = self._generate_for_staff(member, period, now)
            except Exception as e:
                logger.exception("Payroll generation failed for staff %s (%s)", member.staff_id, period)
                result.failures.append(GenerationFailure(entity_id=member.staff_id, message=str(e)))
                continue

            if slip:
                result.document_ids.append(slip.slip_id)
            else:
                result.skipped.append(member.staff_id)

        logger.info(
            "Payroll run %s: generated=%d skipped=%d failed=%d",
            period,
            result.generated,
            len(result.skipped),
            len(result.failures),
        )
        return result

    def generate_for_staff(self, staff_id: str, period: str, *, now: Optional[datetime] = None) -> Optional[SalarySlip]:
        """Single-staff variant: errors propagate to the caller."""
        member = self._staff.get_by_id(staff_id)
        if not member:
            raise NotFoundError(f"Staff {staff_id} not found")
        return self._generate_for_staff(member, require_period(period), now or datetime.now())

    def _generate_for_staff(self, member: Staff, period: str, now: datetime) -> Optional[SalarySlip]:
        with self._lock:
            if self._slips.find_for_staff_period(member.staff_id, period):
                return None

            stats = self._attendance.staff_stats(member.staff_id, period)
            pending = list(self._adjustments.pending_for(member.staff_id))
            lines = tuple(SlipAdjustmentLine.of(adj) for adj in pending)
            figures = self._calculator.compute(
                base_salary=member.salary,
                stats=stats,
                period=period,
                adjustments=lines,
            )

            slip = SalarySlip(
                slip_id=self._new_id(),
                staff_id=member.staff_id,
                staff_name=member.name,
                period=period,
                base_salary=member.salary,
                attendance=stats,
                attendance_deduction=figures.attendance_deduction,
                adjustments=lines,
                total_bonuses=figures.total_bonuses,
                total_deductions=figures.total_deductions,
                net_salary=figures.net_salary,
                generated_at=now,
            )
            self._slips.add(slip)
            self._apply_adjustments(slip, pending)

        logger.info(
            "Generated slip %s for staff %s (%s): net=%s",
            slip.slip_id,
            member.staff_id,
            period,
            slip.net_salary,
        )
        return slip

    def _apply_adjustments(self, slip: SalarySlip, pending: Sequence[Adjustment]) -> None:
        applied: list[Adjustment] = []
        try:
            for adj in pending:
                applied.append(self._adjustments.apply(adj, slip.slip_id))
        except Exception:
            for adj in applied:
                self._adjustments.release(adj)
            self._slips.delete(slip.slip_id)
            raise
