from __future__ import annotations

import logging
import uuid
from dataclasses import replace
from datetime import date
from typing import Any, Callable, Optional, Sequence

from ..adjustments.model import Adjustment
from ..adjustments.service import PayrollAdjustmentLedger
from ..attendance.service import AttendanceReader
from ..common.datetime_utils import first_day_of_next_period
from ..common.locking import WriteLock
from ..common.validators import require_choice, require_period
from ..core.enums import DetachMode, TransactionType
from ..core.exceptions import InvalidStateError, NotFoundError
from ..ledger.model import FinancialTransaction
from ..ledger.repository import TransactionLedger
from .calculator.base import PayrollCalculator
from .calculator.standard_calculator import StandardPayrollCalculator
from .model import SalarySlip, SlipAdjustmentLine
from .repository import SlipRepository

logger = logging.getLogger(__name__)


class PayrollLifecycleManager:
    """Refresh, payment, deletion and adjustment detachment for salary slips."""

    def __init__(
        self,
        slips: SlipRepository,
        attendance: AttendanceReader,
        adjustments: PayrollAdjustmentLedger,
        transactions: TransactionLedger,
        *,
        calculator: Optional[PayrollCalculator] = None,
        lock: Optional[WriteLock] = None,
        allow_paid_deletion: bool = True,
        id_factory: Optional[Callable[[], str]] = None,
    ):
        self._slips = slips
        self._attendance = attendance
        self._adjustments = adjustments
        self._transactions = transactions
        self._calculator = calculator or StandardPayrollCalculator()
        self._lock = lock or WriteLock()
        self._allow_paid_deletion = bool(allow_paid_deletion)
        self._new_id = id_factory or (lambda: str(uuid.uuid4()))

    def get_slip(self, slip_id: str) -> SalarySlip:
        slip = self._slips.get_by_id(slip_id)
        if not slip:
            raise NotFoundError(f"Salary slip {slip_id} not found")
        return slip

    def list_slips(self, period: str) -> Sequence[SalarySlip]:
        return self._slips.list_for_period(require_period(period))

    def _require_pending(self, slip: SalarySlip, action: str) -> None:
        if slip.is_paid:
            raise InvalidStateError(f"Cannot {action} a paid salary slip ({slip.staff_name}, {slip.period})")

    def refresh_slip(self, slip_id: str) -> SalarySlip:
        """Recompute from current attendance and the adjustments still linked to the slip.

        Pending adjustments are not swept in here; only generation does that.
        """
        with self._lock:
            slip = self.get_slip(slip_id)
            self._require_pending(slip, "refresh")

            stats = self._attendance.staff_stats(slip.staff_id, slip.period)
            lines = tuple(SlipAdjustmentLine.of(adj) for adj in self._adjustments.attached_to(slip.slip_id))
            figures = self._calculator.compute(
                base_salary=slip.base_salary,
                stats=stats,
                period=slip.period,
                adjustments=lines,
            )
            refreshed = replace(
                slip,
                attendance=stats,
                attendance_deduction=figures.attendance_deduction,
                adjustments=lines,
                total_bonuses=figures.total_bonuses,
                total_deductions=figures.total_deductions,
                net_salary=figures.net_salary,
            )
            self._slips.update(refreshed)

        logger.info("Refreshed slip %s: net %s -> %s", slip.slip_id, slip.net_salary, refreshed.net_salary)
        return refreshed

    def mark_paid(self, slip_id: str, *, today: Optional[date] = None) -> SalarySlip:
        today = today or date.today()
        with self._lock:
            slip = self.get_slip(slip_id)
            if slip.is_paid:
                raise InvalidStateError(f"Salary slip for {slip.staff_name} ({slip.period}) is already paid")

            paid = slip.paid_on(today)
            self._slips.update(paid)
            try:
                self._transactions.append(
                    FinancialTransaction(
                        transaction_id=self._new_id(),
                        type=TransactionType.SALARY,
                        amount=paid.net_salary,
                        txn_date=today,
                        entity_id=paid.staff_id,
                        description=f"Salary Payment: {paid.period}",
                    )
                )
            except Exception:
                self._slips.update(slip)
                raise

        logger.info("Slip %s paid (%s)", paid.slip_id, paid.net_salary)
        return paid

    def delete_slip(self, slip_id: str) -> list[str]:
        """Delete the slip and return its adjustments to the pending queue."""
        with self._lock:
            slip = self.get_slip(slip_id)
            if slip.is_paid and not self._allow_paid_deletion:
                raise InvalidStateError(f"Paid salary slip for {slip.staff_name} ({slip.period}) cannot be deleted")

            released = self._adjustments.release_all(slip.slip_id)
            try:
                self._slips.delete(slip.slip_id)
            except Exception:
                self._adjustments.reapply(released, slip.slip_id)
                raise

        logger.info("Deleted slip %s (%s), released %d adjustment(s)", slip.slip_id, slip.status.value, len(released))
        return [adj.adjustment_id for adj in released]

    def detach_adjustment_from_slip(self, slip_id: str, adjustment_id: str, mode: Any) -> Optional[Adjustment]:
        """Take one applied adjustment off a Pending slip.

        `cancel` deletes it for good; `postpone` puts it back in the queue dated the first
        day of the month after the slip's period. Call `refresh_slip` afterwards to re-derive
        the slip totals.
        """
        mode = require_choice(mode, DetachMode, "Mode")
        with self._lock:
            slip = self.get_slip(slip_id)
            self._require_pending(slip, "change")

            adj = self._adjustments.get(adjustment_id)
            if adj.document_id != slip.slip_id:
                raise InvalidStateError(f"Adjustment {adjustment_id} is not applied to slip {slip_id}")

            if mode == DetachMode.CANCEL:
                self._adjustments.discard(adj)
                detached = None
            else:
                detached = self._adjustments.release(adj, effective_date=first_day_of_next_period(slip.period))

        logger.info("Detached adjustment %s from slip %s (%s)", adjustment_id, slip_id, mode.value)
        return detached
