from __future__ import annotations

from ..common.datetime_utils import period_bounds
from ..core.enums import AttendanceStatus, EntityType
from .model import AttendanceStats
from .repository import AttendanceRepository

BILLABLE_STATUSES = frozenset({AttendanceStatus.PRESENT, AttendanceStatus.LATE})


class AttendanceReader:
    """Read-only queries over attendance used by invoice and payroll generation."""

    def __init__(self, attendance: AttendanceRepository):
        self._attendance = attendance

    def billable_student_days(self, student_id: str, period: str) -> int:
        """Days in the period the student was Present or Late."""
        start, end = period_bounds(period)
        rows = self._attendance.list_for_entity(
            entity_id=student_id,
            entity_type=EntityType.STUDENT,
            start_date=start,
            end_date=end,
        )
        return sum(1 for r in rows if r.status in BILLABLE_STATUSES)

    def staff_stats(self, staff_id: str, period: str) -> AttendanceStats:
        start, end = period_bounds(period)
        rows = self._attendance.list_for_entity(
            entity_id=staff_id,
            entity_type=EntityType.STAFF,
            start_date=start,
            end_date=end,
        )

        counts = {status: 0 for status in AttendanceStatus}
        for r in rows:
            counts[r.status] += 1

        return AttendanceStats(
            present=counts[AttendanceStatus.PRESENT],
            late=counts[AttendanceStatus.LATE],
            absent=counts[AttendanceStatus.ABSENT] + counts[AttendanceStatus.UNPAID_LEAVE],
            paid_leave=counts[AttendanceStatus.PAID_LEAVE],
        )
