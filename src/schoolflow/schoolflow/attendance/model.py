from __future__ import annotations

from dataclasses import dataclass
from datetime import date

from ..core.enums import AttendanceStatus, EntityType


@dataclass(frozen=True)
class AttendanceRecord:
    """Domain entity: one attendance mark. Re-marking the same (entity, date) replaces it."""

    entity_id: str
    entity_type: EntityType
    work_date: date
    status: AttendanceStatus


@dataclass(frozen=True)
class AttendanceStats:
    """Per-period summary used by payroll (snapshotted onto the slip)."""

    present: int = 0
    late: int = 0
    absent: int = 0
    paid_leave: int = 0

    @property
    def total_days(self) -> int:
        return self.present + self.late + self.absent + self.paid_leave

    @property
    def unpaid_days(self) -> int:
        return self.absent

    def as_dict(self) -> dict:
        return {
            "present": self.present,
            "late": self.late,
            "absent": self.absent,
            "paid_leave": self.paid_leave,
            "total_days": self.total_days,
        }
