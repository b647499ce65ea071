from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal

from ..core.enums import PersonStatus


@dataclass(frozen=True)
class Student:
    """Domain entity: student as seen by billing (read-only directory row)."""

    student_id: str
    name: str
    status: PersonStatus = PersonStatus.ACTIVE

    @property
    def is_active(self) -> bool:
        return self.status == PersonStatus.ACTIVE


@dataclass(frozen=True)
class Staff:
    """Domain entity: staff member as seen by payroll.

    Note: `salary` is the current monthly base; slips snapshot it at generation time.
    """

    staff_id: str
    name: str
    salary: Decimal
    designation: str = ""
    status: PersonStatus = PersonStatus.ACTIVE

    @property
    def is_active(self) -> bool:
        return self.status == PersonStatus.ACTIVE
