from __future__ import annotations

from enum import Enum


class PersonStatus(str, Enum):
    """Directory status for students and staff."""

    ACTIVE = "Active"
    INACTIVE = "Inactive"


class EntityType(str, Enum):
    STUDENT = "Student"
    STAFF = "Staff"


class AttendanceStatus(str, Enum):
    """Attendance marks as stored by the attendance screens."""

    PRESENT = "Present"
    ABSENT = "Absent"
    LATE = "Late"
    PAID_LEAVE = "PaidLeave"
    UNPAID_LEAVE = "UnpaidLeave"


class FeeBasis(str, Enum):
    MONTHLY = "Monthly"
    DAILY = "Daily"


class DocumentStatus(str, Enum):
    """Status shared by invoices and salary slips."""

    PENDING = "Pending"
    PAID = "Paid"


class ItemKind(str, Enum):
    """Invoice line item origin. Tuition items decide whether a period is already billed."""

    TUITION = "Tuition"
    ADJUSTMENT = "Adjustment"
    CHARGE = "Charge"


class StudentAdjustmentType(str, Enum):
    FINE = "Fine"
    OTHER = "Other"


class PayrollAdjustmentType(str, Enum):
    BONUS = "Bonus"
    FINE = "Fine"
    ADVANCE = "Advance"
    DEDUCTION = "Deduction"

    @property
    def is_addition(self) -> bool:
        return self is PayrollAdjustmentType.BONUS


class DetachMode(str, Enum):
    """How an applied payroll adjustment is taken off a slip."""

    CANCEL = "cancel"
    POSTPONE = "postpone"


class TransactionType(str, Enum):
    FEE = "Fee"
    SALARY = "Salary"


class TransactionStatus(str, Enum):
    PAID = "Paid"
