from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal

from ..core.enums import FeeBasis


@dataclass(frozen=True)
class Enrollment:
    """Student <-> course link.

    `agreed_fee` is fixed when the student enrolls and is independent of the course's
    current default fee. It is charged per month (Monthly) or per attended day (Daily).
    """

    enrollment_id: str
    student_id: str
    course_id: str
    course_name: str
    fee_basis: FeeBasis
    agreed_fee: Decimal
