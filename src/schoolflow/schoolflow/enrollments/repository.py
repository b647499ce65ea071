from __future__ import annotations

from typing import Protocol, Sequence

from .model import Enrollment


class EnrollmentDirectory(Protocol):
    def list_for_student(self, student_id: str) -> Sequence[Enrollment]:
        raise NotImplementedError
