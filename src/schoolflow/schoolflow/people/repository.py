from __future__ import annotations

from typing import Optional, Protocol, Sequence

from .model import Staff, Student


class StudentDirectory(Protocol):
    """Read-only student directory.

    Note (DIP): services depend on this interface, not on a concrete database.
    """

    def get_by_id(self, student_id: str) -> Optional[Student]:
        raise NotImplementedError

    def list_active(self) -> Sequence[Student]:
        raise NotImplementedError


class StaffDirectory(Protocol):
    """Read-only staff directory."""

    def get_by_id(self, staff_id: str) -> Optional[Staff]:
        raise NotImplementedError

    def list_active(self) -> Sequence[Staff]:
        raise NotImplementedError
