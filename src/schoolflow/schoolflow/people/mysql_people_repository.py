from __future__ import annotations

from typing import Optional, Sequence

from ..core.enums import PersonStatus
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone, to_decimal
from .model import Staff, Student
from .repository import StaffDirectory, StudentDirectory


def _to_student(row: dict) -> Student:
    return Student(
        student_id=str(row["id"]),
        name=row["name"],
        status=PersonStatus(row["status"]),
    )


def _to_staff(row: dict) -> Staff:
    return Staff(
        staff_id=str(row["id"]),
        name=row["name"],
        salary=to_decimal(row["salary"]),
        designation=row.get("designation") or "",
        status=PersonStatus(row["status"]),
    )


class MySQLStudentDirectory(StudentDirectory):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def get_by_id(self, student_id: str) -> Optional[Student]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("SELECT id, name, status FROM students WHERE id=%s", (student_id,))
            row = fetchone(cur)
            return _to_student(row) if row else None

    def list_active(self) -> Sequence[Student]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                "SELECT id, name, status FROM students WHERE status=%s ORDER BY name",
                (PersonStatus.ACTIVE.value,),
            )
            return [_to_student(r) for r in fetchall(cur)]


class MySQLStaffDirectory(StaffDirectory):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def get_by_id(self, staff_id: str) -> Optional[Staff]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                "SELECT id, name, designation, salary, status FROM staff WHERE id=%s",
                (staff_id,),
            )
            row = fetchone(cur)
            return _to_staff(row) if row else None

    def list_active(self) -> Sequence[Staff]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                "SELECT id, name, designation, salary, status FROM staff WHERE status=%s ORDER BY name",
                (PersonStatus.ACTIVE.value,),
            )
            return [_to_staff(r) for r in fetchall(cur)]
