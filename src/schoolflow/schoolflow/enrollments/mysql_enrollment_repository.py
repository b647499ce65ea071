from __future__ import annotations

from typing import Sequence

from ..core.enums import FeeBasis
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, to_decimal
from .model import Enrollment
from .repository import EnrollmentDirectory


class MySQLEnrollmentDirectory(EnrollmentDirectory):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def list_for_student(self, student_id: str) -> Sequence[Enrollment]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                SELECT sc.id, sc.student_id, sc.course_id, c.name AS course_name, sc.fee_basis, sc.agreed_fee
                FROM student_courses sc
                JOIN courses c ON c.id = sc.course_id
                WHERE sc.student_id=%s
                ORDER BY c.name
                """,
                (student_id,),
            )
            return [
                Enrollment(
                    enrollment_id=str(r["id"]),
                    student_id=str(r["student_id"]),
                    course_id=str(r["course_id"]),
                    course_name=r["course_name"],
                    fee_basis=FeeBasis(r["fee_basis"]),
                    agreed_fee=to_decimal(r["agreed_fee"]),
                )
                for r in fetchall(cur)
            ]
