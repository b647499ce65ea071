from __future__ import annotations

from datetime import date
from typing import Sequence

from ..core.enums import AttendanceStatus, EntityType
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall
from .model import AttendanceRecord
from .repository import AttendanceRepository


class MySQLAttendanceRepository(AttendanceRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def list_for_entity(
        self,
        *,
        entity_id: str,
        entity_type: EntityType,
        start_date: date,
        end_date: date,
    ) -> Sequence[AttendanceRecord]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                SELECT entity_id, entity_type, work_date, status
                FROM attendance
                WHERE entity_id=%s AND entity_type=%s AND work_date BETWEEN %s AND %s
                ORDER BY work_date
                """,
                (entity_id, entity_type.value, start_date, end_date),
            )
            return [
                AttendanceRecord(
                    entity_id=str(r["entity_id"]),
                    entity_type=EntityType(r["entity_type"]),
                    work_date=r["work_date"],
                    status=AttendanceStatus(r["status"]),
                )
                for r in fetchall(cur)
            ]
