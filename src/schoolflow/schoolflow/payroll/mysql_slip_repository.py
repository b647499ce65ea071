from __future__ import annotations

import json
from typing import Optional, Sequence

from ..attendance.model import AttendanceStats
from ..core.enums import DocumentStatus
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone, to_decimal
from .model import SalarySlip, SlipAdjustmentLine
from .repository import SlipRepository

_COLUMNS = """
    ss.id, ss.staff_id, st.name AS staff_name, ss.period, ss.base_salary, ss.attendance_stats,
    ss.attendance_deduction, ss.adjustments, ss.total_bonuses, ss.total_deductions, ss.net_salary,
    ss.status, ss.generated_at, ss.paid_at
"""
_FROM = "salary_slips ss LEFT JOIN staff st ON st.id = ss.staff_id"


def _json(value) -> object:
    if isinstance(value, (bytes, bytearray)):
        value = value.decode("utf-8")
    return json.loads(value) if value else None


def _to_slip(row: dict) -> SalarySlip:
    stats = _json(row["attendance_stats"]) or {}
    lines = _json(row["adjustments"]) or []
    return SalarySlip(
        slip_id=str(row["id"]),
        staff_id=str(row["staff_id"]),
        staff_name=row.get("staff_name") or "Unknown",
        period=row["period"],
        base_salary=to_decimal(row["base_salary"]),
        attendance=AttendanceStats(
            present=int(stats.get("present", 0)),
            late=int(stats.get("late", 0)),
            absent=int(stats.get("absent", 0)),
            paid_leave=int(stats.get("paid_leave", 0)),
        ),
        attendance_deduction=to_decimal(row["attendance_deduction"]),
        adjustments=tuple(SlipAdjustmentLine.from_dict(a) for a in lines),
        total_bonuses=to_decimal(row["total_bonuses"]),
        total_deductions=to_decimal(row["total_deductions"]),
        net_salary=to_decimal(row["net_salary"]),
        status=DocumentStatus(row["status"]),
        generated_at=row["generated_at"],
        paid_at=row.get("paid_at"),
    )


def _params(slip: SalarySlip) -> tuple:
    return (
        slip.base_salary,
        json.dumps(slip.attendance.as_dict()),
        slip.attendance_deduction,
        json.dumps([a.as_dict() for a in slip.adjustments]),
        slip.total_bonuses,
        slip.total_deductions,
        slip.net_salary,
        slip.status.value,
        slip.paid_at,
    )


class MySQLSlipRepository(SlipRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def get_by_id(self, slip_id: str) -> Optional[SalarySlip]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_COLUMNS} FROM {_FROM} WHERE ss.id=%s", (slip_id,))
            row = fetchone(cur)
            return _to_slip(row) if row else None

    def find_for_staff_period(self, staff_id: str, period: str) -> Optional[SalarySlip]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"SELECT {_COLUMNS} FROM {_FROM} WHERE ss.staff_id=%s AND ss.period=%s",
                (staff_id, period),
            )
            row = fetchone(cur)
            return _to_slip(row) if row else None

    def list_for_period(self, period: str) -> Sequence[SalarySlip]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"SELECT {_COLUMNS} FROM {_FROM} WHERE ss.period=%s ORDER BY st.name",
                (period,),
            )
            return [_to_slip(r) for r in fetchall(cur)]

    def add(self, slip: SalarySlip) -> None:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT INTO salary_slips(
                    id, staff_id, period, generated_at,
                    base_salary, attendance_stats, attendance_deduction, adjustments,
                    total_bonuses, total_deductions, net_salary, status, paid_at
                )
                VALUES(%s,%s,%s,%s,%s,%s,%s,%s,%s,%s,%s,%s,%s)
                """,
                (slip.slip_id, slip.staff_id, slip.period, slip.generated_at) + _params(slip),
            )

    def update(self, slip: SalarySlip) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                UPDATE salary_slips
                SET base_salary=%s, attendance_stats=%s, attendance_deduction=%s, adjustments=%s,
                    total_bonuses=%s, total_deductions=%s, net_salary=%s, status=%s, paid_at=%s
                WHERE id=%s
                """,
                _params(slip) + (slip.slip_id,),
            )
            return cur.rowcount > 0

    def delete(self, slip_id: str) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("DELETE FROM salary_slips WHERE id=%s", (slip_id,))
            return cur.rowcount > 0
