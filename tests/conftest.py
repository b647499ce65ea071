from __future__ import annotations

import itertools
from datetime import date, datetime
from decimal import Decimal

import pytest

from src.schoolflow.schoolflow.attendance.model import AttendanceRecord
from src.schoolflow.schoolflow.container import Repositories, build_services
from src.schoolflow.schoolflow.core.enums import (
    AttendanceStatus,
    DocumentStatus,
    EntityType,
    FeeBasis,
    PersonStatus,
)
from src.schoolflow.schoolflow.enrollments.model import Enrollment
from src.schoolflow.schoolflow.people.model import Staff, Student


class FakeStudents:
    def __init__(self):
        self._rows: dict[str, Student] = {}

    def put(self, student_id, name, status=PersonStatus.ACTIVE):
        self._rows[student_id] = Student(student_id=student_id, name=name, status=status)

    def get_by_id(self, student_id):
        return self._rows.get(student_id)

    def list_active(self):
        return sorted((s for s in self._rows.values() if s.is_active), key=lambda s: s.name)


class FakeStaff:
    def __init__(self):
        self._rows: dict[str, Staff] = {}

    def put(self, staff_id, name, salary, status=PersonStatus.ACTIVE):
        self._rows[staff_id] = Staff(staff_id=staff_id, name=name, salary=Decimal(str(salary)), status=status)

    def get_by_id(self, staff_id):
        return self._rows.get(staff_id)

    def list_active(self):
        return sorted((s for s in self._rows.values() if s.is_active), key=lambda s: s.name)


class FakeEnrollments:
    def __init__(self):
        self._rows: list[Enrollment] = []

    def enroll(self, student_id, course_name, fee_basis, fee):
        self._rows.append(
            Enrollment(
                enrollment_id=f"enr-{len(self._rows) + 1}",
                student_id=student_id,
                course_id=f"crs-{course_name}",
                course_name=course_name,
                fee_basis=FeeBasis(fee_basis),
                agreed_fee=Decimal(str(fee)),
            )
        )

    def list_for_student(self, student_id):
        return [e for e in self._rows if e.student_id == student_id]


class FakeAttendance:
    def __init__(self):
        self._rows: dict[tuple, AttendanceRecord] = {}

    def mark(self, entity_id, entity_type, work_date, status):
        entity_type = EntityType(entity_type)
        self._rows[(entity_id, entity_type, work_date)] = AttendanceRecord(
            entity_id=entity_id,
            entity_type=entity_type,
            work_date=work_date,
            status=AttendanceStatus(status),
        )

    def list_for_entity(self, *, entity_id, entity_type, start_date, end_date):
        return sorted(
            (
                r
                for r in self._rows.values()
                if r.entity_id == entity_id and r.entity_type == entity_type and start_date <= r.work_date <= end_date
            ),
            key=lambda r: r.work_date,
        )


class FakeAdjustments:
    def __init__(self):
        self._rows: dict = {}
        self.fail_update_for: set[str] = set()
        self.fail_add = False

    def get_by_id(self, adjustment_id):
        return self._rows.get(adjustment_id)

    def list_all(self):
        return sorted(self._rows.values(), key=lambda a: (a.effective_date, a.adjustment_id))

    def list_for_owner(self, owner_id):
        return [a for a in self._rows.values() if a.owner_id == owner_id]

    def list_pending_for_owner(self, owner_id):
        return [a for a in self._rows.values() if a.owner_id == owner_id and not a.is_applied]

    def list_for_document(self, document_id):
        return [a for a in self._rows.values() if a.document_id == document_id]

    def add(self, adjustment):
        if self.fail_add:
            raise RuntimeError(f"storage failure for {adjustment.adjustment_id}")
        self._rows[adjustment.adjustment_id] = adjustment

    def update(self, adjustment):
        if adjustment.adjustment_id in self.fail_update_for:
            raise RuntimeError(f"storage failure for {adjustment.adjustment_id}")
        if adjustment.adjustment_id not in self._rows:
            return False
        self._rows[adjustment.adjustment_id] = adjustment
        return True

    def delete(self, adjustment_id):
        return self._rows.pop(adjustment_id, None) is not None

    def all(self):
        return list(self._rows.values())


class FakeInvoices:
    def __init__(self):
        self._rows: dict = {}
        self.fail_update = False
        self.fail_delete = False

    def get_by_id(self, invoice_id):
        return self._rows.get(invoice_id)

    def list_invoices(self, *, student_id=None, period=None):
        rows = [
            i
            for i in self._rows.values()
            if (not student_id or i.student_id == student_id) and (not period or i.period == period)
        ]
        return sorted(rows, key=lambda i: i.invoice_no, reverse=True)

    def find_latest_pending_for_student(self, student_id):
        pending = [
            i for i in self._rows.values() if i.student_id == student_id and i.status == DocumentStatus.PENDING
        ]
        return max(pending, key=lambda i: i.invoice_no, default=None)

    def add(self, invoice):
        self._rows[invoice.invoice_id] = invoice

    def update(self, invoice):
        if self.fail_update:
            raise RuntimeError(f"storage failure for {invoice.invoice_id}")
        if invoice.invoice_id not in self._rows:
            return False
        self._rows[invoice.invoice_id] = invoice
        return True

    def delete(self, invoice_id):
        if self.fail_delete:
            raise RuntimeError(f"storage failure for {invoice_id}")
        return self._rows.pop(invoice_id, None) is not None

    def all(self):
        return list(self._rows.values())


class FakeSequence:
    def __init__(self, start=1000):
        self._counter = itertools.count(start + 1)

    def next_value(self):
        return next(self._counter)


class FakeSlips:
    def __init__(self):
        self._rows: dict = {}
        self.fail_delete = False

    def get_by_id(self, slip_id):
        return self._rows.get(slip_id)

    def find_for_staff_period(self, staff_id, period):
        return next((s for s in self._rows.values() if s.staff_id == staff_id and s.period == period), None)

    def list_for_period(self, period):
        return sorted((s for s in self._rows.values() if s.period == period), key=lambda s: s.staff_name)

    def add(self, slip):
        self._rows[slip.slip_id] = slip

    def update(self, slip):
        if slip.slip_id not in self._rows:
            return False
        self._rows[slip.slip_id] = slip
        return True

    def delete(self, slip_id):
        if self.fail_delete:
            raise RuntimeError(f"storage failure for {slip_id}")
        return self._rows.pop(slip_id, None) is not None

    def all(self):
        return list(self._rows.values())


class FakeTransactions:
    def __init__(self):
        self.rows: list = []
        self.fail_append = False

    def append(self, txn):
        if self.fail_append:
            raise RuntimeError("ledger unavailable")
        self.rows.append(txn)

    def list_recent(self, limit):
        return sorted(self.rows, key=lambda t: t.txn_date, reverse=True)[:limit]


@pytest.fixture
def fixed_now():
    return datetime(2024, 1, 31, 18, 0, 0)


@pytest.fixture
def today():
    return date(2024, 1, 31)


@pytest.fixture
def repos():
    return Repositories(
        students=FakeStudents(),
        staff=FakeStaff(),
        enrollments=FakeEnrollments(),
        attendance=FakeAttendance(),
        student_adjustments=FakeAdjustments(),
        payroll_adjustments=FakeAdjustments(),
        invoices=FakeInvoices(),
        invoice_numbers=FakeSequence(),
        slips=FakeSlips(),
        transactions=FakeTransactions(),
    )


@pytest.fixture
def container(repos):
    return build_services(repos)
