from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from .adjustments.mysql_adjustment_repository import (
    MySQLPayrollAdjustmentRepository,
    MySQLStudentAdjustmentRepository,
)
from .adjustments.repository import AdjustmentRepository
from .adjustments.service import PayrollAdjustmentLedger, StudentAdjustmentLedger
from .attendance.mysql_attendance_repository import MySQLAttendanceRepository
from .attendance.repository import AttendanceRepository
from .attendance.service import AttendanceReader
from .common.locking import WriteLock
from .core.constants import DEFAULT_INVOICE_DUE_DAYS, DEFAULT_INVOICE_NUMBER_START
from .database.connection import DBConfig, DatabaseConnection
from .enrollments.mysql_enrollment_repository import MySQLEnrollmentDirectory
from .enrollments.repository import EnrollmentDirectory
from .invoices.generator import InvoiceGenerator
from .invoices.lifecycle import InvoiceLifecycleManager
from .invoices.mysql_invoice_repository import MySQLInvoiceNumberSequence, MySQLInvoiceRepository
from .invoices.repository import InvoiceNumberSequence, InvoiceRepository
from .ledger.mysql_transaction_repository import MySQLTransactionLedger
from .ledger.repository import TransactionLedger
from .payroll.calculator.standard_calculator import StandardPayrollCalculator
from .payroll.generator import PayrollGenerator
from .payroll.lifecycle import PayrollLifecycleManager
from .payroll.mysql_slip_repository import MySQLSlipRepository
from .payroll.repository import SlipRepository
from .people.mysql_people_repository import MySQLStaffDirectory, MySQLStudentDirectory
from .people.repository import StaffDirectory, StudentDirectory


@dataclass(frozen=True)
class Repositories:
    students: StudentDirectory
    staff: StaffDirectory
    enrollments: EnrollmentDirectory
    attendance: AttendanceRepository
    student_adjustments: AdjustmentRepository
    payroll_adjustments: AdjustmentRepository
    invoices: InvoiceRepository
    invoice_numbers: InvoiceNumberSequence
    slips: SlipRepository
    transactions: TransactionLedger


@dataclass(frozen=True)
class Container:
    repos: Repositories
    lock: WriteLock

    attendance_reader: AttendanceReader
    student_adjustments: StudentAdjustmentLedger
    payroll_adjustments: PayrollAdjustmentLedger
    invoice_generator: InvoiceGenerator
    invoice_lifecycle: InvoiceLifecycleManager
    payroll_generator: PayrollGenerator
    payroll_lifecycle: PayrollLifecycleManager

    conn: Optional[DatabaseConnection] = None


def build_services(
    repos: Repositories,
    *,
    due_days: int = DEFAULT_INVOICE_DUE_DAYS,
    allow_paid_slip_deletion: bool = True,
    conn: Optional[DatabaseConnection] = None,
) -> Container:
    """Wire services over any set of repositories; one write lock is shared by all of them."""
    lock = WriteLock()
    calculator = StandardPayrollCalculator()

    attendance_reader = AttendanceReader(repos.attendance)
    student_adjustments = StudentAdjustmentLedger(repos.student_adjustments, repos.students, lock=lock)
    payroll_adjustments = PayrollAdjustmentLedger(repos.payroll_adjustments, repos.staff, lock=lock)

    invoice_generator = InvoiceGenerator(
        repos.invoices,
        repos.invoice_numbers,
        repos.students,
        repos.enrollments,
        attendance_reader,
        student_adjustments,
        repos.transactions,
        lock=lock,
        due_days=due_days,
    )
    invoice_lifecycle = InvoiceLifecycleManager(
        repos.invoices,
        student_adjustments,
        repos.transactions,
        lock=lock,
    )
    payroll_generator = PayrollGenerator(
        repos.slips,
        repos.staff,
        attendance_reader,
        payroll_adjustments,
        calculator=calculator,
        lock=lock,
    )
    payroll_lifecycle = PayrollLifecycleManager(
        repos.slips,
        attendance_reader,
        payroll_adjustments,
        repos.transactions,
        calculator=calculator,
        lock=lock,
        allow_paid_deletion=allow_paid_slip_deletion,
    )

    return Container(
        repos=repos,
        lock=lock,
        attendance_reader=attendance_reader,
        student_adjustments=student_adjustments,
        payroll_adjustments=payroll_adjustments,
        invoice_generator=invoice_generator,
        invoice_lifecycle=invoice_lifecycle,
        payroll_generator=payroll_generator,
        payroll_lifecycle=payroll_lifecycle,
        conn=conn,
    )


def build_container(
    *,
    db_config: dict,
    due_days: int = DEFAULT_INVOICE_DUE_DAYS,
    invoice_number_start: int = DEFAULT_INVOICE_NUMBER_START,
    allow_paid_slip_deletion: bool = True,
) -> Container:
    conn = DatabaseConnection.get_instance(DBConfig.from_mapping(db_config))

    repos = Repositories(
        students=MySQLStudentDirectory(conn),
        staff=MySQLStaffDirectory(conn),
        enrollments=MySQLEnrollmentDirectory(conn),
        attendance=MySQLAttendanceRepository(conn),
        student_adjustments=MySQLStudentAdjustmentRepository(conn),
        payroll_adjustments=MySQLPayrollAdjustmentRepository(conn),
        invoices=MySQLInvoiceRepository(conn),
        invoice_numbers=MySQLInvoiceNumberSequence(conn, start=invoice_number_start),
        slips=MySQLSlipRepository(conn),
        transactions=MySQLTransactionLedger(conn),
    )
    return build_services(
        repos,
        due_days=due_days,
        allow_paid_slip_deletion=allow_paid_slip_deletion,
        conn=conn,
    )
