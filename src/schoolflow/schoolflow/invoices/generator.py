from __future__ import annotations

import logging
import uuid
from dataclasses import dataclass
from datetime import date, timedelta
from typing import Any, Callable, Optional, Sequence

from ..adjustments.model import Adjustment
from ..adjustments.service import StudentAdjustmentLedger
from ..attendance.service import AttendanceReader
from ..common.datetime_utils import period_of
from ..common.locking import WriteLock
from ..common.results import GenerationFailure, GenerationResult
from ..common.validators import require_amount, require_choice, require_non_empty, require_period
from ..core.constants import DEFAULT_INVOICE_DUE_DAYS, INVOICE_NUMBER_PREFIX
from ..core.enums import (
    DocumentStatus,
    FeeBasis,
    ItemKind,
    StudentAdjustmentType,
    TransactionType,
)
from ..core.exceptions import NotFoundError
from ..enrollments.repository import EnrollmentDirectory
from ..ledger.model import FinancialTransaction
from ..ledger.repository import TransactionLedger
from ..people.model import Student
from ..people.repository import StudentDirectory
from .model import Invoice, InvoiceItem
from .repository import InvoiceNumberSequence, InvoiceRepository

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ChargeOutcome:
    """Result of queue_or_merge_student_charge: merged into an open invoice, or queued."""

    merged: bool
    adjustment_id: str
    invoice_id: Optional[str] = None

    def as_dict(self) -> dict:
        return {"merged": self.merged, "adjustment_id": self.adjustment_id, "invoice_id": self.invoice_id}


class InvoiceGenerator:
    """Turns enrollments, attendance and pending student charges into invoices."""

    def __init__(
        self,
        invoices: InvoiceRepository,
        sequence: InvoiceNumberSequence,
        students: StudentDirectory,
        enrollments: EnrollmentDirectory,
        attendance: AttendanceReader,
        adjustments: StudentAdjustmentLedger,
        transactions: TransactionLedger,
        *,
        lock: Optional[WriteLock] = None,
        due_days: int = DEFAULT_INVOICE_DUE_DAYS,
        id_factory: Optional[Callable[[], str]] = None,
    ):
        self._invoices = invoices
        self._sequence = sequence
        self._students = students
        self._enrollments = enrollments
        self._attendance = attendance
        self._adjustments = adjustments
        self._transactions = transactions
        self._lock = lock or WriteLock()
        self._due_days = int(due_days)
        self._new_id = id_factory or (lambda: str(uuid.uuid4()))

    def _get_student(self, student_id: str) -> Student:
        student = self._students.get_by_id(student_id)
        if not student:
            raise NotFoundError(f"Student {student_id} not found")
        return student

    def _next_invoice_no(self) -> str:
        return f"{INVOICE_NUMBER_PREFIX}{self._sequence.next_value()}"

    # ---- periodic sweep ----

    def generate_invoices(
        self,
        period: str,
        student_id: Optional[str] = None,
        *,
        today: Optional[date] = None,
    ) -> GenerationResult:
        """Bill tuition (once per period) plus every pending charge.

        With `student_id` only that student is billed and errors propagate; otherwise all
        Active students are billed and a failure for one is logged and reported without
        stopping the rest.
        """
        period = require_period(period)
        today = today or date.today()
        result = GenerationResult()

        if student_id:
            student = self._get_student(student_id)
            self._collect(result, student, self._generate_for_student(student, period, today))
            return result

        for student in self._students.list_active():
            try:
                invoice = self._generate_for_student(student, period, today)
            except Exception as e:
                logger.exception("Invoice generation failed for student %s (%s)", student.student_id, period)
                result.failures.append(GenerationFailure(entity_id=student.student_id, message=str(e)))
                continue
            self._collect(result, student, invoice)

        logger.info(
            "Invoice run %s: generated=%d skipped=%d failed=%d",
            period,
            result.generated,
            len(result.skipped),
            len(result.failures),
        )
        return result

    @staticmethod
    def _collect(result: GenerationResult, student: Student, invoice: Optional[Invoice]) -> None:
        if invoice:
            result.document_ids.append(invoice.invoice_id)
        else:
            result.skipped.append(student.student_id)

    def tuition_billed(self, student_id: str, period: str) -> bool:
        existing = self._invoices.list_invoices(student_id=student_id, period=period)
        return any(inv.has_tuition for inv in existing)

    def _tuition_items(self, student_id: str, period: str) -> list[InvoiceItem]:
        enrollments = self._enrollments.list_for_student(student_id)
        items = [
            InvoiceItem(description=e.course_name, amount=e.agreed_fee, kind=ItemKind.TUITION)
            for e in enrollments
            if e.fee_basis == FeeBasis.MONTHLY
        ]

        daily = [e for e in enrollments if e.fee_basis == FeeBasis.DAILY]
        if daily:
            days = self._attendance.billable_student_days(student_id, period)
            if days > 0:
                items.extend(
                    InvoiceItem(
                        description=f"{e.course_name} ({days} days)",
                        amount=e.agreed_fee * days,
                        kind=ItemKind.TUITION,
                    )
                    for e in daily
                )
        return items

    def _generate_for_student(self, student: Student, period: str, today: date) -> Optional[Invoice]:
        with self._lock:
            items: list[InvoiceItem] = []
            if not self.tuition_billed(student.student_id, period):
                items.extend(self._tuition_items(student.student_id, period))

            pending = list(self._adjustments.pending_for(student.student_id))
            items.extend(
                InvoiceItem(
                    description=adj.line_description,
                    amount=adj.amount,
                    kind=ItemKind.ADJUSTMENT,
                    adjustment_id=adj.adjustment_id,
                )
                for adj in pending
            )

            if not items:
                return None

            invoice = Invoice(
                invoice_id=self._new_id(),
                invoice_no=self._next_invoice_no(),
                student_id=student.student_id,
                student_name=student.name,
                period=period,
                due_date=today + timedelta(days=self._due_days),
                items=tuple(items),
            )
            self._invoices.add(invoice)
            self._apply_adjustments(invoice, pending)

        logger.info(
            "Generated %s for student %s (%s): %d items, amount_due=%s",
            invoice.invoice_no,
            student.student_id,
            period,
            len(invoice.items),
            invoice.amount_due,
        )
        return invoice

    def _apply_adjustments(self, invoice: Invoice, pending: Sequence[Adjustment]) -> None:
        """Mark swept adjustments Applied; on failure undo this student's invoice entirely."""
        applied: list[Adjustment] = []
        try:
            for adj in pending:
                applied.append(self._adjustments.apply(adj, invoice.invoice_id))
        except Exception:
            for adj in applied:
                self._adjustments.release(adj)
            self._invoices.delete(invoice.invoice_id)
            raise

    # ---- one-off charges ----

    def create_ad_hoc_invoice(
        self,
        *,
        student_id: str,
        type: Any,
        amount: Any,
        description: str,
        due_date: Optional[date] = None,
        status: Any = DocumentStatus.PENDING,
        today: Optional[date] = None,
    ) -> Invoice:
        """Single-item invoice outside the periodic sweep.

        A Paid ad-hoc invoice always comes with its Fee transaction.
        """
        today = today or date.today()
        student = self._get_student(require_non_empty(student_id, "Student id"))
        charge_type = require_choice(type, StudentAdjustmentType, "Type")
        amount = require_amount(amount)
        description = require_non_empty(description, "Description")
        status = require_choice(status, DocumentStatus, "Status")

        with self._lock:
            invoice = Invoice(
                invoice_id=self._new_id(),
                invoice_no=self._next_invoice_no(),
                student_id=student.student_id,
                student_name=student.name,
                period=period_of(today),
                due_date=due_date or today,
                status=status,
                items=(
                    InvoiceItem(
                        description=f"{charge_type.value}: {description}",
                        amount=amount,
                        kind=ItemKind.CHARGE,
                    ),
                ),
                payment_date=today if status == DocumentStatus.PAID else None,
            )
            self._invoices.add(invoice)
            if invoice.is_paid:
                try:
                    self._transactions.append(
                        FinancialTransaction(
                            transaction_id=self._new_id(),
                            type=TransactionType.FEE,
                            amount=invoice.amount_due,
                            txn_date=today,
                            entity_id=student.student_id,
                            description=f"Instant Payment: {charge_type.value} ({invoice.invoice_no})",
                        )
                    )
                except Exception:
                    self._invoices.delete(invoice.invoice_id)
                    raise

        logger.info("Created ad-hoc %s (%s) for student %s", invoice.invoice_no, status.value, student.student_id)
        return invoice

    def queue_or_merge_student_charge(
        self,
        *,
        student_id: str,
        type: Any,
        amount: Any,
        description: str,
        effective_date: Optional[date] = None,
    ) -> ChargeOutcome:
        """Add a charge to the student's open (Pending) invoice, or queue it for the next sweep."""
        adj = self._adjustments.build(
            owner_id=student_id,
            type=type,
            amount=amount,
            description=description,
            effective_date=effective_date,
        )

        with self._lock:
            open_invoice = self._invoices.find_latest_pending_for_student(adj.owner_id)
            if not open_invoice:
                self._adjustments.queue(adj)
                return ChargeOutcome(merged=False, adjustment_id=adj.adjustment_id)

            merged = open_invoice.with_item(
                InvoiceItem(
                    description=adj.line_description,
                    amount=adj.amount,
                    kind=ItemKind.ADJUSTMENT,
                    adjustment_id=adj.adjustment_id,
                )
            )
            applied = self._adjustments.record_applied(adj, document_id=merged.invoice_id)
            try:
                self._invoices.update(merged)
            except Exception:
                self._adjustments.discard(applied)
                raise

        logger.info("Merged charge %s into %s", adj.adjustment_id, merged.invoice_no)
        return ChargeOutcome(merged=True, adjustment_id=adj.adjustment_id, invoice_id=merged.invoice_id)
