from __future__ import annotations

import logging
import uuid
from datetime import date
from typing import Callable, Optional, Sequence

from ..adjustments.service import StudentAdjustmentLedger
from ..common.locking import WriteLock
from ..core.enums import TransactionType
from ..core.exceptions import InvalidStateError, NotFoundError
from ..ledger.model import FinancialTransaction
from ..ledger.repository import TransactionLedger
from .model import Invoice
from .repository import InvoiceRepository

logger = logging.getLogger(__name__)


class InvoiceLifecycleManager:
    """Pending -> Paid transition and deletion with adjustment release."""

    def __init__(
        self,
        invoices: InvoiceRepository,
        adjustments: StudentAdjustmentLedger,
        transactions: TransactionLedger,
        *,
        lock: Optional[WriteLock] = None,
        id_factory: Optional[Callable[[], str]] = None,
    ):
        self._invoices = invoices
        self._adjustments = adjustments
        self._transactions = transactions
        self._lock = lock or WriteLock()
        self._new_id = id_factory or (lambda: str(uuid.uuid4()))

    def get_invoice(self, invoice_id: str) -> Invoice:
        invoice = self._invoices.get_by_id(invoice_id)
        if not invoice:
            raise NotFoundError(f"Invoice {invoice_id} not found")
        return invoice

    def list_invoices(self, *, student_id: Optional[str] = None, period: Optional[str] = None) -> Sequence[Invoice]:
        return self._invoices.list_invoices(student_id=student_id, period=period)

    def mark_paid(self, invoice_id: str, *, today: Optional[date] = None) -> Invoice:
        """Record payment. Paying twice is rejected so the cash ledger holds one entry per invoice."""
        today = today or date.today()
        with self._lock:
            invoice = self.get_invoice(invoice_id)
            if invoice.is_paid:
                raise InvalidStateError(f"Invoice {invoice.invoice_no} is already paid")

            paid = invoice.paid_on(today)
            self._invoices.update(paid)
            try:
                self._transactions.append(
                    FinancialTransaction(
                        transaction_id=self._new_id(),
                        type=TransactionType.FEE,
                        amount=paid.amount_due,
                        txn_date=today,
                        entity_id=paid.student_id,
                        description=f"Invoice Payment: {paid.invoice_no}",
                    )
                )
            except Exception:
                self._invoices.update(invoice)
                raise

        logger.info("Invoice %s paid (%s)", paid.invoice_no, paid.amount_due)
        return paid

    def delete_invoice(self, invoice_id: str) -> list[str]:
        """Delete the invoice and put its adjustments back in the pending queue.

        Paid invoices can be deleted too. The payment transaction already recorded for them
        stays in the ledger.
        """
        with self._lock:
            invoice = self.get_invoice(invoice_id)
            released = self._adjustments.release_all(invoice.invoice_id)
            try:
                self._invoices.delete(invoice.invoice_id)
            except Exception:
                self._adjustments.reapply(released, invoice.invoice_id)
                raise

        logger.info(
            "Deleted invoice %s (%s), released %d adjustment(s)",
            invoice.invoice_no,
            invoice.status.value,
            len(released),
        )
        return [adj.adjustment_id for adj in released]
