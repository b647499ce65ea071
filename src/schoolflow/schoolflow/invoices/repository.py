from __future__ import annotations

from typing import Optional, Protocol, Sequence

from .model import Invoice


class InvoiceRepository(Protocol):
    def get_by_id(self, invoice_id: str) -> Optional[Invoice]:
        raise NotImplementedError

    def list_invoices(self, *, student_id: Optional[str] = None, period: Optional[str] = None) -> Sequence[Invoice]:
        raise NotImplementedError

    def find_latest_pending_for_student(self, student_id: str) -> Optional[Invoice]:
        raise NotImplementedError

    def add(self, invoice: Invoice) -> None:
        raise NotImplementedError

    def update(self, invoice: Invoice) -> bool:
        raise NotImplementedError

    def delete(self, invoice_id: str) -> bool:
        raise NotImplementedError


class InvoiceNumberSequence(Protocol):
    """Allocator for human-readable invoice numbers.

    Must hand out strictly increasing, never-reused values. A value is taken before the
    invoice row is written, so an invoice whose save or generation is undone leaves a gap
    in the numbering; numbers are never handed out twice.
    """

    def next_value(self) -> int:
        raise NotImplementedError
