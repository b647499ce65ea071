from __future__ import annotations

import logging
import uuid
from dataclasses import replace
from datetime import date
from enum import Enum
from typing import Any, Callable, Optional, Sequence

from ..common.locking import WriteLock
from ..common.validators import require_amount, require_choice, require_non_empty
from ..core.enums import PayrollAdjustmentType, StudentAdjustmentType
from ..core.exceptions import InvalidStateError, NotFoundError
from .model import Adjustment, PayrollAdjustment, StudentAdjustment
from .repository import AdjustmentRepository

logger = logging.getLogger(__name__)


class AdjustmentLedger:
    """Pending/Applied bookkeeping for one adjustment collection.

    Public methods are the administrative surface (record, edit or delete while Pending).
    `apply`, `release`, `release_all` and `discard` are the transitions generators and
    lifecycle managers drive; callers hold the shared write lock around them.
    """

    adjustment_cls: type[Adjustment] = Adjustment
    type_enum: type[Enum] = Enum
    owner_label = "Owner"

    def __init__(
        self,
        adjustments: AdjustmentRepository,
        owners: Any,
        *,
        lock: Optional[WriteLock] = None,
        id_factory: Optional[Callable[[], str]] = None,
    ):
        self._adjustments = adjustments
        self._owners = owners
        self._lock = lock or WriteLock()
        self._new_id = id_factory or (lambda: str(uuid.uuid4()))

    # ---- queries ----

    def get(self, adjustment_id: str) -> Adjustment:
        adj = self._adjustments.get_by_id(adjustment_id)
        if not adj:
            raise NotFoundError(f"Adjustment {adjustment_id} not found")
        return adj

    def list_for(self, owner_id: str) -> Sequence[Adjustment]:
        return self._adjustments.list_for_owner(owner_id)

    def pending_for(self, owner_id: str) -> Sequence[Adjustment]:
        return self._adjustments.list_pending_for_owner(owner_id)

    def list_all(self, *, pending_only: bool = False) -> Sequence[Adjustment]:
        rows = self._adjustments.list_all()
        if pending_only:
            return [a for a in rows if not a.is_applied]
        return rows

    def attached_to(self, document_id: str) -> Sequence[Adjustment]:
        return self._adjustments.list_for_document(document_id)

    # ---- administrative edits ----

    def build(
        self,
        *,
        owner_id: str,
        type: Any,
        amount: Any,
        description: str,
        effective_date: Optional[date] = None,
    ) -> Adjustment:
        """Validate input and build a Pending adjustment without storing it."""
        owner_id = require_non_empty(owner_id, f"{self.owner_label} id")
        if not self._owners.get_by_id(owner_id):
            raise NotFoundError(f"{self.owner_label} {owner_id} not found")

        return self.adjustment_cls(
            adjustment_id=self._new_id(),
            owner_id=owner_id,
            type=require_choice(type, self.type_enum, "Type"),
            amount=require_amount(amount),
            description=require_non_empty(description, "Description"),
            effective_date=effective_date or date.today(),
        )

    def record_pending(
        self,
        *,
        owner_id: str,
        type: Any,
        amount: Any,
        description: str,
        effective_date: Optional[date] = None,
    ) -> Adjustment:
        adj = self.build(
            owner_id=owner_id,
            type=type,
            amount=amount,
            description=description,
            effective_date=effective_date,
        )
        return self.queue(adj)

    def queue(self, adjustment: Adjustment) -> Adjustment:
        """Store a built Pending adjustment for the next generation sweep."""
        if adjustment.is_applied:
            raise InvalidStateError(f"Adjustment {adjustment.adjustment_id} is already applied")
        with self._lock:
            self._adjustments.add(adjustment)
        logger.info(
            "Queued %s adjustment %s (%s) for %s",
            adjustment.type.value,
            adjustment.adjustment_id,
            adjustment.amount,
            adjustment.owner_id,
        )
        return adjustment

    def record_applied(self, adjustment: Adjustment, *, document_id: str) -> Adjustment:
        """Store a freshly built adjustment directly as Applied to an existing document."""
        applied = adjustment.apply_to(document_id)
        self._adjustments.add(applied)
        return applied

    def _require_pending(self, adjustment_id: str) -> Adjustment:
        adj = self.get(adjustment_id)
        if adj.is_applied:
            raise InvalidStateError(
                f"Adjustment {adjustment_id} is applied to {adj.document_id}; release it through that document first"
            )
        return adj

    def edit_pending(
        self,
        adjustment_id: str,
        *,
        type: Any = None,
        amount: Any = None,
        description: Optional[str] = None,
        effective_date: Optional[date] = None,
    ) -> Adjustment:
        with self._lock:
            adj = self._require_pending(adjustment_id)
            changes: dict = {}
            if type is not None:
                changes["type"] = require_choice(type, self.type_enum, "Type")
            if amount is not None:
                changes["amount"] = require_amount(amount)
            if description is not None:
                changes["description"] = require_non_empty(description, "Description")
            if effective_date is not None:
                changes["effective_date"] = effective_date

            updated = replace(adj, **changes)
            self._adjustments.update(updated)
            return updated

    def postpone_pending(self, adjustment_id: str, new_date: date) -> Adjustment:
        return self.edit_pending(adjustment_id, effective_date=new_date)

    def delete_pending(self, adjustment_id: str) -> None:
        with self._lock:
            self._require_pending(adjustment_id)
            self._adjustments.delete(adjustment_id)
        logger.info("Deleted pending adjustment %s", adjustment_id)

    # ---- transitions driven by documents ----

    def apply(self, adjustment: Adjustment, document_id: str) -> Adjustment:
        applied = adjustment.apply_to(document_id)
        self._adjustments.update(applied)
        return applied

    def release(self, adjustment: Adjustment, *, effective_date: Optional[date] = None) -> Adjustment:
        released = adjustment.release(effective_date=effective_date)
        self._adjustments.update(released)
        return released

    def release_all(self, document_id: str) -> list[Adjustment]:
        """Release every adjustment on the document, or none of them if one write fails."""
        released: list[Adjustment] = []
        try:
            for adj in self._adjustments.list_for_document(document_id):
                released.append(self.release(adj))
        except Exception:
            self.reapply(released, document_id)
            raise
        return released

    def reapply(self, adjustments: Sequence[Adjustment], document_id: str) -> None:
        """Put released adjustments back on their document (undo of `release_all`)."""
        for adj in adjustments:
            self.apply(adj, document_id)

    def discard(self, adjustment: Adjustment) -> None:
        self._adjustments.delete(adjustment.adjustment_id)


class StudentAdjustmentLedger(AdjustmentLedger):
    adjustment_cls = StudentAdjustment
    type_enum = StudentAdjustmentType
    owner_label = "Student"


class PayrollAdjustmentLedger(AdjustmentLedger):
    adjustment_cls = PayrollAdjustment
    type_enum = PayrollAdjustmentType
    owner_label = "Staff"
