from __future__ import annotations

from typing import Optional, Protocol, Sequence

from .model import Adjustment


class AdjustmentRepository(Protocol):
    """Storage for one adjustment collection (student charges or payroll adjustments)."""

    def get_by_id(self, adjustment_id: str) -> Optional[Adjustment]:
        raise NotImplementedError

    def list_all(self) -> Sequence[Adjustment]:
        raise NotImplementedError

    def list_for_owner(self, owner_id: str) -> Sequence[Adjustment]:
        raise NotImplementedError

    def list_pending_for_owner(self, owner_id: str) -> Sequence[Adjustment]:
        raise NotImplementedError

    def list_for_document(self, document_id: str) -> Sequence[Adjustment]:
        raise NotImplementedError

    def add(self, adjustment: Adjustment) -> None:
        raise NotImplementedError

    def update(self, adjustment: Adjustment) -> bool:
        raise NotImplementedError

    def delete(self, adjustment_id: str) -> bool:
        raise NotImplementedError
