from __future__ import annotations

from datetime import date
from typing import Protocol, Sequence

from ..core.enums import EntityType
from .model import AttendanceRecord


class AttendanceRepository(Protocol):
    def list_for_entity(
        self,
        *,
        entity_id: str,
        entity_type: EntityType,
        start_date: date,
        end_date: date,
    ) -> Sequence[AttendanceRecord]:
        """Records for one entity with start_date <= work_date <= end_date."""

        raise NotImplementedError
