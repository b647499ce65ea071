from __future__ import annotations

from typing import Optional, Protocol, Sequence

from .model import SalarySlip


class SlipRepository(Protocol):
    def get_by_id(self, slip_id: str) -> Optional[SalarySlip]:
        raise NotImplementedError

    def find_for_staff_period(self, staff_id: str, period: str) -> Optional[SalarySlip]:
        raise NotImplementedError

    def list_for_period(self, period: str) -> Sequence[SalarySlip]:
        raise NotImplementedError

    def add(self, slip: SalarySlip) -> None:
        raise NotImplementedError

    def update(self, slip: SalarySlip) -> bool:
        raise NotImplementedError

    def delete(self, slip_id: str) -> bool:
        raise NotImplementedError
