from __future__ import annotations

from datetime import datetime
from typing import Optional, Protocol, Sequence

from ..core.enums import PayrollStatus
from .model import PayrollRecord


class PayrollRepository(Protocol):
    def list_payrolls(
        self,
        *,
        period: Optional[str] = None,
        employee_id: Optional[str] = None,
        status: Optional[PayrollStatus] = None,
    ) -> Sequence[PayrollRecord]:
        raise NotImplementedError

    def get_by_id(self, payroll_id: int) -> Optional[PayrollRecord]:
        raise NotImplementedError

    def get_for_employee_period(self, employee_id: str, period: str) -> Optional[PayrollRecord]:
        raise NotImplementedError

    def save(self, record: PayrollRecord) -> int:
        """Insert or replace by (employee_id, period); deductions are replaced. Returns payroll_id."""

        raise NotImplementedError

    def set_status(self, payroll_id: int, status: PayrollStatus, at: datetime) -> bool:
        raise NotImplementedError

    def delete(self, payroll_id: int) -> bool:
        raise NotImplementedError
