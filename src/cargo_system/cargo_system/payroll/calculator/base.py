from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Sequence

from ...attendance.model import AttendanceDay
from ...employees.model import SalaryConfig
from ..model import Deduction, PayrollBreakdown


class PayrollCalculator(ABC):
    """Calculator interface (Strategy Pattern for payroll)."""

    @abstractmethod
    def calculate(
        self,
        *,
        salary: SalaryConfig,
        attendance: Sequence[AttendanceDay],
        deductions: Sequence[Deduction] = (),
        trips_completed: int = 0,
        trip_revenue: int = 0,
        total_working_days: int = 0,
    ) -> PayrollBreakdown:
        raise NotImplementedError
