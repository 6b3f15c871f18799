from __future__ import annotations

from decimal import Decimal
from typing import Sequence

from ...attendance.model import AttendanceDay
from ...common.currency import round_half_up
from ...core.constants import OVERTIME_RATE_PER_EVENT
from ...core.enums import AttendanceStatus, CommissionType
from ...employees.model import SalaryConfig
from ..model import Deduction, PayrollBreakdown
from .base import PayrollCalculator

WORKED_STATUSES = (AttendanceStatus.PRESENT, AttendanceStatus.LATE)


class StandardPayrollCalculator(PayrollCalculator):
    """Standard rule: base + daily allowance x days worked + commission + overtime - deductions.

    Days worked are days with status present or late. Overtime is paid per
    loading/unloading event.
    """

    def __init__(self, overtime_rate: int = OVERTIME_RATE_PER_EVENT):
        self._overtime_rate = int(overtime_rate)

    @staticmethod
    def commission(salary: SalaryConfig, *, trips_completed: int, trip_revenue: int) -> int:
        rate = Decimal(str(salary.trip_commission or 0))
        if CommissionType(salary.commission_type) == CommissionType.PERCENTAGE:
            return round_half_up(Decimal(int(trip_revenue)) * rate / 100)
        return round_half_up(Decimal(int(trips_completed)) * rate)

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
        days_worked = sum(1 for d in attendance if d.status in WORKED_STATUSES)
        overtime_events = sum(int(d.overtime_count) for d in attendance)

        base_salary = int(salary.base_salary)
        total_allowance = int(salary.allowance) * days_worked
        total_commission = self.commission(salary, trips_completed=trips_completed, trip_revenue=trip_revenue)
        total_overtime = overtime_events * self._overtime_rate

        gross_pay = base_salary + total_allowance + total_commission + total_overtime
        total_deductions = sum(int(d.amount) for d in deductions)

        if total_working_days > 0:
            attendance_rate = round(days_worked / total_working_days * 100, 1)
        else:
            attendance_rate = 0.0

        return PayrollBreakdown(
            days_worked=days_worked,
            total_working_days=int(total_working_days),
            attendance_rate=attendance_rate,
            base_salary=base_salary,
            daily_allowance=int(salary.allowance),
            total_allowance=total_allowance,
            trips_completed=int(trips_completed),
            total_commission=total_commission,
            overtime_events=overtime_events,
            overtime_rate=self._overtime_rate,
            total_overtime=total_overtime,
            gross_pay=gross_pay,
            total_deductions=total_deductions,
            net_pay=gross_pay - total_deductions,
        )
