from __future__ import annotations

from dataclasses import replace
from datetime import datetime
from typing import Callable, Mapping, Optional, Sequence

from ..attendance.repository import AttendanceRepository
from ..common.datetime_utils import count_working_days, now_local, period_date_range
from ..common.validators import optional_str, require_non_negative, require_period
from ..core.constants import MAX_DAYS_IN_MONTH
from ..core.enums import DeductionType, EmployeeStatus, PayrollStatus
from ..core.exceptions import DomainError, NotFoundError, ValidationError
from ..core.logger import logger
from ..employees.model import Employee
from ..employees.repository import EmployeeRepository
from .calculator.base import PayrollCalculator
from .calculator.standard_calculator import StandardPayrollCalculator
from .model import Deduction, PayrollBreakdown, PayrollRecord, PeriodSummary
from .repository import PayrollRepository


def validate_breakdown(breakdown: PayrollBreakdown) -> list[str]:
    """Return every rule the calculation breaks (empty when valid)."""
    errors: list[str] = []
    if breakdown.days_worked < 0:
        errors.append("Hari kerja tidak boleh negatif")
    if breakdown.gross_pay < 0:
        errors.append("Gaji kotor tidak boleh negatif")
    if breakdown.net_pay < 0:
        errors.append("Gaji bersih tidak boleh negatif (potongan melebihi gaji kotor)")
    if breakdown.days_worked > MAX_DAYS_IN_MONTH:
        errors.append(f"Hari kerja tidak boleh lebih dari {MAX_DAYS_IN_MONTH}")
    return errors


def _with_deductions(breakdown: PayrollBreakdown, deductions: Sequence[Deduction]) -> PayrollBreakdown:
    total = sum(int(d.amount) for d in deductions)
    return replace(breakdown, total_deductions=total, net_pay=breakdown.gross_pay - total)


class PayrollService:
    def __init__(
        self,
        payrolls: PayrollRepository,
        employees: EmployeeRepository,
        attendance: AttendanceRepository,
        *,
        calculator: PayrollCalculator | None = None,
        clock: Callable[[], datetime] = now_local,
    ):
        self._payrolls = payrolls
        self._employees = employees
        self._attendance = attendance
        self._calculator = calculator or StandardPayrollCalculator()
        self._clock = clock

    def get(self, payroll_id: int) -> PayrollRecord:
        record = self._payrolls.get_by_id(payroll_id)
        if not record:
            raise NotFoundError("Data gaji tidak ditemukan")
        return record

    def list_payrolls(
        self,
        *,
        period: Optional[str] = None,
        employee_id: Optional[str] = None,
        status: Optional[PayrollStatus] = None,
    ) -> Sequence[PayrollRecord]:
        if period is not None:
            period = require_period(period)
        return self._payrolls.list_payrolls(period=period, employee_id=employee_id, status=status)

    def calculate_for_employee(
        self,
        employee: Employee,
        period: str,
        *,
        deductions: Sequence[Deduction] = (),
        trips_completed: int = 0,
        trip_revenue: int = 0,
    ) -> PayrollBreakdown:
        """Pure calculation for one employee; nothing is stored."""
        period = require_period(period)
        start, end = period_date_range(period)
        days = self._attendance.list_days(start_date=start, end_date=end, employee_id=employee.employee_id)
        breakdown = self._calculator.calculate(
            salary=employee.salary,
            attendance=days,
            deductions=deductions,
            trips_completed=require_non_negative(trips_completed, "Jumlah trip"),
            trip_revenue=require_non_negative(trip_revenue, "Pendapatan trip"),
            total_working_days=count_working_days(start, end),
        )
        errors = validate_breakdown(breakdown)
        if errors:
            raise ValidationError("; ".join(errors))
        return breakdown

    def generate_payroll(
        self,
        employee_id: str,
        period: str,
        *,
        trips_completed: int = 0,
        trip_revenue: int = 0,
        notes: Optional[str] = None,
    ) -> PayrollRecord:
        """Create or recalculate the draft payroll of one employee for a period.

        Deductions already on an existing draft are kept.
        """
        employee = self._employees.get_by_id(employee_id)
        if not employee:
            raise NotFoundError("Karyawan tidak ditemukan")

        period = require_period(period)
        existing = self._payrolls.get_for_employee_period(employee_id, period)
        if existing and existing.status != PayrollStatus.DRAFT:
            raise ValidationError("Gaji periode ini sudah disetujui dan tidak bisa dihitung ulang")

        deductions = existing.deductions if existing else ()
        breakdown = self.calculate_for_employee(
            employee,
            period,
            deductions=deductions,
            trips_completed=trips_completed,
            trip_revenue=trip_revenue,
        )
        record = PayrollRecord(
            payroll_id=existing.payroll_id if existing else 0,
            employee_id=employee.employee_id,
            employee_name=employee.full_name,
            role=employee.role,
            period=period,
            breakdown=breakdown,
            deductions=tuple(deductions),
            status=PayrollStatus.DRAFT,
            notes=optional_str(notes) or (existing.notes if existing else None),
            generated_at=self._clock(),
        )
        payroll_id = self._payrolls.save(record)
        logger.info(f"Payroll {period} generated for {employee_id}: net {breakdown.net_pay}")
        return replace(record, payroll_id=payroll_id)

    def generate_bulk(
        self,
        period: str,
        *,
        trips: Optional[Mapping[str, int]] = None,
        revenue: Optional[Mapping[str, int]] = None,
    ) -> list[PayrollRecord]:
        """Generate drafts for every active employee, skipping the ones that fail."""
        period = require_period(period)
        trips = trips or {}
        revenue = revenue or {}

        records = []
        for employee in self._employees.list_employees(status=EmployeeStatus.ACTIVE):
            try:
                records.append(
                    self.generate_payroll(
                        employee.employee_id,
                        period,
                        trips_completed=trips.get(employee.employee_id, 0),
                        trip_revenue=revenue.get(employee.employee_id, 0),
                    )
                )
            except DomainError as e:
                logger.warning(f"Skip payroll {period} for {employee.full_name}: {e}")
        logger.info(f"Bulk payroll {period}: {len(records)} record(s)")
        return records

    def _require_draft(self, record: PayrollRecord) -> None:
        if record.status != PayrollStatus.DRAFT:
            raise ValidationError("Hanya gaji berstatus draft yang bisa diubah")

    def _store_deductions(self, record: PayrollRecord, deductions: Sequence[Deduction]) -> PayrollRecord:
        breakdown = _with_deductions(record.breakdown, deductions)
        errors = validate_breakdown(breakdown)
        if errors:
            raise ValidationError("; ".join(errors))
        updated = replace(record, breakdown=breakdown, deductions=tuple(deductions))
        self._payrolls.save(updated)
        return updated

    def add_deduction(
        self,
        payroll_id: int,
        deduction_type: DeductionType,
        amount: int,
        description: Optional[str] = None,
    ) -> PayrollRecord:
        record = self.get(payroll_id)
        self._require_draft(record)
        deduction = Deduction(
            deduction_type=DeductionType(deduction_type),
            amount=require_non_negative(amount, "Jumlah potongan"),
            description=optional_str(description),
        )
        return self._store_deductions(record, record.deductions + (deduction,))

    def remove_deduction(self, payroll_id: int, index: int) -> PayrollRecord:
        record = self.get(payroll_id)
        self._require_draft(record)
        if index < 0 or index >= len(record.deductions):
            raise NotFoundError("Potongan tidak ditemukan")
        remaining = tuple(d for i, d in enumerate(record.deductions) if i != index)
        return self._store_deductions(record, remaining)

    def approve(self, payroll_id: int) -> None:
        record = self.get(payroll_id)
        if record.status != PayrollStatus.DRAFT:
            raise ValidationError("Hanya gaji berstatus draft yang bisa disetujui")
        self._payrolls.set_status(payroll_id, PayrollStatus.APPROVED, self._clock())
        logger.info(f"Payroll #{payroll_id} ({record.employee_id} {record.period}) approved")

    def mark_paid(self, payroll_id: int) -> None:
        record = self.get(payroll_id)
        if record.status != PayrollStatus.APPROVED:
            raise ValidationError("Gaji harus disetujui sebelum dibayar")
        self._payrolls.set_status(payroll_id, PayrollStatus.PAID, self._clock())
        logger.info(f"Payroll #{payroll_id} ({record.employee_id} {record.period}) paid")

    def delete_payroll(self, payroll_id: int) -> None:
        record = self.get(payroll_id)
        if record.status == PayrollStatus.PAID:
            raise ValidationError("Gaji yang sudah dibayar tidak bisa dihapus")
        self._payrolls.delete(payroll_id)

    def period_summary(self, period: str) -> PeriodSummary:
        records = self.list_payrolls(period=period)
        counts = {s: 0 for s in PayrollStatus}
        for r in records:
            counts[r.status] += 1
        return PeriodSummary(
            period=period,
            total_employees=len(records),
            total_gross_pay=sum(r.gross_pay for r in records),
            total_deductions=sum(r.breakdown.total_deductions for r in records),
            total_net_pay=sum(r.net_pay for r in records),
            status_counts=counts,
        )
