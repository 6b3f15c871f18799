from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Optional

from ..core.enums import DeductionType, PayrollStatus, Role

DEDUCTION_TYPE_LABELS: dict[DeductionType, str] = {
    DeductionType.TAX: "Pajak",
    DeductionType.INSURANCE: "Asuransi",
    DeductionType.ADVANCE: "Kasbon",
    DeductionType.OTHER: "Lainnya",
}

PAYROLL_STATUS_LABELS: dict[PayrollStatus, str] = {
    PayrollStatus.DRAFT: "Draft",
    PayrollStatus.APPROVED: "Disetujui",
    PayrollStatus.PAID: "Dibayar",
}


@dataclass(frozen=True)
class Deduction:
    deduction_type: DeductionType
    amount: int
    description: Optional[str] = None

    @property
    def label(self) -> str:
        return DEDUCTION_TYPE_LABELS[self.deduction_type]


@dataclass(frozen=True)
class PayrollBreakdown:
    """Result of a payroll calculation; all money fields are whole Rupiah."""

    days_worked: int
    total_working_days: int
    attendance_rate: float
    base_salary: int
    daily_allowance: int
    total_allowance: int
    trips_completed: int
    total_commission: int
    overtime_events: int
    overtime_rate: int
    total_overtime: int
    gross_pay: int
    total_deductions: int
    net_pay: int


@dataclass(frozen=True)
class PayrollRecord:
    """Gaji satu karyawan untuk satu periode (YYYY-MM)."""

    payroll_id: int
    employee_id: str
    employee_name: str
    role: Role
    period: str
    breakdown: PayrollBreakdown
    deductions: tuple[Deduction, ...] = ()
    status: PayrollStatus = PayrollStatus.DRAFT
    notes: Optional[str] = None
    generated_at: Optional[datetime] = None
    approved_at: Optional[datetime] = None
    paid_at: Optional[datetime] = None

    @property
    def gross_pay(self) -> int:
        return self.breakdown.gross_pay

    @property
    def net_pay(self) -> int:
        return self.breakdown.net_pay


@dataclass(frozen=True)
class PeriodSummary:
    period: str
    total_employees: int
    total_gross_pay: int
    total_deductions: int
    total_net_pay: int
    status_counts: dict[PayrollStatus, int]
