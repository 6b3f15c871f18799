from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date, datetime
from typing import Optional

from ..core.enums import AccountStatus, CommissionType, EmployeeStatus, Role

DOCUMENT_TYPES = ("KTP", "SIM A", "SIM B1", "SIM B2", "KK", "NPWP", "STNK")

EMPLOYEE_STATUS_LABELS: dict[EmployeeStatus, str] = {
    EmployeeStatus.ACTIVE: "Aktif",
    EmployeeStatus.INACTIVE: "Tidak Aktif",
    EmployeeStatus.SUSPENDED: "Suspend",
}


@dataclass(frozen=True)
class SalaryConfig:
    """Komponen gaji: gaji pokok, uang harian, dan komisi trip."""

    base_salary: int = 0
    allowance: int = 0
    trip_commission: float = 0
    commission_type: CommissionType = CommissionType.FIXED


@dataclass(frozen=True)
class EmployeeDocument:
    doc_type: str
    number: str
    expiry_date: Optional[date] = None
    notes: Optional[str] = None

    def days_until_expiry(self, today: date) -> Optional[int]:
        if not self.expiry_date:
            return None
        return (self.expiry_date - today).days

    def is_expired(self, today: date) -> bool:
        days = self.days_until_expiry(today)
        return days is not None and days < 0

    def is_expiring_soon(self, today: date, threshold_days: int) -> bool:
        days = self.days_until_expiry(today)
        return days is not None and 0 <= days <= threshold_days


@dataclass(frozen=True)
class Employee:
    employee_id: str
    full_name: str
    role: Role
    status: EmployeeStatus
    join_date: date
    email: str
    account_status: AccountStatus
    salary: SalaryConfig = field(default_factory=SalaryConfig)
    phone: Optional[str] = None
    address: Optional[str] = None
    city: Optional[str] = None
    documents: tuple[EmployeeDocument, ...] = ()
    jobdesk: Optional[str] = None
    notes: Optional[str] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    @property
    def is_active(self) -> bool:
        return self.status == EmployeeStatus.ACTIVE


@dataclass(frozen=True)
class DocumentAlert:
    employee_id: str
    full_name: str
    document: EmployeeDocument
    expired: bool
    days_until_expiry: int
