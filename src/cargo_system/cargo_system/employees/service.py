from __future__ import annotations

from dataclasses import dataclass, replace
from datetime import date, datetime
from typing import Callable, Optional, Sequence

from werkzeug.security import check_password_hash, generate_password_hash

from ..common.datetime_utils import now_local
from ..common.errors import EMAIL_EXISTS_MESSAGE
from ..common.validators import optional_str, require_min_length, require_non_empty, require_non_negative
from ..core.constants import DOCUMENT_EXPIRY_WARNING_DAYS
from ..core.enums import AccountStatus, CommissionType, EmployeeStatus, Role
from ..core.exceptions import AuthenticationError, DuplicateError, NotFoundError, ValidationError
from ..core.logger import logger
from ..counters.service import CounterService
from .credentials import generate_default_password, generate_employee_email
from .model import DocumentAlert, Employee, EmployeeDocument, SalaryConfig
from .repository import EmployeeRepository


@dataclass(frozen=True)
class SessionUser:
    """What we store into Flask session after login."""

    employee_id: str
    full_name: str
    role: Role
    email: str


@dataclass(frozen=True)
class NewEmployeeAccount:
    """Returned once on creation so the admin can hand over the credentials."""

    employee_id: str
    email: str
    default_password: str


def _check_salary(salary: SalaryConfig) -> SalaryConfig:
    commission = float(salary.trip_commission or 0)
    if commission < 0:
        raise ValidationError("Komisi tidak boleh negatif")
    commission_type = CommissionType(salary.commission_type)
    if commission_type == CommissionType.PERCENTAGE and commission > 100:
        raise ValidationError("Komisi persentase maksimal 100")
    return SalaryConfig(
        base_salary=require_non_negative(salary.base_salary, "Gaji pokok"),
        allowance=require_non_negative(salary.allowance, "Uang harian"),
        trip_commission=commission,
        commission_type=commission_type,
    )


class EmployeeService:
    """Use case: manage employees (admin)."""

    def __init__(
        self,
        employees: EmployeeRepository,
        counters: CounterService,
        *,
        clock: Callable[[], datetime] = now_local,
    ):
        self._employees = employees
        self._counters = counters
        self._clock = clock

    def get(self, employee_id: str) -> Employee:
        employee = self._employees.get_by_id(employee_id)
        if not employee:
            raise NotFoundError("Karyawan tidak ditemukan")
        return employee

    def list_employees(self, *, role: Optional[Role] = None, status: Optional[EmployeeStatus] = None) -> Sequence[Employee]:
        return self._employees.list_employees(role=role, status=status)

    def list_active_drivers(self) -> Sequence[Employee]:
        return self._employees.list_employees(role=Role.DRIVER, status=EmployeeStatus.ACTIVE)

    def _check_email_free(self, email: str, *, employee_id: Optional[str] = None) -> str:
        email = require_non_empty(email, "Email").lower()
        existing = self._employees.get_by_email(email)
        if existing and existing.employee_id != employee_id:
            raise DuplicateError(EMAIL_EXISTS_MESSAGE)
        return email

    def create_employee(
        self,
        *,
        full_name: str,
        role: Role,
        join_date: date,
        salary: SalaryConfig,
        phone: Optional[str] = None,
        address: Optional[str] = None,
        city: Optional[str] = None,
        documents: Sequence[EmployeeDocument] = (),
        jobdesk: Optional[str] = None,
        notes: Optional[str] = None,
        email: Optional[str] = None,
    ) -> NewEmployeeAccount:
        full_name = require_non_empty(full_name, "Nama lengkap")
        role = Role(role)
        email = self._check_email_free(email or generate_employee_email(full_name))
        salary = _check_salary(salary)
        password = generate_default_password(full_name)

        employee_id = self._counters.next_employee_id()
        employee = Employee(
            employee_id=employee_id,
            full_name=full_name,
            role=role,
            status=EmployeeStatus.ACTIVE,
            join_date=join_date,
            email=email,
            account_status=AccountStatus.ACTIVE,
            salary=salary,
            phone=optional_str(phone),
            address=optional_str(address),
            city=optional_str(city),
            documents=tuple(documents),
            jobdesk=optional_str(jobdesk),
            notes=optional_str(notes),
        )
        self._employees.create(employee, password_hash=generate_password_hash(password))
        logger.info(f"Employee {employee_id} created ({role.value}, {email})")
        return NewEmployeeAccount(employee_id=employee_id, email=email, default_password=password)

    def update_employee(
        self,
        employee_id: str,
        *,
        full_name: str,
        role: Role,
        join_date: date,
        salary: SalaryConfig,
        phone: Optional[str] = None,
        address: Optional[str] = None,
        city: Optional[str] = None,
        documents: Sequence[EmployeeDocument] = (),
        jobdesk: Optional[str] = None,
        notes: Optional[str] = None,
        email: Optional[str] = None,
    ) -> None:
        current = self.get(employee_id)
        updated = replace(
            current,
            full_name=require_non_empty(full_name, "Nama lengkap"),
            role=Role(role),
            join_date=join_date,
            salary=_check_salary(salary),
            phone=optional_str(phone),
            address=optional_str(address),
            city=optional_str(city),
            documents=tuple(documents),
            jobdesk=optional_str(jobdesk),
            notes=optional_str(notes),
            email=self._check_email_free(email, employee_id=current.employee_id) if email else current.email,
        )
        self._employees.update(updated)

    def set_status(self, employee_id: str, status: EmployeeStatus) -> None:
        """Inactive or suspended employees lose their login as well."""
        self.get(employee_id)
        status = EmployeeStatus(status)
        account_status = AccountStatus.ACTIVE if status == EmployeeStatus.ACTIVE else AccountStatus.SUSPENDED
        self._employees.set_status(employee_id, status, account_status)
        logger.info(f"Employee {employee_id} status -> {status.value}")

    def deactivate_employee(self, employee_id: str) -> None:
        self.set_status(employee_id, EmployeeStatus.INACTIVE)

    def delete_employee(self, employee_id: str) -> None:
        if not self._employees.delete(employee_id):
            raise NotFoundError("Karyawan tidak ditemukan")
        logger.info(f"Employee {employee_id} deleted")

    def reset_password(self, employee_id: str) -> str:
        employee = self.get(employee_id)
        password = generate_default_password(employee.full_name)
        self._employees.set_password_hash(employee.employee_id, generate_password_hash(password))
        return password

    def change_password(self, employee_id: str, new_password: str) -> None:
        require_min_length(new_password, "Password", 6)
        self.get(employee_id)
        self._employees.set_password_hash(employee_id, generate_password_hash(new_password))

    def document_alerts(
        self,
        *,
        today: Optional[date] = None,
        threshold_days: int = DOCUMENT_EXPIRY_WARNING_DAYS,
    ) -> list[DocumentAlert]:
        """Documents of active employees that are expired or expire within the threshold."""
        today = today or self._clock().date()
        alerts: list[DocumentAlert] = []
        for employee in self._employees.list_employees(status=EmployeeStatus.ACTIVE):
            for doc in employee.documents:
                expired = doc.is_expired(today)
                if expired or doc.is_expiring_soon(today, threshold_days):
                    alerts.append(
                        DocumentAlert(
                            employee_id=employee.employee_id,
                            full_name=employee.full_name,
                            document=doc,
                            expired=expired,
                            days_until_expiry=doc.days_until_expiry(today),
                        )
                    )
        alerts.sort(key=lambda a: a.days_until_expiry)
        return alerts


class AuthService:
    """Use case: authenticate an employee account (login)."""

    def __init__(self, employees: EmployeeRepository):
        self._employees = employees

    def authenticate(self, email: str, password: str) -> SessionUser:
        employee = self._employees.get_by_email((email or "").strip().lower()) if email else None
        if not employee or not employee.is_active or employee.account_status != AccountStatus.ACTIVE:
            raise AuthenticationError("Email atau password salah")

        password_hash = self._employees.get_password_hash(employee.employee_id) or ""
        try:
            ok = check_password_hash(password_hash, password or "")
        except ValueError:
            # e.g. placeholder or corrupted hashes
            ok = False

        if not ok:
            raise AuthenticationError("Email atau password salah")

        return SessionUser(
            employee_id=employee.employee_id,
            full_name=employee.full_name,
            role=employee.role,
            email=employee.email,
        )
