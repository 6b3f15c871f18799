from __future__ import annotations

from typing import Optional, Protocol, Sequence

from ..core.enums import AccountStatus, EmployeeStatus, Role
from .model import Employee


class EmployeeRepository(Protocol):
    def list_employees(self, *, role: Optional[Role] = None, status: Optional[EmployeeStatus] = None) -> Sequence[Employee]:
        raise NotImplementedError

    def get_by_id(self, employee_id: str) -> Optional[Employee]:
        raise NotImplementedError

    def get_by_email(self, email: str) -> Optional[Employee]:
        raise NotImplementedError

    def get_password_hash(self, employee_id: str) -> Optional[str]:
        raise NotImplementedError

    def create(self, employee: Employee, *, password_hash: str) -> None:
        raise NotImplementedError

    def update(self, employee: Employee) -> bool:
        raise NotImplementedError

    def set_status(self, employee_id: str, status: EmployeeStatus, account_status: AccountStatus) -> bool:
        raise NotImplementedError

    def set_password_hash(self, employee_id: str, password_hash: str) -> bool:
        raise NotImplementedError

    def delete(self, employee_id: str) -> bool:
        raise NotImplementedError
