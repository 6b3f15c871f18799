from __future__ import annotations

from datetime import date, datetime
from typing import Optional

import pytest

from src.cargo_system.cargo_system.attendance.model import AttendanceDay
from src.cargo_system.cargo_system.attendance.service import AttendanceService
from src.cargo_system.cargo_system.core.enums import AccountStatus, AttendanceStatus, EmployeeStatus, Role, ShiftType
from src.cargo_system.cargo_system.core.exceptions import NotFoundError, ValidationError
from src.cargo_system.cargo_system.employees.model import Employee


class InMemoryAttendance:
    def __init__(self):
        self.days: dict[tuple[str, date], AttendanceDay] = {}

    def get_day(self, employee_id: str, work_date: date) -> Optional[AttendanceDay]:
        return self.days.get((employee_id, work_date))

    def save_day(self, day: AttendanceDay) -> None:
        self.days[(day.employee_id, day.work_date)] = day

    def list_days(self, *, start_date, end_date, employee_id=None):
        return [
            d
            for (emp, work_date), d in sorted(self.days.items())
            if start_date <= work_date <= end_date and (employee_id is None or emp == employee_id)
        ]


class InMemoryEmployees:
    def __init__(self, employees):
        self._by_id = {e.employee_id: e for e in employees}

    def get_by_id(self, employee_id: str) -> Optional[Employee]:
        return self._by_id.get(employee_id)


def _employee(employee_id="EMP-001", status=EmployeeStatus.ACTIVE):
    return Employee(
        employee_id=employee_id,
        full_name="Budi Santoso",
        role=Role.DRIVER,
        status=status,
        join_date=date(2025, 1, 2),
        email="budi.santoso@cahayacargo.com",
        account_status=AccountStatus.ACTIVE,
    )


@pytest.fixture
def service():
    employees = InMemoryEmployees([_employee(), _employee("EMP-002", EmployeeStatus.INACTIVE)])
    return AttendanceService(InMemoryAttendance(), employees)


def test_on_time_check_in_then_check_out(service):
    day = service.check_in("EMP-001", now=datetime(2026, 1, 20, 8, 55))
    assert day.status == AttendanceStatus.PRESENT
    assert day.open_shift is not None

    day = service.check_out("EMP-001", now=datetime(2026, 1, 20, 17, 25))
    assert day.open_shift is None
    assert day.total_hours == 8.5


def test_late_check_in(service):
    day = service.check_in("EMP-001", now=datetime(2026, 1, 20, 9, 16))
    assert day.status == AttendanceStatus.LATE


def test_overtime_shift_adds_event_and_keeps_status(service):
    service.check_in("EMP-001", now=datetime(2026, 1, 20, 9, 0))
    service.check_out("EMP-001", now=datetime(2026, 1, 20, 17, 0))
    day = service.check_in("EMP-001", shift_type=ShiftType.OVERTIME_LOADING, now=datetime(2026, 1, 20, 20, 0))

    assert day.status == AttendanceStatus.PRESENT
    assert day.overtime_count == 1
    assert len(day.shifts) == 2


def test_second_regular_check_in_is_rejected(service):
    service.check_in("EMP-001", now=datetime(2026, 1, 20, 9, 0))
    service.check_out("EMP-001", now=datetime(2026, 1, 20, 12, 0))
    with pytest.raises(ValidationError):
        service.check_in("EMP-001", now=datetime(2026, 1, 20, 13, 0))


def test_check_in_while_shift_open_is_rejected(service):
    service.check_in("EMP-001", now=datetime(2026, 1, 20, 9, 0))
    with pytest.raises(ValidationError):
        service.check_in("EMP-001", shift_type=ShiftType.OVERTIME_UNLOADING, now=datetime(2026, 1, 20, 10, 0))


def test_check_out_without_check_in(service):
    with pytest.raises(ValidationError):
        service.check_out("EMP-001", now=datetime(2026, 1, 20, 17, 0))


def test_inactive_or_unknown_employee_cannot_check_in(service):
    with pytest.raises(ValidationError):
        service.check_in("EMP-002", now=datetime(2026, 1, 20, 9, 0))
    with pytest.raises(NotFoundError):
        service.check_in("EMP-404", now=datetime(2026, 1, 20, 9, 0))


def test_summary_counts_statuses(service):
    service.check_in("EMP-001", now=datetime(2026, 1, 19, 9, 0))
    service.check_in("EMP-001", now=datetime(2026, 1, 20, 9, 30))
    service.update_status("EMP-001", date(2026, 1, 21), AttendanceStatus.LEAVE, notes="Cuti")

    summary = service.summary("EMP-001", start_date=date(2026, 1, 1), end_date=date(2026, 1, 31))
    assert (summary.present, summary.late, summary.leave, summary.absent) == (1, 1, 1, 0)
