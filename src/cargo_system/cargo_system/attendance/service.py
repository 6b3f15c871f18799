from __future__ import annotations

from dataclasses import replace
from datetime import date, datetime
from typing import Callable, Optional, Sequence

from ..common.datetime_utils import now_local
from ..common.validators import optional_str
from ..core.enums import AttendanceStatus, ShiftType
from ..core.exceptions import NotFoundError, ValidationError
from ..core.logger import logger
from ..employees.repository import EmployeeRepository
from .factory import AttendanceStrategyFactory
from .model import AttendanceDay, AttendanceShift, AttendanceSummary
from .repository import AttendanceRepository
from .rules import calculate_total_hours, count_overtime_events


class AttendanceService:
    def __init__(
        self,
        attendance: AttendanceRepository,
        employees: EmployeeRepository,
        *,
        strategy_factory: AttendanceStrategyFactory | None = None,
        clock: Callable[[], datetime] = now_local,
    ):
        self._attendance = attendance
        self._employees = employees
        self._factory = strategy_factory or AttendanceStrategyFactory()
        self._clock = clock

    def _require_active_employee(self, employee_id: str) -> None:
        employee = self._employees.get_by_id(employee_id)
        if not employee:
            raise NotFoundError("Karyawan tidak ditemukan")
        if not employee.is_active:
            raise ValidationError("Karyawan tidak aktif")

    def _recompute(self, day: AttendanceDay) -> AttendanceDay:
        decision = self._factory.for_shifts(day.shifts).decide(day.shifts)
        return replace(
            day,
            status=decision.status,
            total_hours=calculate_total_hours(day.shifts),
            overtime_count=count_overtime_events(day.shifts),
        )

    def check_in(
        self,
        employee_id: str,
        *,
        shift_type: ShiftType = ShiftType.REGULAR,
        notes: Optional[str] = None,
        now: datetime | None = None,
    ) -> AttendanceDay:
        now = now or self._clock()
        today = now.date()
        shift_type = ShiftType(shift_type)
        self._require_active_employee(employee_id)

        day = self._attendance.get_day(employee_id, today) or AttendanceDay(
            employee_id=employee_id,
            work_date=today,
            status=AttendanceStatus.ABSENT,
        )
        if day.open_shift:
            raise ValidationError("Masih ada shift yang belum check-out")
        if shift_type == ShiftType.REGULAR and any(s.shift_type == ShiftType.REGULAR for s in day.shifts):
            raise ValidationError("Sudah check-in shift regular hari ini")

        shift = AttendanceShift(shift_type=shift_type, check_in=now, notes=optional_str(notes))
        day = self._recompute(replace(day, shifts=day.shifts + (shift,)))
        self._attendance.save_day(day)
        logger.info(f"{employee_id} checked in ({shift_type.value}) at {now:%H:%M} -> {day.status.value}")
        return day

    def check_out(self, employee_id: str, *, now: datetime | None = None) -> AttendanceDay:
        now = now or self._clock()
        today = now.date()

        day = self._attendance.get_day(employee_id, today)
        if not day or not day.shifts:
            raise ValidationError("Belum check-in hari ini")
        if not day.open_shift:
            raise ValidationError("Semua shift sudah check-out")

        shifts = list(day.shifts)
        index = max(i for i, s in enumerate(shifts) if s.is_open)
        if now < shifts[index].check_in:
            raise ValidationError("Jam check-out tidak boleh sebelum check-in")
        shifts[index] = replace(shifts[index], check_out=now)

        day = self._recompute(replace(day, shifts=tuple(shifts)))
        self._attendance.save_day(day)
        logger.info(f"{employee_id} checked out at {now:%H:%M} ({day.total_hours} jam)")
        return day

    def mark_absent(self, employee_id: str, work_date: date, notes: Optional[str] = None) -> AttendanceDay:
        self._require_active_employee(employee_id)
        day = AttendanceDay(
            employee_id=employee_id,
            work_date=work_date,
            status=AttendanceStatus.ABSENT,
            notes=optional_str(notes),
        )
        self._attendance.save_day(day)
        return day

    def update_status(
        self,
        employee_id: str,
        work_date: date,
        status: AttendanceStatus,
        notes: Optional[str] = None,
    ) -> AttendanceDay:
        """Manual override (e.g. leave) keeping any recorded shifts."""
        current = self._attendance.get_day(employee_id, work_date)
        if current is None:
            self._require_active_employee(employee_id)
            current = AttendanceDay(employee_id=employee_id, work_date=work_date, status=AttendanceStatus(status))

        day = replace(current, status=AttendanceStatus(status), notes=optional_str(notes) or current.notes)
        self._attendance.save_day(day)
        return day

    def get_today(self, employee_id: str, *, today: Optional[date] = None) -> Optional[AttendanceDay]:
        return self._attendance.get_day(employee_id, today or self._clock().date())

    def list_for_employee(self, employee_id: str, *, start_date: date, end_date: date) -> Sequence[AttendanceDay]:
        return self._attendance.list_days(start_date=start_date, end_date=end_date, employee_id=employee_id)

    def list_for_date(self, work_date: date) -> Sequence[AttendanceDay]:
        return self._attendance.list_days(start_date=work_date, end_date=work_date)

    def list_range(self, *, start_date: date, end_date: date) -> Sequence[AttendanceDay]:
        if start_date > end_date:
            raise ValidationError("Tanggal mulai tidak boleh setelah tanggal akhir")
        return self._attendance.list_days(start_date=start_date, end_date=end_date)

    def summary(self, employee_id: str, *, start_date: date, end_date: date) -> AttendanceSummary:
        days = self.list_for_employee(employee_id, start_date=start_date, end_date=end_date)
        counts = {s: 0 for s in AttendanceStatus}
        for d in days:
            counts[d.status] += 1
        return AttendanceSummary(
            employee_id=employee_id,
            total_days=len(days),
            present=counts[AttendanceStatus.PRESENT],
            late=counts[AttendanceStatus.LATE],
            absent=counts[AttendanceStatus.ABSENT],
            leave=counts[AttendanceStatus.LEAVE],
            total_hours=round(sum(d.total_hours for d in days), 2),
            overtime_count=sum(d.overtime_count for d in days),
        )
