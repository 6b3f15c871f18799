from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime
from typing import Optional

from ..core.enums import AttendanceStatus, ShiftType

SHIFT_TYPE_LABELS: dict[ShiftType, str] = {
    ShiftType.REGULAR: "Shift Regular (9-5)",
    ShiftType.OVERTIME_LOADING: "Lembur Bongkar",
    ShiftType.OVERTIME_UNLOADING: "Lembur Muat",
}

ATTENDANCE_STATUS_LABELS: dict[AttendanceStatus, str] = {
    AttendanceStatus.PRESENT: "Hadir",
    AttendanceStatus.ABSENT: "Tidak Hadir",
    AttendanceStatus.LATE: "Terlambat",
    AttendanceStatus.LEAVE: "Izin/Cuti",
}


@dataclass(frozen=True)
class AttendanceShift:
    shift_type: ShiftType
    check_in: datetime
    check_out: Optional[datetime] = None
    notes: Optional[str] = None

    @property
    def is_open(self) -> bool:
        return self.check_out is None

    @property
    def is_overtime(self) -> bool:
        return self.shift_type in (ShiftType.OVERTIME_LOADING, ShiftType.OVERTIME_UNLOADING)


@dataclass(frozen=True)
class AttendanceDay:
    """Kehadiran satu karyawan pada satu tanggal (bisa beberapa shift)."""

    employee_id: str
    work_date: date
    status: AttendanceStatus
    shifts: tuple[AttendanceShift, ...] = ()
    total_hours: float = 0.0
    overtime_count: int = 0
    notes: Optional[str] = None

    @property
    def record_id(self) -> str:
        return f"{self.employee_id}_{self.work_date.isoformat()}"

    @property
    def open_shift(self) -> Optional[AttendanceShift]:
        for shift in reversed(self.shifts):
            if shift.is_open:
                return shift
        return None


@dataclass(frozen=True)
class AttendanceSummary:
    employee_id: str
    total_days: int
    present: int
    late: int
    absent: int
    leave: int
    total_hours: float
    overtime_count: int
