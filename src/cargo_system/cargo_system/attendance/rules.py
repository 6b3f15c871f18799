from __future__ import annotations

from datetime import datetime, time
from typing import Iterable

from ..core.constants import LATE_THRESHOLD
from .model import AttendanceShift


def calculate_total_hours(shifts: Iterable[AttendanceShift]) -> float:
    """Sum of closed shift durations in hours; open shifts count as 0."""
    seconds = 0.0
    for shift in shifts:
        if shift.check_out is None:
            continue
        seconds += (shift.check_out - shift.check_in).total_seconds()
    return round(seconds / 3600, 2)


def count_overtime_events(shifts: Iterable[AttendanceShift]) -> int:
    return sum(1 for s in shifts if s.is_overtime)


def is_late_check_in(check_in: datetime, threshold: time = LATE_THRESHOLD) -> bool:
    """Late when the check-in minute is after the threshold (09:15 is still on time)."""
    return (check_in.hour, check_in.minute) > (threshold.hour, threshold.minute)
