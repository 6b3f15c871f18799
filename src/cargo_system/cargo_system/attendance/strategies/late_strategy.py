from __future__ import annotations

from typing import Sequence

from ...core.enums import AttendanceStatus, ShiftType
from ..model import AttendanceShift
from .base import AttendanceStrategy, StatusDecision


class LateStrategy(AttendanceStrategy):
    """Late check-in on the regular shift."""

    def decide(self, shifts: Sequence[AttendanceShift]) -> StatusDecision:
        regular = next(s for s in shifts if s.shift_type == ShiftType.REGULAR)
        return StatusDecision(status=AttendanceStatus.LATE, note=f"Check-in {regular.check_in.strftime('%H:%M')}")
