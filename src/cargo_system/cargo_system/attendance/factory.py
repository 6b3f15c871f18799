from __future__ import annotations

from dataclasses import dataclass
from datetime import time
from typing import Sequence

from ..core.constants import LATE_THRESHOLD
from ..core.enums import ShiftType
from .model import AttendanceShift
from .rules import is_late_check_in
from .strategies.absent_strategy import AbsentStrategy
from .strategies.base import AttendanceStrategy
from .strategies.late_strategy import LateStrategy
from .strategies.normal_strategy import NormalStrategy


@dataclass
class AttendanceStrategyFactory:
    """Factory Pattern: choose appropriate strategy based on rules."""

    late_threshold: time = LATE_THRESHOLD

    def for_shifts(self, shifts: Sequence[AttendanceShift]) -> AttendanceStrategy:
        if not shifts:
            return AbsentStrategy()

        regular = next((s for s in shifts if s.shift_type == ShiftType.REGULAR), None)
        if regular is None:
            return NormalStrategy()
        if is_late_check_in(regular.check_in, self.late_threshold):
            return LateStrategy()
        return NormalStrategy()
