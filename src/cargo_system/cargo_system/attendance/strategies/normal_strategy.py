from __future__ import annotations

from typing import Sequence

from ...core.enums import AttendanceStatus
from ..model import AttendanceShift
from .base import AttendanceStrategy, StatusDecision


class NormalStrategy(AttendanceStrategy):
    """On-time regular shift, or overtime-only day."""

    def decide(self, shifts: Sequence[AttendanceShift]) -> StatusDecision:
        return StatusDecision(status=AttendanceStatus.PRESENT)
