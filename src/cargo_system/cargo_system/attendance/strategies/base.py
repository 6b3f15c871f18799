from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Optional, Sequence

from ...core.enums import AttendanceStatus
from ..model import AttendanceShift


@dataclass(frozen=True)
class StatusDecision:
    status: AttendanceStatus
    note: Optional[str] = None


class AttendanceStrategy(ABC):
    """Turns the shifts recorded for one employee-day into that day's status."""

    @abstractmethod
    def decide(self, shifts: Sequence[AttendanceShift]) -> StatusDecision:
        raise NotImplementedError
