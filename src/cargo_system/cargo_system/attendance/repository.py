from __future__ import annotations

from datetime import date
from typing import Optional, Protocol, Sequence

from .model import AttendanceDay


class AttendanceRepository(Protocol):
    def get_day(self, employee_id: str, work_date: date) -> Optional[AttendanceDay]:
        raise NotImplementedError

    def save_day(self, day: AttendanceDay) -> None:
        """Insert or replace the day record together with its shifts."""

        raise NotImplementedError

    def list_days(
        self,
        *,
        start_date: date,
        end_date: date,
        employee_id: Optional[str] = None,
    ) -> Sequence[AttendanceDay]:
        raise NotImplementedError
