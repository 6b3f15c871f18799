from __future__ import annotations

from collections import defaultdict
from datetime import date
from typing import Optional, Sequence

from ..core.enums import AttendanceStatus, ShiftType
from ..database.connection import DatabaseConnection
from ..database.mysql_base import as_date, db_cursor, fetchall, fetchone, placeholders
from .model import AttendanceDay, AttendanceShift
from .repository import AttendanceRepository

_DAY_COLUMNS = "day_id, employee_id, work_date, status, total_hours, overtime_count, notes"


class MySQLAttendanceRepository(AttendanceRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    @staticmethod
    def _hydrate(cur, rows: list[dict]) -> list[AttendanceDay]:
        shifts: dict[int, list[AttendanceShift]] = defaultdict(list)
        ids = [int(r["day_id"]) for r in rows]
        if ids:
            cur.execute(
                f"""
                SELECT day_id, shift_type, check_in, check_out, notes
                FROM attendance_shifts
                WHERE day_id IN ({placeholders(ids)})
                ORDER BY position ASC
                """,
                tuple(ids),
            )
            for s in fetchall(cur):
                shifts[int(s["day_id"])].append(
                    AttendanceShift(
                        shift_type=ShiftType(s["shift_type"]),
                        check_in=s["check_in"],
                        check_out=s.get("check_out"),
                        notes=s.get("notes"),
                    )
                )

        return [
            AttendanceDay(
                employee_id=r["employee_id"],
                work_date=as_date(r["work_date"]),
                status=AttendanceStatus(r["status"]),
                shifts=tuple(shifts.get(int(r["day_id"]), [])),
                total_hours=float(r.get("total_hours") or 0),
                overtime_count=int(r.get("overtime_count") or 0),
                notes=r.get("notes"),
            )
            for r in rows
        ]

    def get_day(self, employee_id: str, work_date: date) -> Optional[AttendanceDay]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"SELECT {_DAY_COLUMNS} FROM attendance_days WHERE employee_id=%s AND work_date=%s",
                (employee_id, work_date),
            )
            r = fetchone(cur)
            return self._hydrate(cur, [r])[0] if r else None

    def save_day(self, day: AttendanceDay) -> None:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT INTO attendance_days(employee_id, work_date, status, total_hours, overtime_count, notes)
                VALUES(%s,%s,%s,%s,%s,%s)
                ON DUPLICATE KEY UPDATE
                    status=VALUES(status), total_hours=VALUES(total_hours),
                    overtime_count=VALUES(overtime_count), notes=VALUES(notes)
                """,
                (day.employee_id, day.work_date, day.status.value, day.total_hours, day.overtime_count, day.notes),
            )
            cur.execute(
                "SELECT day_id FROM attendance_days WHERE employee_id=%s AND work_date=%s FOR UPDATE",
                (day.employee_id, day.work_date),
            )
            day_id = int(fetchone(cur)["day_id"])
            cur.execute("DELETE FROM attendance_shifts WHERE day_id=%s", (day_id,))
            for position, shift in enumerate(day.shifts):
                cur.execute(
                    """
                    INSERT INTO attendance_shifts(day_id, position, shift_type, check_in, check_out, notes)
                    VALUES(%s,%s,%s,%s,%s,%s)
                    """,
                    (day_id, position, shift.shift_type.value, shift.check_in, shift.check_out, shift.notes),
                )

    def list_days(
        self,
        *,
        start_date: date,
        end_date: date,
        employee_id: Optional[str] = None,
    ) -> Sequence[AttendanceDay]:
        clauses = ["work_date BETWEEN %s AND %s"]
        params: list[object] = [start_date, end_date]
        if employee_id is not None:
            clauses.append("employee_id=%s")
            params.append(employee_id)

        where = " AND ".join(clauses)
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"SELECT {_DAY_COLUMNS} FROM attendance_days WHERE {where} ORDER BY work_date DESC, employee_id ASC",
                tuple(params),
            )
            return self._hydrate(cur, fetchall(cur))
