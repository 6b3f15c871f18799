from __future__ import annotations

from collections import defaultdict
from datetime import datetime
from typing import Optional, Sequence

from ..core.enums import DeductionType, PayrollStatus, Role
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone, placeholders
from .model import Deduction, PayrollBreakdown, PayrollRecord
from .repository import PayrollRepository

_COLUMNS = """
    payroll_id, employee_id, employee_name, role, period,
    days_worked, total_working_days, attendance_rate,
    base_salary, daily_allowance, total_allowance,
    trips_completed, total_commission, overtime_events, overtime_rate, total_overtime,
    gross_pay, total_deductions, net_pay,
    status, notes, generated_at, approved_at, paid_at
"""


class MySQLPayrollRepository(PayrollRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    @staticmethod
    def _hydrate(cur, rows: list[dict]) -> list[PayrollRecord]:
        deductions: dict[int, list[Deduction]] = defaultdict(list)
        ids = [int(r["payroll_id"]) for r in rows]
        if ids:
            cur.execute(
                f"""
                SELECT payroll_id, deduction_type, amount, description
                FROM payroll_deductions
                WHERE payroll_id IN ({placeholders(ids)})
                ORDER BY position ASC
                """,
                tuple(ids),
            )
            for d in fetchall(cur):
                deductions[int(d["payroll_id"])].append(
                    Deduction(
                        deduction_type=DeductionType(d["deduction_type"]),
                        amount=int(d["amount"]),
                        description=d.get("description"),
                    )
                )

        records = []
        for r in rows:
            breakdown = PayrollBreakdown(
                days_worked=int(r["days_worked"]),
                total_working_days=int(r["total_working_days"]),
                attendance_rate=float(r["attendance_rate"]),
                base_salary=int(r["base_salary"]),
                daily_allowance=int(r["daily_allowance"]),
                total_allowance=int(r["total_allowance"]),
                trips_completed=int(r["trips_completed"]),
                total_commission=int(r["total_commission"]),
                overtime_events=int(r["overtime_events"]),
                overtime_rate=int(r["overtime_rate"]),
                total_overtime=int(r["total_overtime"]),
                gross_pay=int(r["gross_pay"]),
                total_deductions=int(r["total_deductions"]),
                net_pay=int(r["net_pay"]),
            )
            records.append(
                PayrollRecord(
                    payroll_id=int(r["payroll_id"]),
                    employee_id=r["employee_id"],
                    employee_name=r["employee_name"],
                    role=Role(r["role"]),
                    period=r["period"],
                    breakdown=breakdown,
                    deductions=tuple(deductions.get(int(r["payroll_id"]), [])),
                    status=PayrollStatus(r["status"]),
                    notes=r.get("notes"),
                    generated_at=r.get("generated_at"),
                    approved_at=r.get("approved_at"),
                    paid_at=r.get("paid_at"),
                )
            )
        return records

    def list_payrolls(
        self,
        *,
        period: Optional[str] = None,
        employee_id: Optional[str] = None,
        status: Optional[PayrollStatus] = None,
    ) -> Sequence[PayrollRecord]:
        clauses: list[str] = []
        params: list[object] = []
        if period is not None:
            clauses.append("period=%s")
            params.append(period)
        if employee_id is not None:
            clauses.append("employee_id=%s")
            params.append(employee_id)
        if status is not None:
            clauses.append("status=%s")
            params.append(PayrollStatus(status).value)

        where = f"WHERE {' AND '.join(clauses)}" if clauses else ""
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"SELECT {_COLUMNS} FROM payrolls {where} ORDER BY period DESC, employee_name ASC",
                tuple(params),
            )
            return self._hydrate(cur, fetchall(cur))

    def get_by_id(self, payroll_id: int) -> Optional[PayrollRecord]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_COLUMNS} FROM payrolls WHERE payroll_id=%s", (payroll_id,))
            r = fetchone(cur)
            return self._hydrate(cur, [r])[0] if r else None

    def get_for_employee_period(self, employee_id: str, period: str) -> Optional[PayrollRecord]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"SELECT {_COLUMNS} FROM payrolls WHERE employee_id=%s AND period=%s",
                (employee_id, period),
            )
            r = fetchone(cur)
            return self._hydrate(cur, [r])[0] if r else None

    def save(self, record: PayrollRecord) -> int:
        b = record.breakdown
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT INTO payrolls(
                    employee_id, employee_name, role, period,
                    days_worked, total_working_days, attendance_rate,
                    base_salary, daily_allowance, total_allowance,
                    trips_completed, total_commission, overtime_events, overtime_rate, total_overtime,
                    gross_pay, total_deductions, net_pay,
                    status, notes, generated_at, approved_at, paid_at
                )
                VALUES(%s,%s,%s,%s,%s,%s,%s,%s,%s,%s,%s,%s,%s,%s,%s,%s,%s,%s,%s,%s,%s,%s,%s)
                ON DUPLICATE KEY UPDATE
                    employee_name=VALUES(employee_name), role=VALUES(role),
                    days_worked=VALUES(days_worked), total_working_days=VALUES(total_working_days),
                    attendance_rate=VALUES(attendance_rate), base_salary=VALUES(base_salary),
                    daily_allowance=VALUES(daily_allowance), total_allowance=VALUES(total_allowance),
                    trips_completed=VALUES(trips_completed), total_commission=VALUES(total_commission),
                    overtime_events=VALUES(overtime_events), overtime_rate=VALUES(overtime_rate),
                    total_overtime=VALUES(total_overtime), gross_pay=VALUES(gross_pay),
                    total_deductions=VALUES(total_deductions), net_pay=VALUES(net_pay),
                    status=VALUES(status), notes=VALUES(notes), generated_at=VALUES(generated_at),
                    approved_at=VALUES(approved_at), paid_at=VALUES(paid_at)
                """,
                (
                    record.employee_id,
                    record.employee_name,
                    record.role.value,
                    record.period,
                    b.days_worked,
                    b.total_working_days,
                    b.attendance_rate,
                    b.base_salary,
                    b.daily_allowance,
                    b.total_allowance,
                    b.trips_completed,
                    b.total_commission,
                    b.overtime_events,
                    b.overtime_rate,
                    b.total_overtime,
                    b.gross_pay,
                    b.total_deductions,
                    b.net_pay,
                    record.status.value,
                    record.notes,
                    record.generated_at,
                    record.approved_at,
                    record.paid_at,
                ),
            )
            cur.execute(
                "SELECT payroll_id FROM payrolls WHERE employee_id=%s AND period=%s FOR UPDATE",
                (record.employee_id, record.period),
            )
            payroll_id = int(fetchone(cur)["payroll_id"])
            cur.execute("DELETE FROM payroll_deductions WHERE payroll_id=%s", (payroll_id,))
            for position, d in enumerate(record.deductions):
                cur.execute(
                    """
                    INSERT INTO payroll_deductions(payroll_id, position, deduction_type, amount, description)
                    VALUES(%s,%s,%s,%s,%s)
                    """,
                    (payroll_id, position, d.deduction_type.value, d.amount, d.description),
                )
            return payroll_id

    def set_status(self, payroll_id: int, status: PayrollStatus, at: datetime) -> bool:
        status = PayrollStatus(status)
        column = {PayrollStatus.APPROVED: "approved_at", PayrollStatus.PAID: "paid_at"}.get(status)
        with db_cursor(self._conn_factory) as (_, cur):
            if column:
                cur.execute(
                    f"UPDATE payrolls SET status=%s, {column}=%s WHERE payroll_id=%s",
                    (status.value, at, payroll_id),
                )
            else:
                cur.execute("UPDATE payrolls SET status=%s WHERE payroll_id=%s", (status.value, payroll_id))
            return cur.rowcount > 0

    def delete(self, payroll_id: int) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("DELETE FROM payroll_deductions WHERE payroll_id=%s", (payroll_id,))
            cur.execute("DELETE FROM payrolls WHERE payroll_id=%s", (payroll_id,))
            return cur.rowcount > 0
