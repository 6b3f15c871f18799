from __future__ import annotations

from datetime import date
from typing import Optional, Sequence

from ..core.enums import ExpenseType
from ..database.connection import DatabaseConnection
from ..database.mysql_base import as_date, db_cursor, fetchall, fetchone
from .model import Expense, parse_category
from .repository import ExpenseRepository

_COLUMNS = "expense_id, expense_date, category, amount, expense_type, description, voyage_id, vehicle_id, receipt_number, created_at"


def _to_expense(r: dict) -> Expense:
    return Expense(
        expense_id=int(r["expense_id"]),
        expense_date=as_date(r["expense_date"]),
        category=parse_category(r["category"]),
        amount=int(r["amount"]),
        expense_type=ExpenseType(r["expense_type"]),
        description=r.get("description"),
        voyage_id=r.get("voyage_id"),
        vehicle_id=r.get("vehicle_id"),
        receipt_number=r.get("receipt_number"),
        created_at=r.get("created_at"),
    )


class MySQLExpenseRepository(ExpenseRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def list_expenses(
        self,
        *,
        voyage_id: Optional[int] = None,
        expense_type: Optional[ExpenseType] = None,
        start_date: Optional[date] = None,
        end_date: Optional[date] = None,
    ) -> Sequence[Expense]:
        clauses = ["1=1"]
        params: list[object] = []
        if voyage_id is not None:
            clauses.append("voyage_id=%s")
            params.append(int(voyage_id))
        if expense_type is not None:
            clauses.append("expense_type=%s")
            params.append(expense_type.value)
        if start_date is not None:
            clauses.append("expense_date >= %s")
            params.append(start_date)
        if end_date is not None:
            clauses.append("expense_date <= %s")
            params.append(end_date)

        where = " AND ".join(clauses)
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"SELECT {_COLUMNS} FROM expenses WHERE {where} ORDER BY expense_date DESC, expense_id DESC",
                tuple(params),
            )
            return [_to_expense(r) for r in fetchall(cur)]

    def get_by_id(self, expense_id: int) -> Optional[Expense]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_COLUMNS} FROM expenses WHERE expense_id=%s", (int(expense_id),))
            r = fetchone(cur)
            return _to_expense(r) if r else None

    def create(self, *, expense_date, category, amount, expense_type, description, voyage_id, vehicle_id, receipt_number) -> int:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT INTO expenses(expense_date, category, amount, expense_type, description, voyage_id, vehicle_id, receipt_number)
                VALUES(%s,%s,%s,%s,%s,%s,%s,%s)
                """,
                (
                    expense_date,
                    category.value,
                    int(amount),
                    expense_type.value,
                    description,
                    voyage_id,
                    vehicle_id,
                    receipt_number,
                ),
            )
            return int(cur.lastrowid)

    def update(self, *, expense_id, expense_date, category, amount, expense_type, description, voyage_id, vehicle_id, receipt_number) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                UPDATE expenses
                SET expense_date=%s, category=%s, amount=%s, expense_type=%s, description=%s,
                    voyage_id=%s, vehicle_id=%s, receipt_number=%s
                WHERE expense_id=%s
                """,
                (
                    expense_date,
                    category.value,
                    int(amount),
                    expense_type.value,
                    description,
                    voyage_id,
                    vehicle_id,
                    receipt_number,
                    int(expense_id),
                ),
            )
            return cur.rowcount > 0

    def delete(self, expense_id: int) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("DELETE FROM expenses WHERE expense_id=%s", (int(expense_id),))
            return cur.rowcount > 0

    def delete_orphans(self) -> int:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                DELETE e FROM expenses e
                LEFT JOIN voyages v ON v.voyage_id = e.voyage_id
                WHERE e.voyage_id IS NOT NULL AND v.voyage_id IS NULL
                """
            )
            return int(cur.rowcount)
