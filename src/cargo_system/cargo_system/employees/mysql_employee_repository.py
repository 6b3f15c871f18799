from __future__ import annotations

from typing import Optional, Sequence

from ..core.enums import AccountStatus, CommissionType, EmployeeStatus, Role
from ..database.connection import DatabaseConnection
from ..database.mysql_base import as_date, db_cursor, fetchall, fetchone, from_json, to_json
from .model import Employee, EmployeeDocument, SalaryConfig
from .repository import EmployeeRepository

_COLUMNS = """
    employee_id, full_name, role, status, join_date, email, account_status,
    base_salary, allowance, trip_commission, commission_type,
    phone, address, city, documents, jobdesk, notes, created_at, updated_at
"""


def _documents_to_json(documents) -> str:
    return to_json(
        [
            {
                "type": d.doc_type,
                "number": d.number,
                "expiry_date": d.expiry_date.isoformat() if d.expiry_date else None,
                "notes": d.notes,
            }
            for d in documents
        ]
    )


def _to_employee(r: dict) -> Employee:
    documents = tuple(
        EmployeeDocument(
            doc_type=d["type"],
            number=d.get("number") or "",
            expiry_date=as_date(d.get("expiry_date")),
            notes=d.get("notes"),
        )
        for d in from_json(r.get("documents"), [])
    )
    return Employee(
        employee_id=r["employee_id"],
        full_name=r["full_name"],
        role=Role(r["role"]),
        status=EmployeeStatus(r["status"]),
        join_date=as_date(r["join_date"]),
        email=r["email"],
        account_status=AccountStatus(r["account_status"]),
        salary=SalaryConfig(
            base_salary=int(r.get("base_salary") or 0),
            allowance=int(r.get("allowance") or 0),
            trip_commission=float(r.get("trip_commission") or 0),
            commission_type=CommissionType(r.get("commission_type") or CommissionType.FIXED.value),
        ),
        phone=r.get("phone"),
        address=r.get("address"),
        city=r.get("city"),
        documents=documents,
        jobdesk=r.get("jobdesk"),
        notes=r.get("notes"),
        created_at=r.get("created_at"),
        updated_at=r.get("updated_at"),
    )


def _values(e: Employee) -> tuple:
    return (
        e.full_name,
        e.role.value,
        e.status.value,
        e.join_date,
        e.email,
        e.account_status.value,
        int(e.salary.base_salary),
        int(e.salary.allowance),
        float(e.salary.trip_commission),
        e.salary.commission_type.value,
        e.phone,
        e.address,
        e.city,
        _documents_to_json(e.documents),
        e.jobdesk,
        e.notes,
    )


class MySQLEmployeeRepository(EmployeeRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def list_employees(self, *, role: Optional[Role] = None, status: Optional[EmployeeStatus] = None) -> Sequence[Employee]:
        clauses = ["1=1"]
        params: list[object] = []
        if role is not None:
            clauses.append("role=%s")
            params.append(role.value)
        if status is not None:
            clauses.append("status=%s")
            params.append(status.value)

        where = " AND ".join(clauses)
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_COLUMNS} FROM employees WHERE {where} ORDER BY employee_id ASC", tuple(params))
            return [_to_employee(r) for r in fetchall(cur)]

    def get_by_id(self, employee_id: str) -> Optional[Employee]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_COLUMNS} FROM employees WHERE employee_id=%s", (employee_id,))
            r = fetchone(cur)
            return _to_employee(r) if r else None

    def get_by_email(self, email: str) -> Optional[Employee]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_COLUMNS} FROM employees WHERE email=%s", (email.strip().lower(),))
            r = fetchone(cur)
            return _to_employee(r) if r else None

    def get_password_hash(self, employee_id: str) -> Optional[str]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("SELECT password_hash FROM employees WHERE employee_id=%s", (employee_id,))
            r = fetchone(cur)
            return r["password_hash"] if r else None

    def create(self, employee: Employee, *, password_hash: str) -> None:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT INTO employees(
                    full_name, role, status, join_date, email, account_status,
                    base_salary, allowance, trip_commission, commission_type,
                    phone, address, city, documents, jobdesk, notes,
                    employee_id, password_hash
                )
                VALUES(%s,%s,%s,%s,%s,%s,%s,%s,%s,%s,%s,%s,%s,%s,%s,%s,%s,%s)
                """,
                _values(employee) + (employee.employee_id, password_hash),
            )

    def update(self, employee: Employee) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                UPDATE employees SET
                    full_name=%s, role=%s, status=%s, join_date=%s, email=%s, account_status=%s,
                    base_salary=%s, allowance=%s, trip_commission=%s, commission_type=%s,
                    phone=%s, address=%s, city=%s, documents=%s, jobdesk=%s, notes=%s
                WHERE employee_id=%s
                """,
                _values(employee) + (employee.employee_id,),
            )
            return cur.rowcount > 0

    def set_status(self, employee_id: str, status: EmployeeStatus, account_status: AccountStatus) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                "UPDATE employees SET status=%s, account_status=%s WHERE employee_id=%s",
                (status.value, account_status.value, employee_id),
            )
            return cur.rowcount > 0

    def set_password_hash(self, employee_id: str, password_hash: str) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("UPDATE employees SET password_hash=%s WHERE employee_id=%s", (password_hash, employee_id))
            return cur.rowcount > 0

    def delete(self, employee_id: str) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("DELETE FROM employees WHERE employee_id=%s", (employee_id,))
            return cur.rowcount > 0
