from __future__ import annotations

from typing import Optional, Sequence

from ..core.enums import ExpenseCategory, ExpenseType, FleetStatus, ServiceType
from ..database.connection import DatabaseConnection
from ..database.mysql_base import as_date, db_cursor, fetchall, fetchone
from .model import MaintenanceLog, Vehicle
from .repository import FleetRepository

_VEHICLE_COLUMNS = "vehicle_id, plate_number, vehicle_type, status, driver_id, notes, created_at"
_LOG_COLUMNS = "log_id, vehicle_id, service_date, service_type, cost, description, odometer, expense_id"


def _to_vehicle(r: dict) -> Vehicle:
    return Vehicle(
        vehicle_id=int(r["vehicle_id"]),
        plate_number=r["plate_number"],
        vehicle_type=r["vehicle_type"],
        status=FleetStatus(r["status"]),
        driver_id=r.get("driver_id"),
        notes=r.get("notes"),
        created_at=r.get("created_at"),
    )


def _to_log(r: dict) -> MaintenanceLog:
    return MaintenanceLog(
        log_id=int(r["log_id"]),
        vehicle_id=int(r["vehicle_id"]),
        service_date=as_date(r["service_date"]),
        service_type=ServiceType(r["service_type"]),
        cost=int(r["cost"]),
        description=r.get("description"),
        odometer=r.get("odometer"),
        expense_id=r.get("expense_id"),
    )


class MySQLFleetRepository(FleetRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def list_vehicles(self) -> Sequence[Vehicle]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_VEHICLE_COLUMNS} FROM vehicles ORDER BY plate_number ASC")
            return [_to_vehicle(r) for r in fetchall(cur)]

    def get_vehicle(self, vehicle_id: int) -> Optional[Vehicle]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_VEHICLE_COLUMNS} FROM vehicles WHERE vehicle_id=%s", (int(vehicle_id),))
            r = fetchone(cur)
            return _to_vehicle(r) if r else None

    def get_by_plate(self, plate_number: str) -> Optional[Vehicle]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_VEHICLE_COLUMNS} FROM vehicles WHERE plate_number=%s", (plate_number,))
            r = fetchone(cur)
            return _to_vehicle(r) if r else None

    def create_vehicle(self, *, plate_number, vehicle_type, status, driver_id, notes) -> int:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT INTO vehicles(plate_number, vehicle_type, status, driver_id, notes)
                VALUES(%s,%s,%s,%s,%s)
                """,
                (plate_number, vehicle_type, status.value, driver_id, notes),
            )
            return int(cur.lastrowid)

    def update_vehicle(self, *, vehicle_id, plate_number, vehicle_type, status, driver_id, notes) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                UPDATE vehicles
                SET plate_number=%s, vehicle_type=%s, status=%s, driver_id=%s, notes=%s
                WHERE vehicle_id=%s
                """,
                (plate_number, vehicle_type, status.value, driver_id, notes, int(vehicle_id)),
            )
            return cur.rowcount > 0

    def delete_vehicle(self, vehicle_id: int) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("DELETE FROM maintenance_logs WHERE vehicle_id=%s", (int(vehicle_id),))
            cur.execute("DELETE FROM vehicles WHERE vehicle_id=%s", (int(vehicle_id),))
            return cur.rowcount > 0

    def list_maintenance(self, *, vehicle_id: Optional[int] = None) -> Sequence[MaintenanceLog]:
        with db_cursor(self._conn_factory) as (_, cur):
            sql = f"SELECT {_LOG_COLUMNS} FROM maintenance_logs"
            if vehicle_id is None:
                cur.execute(sql + " ORDER BY service_date DESC, log_id DESC")
            else:
                cur.execute(sql + " WHERE vehicle_id=%s ORDER BY service_date DESC, log_id DESC", (int(vehicle_id),))
            return [_to_log(r) for r in fetchall(cur)]

    def create_maintenance(self, *, vehicle_id, service_date, service_type, cost, description, odometer, expense_description) -> tuple[int, int]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT INTO expenses(expense_date, category, amount, expense_type, description, vehicle_id)
                VALUES(%s,%s,%s,%s,%s,%s)
                """,
                (
                    service_date,
                    ExpenseCategory.MAINTENANCE.value,
                    int(cost),
                    ExpenseType.GENERAL.value,
                    expense_description,
                    int(vehicle_id),
                ),
            )
            expense_id = int(cur.lastrowid)
            cur.execute(
                """
                INSERT INTO maintenance_logs(vehicle_id, service_date, service_type, cost, description, odometer, expense_id)
                VALUES(%s,%s,%s,%s,%s,%s,%s)
                """,
                (int(vehicle_id), service_date, service_type.value, int(cost), description, odometer, expense_id),
            )
            return int(cur.lastrowid), expense_id

    def get_maintenance(self, log_id: int) -> Optional[MaintenanceLog]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_LOG_COLUMNS} FROM maintenance_logs WHERE log_id=%s", (int(log_id),))
            r = fetchone(cur)
            return _to_log(r) if r else None

    def update_maintenance(self, *, log_id, vehicle_id, service_date, service_type, cost, description, odometer, expense_description) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("SELECT expense_id FROM maintenance_logs WHERE log_id=%s FOR UPDATE", (int(log_id),))
            row = fetchone(cur)
            if not row:
                return False
            cur.execute(
                """
                UPDATE maintenance_logs
                SET vehicle_id=%s, service_date=%s, service_type=%s, cost=%s, description=%s, odometer=%s
                WHERE log_id=%s
                """,
                (int(vehicle_id), service_date, service_type.value, int(cost), description, odometer, int(log_id)),
            )
            if row.get("expense_id"):
                cur.execute(
                    "UPDATE expenses SET expense_date=%s, amount=%s, description=%s, vehicle_id=%s WHERE expense_id=%s",
                    (service_date, int(cost), expense_description, int(vehicle_id), int(row["expense_id"])),
                )
            return True

    def delete_maintenance(self, log_id: int) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("SELECT expense_id FROM maintenance_logs WHERE log_id=%s FOR UPDATE", (int(log_id),))
            row = fetchone(cur)
            if not row:
                return False
            cur.execute("DELETE FROM maintenance_logs WHERE log_id=%s", (int(log_id),))
            if row.get("expense_id"):
                cur.execute("DELETE FROM expenses WHERE expense_id=%s", (int(row["expense_id"]),))
            return True
