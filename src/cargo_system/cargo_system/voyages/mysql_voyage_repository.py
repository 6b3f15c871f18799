from __future__ import annotations

from collections import defaultdict
from datetime import date
from typing import Optional, Sequence

from ..core.enums import VoyageStatus
from ..database.connection import DatabaseConnection
from ..database.mysql_base import as_date, db_cursor, fetchall, fetchone, from_json, placeholders, to_json
from .model import Voyage
from .repository import VoyageRepository

_COLUMNS = """
    voyage_id, voyage_number, name, departure_date, arrival_date, route, ship_name,
    vehicle_numbers, status, notes, created_at
"""


class MySQLVoyageRepository(VoyageRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    @staticmethod
    def _hydrate(cur, rows: list[dict]) -> list[Voyage]:
        links: dict[int, list[int]] = defaultdict(list)
        ids = [int(r["voyage_id"]) for r in rows]
        if ids:
            cur.execute(
                f"""
                SELECT voyage_id, transaction_id FROM voyage_transactions
                WHERE voyage_id IN ({placeholders(ids)})
                ORDER BY position ASC
                """,
                tuple(ids),
            )
            for link in fetchall(cur):
                links[int(link["voyage_id"])].append(int(link["transaction_id"]))

        return [
            Voyage(
                voyage_id=int(r["voyage_id"]),
                voyage_number=r["voyage_number"],
                name=r["name"],
                departure_date=as_date(r["departure_date"]),
                arrival_date=as_date(r.get("arrival_date")),
                route=r.get("route"),
                ship_name=r.get("ship_name"),
                vehicle_numbers=tuple(from_json(r.get("vehicle_numbers"), [])),
                transaction_ids=tuple(links.get(int(r["voyage_id"]), [])),
                status=VoyageStatus(r["status"]),
                notes=r.get("notes"),
                created_at=r.get("created_at"),
            )
            for r in rows
        ]

    def list_voyages(self, *, status: Optional[VoyageStatus] = None) -> Sequence[Voyage]:
        with db_cursor(self._conn_factory) as (_, cur):
            if status is None:
                cur.execute(f"SELECT {_COLUMNS} FROM voyages ORDER BY departure_date DESC, voyage_id DESC")
            else:
                cur.execute(
                    f"SELECT {_COLUMNS} FROM voyages WHERE status=%s ORDER BY departure_date DESC, voyage_id DESC",
                    (status.value,),
                )
            return self._hydrate(cur, fetchall(cur))

    def get_by_id(self, voyage_id: int) -> Optional[Voyage]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_COLUMNS} FROM voyages WHERE voyage_id=%s", (int(voyage_id),))
            r = fetchone(cur)
            return self._hydrate(cur, [r])[0] if r else None

    def create(self, *, voyage_number, name, departure_date, arrival_date, route, ship_name, vehicle_numbers, status, notes) -> int:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT INTO voyages(voyage_number, name, departure_date, arrival_date, route, ship_name, vehicle_numbers, status, notes)
                VALUES(%s,%s,%s,%s,%s,%s,%s,%s,%s)
                """,
                (
                    voyage_number,
                    name,
                    departure_date,
                    arrival_date,
                    route,
                    ship_name,
                    to_json(list(vehicle_numbers)),
                    status.value,
                    notes,
                ),
            )
            return int(cur.lastrowid)

    def update(self, *, voyage_id, name, departure_date, arrival_date, route, ship_name, vehicle_numbers, status, notes) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                UPDATE voyages
                SET name=%s, departure_date=%s, arrival_date=%s, route=%s, ship_name=%s,
                    vehicle_numbers=%s, status=%s, notes=%s
                WHERE voyage_id=%s
                """,
                (
                    name,
                    departure_date,
                    arrival_date,
                    route,
                    ship_name,
                    to_json(list(vehicle_numbers)),
                    status.value,
                    notes,
                    int(voyage_id),
                ),
            )
            return cur.rowcount > 0

    def set_status(self, voyage_id: int, status: VoyageStatus) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("UPDATE voyages SET status=%s WHERE voyage_id=%s", (status.value, int(voyage_id)))
            return cur.rowcount > 0

    def set_transactions(self, voyage_id: int, transaction_ids: Sequence[int]) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("SELECT voyage_id FROM voyages WHERE voyage_id=%s FOR UPDATE", (int(voyage_id),))
            if not fetchone(cur):
                return False
            cur.execute("DELETE FROM voyage_transactions WHERE voyage_id=%s", (int(voyage_id),))
            for position, transaction_id in enumerate(transaction_ids):
                cur.execute(
                    "INSERT INTO voyage_transactions(voyage_id, transaction_id, position) VALUES(%s,%s,%s)",
                    (int(voyage_id), int(transaction_id), position),
                )
            return True

    def delete_with_expenses(self, voyage_id: int) -> tuple[bool, int]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("SELECT voyage_id FROM voyages WHERE voyage_id=%s FOR UPDATE", (int(voyage_id),))
            if not fetchone(cur):
                return False, 0
            cur.execute("DELETE FROM expenses WHERE voyage_id=%s", (int(voyage_id),))
            removed_expenses = int(cur.rowcount)
            cur.execute("DELETE FROM voyage_transactions WHERE voyage_id=%s", (int(voyage_id),))
            cur.execute("DELETE FROM voyages WHERE voyage_id=%s", (int(voyage_id),))
            return True, removed_expenses
