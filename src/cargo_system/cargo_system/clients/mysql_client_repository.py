from __future__ import annotations

from typing import Optional, Sequence

from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone
from .model import Client
from .repository import ClientRepository

_COLUMNS = "client_id, name, phone, address, city, email, notes, created_at, updated_at"


def _to_client(r: dict) -> Client:
    return Client(
        client_id=int(r["client_id"]),
        name=r["name"],
        phone=r.get("phone"),
        address=r.get("address"),
        city=r.get("city"),
        email=r.get("email"),
        notes=r.get("notes"),
        created_at=r.get("created_at"),
        updated_at=r.get("updated_at"),
    )


class MySQLClientRepository(ClientRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def list_all(self) -> Sequence[Client]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_COLUMNS} FROM clients ORDER BY name ASC")
            return [_to_client(r) for r in fetchall(cur)]

    def get_by_id(self, client_id: int) -> Optional[Client]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_COLUMNS} FROM clients WHERE client_id=%s", (int(client_id),))
            r = fetchone(cur)
            return _to_client(r) if r else None

    def create(self, *, name, phone, address, city, email, notes) -> int:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT INTO clients(name, phone, address, city, email, notes)
                VALUES(%s,%s,%s,%s,%s,%s)
                """,
                (name, phone, address, city, email, notes),
            )
            return int(cur.lastrowid)

    def update(self, *, client_id, name, phone, address, city, email, notes) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                UPDATE clients
                SET name=%s, phone=%s, address=%s, city=%s, email=%s, notes=%s
                WHERE client_id=%s
                """,
                (name, phone, address, city, email, notes, int(client_id)),
            )
            return cur.rowcount > 0

    def delete(self, client_id: int) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("DELETE FROM clients WHERE client_id=%s", (int(client_id),))
            return cur.rowcount > 0
