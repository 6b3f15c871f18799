from __future__ import annotations

from typing import Optional, Sequence

from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone
from .model import CounterState
from .repository import CounterRepository


class MySQLCounterRepository(CounterRepository):
    """Counters stored one row per key in `counters`.

    Allocation runs in a single transaction holding the row's exclusive lock:
    the upsert creates the row with its seed (or locks the existing one), the
    SELECT ... FOR UPDATE reads it, and the UPDATE writes the next value.
    Concurrent callers on the same key wait on the lock, so values never repeat.
    """

    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def allocate(self, *, key: str, prefix: str, seed_last: int) -> int:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT INTO counters(counter_key, prefix, current_number)
                VALUES(%s,%s,%s)
                ON DUPLICATE KEY UPDATE counter_key=counter_key
                """,
                (key, prefix, int(seed_last)),
            )
            cur.execute(
                "SELECT current_number FROM counters WHERE counter_key=%s FOR UPDATE",
                (key,),
            )
            row = fetchone(cur)
            current = int(row["current_number"]) if row else int(seed_last)
            next_number = max(int(seed_last), current) + 1
            cur.execute(
                "UPDATE counters SET current_number=%s, prefix=%s WHERE counter_key=%s",
                (next_number, prefix, key),
            )
            return next_number

    def get(self, key: str) -> Optional[CounterState]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                "SELECT counter_key, prefix, current_number, updated_at FROM counters WHERE counter_key=%s",
                (key,),
            )
            r = fetchone(cur)
            if not r:
                return None
            return CounterState(
                counter_key=r["counter_key"],
                prefix=r["prefix"],
                current_number=int(r["current_number"]),
                updated_at=r.get("updated_at"),
            )

    def set_value(self, *, key: str, prefix: str, value: int) -> None:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT INTO counters(counter_key, prefix, current_number)
                VALUES(%s,%s,%s)
                ON DUPLICATE KEY UPDATE current_number=VALUES(current_number), prefix=VALUES(prefix)
                """,
                (key, prefix, int(value)),
            )

    def delete(self, key: str) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("DELETE FROM counters WHERE counter_key=%s", (key,))
            return cur.rowcount > 0

    def list_all(self) -> Sequence[CounterState]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("SELECT counter_key, prefix, current_number, updated_at FROM counters ORDER BY counter_key")
            return [
                CounterState(
                    counter_key=r["counter_key"],
                    prefix=r["prefix"],
                    current_number=int(r["current_number"]),
                    updated_at=r.get("updated_at"),
                )
                for r in fetchall(cur)
            ]
