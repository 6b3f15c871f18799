from __future__ import annotations

from collections import defaultdict
from datetime import date
from typing import Optional, Sequence

from ..core.enums import InvoiceStatus, Pelunasan
from ..database.connection import DatabaseConnection
from ..database.mysql_base import as_date, db_cursor, fetchall, fetchone, placeholders
from .model import Invoice
from .repository import InvoiceRepository

_COLUMNS = """
    invoice_id, invoice_number, client_id, client_name, client_address, total_amount,
    issue_date, due_date, status, payment_date, payment_method, payment_ref, notes, created_at
"""


class MySQLInvoiceRepository(InvoiceRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    @staticmethod
    def _hydrate(cur, rows: list[dict]) -> list[Invoice]:
        links: dict[int, list[int]] = defaultdict(list)
        ids = [int(r["invoice_id"]) for r in rows]
        if ids:
            cur.execute(
                f"""
                SELECT invoice_id, transaction_id FROM invoice_transactions
                WHERE invoice_id IN ({placeholders(ids)})
                ORDER BY position ASC
                """,
                tuple(ids),
            )
            for link in fetchall(cur):
                links[int(link["invoice_id"])].append(int(link["transaction_id"]))

        return [
            Invoice(
                invoice_id=int(r["invoice_id"]),
                invoice_number=r["invoice_number"],
                client_id=r.get("client_id"),
                client_name=r["client_name"],
                client_address=r.get("client_address"),
                transaction_ids=tuple(links.get(int(r["invoice_id"]), [])),
                total_amount=int(r["total_amount"]),
                issue_date=as_date(r["issue_date"]),
                due_date=as_date(r["due_date"]),
                status=InvoiceStatus(r["status"]),
                payment_date=as_date(r.get("payment_date")),
                payment_method=r.get("payment_method"),
                payment_ref=r.get("payment_ref"),
                notes=r.get("notes"),
                created_at=r.get("created_at"),
            )
            for r in rows
        ]

    @staticmethod
    def _write_links(cur, invoice_id: int, transaction_ids: Sequence[int]) -> None:
        cur.execute("DELETE FROM invoice_transactions WHERE invoice_id=%s", (int(invoice_id),))
        for position, transaction_id in enumerate(transaction_ids):
            cur.execute(
                "INSERT INTO invoice_transactions(invoice_id, transaction_id, position) VALUES(%s,%s,%s)",
                (int(invoice_id), int(transaction_id), position),
            )

    def list_invoices(self, *, status: Optional[InvoiceStatus] = None) -> Sequence[Invoice]:
        with db_cursor(self._conn_factory) as (_, cur):
            if status is None:
                cur.execute(f"SELECT {_COLUMNS} FROM invoices ORDER BY issue_date DESC, invoice_id DESC")
            else:
                cur.execute(
                    f"SELECT {_COLUMNS} FROM invoices WHERE status=%s ORDER BY issue_date DESC, invoice_id DESC",
                    (status.value,),
                )
            return self._hydrate(cur, fetchall(cur))

    def get_by_id(self, invoice_id: int) -> Optional[Invoice]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_COLUMNS} FROM invoices WHERE invoice_id=%s", (int(invoice_id),))
            r = fetchone(cur)
            return self._hydrate(cur, [r])[0] if r else None

    def linked_transaction_ids(self, *, exclude_invoice_id: Optional[int] = None) -> set[int]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                SELECT it.transaction_id
                FROM invoice_transactions it
                JOIN invoices i ON i.invoice_id = it.invoice_id
                WHERE i.status <> %s AND i.invoice_id <> %s
                """,
                (InvoiceStatus.CANCELLED.value, int(exclude_invoice_id or 0)),
            )
            return {int(r["transaction_id"]) for r in fetchall(cur)}

    def create(
        self,
        *,
        invoice_number: str,
        client_id: Optional[int],
        client_name: str,
        client_address: Optional[str],
        transaction_ids: Sequence[int],
        total_amount: int,
        issue_date: date,
        due_date: date,
        notes: Optional[str],
    ) -> int:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT INTO invoices(
                    invoice_number, client_id, client_name, client_address, total_amount,
                    issue_date, due_date, status, notes
                )
                VALUES(%s,%s,%s,%s,%s,%s,%s,%s,%s)
                """,
                (
                    invoice_number,
                    client_id,
                    client_name,
                    client_address,
                    int(total_amount),
                    issue_date,
                    due_date,
                    InvoiceStatus.UNPAID.value,
                    notes,
                ),
            )
            invoice_id = int(cur.lastrowid)
            self._write_links(cur, invoice_id, transaction_ids)
            return invoice_id

    def set_transactions(self, invoice_id: int, *, transaction_ids: Sequence[int], total_amount: int) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("SELECT invoice_id FROM invoices WHERE invoice_id=%s FOR UPDATE", (int(invoice_id),))
            if not fetchone(cur):
                return False
            cur.execute(
                "UPDATE invoices SET total_amount=%s WHERE invoice_id=%s",
                (int(total_amount), int(invoice_id)),
            )
            self._write_links(cur, invoice_id, transaction_ids)
            return True

    def mark_paid(
        self,
        invoice_id: int,
        *,
        payment_date: date,
        payment_method: str,
        payment_ref: Optional[str],
        pelunasan: Pelunasan,
    ) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                UPDATE invoices
                SET status=%s, payment_date=%s, payment_method=%s, payment_ref=%s
                WHERE invoice_id=%s
                """,
                (InvoiceStatus.PAID.value, payment_date, payment_method, payment_ref, int(invoice_id)),
            )
            if cur.rowcount == 0:
                return False
            cur.execute(
                """
                UPDATE transactions t
                JOIN invoice_transactions it ON it.transaction_id = t.transaction_id
                SET t.pelunasan=%s
                WHERE it.invoice_id=%s
                """,
                (pelunasan.value, int(invoice_id)),
            )
            return True

    def set_status(self, invoice_id: int, status: InvoiceStatus) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("UPDATE invoices SET status=%s WHERE invoice_id=%s", (status.value, int(invoice_id)))
            return cur.rowcount > 0

    def delete(self, invoice_id: int) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("DELETE FROM invoice_transactions WHERE invoice_id=%s", (int(invoice_id),))
            cur.execute("DELETE FROM invoices WHERE invoice_id=%s", (int(invoice_id),))
            return cur.rowcount > 0
