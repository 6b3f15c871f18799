from __future__ import annotations

from collections import defaultdict
from datetime import date
from typing import Optional, Sequence

from ..core.enums import InvoiceStatus, Pelunasan, PaymentMethod, TransactionStatus, TransactionType, WeightUnit
from ..database.connection import DatabaseConnection
from ..database.mysql_base import as_date, db_cursor, fetchall, fetchone, placeholders
from .model import Party, StatusHistoryEntry, Transaction, TransactionData
from .repository import TransactionRepository

_COLUMNS = """
    transaction_id, tanggal, tujuan, no_stt, no_invoice,
    pengirim_id, pengirim_name, pengirim_phone, pengirim_address, pengirim_city,
    penerima_id, penerima_name, penerima_phone, penerima_address, penerima_city,
    koli, berat, berat_unit, tipe, harga, jumlah, is_taxable, ppn_rate, ppn,
    status, payment_method, pelunasan, keterangan, isi_barang, branch,
    created_at, updated_at
"""


def _row_values(data: TransactionData) -> tuple:
    return (
        data.tanggal,
        data.tujuan,
        data.no_stt,
        data.no_invoice,
        data.pengirim.client_id,
        data.pengirim.name,
        data.pengirim.phone,
        data.pengirim.address,
        data.pengirim.city,
        data.penerima.client_id,
        data.penerima.name,
        data.penerima.phone,
        data.penerima.address,
        data.penerima.city,
        int(data.koli),
        float(data.berat),
        data.berat_unit.value,
        data.tipe.value,
        int(data.harga),
        int(data.jumlah),
        1 if data.is_taxable else 0,
        float(data.ppn_rate),
        int(data.ppn),
        data.status.value,
        data.payment_method.value,
        data.pelunasan.value,
        data.keterangan,
        data.isi_barang,
        data.branch,
    )


def _to_transaction(r: dict, history: Sequence[StatusHistoryEntry]) -> Transaction:
    return Transaction(
        transaction_id=int(r["transaction_id"]),
        tanggal=as_date(r["tanggal"]),
        tujuan=r["tujuan"],
        no_stt=r["no_stt"],
        no_invoice=r.get("no_invoice"),
        pengirim=Party(
            client_id=r.get("pengirim_id"),
            name=r["pengirim_name"],
            phone=r.get("pengirim_phone"),
            address=r.get("pengirim_address"),
            city=r.get("pengirim_city"),
        ),
        penerima=Party(
            client_id=r.get("penerima_id"),
            name=r["penerima_name"],
            phone=r.get("penerima_phone"),
            address=r.get("penerima_address"),
            city=r.get("penerima_city"),
        ),
        koli=int(r["koli"]),
        berat=float(r["berat"]),
        berat_unit=WeightUnit(r["berat_unit"]),
        tipe=TransactionType(r["tipe"]),
        harga=int(r["harga"]),
        jumlah=int(r["jumlah"]),
        is_taxable=bool(r["is_taxable"]),
        ppn_rate=float(r["ppn_rate"]),
        ppn=int(r["ppn"]),
        status=TransactionStatus(r["status"]),
        payment_method=PaymentMethod(r["payment_method"]),
        pelunasan=Pelunasan(r["pelunasan"]),
        keterangan=r.get("keterangan"),
        isi_barang=r.get("isi_barang"),
        branch=r.get("branch"),
        history=tuple(history),
        created_at=r.get("created_at"),
        updated_at=r.get("updated_at"),
    )


class MySQLTransactionRepository(TransactionRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    @staticmethod
    def _load_history(cur, transaction_ids: Sequence[int]) -> dict[int, list[StatusHistoryEntry]]:
        out: dict[int, list[StatusHistoryEntry]] = defaultdict(list)
        if not transaction_ids:
            return out
        cur.execute(
            f"""
            SELECT transaction_id, status, changed_at, catatan
            FROM transaction_status_history
            WHERE transaction_id IN ({placeholders(transaction_ids)})
            ORDER BY changed_at ASC, history_id ASC
            """,
            tuple(transaction_ids),
        )
        for h in fetchall(cur):
            out[int(h["transaction_id"])].append(
                StatusHistoryEntry(
                    status=TransactionStatus(h["status"]),
                    timestamp=h["changed_at"],
                    catatan=h.get("catatan"),
                )
            )
        return out

    def _hydrate(self, cur, rows: list[dict]) -> list[Transaction]:
        history = self._load_history(cur, [int(r["transaction_id"]) for r in rows])
        return [_to_transaction(r, history.get(int(r["transaction_id"]), [])) for r in rows]

    @staticmethod
    def _linked_invoice_ids(cur, transaction_id: int) -> list[int]:
        cur.execute(
            """
            SELECT i.invoice_id
            FROM invoices i
            JOIN invoice_transactions it ON it.invoice_id = i.invoice_id
            WHERE it.transaction_id=%s
            FOR UPDATE
            """,
            (int(transaction_id),),
        )
        return [int(r["invoice_id"]) for r in fetchall(cur)]

    @staticmethod
    def _refresh_invoice_totals(cur, invoice_ids: Sequence[int]) -> None:
        # paid invoices keep the amount that was settled
        if not invoice_ids:
            return
        cur.execute(
            f"""
            UPDATE invoices i SET i.total_amount = (
                SELECT COALESCE(SUM(t.jumlah), 0)
                FROM invoice_transactions it
                JOIN transactions t ON t.transaction_id = it.transaction_id
                WHERE it.invoice_id = i.invoice_id
            )
            WHERE i.invoice_id IN ({placeholders(invoice_ids)}) AND i.status <> %s
            """,
            tuple(invoice_ids) + (InvoiceStatus.PAID.value,),
        )

    @staticmethod
    def _insert_history(cur, transaction_id: int, entry: StatusHistoryEntry) -> None:
        cur.execute(
            """
            INSERT INTO transaction_status_history(transaction_id, status, changed_at, catatan)
            VALUES(%s,%s,%s,%s)
            """,
            (int(transaction_id), entry.status.value, entry.timestamp, entry.catatan),
        )

    def list_transactions(
        self,
        *,
        start_date: Optional[date] = None,
        end_date: Optional[date] = None,
        status: Optional[TransactionStatus] = None,
    ) -> Sequence[Transaction]:
        clauses = ["1=1"]
        params: list[object] = []
        if start_date is not None:
            clauses.append("tanggal >= %s")
            params.append(start_date)
        if end_date is not None:
            clauses.append("tanggal <= %s")
            params.append(end_date)
        if status is not None:
            clauses.append("status = %s")
            params.append(status.value)

        where = " AND ".join(clauses)
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"SELECT {_COLUMNS} FROM transactions WHERE {where} ORDER BY tanggal DESC, transaction_id DESC",
                tuple(params),
            )
            return self._hydrate(cur, fetchall(cur))

    def get_by_id(self, transaction_id: int) -> Optional[Transaction]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_COLUMNS} FROM transactions WHERE transaction_id=%s", (int(transaction_id),))
            r = fetchone(cur)
            return self._hydrate(cur, [r])[0] if r else None

    def get_many(self, transaction_ids: Sequence[int]) -> Sequence[Transaction]:
        ids = [int(i) for i in transaction_ids]
        if not ids:
            return []
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"SELECT {_COLUMNS} FROM transactions WHERE transaction_id IN ({placeholders(ids)})",
                tuple(ids),
            )
            return self._hydrate(cur, fetchall(cur))

    def get_by_stt(self, no_stt: str) -> Optional[Transaction]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_COLUMNS} FROM transactions WHERE no_stt=%s", (no_stt,))
            r = fetchone(cur)
            return self._hydrate(cur, [r])[0] if r else None

    def create(self, data: TransactionData, *, history: StatusHistoryEntry) -> int:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT INTO transactions(
                    tanggal, tujuan, no_stt, no_invoice,
                    pengirim_id, pengirim_name, pengirim_phone, pengirim_address, pengirim_city,
                    penerima_id, penerima_name, penerima_phone, penerima_address, penerima_city,
                    koli, berat, berat_unit, tipe, harga, jumlah, is_taxable, ppn_rate, ppn,
                    status, payment_method, pelunasan, keterangan, isi_barang, branch
                )
                VALUES(%s,%s,%s,%s,%s,%s,%s,%s,%s,%s,%s,%s,%s,%s,%s,%s,%s,%s,%s,%s,%s,%s,%s,%s,%s,%s,%s,%s,%s)
                """,
                _row_values(data),
            )
            transaction_id = int(cur.lastrowid)
            self._insert_history(cur, transaction_id, history)
            return transaction_id

    def update(self, transaction_id: int, data: TransactionData, *, history: Optional[StatusHistoryEntry] = None) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                UPDATE transactions SET
                    tanggal=%s, tujuan=%s, no_stt=%s, no_invoice=%s,
                    pengirim_id=%s, pengirim_name=%s, pengirim_phone=%s, pengirim_address=%s, pengirim_city=%s,
                    penerima_id=%s, penerima_name=%s, penerima_phone=%s, penerima_address=%s, penerima_city=%s,
                    koli=%s, berat=%s, berat_unit=%s, tipe=%s, harga=%s, jumlah=%s, is_taxable=%s, ppn_rate=%s, ppn=%s,
                    status=%s, payment_method=%s, pelunasan=%s, keterangan=%s, isi_barang=%s, branch=%s
                WHERE transaction_id=%s
                """,
                _row_values(data) + (int(transaction_id),),
            )
            # rowcount is 0 when nothing changed, so check existence separately
            cur.execute("SELECT 1 AS found FROM transactions WHERE transaction_id=%s", (int(transaction_id),))
            if not fetchone(cur):
                return False
            if history is not None:
                self._insert_history(cur, transaction_id, history)
            self._refresh_invoice_totals(cur, self._linked_invoice_ids(cur, transaction_id))
            return True

    def append_status(self, transaction_id: int, entry: StatusHistoryEntry) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                "SELECT transaction_id FROM transactions WHERE transaction_id=%s FOR UPDATE",
                (int(transaction_id),),
            )
            if not fetchone(cur):
                return False
            cur.execute(
                "UPDATE transactions SET status=%s WHERE transaction_id=%s",
                (entry.status.value, int(transaction_id)),
            )
            self._insert_history(cur, transaction_id, entry)
            return True

    def delete(self, transaction_id: int) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            invoice_ids = self._linked_invoice_ids(cur, transaction_id)
            cur.execute("DELETE FROM transaction_status_history WHERE transaction_id=%s", (int(transaction_id),))
            cur.execute("DELETE FROM transactions WHERE transaction_id=%s", (int(transaction_id),))
            deleted = cur.rowcount > 0
            # invoice_transactions rows go with the transaction (ON DELETE CASCADE)
            self._refresh_invoice_totals(cur, invoice_ids)
            return deleted

    def linked_invoice_statuses(self, transaction_id: int) -> Sequence[InvoiceStatus]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                SELECT i.status
                FROM invoices i
                JOIN invoice_transactions it ON it.invoice_id = i.invoice_id
                WHERE it.transaction_id=%s
                """,
                (int(transaction_id),),
            )
            return [InvoiceStatus(r["status"]) for r in fetchall(cur)]
