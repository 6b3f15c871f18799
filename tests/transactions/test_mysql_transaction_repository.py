from __future__ import annotations

from datetime import date

from src.cargo_system.cargo_system.core.enums import (
    Pelunasan,
    PaymentMethod,
    TransactionStatus,
    TransactionType,
    WeightUnit,
)
from src.cargo_system.cargo_system.transactions.model import Party, TransactionData
from src.cargo_system.cargo_system.transactions.mysql_transaction_repository import MySQLTransactionRepository


class FakeCursor:
    def __init__(self, conn):
        self._conn = conn
        self.rowcount = 0
        self._rows = []

    def execute(self, sql, params=None):
        sql = " ".join(sql.split())
        self._conn.statements.append((sql, params))
        self.rowcount = 1
        if sql.startswith("SELECT i.invoice_id"):
            self._rows = [{"invoice_id": 5}, {"invoice_id": 9}]
        elif sql.startswith("SELECT 1 AS found"):
            self._rows = [{"found": 1}]
        else:
            self._rows = []

    def fetchone(self):
        return self._rows[0] if self._rows else None

    def fetchall(self):
        return self._rows

    def close(self):
        pass


class FakeConnection:
    def __init__(self):
        self.statements = []
        self.committed = False

    def cursor(self, dictionary=True):
        return FakeCursor(self)

    def commit(self):
        self.committed = True

    def rollback(self):
        pass

    def close(self):
        pass


class FakeFactory:
    def __init__(self, conn):
        self._conn = conn

    def connect(self):
        return self._conn


def _data():
    return TransactionData(
        tanggal=date(2026, 1, 20),
        tujuan="Makassar",
        no_stt="STT017642",
        no_invoice="INV012366",
        pengirim=Party(name="PT Sinar Jaya"),
        penerima=Party(name="Toko Abadi"),
        koli=4,
        berat=120.0,
        berat_unit=WeightUnit.KG,
        tipe=TransactionType.REGULAR,
        harga=200_000,
        jumlah=800_000,
        is_taxable=False,
        ppn_rate=0.0,
        ppn=0,
        status=TransactionStatus.PENDING,
        payment_method=PaymentMethod.KREDIT,
        pelunasan=Pelunasan.PENDING,
    )


def test_update_rederives_linked_invoice_totals_in_the_same_transaction():
    conn = FakeConnection()
    assert MySQLTransactionRepository(FakeFactory(conn)).update(3, _data())

    sqls = [s for s, _ in conn.statements]
    assert sqls[0].startswith("UPDATE transactions SET")
    assert sqls[-2].startswith("SELECT i.invoice_id") and sqls[-2].endswith("FOR UPDATE")
    assert sqls[-1].startswith("UPDATE invoices i SET i.total_amount = ( SELECT COALESCE(SUM(t.jumlah), 0)")
    assert conn.statements[-1][1] == (5, 9, "Paid")
    assert conn.committed


def test_delete_collects_invoices_before_removing_the_row():
    conn = FakeConnection()
    assert MySQLTransactionRepository(FakeFactory(conn)).delete(3)

    sqls = [s for s, _ in conn.statements]
    assert sqls[0].startswith("SELECT i.invoice_id")
    assert sqls[2].startswith("DELETE FROM transactions")
    assert sqls[3].startswith("UPDATE invoices i SET i.total_amount")
    assert conn.committed
