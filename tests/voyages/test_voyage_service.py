from __future__ import annotations

from dataclasses import replace
from datetime import date

import pytest

from src.cargo_system.cargo_system.core.enums import (
    ExpenseCategory,
    ExpenseType,
    Pelunasan,
    PaymentMethod,
    TransactionStatus,
    TransactionType,
    VoyageStatus,
    WeightUnit,
)
from src.cargo_system.cargo_system.core.exceptions import NotFoundError, ValidationError
from src.cargo_system.cargo_system.counters.service import CounterService
from src.cargo_system.cargo_system.expenses.model import Expense
from src.cargo_system.cargo_system.transactions.model import Party, Transaction
from src.cargo_system.cargo_system.voyages.model import Voyage
from src.cargo_system.cargo_system.voyages.mysql_voyage_repository import MySQLVoyageRepository
from src.cargo_system.cargo_system.voyages.service import VoyageService


def _tx(transaction_id, jumlah, status=TransactionStatus.DIKIRIM):
    return Transaction(
        tanggal=date(2026, 1, 10),
        tujuan="Makassar",
        no_stt=f"STT{transaction_id:06d}",
        pengirim=Party(name="PT Sinar Jaya"),
        penerima=Party(name="Toko Abadi"),
        koli=1,
        berat=10.0,
        berat_unit=WeightUnit.KG,
        tipe=TransactionType.REGULAR,
        harga=jumlah,
        jumlah=jumlah,
        is_taxable=False,
        ppn_rate=0.0,
        ppn=0,
        status=status,
        payment_method=PaymentMethod.TUNAI,
        pelunasan=Pelunasan.PENDING,
        transaction_id=transaction_id,
    )


class InMemoryTransactions:
    def __init__(self, rows):
        self.rows = {t.transaction_id: t for t in rows}

    def get_many(self, ids):
        return [self.rows[i] for i in ids if i in self.rows]


class InMemoryExpenses:
    def __init__(self, rows):
        self.rows = {e.expense_id: e for e in rows}

    def list_expenses(self, *, voyage_id=None, expense_type=None, start_date=None, end_date=None):
        return [e for e in self.rows.values() if voyage_id is None or e.voyage_id == voyage_id]


class InMemoryVoyages:
    def __init__(self, expenses: InMemoryExpenses):
        self._expenses = expenses
        self.rows: dict[int, Voyage] = {}

    def list_voyages(self, *, status=None):
        return list(self.rows.values())

    def get_by_id(self, voyage_id):
        return self.rows.get(voyage_id)

    def create(self, *, voyage_number, name, departure_date, arrival_date, route, ship_name, vehicle_numbers, status, notes):
        voyage_id = len(self.rows) + 1
        self.rows[voyage_id] = Voyage(
            voyage_id=voyage_id,
            voyage_number=voyage_number,
            name=name,
            departure_date=departure_date,
            arrival_date=arrival_date,
            status=status,
            route=route,
            ship_name=ship_name,
            vehicle_numbers=tuple(vehicle_numbers),
            notes=notes,
        )
        return voyage_id

    def set_status(self, voyage_id, status):
        self.rows[voyage_id] = replace(self.rows[voyage_id], status=status)
        return True

    def set_transactions(self, voyage_id, transaction_ids):
        self.rows[voyage_id] = replace(self.rows[voyage_id], transaction_ids=tuple(transaction_ids))
        return True

    def delete_with_expenses(self, voyage_id):
        if self.rows.pop(voyage_id, None) is None:
            return False, 0
        linked = [eid for eid, e in self._expenses.rows.items() if e.voyage_id == voyage_id]
        for eid in linked:
            del self._expenses.rows[eid]
        return True, len(linked)


class InMemoryCounters:
    def __init__(self):
        self.values = {}

    def allocate(self, *, key, prefix, seed_last):
        self.values[key] = max(seed_last, self.values.get(key, seed_last)) + 1
        return self.values[key]


def _expense(expense_id, voyage_id, amount, category=ExpenseCategory.TIKET):
    return Expense(
        expense_id=expense_id,
        expense_date=date(2026, 1, 12),
        category=category,
        amount=amount,
        expense_type=ExpenseType.VOYAGE if voyage_id else ExpenseType.GENERAL,
        voyage_id=voyage_id,
    )


@pytest.fixture
def setup():
    transactions = InMemoryTransactions(
        [_tx(1, 2_000_000), _tx(2, 1_500_000), _tx(3, 700_000, TransactionStatus.DIBATALKAN)]
    )
    expenses = InMemoryExpenses(
        [
            _expense(1, 1, 800_000),
            _expense(2, 1, 200_000, ExpenseCategory.TRANSIT),
            _expense(3, None, 5_000_000, ExpenseCategory.SEWA_KANTOR),
        ]
    )
    voyages = InMemoryVoyages(expenses)
    service = VoyageService(voyages, transactions, expenses, CounterService(InMemoryCounters()))
    return service, voyages, expenses


def test_create_voyage_numbers_and_cleans_vehicles(setup):
    service, voyages, _ = setup
    voyage_id = service.create_voyage(
        name="KM Dharma Kencana",
        departure_date=date(2026, 1, 12),
        vehicle_numbers=[" l 1234 ab ", "L 1234 AB", "W 9 XY", ""],
    )

    voyage = voyages.rows[voyage_id]
    assert voyage.voyage_number == "VOY001"
    assert voyage.vehicle_numbers == ("L 1234 AB", "W 9 XY")
    assert voyage.status == VoyageStatus.PLANNED


def test_arrival_before_departure_is_rejected(setup):
    service, _, _ = setup
    with pytest.raises(ValidationError):
        service.create_voyage(name="X", departure_date=date(2026, 1, 12), arrival_date=date(2026, 1, 11))


def test_summary_excludes_cancelled_shipments(setup):
    service, _, _ = setup
    voyage_id = service.create_voyage(name="KM Dharma Kencana", departure_date=date(2026, 1, 12))
    service.assign_transactions(voyage_id, [1, 2])

    summary = service.get_summary(voyage_id)
    assert summary.transaction_count == 2
    assert summary.total_revenue == 3_500_000
    assert summary.total_expenses == 1_000_000
    assert summary.profit == 2_500_000
    assert summary.expenses_by_category[ExpenseCategory.TRANSIT] == 200_000


def test_cancelled_shipment_cannot_be_loaded(setup):
    service, _, _ = setup
    voyage_id = service.create_voyage(name="KM Dharma Kencana", departure_date=date(2026, 1, 12))
    with pytest.raises(ValidationError):
        service.assign_transactions(voyage_id, [3])
    with pytest.raises(NotFoundError):
        service.assign_transactions(voyage_id, [42])


def test_assign_is_idempotent_and_remove_drops(setup):
    service, voyages, _ = setup
    voyage_id = service.create_voyage(name="KM Dharma Kencana", departure_date=date(2026, 1, 12))
    service.assign_transactions(voyage_id, [1])
    service.assign_transactions(voyage_id, [1, 2])
    assert voyages.rows[voyage_id].transaction_ids == (1, 2)

    service.remove_transactions(voyage_id, [1])
    assert voyages.rows[voyage_id].transaction_ids == (2,)


def test_delete_voyage_takes_its_expenses(setup):
    service, _, expenses = setup
    voyage_id = service.create_voyage(name="KM Dharma Kencana", departure_date=date(2026, 1, 12))

    assert service.delete_voyage(voyage_id) == 2
    assert list(expenses.rows) == [3]
    with pytest.raises(NotFoundError):
        service.delete_voyage(voyage_id)


class FakeCursor:
    def __init__(self, conn):
        self._conn = conn
        self.rowcount = 0

    def execute(self, sql, params=None):
        self._conn.statements.append(" ".join(sql.split()))
        self.rowcount = 2 if sql.startswith("DELETE FROM expenses") else 1

    def fetchone(self):
        return {"voyage_id": 1}

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


def test_mysql_delete_removes_expenses_and_voyage_in_one_transaction():
    conn = FakeConnection()
    deleted, removed = MySQLVoyageRepository(FakeFactory(conn)).delete_with_expenses(1)

    assert (deleted, removed) == (True, 2)
    assert conn.statements[0].endswith("FOR UPDATE")
    assert conn.statements[1].startswith("DELETE FROM expenses")
    assert conn.statements[-1].startswith("DELETE FROM voyages")
    assert conn.committed
