from __future__ import annotations

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
from src.cargo_system.cargo_system.core.exceptions import ValidationError
from src.cargo_system.cargo_system.expenses.model import Expense
from src.cargo_system.cargo_system.invoices.model import ReceivablesSummary
from src.cargo_system.cargo_system.reports.service import ReportService
from src.cargo_system.cargo_system.transactions.model import Party, Transaction
from src.cargo_system.cargo_system.voyages.model import Voyage


def _tx(transaction_id, tanggal, jumlah, sender, status):
    return Transaction(
        tanggal=tanggal,
        tujuan="Makassar",
        no_stt=f"STT{transaction_id:06d}",
        pengirim=Party(name=sender),
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


def _expense(expense_id, expense_date, amount, voyage_id=None):
    return Expense(
        expense_id=expense_id,
        expense_date=expense_date,
        category=ExpenseCategory.TIKET if voyage_id else ExpenseCategory.SEWA_KANTOR,
        amount=amount,
        expense_type=ExpenseType.VOYAGE if voyage_id else ExpenseType.GENERAL,
        voyage_id=voyage_id,
    )


class InMemoryTransactions:
    def __init__(self, rows):
        self.rows = rows

    def list_transactions(self, *, start_date=None, end_date=None, status=None):
        return [
            t
            for t in self.rows
            if (start_date is None or t.tanggal >= start_date) and (end_date is None or t.tanggal <= end_date)
        ]

    def get_many(self, ids):
        return [t for t in self.rows if t.transaction_id in ids]


class InMemoryExpenses:
    def __init__(self, rows):
        self.rows = rows

    def list_expenses(self, *, voyage_id=None, expense_type=None, start_date=None, end_date=None):
        return [
            e
            for e in self.rows
            if (voyage_id is None or e.voyage_id == voyage_id)
            and (start_date is None or e.expense_date >= start_date)
            and (end_date is None or e.expense_date <= end_date)
        ]


class InMemoryVoyages:
    def __init__(self, rows):
        self.rows = rows

    def list_voyages(self, *, status=None):
        return list(self.rows)


class StubInvoices:
    def __init__(self):
        self.asked_for = None

    def receivables_summary(self, *, today=None):
        self.asked_for = today
        return ReceivablesSummary(
            outstanding_count=1,
            outstanding_amount=500_000,
            overdue_count=0,
            overdue_amount=0,
            paid_amount=0,
        )


@pytest.fixture
def invoices():
    return StubInvoices()


@pytest.fixture
def service(fixed_now, invoices):
    transactions = InMemoryTransactions(
        [
            _tx(1, date(2026, 1, 5), 1_000_000, "PT Sinar Jaya", TransactionStatus.SELESAI),
            _tx(2, date(2026, 1, 12), 500_000, "CV Maju", TransactionStatus.DIKIRIM),
            _tx(3, date(2026, 1, 15), 300_000, "PT Sinar Jaya", TransactionStatus.DIBATALKAN),
            _tx(4, date(2025, 12, 10), 750_000, "CV Maju", TransactionStatus.SELESAI),
        ]
    )
    expenses = InMemoryExpenses(
        [
            _expense(1, date(2026, 1, 12), 200_000, voyage_id=1),
            _expense(2, date(2026, 1, 1), 300_000),
            _expense(3, date(2025, 12, 20), 100_000, voyage_id=2),
        ]
    )
    voyages = InMemoryVoyages(
        [
            Voyage(1, "VOY001", "KM Dharma", date(2026, 1, 12), VoyageStatus.COMPLETED, route="Surabaya-Makassar", transaction_ids=(1, 2)),
            Voyage(2, "VOY002", "KM Lama", date(2025, 12, 20), VoyageStatus.COMPLETED, route="Surabaya-Makassar", transaction_ids=(4,)),
        ]
    )
    return ReportService(
        transactions=transactions,
        expenses=expenses,
        voyages=voyages,
        employees=None,
        attendance=None,
        payroll_service=None,
        invoice_service=invoices,
        clock=fixed_now,
    )


def test_dashboard_defaults_to_current_month_and_compares_previous_window(service, invoices):
    d = service.dashboard()

    assert (d.start_date, d.end_date) == (date(2026, 1, 1), date(2026, 1, 31))
    assert d.total_revenue == 1_500_000
    assert d.previous_revenue == 750_000
    assert d.revenue_growth == 100.0
    assert d.total_expenses == 500_000
    assert d.previous_expenses == 100_000
    assert d.expenses_growth == 400.0
    assert d.net_profit == 1_000_000
    assert d.previous_profit == 650_000
    assert d.profit_growth == 53.8
    assert d.active_shipments == 1
    assert d.status_counts[TransactionStatus.DIBATALKAN] == 1
    assert invoices.asked_for == date(2026, 1, 20)


def test_dashboard_rankings(service):
    d = service.dashboard()

    assert [(c.name, c.revenue) for c in d.top_clients] == [("PT Sinar Jaya", 1_000_000), ("CV Maju", 500_000)]
    (route,) = d.route_profitability
    assert route.route == "Surabaya-Makassar"
    assert route.voyage_count == 1
    assert route.revenue == 1_500_000
    assert route.expenses == 200_000
    assert route.margin == 86.7


def test_inverted_range_is_rejected(service):
    with pytest.raises(ValidationError):
        service.dashboard(start_date=date(2026, 2, 1), end_date=date(2026, 1, 1))


def test_dashboard_breaks_a_month_down_per_day(service):
    d = service.dashboard()

    assert [(p.key, p.label, p.revenue, p.expenses) for p in d.period_stats] == [
        ("2026-01-01", "1", 0, 300_000),
        ("2026-01-05", "5", 1_000_000, 0),
        ("2026-01-12", "12", 500_000, 200_000),
    ]


def test_dashboard_breaks_longer_ranges_down_per_month(service):
    d = service.dashboard(start_date=date(2025, 12, 1), end_date=date(2026, 1, 31))

    assert [(p.key, p.label, p.revenue, p.expenses) for p in d.period_stats] == [
        ("2025-12", "Des", 750_000, 100_000),
        ("2026-01", "Jan", 1_500_000, 500_000),
    ]


def test_recent_activity_mixes_shipments_and_expenses(service):
    d = service.dashboard()

    assert [(a.description, a.amount) for a in d.recent_activity] == [
        ("Kargo - STT000002", 500_000),
        ("Expense - Tiket Kapal", -200_000),
        ("Kargo - STT000001", 1_000_000),
        ("Expense - Sewa Kantor", -300_000),
    ]


def test_dashboard_csv_export(service):
    text = service.dashboard_csv(start_date=date(2026, 1, 1), end_date=date(2026, 1, 31), range_label="Januari 2026")

    assert text == (
        "Laporan Dashboard Cahaya Cargo\n"
        "Periode,Januari 2026\n"
        "Total Pendapatan,1500000\n"
        "Total Pengeluaran,500000\n"
        "Profit Bersih,1000000\n"
        "\n"
        "Rincian Per Periode\n"
        "Tanggal/Bulan,Pendapatan,Pengeluaran\n"
        "1,0,300000\n"
        "5,1000000,0\n"
        "12,500000,200000\n"
        "\n"
        "Top 5 Pelanggan\n"
        "Nama,Jumlah Transaksi,Total Pendapatan\n"
        "PT Sinar Jaya,1,1000000\n"
        "CV Maju,1,500000\n"
        "\n"
        "Profitabilitas Rute\n"
        "Rute,Margin (%),Profit\n"
        "Surabaya-Makassar,86.70%,1300000\n"
    )


def test_dashboard_csv_defaults_label_to_the_dates(service):
    text = service.dashboard_csv(start_date=date(2026, 1, 1), end_date=date(2026, 1, 31))
    assert text.splitlines()[1] == "Periode,01/01/2026 - 31/01/2026"
