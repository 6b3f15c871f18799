from __future__ import annotations

from dataclasses import replace
from datetime import date
from typing import Optional

import pytest

from src.cargo_system.cargo_system.clients.model import Client
from src.cargo_system.cargo_system.core.enums import InvoiceStatus, TransactionStatus, TransactionType
from src.cargo_system.cargo_system.core.exceptions import NotFoundError, ValidationError
from src.cargo_system.cargo_system.counters.service import CounterService
from src.cargo_system.cargo_system.settings.model import TaxSettings
from src.cargo_system.cargo_system.settings.service import SettingsService
from src.cargo_system.cargo_system.transactions.model import Party, Transaction, TransactionForm
from src.cargo_system.cargo_system.transactions.service import TransactionService


class InMemoryCounters:
    def __init__(self):
        self.values: dict[str, int] = {}

    def allocate(self, *, key, prefix, seed_last):
        self.values[key] = max(seed_last, self.values.get(key, seed_last)) + 1
        return self.values[key]


class InMemorySettings:
    def __init__(self, settings: Optional[TaxSettings] = None):
        self._settings = settings

    def get_tax_settings(self):
        return self._settings


class InMemoryClients:
    def __init__(self, clients):
        self._by_id = {c.client_id: c for c in clients}

    def get_by_id(self, client_id):
        return self._by_id.get(client_id)


class InMemoryTransactions:
    def __init__(self):
        self.rows: dict[int, Transaction] = {}
        self._next_id = 1
        # invoice_id -> {"status", "transaction_ids", "total_amount"}
        self.invoices: dict[int, dict] = {}

    def bill(self, invoice_id, transaction_ids, status=InvoiceStatus.UNPAID):
        self.invoices[invoice_id] = {
            "status": status,
            "transaction_ids": list(transaction_ids),
            "total_amount": sum(self.rows[i].jumlah for i in transaction_ids),
        }

    def _refresh_invoice_totals(self, transaction_id):
        for invoice in self.invoices.values():
            if transaction_id in invoice["transaction_ids"] and invoice["status"] != InvoiceStatus.PAID:
                invoice["transaction_ids"] = [i for i in invoice["transaction_ids"] if i in self.rows]
                invoice["total_amount"] = sum(self.rows[i].jumlah for i in invoice["transaction_ids"])

    def linked_invoice_statuses(self, transaction_id):
        return [i["status"] for i in self.invoices.values() if transaction_id in i["transaction_ids"]]

    def list_transactions(self, *, start_date=None, end_date=None, status=None):
        rows = [
            t
            for t in self.rows.values()
            if (start_date is None or t.tanggal >= start_date)
            and (end_date is None or t.tanggal <= end_date)
            and (status is None or t.status == status)
        ]
        return sorted(rows, key=lambda t: t.transaction_id, reverse=True)

    def get_by_id(self, transaction_id):
        return self.rows.get(transaction_id)

    def get_by_stt(self, no_stt):
        return next((t for t in self.rows.values() if t.no_stt == no_stt), None)

    def create(self, data, *, history):
        transaction_id = self._next_id
        self._next_id += 1
        self.rows[transaction_id] = Transaction(**vars(data), transaction_id=transaction_id, history=(history,))
        return transaction_id

    def update(self, transaction_id, data, *, history=None):
        current = self.rows.get(transaction_id)
        if not current:
            return False
        entries = current.history + ((history,) if history else ())
        self.rows[transaction_id] = Transaction(**vars(data), transaction_id=transaction_id, history=entries)
        self._refresh_invoice_totals(transaction_id)
        return True

    def append_status(self, transaction_id, entry):
        current = self.rows.get(transaction_id)
        if not current:
            return False
        self.rows[transaction_id] = replace(current, status=entry.status, history=current.history + (entry,))
        return True

    def delete(self, transaction_id):
        deleted = self.rows.pop(transaction_id, None) is not None
        self._refresh_invoice_totals(transaction_id)
        return deleted


def _form(**overrides):
    fields = dict(
        tanggal=date(2026, 1, 20),
        tujuan="Makassar",
        pengirim=Party(name="PT Sinar Jaya", phone="0812"),
        penerima=Party(name="Toko Abadi"),
        koli=4,
        berat=120.0,
        harga=150_000,
    )
    fields.update(overrides)
    return TransactionForm(**fields)


def _service(fixed_now, settings=None, clients=()):
    repo = InMemoryTransactions()
    svc = TransactionService(
        repo,
        CounterService(InMemoryCounters()),
        SettingsService(InMemorySettings(settings)),
        InMemoryClients(clients),
        clock=fixed_now,
    )
    return svc, repo


def test_create_assigns_stt_invoice_and_history(fixed_now):
    svc, repo = _service(fixed_now)
    tid = svc.create_transaction(_form(branch="surabaya"))

    t = repo.rows[tid]
    assert t.no_stt == "STT017642"
    assert t.no_invoice == "INV012366"
    assert t.jumlah == 600_000
    assert t.ppn == 0
    assert t.status == TransactionStatus.PENDING
    assert [h.status for h in t.history] == [TransactionStatus.PENDING]
    assert t.history[0].timestamp == fixed_now()


def test_taxable_shipment_of_pkp_company_gets_pkp_invoice(fixed_now):
    svc, repo = _service(fixed_now, settings=TaxSettings(is_pkp=True, default_ppn_rate=0.11))
    tid = svc.create_transaction(_form(harga=277_500, is_taxable=True))

    t = repo.rows[tid]
    assert t.no_invoice == "INV-PKP05177"
    assert t.jumlah == 1_110_000
    assert t.ppn == 110_000
    assert t.ppn_rate == 0.11


def test_taxable_shipment_without_pkp_uses_regular_invoice(fixed_now):
    svc, repo = _service(fixed_now)
    tid = svc.create_transaction(_form(is_taxable=True))
    assert repo.rows[tid].no_invoice == "INV012366"


def test_borongan_requires_manual_total(fixed_now):
    svc, repo = _service(fixed_now)
    with pytest.raises(ValidationError):
        svc.create_transaction(_form(tipe=TransactionType.BORONGAN))

    tid = svc.create_transaction(_form(tipe=TransactionType.BORONGAN, jumlah=2_000_000))
    assert repo.rows[tid].jumlah == 2_000_000


def test_invalid_form_does_not_consume_numbers(fixed_now):
    svc, repo = _service(fixed_now)
    with pytest.raises(ValidationError):
        svc.create_transaction(_form(tujuan=" "))

    tid = svc.create_transaction(_form())
    assert repo.rows[tid].no_stt == "STT017642"


def test_manual_stt_must_be_unique(fixed_now):
    svc, _ = _service(fixed_now)
    svc.create_transaction(_form(), no_stt="STT000001")
    with pytest.raises(ValidationError):
        svc.create_transaction(_form(), no_stt="STT000001")


def test_party_is_filled_from_client_record(fixed_now):
    client = Client(client_id=7, name="CV Maju", phone="031-555", city="Surabaya")
    svc, repo = _service(fixed_now, clients=[client])
    tid = svc.create_transaction(_form(pengirim=Party(name="", client_id=7)))

    pengirim = repo.rows[tid].pengirim
    assert pengirim.name == "CV Maju"
    assert pengirim.city == "Surabaya"

    with pytest.raises(NotFoundError):
        svc.create_transaction(_form(pengirim=Party(name="", client_id=99)))


def test_status_changes_append_to_history(fixed_now):
    svc, repo = _service(fixed_now)
    tid = svc.create_transaction(_form())

    svc.update_status(tid, TransactionStatus.DIKIRIM, catatan="Berangkat")
    svc.update_transaction(tid, _form(status=TransactionStatus.SELESAI))

    t = repo.rows[tid]
    assert t.status == TransactionStatus.SELESAI
    assert [h.status for h in t.history] == [
        TransactionStatus.PENDING,
        TransactionStatus.DIKIRIM,
        TransactionStatus.SELESAI,
    ]
    assert t.no_stt == "STT017642"


def test_search_matches_stt_and_names(fixed_now):
    svc, _ = _service(fixed_now)
    svc.create_transaction(_form())
    svc.create_transaction(_form(tujuan="Bandung", penerima=Party(name="Gudang Timur")))

    assert len(svc.search("gudang")) == 1
    assert len(svc.search("stt0176")) == 2
    assert len(svc.search("")) == 2


def test_missing_transaction(fixed_now):
    svc, _ = _service(fixed_now)
    with pytest.raises(NotFoundError):
        svc.update_status(404, TransactionStatus.SELESAI)
    with pytest.raises(NotFoundError):
        svc.delete_transaction(404)


def test_editing_invoiced_shipment_rederives_invoice_total(fixed_now):
    svc, repo = _service(fixed_now)
    tid = svc.create_transaction(_form())
    repo.bill(1, [tid])
    assert repo.invoices[1]["total_amount"] == 600_000

    svc.update_transaction(tid, _form(harga=200_000))

    assert repo.rows[tid].jumlah == 800_000
    assert repo.invoices[1]["total_amount"] == 800_000


def test_deleting_invoiced_shipment_drops_it_from_the_total(fixed_now):
    svc, repo = _service(fixed_now)
    first = svc.create_transaction(_form())
    second = svc.create_transaction(_form(koli=2))
    repo.bill(1, [first, second])
    assert repo.invoices[1]["total_amount"] == 900_000

    svc.delete_transaction(second)

    assert repo.invoices[1]["transaction_ids"] == [first]
    assert repo.invoices[1]["total_amount"] == 600_000


def test_paid_invoice_locks_amount_and_blocks_delete(fixed_now):
    svc, repo = _service(fixed_now)
    tid = svc.create_transaction(_form())
    repo.bill(1, [tid], status=InvoiceStatus.PAID)

    with pytest.raises(ValidationError, match="invoice lunas"):
        svc.update_transaction(tid, _form(harga=200_000))
    with pytest.raises(ValidationError, match="invoice lunas"):
        svc.delete_transaction(tid)

    # edits that keep the amount are still allowed
    svc.update_transaction(tid, _form(keterangan="Barang pecah belah"))
    assert repo.rows[tid].keterangan == "Barang pecah belah"
    assert repo.rows[tid].jumlah == 600_000
    assert repo.invoices[1]["total_amount"] == 600_000
