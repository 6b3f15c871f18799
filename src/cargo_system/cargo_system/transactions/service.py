from __future__ import annotations

from dataclasses import replace
from datetime import date, datetime
from typing import Callable, Optional, Sequence

from ..clients.repository import ClientRepository
from ..common.currency import calculate_jumlah, calculate_ppn
from ..common.datetime_utils import now_local
from ..common.validators import optional_str, require_non_empty, require_non_negative
from ..core.enums import InvoiceStatus, TransactionStatus, TransactionType
from ..core.exceptions import NotFoundError, ValidationError
from ..core.logger import logger
from ..counters.service import CounterService
from ..settings.service import SettingsService
from .model import Party, StatusHistoryEntry, Transaction, TransactionData, TransactionForm
from .repository import TransactionRepository

CREATED_NOTE = "Transaksi dibuat"
EDIT_STATUS_NOTE = "Status diubah via edit"
PAID_INVOICE_MESSAGE = "Transaksi sudah ditagih di invoice lunas"


class TransactionService:
    """Use case: STT shipment records (create/edit/status log/search)."""

    def __init__(
        self,
        transactions: TransactionRepository,
        counters: CounterService,
        settings: SettingsService,
        clients: Optional[ClientRepository] = None,
        *,
        clock: Callable[[], datetime] = now_local,
    ):
        self._transactions = transactions
        self._counters = counters
        self._settings = settings
        self._clients = clients
        self._clock = clock

    def _resolve_party(self, party: Party, label: str) -> Party:
        """Fill a sender/receiver snapshot from the client record when only the id is given."""
        if party.client_id and not (party.name or "").strip() and self._clients:
            client = self._clients.get_by_id(int(party.client_id))
            if not client:
                raise NotFoundError(f"{label} tidak ditemukan")
            return Party(
                client_id=client.client_id,
                name=client.name,
                phone=party.phone or client.phone,
                address=party.address or client.address,
                city=party.city or client.city,
            )
        return replace(party, name=require_non_empty(party.name, f"Nama {label.lower()}"))

    def _amounts(self, form: TransactionForm) -> tuple[int, float, int]:
        harga = require_non_negative(form.harga, "Harga")
        koli = require_non_negative(form.koli, "Koli")

        if form.jumlah is not None:
            jumlah = require_non_negative(form.jumlah, "Jumlah")
        elif TransactionType(form.tipe) == TransactionType.BORONGAN:
            raise ValidationError("Jumlah wajib diisi untuk transaksi borongan")
        else:
            jumlah = calculate_jumlah(harga, koli, form.tipe)

        if not form.is_taxable:
            return jumlah, 0.0, 0

        rate = form.ppn_rate if form.ppn_rate is not None else self._settings.get_tax_settings().default_ppn_rate
        ppn = require_non_negative(form.ppn, "PPN") if form.ppn is not None else calculate_ppn(jumlah, rate)
        return jumlah, float(rate), ppn

    def _build_data(self, form: TransactionForm, *, no_stt: str, no_invoice: Optional[str], status: TransactionStatus) -> TransactionData:
        jumlah, ppn_rate, ppn = self._amounts(form)
        berat = float(form.berat or 0)
        if berat < 0:
            raise ValidationError("Berat tidak boleh negatif")

        return TransactionData(
            tanggal=form.tanggal,
            tujuan=require_non_empty(form.tujuan, "Tujuan"),
            no_stt=no_stt,
            no_invoice=no_invoice,
            pengirim=self._resolve_party(form.pengirim, "Pengirim"),
            penerima=self._resolve_party(form.penerima, "Penerima"),
            koli=int(form.koli),
            berat=berat,
            berat_unit=form.berat_unit,
            tipe=form.tipe,
            harga=int(form.harga),
            jumlah=jumlah,
            is_taxable=bool(form.is_taxable),
            ppn_rate=ppn_rate,
            ppn=ppn,
            status=status,
            payment_method=form.payment_method,
            pelunasan=form.pelunasan,
            keterangan=optional_str(form.keterangan),
            isi_barang=optional_str(form.isi_barang),
            branch=optional_str(form.branch),
        )

    def _on_paid_invoice(self, transaction_id: int) -> bool:
        return InvoiceStatus.PAID in self._transactions.linked_invoice_statuses(transaction_id)

    def get(self, transaction_id: int) -> Transaction:
        t = self._transactions.get_by_id(int(transaction_id))
        if not t:
            raise NotFoundError("Transaksi tidak ditemukan")
        return t

    def list_transactions(
        self,
        *,
        start_date: Optional[date] = None,
        end_date: Optional[date] = None,
        status: Optional[TransactionStatus] = None,
    ) -> Sequence[Transaction]:
        if start_date and end_date and start_date > end_date:
            raise ValidationError("Tanggal mulai tidak boleh setelah tanggal akhir")
        return self._transactions.list_transactions(start_date=start_date, end_date=end_date, status=status)

    def search(self, term: str) -> Sequence[Transaction]:
        term = (term or "").strip()
        rows = self._transactions.list_transactions()
        if not term:
            return rows
        return [t for t in rows if t.matches(term)]

    def create_transaction(self, form: TransactionForm, *, no_stt: Optional[str] = None) -> int:
        manual_stt = optional_str(no_stt)
        if manual_stt and self._transactions.get_by_stt(manual_stt):
            raise ValidationError(f"No. STT {manual_stt} sudah digunakan")

        # Validate before allocating so a bad form does not burn sequence numbers.
        self._build_data(form, no_stt=manual_stt or "-", no_invoice=None, status=TransactionStatus.PENDING)

        stt = manual_stt or self._counters.next_stt_number(form.branch)
        no_invoice = optional_str(form.no_invoice)
        if not no_invoice:
            is_pkp = bool(form.is_taxable) and self._settings.get_tax_settings().is_pkp
            no_invoice = self._counters.next_invoice_number(is_pkp=is_pkp)

        data = self._build_data(form, no_stt=stt, no_invoice=no_invoice, status=TransactionStatus.PENDING)
        entry = StatusHistoryEntry(status=TransactionStatus.PENDING, timestamp=self._clock(), catatan=CREATED_NOTE)
        transaction_id = self._transactions.create(data, history=entry)
        logger.info(f"Transaction {transaction_id} created ({stt}, {no_invoice}, jumlah={data.jumlah})")
        return transaction_id

    def update_transaction(self, transaction_id: int, form: TransactionForm, *, no_stt: Optional[str] = None) -> None:
        current = self.get(transaction_id)

        stt = optional_str(no_stt) or current.no_stt
        if stt != current.no_stt:
            other = self._transactions.get_by_stt(stt)
            if other and other.transaction_id != current.transaction_id:
                raise ValidationError(f"No. STT {stt} sudah digunakan")

        status = TransactionStatus(form.status) if form.status else current.status
        data = self._build_data(
            form,
            no_stt=stt,
            no_invoice=optional_str(form.no_invoice) or current.no_invoice,
            status=status,
        )

        if data.jumlah != current.jumlah and self._on_paid_invoice(current.transaction_id):
            raise ValidationError(f"{PAID_INVOICE_MESSAGE}, jumlah tidak bisa diubah")

        entry = None
        if status != current.status:
            entry = StatusHistoryEntry(status=status, timestamp=self._clock(), catatan=EDIT_STATUS_NOTE)

        if not self._transactions.update(current.transaction_id, data, history=entry):
            raise NotFoundError("Transaksi tidak ditemukan")

    def update_status(self, transaction_id: int, status: TransactionStatus, catatan: Optional[str] = None) -> None:
        entry = StatusHistoryEntry(
            status=TransactionStatus(status),
            timestamp=self._clock(),
            catatan=optional_str(catatan),
        )
        if not self._transactions.append_status(int(transaction_id), entry):
            raise NotFoundError("Transaksi tidak ditemukan")
        logger.info(f"Transaction {transaction_id} status -> {entry.status.value}")

    def delete_transaction(self, transaction_id: int) -> None:
        current = self.get(transaction_id)
        if self._on_paid_invoice(current.transaction_id):
            raise ValidationError(f"{PAID_INVOICE_MESSAGE}, tidak bisa dihapus")
        if not self._transactions.delete(current.transaction_id):
            raise NotFoundError("Transaksi tidak ditemukan")
        logger.info(f"Transaction {transaction_id} deleted")
