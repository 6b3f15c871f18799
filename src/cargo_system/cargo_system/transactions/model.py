from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime
from typing import Optional

from ..core.enums import Pelunasan, PaymentMethod, TransactionStatus, TransactionType, WeightUnit


@dataclass(frozen=True)
class Party:
    """Snapshot pengirim/penerima saat transaksi dibuat."""

    name: str
    phone: Optional[str] = None
    address: Optional[str] = None
    city: Optional[str] = None
    client_id: Optional[int] = None


@dataclass(frozen=True)
class StatusHistoryEntry:
    status: TransactionStatus
    timestamp: datetime
    catatan: Optional[str] = None


@dataclass(frozen=True)
class TransactionData:
    """Stored fields of a shipment record (everything except id and history)."""

    tanggal: date
    tujuan: str
    no_stt: str
    pengirim: Party
    penerima: Party
    koli: int
    berat: float
    berat_unit: WeightUnit
    tipe: TransactionType
    harga: int
    jumlah: int
    is_taxable: bool
    ppn_rate: float
    ppn: int
    status: TransactionStatus
    payment_method: PaymentMethod
    pelunasan: Pelunasan
    no_invoice: Optional[str] = None
    keterangan: Optional[str] = None
    isi_barang: Optional[str] = None
    branch: Optional[str] = None


@dataclass(frozen=True)
class Transaction(TransactionData):
    """Data STT lengkap dengan riwayat status (urut dari yang terlama)."""

    transaction_id: int = 0
    history: tuple[StatusHistoryEntry, ...] = ()
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    @property
    def is_active_shipment(self) -> bool:
        return self.status in (TransactionStatus.PENDING, TransactionStatus.DIPROSES, TransactionStatus.DIKIRIM)

    def matches(self, term: str) -> bool:
        term = term.lower()
        fields = (
            self.no_stt,
            self.pengirim.name,
            self.penerima.name,
            self.tujuan,
            self.no_invoice,
            self.keterangan,
        )
        return any(term in (v or "").lower() for v in fields)


@dataclass(frozen=True)
class TransactionForm:
    """Input for creating or editing a transaction.

    `jumlah` and `ppn` are optional: when missing they are derived from
    harga/koli and the tax settings.
    """

    tanggal: date
    tujuan: str
    pengirim: Party
    penerima: Party
    koli: int
    berat: float
    berat_unit: WeightUnit = WeightUnit.KG
    tipe: TransactionType = TransactionType.REGULAR
    harga: int = 0
    jumlah: Optional[int] = None
    is_taxable: bool = False
    ppn_rate: Optional[float] = None
    ppn: Optional[int] = None
    payment_method: PaymentMethod = PaymentMethod.TUNAI
    pelunasan: Pelunasan = Pelunasan.PENDING
    status: Optional[TransactionStatus] = None
    no_invoice: Optional[str] = None
    keterangan: Optional[str] = None
    isi_barang: Optional[str] = None
    branch: Optional[str] = None
