from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime
from typing import Optional

from ..core.enums import InvoiceStatus


@dataclass(frozen=True)
class Invoice:
    """Tagihan gabungan untuk beberapa STT satu pelanggan.

    total_amount is always the sum of the linked transactions' jumlah.
    """

    invoice_id: int
    invoice_number: str
    client_name: str
    transaction_ids: tuple[int, ...]
    total_amount: int
    issue_date: date
    due_date: date
    status: InvoiceStatus
    client_id: Optional[int] = None
    client_address: Optional[str] = None
    payment_date: Optional[date] = None
    payment_method: Optional[str] = None
    payment_ref: Optional[str] = None
    notes: Optional[str] = None
    created_at: Optional[datetime] = None

    def is_overdue(self, today: date) -> bool:
        return self.status == InvoiceStatus.UNPAID and self.due_date < today


@dataclass(frozen=True)
class ReceivablesSummary:
    outstanding_count: int
    outstanding_amount: int
    overdue_count: int
    overdue_amount: int
    paid_amount: int
