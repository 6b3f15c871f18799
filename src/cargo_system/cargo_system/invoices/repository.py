from __future__ import annotations

from datetime import date
from typing import Optional, Protocol, Sequence

from ..core.enums import InvoiceStatus, Pelunasan
from .model import Invoice


class InvoiceRepository(Protocol):
    def list_invoices(self, *, status: Optional[InvoiceStatus] = None) -> Sequence[Invoice]:
        raise NotImplementedError

    def get_by_id(self, invoice_id: int) -> Optional[Invoice]:
        raise NotImplementedError

    def linked_transaction_ids(self, *, exclude_invoice_id: Optional[int] = None) -> set[int]:
        """Transactions already attached to a non-cancelled invoice."""

        raise NotImplementedError

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
        raise NotImplementedError

    def set_transactions(self, invoice_id: int, *, transaction_ids: Sequence[int], total_amount: int) -> bool:
        raise NotImplementedError

    def mark_paid(
        self,
        invoice_id: int,
        *,
        payment_date: date,
        payment_method: str,
        payment_ref: Optional[str],
        pelunasan: Pelunasan,
    ) -> bool:
        """Mark the invoice paid and settle every linked transaction in one unit of work."""

        raise NotImplementedError

    def set_status(self, invoice_id: int, status: InvoiceStatus) -> bool:
        raise NotImplementedError

    def delete(self, invoice_id: int) -> bool:
        raise NotImplementedError
