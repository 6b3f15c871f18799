from __future__ import annotations

from datetime import date
from typing import Optional, Protocol, Sequence

from ..core.enums import InvoiceStatus, TransactionStatus
from .model import StatusHistoryEntry, Transaction, TransactionData


class TransactionRepository(Protocol):
    def list_transactions(
        self,
        *,
        start_date: Optional[date] = None,
        end_date: Optional[date] = None,
        status: Optional[TransactionStatus] = None,
    ) -> Sequence[Transaction]:
        """Newest first."""

        raise NotImplementedError

    def get_by_id(self, transaction_id: int) -> Optional[Transaction]:
        raise NotImplementedError

    def get_many(self, transaction_ids: Sequence[int]) -> Sequence[Transaction]:
        raise NotImplementedError

    def get_by_stt(self, no_stt: str) -> Optional[Transaction]:
        raise NotImplementedError

    def create(self, data: TransactionData, *, history: StatusHistoryEntry) -> int:
        raise NotImplementedError

    def update(self, transaction_id: int, data: TransactionData, *, history: Optional[StatusHistoryEntry] = None) -> bool:
        """Write the edit and re-derive the totals of unpaid invoices that bill it, in one unit of work."""

        raise NotImplementedError

    def append_status(self, transaction_id: int, entry: StatusHistoryEntry) -> bool:
        """Set the current status and append the entry to the history log."""

        raise NotImplementedError

    def delete(self, transaction_id: int) -> bool:
        """Remove the record and re-derive the totals of unpaid invoices that billed it."""

        raise NotImplementedError

    def linked_invoice_statuses(self, transaction_id: int) -> Sequence[InvoiceStatus]:
        raise NotImplementedError
