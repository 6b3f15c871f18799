from __future__ import annotations

from datetime import date, datetime, timedelta
from typing import Callable, Optional, Sequence

from ..common.datetime_utils import now_local
from ..common.validators import optional_str, require_non_empty
from ..core.enums import InvoiceStatus, Pelunasan, TransactionStatus
from ..core.exceptions import NotFoundError, ValidationError
from ..core.logger import logger
from ..counters.service import CounterService
from ..transactions.repository import TransactionRepository
from .model import Invoice, ReceivablesSummary
from .repository import InvoiceRepository

DEFAULT_DUE_DAYS = 30
TRANSFER_METHOD = "Transfer"


class InvoiceService:
    def __init__(
        self,
        invoices: InvoiceRepository,
        transactions: TransactionRepository,
        counters: CounterService,
        *,
        clock: Callable[[], datetime] = now_local,
    ):
        self._invoices = invoices
        self._transactions = transactions
        self._counters = counters
        self._clock = clock

    def get(self, invoice_id: int) -> Invoice:
        invoice = self._invoices.get_by_id(int(invoice_id))
        if not invoice:
            raise NotFoundError("Invoice tidak ditemukan")
        return invoice

    def list_invoices(self, *, status: Optional[InvoiceStatus] = None) -> Sequence[Invoice]:
        return self._invoices.list_invoices(status=status)

    def _total_for(self, transaction_ids: Sequence[int], *, exclude_invoice_id: Optional[int] = None) -> tuple[list[int], int]:
        """Validate the links and return (deduplicated ids, derived total)."""
        ids = list(dict.fromkeys(int(i) for i in transaction_ids))
        if not ids:
            raise ValidationError("Pilih minimal satu transaksi")

        found = {t.transaction_id: t for t in self._transactions.get_many(ids)}
        missing = [i for i in ids if i not in found]
        if missing:
            raise NotFoundError(f"Transaksi tidak ditemukan: {', '.join(str(i) for i in missing)}")

        cancelled = [found[i].no_stt for i in ids if found[i].status == TransactionStatus.DIBATALKAN]
        if cancelled:
            raise ValidationError(f"Transaksi dibatalkan tidak bisa ditagih: {', '.join(cancelled)}")

        taken = self._invoices.linked_transaction_ids(exclude_invoice_id=exclude_invoice_id)
        already = [found[i].no_stt for i in ids if i in taken]
        if already:
            raise ValidationError(f"Transaksi sudah masuk invoice lain: {', '.join(already)}")

        return ids, sum(found[i].jumlah for i in ids)

    def _require_unpaid(self, invoice: Invoice) -> None:
        if invoice.status == InvoiceStatus.PAID:
            raise ValidationError("Invoice sudah lunas")
        if invoice.status == InvoiceStatus.CANCELLED:
            raise ValidationError("Invoice sudah dibatalkan")

    def create_invoice(
        self,
        *,
        client_name: str,
        transaction_ids: Sequence[int],
        client_id: Optional[int] = None,
        client_address: Optional[str] = None,
        issue_date: Optional[date] = None,
        due_date: Optional[date] = None,
        notes: Optional[str] = None,
    ) -> int:
        client_name = require_non_empty(client_name, "Nama pelanggan")
        issue_date = issue_date or self._clock().date()
        due_date = due_date or issue_date + timedelta(days=DEFAULT_DUE_DAYS)
        if due_date < issue_date:
            raise ValidationError("Jatuh tempo tidak boleh sebelum tanggal invoice")

        ids, total = self._total_for(transaction_ids)
        number = self._counters.next_monthly_invoice_number(issue_date)

        invoice_id = self._invoices.create(
            invoice_number=number,
            client_id=client_id,
            client_name=client_name,
            client_address=optional_str(client_address),
            transaction_ids=ids,
            total_amount=total,
            issue_date=issue_date,
            due_date=due_date,
            notes=optional_str(notes),
        )
        logger.info(f"Invoice {number} created for {client_name} ({len(ids)} STT, total={total})")
        return invoice_id

    def _relink(self, invoice: Invoice, transaction_ids: Sequence[int]) -> None:
        ids, total = self._total_for(transaction_ids, exclude_invoice_id=invoice.invoice_id)
        if not self._invoices.set_transactions(invoice.invoice_id, transaction_ids=ids, total_amount=total):
            raise NotFoundError("Invoice tidak ditemukan")

    def add_transactions(self, invoice_id: int, transaction_ids: Sequence[int]) -> None:
        invoice = self.get(invoice_id)
        self._require_unpaid(invoice)
        self._relink(invoice, list(invoice.transaction_ids) + [int(i) for i in transaction_ids])

    def remove_transactions(self, invoice_id: int, transaction_ids: Sequence[int]) -> None:
        invoice = self.get(invoice_id)
        self._require_unpaid(invoice)
        drop = {int(i) for i in transaction_ids}
        self._relink(invoice, [i for i in invoice.transaction_ids if i not in drop])

    def recalculate_total(self, invoice_id: int) -> int:
        """Re-derive the total after linked transaction amounts were edited."""
        invoice = self.get(invoice_id)
        total = sum(t.jumlah for t in self._transactions.get_many(invoice.transaction_ids))
        if total != invoice.total_amount:
            self._invoices.set_transactions(invoice.invoice_id, transaction_ids=invoice.transaction_ids, total_amount=total)
        return total

    def mark_paid(
        self,
        invoice_id: int,
        *,
        payment_method: str,
        payment_date: Optional[date] = None,
        payment_ref: Optional[str] = None,
    ) -> None:
        invoice = self.get(invoice_id)
        self._require_unpaid(invoice)
        method = require_non_empty(payment_method, "Metode pembayaran")
        pelunasan = Pelunasan.TF if method == TRANSFER_METHOD else Pelunasan.CASH

        ok = self._invoices.mark_paid(
            invoice.invoice_id,
            payment_date=payment_date or self._clock().date(),
            payment_method=method,
            payment_ref=optional_str(payment_ref),
            pelunasan=pelunasan,
        )
        if not ok:
            raise NotFoundError("Invoice tidak ditemukan")
        logger.info(f"Invoice {invoice.invoice_number} paid via {method}; {len(invoice.transaction_ids)} STT -> {pelunasan.value}")

    def cancel_invoice(self, invoice_id: int) -> None:
        invoice = self.get(invoice_id)
        if invoice.status == InvoiceStatus.PAID:
            raise ValidationError("Invoice lunas tidak bisa dibatalkan")
        self._invoices.set_status(invoice.invoice_id, InvoiceStatus.CANCELLED)
        logger.info(f"Invoice {invoice.invoice_number} cancelled")

    def delete_invoice(self, invoice_id: int) -> None:
        if not self._invoices.delete(int(invoice_id)):
            raise NotFoundError("Invoice tidak ditemukan")
        logger.info(f"Invoice {invoice_id} deleted")

    def receivables_summary(self, *, today: Optional[date] = None) -> ReceivablesSummary:
        today = today or self._clock().date()
        invoices = self._invoices.list_invoices()
        unpaid = [i for i in invoices if i.status == InvoiceStatus.UNPAID]
        overdue = [i for i in unpaid if i.is_overdue(today)]
        return ReceivablesSummary(
            outstanding_count=len(unpaid),
            outstanding_amount=sum(i.total_amount for i in unpaid),
            overdue_count=len(overdue),
            overdue_amount=sum(i.total_amount for i in overdue),
            paid_amount=sum(i.total_amount for i in invoices if i.status == InvoiceStatus.PAID),
        )
