from __future__ import annotations

from datetime import date
from typing import Optional, Sequence

from ..common.validators import optional_str, require_non_empty
from ..core.enums import TransactionStatus, VoyageStatus
from ..core.exceptions import NotFoundError, ValidationError
from ..core.logger import logger
from ..counters.service import CounterService
from ..expenses.model import totals_by_category
from ..expenses.repository import ExpenseRepository
from ..transactions.repository import TransactionRepository
from .model import Voyage, VoyageSummary
from .repository import VoyageRepository


def _clean_vehicle_numbers(vehicle_numbers: Optional[Sequence[str]]) -> list[str]:
    out: list[str] = []
    for v in vehicle_numbers or []:
        v = (v or "").strip().upper()
        if v and v not in out:
            out.append(v)
    return out


class VoyageService:
    def __init__(
        self,
        voyages: VoyageRepository,
        transactions: TransactionRepository,
        expenses: ExpenseRepository,
        counters: CounterService,
    ):
        self._voyages = voyages
        self._transactions = transactions
        self._expenses = expenses
        self._counters = counters

    def get(self, voyage_id: int) -> Voyage:
        voyage = self._voyages.get_by_id(int(voyage_id))
        if not voyage:
            raise NotFoundError("Voyage tidak ditemukan")
        return voyage

    def list_voyages(self, *, status: Optional[VoyageStatus] = None) -> Sequence[Voyage]:
        return self._voyages.list_voyages(status=status)

    @staticmethod
    def _check_dates(departure_date: date, arrival_date: Optional[date]) -> None:
        if arrival_date and arrival_date < departure_date:
            raise ValidationError("Tanggal tiba tidak boleh sebelum tanggal berangkat")

    def create_voyage(
        self,
        *,
        name: str,
        departure_date: date,
        arrival_date: Optional[date] = None,
        route: Optional[str] = None,
        ship_name: Optional[str] = None,
        vehicle_numbers: Optional[Sequence[str]] = None,
        status: VoyageStatus = VoyageStatus.PLANNED,
        notes: Optional[str] = None,
    ) -> int:
        name = require_non_empty(name, "Nama voyage")
        self._check_dates(departure_date, arrival_date)

        number = self._counters.next_voyage_number()
        voyage_id = self._voyages.create(
            voyage_number=number,
            name=name,
            departure_date=departure_date,
            arrival_date=arrival_date,
            route=optional_str(route),
            ship_name=optional_str(ship_name),
            vehicle_numbers=_clean_vehicle_numbers(vehicle_numbers),
            status=VoyageStatus(status),
            notes=optional_str(notes),
        )
        logger.info(f"Voyage {number} created ({name})")
        return voyage_id

    def update_voyage(
        self,
        voyage_id: int,
        *,
        name: str,
        departure_date: date,
        arrival_date: Optional[date] = None,
        route: Optional[str] = None,
        ship_name: Optional[str] = None,
        vehicle_numbers: Optional[Sequence[str]] = None,
        status: Optional[VoyageStatus] = None,
        notes: Optional[str] = None,
    ) -> None:
        current = self.get(voyage_id)
        self._check_dates(departure_date, arrival_date)
        self._voyages.update(
            voyage_id=current.voyage_id,
            name=require_non_empty(name, "Nama voyage"),
            departure_date=departure_date,
            arrival_date=arrival_date,
            route=optional_str(route),
            ship_name=optional_str(ship_name),
            vehicle_numbers=_clean_vehicle_numbers(vehicle_numbers),
            status=VoyageStatus(status) if status else current.status,
            notes=optional_str(notes),
        )

    def update_status(self, voyage_id: int, status: VoyageStatus) -> None:
        self.get(voyage_id)
        self._voyages.set_status(int(voyage_id), VoyageStatus(status))

    def delete_voyage(self, voyage_id: int) -> int:
        """Delete a voyage together with its expenses; returns how many expenses went with it."""
        deleted, removed = self._voyages.delete_with_expenses(int(voyage_id))
        if not deleted:
            raise NotFoundError("Voyage tidak ditemukan")
        logger.info(f"Voyage {voyage_id} deleted with {removed} expenses")
        return removed

    def assign_transactions(self, voyage_id: int, transaction_ids: Sequence[int]) -> None:
        voyage = self.get(voyage_id)
        new_ids = [int(i) for i in transaction_ids]
        found = {t.transaction_id: t for t in self._transactions.get_many(new_ids)}
        missing = [i for i in new_ids if i not in found]
        if missing:
            raise NotFoundError(f"Transaksi tidak ditemukan: {', '.join(str(i) for i in missing)}")
        cancelled = [found[i].no_stt for i in new_ids if found[i].status == TransactionStatus.DIBATALKAN]
        if cancelled:
            raise ValidationError(f"Transaksi dibatalkan tidak bisa dimuat: {', '.join(cancelled)}")

        merged = list(dict.fromkeys(list(voyage.transaction_ids) + new_ids))
        self._voyages.set_transactions(voyage.voyage_id, merged)

    def remove_transactions(self, voyage_id: int, transaction_ids: Sequence[int]) -> None:
        voyage = self.get(voyage_id)
        drop = {int(i) for i in transaction_ids}
        self._voyages.set_transactions(voyage.voyage_id, [i for i in voyage.transaction_ids if i not in drop])

    def summarize(self, voyage: Voyage) -> VoyageSummary:
        transactions = [
            t for t in self._transactions.get_many(voyage.transaction_ids) if t.status != TransactionStatus.DIBATALKAN
        ]
        expenses = self._expenses.list_expenses(voyage_id=voyage.voyage_id)
        revenue = sum(t.jumlah for t in transactions)
        total_expenses = sum(e.amount for e in expenses)
        return VoyageSummary(
            voyage_id=voyage.voyage_id,
            transaction_count=len(transactions),
            total_revenue=revenue,
            total_expenses=total_expenses,
            profit=revenue - total_expenses,
            expenses_by_category=totals_by_category(expenses),
        )

    def get_summary(self, voyage_id: int) -> VoyageSummary:
        return self.summarize(self.get(voyage_id))
