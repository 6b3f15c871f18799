from __future__ import annotations

from datetime import date
from typing import Optional, Sequence

from ..common.validators import optional_str, require_non_negative
from ..core.enums import ExpenseCategory, ExpenseType
from ..core.exceptions import NotFoundError, ValidationError
from ..core.logger import logger
from ..voyages.repository import VoyageRepository
from .model import Expense, parse_category, totals_by_category
from .repository import ExpenseRepository


class ExpenseService:
    def __init__(self, expenses: ExpenseRepository, voyages: Optional[VoyageRepository] = None):
        self._expenses = expenses
        self._voyages = voyages

    def _check_links(self, expense_type: ExpenseType, voyage_id: Optional[int]) -> Optional[int]:
        if ExpenseType(expense_type) == ExpenseType.VOYAGE:
            if not voyage_id:
                raise ValidationError("Biaya voyage wajib memilih voyage")
            if self._voyages and not self._voyages.get_by_id(int(voyage_id)):
                raise NotFoundError("Voyage tidak ditemukan")
            return int(voyage_id)
        return int(voyage_id) if voyage_id else None

    def get(self, expense_id: int) -> Expense:
        expense = self._expenses.get_by_id(int(expense_id))
        if not expense:
            raise NotFoundError("Biaya tidak ditemukan")
        return expense

    def list_expenses(
        self,
        *,
        voyage_id: Optional[int] = None,
        expense_type: Optional[ExpenseType] = None,
        start_date: Optional[date] = None,
        end_date: Optional[date] = None,
    ) -> Sequence[Expense]:
        return self._expenses.list_expenses(
            voyage_id=voyage_id,
            expense_type=expense_type,
            start_date=start_date,
            end_date=end_date,
        )

    def create_expense(
        self,
        *,
        expense_date: date,
        category: ExpenseCategory | str,
        amount: int,
        expense_type: ExpenseType = ExpenseType.GENERAL,
        description: Optional[str] = None,
        voyage_id: Optional[int] = None,
        vehicle_id: Optional[int] = None,
        receipt_number: Optional[str] = None,
    ) -> int:
        expense_type = ExpenseType(expense_type)
        expense_id = self._expenses.create(
            expense_date=expense_date,
            category=parse_category(category),
            amount=require_non_negative(amount, "Nominal"),
            expense_type=expense_type,
            description=optional_str(description),
            voyage_id=self._check_links(expense_type, voyage_id),
            vehicle_id=int(vehicle_id) if vehicle_id else None,
            receipt_number=optional_str(receipt_number),
        )
        logger.info(f"Expense {expense_id} created ({expense_type.value}, {amount})")
        return expense_id

    def update_expense(
        self,
        expense_id: int,
        *,
        expense_date: date,
        category: ExpenseCategory | str,
        amount: int,
        expense_type: ExpenseType = ExpenseType.GENERAL,
        description: Optional[str] = None,
        voyage_id: Optional[int] = None,
        vehicle_id: Optional[int] = None,
        receipt_number: Optional[str] = None,
    ) -> None:
        self.get(expense_id)
        expense_type = ExpenseType(expense_type)
        self._expenses.update(
            expense_id=int(expense_id),
            expense_date=expense_date,
            category=parse_category(category),
            amount=require_non_negative(amount, "Nominal"),
            expense_type=expense_type,
            description=optional_str(description),
            voyage_id=self._check_links(expense_type, voyage_id),
            vehicle_id=int(vehicle_id) if vehicle_id else None,
            receipt_number=optional_str(receipt_number),
        )

    def delete_expense(self, expense_id: int) -> None:
        if not self._expenses.delete(int(expense_id)):
            raise NotFoundError("Biaya tidak ditemukan")

    def totals_by_category(self, *, voyage_id: Optional[int] = None) -> dict[ExpenseCategory, int]:
        return totals_by_category(self._expenses.list_expenses(voyage_id=voyage_id))

    def cleanup_orphans(self) -> int:
        removed = self._expenses.delete_orphans()
        if removed:
            logger.warning(f"Removed {removed} orphan voyage expenses")
        return removed
