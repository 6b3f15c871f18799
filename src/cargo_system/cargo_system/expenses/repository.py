from __future__ import annotations

from datetime import date
from typing import Optional, Protocol, Sequence

from ..core.enums import ExpenseCategory, ExpenseType
from .model import Expense


class ExpenseRepository(Protocol):
    def list_expenses(
        self,
        *,
        voyage_id: Optional[int] = None,
        expense_type: Optional[ExpenseType] = None,
        start_date: Optional[date] = None,
        end_date: Optional[date] = None,
    ) -> Sequence[Expense]:
        raise NotImplementedError

    def get_by_id(self, expense_id: int) -> Optional[Expense]:
        raise NotImplementedError

    def create(
        self,
        *,
        expense_date: date,
        category: ExpenseCategory,
        amount: int,
        expense_type: ExpenseType,
        description: Optional[str],
        voyage_id: Optional[int],
        vehicle_id: Optional[int],
        receipt_number: Optional[str],
    ) -> int:
        raise NotImplementedError

    def update(
        self,
        *,
        expense_id: int,
        expense_date: date,
        category: ExpenseCategory,
        amount: int,
        expense_type: ExpenseType,
        description: Optional[str],
        voyage_id: Optional[int],
        vehicle_id: Optional[int],
        receipt_number: Optional[str],
    ) -> bool:
        raise NotImplementedError

    def delete(self, expense_id: int) -> bool:
        raise NotImplementedError

    def delete_orphans(self) -> int:
        """Delete expenses pointing at voyages that no longer exist; returns the count."""

        raise NotImplementedError
