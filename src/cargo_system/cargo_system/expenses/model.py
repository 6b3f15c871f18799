from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime
from typing import Iterable, Optional

from ..core.enums import ExpenseCategory, ExpenseType

EXPENSE_CATEGORY_LABELS: dict[ExpenseCategory, str] = {
    ExpenseCategory.TIKET: "Tiket Kapal",
    ExpenseCategory.OPERASIONAL_SURABAYA: "Operasional Surabaya",
    ExpenseCategory.OPERASIONAL_MAKASSAR: "Operasional Makassar",
    ExpenseCategory.TRANSIT: "Transit",
    ExpenseCategory.SEWA_MOBIL: "Sewa Mobil",
    ExpenseCategory.GAJI_SOPIR: "Gaji Sopir",
    ExpenseCategory.GAJI_KARYAWAN: "Gaji Karyawan",
    ExpenseCategory.LISTRIK_AIR_INTERNET: "Listrik, Air & Internet",
    ExpenseCategory.SEWA_KANTOR: "Sewa Kantor",
    ExpenseCategory.MAINTENANCE: "Maintenance Armada",
    ExpenseCategory.LAINNYA: "Lainnya",
}


def parse_category(value: str | ExpenseCategory) -> ExpenseCategory:
    """Unknown or legacy category values are treated as 'lainnya'."""
    try:
        return ExpenseCategory(value)
    except ValueError:
        return ExpenseCategory.LAINNYA


@dataclass(frozen=True)
class Expense:
    expense_id: int
    expense_date: date
    category: ExpenseCategory
    amount: int
    expense_type: ExpenseType
    description: Optional[str] = None
    voyage_id: Optional[int] = None
    vehicle_id: Optional[int] = None
    receipt_number: Optional[str] = None
    created_at: Optional[datetime] = None


def totals_by_category(expenses: Iterable[Expense]) -> dict[ExpenseCategory, int]:
    totals = {c: 0 for c in ExpenseCategory}
    for e in expenses:
        totals[parse_category(e.category)] += int(e.amount)
    return totals
