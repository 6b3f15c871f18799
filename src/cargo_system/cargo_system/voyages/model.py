from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date, datetime
from typing import Optional

from ..core.enums import ExpenseCategory, VoyageStatus


@dataclass(frozen=True)
class Voyage:
    """Satu pemberangkatan (kapal/truk) yang membawa sejumlah STT."""

    voyage_id: int
    voyage_number: str
    name: str
    departure_date: date
    status: VoyageStatus
    route: Optional[str] = None
    ship_name: Optional[str] = None
    arrival_date: Optional[date] = None
    vehicle_numbers: tuple[str, ...] = ()
    transaction_ids: tuple[int, ...] = ()
    notes: Optional[str] = None
    created_at: Optional[datetime] = None


@dataclass(frozen=True)
class VoyageSummary:
    voyage_id: int
    transaction_count: int
    total_revenue: int
    total_expenses: int
    profit: int
    expenses_by_category: dict[ExpenseCategory, int] = field(default_factory=dict)
