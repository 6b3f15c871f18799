from __future__ import annotations

from datetime import date
from typing import Optional, Protocol, Sequence

from ..core.enums import VoyageStatus
from .model import Voyage


class VoyageRepository(Protocol):
    def list_voyages(self, *, status: Optional[VoyageStatus] = None) -> Sequence[Voyage]:
        raise NotImplementedError

    def get_by_id(self, voyage_id: int) -> Optional[Voyage]:
        raise NotImplementedError

    def create(
        self,
        *,
        voyage_number: str,
        name: str,
        departure_date: date,
        arrival_date: Optional[date],
        route: Optional[str],
        ship_name: Optional[str],
        vehicle_numbers: Sequence[str],
        status: VoyageStatus,
        notes: Optional[str],
    ) -> int:
        raise NotImplementedError

    def update(
        self,
        *,
        voyage_id: int,
        name: str,
        departure_date: date,
        arrival_date: Optional[date],
        route: Optional[str],
        ship_name: Optional[str],
        vehicle_numbers: Sequence[str],
        status: VoyageStatus,
        notes: Optional[str],
    ) -> bool:
        raise NotImplementedError

    def set_status(self, voyage_id: int, status: VoyageStatus) -> bool:
        raise NotImplementedError

    def set_transactions(self, voyage_id: int, transaction_ids: Sequence[int]) -> bool:
        raise NotImplementedError

    def delete_with_expenses(self, voyage_id: int) -> tuple[bool, int]:
        """Delete the voyage and its expenses together; returns (deleted, expenses removed)."""

        raise NotImplementedError
