from __future__ import annotations

from datetime import date
from typing import Optional, Protocol, Sequence

from ..core.enums import FleetStatus, ServiceType
from .model import MaintenanceLog, Vehicle


class FleetRepository(Protocol):
    def list_vehicles(self) -> Sequence[Vehicle]:
        raise NotImplementedError

    def get_vehicle(self, vehicle_id: int) -> Optional[Vehicle]:
        raise NotImplementedError

    def get_by_plate(self, plate_number: str) -> Optional[Vehicle]:
        raise NotImplementedError

    def create_vehicle(
        self,
        *,
        plate_number: str,
        vehicle_type: str,
        status: FleetStatus,
        driver_id: Optional[str],
        notes: Optional[str],
    ) -> int:
        raise NotImplementedError

    def update_vehicle(
        self,
        *,
        vehicle_id: int,
        plate_number: str,
        vehicle_type: str,
        status: FleetStatus,
        driver_id: Optional[str],
        notes: Optional[str],
    ) -> bool:
        raise NotImplementedError

    def delete_vehicle(self, vehicle_id: int) -> bool:
        raise NotImplementedError

    def list_maintenance(self, *, vehicle_id: Optional[int] = None) -> Sequence[MaintenanceLog]:
        raise NotImplementedError

    def create_maintenance(
        self,
        *,
        vehicle_id: int,
        service_date: date,
        service_type: ServiceType,
        cost: int,
        description: Optional[str],
        odometer: Optional[int],
        expense_description: str,
    ) -> tuple[int, int]:
        """Insert the log and its maintenance expense together; returns (log_id, expense_id)."""

        raise NotImplementedError

    def get_maintenance(self, log_id: int) -> Optional[MaintenanceLog]:
        raise NotImplementedError

    def update_maintenance(
        self,
        *,
        log_id: int,
        vehicle_id: int,
        service_date: date,
        service_type: ServiceType,
        cost: int,
        description: Optional[str],
        odometer: Optional[int],
        expense_description: str,
    ) -> bool:
        """Rewrite the log and keep its linked expense (date, amount, description) in step."""

        raise NotImplementedError

    def delete_maintenance(self, log_id: int) -> bool:
        """Remove the log together with its linked expense."""

        raise NotImplementedError
