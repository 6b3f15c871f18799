from __future__ import annotations

from datetime import date
from typing import Optional, Sequence

from ..common.validators import optional_str, require_non_empty, require_non_negative
from ..core.enums import FleetStatus, ServiceType
from ..core.exceptions import NotFoundError, ValidationError
from ..core.logger import logger
from .model import MaintenanceLog, Vehicle
from .repository import FleetRepository


def _expense_description(service_type: ServiceType, plate_number: str, description: Optional[str]) -> str:
    text = f"{service_type.value} - {plate_number}"
    if description:
        text += f": {description}"
    return text


class FleetService:
    def __init__(self, fleet: FleetRepository):
        self._fleet = fleet

    def list_vehicles(self) -> Sequence[Vehicle]:
        return self._fleet.list_vehicles()

    def get_vehicle(self, vehicle_id: int) -> Vehicle:
        vehicle = self._fleet.get_vehicle(int(vehicle_id))
        if not vehicle:
            raise NotFoundError("Armada tidak ditemukan")
        return vehicle

    def _normalize_plate(self, plate_number: str, *, vehicle_id: Optional[int] = None) -> str:
        plate = require_non_empty(plate_number, "Nomor polisi").upper()
        existing = self._fleet.get_by_plate(plate)
        if existing and existing.vehicle_id != vehicle_id:
            raise ValidationError(f"Nomor polisi {plate} sudah terdaftar")
        return plate

    def create_vehicle(
        self,
        *,
        plate_number: str,
        vehicle_type: str,
        status: FleetStatus = FleetStatus.AVAILABLE,
        driver_id: Optional[str] = None,
        notes: Optional[str] = None,
    ) -> int:
        vehicle_id = self._fleet.create_vehicle(
            plate_number=self._normalize_plate(plate_number),
            vehicle_type=require_non_empty(vehicle_type, "Jenis kendaraan"),
            status=FleetStatus(status),
            driver_id=optional_str(driver_id),
            notes=optional_str(notes),
        )
        logger.info(f"Vehicle {vehicle_id} registered")
        return vehicle_id

    def update_vehicle(
        self,
        vehicle_id: int,
        *,
        plate_number: str,
        vehicle_type: str,
        status: FleetStatus,
        driver_id: Optional[str] = None,
        notes: Optional[str] = None,
    ) -> None:
        current = self.get_vehicle(vehicle_id)
        self._fleet.update_vehicle(
            vehicle_id=current.vehicle_id,
            plate_number=self._normalize_plate(plate_number, vehicle_id=current.vehicle_id),
            vehicle_type=require_non_empty(vehicle_type, "Jenis kendaraan"),
            status=FleetStatus(status),
            driver_id=optional_str(driver_id),
            notes=optional_str(notes),
        )

    def delete_vehicle(self, vehicle_id: int) -> None:
        if not self._fleet.delete_vehicle(int(vehicle_id)):
            raise NotFoundError("Armada tidak ditemukan")

    def list_maintenance(self, *, vehicle_id: Optional[int] = None) -> Sequence[MaintenanceLog]:
        return self._fleet.list_maintenance(vehicle_id=vehicle_id)

    def log_maintenance(
        self,
        vehicle_id: int,
        *,
        service_date: date,
        service_type: ServiceType,
        cost: int,
        description: Optional[str] = None,
        odometer: Optional[int] = None,
    ) -> tuple[int, int]:
        """Record a service and book its cost as a maintenance expense."""
        vehicle = self.get_vehicle(vehicle_id)
        service_type = ServiceType(service_type)
        cost = require_non_negative(cost, "Biaya servis")
        description = optional_str(description)

        log_id, expense_id = self._fleet.create_maintenance(
            vehicle_id=vehicle.vehicle_id,
            service_date=service_date,
            service_type=service_type,
            cost=cost,
            description=description,
            odometer=require_non_negative(odometer, "Odometer") if odometer is not None else None,
            expense_description=_expense_description(service_type, vehicle.plate_number, description),
        )
        logger.info(f"Maintenance {log_id} for {vehicle.plate_number} booked as expense {expense_id}")
        return log_id, expense_id

    def get_maintenance(self, log_id: int) -> MaintenanceLog:
        log = self._fleet.get_maintenance(int(log_id))
        if not log:
            raise NotFoundError("Catatan servis tidak ditemukan")
        return log

    def update_maintenance(
        self,
        log_id: int,
        *,
        service_date: date,
        service_type: ServiceType,
        cost: int,
        description: Optional[str] = None,
        odometer: Optional[int] = None,
        vehicle_id: Optional[int] = None,
    ) -> None:
        """Edit a logged service; vehicle_id moves it to another vehicle."""
        current = self.get_maintenance(log_id)
        vehicle = self.get_vehicle(vehicle_id if vehicle_id is not None else current.vehicle_id)
        service_type = ServiceType(service_type)
        description = optional_str(description)

        self._fleet.update_maintenance(
            log_id=current.log_id,
            vehicle_id=vehicle.vehicle_id,
            service_date=service_date,
            service_type=service_type,
            cost=require_non_negative(cost, "Biaya servis"),
            description=description,
            odometer=require_non_negative(odometer, "Odometer") if odometer is not None else None,
            expense_description=_expense_description(service_type, vehicle.plate_number, description),
        )
        logger.info(f"Maintenance {current.log_id} updated (expense {current.expense_id} synced)")

    def delete_maintenance(self, log_id: int) -> None:
        current = self.get_maintenance(log_id)
        if not self._fleet.delete_maintenance(current.log_id):
            raise NotFoundError("Catatan servis tidak ditemukan")
        logger.info(f"Maintenance {current.log_id} deleted with expense {current.expense_id}")
