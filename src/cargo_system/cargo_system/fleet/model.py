from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime
from typing import Optional

from ..core.enums import FleetStatus, ServiceType


@dataclass(frozen=True)
class Vehicle:
    vehicle_id: int
    plate_number: str
    vehicle_type: str
    status: FleetStatus
    driver_id: Optional[str] = None
    notes: Optional[str] = None
    created_at: Optional[datetime] = None


@dataclass(frozen=True)
class MaintenanceLog:
    """Catatan servis armada; setiap log punya satu biaya (expense) terkait."""

    log_id: int
    vehicle_id: int
    service_date: date
    service_type: ServiceType
    cost: int
    description: Optional[str] = None
    odometer: Optional[int] = None
    expense_id: Optional[int] = None
