from __future__ import annotations

from datetime import date

import pytest

from src.cargo_system.cargo_system.core.enums import FleetStatus, ServiceType
from src.cargo_system.cargo_system.core.exceptions import NotFoundError, ValidationError
from src.cargo_system.cargo_system.fleet.model import MaintenanceLog, Vehicle
from src.cargo_system.cargo_system.fleet.mysql_fleet_repository import MySQLFleetRepository
from src.cargo_system.cargo_system.fleet.service import FleetService


class InMemoryFleet:
    def __init__(self):
        self.vehicles = {}
        self.maintenance: dict[int, MaintenanceLog] = {}
        # expense_id -> (amount, description)
        self.expenses: dict[int, tuple[int, str]] = {}

    def list_vehicles(self):
        return list(self.vehicles.values())

    def get_vehicle(self, vehicle_id):
        return self.vehicles.get(vehicle_id)

    def get_by_plate(self, plate_number):
        return next((v for v in self.vehicles.values() if v.plate_number == plate_number), None)

    def create_vehicle(self, *, plate_number, vehicle_type, status, driver_id, notes):
        vehicle_id = len(self.vehicles) + 1
        self.vehicles[vehicle_id] = Vehicle(vehicle_id, plate_number, vehicle_type, status, driver_id, notes)
        return vehicle_id

    def update_vehicle(self, *, vehicle_id, plate_number, vehicle_type, status, driver_id, notes):
        self.vehicles[vehicle_id] = Vehicle(vehicle_id, plate_number, vehicle_type, status, driver_id, notes)
        return True

    def delete_vehicle(self, vehicle_id):
        return self.vehicles.pop(vehicle_id, None) is not None

    def create_maintenance(self, *, vehicle_id, service_date, service_type, cost, description, odometer, expense_description):
        expense_id = len(self.expenses) + 1
        self.expenses[expense_id] = (cost, expense_description)
        log_id = len(self.maintenance) + 1
        self.maintenance[log_id] = MaintenanceLog(
            log_id, vehicle_id, service_date, service_type, cost, description, odometer, expense_id
        )
        return log_id, expense_id

    def get_maintenance(self, log_id):
        return self.maintenance.get(log_id)

    def update_maintenance(self, *, log_id, vehicle_id, service_date, service_type, cost, description, odometer, expense_description):
        expense_id = self.maintenance[log_id].expense_id
        self.maintenance[log_id] = MaintenanceLog(
            log_id, vehicle_id, service_date, service_type, cost, description, odometer, expense_id
        )
        self.expenses[expense_id] = (cost, expense_description)
        return True

    def delete_maintenance(self, log_id):
        log = self.maintenance.pop(log_id, None)
        if log is None:
            return False
        self.expenses.pop(log.expense_id, None)
        return True


@pytest.fixture
def fleet():
    return InMemoryFleet()


def test_plate_is_uppercased_and_unique(fleet):
    service = FleetService(fleet)
    vehicle_id = service.create_vehicle(plate_number="l 9021 uk", vehicle_type="Truk Engkel")

    assert fleet.vehicles[vehicle_id].plate_number == "L 9021 UK"
    assert fleet.vehicles[vehicle_id].status == FleetStatus.AVAILABLE
    with pytest.raises(ValidationError):
        service.create_vehicle(plate_number="L 9021 UK", vehicle_type="Pickup")

    service.update_vehicle(vehicle_id, plate_number="L 9021 UK", vehicle_type="Truk Engkel", status=FleetStatus.ON_TRIP)
    assert fleet.vehicles[vehicle_id].status == FleetStatus.ON_TRIP


def test_maintenance_is_booked_as_expense(fleet):
    service = FleetService(fleet)
    vehicle_id = service.create_vehicle(plate_number="L 9021 UK", vehicle_type="Truk Engkel")

    log_id, expense_id = service.log_maintenance(
        vehicle_id,
        service_date=date(2026, 1, 15),
        service_type=ServiceType.GANTI_OLI,
        cost=450_000,
        description="Oli mesin",
    )

    assert (log_id, expense_id) == (1, 1)
    assert fleet.expenses == {1: (450_000, "Ganti Oli - L 9021 UK: Oli mesin")}


def test_maintenance_for_unknown_vehicle(fleet):
    with pytest.raises(NotFoundError):
        FleetService(fleet).log_maintenance(9, service_date=date(2026, 1, 15), service_type=ServiceType.BAN, cost=1)


def _logged(service):
    vehicle_id = service.create_vehicle(plate_number="L 9021 UK", vehicle_type="Truk Engkel")
    log_id, _ = service.log_maintenance(
        vehicle_id,
        service_date=date(2026, 1, 15),
        service_type=ServiceType.GANTI_OLI,
        cost=450_000,
    )
    return vehicle_id, log_id


def test_editing_maintenance_keeps_its_expense_in_step(fleet):
    service = FleetService(fleet)
    _, log_id = _logged(service)

    service.update_maintenance(
        log_id,
        service_date=date(2026, 1, 16),
        service_type=ServiceType.BAN,
        cost=1_200_000,
        description="Ganti 2 ban belakang",
        odometer=80_500,
    )

    log = fleet.maintenance[log_id]
    assert (log.service_type, log.cost, log.odometer) == (ServiceType.BAN, 1_200_000, 80_500)
    assert fleet.expenses == {1: (1_200_000, "Ban - L 9021 UK: Ganti 2 ban belakang")}


def test_editing_maintenance_rejects_negative_cost(fleet):
    service = FleetService(fleet)
    _, log_id = _logged(service)

    with pytest.raises(ValidationError):
        service.update_maintenance(log_id, service_date=date(2026, 1, 16), service_type=ServiceType.BAN, cost=-1)
    assert fleet.expenses[1][0] == 450_000


def test_deleting_maintenance_removes_its_expense(fleet):
    service = FleetService(fleet)
    _, log_id = _logged(service)
    other_vehicle = service.create_vehicle(plate_number="B 1234 CD", vehicle_type="Pickup")
    service.log_maintenance(other_vehicle, service_date=date(2026, 1, 18), service_type=ServiceType.BAN, cost=300_000)

    service.delete_maintenance(log_id)

    assert list(fleet.maintenance) == [2]
    assert fleet.expenses == {2: (300_000, "Ban - B 1234 CD")}
    with pytest.raises(NotFoundError):
        service.delete_maintenance(log_id)


class FakeCursor:
    def __init__(self, conn):
        self._conn = conn
        self.rowcount = 1

    def execute(self, sql, params=None):
        self._conn.statements.append((" ".join(sql.split()), params))

    def fetchone(self):
        return {"expense_id": 42}

    def close(self):
        pass


class FakeConnection:
    def __init__(self):
        self.statements = []
        self.committed = False

    def cursor(self, dictionary=True):
        return FakeCursor(self)

    def commit(self):
        self.committed = True

    def rollback(self):
        pass

    def close(self):
        pass


class FakeFactory:
    def __init__(self, conn):
        self._conn = conn

    def connect(self):
        return self._conn


def test_mysql_delete_maintenance_takes_linked_expense_in_one_transaction():
    conn = FakeConnection()
    assert MySQLFleetRepository(FakeFactory(conn)).delete_maintenance(7)

    sqls = [s for s, _ in conn.statements]
    assert sqls[0].endswith("FOR UPDATE")
    assert sqls[1].startswith("DELETE FROM maintenance_logs")
    assert conn.statements[2] == ("DELETE FROM expenses WHERE expense_id=%s", (42,))
    assert conn.committed


def test_mysql_update_maintenance_syncs_expense_amount():
    conn = FakeConnection()
    MySQLFleetRepository(FakeFactory(conn)).update_maintenance(
        log_id=7,
        vehicle_id=1,
        service_date=date(2026, 1, 16),
        service_type=ServiceType.BAN,
        cost=1_200_000,
        description=None,
        odometer=None,
        expense_description="Ban - L 9021 UK",
    )

    sql, params = conn.statements[-1]
    assert sql.startswith("UPDATE expenses SET expense_date=%s, amount=%s")
    assert params == (date(2026, 1, 16), 1_200_000, "Ban - L 9021 UK", 1, 42)
