from __future__ import annotations

from flask import Flask, request

from ..common.datetime_utils import parse_iso_date
from ..common.web import as_int, handle_errors, json_ok, parse_enum, permission_required, request_data
from ..container import Container
from ..core.enums import FleetStatus, ServiceType


def _vehicle_fields(data: dict) -> dict:
    return dict(
        plate_number=data.get("plate_number", ""),
        vehicle_type=data.get("vehicle_type", ""),
        status=parse_enum(FleetStatus, data.get("status"), "Status", FleetStatus.AVAILABLE),
        driver_id=data.get("driver_id") or None,
        notes=data.get("notes"),
    )


def _maintenance_fields(data: dict) -> dict:
    return dict(
        service_date=parse_iso_date(data.get("date") or data.get("service_date") or ""),
        service_type=parse_enum(ServiceType, data.get("service_type"), "Jenis servis"),
        cost=as_int(data.get("cost"), "Biaya", 0),
        description=data.get("description"),
        odometer=as_int(data.get("odometer"), "Odometer"),
    )


def register(app: Flask, container: Container) -> None:
    @app.route("/api/fleet", methods=["GET"], endpoint="list_vehicles")
    @permission_required("can_manage_fleet")
    @handle_errors("Gagal memuat armada")
    def list_vehicles():
        return json_ok(container.fleet_service.list_vehicles())

    @app.route("/api/fleet/<int:vehicle_id>", methods=["GET"], endpoint="get_vehicle")
    @permission_required("can_manage_fleet")
    @handle_errors("Gagal memuat armada")
    def get_vehicle(vehicle_id: int):
        return json_ok(container.fleet_service.get_vehicle(vehicle_id))

    @app.route("/api/fleet", methods=["POST"], endpoint="create_vehicle")
    @permission_required("can_manage_fleet")
    @handle_errors("Gagal menyimpan kendaraan")
    def create_vehicle():
        vehicle_id = container.fleet_service.create_vehicle(**_vehicle_fields(request_data()))
        return json_ok({"vehicle_id": vehicle_id}, status=201, message="Kendaraan ditambahkan")

    @app.route("/api/fleet/<int:vehicle_id>", methods=["PUT"], endpoint="update_vehicle")
    @permission_required("can_manage_fleet")
    @handle_errors("Gagal menyimpan kendaraan")
    def update_vehicle(vehicle_id: int):
        container.fleet_service.update_vehicle(vehicle_id, **_vehicle_fields(request_data()))
        return json_ok(message="Kendaraan diperbarui")

    @app.route("/api/fleet/<int:vehicle_id>", methods=["DELETE"], endpoint="delete_vehicle")
    @permission_required("can_manage_fleet")
    @handle_errors("Gagal menghapus kendaraan")
    def delete_vehicle(vehicle_id: int):
        container.fleet_service.delete_vehicle(vehicle_id)
        return json_ok(message="Kendaraan dihapus")

    @app.route("/api/fleet/maintenance", methods=["GET"], endpoint="list_maintenance")
    @permission_required("can_manage_fleet")
    @handle_errors("Gagal memuat riwayat servis")
    def list_maintenance():
        vehicle_id = as_int(request.args.get("vehicle_id"), "Kendaraan")
        return json_ok(container.fleet_service.list_maintenance(vehicle_id=vehicle_id))

    @app.route("/api/fleet/<int:vehicle_id>/maintenance", methods=["POST"], endpoint="log_maintenance")
    @permission_required("can_manage_fleet")
    @handle_errors("Gagal mencatat servis")
    def log_maintenance(vehicle_id: int):
        log_id, expense_id = container.fleet_service.log_maintenance(vehicle_id, **_maintenance_fields(request_data()))
        return json_ok({"log_id": log_id, "expense_id": expense_id}, status=201, message="Servis dicatat")

    @app.route("/api/fleet/maintenance/<int:log_id>", methods=["GET"], endpoint="get_maintenance")
    @permission_required("can_manage_fleet")
    @handle_errors("Gagal memuat riwayat servis")
    def get_maintenance(log_id: int):
        return json_ok(container.fleet_service.get_maintenance(log_id))

    @app.route("/api/fleet/maintenance/<int:log_id>", methods=["PUT"], endpoint="update_maintenance")
    @permission_required("can_manage_fleet")
    @handle_errors("Gagal menyimpan servis")
    def update_maintenance(log_id: int):
        data = request_data()
        container.fleet_service.update_maintenance(
            log_id,
            vehicle_id=as_int(data.get("vehicle_id"), "Kendaraan"),
            **_maintenance_fields(data),
        )
        return json_ok(message="Servis diperbarui")

    @app.route("/api/fleet/maintenance/<int:log_id>", methods=["DELETE"], endpoint="delete_maintenance")
    @permission_required("can_manage_fleet")
    @handle_errors("Gagal menghapus servis")
    def delete_maintenance(log_id: int):
        container.fleet_service.delete_maintenance(log_id)
        return json_ok(message="Servis dan biayanya dihapus")
