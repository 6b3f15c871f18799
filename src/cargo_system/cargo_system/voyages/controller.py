from __future__ import annotations

from flask import Flask, request

from ..common.datetime_utils import parse_iso_date, parse_optional_date
from ..common.web import as_int, handle_errors, json_ok, parse_enum, permission_required, request_data
from ..container import Container
from ..core.enums import VoyageStatus


def _fields(data: dict) -> dict:
    status = data.get("status")
    return dict(
        name=data.get("name", ""),
        departure_date=parse_iso_date(data.get("departure_date", "")),
        arrival_date=parse_optional_date(data.get("arrival_date")),
        route=data.get("route"),
        ship_name=data.get("ship_name"),
        vehicle_numbers=data.get("vehicle_numbers") or [],
        status=parse_enum(VoyageStatus, status, "Status") if status else None,
        notes=data.get("notes"),
    )


def _ids(data: dict) -> list[int]:
    return [as_int(i, "ID transaksi") for i in data.get("transaction_ids") or []]


def register(app: Flask, container: Container) -> None:
    @app.route("/api/voyages", methods=["GET"], endpoint="list_voyages")
    @permission_required("can_manage_voyages")
    @handle_errors("Gagal memuat voyage")
    def list_voyages():
        status = request.args.get("status")
        voyages = container.voyage_service.list_voyages(
            status=parse_enum(VoyageStatus, status, "Status") if status else None
        )
        return json_ok(voyages)

    @app.route("/api/voyages/<int:voyage_id>", methods=["GET"], endpoint="get_voyage")
    @permission_required("can_manage_voyages")
    @handle_errors("Gagal memuat voyage")
    def get_voyage(voyage_id: int):
        voyage = container.voyage_service.get(voyage_id)
        return json_ok({"voyage": voyage, "summary": container.voyage_service.summarize(voyage)})

    @app.route("/api/voyages", methods=["POST"], endpoint="create_voyage")
    @permission_required("can_manage_voyages")
    @handle_errors("Gagal menyimpan voyage")
    def create_voyage():
        fields = _fields(request_data())
        fields["status"] = fields["status"] or VoyageStatus.PLANNED
        voyage_id = container.voyage_service.create_voyage(**fields)
        return json_ok(container.voyage_service.get(voyage_id), status=201, message="Voyage berhasil dibuat")

    @app.route("/api/voyages/<int:voyage_id>", methods=["PUT"], endpoint="update_voyage")
    @permission_required("can_manage_voyages")
    @handle_errors("Gagal menyimpan voyage")
    def update_voyage(voyage_id: int):
        container.voyage_service.update_voyage(voyage_id, **_fields(request_data()))
        return json_ok(message="Voyage diperbarui")

    @app.route("/api/voyages/<int:voyage_id>/status", methods=["POST"], endpoint="update_voyage_status")
    @permission_required("can_manage_voyages")
    @handle_errors("Gagal mengubah status")
    def update_voyage_status(voyage_id: int):
        container.voyage_service.update_status(voyage_id, parse_enum(VoyageStatus, request_data().get("status"), "Status"))
        return json_ok(message="Status voyage diperbarui")

    @app.route("/api/voyages/<int:voyage_id>/transactions", methods=["POST"], endpoint="assign_voyage_transactions")
    @permission_required("can_manage_voyages")
    @handle_errors("Gagal menambah transaksi")
    def assign_voyage_transactions(voyage_id: int):
        container.voyage_service.assign_transactions(voyage_id, _ids(request_data()))
        return json_ok(container.voyage_service.get_summary(voyage_id))

    @app.route("/api/voyages/<int:voyage_id>/transactions", methods=["DELETE"], endpoint="remove_voyage_transactions")
    @permission_required("can_manage_voyages")
    @handle_errors("Gagal menghapus transaksi dari voyage")
    def remove_voyage_transactions(voyage_id: int):
        container.voyage_service.remove_transactions(voyage_id, _ids(request_data()))
        return json_ok(container.voyage_service.get_summary(voyage_id))

    @app.route("/api/voyages/<int:voyage_id>", methods=["DELETE"], endpoint="delete_voyage")
    @permission_required("can_manage_voyages")
    @handle_errors("Gagal menghapus voyage")
    def delete_voyage(voyage_id: int):
        removed = container.voyage_service.delete_voyage(voyage_id)
        return json_ok({"expenses_removed": removed}, message="Voyage dihapus")
