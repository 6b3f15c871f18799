from __future__ import annotations

from flask import Flask, request

from ..common.web import handle_errors, json_ok, permission_required, request_data
from ..container import Container


def _fields(data: dict) -> dict:
    fields = {k: data.get(k) for k in ("phone", "address", "city", "email", "notes")}
    fields["name"] = data.get("name", "")
    return fields


def register(app: Flask, container: Container) -> None:
    @app.route("/api/clients", methods=["GET"], endpoint="list_clients")
    @permission_required("can_manage_clients")
    @handle_errors("Gagal memuat pelanggan")
    def list_clients():
        q = request.args.get("q")
        if q:
            return json_ok(container.client_service.search(q))
        return json_ok(container.client_service.list_clients())

    @app.route("/api/clients/<int:client_id>", methods=["GET"], endpoint="get_client")
    @permission_required("can_manage_clients")
    @handle_errors("Gagal memuat pelanggan")
    def get_client(client_id: int):
        return json_ok(container.client_service.get(client_id))

    @app.route("/api/clients", methods=["POST"], endpoint="create_client")
    @permission_required("can_manage_clients")
    @handle_errors("Gagal menyimpan data")
    def create_client():
        client_id = container.client_service.create_client(**_fields(request_data()))
        return json_ok({"client_id": client_id}, status=201, message="Pelanggan berhasil ditambahkan")

    @app.route("/api/clients/<int:client_id>", methods=["PUT"], endpoint="update_client")
    @permission_required("can_manage_clients")
    @handle_errors("Gagal menyimpan data")
    def update_client(client_id: int):
        container.client_service.update_client(client_id, **_fields(request_data()))
        return json_ok(message="Data pelanggan diperbarui")

    @app.route("/api/clients/<int:client_id>", methods=["DELETE"], endpoint="delete_client")
    @permission_required("can_manage_clients")
    @handle_errors("Gagal menghapus data")
    def delete_client(client_id: int):
        container.client_service.delete_client(client_id)
        return json_ok(message="Pelanggan dihapus")
