from __future__ import annotations

from flask import Flask, request

from ..common.web import as_bool, as_int, handle_errors, json_ok, request_data, role_required
from ..container import Container
from ..core.enums import Role


def register(app: Flask, container: Container) -> None:
    @app.route("/api/admin/counters", methods=["GET"], endpoint="list_counters")
    @role_required(Role.ADMIN)
    @handle_errors("Gagal memuat counter")
    def list_counters():
        return json_ok(container.counter_service.list_counters())

    @app.route("/api/admin/counters/preview", methods=["GET"], endpoint="preview_counters")
    @role_required(Role.ADMIN)
    @handle_errors("Gagal memuat counter")
    def preview_counters():
        service = container.counter_service
        return json_ok(
            {
                "stt": service.peek_stt_number(request.args.get("branch") or None),
                "invoice": service.peek_invoice_number(is_pkp=as_bool(request.args.get("pkp"))),
            }
        )

    @app.route("/api/admin/counters/<path:key>", methods=["PUT"], endpoint="set_counter")
    @role_required(Role.ADMIN)
    @handle_errors("Gagal mengubah counter")
    def set_counter(key: str):
        container.counter_service.set_current(key, as_int(request_data().get("value"), "Nilai counter"))
        return json_ok(message=f"Counter {key} diperbarui")

    @app.route("/api/admin/counters/<path:key>", methods=["DELETE"], endpoint="reset_counter")
    @role_required(Role.OWNER)
    @handle_errors("Gagal reset counter")
    def reset_counter(key: str):
        existed = container.counter_service.reset(key)
        return json_ok({"existed": existed}, message=f"Counter {key} direset")
