from __future__ import annotations

from flask import Flask

from ..common.web import as_bool, handle_errors, json_ok, permission_required, request_data
from ..container import Container
from ..core.constants import DEFAULT_PPN_RATE


def register(app: Flask, container: Container) -> None:
    @app.route("/api/settings/tax", methods=["GET"], endpoint="get_tax_settings")
    @permission_required("can_view_finance")
    @handle_errors("Gagal memuat pengaturan pajak")
    def get_tax_settings():
        return json_ok(container.settings_service.get_tax_settings())

    @app.route("/api/settings/tax", methods=["PUT"], endpoint="update_tax_settings")
    @permission_required("can_manage_finance")
    @handle_errors("Gagal menyimpan pengaturan pajak")
    def update_tax_settings():
        data = request_data()
        rate = data.get("default_ppn_rate")
        settings = container.settings_service.update_tax_settings(
            company_name=data.get("company_name", ""),
            npwp=data.get("npwp"),
            address=data.get("address"),
            is_pkp=as_bool(data.get("is_pkp")),
            default_ppn_rate=rate if rate not in (None, "") else DEFAULT_PPN_RATE,
        )
        return json_ok(settings, message="Pengaturan pajak disimpan")
