from __future__ import annotations

from flask import Flask, request

from ..common.datetime_utils import parse_optional_date
from ..common.web import as_int, handle_errors, json_ok, parse_enum, permission_required, request_data
from ..container import Container
from ..core.enums import InvoiceStatus


def _ids(data: dict) -> list[int]:
    return [as_int(i, "ID transaksi") for i in data.get("transaction_ids") or []]


def register(app: Flask, container: Container) -> None:
    @app.route("/api/invoices", methods=["GET"], endpoint="list_invoices")
    @permission_required("can_view_finance")
    @handle_errors("Gagal memuat invoice")
    def list_invoices():
        status = request.args.get("status")
        invoices = container.invoice_service.list_invoices(
            status=parse_enum(InvoiceStatus, status, "Status") if status else None
        )
        return json_ok(invoices)

    @app.route("/api/invoices/receivables", methods=["GET"], endpoint="receivables")
    @permission_required("can_view_finance")
    @handle_errors("Gagal memuat piutang")
    def receivables():
        return json_ok(container.invoice_service.receivables_summary())

    @app.route("/api/invoices/<int:invoice_id>", methods=["GET"], endpoint="get_invoice")
    @permission_required("can_view_finance")
    @handle_errors("Gagal memuat invoice")
    def get_invoice(invoice_id: int):
        return json_ok(container.invoice_service.get(invoice_id))

    @app.route("/api/invoices", methods=["POST"], endpoint="create_invoice")
    @permission_required("can_manage_finance")
    @handle_errors("Gagal membuat invoice")
    def create_invoice():
        data = request_data()
        invoice_id = container.invoice_service.create_invoice(
            client_name=data.get("client_name", ""),
            client_id=as_int(data.get("client_id"), "Pelanggan"),
            client_address=data.get("client_address"),
            transaction_ids=_ids(data),
            issue_date=parse_optional_date(data.get("issue_date")),
            due_date=parse_optional_date(data.get("due_date")),
            notes=data.get("notes"),
        )
        return json_ok(container.invoice_service.get(invoice_id), status=201, message="Invoice berhasil dibuat")

    @app.route("/api/invoices/<int:invoice_id>/transactions", methods=["POST"], endpoint="add_invoice_transactions")
    @permission_required("can_manage_finance")
    @handle_errors("Gagal menambah transaksi")
    def add_invoice_transactions(invoice_id: int):
        container.invoice_service.add_transactions(invoice_id, _ids(request_data()))
        return json_ok(container.invoice_service.get(invoice_id))

    @app.route("/api/invoices/<int:invoice_id>/transactions", methods=["DELETE"], endpoint="remove_invoice_transactions")
    @permission_required("can_manage_finance")
    @handle_errors("Gagal menghapus transaksi dari invoice")
    def remove_invoice_transactions(invoice_id: int):
        container.invoice_service.remove_transactions(invoice_id, _ids(request_data()))
        return json_ok(container.invoice_service.get(invoice_id))

    @app.route("/api/invoices/<int:invoice_id>/recalculate", methods=["POST"], endpoint="recalculate_invoice")
    @permission_required("can_manage_finance")
    @handle_errors("Gagal menghitung ulang invoice")
    def recalculate_invoice(invoice_id: int):
        return json_ok({"total_amount": container.invoice_service.recalculate_total(invoice_id)})

    @app.route("/api/invoices/<int:invoice_id>/pay", methods=["POST"], endpoint="pay_invoice")
    @permission_required("can_manage_finance")
    @handle_errors("Gagal mencatat pembayaran")
    def pay_invoice(invoice_id: int):
        data = request_data()
        container.invoice_service.mark_paid(
            invoice_id,
            payment_method=data.get("payment_method", ""),
            payment_date=parse_optional_date(data.get("payment_date")),
            payment_ref=data.get("payment_ref"),
        )
        return json_ok(message="Invoice lunas")

    @app.route("/api/invoices/<int:invoice_id>/cancel", methods=["POST"], endpoint="cancel_invoice")
    @permission_required("can_manage_finance")
    @handle_errors("Gagal membatalkan invoice")
    def cancel_invoice(invoice_id: int):
        container.invoice_service.cancel_invoice(invoice_id)
        return json_ok(message="Invoice dibatalkan")

    @app.route("/api/invoices/<int:invoice_id>", methods=["DELETE"], endpoint="delete_invoice")
    @permission_required("can_manage_finance")
    @handle_errors("Gagal menghapus invoice")
    def delete_invoice(invoice_id: int):
        container.invoice_service.delete_invoice(invoice_id)
        return json_ok(message="Invoice dihapus")
