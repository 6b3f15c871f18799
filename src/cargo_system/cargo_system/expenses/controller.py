from __future__ import annotations

from flask import Flask, request

from ..common.datetime_utils import parse_iso_date
from ..common.web import (
    as_int,
    handle_errors,
    json_ok,
    parse_enum,
    permission_required,
    query_date,
    request_data,
)
from ..container import Container
from ..core.enums import ExpenseType
from .model import EXPENSE_CATEGORY_LABELS


def _fields(data: dict) -> dict:
    return dict(
        expense_date=parse_iso_date(data.get("date") or data.get("expense_date") or ""),
        category=data.get("category") or "",
        amount=as_int(data.get("amount"), "Jumlah", 0),
        expense_type=parse_enum(ExpenseType, data.get("type") or data.get("expense_type"), "Tipe", ExpenseType.GENERAL),
        description=data.get("description"),
        voyage_id=as_int(data.get("voyage_id"), "Voyage"),
        vehicle_id=as_int(data.get("vehicle_id"), "Kendaraan"),
        receipt_number=data.get("receipt_number"),
    )


def register(app: Flask, container: Container) -> None:
    @app.route("/api/expenses", methods=["GET"], endpoint="list_expenses")
    @permission_required("can_view_finance")
    @handle_errors("Gagal memuat pengeluaran")
    def list_expenses():
        expense_type = request.args.get("type")
        rows = container.expense_service.list_expenses(
            voyage_id=as_int(request.args.get("voyage_id"), "Voyage"),
            expense_type=parse_enum(ExpenseType, expense_type, "Tipe") if expense_type else None,
            start_date=query_date("start_date"),
            end_date=query_date("end_date"),
        )
        return json_ok(rows)

    @app.route("/api/expenses/categories", methods=["GET"], endpoint="expense_categories")
    @permission_required("can_view_finance")
    def expense_categories():
        return json_ok({c.value: label for c, label in EXPENSE_CATEGORY_LABELS.items()})

    @app.route("/api/expenses/totals", methods=["GET"], endpoint="expense_totals")
    @permission_required("can_view_finance")
    @handle_errors("Gagal menghitung pengeluaran")
    def expense_totals():
        voyage_id = as_int(request.args.get("voyage_id"), "Voyage")
        return json_ok(container.expense_service.totals_by_category(voyage_id=voyage_id))

    @app.route("/api/expenses/<int:expense_id>", methods=["GET"], endpoint="get_expense")
    @permission_required("can_view_finance")
    @handle_errors("Gagal memuat pengeluaran")
    def get_expense(expense_id: int):
        return json_ok(container.expense_service.get(expense_id))

    @app.route("/api/expenses", methods=["POST"], endpoint="create_expense")
    @permission_required("can_manage_finance")
    @handle_errors("Gagal menyimpan pengeluaran")
    def create_expense():
        expense_id = container.expense_service.create_expense(**_fields(request_data()))
        return json_ok({"expense_id": expense_id}, status=201, message="Pengeluaran dicatat")

    @app.route("/api/expenses/<int:expense_id>", methods=["PUT"], endpoint="update_expense")
    @permission_required("can_manage_finance")
    @handle_errors("Gagal menyimpan pengeluaran")
    def update_expense(expense_id: int):
        container.expense_service.update_expense(expense_id, **_fields(request_data()))
        return json_ok(message="Pengeluaran diperbarui")

    @app.route("/api/expenses/<int:expense_id>", methods=["DELETE"], endpoint="delete_expense")
    @permission_required("can_manage_finance")
    @handle_errors("Gagal menghapus pengeluaran")
    def delete_expense(expense_id: int):
        container.expense_service.delete_expense(expense_id)
        return json_ok(message="Pengeluaran dihapus")

    @app.route("/api/expenses/cleanup-orphans", methods=["POST"], endpoint="cleanup_orphan_expenses")
    @permission_required("can_manage_finance")
    @handle_errors("Gagal membersihkan pengeluaran")
    def cleanup_orphan_expenses():
        removed = container.expense_service.cleanup_orphans()
        return json_ok({"removed": removed}, message=f"{removed} pengeluaran yatim dihapus")
