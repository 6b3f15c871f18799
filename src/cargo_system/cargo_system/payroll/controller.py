from __future__ import annotations

from flask import Flask, request

from ..common.web import as_int, handle_errors, json_ok, parse_enum, permission_required, request_data
from ..container import Container
from ..core.enums import DeductionType, PayrollStatus


def register(app: Flask, container: Container) -> None:
    @app.route("/api/payroll", methods=["GET"], endpoint="list_payrolls")
    @permission_required("can_view_finance")
    @handle_errors("Gagal memuat data gaji")
    def list_payrolls():
        status = request.args.get("status")
        records = container.payroll_service.list_payrolls(
            period=request.args.get("period") or None,
            employee_id=request.args.get("employee_id") or None,
            status=parse_enum(PayrollStatus, status, "Status") if status else None,
        )
        return json_ok(records)

    @app.route("/api/payroll/summary/<period>", methods=["GET"], endpoint="payroll_period_summary")
    @permission_required("can_view_finance")
    @handle_errors("Gagal memuat ringkasan gaji")
    def payroll_period_summary(period: str):
        return json_ok(container.payroll_service.period_summary(period))

    @app.route("/api/payroll/<int:payroll_id>", methods=["GET"], endpoint="get_payroll")
    @permission_required("can_view_finance")
    @handle_errors("Gagal memuat data gaji")
    def get_payroll(payroll_id: int):
        return json_ok(container.payroll_service.get(payroll_id))

    @app.route("/api/payroll/generate", methods=["POST"], endpoint="generate_payroll")
    @permission_required("can_manage_finance")
    @handle_errors("Gagal menghitung gaji")
    def generate_payroll():
        data = request_data()
        period = data.get("period", "")
        employee_id = data.get("employee_id")
        if employee_id:
            record = container.payroll_service.generate_payroll(
                employee_id,
                period,
                trips_completed=as_int(data.get("trips_completed"), "Jumlah trip", 0),
                trip_revenue=as_int(data.get("trip_revenue"), "Pendapatan trip", 0),
                notes=data.get("notes"),
            )
            return json_ok(record, status=201)

        trips = {k: as_int(v, "Jumlah trip", 0) for k, v in (data.get("trips") or {}).items()}
        revenue = {k: as_int(v, "Pendapatan trip", 0) for k, v in (data.get("revenue") or {}).items()}
        records = container.payroll_service.generate_bulk(period, trips=trips, revenue=revenue)
        return json_ok(records, status=201, message=f"{len(records)} slip gaji dibuat")

    @app.route("/api/payroll/<int:payroll_id>/deductions", methods=["POST"], endpoint="add_payroll_deduction")
    @permission_required("can_manage_finance")
    @handle_errors("Gagal menambah potongan")
    def add_payroll_deduction(payroll_id: int):
        data = request_data()
        record = container.payroll_service.add_deduction(
            payroll_id,
            parse_enum(DeductionType, data.get("type") or data.get("deduction_type"), "Jenis potongan"),
            as_int(data.get("amount"), "Jumlah potongan", 0),
            data.get("description"),
        )
        return json_ok(record)

    @app.route(
        "/api/payroll/<int:payroll_id>/deductions/<int:index>",
        methods=["DELETE"],
        endpoint="remove_payroll_deduction",
    )
    @permission_required("can_manage_finance")
    @handle_errors("Gagal menghapus potongan")
    def remove_payroll_deduction(payroll_id: int, index: int):
        return json_ok(container.payroll_service.remove_deduction(payroll_id, index))

    @app.route("/api/payroll/<int:payroll_id>/approve", methods=["POST"], endpoint="approve_payroll")
    @permission_required("can_manage_finance")
    @handle_errors("Gagal menyetujui gaji")
    def approve_payroll(payroll_id: int):
        container.payroll_service.approve(payroll_id)
        return json_ok(message="Gaji disetujui")

    @app.route("/api/payroll/<int:payroll_id>/pay", methods=["POST"], endpoint="pay_payroll")
    @permission_required("can_manage_finance")
    @handle_errors("Gagal mencatat pembayaran gaji")
    def pay_payroll(payroll_id: int):
        container.payroll_service.mark_paid(payroll_id)
        return json_ok(message="Gaji dibayar")

    @app.route("/api/payroll/<int:payroll_id>", methods=["DELETE"], endpoint="delete_payroll")
    @permission_required("can_manage_finance")
    @handle_errors("Gagal menghapus data gaji")
    def delete_payroll(payroll_id: int):
        container.payroll_service.delete_payroll(payroll_id)
        return json_ok(message="Data gaji dihapus")
