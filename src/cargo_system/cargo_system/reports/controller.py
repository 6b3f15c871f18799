from __future__ import annotations

from datetime import date

from flask import Flask, request

from ..common.datetime_utils import date_range_preset, format_period
from ..common.web import as_int, handle_errors, json_ok, permission_required, query_date
from ..container import Container


def _requested_range() -> tuple[date, date]:
    """?preset=this_month or explicit ?start_date=&end_date=; defaults to this month."""
    start, end = query_date("start_date"), query_date("end_date")
    if start and end:
        return start, end
    return date_range_preset(request.args.get("preset") or "this_month")


def register(app: Flask, container: Container) -> None:
    def _csv_response(text: str, filename: str):
        return app.response_class(
            text.encode("utf-8-sig"),
            mimetype="text/csv",
            headers={"Content-Disposition": f"attachment; filename={filename}"},
        )

    @app.route("/api/reports/dashboard", methods=["GET"], endpoint="report_dashboard")
    @permission_required("can_view_dashboard_owner")
    @handle_errors("Gagal memuat dashboard")
    def report_dashboard():
        start, end = _requested_range()
        return json_ok(container.report_service.dashboard(start_date=start, end_date=end))

    @app.route("/api/reports/dashboard.csv", methods=["GET"], endpoint="report_dashboard_csv")
    @permission_required("can_view_dashboard_owner")
    @handle_errors("Gagal ekspor dashboard")
    def report_dashboard_csv():
        start, end = _requested_range()
        text = container.report_service.dashboard_csv(
            start_date=start, end_date=end, range_label=request.args.get("label") or None
        )
        return _csv_response(text, f"dashboard_{start:%Y%m%d}_to_{end:%Y%m%d}.csv")

    @app.route("/api/reports/attendance", methods=["GET"], endpoint="report_attendance")
    @permission_required("can_view_all_attendance")
    @handle_errors("Gagal memuat laporan absensi")
    def report_attendance():
        start, end = _requested_range()
        return json_ok(container.report_service.attendance_stats(start_date=start, end_date=end))

    @app.route("/api/reports/attendance.csv", methods=["GET"], endpoint="report_attendance_csv")
    @permission_required("can_view_all_attendance")
    @handle_errors("Gagal ekspor laporan absensi")
    def report_attendance_csv():
        start, end = _requested_range()
        text = container.report_service.attendance_csv(start_date=start, end_date=end)
        return _csv_response(text, f"attendance_report_{start:%Y%m%d}_to_{end:%Y%m%d}.csv")

    @app.route("/api/reports/payroll-trends", methods=["GET"], endpoint="report_payroll_trends")
    @permission_required("can_view_finance")
    @handle_errors("Gagal memuat tren gaji")
    def report_payroll_trends():
        trends = container.report_service.payroll_trends(
            end_period=request.args.get("period") or None,
            months=as_int(request.args.get("months"), "Jumlah bulan", 6),
        )
        return json_ok(trends)

    @app.route("/api/reports/payroll/<period>/roles", methods=["GET"], endpoint="report_role_costs")
    @permission_required("can_view_finance")
    @handle_errors("Gagal memuat biaya per jabatan")
    def report_role_costs(period: str):
        return json_ok(container.report_service.role_costs(period))

    @app.route("/api/reports/payroll/<period>.csv", methods=["GET"], endpoint="report_payroll_csv")
    @permission_required("can_view_finance")
    @handle_errors("Gagal ekspor data gaji")
    def report_payroll_csv(period: str):
        text = container.report_service.payroll_csv(period)
        return _csv_response(text, f"payroll_{format_period(period).replace(' ', '_')}.csv")
