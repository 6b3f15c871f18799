from __future__ import annotations

from datetime import date

from flask import Flask, request, session

from ..common.datetime_utils import parse_iso_date
from ..common.web import (
    handle_errors,
    json_ok,
    login_required,
    parse_enum,
    permission_required,
    query_date,
    request_data,
)
from ..container import Container
from ..core.enums import AttendanceStatus, ShiftType
from ..core.exceptions import AuthorizationError, ValidationError
from ..roles.permissions import has_permission


def _range() -> tuple[date, date]:
    start, end = query_date("start_date"), query_date("end_date")
    if not start or not end:
        raise ValidationError("start_date dan end_date wajib diisi")
    return start, end


def register(app: Flask, container: Container) -> None:
    @app.route("/api/attendance/today", methods=["GET"], endpoint="attendance_today")
    @login_required
    @handle_errors("Gagal memuat absensi")
    def attendance_today():
        return json_ok(container.attendance_service.get_today(session["user_id"]))

    @app.route("/api/attendance/check-in", methods=["POST"], endpoint="attendance_check_in")
    @login_required
    @handle_errors("Gagal check-in")
    def attendance_check_in():
        data = request_data()
        day = container.attendance_service.check_in(
            session["user_id"],
            shift_type=parse_enum(ShiftType, data.get("shift_type"), "Jenis shift", ShiftType.REGULAR),
            notes=data.get("notes"),
        )
        return json_ok(day, message="Check-in berhasil")

    @app.route("/api/attendance/check-out", methods=["POST"], endpoint="attendance_check_out")
    @login_required
    @handle_errors("Gagal check-out")
    def attendance_check_out():
        return json_ok(container.attendance_service.check_out(session["user_id"]), message="Check-out berhasil")

    @app.route("/api/attendance/history", methods=["GET"], endpoint="attendance_history")
    @login_required
    @handle_errors("Gagal memuat riwayat absensi")
    def attendance_history():
        employee_id = request.args.get("employee_id") or session["user_id"]
        if employee_id != session["user_id"] and not has_permission(session["role"], "can_view_all_attendance"):
            raise AuthorizationError("Anda hanya bisa melihat absensi sendiri")
        start, end = _range()
        days = container.attendance_service.list_for_employee(employee_id, start_date=start, end_date=end)
        summary = container.attendance_service.summary(employee_id, start_date=start, end_date=end)
        return json_ok({"days": days, "summary": summary})

    @app.route("/api/attendance", methods=["GET"], endpoint="attendance_list")
    @permission_required("can_view_all_attendance")
    @handle_errors("Gagal memuat absensi")
    def attendance_list():
        work_date = query_date("date")
        if work_date:
            return json_ok(container.attendance_service.list_for_date(work_date))
        start, end = _range()
        return json_ok(container.attendance_service.list_range(start_date=start, end_date=end))

    @app.route("/api/attendance/<employee_id>/absent", methods=["POST"], endpoint="attendance_mark_absent")
    @permission_required("can_manage_employees")
    @handle_errors("Gagal menyimpan absensi")
    def attendance_mark_absent(employee_id: str):
        data = request_data()
        day = container.attendance_service.mark_absent(
            employee_id, parse_iso_date(data.get("date", "")), data.get("notes")
        )
        return json_ok(day)

    @app.route("/api/attendance/<employee_id>/status", methods=["POST"], endpoint="attendance_set_status")
    @permission_required("can_manage_employees")
    @handle_errors("Gagal menyimpan absensi")
    def attendance_set_status(employee_id: str):
        data = request_data()
        day = container.attendance_service.update_status(
            employee_id,
            parse_iso_date(data.get("date", "")),
            parse_enum(AttendanceStatus, data.get("status"), "Status"),
            data.get("notes"),
        )
        return json_ok(day)
