from __future__ import annotations

from datetime import timedelta

from flask import Flask, request, session

from ..common.datetime_utils import parse_iso_date, parse_optional_date
from ..common.web import (
    as_bool,
    as_float,
    as_int,
    handle_errors,
    json_ok,
    login_required,
    parse_enum,
    permission_required,
    request_data,
)
from ..container import Container
from ..core.constants import DEFAULT_SESSION_DAYS
from ..core.enums import CommissionType, EmployeeStatus, Role
from ..core.logger import logger
from ..roles.permissions import get_role_permissions, role_label
from .model import EmployeeDocument, SalaryConfig


def _salary(data: dict) -> SalaryConfig:
    salary = data.get("salary") or data
    return SalaryConfig(
        base_salary=as_int(salary.get("base_salary"), "Gaji pokok", 0),
        allowance=as_int(salary.get("allowance"), "Uang harian", 0),
        trip_commission=as_float(salary.get("trip_commission"), "Komisi trip", 0.0),
        commission_type=parse_enum(CommissionType, salary.get("commission_type"), "Tipe komisi", CommissionType.FIXED),
    )


def _documents(data: dict) -> list[EmployeeDocument]:
    return [
        EmployeeDocument(
            doc_type=str(d.get("type") or d.get("doc_type") or ""),
            number=str(d.get("number") or ""),
            expiry_date=parse_optional_date(d.get("expiry_date")),
            notes=d.get("notes"),
        )
        for d in data.get("documents") or []
    ]


def _employee_fields(data: dict) -> dict:
    return dict(
        full_name=data.get("full_name", ""),
        role=parse_enum(Role, data.get("role"), "Role"),
        join_date=parse_iso_date(data.get("join_date", "")),
        salary=_salary(data),
        phone=data.get("phone"),
        address=data.get("address"),
        city=data.get("city"),
        documents=_documents(data),
        jobdesk=data.get("jobdesk"),
        notes=data.get("notes"),
        email=data.get("email"),
    )


def register(app: Flask, container: Container) -> None:
    @app.route("/api/login", methods=["POST"], endpoint="login")
    @handle_errors("Gagal login")
    def login():
        data = request_data()
        user = container.auth_service.authenticate(data.get("email", ""), data.get("password", ""))

        session.permanent = as_bool(data.get("remember_me"))
        app.permanent_session_lifetime = timedelta(days=DEFAULT_SESSION_DAYS)
        session["user_id"] = user.employee_id
        session["name"] = user.full_name
        session["role"] = user.role.value
        logger.info(f"Login {user.email} ({user.role.value})")
        return json_ok(
            {
                "employee_id": user.employee_id,
                "full_name": user.full_name,
                "role": user.role.value,
                "role_label": role_label(user.role),
                "permissions": get_role_permissions(user.role).as_dict(),
            }
        )

    @app.route("/api/logout", methods=["POST"], endpoint="logout")
    def logout():
        session.clear()
        return json_ok(message="Berhasil logout")

    @app.route("/api/me", endpoint="me")
    @login_required
    @handle_errors("Gagal memuat profil")
    def me():
        employee = container.employee_service.get(session["user_id"])
        return json_ok(
            {
                "employee": employee,
                "role_label": role_label(employee.role),
                "permissions": get_role_permissions(employee.role).as_dict(),
            }
        )

    @app.route("/api/me/password", methods=["POST"], endpoint="change_password")
    @login_required
    @handle_errors("Gagal mengubah password")
    def change_password():
        container.employee_service.change_password(session["user_id"], request_data().get("new_password", ""))
        return json_ok(message="Password berhasil diubah")

    @app.route("/api/employees", methods=["GET"], endpoint="list_employees")
    @permission_required("can_manage_employees")
    @handle_errors("Gagal memuat data karyawan")
    def list_employees():
        role = request.args.get("role")
        status = request.args.get("status")
        employees = container.employee_service.list_employees(
            role=parse_enum(Role, role, "Role") if role else None,
            status=parse_enum(EmployeeStatus, status, "Status") if status else None,
        )
        return json_ok(employees)

    @app.route("/api/employees/drivers", methods=["GET"], endpoint="list_drivers")
    @login_required
    @handle_errors("Gagal memuat data sopir")
    def list_drivers():
        return json_ok(container.employee_service.list_active_drivers())

    @app.route("/api/employees/document-alerts", methods=["GET"], endpoint="document_alerts")
    @permission_required("can_manage_employees")
    @handle_errors("Gagal memuat dokumen karyawan")
    def document_alerts():
        return json_ok(container.employee_service.document_alerts())

    @app.route("/api/employees/<employee_id>", methods=["GET"], endpoint="get_employee")
    @permission_required("can_manage_employees")
    @handle_errors("Gagal memuat data karyawan")
    def get_employee(employee_id: str):
        return json_ok(container.employee_service.get(employee_id))

    @app.route("/api/employees", methods=["POST"], endpoint="create_employee")
    @permission_required("can_manage_employees")
    @handle_errors("Gagal menyimpan data")
    def create_employee():
        account = container.employee_service.create_employee(**_employee_fields(request_data()))
        return json_ok(account, status=201, message="Karyawan berhasil ditambahkan")

    @app.route("/api/employees/<employee_id>", methods=["PUT"], endpoint="update_employee")
    @permission_required("can_manage_employees")
    @handle_errors("Gagal menyimpan data")
    def update_employee(employee_id: str):
        container.employee_service.update_employee(employee_id, **_employee_fields(request_data()))
        return json_ok(message="Data karyawan diperbarui")

    @app.route("/api/employees/<employee_id>/status", methods=["POST"], endpoint="set_employee_status")
    @permission_required("can_manage_employees")
    @handle_errors("Gagal mengubah status")
    def set_employee_status(employee_id: str):
        status = parse_enum(EmployeeStatus, request_data().get("status"), "Status")
        container.employee_service.set_status(employee_id, status)
        return json_ok(message="Status karyawan diperbarui")

    @app.route("/api/employees/<employee_id>/reset-password", methods=["POST"], endpoint="reset_employee_password")
    @permission_required("can_manage_employees")
    @handle_errors("Gagal reset password")
    def reset_employee_password(employee_id: str):
        password = container.employee_service.reset_password(employee_id)
        return json_ok({"default_password": password}, message="Password direset ke default")

    @app.route("/api/employees/<employee_id>", methods=["DELETE"], endpoint="delete_employee")
    @permission_required("can_manage_employees")
    @handle_errors("Gagal menghapus data")
    def delete_employee(employee_id: str):
        container.employee_service.delete_employee(employee_id)
        return json_ok(message="Karyawan dihapus")
