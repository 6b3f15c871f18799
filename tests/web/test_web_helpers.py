from __future__ import annotations

from datetime import date
from types import SimpleNamespace

import pytest
from flask import Flask

from src.cargo_system.cargo_system.clients.controller import register as register_clients
from src.cargo_system.cargo_system.clients.model import Client
from src.cargo_system.cargo_system.common.web import (
    as_float,
    handle_errors,
    json_ok,
    parse_enum,
    permission_required,
    role_required,
    to_jsonable,
)
from src.cargo_system.cargo_system.core.enums import Role, TransactionStatus
from src.cargo_system.cargo_system.core.exceptions import (
    AuthorizationError,
    CounterError,
    DuplicateError,
    NotFoundError,
    ValidationError,
)
from src.cargo_system.cargo_system.transactions.controller import register as register_transactions


def _app():
    app = Flask(__name__)
    app.secret_key = "test"

    errors = {
        "validation": ValidationError("Tujuan wajib diisi"),
        "missing": NotFoundError("Transaksi tidak ditemukan"),
        "duplicate": DuplicateError(""),
        "forbidden": AuthorizationError("Tidak boleh"),
        "counter": CounterError("Gagal membuat nomor urut (stt:global)"),
        "crash": RuntimeError("boom"),
    }

    @app.route("/raise/<kind>")
    @handle_errors("Gagal memproses")
    def raise_error(kind):
        raise errors[kind]

    @app.route("/finance")
    @permission_required("can_manage_finance")
    def finance():
        return json_ok({"ok": True})

    @app.route("/admin")
    @role_required(Role.ADMIN)
    def admin():
        return json_ok()

    return app


@pytest.mark.parametrize(
    "kind, status, message",
    [
        ("validation", 400, "Tujuan wajib diisi"),
        ("missing", 404, "Transaksi tidak ditemukan"),
        ("duplicate", 409, "Email sudah terdaftar. Gunakan email lain."),
        ("forbidden", 403, "Tidak boleh"),
        ("counter", 500, "Gagal membuat nomor urut (stt:global)"),
        ("crash", 500, "Gagal memproses"),
    ],
)
def test_errors_map_to_status_and_message(kind, status, message):
    resp = _app().test_client().get(f"/raise/{kind}")

    assert resp.status_code == status
    assert resp.get_json() == {"success": False, "message": message}


def test_unexpected_error_detail_only_in_debug():
    app = _app()
    app.config["DEBUG"] = True
    resp = app.test_client().get("/raise/crash")
    assert resp.get_json()["message"] == "Gagal memproses: boom"


def _login(client, role):
    with client.session_transaction() as sess:
        sess["user_id"] = "EMP-001"
        sess["role"] = role


def test_permission_guard():
    client = _app().test_client()
    assert client.get("/finance").status_code == 401

    _login(client, "branch_manager")
    assert client.get("/finance").status_code == 403

    _login(client, "owner")
    assert client.get("/finance").get_json() == {"success": True, "data": {"ok": True}}


def test_role_guard_accepts_higher_roles():
    client = _app().test_client()
    _login(client, "driver")
    assert client.get("/admin").status_code == 403
    _login(client, "owner")
    assert client.get("/admin").status_code == 200


def test_to_jsonable_handles_dataclasses_enums_and_dates():
    client = Client(client_id=1, name="CV Maju")
    out = to_jsonable({"client": client, TransactionStatus.SELESAI: 2, "on": date(2026, 1, 20)})

    assert out["client"]["name"] == "CV Maju"
    assert out["selesai"] == 2
    assert out["on"] == "2026-01-20"


def test_as_float():
    assert as_float("", "Berat", 0.0) == 0.0
    assert as_float("12.5", "Berat") == 12.5
    with pytest.raises(ValidationError, match="Berat harus berupa angka"):
        as_float("dua kilo", "Berat")


def test_parse_enum():
    assert parse_enum(Role, "", "Role", Role.STAFF) == Role.STAFF
    with pytest.raises(ValidationError):
        parse_enum(Role, "pilot", "Role")
    with pytest.raises(ValidationError):
        parse_enum(Role, None, "Role")


class StubClientService:
    def __init__(self):
        self.created = []

    def list_clients(self):
        return [Client(client_id=1, name="CV Maju", city="Surabaya")]

    def create_client(self, **fields):
        if not (fields["name"] or "").strip():
            raise ValidationError("Nama pelanggan wajib diisi")
        self.created.append(fields)
        return len(self.created)


def test_clients_controller_round_trip():
    app = Flask(__name__)
    app.secret_key = "test"
    service = StubClientService()
    register_clients(app, SimpleNamespace(client_service=service))
    client = app.test_client()
    _login(client, "staff")
    assert client.get("/api/clients").status_code == 403

    _login(client, "admin")
    listed = client.get("/api/clients").get_json()
    assert listed["data"][0]["name"] == "CV Maju"

    created = client.post("/api/clients", json={"name": "PT Baru", "city": "Bandung"})
    assert created.status_code == 201
    assert created.get_json()["data"] == {"client_id": 1}
    assert service.created[0]["city"] == "Bandung"

    bad = client.post("/api/clients", json={"name": " "})
    assert bad.status_code == 400
    assert bad.get_json()["message"] == "Nama pelanggan wajib diisi"


class StubTransactionService:
    def __init__(self):
        self.forms = []

    def create_transaction(self, form, no_stt=None):
        self.forms.append(form)
        return 1

    def get(self, transaction_id):
        return {"transaction_id": transaction_id}


def test_transaction_form_rejects_non_numeric_weight():
    app = Flask(__name__)
    app.secret_key = "test"
    service = StubTransactionService()
    register_transactions(app, SimpleNamespace(transaction_service=service))
    client = app.test_client()
    _login(client, "admin")

    body = {"tanggal": "2026-01-20", "tujuan": "Makassar", "koli": "4", "harga": "150000", "berat": "dua kilo"}
    bad = client.post("/api/transactions", json=body)
    assert bad.status_code == 400
    assert bad.get_json() == {"success": False, "message": "Berat harus berupa angka"}
    assert service.forms == []

    bad_rate = client.post("/api/transactions", json={**body, "berat": "120", "ppn_rate": "sebelas"})
    assert bad_rate.status_code == 400
    assert bad_rate.get_json()["message"] == "Tarif PPN harus berupa angka"

    ok = client.post("/api/transactions", json={**body, "berat": "120.5"})
    assert ok.status_code == 201
    assert service.forms[0].berat == 120.5
    assert service.forms[0].ppn_rate is None
