from __future__ import annotations

from flask import Flask, request

from ..common.datetime_utils import parse_iso_date
from ..common.web import (
    as_bool,
    as_float,
    as_int,
    handle_errors,
    json_ok,
    parse_enum,
    permission_required,
    query_date,
    request_data,
)
from ..container import Container
from ..core.enums import Pelunasan, PaymentMethod, TransactionStatus, TransactionType, WeightUnit
from .model import Party, TransactionForm


def _party(data: dict, prefix: str) -> Party:
    """Accept either {"pengirim": {...}} or flat pengirim_name/pengirim_phone/... fields."""
    src = data.get(prefix)
    if not isinstance(src, dict):
        src = {k[len(prefix) + 1 :]: v for k, v in data.items() if k.startswith(f"{prefix}_")}
    return Party(
        name=src.get("name") or "",
        phone=src.get("phone"),
        address=src.get("address"),
        city=src.get("city"),
        client_id=as_int(src.get("client_id") or src.get("id"), "Pelanggan"),
    )


def _form(data: dict, default_branch: str) -> TransactionForm:
    status = data.get("status")
    return TransactionForm(
        tanggal=parse_iso_date(data.get("tanggal", "")),
        tujuan=data.get("tujuan", ""),
        pengirim=_party(data, "pengirim"),
        penerima=_party(data, "penerima"),
        koli=as_int(data.get("koli"), "Koli", 0),
        berat=as_float(data.get("berat"), "Berat", 0.0),
        berat_unit=parse_enum(WeightUnit, data.get("berat_unit"), "Satuan berat", WeightUnit.KG),
        tipe=parse_enum(TransactionType, data.get("tipe"), "Tipe", TransactionType.REGULAR),
        harga=as_int(data.get("harga"), "Harga", 0),
        jumlah=as_int(data.get("jumlah"), "Jumlah"),
        is_taxable=as_bool(data.get("is_taxable")),
        ppn_rate=as_float(data.get("ppn_rate"), "Tarif PPN"),
        ppn=as_int(data.get("ppn"), "PPN"),
        payment_method=parse_enum(PaymentMethod, data.get("payment_method"), "Metode pembayaran", PaymentMethod.TUNAI),
        pelunasan=parse_enum(Pelunasan, data.get("pelunasan"), "Pelunasan", Pelunasan.PENDING),
        status=parse_enum(TransactionStatus, status, "Status") if status else None,
        no_invoice=data.get("no_invoice"),
        keterangan=data.get("keterangan"),
        isi_barang=data.get("isi_barang"),
        branch=data.get("branch") or default_branch or None,
    )


def register(app: Flask, container: Container) -> None:
    def default_branch() -> str:
        return str(app.config.get("DEFAULT_BRANCH") or "")

    @app.route("/api/transactions", methods=["GET"], endpoint="list_transactions")
    @permission_required("can_manage_transactions")
    @handle_errors("Gagal memuat transaksi")
    def list_transactions():
        q = request.args.get("q")
        if q:
            return json_ok(container.transaction_service.search(q))
        status = request.args.get("status")
        rows = container.transaction_service.list_transactions(
            start_date=query_date("start_date"),
            end_date=query_date("end_date"),
            status=parse_enum(TransactionStatus, status, "Status") if status else None,
        )
        return json_ok(rows)

    @app.route("/api/transactions/next-stt", methods=["GET"], endpoint="peek_stt")
    @permission_required("can_manage_transactions")
    @handle_errors("Gagal membaca nomor STT")
    def peek_stt():
        branch = request.args.get("branch") or default_branch() or None
        return json_ok({"no_stt": container.counter_service.peek_stt_number(branch)})

    @app.route("/api/transactions/<int:transaction_id>", methods=["GET"], endpoint="get_transaction")
    @permission_required("can_manage_transactions")
    @handle_errors("Gagal memuat transaksi")
    def get_transaction(transaction_id: int):
        return json_ok(container.transaction_service.get(transaction_id))

    @app.route("/api/transactions", methods=["POST"], endpoint="create_transaction")
    @permission_required("can_manage_transactions")
    @handle_errors("Gagal menyimpan transaksi")
    def create_transaction():
        data = request_data()
        transaction_id = container.transaction_service.create_transaction(
            _form(data, default_branch()), no_stt=data.get("no_stt")
        )
        return json_ok(container.transaction_service.get(transaction_id), status=201, message="Transaksi berhasil dibuat")

    @app.route("/api/transactions/<int:transaction_id>", methods=["PUT"], endpoint="update_transaction")
    @permission_required("can_manage_transactions")
    @handle_errors("Gagal menyimpan transaksi")
    def update_transaction(transaction_id: int):
        data = request_data()
        container.transaction_service.update_transaction(
            transaction_id, _form(data, default_branch()), no_stt=data.get("no_stt")
        )
        return json_ok(container.transaction_service.get(transaction_id), message="Transaksi diperbarui")

    @app.route("/api/transactions/<int:transaction_id>/status", methods=["POST"], endpoint="update_transaction_status")
    @permission_required("can_manage_transactions")
    @handle_errors("Gagal mengubah status")
    def update_transaction_status(transaction_id: int):
        data = request_data()
        container.transaction_service.update_status(
            transaction_id,
            parse_enum(TransactionStatus, data.get("status"), "Status"),
            data.get("catatan"),
        )
        return json_ok(message="Status transaksi diperbarui")

    @app.route("/api/transactions/<int:transaction_id>", methods=["DELETE"], endpoint="delete_transaction")
    @permission_required("can_manage_transactions")
    @handle_errors("Gagal menghapus transaksi")
    def delete_transaction(transaction_id: int):
        container.transaction_service.delete_transaction(transaction_id)
        return json_ok(message="Transaksi dihapus")
