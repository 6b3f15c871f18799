from __future__ import annotations

from enum import Enum


class Role(str, Enum):
    """Peran pengguna untuk hak akses."""

    OWNER = "owner"
    ADMIN = "admin"
    BRANCH_MANAGER = "branch_manager"
    STAFF = "staff"
    DRIVER = "driver"
    HELPER = "helper"


class Branch(str, Enum):
    SURABAYA = "surabaya"
    BANDUNG = "bandung"


class TransactionStatus(str, Enum):
    """Status pengiriman STT."""

    PENDING = "pending"
    DIPROSES = "diproses"
    DIKIRIM = "dikirim"
    SELESAI = "selesai"
    DIBATALKAN = "dibatalkan"


class TransactionType(str, Enum):
    REGULAR = "regular"
    BORONGAN = "borongan"


class WeightUnit(str, Enum):
    KG = "KG"
    M3 = "M3"


class PaymentMethod(str, Enum):
    TUNAI = "Tunai"
    KREDIT = "Kredit"
    DP = "DP"


class Pelunasan(str, Enum):
    """Status pelunasan pembayaran transaksi."""

    CASH = "Cash"
    TF = "TF"
    PENDING = "Pending"


class InvoiceStatus(str, Enum):
    UNPAID = "Unpaid"
    PAID = "Paid"
    CANCELLED = "Cancelled"


class VoyageStatus(str, Enum):
    PLANNED = "planned"
    IN_PROGRESS = "in-progress"
    COMPLETED = "completed"
    CANCELLED = "cancelled"


class ExpenseCategory(str, Enum):
    TIKET = "tiket"
    OPERASIONAL_SURABAYA = "operasional_surabaya"
    OPERASIONAL_MAKASSAR = "operasional_makassar"
    TRANSIT = "transit"
    SEWA_MOBIL = "sewa_mobil"
    GAJI_SOPIR = "gaji_sopir"
    GAJI_KARYAWAN = "gaji_karyawan"
    LISTRIK_AIR_INTERNET = "listrik_air_internet"
    SEWA_KANTOR = "sewa_kantor"
    MAINTENANCE = "maintenance"
    LAINNYA = "lainnya"


class ExpenseType(str, Enum):
    VOYAGE = "voyage"
    GENERAL = "general"


class FleetStatus(str, Enum):
    AVAILABLE = "Available"
    ON_TRIP = "On Trip"
    MAINTENANCE = "Maintenance"


class ServiceType(str, Enum):
    SERVICE_RUTIN = "Service Rutin"
    GANTI_OLI = "Ganti Oli"
    BAN = "Ban"
    SPAREPART = "Sparepart"
    PERBAIKAN_BERAT = "Perbaikan Berat"
    LAINNYA = "Lainnya"


class EmployeeStatus(str, Enum):
    ACTIVE = "active"
    INACTIVE = "inactive"
    SUSPENDED = "suspended"


class AccountStatus(str, Enum):
    ACTIVE = "active"
    SUSPENDED = "suspended"
    PENDING = "pending"


class CommissionType(str, Enum):
    FIXED = "fixed"
    PERCENTAGE = "percentage"


class AttendanceStatus(str, Enum):
    """Status kehadiran harian."""

    PRESENT = "present"
    ABSENT = "absent"
    LATE = "late"
    LEAVE = "leave"


class ShiftType(str, Enum):
    REGULAR = "regular"
    OVERTIME_LOADING = "overtime_loading"
    OVERTIME_UNLOADING = "overtime_unloading"


class PayrollStatus(str, Enum):
    """Alur status gaji bulanan: draft -> approved -> paid."""

    DRAFT = "draft"
    APPROVED = "approved"
    PAID = "paid"


class DeductionType(str, Enum):
    TAX = "tax"
    INSURANCE = "insurance"
    ADVANCE = "advance"
    OTHER = "other"
