from __future__ import annotations

from typing import Iterable

from ..common.csv_export import to_csv
from ..core.constants import TOP_CLIENTS_LIMIT
from ..payroll.model import PayrollRecord
from .model import AttendanceStats, DashboardStats

ATTENDANCE_HEADERS = ("Employee", "Present", "Late", "Absent", "Leave", "Overtime", "Hours", "Rate")
PAYROLL_HEADERS = (
    "Employee",
    "Role",
    "Days Worked",
    "Base Salary",
    "Allowance",
    "Overtime",
    "Gross Pay",
    "Net Pay",
)


def attendance_stats_csv(stats: AttendanceStats) -> str:
    rows = (
        (
            b.employee_name,
            b.days_present,
            b.days_late,
            b.days_absent,
            b.days_leave,
            b.overtime_count,
            f"{b.total_hours:.1f}",
            f"{b.attendance_rate:.1f}%",
        )
        for b in stats.employee_breakdown
    )
    return to_csv(ATTENDANCE_HEADERS, rows)


def payroll_csv(records: Iterable[PayrollRecord]) -> str:
    rows = (
        (
            r.employee_name,
            r.role.value,
            r.breakdown.days_worked,
            r.breakdown.base_salary,
            r.breakdown.total_allowance,
            r.breakdown.total_overtime,
            r.gross_pay,
            r.net_pay,
        )
        for r in records
    )
    return to_csv(PAYROLL_HEADERS, rows)


def dashboard_csv(stats: DashboardStats, range_label: str) -> str:
    """Summary, per-period rows, top clients and route profitability as blank-line separated blocks."""
    summary = to_csv(
        ("Laporan Dashboard Cahaya Cargo",),
        (
            ("Periode", range_label),
            ("Total Pendapatan", stats.total_revenue),
            ("Total Pengeluaran", stats.total_expenses),
            ("Profit Bersih", stats.net_profit),
        ),
    )
    periods = to_csv(
        ("Tanggal/Bulan", "Pendapatan", "Pengeluaran"),
        ((p.label, p.revenue, p.expenses) for p in stats.period_stats),
    )
    clients = to_csv(
        ("Nama", "Jumlah Transaksi", "Total Pendapatan"),
        ((c.name, c.transaction_count, c.revenue) for c in stats.top_clients),
    )
    routes = to_csv(
        ("Rute", "Margin (%)", "Profit"),
        ((r.route, f"{r.margin:.2f}%", r.profit) for r in stats.route_profitability),
    )
    blocks = (
        summary,
        "Rincian Per Periode\n" + periods,
        f"Top {TOP_CLIENTS_LIMIT} Pelanggan\n" + clients,
        "Profitabilitas Rute\n" + routes,
    )
    return "\n\n".join(blocks) + "\n"
