from __future__ import annotations

from datetime import date, datetime, timedelta
from typing import Callable, Optional

from ..attendance.repository import AttendanceRepository
from ..common.datetime_utils import current_period, now_local, period_date_range, previous_period
from ..common.validators import require_period
from ..core.enums import EmployeeStatus
from ..core.exceptions import ValidationError
from ..employees.repository import EmployeeRepository
from ..expenses.repository import ExpenseRepository
from ..invoices.service import InvoiceService
from ..payroll.service import PayrollService
from ..transactions.repository import TransactionRepository
from ..voyages.repository import VoyageRepository
from . import export, stats
from .model import AttendanceStats, DashboardStats, PayrollTrend, RoleCost


class ReportService:
    def __init__(
        self,
        *,
        transactions: TransactionRepository,
        expenses: ExpenseRepository,
        voyages: VoyageRepository,
        employees: EmployeeRepository,
        attendance: AttendanceRepository,
        payroll_service: PayrollService,
        invoice_service: InvoiceService,
        clock: Callable[[], datetime] = now_local,
    ):
        self._transactions = transactions
        self._expenses = expenses
        self._voyages = voyages
        self._employees = employees
        self._attendance = attendance
        self._payroll = payroll_service
        self._invoices = invoice_service
        self._clock = clock

    @staticmethod
    def _check_range(start_date: date, end_date: date) -> None:
        if start_date > end_date:
            raise ValidationError("Tanggal mulai tidak boleh setelah tanggal akhir")

    def attendance_stats(self, *, start_date: date, end_date: date) -> AttendanceStats:
        self._check_range(start_date, end_date)
        employees = self._employees.list_employees(status=EmployeeStatus.ACTIVE)
        days = self._attendance.list_days(start_date=start_date, end_date=end_date)
        return stats.calculate_attendance_stats(days, employees, start_date, end_date)

    def attendance_csv(self, *, start_date: date, end_date: date) -> str:
        return export.attendance_stats_csv(self.attendance_stats(start_date=start_date, end_date=end_date))

    def payroll_trends(self, *, end_period: Optional[str] = None, months: int = 6) -> list[PayrollTrend]:
        """Trend over the last `months` periods ending at end_period (inclusive)."""
        if months < 1:
            raise ValidationError("Jumlah bulan minimal 1")
        period = require_period(end_period) if end_period else current_period(self._clock().date())

        periods = [period]
        for _ in range(months - 1):
            periods.append(previous_period(periods[-1]))
        summaries = [self._payroll.period_summary(p) for p in periods]
        return stats.calculate_payroll_trends(s for s in summaries if s.total_employees > 0)

    def role_costs(self, period: str) -> list[RoleCost]:
        return stats.calculate_role_costs(self._payroll.list_payrolls(period=period))

    def payroll_csv(self, period: str) -> str:
        return export.payroll_csv(self._payroll.list_payrolls(period=period))

    def dashboard_csv(self, *, start_date: date, end_date: date, range_label: Optional[str] = None) -> str:
        label = range_label or f"{start_date:%d/%m/%Y} - {end_date:%d/%m/%Y}"
        return export.dashboard_csv(self.dashboard(start_date=start_date, end_date=end_date), label)

    def dashboard(self, *, start_date: Optional[date] = None, end_date: Optional[date] = None) -> DashboardStats:
        """Figures for [start, end] compared with the same-length window right before it.

        Defaults to the current month.
        """
        if start_date is None or end_date is None:
            start_date, end_date = period_date_range(current_period(self._clock().date()))
        self._check_range(start_date, end_date)

        span = end_date - start_date
        prev_end = start_date - timedelta(days=1)
        prev_start = prev_end - span

        current_tx = self._transactions.list_transactions(start_date=start_date, end_date=end_date)
        previous_tx = self._transactions.list_transactions(start_date=prev_start, end_date=prev_end)
        current_exp = self._expenses.list_expenses(start_date=start_date, end_date=end_date)
        previous_exp = self._expenses.list_expenses(start_date=prev_start, end_date=prev_end)

        revenue = sum(t.jumlah for t in stats.billable(current_tx))
        previous_revenue = sum(t.jumlah for t in stats.billable(previous_tx))
        expenses = sum(e.amount for e in current_exp)
        previous_expenses = sum(e.amount for e in previous_exp)
        profit = revenue - expenses
        previous_profit = previous_revenue - previous_expenses

        active = sum(1 for t in self._transactions.list_transactions() if t.is_active_shipment)

        voyages = [v for v in self._voyages.list_voyages() if start_date <= v.departure_date <= end_date]
        linked_ids = sorted({tid for v in voyages for tid in v.transaction_ids})
        linked = {t.transaction_id: t for t in self._transactions.get_many(linked_ids)} if linked_ids else {}
        voyage_expenses = [e for v in voyages for e in self._expenses.list_expenses(voyage_id=v.voyage_id)]

        return DashboardStats(
            start_date=start_date,
            end_date=end_date,
            total_revenue=revenue,
            previous_revenue=previous_revenue,
            revenue_growth=stats.calculate_growth(revenue, previous_revenue),
            total_expenses=expenses,
            previous_expenses=previous_expenses,
            expenses_growth=stats.calculate_growth(expenses, previous_expenses),
            net_profit=profit,
            previous_profit=previous_profit,
            profit_growth=stats.calculate_growth(profit, previous_profit),
            active_shipments=active,
            status_counts=stats.status_counts(current_tx),
            top_clients=tuple(stats.top_clients(current_tx)),
            route_profitability=tuple(stats.route_profitability(voyages, linked, voyage_expenses)),
            period_stats=tuple(stats.period_breakdown(current_tx, current_exp, start_date, end_date)),
            recent_activity=tuple(stats.recent_activity(current_tx, current_exp)),
            receivables=self._invoices.receivables_summary(today=self._clock().date()),
        )
