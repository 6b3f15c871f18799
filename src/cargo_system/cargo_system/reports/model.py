from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date
from typing import Optional

from ..core.enums import Role, TransactionStatus
from ..invoices.model import ReceivablesSummary


@dataclass(frozen=True)
class EmployeeAttendanceBreakdown:
    employee_id: str
    employee_name: str
    days_present: int
    days_late: int
    days_absent: int
    days_leave: int
    overtime_count: int
    total_hours: float
    attendance_rate: float


@dataclass(frozen=True)
class AttendanceStats:
    start_date: date
    end_date: date
    total_employees: int
    total_working_days: int
    attendance_rate: float
    total_overtime_events: int
    total_late_checkins: int
    employee_breakdown: tuple[EmployeeAttendanceBreakdown, ...] = ()


@dataclass(frozen=True)
class PayrollTrend:
    period: str
    total_gross_pay: int
    total_net_pay: int
    employee_count: int
    average_per_employee: int
    change_from_previous: Optional[float] = None


@dataclass(frozen=True)
class RoleCost:
    role: Role
    total_cost: int
    employee_count: int
    percentage: float


@dataclass(frozen=True)
class ClientRevenue:
    name: str
    revenue: int
    transaction_count: int


@dataclass(frozen=True)
class RouteProfit:
    route: str
    revenue: int
    expenses: int
    profit: int
    margin: float
    voyage_count: int


@dataclass(frozen=True)
class PeriodFigures:
    """Revenue and expenses for one chart bucket (a day, or a month on long ranges)."""

    key: str
    label: str
    revenue: int
    expenses: int


@dataclass(frozen=True)
class ActivityItem:
    kind: str
    description: str
    amount: int
    activity_date: date
    status: Optional[str] = None


@dataclass(frozen=True)
class DashboardStats:
    start_date: date
    end_date: date
    total_revenue: int
    previous_revenue: int
    revenue_growth: float
    total_expenses: int
    previous_expenses: int
    expenses_growth: float
    net_profit: int
    previous_profit: int
    profit_growth: float
    active_shipments: int
    status_counts: dict[TransactionStatus, int] = field(default_factory=dict)
    top_clients: tuple[ClientRevenue, ...] = ()
    route_profitability: tuple[RouteProfit, ...] = ()
    period_stats: tuple[PeriodFigures, ...] = ()
    recent_activity: tuple[ActivityItem, ...] = ()
    receivables: Optional[ReceivablesSummary] = None
