"""Pure aggregation helpers behind the report screens.

Percentages are rounded to one decimal; money stays in whole Rupiah.
"""

from __future__ import annotations

from collections import defaultdict
from datetime import date
from typing import Iterable, Mapping, Optional, Sequence

from ..attendance.model import AttendanceDay
from ..common.datetime_utils import count_working_days
from ..core.constants import DAILY_BREAKDOWN_MAX_DAYS, RECENT_ACTIVITY_LIMIT, TOP_CLIENTS_LIMIT
from ..core.enums import AttendanceStatus, TransactionStatus
from ..employees.model import Employee
from ..expenses.model import EXPENSE_CATEGORY_LABELS, Expense, parse_category
from ..payroll.model import PayrollRecord, PeriodSummary
from ..transactions.model import Transaction
from ..voyages.model import Voyage
from .model import (
    ActivityItem,
    AttendanceStats,
    ClientRevenue,
    EmployeeAttendanceBreakdown,
    PayrollTrend,
    PeriodFigures,
    RoleCost,
    RouteProfit,
)

MONTH_ABBREVIATIONS = ("Jan", "Feb", "Mar", "Apr", "Mei", "Jun", "Jul", "Agu", "Sep", "Okt", "Nov", "Des")


def percentage(part: float, whole: float) -> float:
    """part / whole * 100 rounded to one decimal; 0 when whole is 0."""
    if not whole:
        return 0.0
    return round(part / whole * 100, 1)


def calculate_growth(current: int, previous: int) -> float:
    if previous == 0:
        return 100.0 if current > 0 else 0.0
    return round((current - previous) / previous * 100, 1)


def calculate_attendance_stats(
    days: Iterable[AttendanceDay],
    employees: Sequence[Employee],
    start_date: date,
    end_date: date,
) -> AttendanceStats:
    working_days = count_working_days(start_date, end_date)

    by_employee: dict[str, list[AttendanceDay]] = defaultdict(list)
    for d in days:
        by_employee[d.employee_id].append(d)

    breakdown = []
    for emp in employees:
        records = by_employee.get(emp.employee_id, [])
        counts = {s: 0 for s in AttendanceStatus}
        for r in records:
            counts[r.status] += 1
        present = counts[AttendanceStatus.PRESENT]
        late = counts[AttendanceStatus.LATE]
        breakdown.append(
            EmployeeAttendanceBreakdown(
                employee_id=emp.employee_id,
                employee_name=emp.full_name,
                days_present=present,
                days_late=late,
                days_absent=counts[AttendanceStatus.ABSENT],
                days_leave=counts[AttendanceStatus.LEAVE],
                overtime_count=sum(r.overtime_count for r in records),
                total_hours=round(sum(r.total_hours for r in records), 1),
                attendance_rate=percentage(present + late, working_days),
            )
        )

    attended = sum(b.days_present + b.days_late for b in breakdown)
    return AttendanceStats(
        start_date=start_date,
        end_date=end_date,
        total_employees=len(employees),
        total_working_days=working_days,
        attendance_rate=percentage(attended, len(employees) * working_days),
        total_overtime_events=sum(b.overtime_count for b in breakdown),
        total_late_checkins=sum(b.days_late for b in breakdown),
        employee_breakdown=tuple(breakdown),
    )


def calculate_payroll_trends(summaries: Iterable[PeriodSummary]) -> list[PayrollTrend]:
    """Oldest period first; change is against the previous listed period's net pay."""
    ordered = sorted(summaries, key=lambda s: s.period)
    trends = []
    previous: Optional[PeriodSummary] = None
    for s in ordered:
        change = None
        if previous is not None and previous.total_net_pay > 0:
            change = round((s.total_net_pay - previous.total_net_pay) / previous.total_net_pay * 100, 1)
        average = round(s.total_net_pay / s.total_employees) if s.total_employees else 0
        trends.append(
            PayrollTrend(
                period=s.period,
                total_gross_pay=s.total_gross_pay,
                total_net_pay=s.total_net_pay,
                employee_count=s.total_employees,
                average_per_employee=average,
                change_from_previous=change,
            )
        )
        previous = s
    return trends


def calculate_role_costs(records: Iterable[PayrollRecord]) -> list[RoleCost]:
    totals: dict = defaultdict(lambda: [0, 0])
    for r in records:
        totals[r.role][0] += r.net_pay
        totals[r.role][1] += 1

    grand_total = sum(cost for cost, _ in totals.values())
    costs = [
        RoleCost(role=role, total_cost=cost, employee_count=count, percentage=percentage(cost, grand_total))
        for role, (cost, count) in totals.items()
    ]
    return sorted(costs, key=lambda c: c.total_cost, reverse=True)


def billable(transactions: Iterable[Transaction]) -> list[Transaction]:
    return [t for t in transactions if t.status != TransactionStatus.DIBATALKAN]


def status_counts(transactions: Iterable[Transaction]) -> dict[TransactionStatus, int]:
    counts = {s: 0 for s in TransactionStatus}
    for t in transactions:
        counts[t.status] += 1
    return counts


def top_clients(transactions: Iterable[Transaction], limit: int = TOP_CLIENTS_LIMIT) -> list[ClientRevenue]:
    """Senders ranked by revenue (cancelled shipments excluded)."""
    revenue: dict[str, list[int]] = defaultdict(lambda: [0, 0])
    for t in billable(transactions):
        name = t.pengirim.name or "Unknown"
        revenue[name][0] += t.jumlah
        revenue[name][1] += 1

    ranked = sorted(revenue.items(), key=lambda kv: kv[1][0], reverse=True)
    return [ClientRevenue(name=name, revenue=total, transaction_count=count) for name, (total, count) in ranked[:limit]]


def route_profitability(
    voyages: Iterable[Voyage],
    transactions: Mapping[int, Transaction],
    expenses: Iterable[Expense],
) -> list[RouteProfit]:
    expense_by_voyage: dict[int, int] = defaultdict(int)
    for e in expenses:
        if e.voyage_id is not None:
            expense_by_voyage[e.voyage_id] += e.amount

    routes: dict[str, list[int]] = defaultdict(lambda: [0, 0, 0])
    for v in voyages:
        route = v.route or "-"
        linked = [transactions[tid] for tid in v.transaction_ids if tid in transactions]
        revenue = sum(t.jumlah for t in billable(linked))
        routes[route][0] += revenue
        routes[route][1] += expense_by_voyage.get(v.voyage_id, 0)
        routes[route][2] += 1

    result = [
        RouteProfit(
            route=route,
            revenue=revenue,
            expenses=cost,
            profit=revenue - cost,
            margin=percentage(revenue - cost, revenue),
            voyage_count=count,
        )
        for route, (revenue, cost, count) in routes.items()
    ]
    return sorted(result, key=lambda r: r.profit, reverse=True)


def period_breakdown(
    transactions: Iterable[Transaction],
    expenses: Iterable[Expense],
    start_date: date,
    end_date: date,
) -> list[PeriodFigures]:
    """Per-day figures for ranges up to a month, per-month figures beyond that.

    Only buckets that saw a transaction or an expense are listed.
    """
    daily = (end_date - start_date).days + 1 <= DAILY_BREAKDOWN_MAX_DAYS

    def bucket(d: date) -> tuple[str, str]:
        if daily:
            return d.isoformat(), str(d.day)
        return f"{d.year}-{d.month:02d}", MONTH_ABBREVIATIONS[d.month - 1]

    totals: dict[str, list] = {}
    for t in billable(transactions):
        key, label = bucket(t.tanggal)
        totals.setdefault(key, [label, 0, 0])[1] += t.jumlah
    for e in expenses:
        key, label = bucket(e.expense_date)
        totals.setdefault(key, [label, 0, 0])[2] += e.amount

    return [
        PeriodFigures(key=key, label=label, revenue=revenue, expenses=cost)
        for key, (label, revenue, cost) in sorted(totals.items())
    ]


def recent_activity(
    transactions: Iterable[Transaction],
    expenses: Iterable[Expense],
    limit: int = RECENT_ACTIVITY_LIMIT,
) -> list[ActivityItem]:
    """Latest shipments and expenses, newest first; expenses carry a negative amount."""
    items = [
        ActivityItem(
            kind="transaction",
            description=f"Kargo - {t.no_stt}",
            amount=t.jumlah,
            activity_date=t.tanggal,
            status=t.status.value,
        )
        for t in billable(transactions)
    ]
    items += [
        ActivityItem(
            kind="expense",
            description=f"Expense - {EXPENSE_CATEGORY_LABELS[parse_category(e.category)]}",
            amount=-e.amount,
            activity_date=e.expense_date,
            status="completed",
        )
        for e in expenses
    ]
    return sorted(items, key=lambda a: a.activity_date, reverse=True)[:limit]
