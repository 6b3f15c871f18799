from datetime import date

from src.cargo_system.cargo_system.attendance.model import AttendanceDay
from src.cargo_system.cargo_system.core.enums import (
    AccountStatus,
    AttendanceStatus,
    EmployeeStatus,
    PayrollStatus,
    Role,
)
from src.cargo_system.cargo_system.employees.model import Employee
from src.cargo_system.cargo_system.payroll.model import PayrollBreakdown, PayrollRecord, PeriodSummary
from src.cargo_system.cargo_system.reports import export, stats


def _employee(employee_id, name):
    return Employee(
        employee_id=employee_id,
        full_name=name,
        role=Role.HELPER,
        status=EmployeeStatus.ACTIVE,
        join_date=date(2025, 1, 1),
        email=f"{name.lower()}@cahayacargo.com",
        account_status=AccountStatus.ACTIVE,
    )


def _record(employee_id, role, net):
    breakdown = PayrollBreakdown(
        days_worked=20,
        total_working_days=26,
        attendance_rate=76.9,
        base_salary=net,
        daily_allowance=0,
        total_allowance=0,
        trips_completed=0,
        total_commission=0,
        overtime_events=0,
        overtime_rate=50_000,
        total_overtime=0,
        gross_pay=net,
        total_deductions=0,
        net_pay=net,
    )
    return PayrollRecord(
        payroll_id=0,
        employee_id=employee_id,
        employee_name=employee_id,
        role=role,
        period="2026-01",
        breakdown=breakdown,
    )


def _summary(period, employees, net):
    return PeriodSummary(
        period=period,
        total_employees=employees,
        total_gross_pay=net,
        total_deductions=0,
        total_net_pay=net,
        status_counts={s: 0 for s in PayrollStatus},
    )


def test_growth_from_zero():
    assert stats.calculate_growth(500, 0) == 100.0
    assert stats.calculate_growth(0, 0) == 0.0
    assert stats.calculate_growth(1_000_000, 750_000) == 33.3
    assert stats.calculate_growth(500, 1000) == -50.0


def test_attendance_stats_rates():
    employees = [_employee("EMP-001", "Andi"), _employee("EMP-002", "Beni")]
    days = [
        AttendanceDay("EMP-001", date(2026, 1, 19), AttendanceStatus.PRESENT, total_hours=8.0, overtime_count=1),
        AttendanceDay("EMP-001", date(2026, 1, 20), AttendanceStatus.PRESENT, total_hours=8.25),
        AttendanceDay("EMP-002", date(2026, 1, 19), AttendanceStatus.LATE, total_hours=7.0),
        AttendanceDay("EMP-002", date(2026, 1, 20), AttendanceStatus.ABSENT),
    ]

    result = stats.calculate_attendance_stats(days, employees, date(2026, 1, 19), date(2026, 1, 20))

    assert result.total_working_days == 2
    assert result.attendance_rate == 75.0
    assert result.total_late_checkins == 1
    assert result.total_overtime_events == 1
    andi, beni = result.employee_breakdown
    assert andi.attendance_rate == 100.0
    assert andi.total_hours == 16.2
    assert beni.attendance_rate == 50.0
    assert beni.days_absent == 1


def test_attendance_stats_with_no_working_days():
    employees = [_employee("EMP-001", "Andi")]
    # 2026-01-18 is a Sunday
    result = stats.calculate_attendance_stats([], employees, date(2026, 1, 18), date(2026, 1, 18))

    assert result.total_working_days == 0
    assert result.attendance_rate == 0.0
    assert result.employee_breakdown[0].attendance_rate == 0.0


def test_payroll_trends_oldest_first_with_change():
    trends = stats.calculate_payroll_trends([_summary("2026-01", 2, 11_000_000), _summary("2025-12", 2, 10_000_000)])

    assert [t.period for t in trends] == ["2025-12", "2026-01"]
    assert trends[0].change_from_previous is None
    assert trends[1].change_from_previous == 10.0
    assert trends[1].average_per_employee == 5_500_000


def test_role_costs_share_of_total():
    costs = stats.calculate_role_costs(
        [
            _record("EMP-001", Role.DRIVER, 3_000_000),
            _record("EMP-002", Role.DRIVER, 2_000_000),
            _record("EMP-003", Role.ADMIN, 6_000_000),
        ]
    )

    assert [(c.role, c.total_cost, c.employee_count, c.percentage) for c in costs] == [
        (Role.ADMIN, 6_000_000, 1, 54.5),
        (Role.DRIVER, 5_000_000, 2, 45.5),
    ]


def test_csv_exports_have_fixed_headers():
    employees = [_employee("EMP-001", "Andi")]
    days = [AttendanceDay("EMP-001", date(2026, 1, 19), AttendanceStatus.PRESENT, total_hours=8.0)]
    attendance = export.attendance_stats_csv(
        stats.calculate_attendance_stats(days, employees, date(2026, 1, 19), date(2026, 1, 20))
    )
    lines = attendance.split("\n")
    assert lines[0] == "Employee,Present,Late,Absent,Leave,Overtime,Hours,Rate"
    assert lines[1] == "Andi,1,0,0,0,0,8.0,50.0%"

    payroll = export.payroll_csv([_record("EMP-001", Role.DRIVER, 3_000_000)]).split("\n")
    assert payroll[0] == "Employee,Role,Days Worked,Base Salary,Allowance,Overtime,Gross Pay,Net Pay"
    assert payroll[1] == "EMP-001,driver,20,3000000,0,0,3000000,3000000"
