from datetime import date

from src.cargo_system.cargo_system.attendance.model import AttendanceDay
from src.cargo_system.cargo_system.core.enums import AttendanceStatus, CommissionType, DeductionType
from src.cargo_system.cargo_system.employees.model import SalaryConfig
from src.cargo_system.cargo_system.payroll.calculator.standard_calculator import StandardPayrollCalculator
from src.cargo_system.cargo_system.payroll.model import Deduction


def _day(d, status, overtime=0):
    return AttendanceDay(employee_id="EMP-001", work_date=date(2026, 1, d), status=status, overtime_count=overtime)


def test_allowance_counts_present_and_late_days_only():
    salary = SalaryConfig(base_salary=3_000_000, allowance=50_000)
    days = [
        _day(5, AttendanceStatus.PRESENT, overtime=2),
        _day(6, AttendanceStatus.LATE),
        _day(7, AttendanceStatus.ABSENT),
        _day(8, AttendanceStatus.LEAVE),
    ]

    b = StandardPayrollCalculator().calculate(salary=salary, attendance=days, total_working_days=27)

    assert b.days_worked == 2
    assert b.total_allowance == 100_000
    assert b.overtime_events == 2
    assert b.total_overtime == 100_000
    assert b.gross_pay == 3_200_000
    assert b.attendance_rate == 7.4


def test_zero_working_days_gives_zero_rate():
    b = StandardPayrollCalculator().calculate(salary=SalaryConfig(base_salary=1_000_000, allowance=40_000), attendance=[])

    assert b.total_allowance == 0
    assert b.attendance_rate == 0.0
    assert b.gross_pay == 1_000_000


def test_deductions_reduce_net_pay():
    deductions = [Deduction(DeductionType.TAX, 150_000), Deduction(DeductionType.ADVANCE, 250_000, "Kasbon Januari")]
    b = StandardPayrollCalculator().calculate(
        salary=SalaryConfig(base_salary=2_000_000),
        attendance=[],
        deductions=deductions,
    )

    assert b.total_deductions == 400_000
    assert b.net_pay == 1_600_000


def test_commission_fixed_per_trip_and_percentage_of_revenue():
    fixed = SalaryConfig(trip_commission=75_000, commission_type=CommissionType.FIXED)
    percent = SalaryConfig(trip_commission=2.5, commission_type=CommissionType.PERCENTAGE)

    assert StandardPayrollCalculator.commission(fixed, trips_completed=4, trip_revenue=0) == 300_000
    assert StandardPayrollCalculator.commission(percent, trips_completed=0, trip_revenue=10_000_000) == 250_000
    assert StandardPayrollCalculator.commission(percent, trips_completed=3, trip_revenue=0) == 0


def test_custom_overtime_rate():
    b = StandardPayrollCalculator(overtime_rate=60_000).calculate(
        salary=SalaryConfig(),
        attendance=[_day(5, AttendanceStatus.PRESENT, overtime=3)],
    )
    assert b.total_overtime == 180_000
