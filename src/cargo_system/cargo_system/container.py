from __future__ import annotations

from dataclasses import dataclass

from .attendance.factory import AttendanceStrategyFactory
from .attendance.mysql_attendance_repository import MySQLAttendanceRepository
from .attendance.service import AttendanceService
from .clients.mysql_client_repository import MySQLClientRepository
from .clients.service import ClientService
from .counters.mysql_counter_repository import MySQLCounterRepository
from .counters.service import CounterService
from .database.connection import DBConfig, DatabaseConnection
from .employees.mysql_employee_repository import MySQLEmployeeRepository
from .employees.service import AuthService, EmployeeService
from .expenses.mysql_expense_repository import MySQLExpenseRepository
from .expenses.service import ExpenseService
from .fleet.mysql_fleet_repository import MySQLFleetRepository
from .fleet.service import FleetService
from .invoices.mysql_invoice_repository import MySQLInvoiceRepository
from .invoices.service import InvoiceService
from .payroll.calculator.standard_calculator import StandardPayrollCalculator
from .payroll.mysql_payroll_repository import MySQLPayrollRepository
from .payroll.service import PayrollService
from .reports.service import ReportService
from .settings.mysql_settings_repository import MySQLSettingsRepository
from .settings.service import SettingsService
from .transactions.mysql_transaction_repository import MySQLTransactionRepository
from .transactions.service import TransactionService
from .voyages.mysql_voyage_repository import MySQLVoyageRepository
from .voyages.service import VoyageService


@dataclass(frozen=True)
class Container:
    conn: DatabaseConnection

    counters_repo: MySQLCounterRepository
    clients_repo: MySQLClientRepository
    settings_repo: MySQLSettingsRepository
    transactions_repo: MySQLTransactionRepository
    invoices_repo: MySQLInvoiceRepository
    voyages_repo: MySQLVoyageRepository
    expenses_repo: MySQLExpenseRepository
    fleet_repo: MySQLFleetRepository
    employees_repo: MySQLEmployeeRepository
    attendance_repo: MySQLAttendanceRepository
    payroll_repo: MySQLPayrollRepository

    counter_service: CounterService
    client_service: ClientService
    settings_service: SettingsService
    transaction_service: TransactionService
    invoice_service: InvoiceService
    voyage_service: VoyageService
    expense_service: ExpenseService
    fleet_service: FleetService
    auth_service: AuthService
    employee_service: EmployeeService
    attendance_service: AttendanceService
    payroll_service: PayrollService
    report_service: ReportService


def build_container(*, db_config: dict) -> Container:
    conn = DatabaseConnection.get_instance(DBConfig.from_mapping(db_config))

    counters_repo = MySQLCounterRepository(conn)
    clients_repo = MySQLClientRepository(conn)
    settings_repo = MySQLSettingsRepository(conn)
    transactions_repo = MySQLTransactionRepository(conn)
    invoices_repo = MySQLInvoiceRepository(conn)
    voyages_repo = MySQLVoyageRepository(conn)
    expenses_repo = MySQLExpenseRepository(conn)
    fleet_repo = MySQLFleetRepository(conn)
    employees_repo = MySQLEmployeeRepository(conn)
    attendance_repo = MySQLAttendanceRepository(conn)
    payroll_repo = MySQLPayrollRepository(conn)

    counter_service = CounterService(counters_repo)
    client_service = ClientService(clients_repo)
    settings_service = SettingsService(settings_repo)
    transaction_service = TransactionService(transactions_repo, counter_service, settings_service, clients_repo)
    invoice_service = InvoiceService(invoices_repo, transactions_repo, counter_service)
    voyage_service = VoyageService(voyages_repo, transactions_repo, expenses_repo, counter_service)
    expense_service = ExpenseService(expenses_repo, voyages_repo)
    fleet_service = FleetService(fleet_repo)
    auth_service = AuthService(employees_repo)
    employee_service = EmployeeService(employees_repo, counter_service)
    attendance_service = AttendanceService(
        attendance_repo,
        employees_repo,
        strategy_factory=AttendanceStrategyFactory(),
    )
    payroll_service = PayrollService(
        payroll_repo,
        employees_repo,
        attendance_repo,
        calculator=StandardPayrollCalculator(),
    )
    report_service = ReportService(
        transactions=transactions_repo,
        expenses=expenses_repo,
        voyages=voyages_repo,
        employees=employees_repo,
        attendance=attendance_repo,
        payroll_service=payroll_service,
        invoice_service=invoice_service,
    )

    return Container(
        conn=conn,
        counters_repo=counters_repo,
        clients_repo=clients_repo,
        settings_repo=settings_repo,
        transactions_repo=transactions_repo,
        invoices_repo=invoices_repo,
        voyages_repo=voyages_repo,
        expenses_repo=expenses_repo,
        fleet_repo=fleet_repo,
        employees_repo=employees_repo,
        attendance_repo=attendance_repo,
        payroll_repo=payroll_repo,
        counter_service=counter_service,
        client_service=client_service,
        settings_service=settings_service,
        transaction_service=transaction_service,
        invoice_service=invoice_service,
        voyage_service=voyage_service,
        expense_service=expense_service,
        fleet_service=fleet_service,
        auth_service=auth_service,
        employee_service=employee_service,
        attendance_service=attendance_service,
        payroll_service=payroll_service,
        report_service=report_service,
    )
