from __future__ import annotations

import importlib
from pathlib import Path

from dotenv import load_dotenv
from flask import Flask, request

from config import get_settings_module

from .attendance.controller import register as register_attendance
from .clients.controller import register as register_clients
from .common.web import json_error
from .container import build_container
from .core.logger import logger, setup_logger
from .counters.controller import register as register_counters
from .database.bootstrap import apply_schema, apply_seed_sql, ensure_owner_account, list_tables
from .employees.controller import register as register_employees
from .expenses.controller import register as register_expenses
from .fleet.controller import register as register_fleet
from .invoices.controller import register as register_invoices
from .payroll.controller import register as register_payroll
from .reports.controller import register as register_reports
from .settings.controller import register as register_settings
from .transactions.controller import register as register_transactions
from .voyages.controller import register as register_voyages

ROOT_DIR = Path(__file__).resolve().parents[3]


def create_app() -> Flask:
    load_dotenv(override=False)
    app = Flask(__name__)

    settings_module = get_settings_module()
    settings = importlib.import_module(settings_module)
    app.secret_key = getattr(settings, "SECRET_KEY")
    db_config = getattr(settings, "DB_CONFIG")
    app.config["DEBUG"] = bool(getattr(settings, "DEBUG", False))
    app.config["TESTING"] = bool(getattr(settings, "TESTING", False))
    app.config["DEFAULT_BRANCH"] = getattr(settings, "DEFAULT_BRANCH", "")

    setup_logger(
        level=getattr(settings, "LOG_LEVEL", "INFO"),
        log_file=getattr(settings, "LOG_FILE", "./logs/cargo.log"),
    )
    logger.info(
        f"settings={settings_module} db={db_config.get('user')}@{db_config.get('host')}:"
        f"{db_config.get('port', 3306)}/{db_config.get('database')}"
    )

    if bool(getattr(settings, "AUTO_INIT_DB", False)):
        apply_schema(db_config, schema_path=ROOT_DIR / "database" / "schema.sql")
        logger.info(f"Schema ready (tables={len(list_tables(db_config))})")
    if bool(getattr(settings, "AUTO_SEED_DB", False)):
        apply_seed_sql(db_config, seed_path=ROOT_DIR / "database" / "seed.sql")
        ensure_owner_account(db_config)

    container = build_container(db_config=db_config)

    register_employees(app, container)
    register_clients(app, container)
    register_transactions(app, container)
    register_invoices(app, container)
    register_voyages(app, container)
    register_expenses(app, container)
    register_fleet(app, container)
    register_attendance(app, container)
    register_payroll(app, container)
    register_reports(app, container)
    register_settings(app, container)
    register_counters(app, container)

    @app.errorhandler(404)
    def not_found(_e):
        return json_error("Halaman tidak ditemukan", 404)

    @app.errorhandler(500)
    def server_error(_e):
        logger.exception(f"{request.method} {request.path} failed")
        return json_error("Terjadi kesalahan pada server", 500)

    return app
