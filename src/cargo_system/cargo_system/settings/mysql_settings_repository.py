from __future__ import annotations

from dataclasses import asdict
from typing import Optional

from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchone, from_json, to_json
from .model import TaxSettings
from .repository import SettingsRepository

TAX_SETTINGS_KEY = "tax"


class MySQLSettingsRepository(SettingsRepository):
    """Key/value settings table; each value is a JSON document."""

    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def get_tax_settings(self) -> Optional[TaxSettings]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("SELECT setting_value FROM settings WHERE setting_key=%s", (TAX_SETTINGS_KEY,))
            r = fetchone(cur)
            if not r:
                return None
            data = from_json(r["setting_value"], {})
            defaults = TaxSettings()
            return TaxSettings(
                company_name=data.get("company_name") or defaults.company_name,
                npwp=data.get("npwp"),
                address=data.get("address"),
                is_pkp=bool(data.get("is_pkp", defaults.is_pkp)),
                default_ppn_rate=float(data.get("default_ppn_rate", defaults.default_ppn_rate)),
            )

    def save_tax_settings(self, settings: TaxSettings) -> None:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT INTO settings(setting_key, setting_value)
                VALUES(%s,%s)
                ON DUPLICATE KEY UPDATE setting_value=VALUES(setting_value)
                """,
                (TAX_SETTINGS_KEY, to_json(asdict(settings))),
            )
