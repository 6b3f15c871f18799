from __future__ import annotations

from typing import Optional

from ..common.validators import optional_str, require_non_empty
from ..core.exceptions import ValidationError
from ..core.logger import logger
from .model import TaxSettings
from .repository import SettingsRepository


class SettingsService:
    def __init__(self, settings: SettingsRepository):
        self._settings = settings

    def get_tax_settings(self) -> TaxSettings:
        """Stored settings, or defaults (non-PKP, PPN 11%) when none were saved."""
        return self._settings.get_tax_settings() or TaxSettings()

    def update_tax_settings(
        self,
        *,
        company_name: str,
        npwp: Optional[str] = None,
        address: Optional[str] = None,
        is_pkp: bool = False,
        default_ppn_rate: float = 0.11,
    ) -> TaxSettings:
        try:
            rate = float(default_ppn_rate)
        except (TypeError, ValueError):
            raise ValidationError("Tarif PPN tidak valid")
        if rate < 0 or rate >= 1:
            raise ValidationError("Tarif PPN harus antara 0 dan 1 (contoh 0.11)")

        settings = TaxSettings(
            company_name=require_non_empty(company_name, "Nama perusahaan"),
            npwp=optional_str(npwp),
            address=optional_str(address),
            is_pkp=bool(is_pkp),
            default_ppn_rate=rate,
        )
        self._settings.save_tax_settings(settings)
        logger.info(f"Tax settings updated (is_pkp={settings.is_pkp}, ppn={settings.default_ppn_rate})")
        return settings
