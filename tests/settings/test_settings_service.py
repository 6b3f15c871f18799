from __future__ import annotations

import pytest

from src.cargo_system.cargo_system.core.exceptions import ValidationError
from src.cargo_system.cargo_system.settings.service import SettingsService


class InMemorySettings:
    def __init__(self):
        self.saved = None

    def get_tax_settings(self):
        return self.saved

    def save_tax_settings(self, settings):
        self.saved = settings


def test_defaults_when_nothing_saved():
    settings = SettingsService(InMemorySettings()).get_tax_settings()
    assert settings.is_pkp is False
    assert settings.default_ppn_rate == 0.11


def test_update_tax_settings_validates_rate():
    service = SettingsService(InMemorySettings())
    with pytest.raises(ValidationError):
        service.update_tax_settings(company_name="Cahaya Cargo", default_ppn_rate=11)

    service.update_tax_settings(company_name="Cahaya Cargo", npwp="01.234", is_pkp=True, default_ppn_rate="0.12")
    saved = service.get_tax_settings()
    assert saved.is_pkp is True
    assert saved.default_ppn_rate == 0.12
    assert saved.npwp == "01.234"
