from __future__ import annotations

from typing import Optional, Protocol

from .model import TaxSettings


class SettingsRepository(Protocol):
    def get_tax_settings(self) -> Optional[TaxSettings]:
        raise NotImplementedError

    def save_tax_settings(self, settings: TaxSettings) -> None:
        raise NotImplementedError
