from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from ..core.constants import DEFAULT_PPN_RATE


@dataclass(frozen=True)
class TaxSettings:
    """Pengaturan pajak perusahaan (PKP & tarif PPN)."""

    company_name: str = "Cahaya Cargo"
    npwp: Optional[str] = None
    address: Optional[str] = None
    is_pkp: bool = False
    default_ppn_rate: float = DEFAULT_PPN_RATE
