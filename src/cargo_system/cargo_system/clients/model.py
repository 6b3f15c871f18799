from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Optional


@dataclass(frozen=True)
class Client:
    """Pelanggan: dipakai sebagai pengirim/penerima dan penerima tagihan."""

    client_id: int
    name: str
    phone: Optional[str] = None
    address: Optional[str] = None
    city: Optional[str] = None
    email: Optional[str] = None
    notes: Optional[str] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    def matches(self, term: str) -> bool:
        term = term.lower()
        return any(term in (v or "").lower() for v in (self.name, self.phone, self.city, self.address))
