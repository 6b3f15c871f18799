from __future__ import annotations

import re
from typing import Optional

from ..core.exceptions import ValidationError

_PERIOD_RE = re.compile(r"^\d{4}-(0[1-9]|1[0-2])$")


def require_non_empty(value: Optional[str], field_name: str) -> str:
    if not value or not value.strip():
        raise ValidationError(f"{field_name} wajib diisi")
    return value.strip()


def require_min_length(value: Optional[str], field_name: str, min_len: int) -> str:
    if value is None or len(value) < min_len:
        raise ValidationError(f"{field_name} minimal {min_len} karakter")
    return value


def require_non_negative(value, field_name: str) -> int:
    try:
        number = int(value)
    except (TypeError, ValueError):
        raise ValidationError(f"{field_name} harus berupa angka")
    if number < 0:
        raise ValidationError(f"{field_name} tidak boleh negatif")
    return number


def require_period(value: Optional[str]) -> str:
    """Period must look like YYYY-MM."""
    v = (value or "").strip()
    if not _PERIOD_RE.match(v):
        raise ValidationError("Periode tidak valid (format YYYY-MM)")
    return v


def optional_str(value: Optional[str]) -> Optional[str]:
    v = (value or "").strip()
    return v or None
