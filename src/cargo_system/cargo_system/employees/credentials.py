"""Generated login credentials for employee accounts.

email    = cleaned first name + "@cahayacargo.com"
password = cleaned first name + year suffix
"""

from __future__ import annotations

import re

from ..core.constants import DEFAULT_PASSWORD_SUFFIX, EMPLOYEE_EMAIL_DOMAIN
from ..core.exceptions import ValidationError

_NON_ALPHA = re.compile(r"[^a-z]")


def clean_first_name(full_name: str) -> str:
    parts = (full_name or "").strip().split()
    first = _NON_ALPHA.sub("", parts[0].lower()) if parts else ""
    if not first:
        raise ValidationError("Nama karyawan harus diawali huruf (a-z)")
    return first


def generate_employee_email(full_name: str) -> str:
    return f"{clean_first_name(full_name)}@{EMPLOYEE_EMAIL_DOMAIN}"


def generate_default_password(full_name: str) -> str:
    return f"{clean_first_name(full_name)}{DEFAULT_PASSWORD_SUFFIX}"


def generate_employee_credentials(full_name: str) -> tuple[str, str]:
    return generate_employee_email(full_name), generate_default_password(full_name)


def is_employee_email(email: str) -> bool:
    return (email or "").strip().lower().endswith(f"@{EMPLOYEE_EMAIL_DOMAIN}")
