from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime
from typing import Optional

from ..core.constants import BRANCH_INITIAL_COUNTERS
from ..core.enums import Branch
from ..core.exceptions import ValidationError


@dataclass(frozen=True)
class CounterScheme:
    """A numbering scheme: where the counter lives and how numbers look.

    `seed_last` is the value treated as already issued when the counter row
    does not exist yet, so the first allocation returns seed_last + 1.
    """

    key: str
    prefix: str
    width: int
    seed_last: int = 0

    def format(self, number: int) -> str:
        return f"{self.prefix}{int(number):0{self.width}d}"


@dataclass(frozen=True)
class CounterState:
    counter_key: str
    prefix: str
    current_number: int
    updated_at: Optional[datetime] = None


STT_GLOBAL = CounterScheme(key="stt:global", prefix="STT", width=6, seed_last=17641)
INVOICE_GLOBAL = CounterScheme(key="invoice:global", prefix="INV", width=6, seed_last=12365)
INVOICE_PKP = CounterScheme(key="invoice:global_pkp", prefix="INV-PKP", width=5, seed_last=5176)
VOYAGE = CounterScheme(key="voyage:global", prefix="VOY", width=3, seed_last=0)
EMPLOYEE = CounterScheme(key="employee:global", prefix="EMP-", width=3, seed_last=0)

FIXED_SCHEMES = {s.key: s for s in (STT_GLOBAL, INVOICE_GLOBAL, INVOICE_PKP, VOYAGE, EMPLOYEE)}


def stt_branch_scheme(branch: Branch | str) -> CounterScheme:
    try:
        branch_id = Branch(branch).value
    except ValueError:
        raise ValidationError(f"Cabang tidak dikenal: {branch}")
    return CounterScheme(
        key=f"stt:branch:{branch_id}",
        prefix="STT",
        width=6,
        seed_last=BRANCH_INITIAL_COUNTERS[branch_id],
    )


def monthly_invoice_scheme(issue_date: date) -> CounterScheme:
    """Consolidated client invoices: INV/2026/01/0001, restarting every month."""
    return CounterScheme(
        key=f"invoice:monthly:{issue_date.year}{issue_date.month:02d}",
        prefix=f"INV/{issue_date.year}/{issue_date.month:02d}/",
        width=4,
        seed_last=0,
    )


def scheme_for_key(key: str) -> CounterScheme:
    """Resolve a stored counter key back to its scheme (admin screens)."""
    if key in FIXED_SCHEMES:
        return FIXED_SCHEMES[key]
    if key.startswith("stt:branch:"):
        return stt_branch_scheme(key.rsplit(":", 1)[1])
    if key.startswith("invoice:monthly:"):
        stamp = key.rsplit(":", 1)[1]
        if len(stamp) != 6 or not stamp.isdigit():
            raise ValidationError(f"Counter tidak dikenal: {key}")
        return monthly_invoice_scheme(date(int(stamp[:4]), int(stamp[4:]), 1))
    raise ValidationError(f"Counter tidak dikenal: {key}")
