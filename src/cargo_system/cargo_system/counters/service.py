from __future__ import annotations

from datetime import date
from typing import Optional, Sequence

from ..core.enums import Branch
from ..core.exceptions import CounterError, ValidationError
from ..core.logger import logger
from .model import (
    EMPLOYEE,
    INVOICE_GLOBAL,
    INVOICE_PKP,
    STT_GLOBAL,
    VOYAGE,
    CounterScheme,
    CounterState,
    monthly_invoice_scheme,
    scheme_for_key,
    stt_branch_scheme,
)
from .repository import CounterRepository


class CounterService:
    """Sequential number allocation (STT, invoices, voyages, employee ids).

    Every scope has its own key, so branch STT numbers and the global STT
    sequence never share values.
    """

    def __init__(self, counters: CounterRepository):
        self._counters = counters

    def allocate(self, scheme: CounterScheme) -> str:
        try:
            number = self._counters.allocate(key=scheme.key, prefix=scheme.prefix, seed_last=scheme.seed_last)
        except Exception as e:
            logger.error(f"Counter allocation failed for {scheme.key}: {e}")
            raise CounterError(f"Gagal membuat nomor urut ({scheme.key})") from e

        formatted = scheme.format(number)
        logger.info(f"Allocated {formatted} from {scheme.key}")
        return formatted

    def peek(self, scheme: CounterScheme) -> str:
        """Next number for preview; nothing is reserved."""
        state = self._counters.get(scheme.key)
        current = state.current_number if state else scheme.seed_last
        return scheme.format(max(scheme.seed_last, current) + 1)

    @staticmethod
    def _stt_scheme(branch: Optional[Branch | str]) -> CounterScheme:
        return stt_branch_scheme(branch) if branch else STT_GLOBAL

    def next_stt_number(self, branch: Optional[Branch | str] = None) -> str:
        return self.allocate(self._stt_scheme(branch))

    def peek_stt_number(self, branch: Optional[Branch | str] = None) -> str:
        return self.peek(self._stt_scheme(branch))

    def next_invoice_number(self, *, is_pkp: bool = False) -> str:
        return self.allocate(INVOICE_PKP if is_pkp else INVOICE_GLOBAL)

    def peek_invoice_number(self, *, is_pkp: bool = False) -> str:
        return self.peek(INVOICE_PKP if is_pkp else INVOICE_GLOBAL)

    def next_monthly_invoice_number(self, issue_date: date) -> str:
        return self.allocate(monthly_invoice_scheme(issue_date))

    def next_voyage_number(self) -> str:
        return self.allocate(VOYAGE)

    def next_employee_id(self) -> str:
        return self.allocate(EMPLOYEE)

    def reset(self, key: str) -> bool:
        """Delete the counter row; the next allocation starts again from the seed."""
        scheme_for_key(key)
        deleted = self._counters.delete(key)
        logger.warning(f"Counter {key} reset (existed={deleted})")
        return deleted

    def set_current(self, key: str, value: int) -> None:
        """Administrative override of the last issued number."""
        scheme = scheme_for_key(key)
        try:
            value = int(value)
        except (TypeError, ValueError):
            raise ValidationError("Nilai counter harus berupa angka")
        if value < 0:
            raise ValidationError("Nilai counter tidak boleh negatif")

        self._counters.set_value(key=key, prefix=scheme.prefix, value=value)
        logger.warning(f"Counter {key} set to {value}")

    def list_counters(self) -> Sequence[CounterState]:
        return self._counters.list_all()
