from __future__ import annotations

import threading
from concurrent.futures import ThreadPoolExecutor
from typing import Optional

import pytest

from src.cargo_system.cargo_system.core.exceptions import CounterError, ValidationError
from src.cargo_system.cargo_system.counters.model import CounterState, scheme_for_key
from src.cargo_system.cargo_system.counters.service import CounterService


class InMemoryCounters:
    """Row-lock stand-in: one lock serialises read-compute-write per call."""

    def __init__(self):
        self._rows: dict[str, CounterState] = {}
        self._lock = threading.Lock()

    def allocate(self, *, key: str, prefix: str, seed_last: int) -> int:
        with self._lock:
            row = self._rows.get(key)
            current = row.current_number if row else seed_last
            next_number = max(seed_last, current) + 1
            self._rows[key] = CounterState(counter_key=key, prefix=prefix, current_number=next_number)
            return next_number

    def get(self, key: str) -> Optional[CounterState]:
        return self._rows.get(key)

    def set_value(self, *, key: str, prefix: str, value: int) -> None:
        self._rows[key] = CounterState(counter_key=key, prefix=prefix, current_number=value)

    def delete(self, key: str) -> bool:
        return self._rows.pop(key, None) is not None

    def list_all(self):
        return sorted(self._rows.values(), key=lambda s: s.counter_key)


class BrokenCounters(InMemoryCounters):
    def allocate(self, *, key: str, prefix: str, seed_last: int) -> int:
        raise ConnectionError("database unavailable")


def test_first_branch_stt_continues_after_seed():
    svc = CounterService(InMemoryCounters())
    assert svc.next_stt_number("surabaya") == "STT017642"
    assert svc.next_stt_number("surabaya") == "STT017643"
    assert svc.next_stt_number("bandung") == "STT001033"


def test_scopes_do_not_share_values():
    svc = CounterService(InMemoryCounters())
    svc.next_stt_number("surabaya")
    assert svc.next_stt_number() == "STT017642"
    assert svc.next_invoice_number() == "INV012366"
    assert svc.next_invoice_number(is_pkp=True) == "INV-PKP05177"


def test_peek_does_not_reserve():
    svc = CounterService(InMemoryCounters())
    assert svc.peek_stt_number("bandung") == "STT001033"
    assert svc.peek_stt_number("bandung") == "STT001033"
    assert svc.next_stt_number("bandung") == "STT001033"
    assert svc.peek_stt_number("bandung") == "STT001034"


def test_seed_wins_over_lower_stored_value():
    repo = InMemoryCounters()
    repo.set_value(key="stt:branch:surabaya", prefix="STT", value=5)
    assert CounterService(repo).next_stt_number("surabaya") == "STT017642"


def test_concurrent_allocations_are_distinct_and_gapless():
    svc = CounterService(InMemoryCounters())
    with ThreadPoolExecutor(max_workers=8) as pool:
        numbers = list(pool.map(lambda _: svc.next_voyage_number(), range(50)))

    assert len(set(numbers)) == 50
    assert sorted(numbers) == [f"VOY{i:03d}" for i in range(1, 51)]


def test_storage_failure_raises_instead_of_inventing_a_number():
    svc = CounterService(BrokenCounters())
    with pytest.raises(CounterError):
        svc.next_stt_number("surabaya")


def test_monthly_invoice_restarts_each_month():
    from datetime import date

    svc = CounterService(InMemoryCounters())
    assert svc.next_monthly_invoice_number(date(2026, 1, 5)) == "INV/2026/01/0001"
    assert svc.next_monthly_invoice_number(date(2026, 1, 9)) == "INV/2026/01/0002"
    assert svc.next_monthly_invoice_number(date(2026, 2, 1)) == "INV/2026/02/0001"


def test_reset_and_set_current():
    repo = InMemoryCounters()
    svc = CounterService(repo)
    svc.next_employee_id()
    assert svc.reset("employee:global") is True
    assert svc.next_employee_id() == "EMP-001"

    svc.set_current("stt:global", 20000)
    assert svc.next_stt_number() == "STT020001"

    with pytest.raises(ValidationError):
        svc.set_current("stt:global", -1)
    with pytest.raises(ValidationError):
        svc.reset("nope")


def test_scheme_for_key_resolves_dynamic_keys():
    assert scheme_for_key("stt:branch:bandung").seed_last == 1032
    assert scheme_for_key("invoice:monthly:202601").prefix == "INV/2026/01/"
    with pytest.raises(ValidationError):
        scheme_for_key("stt:branch:jakarta")
