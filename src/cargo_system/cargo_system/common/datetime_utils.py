from __future__ import annotations

import calendar
from datetime import date, datetime, timedelta, timezone
from typing import Optional

from ..core.exceptions import ValidationError

WIB = timezone(timedelta(hours=7), "WIB")

MONTH_NAMES_ID = [
    "Januari",
    "Februari",
    "Maret",
    "April",
    "Mei",
    "Juni",
    "Juli",
    "Agustus",
    "September",
    "Oktober",
    "November",
    "Desember",
]


def parse_iso_date(value: str) -> date:
    """Parse YYYY-MM-DD string into date."""
    try:
        return datetime.strptime(value, "%Y-%m-%d").date()
    except (TypeError, ValueError):
        raise ValidationError("Tanggal tidak valid (format YYYY-MM-DD)")


def parse_optional_date(value: Optional[str]) -> Optional[date]:
    v = (value or "").strip()
    return parse_iso_date(v) if v else None


def now_local() -> datetime:
    """Current wall-clock time in Western Indonesia Time, as a naive datetime.

    Note: Wrapped so tests can patch/mocked easier.
    """
    return datetime.now(WIB).replace(tzinfo=None)


def iter_days(start: date, end: date):
    current = start
    while current <= end:
        yield current
        current += timedelta(days=1)


def count_working_days(start: date, end: date) -> int:
    """Calendar days in [start, end] excluding Sundays; 0 for an inverted range."""
    return sum(1 for d in iter_days(start, end) if d.weekday() != calendar.SUNDAY)


def current_period(today: Optional[date] = None) -> str:
    today = today or now_local().date()
    return f"{today.year}-{today.month:02d}"


def _split_period(period: str) -> tuple[int, int]:
    year_s, month_s = period.split("-")
    return int(year_s), int(month_s)


def previous_period(period: str) -> str:
    year, month = _split_period(period)
    if month == 1:
        return f"{year - 1}-12"
    return f"{year}-{month - 1:02d}"


def period_date_range(period: str) -> tuple[date, date]:
    """First and last day of a YYYY-MM period."""
    year, month = _split_period(period)
    last_day = calendar.monthrange(year, month)[1]
    return date(year, month, 1), date(year, month, last_day)


def format_period(period: str) -> str:
    """'2026-01' -> 'Januari 2026'."""
    year, month = _split_period(period)
    return f"{MONTH_NAMES_ID[month - 1]} {year}"


def date_range_preset(preset: str, today: Optional[date] = None) -> tuple[date, date]:
    """Named ranges used by report filters: today, this_week, this_month, last_month."""
    today = today or now_local().date()
    if preset == "today":
        return today, today
    if preset == "this_week":
        start = today - timedelta(days=today.weekday())
        return start, start + timedelta(days=6)
    if preset == "this_month":
        return period_date_range(current_period(today))
    if preset == "last_month":
        return period_date_range(previous_period(current_period(today)))
    raise ValidationError(f"Rentang tanggal tidak dikenal: {preset}")
