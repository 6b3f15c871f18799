from datetime import date, datetime, timedelta, timezone

import pytest

from src.cargo_system.cargo_system.common.datetime_utils import (
    count_working_days,
    date_range_preset,
    format_period,
    now_local,
    period_date_range,
    previous_period,
)
from src.cargo_system.cargo_system.core.exceptions import ValidationError


def test_count_working_days_skips_sundays():
    # January 2026 has 4 Sundays (4, 11, 18, 25)
    assert count_working_days(date(2026, 1, 1), date(2026, 1, 31)) == 27


def test_count_working_days_inverted_range_is_zero():
    assert count_working_days(date(2026, 1, 10), date(2026, 1, 1)) == 0


def test_period_helpers():
    assert previous_period("2026-01") == "2025-12"
    assert previous_period("2026-03") == "2026-02"
    assert period_date_range("2024-02") == (date(2024, 2, 1), date(2024, 2, 29))
    assert format_period("2026-01") == "Januari 2026"


def test_date_range_preset():
    today = date(2026, 1, 20)
    assert date_range_preset("today", today) == (today, today)
    assert date_range_preset("this_week", today) == (date(2026, 1, 19), date(2026, 1, 25))
    assert date_range_preset("last_month", today) == (date(2025, 12, 1), date(2025, 12, 31))
    with pytest.raises(ValidationError):
        date_range_preset("forever", today)


def test_now_local_is_naive_western_indonesia_time():
    before = datetime.now(timezone.utc).replace(tzinfo=None) + timedelta(hours=7)
    now = now_local()
    after = datetime.now(timezone.utc).replace(tzinfo=None) + timedelta(hours=7)

    assert now.tzinfo is None
    assert before <= now <= after
