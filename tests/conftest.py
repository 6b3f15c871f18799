from __future__ import annotations

from datetime import datetime

import pytest


@pytest.fixture
def fixed_now():
    """Clock pinned to Tuesday 2026-01-20 10:00 local time."""
    now = datetime(2026, 1, 20, 10, 0, 0)
    return lambda: now
