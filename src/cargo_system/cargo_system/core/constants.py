"""Constants and defaults.

Note: Keep constants here to avoid magic numbers spread across code.
"""

from datetime import time

DEFAULT_SESSION_DAYS = 7

# Attendance
LATE_THRESHOLD = time(9, 15)

# Payroll
OVERTIME_RATE_PER_EVENT = 50_000
MAX_DAYS_IN_MONTH = 31

# Employees
EMPLOYEE_EMAIL_DOMAIN = "cahayacargo.com"
DEFAULT_PASSWORD_SUFFIX = "2026"
DOCUMENT_EXPIRY_WARNING_DAYS = 30

# Tax
DEFAULT_PPN_RATE = 0.11

# Dashboard
TOP_CLIENTS_LIMIT = 5
RECENT_ACTIVITY_LIMIT = 10
DAILY_BREAKDOWN_MAX_DAYS = 31

# Branches: last STT number issued before this system took over numbering.
BRANCH_INITIAL_COUNTERS = {
    "surabaya": 17641,
    "bandung": 1032,
}
