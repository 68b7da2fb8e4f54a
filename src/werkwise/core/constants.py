"""Constants and defaults.

Note: Keep constants here to avoid magic numbers spread across code.
"""

DEFAULT_SESSION_DAYS = 7
DEFAULT_LIST_LIMIT = 200

# Time registrations
MAX_HOURS_PER_DAY = 24
DEFAULT_MIN_DAILY_HOURS = 8
DEFAULT_MIN_WEEKLY_HOURS = 40

# Vacation
HOURS_PER_VACATION_DAY = 8

# Invoicing
VAT_RATE = 0.21
DEFAULT_HOURLY_RATE_SALE = 50.0

# Agent portal
LEAD_VALUE = 300
DEFAULT_AGENT_COMMISSION = 10
FINANCE_HISTORY_MONTHS = 6
RECENT_LEADS_LIMIT = 5
MONTHLY_TOP_LIMIT = 3

# Activity monitoring
INACTIVITY_THRESHOLD_DAYS = 30

# Exports
DEFAULT_CSV_SEPARATOR = ";"
ALLOWED_CSV_SEPARATORS = (",", ";")

DEFAULT_APP_URL = "http://localhost:5000"
