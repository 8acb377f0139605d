"""Constants and defaults.

Note: Keep constants here to avoid magic numbers spread across code.
"""

from decimal import Decimal

DEFAULT_SESSION_DAYS = 7

# Password reset links stay valid for one hour
RESET_TOKEN_MAX_AGE = 3600
DEFAULT_HISTORY_DAYS = 30

# Monday=0 ... Sunday=6
WEEKEND_DAYS = frozenset({5, 6})

HOURS_QUANTUM = Decimal("0.01")
SECONDS_PER_HOUR = Decimal(3600)

UNASSIGNED_POD = "Unassigned"
