"""Constants and defaults.

Note: Keep constants here to avoid magic numbers spread across code.
"""

MINUTES_PER_DAY = 24 * 60

DEFAULT_GRACE_MINUTES = 15
DEFAULT_TIMEZONE_OFFSET = "+05:00"
DEFAULT_COMPANY_DAY_CUTOFF = "08:55"

# Overnight shifts: check-in before 06:00 and check-out before 08:00 belong to
# the shift that started the previous evening.
EARLY_MORNING_CHECKIN_CUTOFF = 6 * 60
NIGHT_SHIFT_CHECKOUT_CUTOFF = 8 * 60

# Check-in and check-out closer than this are the same scan.
SAME_PUNCH_TOLERANCE_SECONDS = 60

DEFAULT_LEAVES_PER_QUARTER = 6
DEFAULT_SHIFT_CACHE_TTL_SECONDS = 300
DEFAULT_SATURDAY_SHIFT_OVERRIDES = {"N2": "N1"}

LEAVE_CAS_RETRIES = 5
