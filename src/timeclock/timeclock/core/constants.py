"""Constants and defaults.

Note: Keep constants here to avoid magic numbers spread across code.
"""

DEFAULT_TIME_ZONE = "Europe/Madrid"
DEFAULT_LATE_GRACE_MINUTES = 5
MAX_LATE_GRACE_MINUTES = 120
DEFAULT_RADIUS_METERS = 100

DEFAULT_LEAD_MINUTES = 5
DEFAULT_LOOKBACK_MINUTES = 65

MINUTES_PER_DAY = 1440

# Schedule slot that marks a whole day as non-working.
NON_WORKING_ENTRY_TIME = "00:00"

# Log slot reserved for exit reminders, distinct from real entry slots 1/2.
EXIT_REMINDER_SLOT = 0

# Push endpoint status codes meaning the subscription is permanently invalid.
GONE_STATUS_CODES = frozenset({400, 401, 403, 404, 410})

DASHBOARD_URL = "/employee/dashboard"
NOTIFICATION_ICON = "/icon.svg"
NOTIFICATION_TAG = "timeclock-notification"
