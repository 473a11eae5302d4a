"""Constants and defaults.

Note: Keep constants here to avoid magic numbers spread across code.
"""

from datetime import time

SCHOOL_START = time(8, 0)
MORNING_CUTOFF = time(8, 30)
LATE_CUTOFF = time(8, 30)
AFTERNOON_CUTOFF = time(15, 30)
NOON_HOUR = 12

ALLERGY_ALERT_TIMEOUT_SECONDS = 10
RECENT_ALLERGY_SCAN_MINUTES = 60
BUS_ACTIVITY_WINDOW_MINUTES = 30

DEFAULT_REFRESH_SECONDS = 30
DEFAULT_REPORT_DAYS = 7
RESOLVED_ALERTS_SHOWN = 5
MIN_PASSWORD_LENGTH = 6

MANUAL_LOCATION = "Manual Entry"
MOBILE_LOCATION = "Mobile Device"

REQUIRED_PROFILE_FIELDS = ("name", "student_id", "grade")
