"""Constants and defaults.

Note: Keep constants here to avoid magic numbers spread across code.
"""

DEFAULT_LOCATION_TIMEOUT_SECONDS = 5.0
DEFAULT_SUBMIT_TIMEOUT_SECONDS = 30.0
DEFAULT_SYNC_WARNING_THRESHOLD = 3

# Mock attendance service work schedule
SCHEDULED_START_MINUTES = 9 * 60
LATE_WINDOW_MINUTES = 15

OTP_LENGTH = 6
OTP_EXPIRY_MINUTES = 15

# Dashboard statistics
DEFAULT_WORK_START_HOUR = 8
LATE_ATTENDANCE_WEIGHT = 0.8

DEFAULT_QR_EXPIRES_IN = 30
