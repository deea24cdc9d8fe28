"""Constants and defaults.

Note: Keep constants here to avoid magic numbers spread across code.
Every value can be overridden per environment through the config modules.
"""

# Check-in token
VALIDITY_WINDOW_MS = 15 * 60 * 1000
TOKEN_DELIMITER = ":"
SIGNATURE_LENGTH = 16
MAX_TIMESTAMP_DIGITS = 16
EXPIRED_LABEL = "만료됨"
REFRESH_THRESHOLD_SECONDS = 60

# Attendance classification
LATE_THRESHOLD_MIN = 10
ABSENT_THRESHOLD_MIN = 15

# Admissible check-in window
ADMISSIBLE_BEFORE_MIN = 30
ADMISSIBLE_DEFAULT_DURATION_MIN = 120

# Deposit settlement
ELIGIBILITY_THRESHOLD_PCT = 50
DEFAULT_DEPOSIT_AMOUNT = 50000
