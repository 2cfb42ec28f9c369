"""Constants and defaults.

Note: Keep constants here to avoid magic numbers spread across code.
"""

DEFAULT_HISTORY_LIMIT = 30
RECENT_MARKS_LIMIT = 50
NOTICE_LIST_LIMIT = 50
TOKEN_EXPIRES_HOURS = 24
MIN_PASSWORD_LENGTH = 6
TREND_DAYS = 7
API_VERSION = "1.0.0"
