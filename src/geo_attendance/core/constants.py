"""Constants and defaults.

Note: Keep constants here to avoid magic numbers spread across code.
"""

EARTH_RADIUS_METERS = 6_371_000.0

# Used when no workplace has ever been configured.
DEFAULT_WORKPLACE_LATITUDE = 13.7563
DEFAULT_WORKPLACE_LONGITUDE = 100.5018
DEFAULT_WORKPLACE_RADIUS_METERS = 500.0
WORKPLACE_SETTINGS_ID = "workplace"

MIN_RADIUS_METERS = 50
MAX_RADIUS_METERS = 2000

LOCATION_TIMEOUT_MS = 10_000
# A reported position is only usable for submissions this long after it arrives.
LOCATION_MAX_AGE_MS = 120_000

SUMMARY_RECORD_LIMIT = 20
DEFAULT_SUMMARY_MODEL = "gpt-4o-mini"
DEFAULT_SUMMARY_TIMEOUT_SECONDS = 20.0

DEFAULT_DB_TIMEOUT_SECONDS = 10
DEFAULT_HISTORY_LIMIT = 200

AVATAR_COLORS = ("red", "blue", "green", "yellow", "purple", "indigo", "pink")
MIN_PASSWORD_LENGTH = 6
DEFAULT_SESSION_DAYS = 7
