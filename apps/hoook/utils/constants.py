"""
Constants used across the games, feed and map services.
"""

# Hosting limits
MAX_PLAYER_CAP = 100
MAX_RECURRENCE_WEEKS = 52
TITLE_MAX_LENGTH = 100

# Map discovery
DEFAULT_CACHE_TTL_SECONDS = 60
DEFAULT_CACHE_MAX_ENTRIES = 256
DEFAULT_FETCH_TIMEOUT_SECONDS = 10.0
BROADEN_THRESHOLD = 5  # Fewer pins than this triggers a wider radius
CACHE_COORDINATE_PLACES = 3

# Default map region (UT Austin)
DEFAULT_CENTER_LAT = 30.2672
DEFAULT_CENTER_LNG = -97.7431
DEFAULT_SPAN_DEGREES = 0.15
MIN_SPAN_DEGREES = 0.05
FOCUS_SPAN_DEGREES = 0.015

DEFAULT_TIMEZONE = "America/Chicago"
FIRST_WEEKDAY = 6  # Sunday, as weekday() counts it
NOW_WINDOW_MINUTES = 60  # Map "now" filter reaches this far either side of now
