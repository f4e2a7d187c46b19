"""Constants and defaults.

Note: Keep constants here to avoid magic numbers spread across code.
"""

FULL_DAY_HOURS = 8
SHORT_DAY_HOURS = 4
DAYS_PER_WEEK = 7
DEFAULT_HISTORY_DAYS = 30

ISO_DATE_FORMAT = "%Y-%m-%d"
CLOCK_FORMAT = "%H:%M:%S"

CSV_HEADER = ("Date", "Day", "Punch In", "Punch Out", "Working Hours", "Status", "Notes")
