"""Duration constants for datecore.

All values are durations in seconds. YEAR is 52 weeks (364 days), not a
calendar year; use calendar arithmetic when the real length matters.
"""

# Time unit constants (all values in seconds)
SECOND = 1
MINUTE = 60
HOUR = 3600
DAY = HOUR * 24
WEEK = DAY * 7
YEAR = WEEK * 52
