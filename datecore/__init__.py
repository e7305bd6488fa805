from loguru import logger

from .calendar import Calendar
from .clock import Clock, FixedClock, SystemClock
from .components import DATE, TIME, WEEK_OF_YEAR, Components, Unit
from .core import Dates, dates
from .util import DAY, HOUR, MINUTE, SECOND, WEEK, YEAR

# Library logging is opt-in: logger.enable("datecore")
logger.disable("datecore")

__all__ = [
    "Calendar",
    "Clock",
    "SystemClock",
    "FixedClock",
    "Components",
    "Unit",
    "DATE",
    "TIME",
    "WEEK_OF_YEAR",
    "Dates",
    "dates",
    "SECOND",
    "MINUTE",
    "HOUR",
    "DAY",
    "WEEK",
    "YEAR",
]
