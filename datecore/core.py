from collections.abc import Iterable
from datetime import datetime, timedelta, timezone
from typing import Any

from loguru import logger

from datecore.calendar import Calendar
from datecore.clock import Clock, SystemClock
from datecore.components import DATE, TIME, WEEK_OF_YEAR, Components, Unit, unit_set
from datecore.util import DAY, WEEK

_SUFFIXES = {
    1: "st",
    21: "st",
    31: "st",
    2: "nd",
    22: "nd",
    3: "rd",
    23: "rd",
}


class Dates:
    """Date helpers bound to an explicit calendar and clock.

    Two failure policies apply, and each method documents which one it uses:

    - fails-empty: the method returns ``None`` when a calendar reconstruction
      fails.
    - fails-soft: the method returns a fallback (the input instant, or now).

    Neither policy raises. ``TypeError`` is only raised for inputs the
    calendar cannot coerce (naive datetimes, unsupported types).
    """

    def __init__(self, calendar: Calendar | None = None, clock: Clock | None = None):
        self.calendar: Calendar = calendar if calendar is not None else Calendar()
        self.clock: Clock = clock if clock is not None else SystemClock()

    def __repr__(self) -> str:
        return f"Dates({self.calendar!r}, {self.clock!r})"

    def now(self) -> datetime:
        """Current instant in the calendar's zone."""
        return self.calendar.coerce(self.clock.now())

    # Labels

    def day_suffix(self, instant: Any) -> str:
        """Ordinal suffix for the day of the month: st, nd, rd, th."""
        day = self.calendar.components(["day"], instant).day
        if day is None:
            return ""
        return _SUFFIXES.get(day, "th")

    def relative_day_string(self, instant: Any) -> str:
        """Today, Tomorrow, else the weekday name: Monday, Tuesday, etc."""
        if self.is_today(instant):
            return "Today"
        if self.is_tomorrow(instant):
            return "Tomorrow"
        return self.formatted(instant, "EEEE")

    def relative_date_string(self, instant: Any) -> str:
        """Relative label for an instant in the coming week, else dd/MM/yyyy.

        Today, Tomorrow, the weekday name while on or before the end of the
        instant's week, otherwise weekday and day with suffix (e.g. "Monday 6th").
        """
        if not self.is_within_week_ignoring_time(instant):
            return self.formatted(instant, "dd/MM/yyyy")

        if self.is_today(instant):
            return "Today"
        if self.is_tomorrow(instant):
            return "Tomorrow"
        weekday = self.formatted(instant, "EEEE")
        if self.is_before(instant, self.end_of_week(instant), ignoring_time=True):
            return weekday
        day = self.calendar.components(["day"], instant).day
        return f"{weekday} {day}{self.day_suffix(instant)}"

    # Start and end

    def start_of_year(self, instant: Any) -> datetime | None:
        """January 1st 00:00:00 of the instant's year. Fails empty."""
        year = self.calendar.components(["year"], instant).year
        return self.calendar.instant(Components(year=year, month=1, day=1))

    def end_of_year(self, instant: Any) -> datetime | None:
        """December 31st 23:59:59 of the instant's year. Fails empty."""
        year = self.calendar.components(["year"], instant).year
        return self.calendar.instant(
            Components(year=year, month=12, day=31, hour=23, minute=59, second=59)
        )

    def start_of_month(self, instant: Any) -> datetime:
        start = self.with_components(self.start_of_day(instant), ["year", "month"])
        return self.start_of_day(start)

    def end_of_month(self, instant: Any) -> datetime | None:
        """Last day of the month at 23:59:59. Fails empty."""
        last_day = self.calendar.add(self.start_of_month(instant), months=1, days=-1)
        if last_day is None:
            return None
        return self.end_of_day(last_day)

    def _first_day_of_week(self, instant: Any) -> datetime | None:
        return self.calendar.instant(self.calendar.components(WEEK_OF_YEAR, instant))

    def start_of_week(self, instant: Any) -> datetime:
        """Day after the week's first day, at midnight. Fails soft to now."""
        first = self._first_day_of_week(instant)
        start = self.calendar.add(first, days=1) if first is not None else None
        if start is None:
            logger.debug("start_of_week failed for {}, using now", instant)
            return self.now()
        return self.start_of_day(start)

    def end_of_week(self, instant: Any) -> datetime:
        """Seven days after the week's first day, at 23:59:59. Fails soft to now."""
        first = self._first_day_of_week(instant)
        end = self.calendar.add(first, days=7) if first is not None else None
        end = self.end_of_day(end) if end is not None else None
        if end is None:
            logger.debug("end_of_week failed for {}, using now", instant)
            return self.now()
        return end

    def start_of_day(self, instant: Any) -> datetime:
        return self.calendar.start_of_day(instant)

    def end_of_day(self, instant: Any) -> datetime | None:
        """The instant's date at 23:59:59. Fails empty."""
        c = self.calendar.components(DATE, instant)
        if c.year is None or c.month is None or c.day is None:
            return None
        return self.calendar.instant(
            Components(year=c.year, month=c.month, day=c.day, hour=23, minute=59, second=59)
        )

    # Checks

    def is_today(self, instant: Any) -> bool:
        return self.is_on_same_day(instant, self.now())

    def is_tomorrow(self, instant: Any) -> bool:
        now = self.now()
        tomorrow = self.calendar.add_unit("day", 1, now) or now + timedelta(seconds=DAY)
        return self.is_on_same_day(instant, tomorrow)

    def is_within_week_ignoring_time(self, instant: Any) -> bool:
        """True from today through the same weekday next week, inclusive."""
        now = self.now()
        next_week = self.calendar.add_unit("weekday", 7, now) or now + timedelta(
            seconds=WEEK
        )
        return self.is_before(instant, next_week, ignoring_time=True) and self.is_after(
            instant, now, ignoring_time=True
        )

    def _utc(self, instant: Any) -> datetime:
        # Same-tzinfo comparisons use wall time, which repeats in a DST fall-back hour
        return self.calendar.coerce(instant).astimezone(timezone.utc)

    def is_before(self, instant: Any, other: Any, ignoring_time: bool = False) -> bool:
        """Inclusive: equal instants (or days, when ignoring time) count as before."""
        if ignoring_time:
            return self.with_components(instant, DATE) <= self.with_components(other, DATE)
        return self._utc(instant) <= self._utc(other)

    def is_after(self, instant: Any, other: Any, ignoring_time: bool = False) -> bool:
        """Inclusive: equal instants (or days, when ignoring time) count as after."""
        if ignoring_time:
            return self.with_components(instant, DATE) >= self.with_components(other, DATE)
        return self._utc(instant) >= self._utc(other)

    def is_on_same_day(self, instant: Any, other: Any) -> bool:
        """True when both fall on the same calendar day.

        2000-01-01 and 2000-01-02 return False as the day is different.
        """
        return self.with_components(instant, DATE) == self.with_components(other, DATE)

    # Merging and formatting

    def formatted(self, instant: Any, pattern: str, locale: str | None = None) -> str:
        """
        Format an instant with an LDML pattern.

        Args:
            instant: The instant to format
            pattern: "dd/MM/yyyy" (01/01/2000), "HH:mm" (13:14),
                "LLLL" (January), "EEEE" (Monday), "E" (Mon)
            locale: Locale identifier, defaults to the calendar's locale

        Returns:
            The formatted string
        """
        return self.calendar.format(instant, pattern, locale)

    def time_interval_since(
        self, instant: Any, other: Any, units: Iterable[Unit]
    ) -> float | None:
        """Seconds from ``other`` to ``instant`` counting only ``units``. Fails empty."""
        units = unit_set(units)
        compare = self.calendar.instant(self.calendar.components(units, other))
        if compare is None:
            return None
        reduced = self.calendar.instant(self.calendar.components(units, instant))
        if reduced is None:
            return None
        return reduced.timestamp() - compare.timestamp()

    def update_date_keeping_time(self, instant: Any, other: Any = None) -> datetime:
        """
        Return an instant with this time of day on another date. Fails soft.

        Args:
            instant: Supplies hour, minute, second and nanosecond
            other: Supplies day, month and year (defaults to now)
        """
        return self._merge(date_from=other, time_from=instant, fallback=instant)

    def update_time_keeping_date(self, instant: Any, other: Any = None) -> datetime:
        """
        Return an instant with this date at another time of day. Fails soft.

        Args:
            instant: Supplies day, month and year
            other: Supplies hour, minute, second and nanosecond (defaults to now)
        """
        return self._merge(date_from=instant, time_from=other, fallback=instant)

    def _merge(self, date_from: Any, time_from: Any, fallback: Any) -> datetime:
        now = self.now()
        d = self.calendar.components(DATE, date_from if date_from is not None else now)
        t = self.calendar.components(
            TIME,
            time_from if time_from is not None else now,
        )
        merged = self.calendar.instant(
            Components(
                year=d.year,
                month=d.month,
                day=d.day,
                hour=t.hour,
                minute=t.minute,
                second=t.second,
                nanosecond=t.nanosecond,
            )
        )
        if merged is None:
            logger.debug("Could not merge date and time, keeping {}", fallback)
            return self.calendar.coerce(fallback)
        return merged

    def with_components(self, instant: Any, units: Iterable[Unit]) -> datetime:
        """Keep only ``units``; excluded fields reset to defaults. Fails soft."""
        units = unit_set(units)
        dt = self.calendar.coerce(instant)
        reduced = self.calendar.instant(self.calendar.components(units, dt))
        if reduced is None:
            logger.debug("Could not reduce {} to {}, keeping it", dt, sorted(units))
            return dt
        return reduced

    # Construction

    def parse(self, string: str, pattern: str) -> datetime | None:
        """Instant from a string in an LDML pattern. Fails empty."""
        return self.calendar.parse(string, pattern)

    def now_with_components(self, units: Iterable[Unit]) -> datetime | None:
        """Now reduced to ``units``. Fails empty."""
        return self.calendar.instant(self.calendar.components(units, self.now()))


def dates(tz: str = "UTC", locale: str = "en", clock: Clock | None = None) -> Dates:
    """
    Return date helpers for a timezone and locale.

    Args:
        tz: IANA timezone name (e.g., "UTC", "US/Pacific", "Europe/London")
        locale: Locale identifier used for formatting (e.g., "en", "fr")
        clock: Source of "now" (defaults to the system clock)

    Returns:
        A Dates instance with a Sunday-first calendar

    Example:
        >>> from datecore import dates
        >>>
        >>> d = dates(tz="Europe/London")
        >>> d.relative_day_string(d.now())
        'Today'
        >>> d.formatted(d.now(), "dd/MM/yyyy")
    """
    return Dates(Calendar(tz=tz, locale=locale), clock)
