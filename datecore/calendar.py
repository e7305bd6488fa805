"""Calendar capability: the one place that knows about zones, weeks and locales.

Everything in ``datecore.core`` goes through a ``Calendar`` instance for
component extraction, reconstruction, arithmetic and formatting. Date
arithmetic is delegated to python-dateutil's ``relativedelta``; LDML patterns
("dd/MM/yyyy", "EEEE") and CLDR week rules are handled by babel.
"""

from collections.abc import Iterable
from datetime import date, datetime, time, timedelta, timezone
from typing import Any
from zoneinfo import ZoneInfo

from babel import Locale
from babel.dates import format_date, format_datetime, tokenize_pattern
from dateutil.relativedelta import relativedelta
from loguru import logger

from datecore.components import Components, Unit, unit_set

# Units that calendar arithmetic accepts, mapped to relativedelta keywords
_ADD_KEYWORDS: dict[Unit, str] = {
    "year": "years",
    "year_for_week_of_year": "years",
    "month": "months",
    "week_of_year": "weeks",
    "day": "days",
    "weekday": "days",
    "hour": "hours",
    "minute": "minutes",
    "second": "seconds",
}

# Elapsed-time amounts, applied in UTC rather than on the wall clock
_CLOCK_KEYWORDS = frozenset({"hours", "minutes", "seconds", "microseconds"})

# LDML pattern fields that can be parsed, keyed by (symbol, width)
_STRPTIME: dict[tuple[str, int], str] = {
    ("y", 1): "%Y",
    ("y", 2): "%y",
    ("y", 4): "%Y",
    ("M", 1): "%m",
    ("M", 2): "%m",
    ("M", 3): "%b",
    ("M", 4): "%B",
    ("L", 1): "%m",
    ("L", 2): "%m",
    ("L", 3): "%b",
    ("L", 4): "%B",
    ("d", 1): "%d",
    ("d", 2): "%d",
    ("H", 1): "%H",
    ("H", 2): "%H",
    ("h", 1): "%I",
    ("h", 2): "%I",
    ("m", 1): "%M",
    ("m", 2): "%M",
    ("s", 1): "%S",
    ("s", 2): "%S",
    ("a", 1): "%p",
    ("E", 1): "%a",
    ("E", 2): "%a",
    ("E", 3): "%a",
    ("E", 4): "%A",
}


def _default(value: int | None, default: int) -> int:
    return default if value is None else value


class Calendar:
    """Timezone and locale context for calendar computations."""

    def __init__(self, tz: str = "UTC", locale: str = "en", region: str = "en_US"):
        """
        Initialize a calendar.

        Args:
            tz: IANA timezone name (e.g., "UTC", "US/Pacific", "Europe/London")
            locale: Default locale for formatting (e.g., "en", "fr_FR")
            region: Locale whose CLDR week rules number the weeks. "en_US"
                starts weeks on Sunday; "de_DE" gives ISO 8601 weeks.

        Example:
            >>> Calendar(tz="Europe/London")
            >>> Calendar(tz="UTC", region="de_DE")  # ISO weeks
        """
        self.zone: ZoneInfo = ZoneInfo(tz)
        self.locale: Locale = Locale.parse(locale)
        self.region: Locale = Locale.parse(region)

    @classmethod
    def for_locale(cls, locale: str, tz: str = "UTC") -> "Calendar":
        """Return a calendar formatting in ``locale`` and using its week rules.

        Example:
            >>> Calendar.for_locale("de_DE").first_weekday
            0
        """
        return cls(tz=tz, locale=locale, region=locale)

    @property
    def first_weekday(self) -> int:
        """First day of the week, 0=Monday ... 6=Sunday."""
        return self.region.first_week_day

    @property
    def min_week_days(self) -> int:
        """Days of the new year that week 1 must contain."""
        return self.region.min_week_days

    def __repr__(self) -> str:
        return (
            f"Calendar(tz={self.zone.key!r}, locale={str(self.locale)!r}, "
            f"region={str(self.region)!r})"
        )

    def coerce(self, value: Any) -> datetime:
        """Convert an instant-like value to an aware datetime in this zone.

        Accepts:
        - int/float: Unix timestamp in seconds
        - datetime: Must be timezone-aware, converted to this zone
        - date: Start of that day in this zone

        Raises:
            TypeError: If value is an unsupported type or naive datetime
        """
        if isinstance(value, (int, float)):
            return datetime.fromtimestamp(value, tz=self.zone)
        if isinstance(value, datetime):
            if value.tzinfo is None:
                raise TypeError(
                    f"Instant must be a timezone-aware datetime.\n"
                    f"Got naive datetime: {value!r}\n"
                    f"Hint: Add timezone info:\n"
                    f"  from zoneinfo import ZoneInfo\n"
                    f"  dt = datetime(..., tzinfo=ZoneInfo('UTC'))  "
                    f"# or 'US/Pacific', etc."
                )
            return value.astimezone(self.zone)
        if isinstance(value, date):
            return datetime.combine(value, time.min, tzinfo=self.zone)
        raise TypeError(
            f"Instant must be int, float, datetime, or date.\n"
            f"Got {type(value).__name__!r}: {value!r}"
        )

    def _week_of(self, day: date) -> tuple[int, int] | None:
        """Return (year_for_week_of_year, week_of_year) under the region's rules.

        None when the week falls outside the representable years.
        """
        try:
            week_year = format_date(day, "Y", locale=self.region)
            week = format_date(day, "w", locale=self.region)
        except (ValueError, OverflowError):
            return None
        return int(week_year), int(week)

    def _week_start(self, week_year: int, week: int) -> date:
        """First day of a week, found from the week that holds January 1st."""
        anchor = date(week_year, 1, 1)
        start = anchor - timedelta(days=(anchor.weekday() - self.first_weekday) % 7)
        located = self._week_of(anchor)
        anchor_week = located[1] if located and located[0] == week_year else 0
        return start + timedelta(weeks=week - anchor_week)

    def components(self, units: Iterable[Unit], instant: Any) -> Components:
        """Extract the named calendar fields from an instant."""
        wanted = unit_set(units)
        dt = self.coerce(instant)

        values: dict[str, int] = {}
        if "year" in wanted:
            values["year"] = dt.year
        if "month" in wanted:
            values["month"] = dt.month
        if "day" in wanted:
            values["day"] = dt.day
        if "hour" in wanted:
            values["hour"] = dt.hour
        if "minute" in wanted:
            values["minute"] = dt.minute
        if "second" in wanted:
            values["second"] = dt.second
        if "nanosecond" in wanted:
            values["nanosecond"] = dt.microsecond * 1000
        if "weekday" in wanted:
            values["weekday"] = dt.weekday()
        if wanted & {"week_of_year", "year_for_week_of_year"}:
            located = self._week_of(dt.date())
            if located is not None:
                week_year, week = located
                if "week_of_year" in wanted:
                    values["week_of_year"] = week
                if "year_for_week_of_year" in wanted:
                    values["year_for_week_of_year"] = week_year

        return Components(**values)

    def instant(self, components: Components) -> datetime | None:
        """Build an instant from components, or None if it is out of range.

        Unset fields default to year 1, January, the 1st, midnight. Values
        past a field's range roll over into the next one (February 30th is
        March 2nd, hour 25 is 01:00 the next day). When no year/month/day is
        set but both week fields are, the day is the first day of that week
        (or the given weekday within it).
        """
        c = components
        try:
            if (
                c.year is None
                and c.month is None
                and c.day is None
                and c.week_of_year is not None
                and c.year_for_week_of_year is not None
            ):
                day = self._week_start(c.year_for_week_of_year, c.week_of_year)
                if c.weekday is not None:
                    day += timedelta(days=(c.weekday - self.first_weekday) % 7)
                start = datetime.combine(day, time.min, tzinfo=self.zone)
            else:
                year_start = datetime(_default(c.year, 1), 1, 1, tzinfo=self.zone)
                start = year_start + relativedelta(
                    months=_default(c.month, 1) - 1,
                    days=_default(c.day, 1) - 1,
                )

            return start + relativedelta(
                hours=_default(c.hour, 0),
                minutes=_default(c.minute, 0),
                seconds=_default(c.second, 0),
                microseconds=_default(c.nanosecond, 0) // 1000,
            )
        except (ValueError, OverflowError):
            return None

    def add(self, instant: Any, **amounts: int) -> datetime | None:
        """Shift an instant by relativedelta amounts (years=, months=, days=, ...).

        Years, months, weeks and days move the wall clock; hours, minutes,
        seconds and microseconds are elapsed time. Returns None when the
        result falls outside the supported range.
        """
        dt = self.coerce(instant)
        calendar_part = {k: v for k, v in amounts.items() if k not in _CLOCK_KEYWORDS}
        clock_part = {k: v for k, v in amounts.items() if k in _CLOCK_KEYWORDS}
        try:
            if calendar_part:
                dt = dt + relativedelta(**calendar_part)  # pyright: ignore[reportArgumentType]
            if clock_part:
                shifted = dt.astimezone(timezone.utc) + relativedelta(**clock_part)
                dt = shifted.astimezone(self.zone)
            return dt
        except (ValueError, OverflowError):
            return None

    def add_unit(self, unit: Unit, amount: int, instant: Any) -> datetime | None:
        """Shift an instant by a signed amount of a single unit."""
        if unit == "nanosecond":
            return self.add(instant, microseconds=amount // 1000)
        if unit not in _ADD_KEYWORDS:
            valid = ", ".join(_ADD_KEYWORDS)
            raise ValueError(f"Invalid unit '{unit}'. Valid units: {valid}, nanosecond")
        return self.add(instant, **{_ADD_KEYWORDS[unit]: amount})

    def start_of_day(self, instant: Any) -> datetime:
        return self.coerce(instant).replace(
            hour=0, minute=0, second=0, microsecond=0, fold=0
        )

    def format(self, instant: Any, pattern: str, locale: str | None = None) -> str:
        """Format an instant with an LDML pattern in this zone.

        Example:
            >>> cal.format(dt, "dd/MM/yyyy")  # 01/01/2000
            >>> cal.format(dt, "HH:mm")  # 13:14
            >>> cal.format(dt, "LLLL")  # January, February, Etc
            >>> cal.format(dt, "EEEE")  # Monday, Tuesday, Etc
            >>> cal.format(dt, "E")  # Mon, Tue, Etc
        """
        return format_datetime(
            self.coerce(instant),
            pattern,
            tzinfo=self.zone,
            locale=locale if locale is not None else self.locale,
        )

    def parse(self, string: str, pattern: str) -> datetime | None:
        """Parse a string with an LDML pattern into an instant in this zone.

        Supports year, month, day, hour, minute, second, am/pm and weekday
        fields. Returns None for unsupported patterns or non-matching input.
        """
        directives: list[str] = []
        for kind, value in tokenize_pattern(pattern):
            if kind == "chars":
                directives.append(value.replace("%", "%%"))
                continue
            directive = _STRPTIME.get(value)
            if directive is None:
                logger.debug("Cannot parse LDML field {!r} in {!r}", value, pattern)
                return None
            directives.append(directive)

        try:
            parsed = datetime.strptime(string, "".join(directives))
        except ValueError:
            return None
        return parsed.replace(tzinfo=self.zone)
