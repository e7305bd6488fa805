"""Tests for day suffixes and relative day/date labels."""

from datetime import datetime, timezone

import pytest
from typing_extensions import override

from datecore import Calendar, Components, Dates, FixedClock, dates


def at(*args: int) -> datetime:
    return datetime(*args, tzinfo=timezone.utc)


def dates_at(now: datetime) -> Dates:
    return dates(tz="UTC", clock=FixedClock(now))


@pytest.mark.parametrize(
    "day, suffix",
    [(d, "st") for d in (1, 21, 31)]
    + [(d, "nd") for d in (2, 22)]
    + [(d, "rd") for d in (3, 23)]
    + [(d, "th") for d in range(4, 31) if d not in (21, 22, 23)],
)
def test_day_suffix(day, suffix):
    assert dates().day_suffix(at(2023, 1, day)) == suffix


def test_teens_take_th():
    d = dates()
    assert [d.day_suffix(at(2023, 1, day)) for day in (11, 12, 13)] == ["th"] * 3


def test_relative_day_string_today():
    """2023-01-01 is a Sunday."""
    d = dates_at(at(2023, 1, 1, 8, 0))
    assert d.relative_day_string(at(2023, 1, 1, 23, 0)) == "Today"


def test_relative_day_string_tomorrow():
    d = dates_at(at(2022, 12, 31, 22, 0))
    assert d.relative_day_string(at(2023, 1, 1)) == "Tomorrow"


def test_relative_day_string_weekday_name():
    d = dates_at(at(2023, 1, 4, 12, 0))
    assert d.relative_day_string(at(2023, 1, 6)) == "Friday"
    assert d.relative_day_string(at(2023, 1, 3)) == "Tuesday"


def test_relative_day_string_respects_zone():
    # 2023-01-02 03:00 UTC is still Jan 1 in Pacific time
    d = dates(tz="US/Pacific", clock=FixedClock(at(2023, 1, 1, 20, 0)))
    assert d.relative_day_string(at(2023, 1, 2, 3, 0)) == "Today"
    assert d.relative_day_string(at(2023, 1, 2, 9, 0)) == "Tomorrow"


@pytest.mark.parametrize(
    "instant, label",
    [
        (at(2023, 1, 4, 18, 0), "Today"),
        (at(2023, 1, 5, 9, 0), "Tomorrow"),
        (at(2023, 1, 6), "Friday"),
        (at(2023, 1, 7), "Saturday"),
        (at(2023, 1, 8, 23, 0), "Sunday"),
        (at(2023, 1, 9), "Monday"),
        (at(2023, 1, 10), "Tuesday"),
        (at(2023, 1, 11, 23, 0), "Wednesday"),
        (at(2023, 1, 12), "12/01/2023"),
        (at(2023, 1, 3), "03/01/2023"),
        (at(2024, 6, 21), "21/06/2024"),
    ],
)
def test_relative_date_string(instant, label):
    """Now is Wednesday 2023-01-04; labels run through Wednesday 2023-01-11."""
    d = dates_at(at(2023, 1, 4, 12, 0))
    assert d.relative_date_string(instant) == label


def test_relative_date_string_weekday_names_through_next_week():
    # Friday 2023-01-20; each instant is inside its own week
    d = dates_at(at(2023, 1, 20, 9, 0))
    assert d.relative_date_string(at(2023, 1, 23)) == "Monday"
    assert d.relative_date_string(at(2023, 1, 27)) == "Friday"
    assert d.relative_date_string(at(2023, 1, 28)) == "28/01/2023"


class NoWeeksCalendar(Calendar):
    """Calendar that cannot resolve week-of-year fields."""

    @override
    def instant(self, components: Components) -> datetime | None:
        if components.week_of_year is not None:
            return None
        return super().instant(components)


def test_relative_date_string_adds_day_when_week_end_unknown():
    """end_of_week falls back to now, so later days get the day and suffix."""
    d = Dates(NoWeeksCalendar(), FixedClock(at(2023, 1, 4, 12, 0)))
    assert d.relative_date_string(at(2023, 1, 9)) == "Monday 9th"
    assert d.relative_date_string(at(2023, 1, 11)) == "Wednesday 11th"
    assert d.relative_date_string(at(2023, 1, 6)) == "Friday 6th"
    assert d.relative_date_string(at(2023, 1, 5)) == "Tomorrow"
