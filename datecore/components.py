from collections.abc import Iterable
from dataclasses import dataclass
from typing import Literal, TypeAlias, get_args

Unit: TypeAlias = Literal[
    "year",
    "month",
    "day",
    "hour",
    "minute",
    "second",
    "nanosecond",
    "weekday",
    "week_of_year",
    "year_for_week_of_year",
]

UNITS: tuple[Unit, ...] = get_args(Unit)

DATE: frozenset[Unit] = frozenset({"year", "month", "day"})
TIME: frozenset[Unit] = frozenset({"hour", "minute", "second", "nanosecond"})
WEEK_OF_YEAR: frozenset[Unit] = frozenset({"year_for_week_of_year", "week_of_year"})


@dataclass(frozen=True, kw_only=True)
class Components:
    """Calendar fields of an instant. ``None`` means the field is not set.

    ``weekday`` counts from Monday (0) to Sunday (6), like ``datetime.weekday``.
    ``nanosecond`` is limited to microsecond precision.
    """

    year: int | None = None
    month: int | None = None
    day: int | None = None
    hour: int | None = None
    minute: int | None = None
    second: int | None = None
    nanosecond: int | None = None
    weekday: int | None = None
    week_of_year: int | None = None
    year_for_week_of_year: int | None = None


def unit_set(units: Iterable[str]) -> frozenset[Unit]:
    """Validate unit names and return them as a frozenset."""
    if isinstance(units, str):
        units = [units]

    result: set[Unit] = set()
    for unit in units:
        if unit not in UNITS:
            valid = ", ".join(UNITS)
            raise ValueError(f"Invalid unit '{unit}'. Valid units: {valid}")
        result.add(unit)  # type: ignore[arg-type]
    return frozenset(result)
