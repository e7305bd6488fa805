from datetime import datetime, timezone

import pytest

from datecore import FixedClock, SystemClock


def test_system_clock_is_timezone_aware() -> None:
    now = SystemClock().now()
    assert now.tzinfo is not None


def test_fixed_clock_returns_same_instant() -> None:
    instant = datetime(2023, 1, 4, 12, 0, tzinfo=timezone.utc)
    clock = FixedClock(instant)
    assert clock.now() == instant
    assert clock.now() == clock.now()


def test_fixed_clock_rejects_naive_datetime() -> None:
    with pytest.raises(TypeError, match="timezone-aware"):
        FixedClock(datetime(2023, 1, 4, 12, 0))
