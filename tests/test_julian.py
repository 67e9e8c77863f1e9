from __future__ import annotations

from datetime import UTC, datetime, timedelta, timezone

import erfa
import pytest

from suncalc import InvalidArgumentError, days_since_j2000, from_julian_day, to_julian_day
from suncalc.julian import hours_later


def _erfa_julian_day(dt: datetime) -> float:
    dt = dt.astimezone(UTC)
    utc1, utc2 = erfa.dtf2d(
        "UTC",
        dt.year,
        dt.month,
        dt.day,
        dt.hour,
        dt.minute,
        dt.second + dt.microsecond / 1_000_000,
    )
    return utc1 + utc2


def test_known_julian_days():
    assert to_julian_day(datetime(2005, 6, 1, 12, tzinfo=UTC)) == 2453523.0
    assert to_julian_day(datetime(2000, 1, 1, 12, tzinfo=UTC)) == 2451545.0
    assert days_since_j2000(datetime(2000, 1, 2, 12, tzinfo=UTC)) == 1.0


@pytest.mark.parametrize(
    "dt",
    [
        datetime(2013, 3, 5, tzinfo=UTC),
        datetime(2020, 5, 17, 15, 5, 16, 414000, tzinfo=timezone(timedelta(hours=7))),
        datetime(1999, 12, 31, 23, 59, 59, tzinfo=UTC),
    ],
)
def test_matches_erfa(dt: datetime):
    assert to_julian_day(dt) == pytest.approx(_erfa_julian_day(dt), abs=1e-8)


@pytest.mark.parametrize(
    "dt",
    [
        datetime(2020, 5, 17, 15, 5, 16, 414278, tzinfo=UTC),
        datetime(2012, 12, 12, 12, 0, 0, 999999, tzinfo=UTC),
        datetime(2038, 1, 19, 3, 14, 7, 1500, tzinfo=timezone(timedelta(hours=-5))),
    ],
)
def test_round_trip_truncates_to_milliseconds(dt: datetime):
    truncated = dt.replace(microsecond=dt.microsecond // 1000 * 1000)
    assert from_julian_day(to_julian_day(dt)) == truncated


def test_from_julian_day_zone():
    tz = timezone(timedelta(hours=2))
    result = from_julian_day(2453523.0, tz)
    assert result.utcoffset() == timedelta(hours=2)
    assert result.hour == 14
    assert from_julian_day(2453523.0).tzinfo is UTC


def test_naive_datetime_rejected():
    with pytest.raises(InvalidArgumentError):
        to_julian_day(datetime(2020, 1, 1))


def test_non_finite_julian_day_rejected():
    with pytest.raises(InvalidArgumentError):
        from_julian_day(float("nan"))


@pytest.mark.parametrize("jd", [1e12, -1e12, 5400000.0])
def test_julian_day_outside_datetime_range_rejected(jd: float):
    with pytest.raises(InvalidArgumentError):
        from_julian_day(jd)


def test_hours_later_keeps_zone():
    tz = timezone(timedelta(hours=7))
    start = datetime(2020, 5, 17, tzinfo=tz)
    later = hours_later(start, 1.5)
    assert later.tzinfo is tz
    assert later - start == timedelta(hours=1, minutes=30)
