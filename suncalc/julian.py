"""Conversions between timezone-aware datetimes and Julian days."""

from __future__ import annotations

import math
from datetime import UTC, datetime, timedelta, tzinfo
from typing import Optional

from .astro import InvalidArgumentError

__all__ = [
    "J1970",
    "J2000",
    "DAY_MS",
    "to_julian_day",
    "from_julian_day",
    "days_since_j2000",
    "hours_later",
]

DAY_MS = 1000 * 60 * 60 * 24
J1970 = 2440588  # Julian day number of the Unix epoch (noon-based).
J2000 = 2451545

_UNIX_EPOCH = datetime(1970, 1, 1, tzinfo=UTC)


def ensure_aware(instant: datetime) -> datetime:
    """Return *instant* in UTC, rejecting naive datetimes."""

    if not isinstance(instant, datetime):
        raise InvalidArgumentError(f"expected a datetime, got {type(instant).__name__}")
    if instant.tzinfo is None or instant.utcoffset() is None:
        raise InvalidArgumentError("datetime must be timezone-aware")
    return instant.astimezone(UTC)


def _unix_millis(instant: datetime) -> int:
    delta = ensure_aware(instant) - _UNIX_EPOCH
    micros = (delta.days * 86400 + delta.seconds) * 1_000_000 + delta.microseconds
    # Truncate toward zero like an integer cast of the float value would.
    if micros < 0:
        return -((-micros) // 1000)
    return micros // 1000


def to_julian_day(instant: datetime) -> float:
    return _unix_millis(instant) / DAY_MS - 0.5 + J1970


def from_julian_day(jd: float, tz: Optional[tzinfo] = None) -> datetime:
    """Convert a Julian day back to a datetime.

    The result is rounded to the nearest millisecond and expressed in *tz*
    (UTC when omitted).
    """

    if not math.isfinite(jd):
        raise InvalidArgumentError(f"Julian day must be finite, got {jd!r}")
    millis = round((jd + 0.5 - J1970) * DAY_MS)
    try:
        result = _UNIX_EPOCH + timedelta(milliseconds=millis)
        return result.astimezone(tz or UTC)
    except OverflowError as exc:
        raise InvalidArgumentError(f"Julian day {jd!r} is outside the supported date range") from exc


def days_since_j2000(instant: datetime) -> float:
    return to_julian_day(instant) - J2000


def hours_later(instant: datetime, hours: float) -> datetime:
    """Add elapsed (not wall-clock) hours, keeping the zone of *instant*."""

    shifted = ensure_aware(instant) + timedelta(hours=hours)
    return shifted.astimezone(instant.tzinfo)
