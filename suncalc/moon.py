"""Lunar ephemeris, moon rise/set and illumination.

Moon position follows http://aa.quae.nl/en/reken/hemelpositie.html; rise and
set times use the 3-point quadratic search from
http://www.stargazing.net/kepler/moonrise.html; illumination follows
Meeus, Astronomical Algorithms (2nd ed.), chapter 48.
"""

from __future__ import annotations

import json
import logging
import math
from dataclasses import dataclass
from datetime import datetime
from typing import Optional

from .astro import (
    RAD,
    EquatorialCoordinate,
    HorizontalPosition,
    altitude,
    astro_refraction,
    azimuth,
    declination,
    parallactic_angle,
    right_ascension,
    sidereal_time,
    validate_location,
)
from .julian import days_since_j2000, ensure_aware, hours_later
from .sun import sun_coords

__all__ = [
    "MoonPosition",
    "MoonTimes",
    "MoonIllumination",
    "moon_coords",
    "get_moon_position",
    "get_moon_illumination",
    "get_moon_times",
]

LOGGER = logging.getLogger(__name__)

SUN_DISTANCE_KM = 149598000.0  # Mean Earth-Sun distance.
HORIZON_CORRECTION = 0.133 * RAD


@dataclass(frozen=True)
class MoonPosition:
    """Moon direction with refraction-corrected altitude, distance in km and parallactic angle."""

    azimuth: float
    altitude: float
    distance: float
    parallactic_angle: float

    @property
    def horizontal(self) -> HorizontalPosition:
        return HorizontalPosition(azimuth=self.azimuth, altitude=self.altitude)


@dataclass(frozen=True)
class MoonTimes:
    rise: Optional[datetime] = None
    set: Optional[datetime] = None
    always_up: bool = False
    always_down: bool = False


@dataclass(frozen=True)
class MoonIllumination:
    """Illuminated ``fraction``, ``phase`` (0 new, 0.5 full) and bright-limb ``angle``.

    A negative ``angle`` means the moon is waxing, a positive one waning.
    """

    fraction: float
    phase: float
    angle: float


def moon_coords(d, xp=math) -> EquatorialCoordinate:
    """Geocentric equatorial coordinates of the moon *d* days after J2000 (scalar or array *d*)."""

    l0 = RAD * (218.316 + 13.176396 * d)  # mean longitude
    m = RAD * (134.963 + 13.064993 * d)  # mean anomaly
    f = RAD * (93.272 + 13.229350 * d)  # mean distance from the ascending node

    l = l0 + RAD * 6.289 * xp.sin(m)  # ecliptic longitude
    b = RAD * 5.128 * xp.sin(f)  # ecliptic latitude
    distance = 385001.0 - 20905.0 * xp.cos(m)

    return EquatorialCoordinate(
        right_ascension=right_ascension(l, b, xp),
        declination=declination(l, b, xp),
        distance=distance,
    )


def get_moon_position(instant: datetime, latitude: float, longitude: float) -> MoonPosition:
    lat, lon = validate_location(latitude, longitude)
    lw = RAD * -lon
    phi = RAD * lat
    d = days_since_j2000(instant)

    c = moon_coords(d)
    hour_angle = sidereal_time(d, lw) - c.right_ascension
    h = altitude(hour_angle, phi, c.declination)
    pa = parallactic_angle(hour_angle, phi, c.declination)

    return MoonPosition(
        azimuth=azimuth(hour_angle, phi, c.declination),
        altitude=h + astro_refraction(h),
        distance=c.distance,
        parallactic_angle=pa,
    )


def get_moon_illumination(instant: datetime) -> MoonIllumination:
    d = days_since_j2000(instant)
    s = sun_coords(d)
    m = moon_coords(d)

    delta_ra = s.right_ascension - m.right_ascension
    cos_phi = math.sin(s.declination) * math.sin(m.declination) + math.cos(
        s.declination
    ) * math.cos(m.declination) * math.cos(delta_ra)
    phi = math.acos(max(-1.0, min(1.0, cos_phi)))
    inc = math.atan2(SUN_DISTANCE_KM * math.sin(phi), m.distance - SUN_DISTANCE_KM * math.cos(phi))
    angle = math.atan2(
        math.cos(s.declination) * math.sin(delta_ra),
        math.sin(s.declination) * math.cos(m.declination)
        - math.cos(s.declination) * math.sin(m.declination) * math.cos(delta_ra),
    )
    sign = -1.0 if angle < 0 else 1.0

    return MoonIllumination(
        fraction=(1 + math.cos(inc)) / 2,
        phase=(0.5 + 0.5 * inc * sign / math.pi) % 1.0,
        angle=angle,
    )


@dataclass(frozen=True)
class _WindowCrossings:
    """Rise/set offsets in [-1, 1] hours from a window centre, and the fitted vertex altitude."""

    rise: Optional[float]
    set: Optional[float]
    vertex: float


def _solve_window(h0: float, h1: float, h2: float) -> _WindowCrossings:
    """Fit a quadratic through altitudes one hour apart and locate its horizon crossings."""

    a = (h0 + h2) / 2 - h1
    b = (h2 - h0) / 2

    if a == 0:
        # Samples are collinear; the curve degenerates to a line.
        if b == 0:
            return _WindowCrossings(None, None, h1)
        x = -h1 / b
        if abs(x) > 1:
            return _WindowCrossings(None, None, h1)
        return _WindowCrossings(x, None, h1) if h0 < 0 else _WindowCrossings(None, x, h1)

    xe = -b / (2 * a)
    ye = (a * xe + b) * xe + h1
    disc = b * b - 4 * a * h1
    if disc < 0:
        return _WindowCrossings(None, None, ye)

    dx = math.sqrt(disc) / (abs(a) * 2)
    x1 = xe - dx
    x2 = xe + dx
    roots = (abs(x1) <= 1) + (abs(x2) <= 1)
    if x1 < -1:
        x1 = x2

    if roots == 1:
        return _WindowCrossings(x1, None, ye) if h0 < 0 else _WindowCrossings(None, x1, ye)
    if roots == 2:
        if ye < 0:
            return _WindowCrossings(x2, x1, ye)
        return _WindowCrossings(x1, x2, ye)
    return _WindowCrossings(None, None, ye)


def _day_start(instant: datetime, in_utc: bool) -> datetime:
    aware = ensure_aware(instant)
    if in_utc:
        return aware.replace(hour=0, minute=0, second=0, microsecond=0)
    return instant.replace(hour=0, minute=0, second=0, microsecond=0)


def get_moon_times(
    instant: datetime,
    latitude: float,
    longitude: float,
    in_utc: bool = False,
) -> MoonTimes:
    """Find moon rise and set within one day.

    The day is the local calendar day of *instant* in its own zone, or the
    UTC calendar day when *in_utc* is true. The altitude curve is fitted
    with a quadratic over 2-hour windows; a crossing that happens twice
    inside one window can be missed.
    """

    lat, lon = validate_location(latitude, longitude)
    t = _day_start(instant, in_utc)

    def moon_altitude(hours: float) -> float:
        return get_moon_position(hours_later(t, hours), lat, lon).altitude - HORIZON_CORRECTION

    h0 = moon_altitude(0)
    rise: Optional[float] = None
    set_: Optional[float] = None
    ye = 0.0

    for i in range(1, 25, 2):
        h1 = moon_altitude(i)
        h2 = moon_altitude(i + 1)

        window = _solve_window(h0, h1, h2)
        ye = window.vertex
        if window.rise is not None:
            rise = i + window.rise
        if window.set is not None:
            set_ = i + window.set

        if rise is not None and set_ is not None:
            break

        h0 = h2

    if rise is None and set_ is None:
        always_up = ye > 0
        LOGGER.debug(
            json.dumps(
                {
                    "event": "moon_always_up" if always_up else "moon_always_down",
                    "date": t.date().isoformat(),
                    "latitude": lat,
                    "longitude": lon,
                }
            )
        )
        return MoonTimes(always_up=always_up, always_down=not always_up)

    return MoonTimes(
        rise=hours_later(t, rise) if rise is not None else None,
        set=hours_later(t, set_) if set_ is not None else None,
    )
