"""Solar ephemeris and sunrise/sunset/twilight computations.

Low-precision formulas from http://aa.quae.nl/en/reken/zonpositie.html,
accurate to roughly an arc-minute.
"""

from __future__ import annotations

import json
import logging
import math
from dataclasses import dataclass
from datetime import datetime, tzinfo
from enum import Enum
from typing import Dict, Optional, Tuple

from .astro import (
    RAD,
    EquatorialCoordinate,
    HorizontalPosition,
    Observer,
    altitude,
    azimuth,
    declination,
    observer_angle,
    right_ascension,
    sidereal_time,
    validate_location,
)
from .julian import J2000, days_since_j2000, ensure_aware, from_julian_day

__all__ = [
    "SunTimeKind",
    "SunEvent",
    "SUN_TIMES",
    "DAY_TIME_KINDS",
    "sun_coords",
    "get_position",
    "get_times",
    "get_times_for_observer",
]

LOGGER = logging.getLogger(__name__)

PERIHELION = RAD * 102.9372  # Longitude of Earth's perihelion.
J0 = 0.0009


class SunTimeKind(str, Enum):
    """Named sun events, in the order they happen during a solar day."""

    NADIR = "nadir"  # sun is in the lowest position, half a day before solar noon
    NIGHT_END = "nightEnd"  # morning astronomical twilight starts
    NAUTICAL_DAWN = "nauticalDawn"  # morning nautical twilight starts
    DAWN = "dawn"  # morning civil twilight starts
    SUNRISE = "sunrise"  # top edge of the sun appears on the horizon
    SUNRISE_END = "sunriseEnd"  # bottom edge of the sun touches the horizon
    GOLDEN_HOUR_END = "goldenHourEnd"
    SOLAR_NOON = "solarNoon"  # sun is in the highest position
    GOLDEN_HOUR = "goldenHour"
    SUNSET_START = "sunsetStart"  # bottom edge of the sun touches the horizon
    SUNSET = "sunset"  # sun disappears below the horizon
    DUSK = "dusk"  # evening nautical twilight starts
    NAUTICAL_DUSK = "nauticalDusk"  # evening astronomical twilight starts
    NIGHT = "night"  # dark enough for astronomical observations


DAY_TIME_KINDS: Tuple[SunTimeKind, ...] = tuple(SunTimeKind)


@dataclass(frozen=True)
class _SunTimeConfig:
    angle: float  # degrees
    morning: SunTimeKind
    evening: SunTimeKind


SUN_TIMES: Tuple[_SunTimeConfig, ...] = (
    _SunTimeConfig(-0.833, SunTimeKind.SUNRISE, SunTimeKind.SUNSET),
    _SunTimeConfig(-0.3, SunTimeKind.SUNRISE_END, SunTimeKind.SUNSET_START),
    _SunTimeConfig(-6.0, SunTimeKind.DAWN, SunTimeKind.DUSK),
    _SunTimeConfig(-12.0, SunTimeKind.NAUTICAL_DAWN, SunTimeKind.NAUTICAL_DUSK),
    _SunTimeConfig(-18.0, SunTimeKind.NIGHT_END, SunTimeKind.NIGHT),
    _SunTimeConfig(6.0, SunTimeKind.GOLDEN_HOUR_END, SunTimeKind.GOLDEN_HOUR),
)


@dataclass(frozen=True)
class SunEvent:
    """A sun event; ``time`` is ``None`` when the sun never reaches the altitude that day."""

    kind: SunTimeKind
    time: Optional[datetime]

    @property
    def occurs(self) -> bool:
        return self.time is not None


def solar_mean_anomaly(d):
    return RAD * (357.5291 + 0.98560028 * d)


def ecliptic_longitude(m, xp=math):
    center = RAD * (1.9148 * xp.sin(m) + 0.02 * xp.sin(2 * m) + 0.0003 * xp.sin(3 * m))
    return m + center + PERIHELION + math.pi


def sun_coords(d, xp=math) -> EquatorialCoordinate:
    """Sun right ascension and declination *d* days after J2000 (scalar or array *d*)."""

    l = ecliptic_longitude(solar_mean_anomaly(d), xp)
    return EquatorialCoordinate(
        right_ascension=right_ascension(l, 0.0, xp), declination=declination(l, 0.0, xp)
    )


def get_position(instant: datetime, latitude: float, longitude: float) -> HorizontalPosition:
    """Return the sun's azimuth and altitude for *instant* at the given location.

    At exactly +-90 degrees latitude the azimuth is not meaningful.
    """

    lat, lon = validate_location(latitude, longitude)
    lw = RAD * -lon
    phi = RAD * lat
    d = days_since_j2000(instant)
    c = sun_coords(d)
    hour_angle = sidereal_time(d, lw) - c.right_ascension
    return HorizontalPosition(
        azimuth=azimuth(hour_angle, phi, c.declination),
        altitude=altitude(hour_angle, phi, c.declination),
    )


def _julian_cycle(d: float, lw: float) -> float:
    return float(round(d - J0 - lw / (2 * math.pi)))


def _approx_transit(ht: float, lw: float, n: float) -> float:
    return J0 + (ht + lw) / (2 * math.pi) + n


def _solar_transit_j(ds: float, m: float, l: float) -> float:
    return J2000 + ds + 0.0053 * math.sin(m) - 0.0069 * math.sin(2 * l)


def _hour_angle(h: float, phi: float, dec: float) -> Optional[float]:
    cos_h = (math.sin(h) - math.sin(phi) * math.sin(dec)) / (math.cos(phi) * math.cos(dec))
    if not -1.0 <= cos_h <= 1.0:
        return None
    return math.acos(cos_h)


def get_times(
    instant: datetime,
    latitude: float,
    longitude: float,
    height: float = 0.0,
    tz: Optional[tzinfo] = None,
) -> Dict[SunTimeKind, SunEvent]:
    """Compute sun event times for the solar day closest to *instant*.

    Parameters
    ----------
    instant:
        Timezone-aware datetime.
    latitude, longitude:
        Geographic coordinates in degrees (east-positive longitude).
    height:
        Observer height in metres; a raised observer sees the sun earlier.
    tz:
        Zone for the returned datetimes; defaults to the zone of *instant*.

    Returns
    -------
    dict
        Mapping of every :class:`SunTimeKind` to a :class:`SunEvent`.
        ``SOLAR_NOON`` and ``NADIR`` always carry a time; the other events
        have ``time=None`` when the sun does not reach their altitude.
    """

    ensure_aware(instant)
    observer = Observer(latitude, longitude, height, tz or instant.tzinfo)
    return get_times_for_observer(instant, observer)


def get_times_for_observer(instant: datetime, observer: Observer) -> Dict[SunTimeKind, SunEvent]:
    lw = RAD * -observer.longitude
    phi = RAD * observer.latitude
    dh = observer_angle(observer.height)

    d = days_since_j2000(instant)
    n = _julian_cycle(d, lw)
    ds = _approx_transit(0, lw, n)

    m = solar_mean_anomaly(ds)
    l = ecliptic_longitude(m)
    dec = declination(l, 0)

    j_noon = _solar_transit_j(ds, m, l)

    result: Dict[SunTimeKind, SunEvent] = {
        SunTimeKind.SOLAR_NOON: SunEvent(SunTimeKind.SOLAR_NOON, from_julian_day(j_noon, observer.tz)),
        SunTimeKind.NADIR: SunEvent(SunTimeKind.NADIR, from_julian_day(j_noon - 0.5, observer.tz)),
    }

    for config in SUN_TIMES:
        h0 = (config.angle + dh) * RAD
        w = _hour_angle(h0, phi, dec)
        if w is None:
            LOGGER.debug(
                json.dumps(
                    {
                        "event": "sun_event_absent",
                        "angle": config.angle,
                        "latitude": observer.latitude,
                        "longitude": observer.longitude,
                    }
                )
            )
            result[config.morning] = SunEvent(config.morning, None)
            result[config.evening] = SunEvent(config.evening, None)
            continue
        j_set = _solar_transit_j(_approx_transit(w, lw, n), m, l)
        j_rise = j_noon - (j_set - j_noon)
        result[config.morning] = SunEvent(config.morning, from_julian_day(j_rise, observer.tz))
        result[config.evening] = SunEvent(config.evening, from_julian_day(j_set, observer.tz))

    return {kind: result[kind] for kind in DAY_TIME_KINDS}
