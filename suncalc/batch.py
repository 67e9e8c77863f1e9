"""Vectorised sun and moon positions for many instants at one location."""

from __future__ import annotations

from datetime import datetime
from typing import Iterable

import numpy as np

from .astro import (
    RAD,
    altitude,
    astro_refraction,
    azimuth,
    parallactic_angle,
    sidereal_time,
    validate_location,
)
from .julian import days_since_j2000
from .moon import moon_coords
from .sun import sun_coords

__all__ = ["sun_positions", "moon_positions"]


def _days(instants: Iterable[datetime]) -> np.ndarray:
    return np.array([days_since_j2000(t) for t in instants], dtype=float)


def sun_positions(instants: Iterable[datetime], latitude: float, longitude: float) -> np.ndarray:
    """Return an ``(n, 2)`` array of sun ``(azimuth, altitude)`` in radians."""

    lat, lon = validate_location(latitude, longitude)
    phi = RAD * lat
    d = _days(instants)
    c = sun_coords(d, np)
    hour_angle = sidereal_time(d, RAD * -lon) - c.right_ascension
    return np.column_stack(
        [azimuth(hour_angle, phi, c.declination, np), altitude(hour_angle, phi, c.declination, np)]
    )


def moon_positions(instants: Iterable[datetime], latitude: float, longitude: float) -> np.ndarray:
    """Return an ``(n, 4)`` array of moon ``(azimuth, altitude, distance, parallactic_angle)``.

    Altitudes include the same refraction correction as
    :func:`suncalc.moon.get_moon_position`.
    """

    lat, lon = validate_location(latitude, longitude)
    phi = RAD * lat
    d = _days(instants)
    c = moon_coords(d, np)
    hour_angle = sidereal_time(d, RAD * -lon) - c.right_ascension
    h = altitude(hour_angle, phi, c.declination, np)
    return np.column_stack(
        [
            azimuth(hour_angle, phi, c.declination, np),
            h + astro_refraction(h, np),
            c.distance,
            parallactic_angle(hour_angle, phi, c.declination, np),
        ]
    )
