"""Shared astronomical helpers: constants, coordinate transforms and value types."""

from __future__ import annotations

import math
from dataclasses import dataclass, field
from datetime import UTC, tzinfo
from typing import Optional

__all__ = [
    "RAD",
    "OBLIQUITY",
    "InvalidArgumentError",
    "Observer",
    "EquatorialCoordinate",
    "HorizontalPosition",
    "right_ascension",
    "declination",
    "azimuth",
    "altitude",
    "sidereal_time",
    "parallactic_angle",
    "astro_refraction",
    "observer_angle",
]

RAD = math.pi / 180.0
OBLIQUITY = RAD * 23.4397  # Obliquity of the ecliptic.


class InvalidArgumentError(ValueError):
    """Raised when a caller passes coordinates or times outside the supported domain."""


def _require_finite(name: str, value: float) -> float:
    try:
        number = float(value)
    except (TypeError, ValueError) as exc:
        raise InvalidArgumentError(f"{name} must be a number, got {value!r}") from exc
    if not math.isfinite(number):
        raise InvalidArgumentError(f"{name} must be finite, got {value!r}")
    return number


def validate_location(latitude: float, longitude: float) -> tuple[float, float]:
    """Return validated ``(latitude, longitude)`` in degrees."""

    lat = _require_finite("latitude", latitude)
    lon = _require_finite("longitude", longitude)
    if not -90.0 <= lat <= 90.0:
        raise InvalidArgumentError(f"latitude must be within [-90, 90], got {lat}")
    if not -180.0 <= lon <= 180.0:
        raise InvalidArgumentError(f"longitude must be within [-180, 180], got {lon}")
    return lat, lon


@dataclass(frozen=True)
class Observer:
    """Geographic observer.

    ``height`` is metres above the horizon and ``tz`` is the zone used to
    express computed event times.
    """

    latitude: float
    longitude: float
    height: float = 0.0
    tz: tzinfo = field(default=UTC)

    def __post_init__(self) -> None:
        lat, lon = validate_location(self.latitude, self.longitude)
        object.__setattr__(self, "latitude", lat)
        object.__setattr__(self, "longitude", lon)
        object.__setattr__(self, "height", _require_finite("height", self.height))
        if not isinstance(self.tz, tzinfo):
            raise InvalidArgumentError(f"tz must be a tzinfo, got {self.tz!r}")


@dataclass(frozen=True)
class EquatorialCoordinate:
    right_ascension: float
    declination: float
    distance: Optional[float] = None


@dataclass(frozen=True)
class HorizontalPosition:
    """Apparent direction of a body. Azimuth is measured from south toward west."""

    azimuth: float
    altitude: float


# The transforms below take an ``xp`` namespace: ``math`` for scalars or
# ``numpy`` for arrays. Both expose sin/cos/tan/asin/atan2 under those names.


def right_ascension(l, b, xp=math):
    return xp.atan2(xp.sin(l) * math.cos(OBLIQUITY) - xp.tan(b) * math.sin(OBLIQUITY), xp.cos(l))


def declination(l, b, xp=math):
    return xp.asin(xp.sin(b) * math.cos(OBLIQUITY) + xp.cos(b) * math.sin(OBLIQUITY) * xp.sin(l))


def azimuth(hour_angle, phi: float, dec, xp=math):
    return xp.atan2(
        xp.sin(hour_angle), xp.cos(hour_angle) * math.sin(phi) - xp.tan(dec) * math.cos(phi)
    )


def altitude(hour_angle, phi: float, dec, xp=math):
    return xp.asin(
        math.sin(phi) * xp.sin(dec) + math.cos(phi) * xp.cos(dec) * xp.cos(hour_angle)
    )


def parallactic_angle(hour_angle, phi: float, dec, xp=math):
    # Meeus formula 14.1
    return xp.atan2(xp.sin(hour_angle), math.tan(phi) * xp.cos(dec) - xp.sin(dec) * xp.cos(hour_angle))


def sidereal_time(d, lw: float):
    return RAD * (280.16 + 360.9856235 * d) - lw


def astro_refraction(h, xp=math):
    """Atmospheric refraction in radians for an altitude *h* in radians.

    Meeus, Astronomical Algorithms (2nd ed.), formula 16.4. The formula only
    holds for non-negative altitudes, so negative input is clamped to the
    horizon (it would divide by zero at h = -0.08901179).
    """

    h = max(h, 0.0) if xp is math else xp.maximum(h, 0.0)
    return 0.0002967 / xp.tan(h + 0.00312536 / (h + 0.08901179))


def observer_angle(height: float) -> float:
    """Depression of the horizon in degrees for an observer *height* metres up."""

    if height <= 0:
        return 0.0
    return -2.076 * math.sqrt(height) / 60.0
