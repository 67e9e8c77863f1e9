"""Sun and moon positions, sunlight phases and moon phases."""

from .astro import HorizontalPosition, InvalidArgumentError, Observer
from .batch import moon_positions, sun_positions
from .julian import days_since_j2000, from_julian_day, to_julian_day
from .moon import (
    MoonIllumination,
    MoonPosition,
    MoonTimes,
    get_moon_illumination,
    get_moon_position,
    get_moon_times,
)
from .sun import DAY_TIME_KINDS, SunEvent, SunTimeKind, get_position, get_times, get_times_for_observer

__version__ = "1.0.0"

__all__ = [
    "get_position",
    "get_times",
    "get_times_for_observer",
    "get_moon_position",
    "get_moon_illumination",
    "get_moon_times",
    "sun_positions",
    "moon_positions",
    "to_julian_day",
    "from_julian_day",
    "days_since_j2000",
    "DAY_TIME_KINDS",
    "HorizontalPosition",
    "InvalidArgumentError",
    "MoonIllumination",
    "MoonPosition",
    "MoonTimes",
    "Observer",
    "SunEvent",
    "SunTimeKind",
]
