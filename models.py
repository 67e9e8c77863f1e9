"""Pydantic models for API requests and responses."""

from __future__ import annotations

from datetime import UTC, datetime
from typing import Dict, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator


class LocationParams(BaseModel):
    """Validated location and instant shared by the location-aware endpoints."""

    model_config = ConfigDict(populate_by_name=True)

    lat: float = Field(..., ge=-90.0, le=90.0, description="Latitude in degrees")
    lon: float = Field(..., ge=-180.0, le=180.0, description="Longitude in degrees")
    when: datetime = Field(
        ...,
        alias="datetime",
        description="ISO-8601 instant; a missing offset is read as UTC",
    )

    @field_validator("when")
    def validate_when(cls, value: datetime) -> datetime:
        return _as_aware(value)


class SunTimesParams(LocationParams):
    height: float = Field(0.0, ge=0.0, description="Observer height above the horizon in meters")
    offset_hours: Optional[float] = Field(
        None,
        description="Optional fixed offset in hours applied to the returned times",
    )

    @field_validator("offset_hours")
    def validate_offset_hours(cls, value: Optional[float]) -> Optional[float]:
        if value is None:
            return value
        if not -24.0 < value < 24.0:
            raise ValueError("offset_hours must be strictly between -24 and 24 hours")
        return value


class MoonTimesParams(LocationParams):
    utc: bool = Field(False, description="Search the UTC calendar day instead of the local one")


class IlluminationParams(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    when: datetime = Field(..., alias="datetime", description="ISO-8601 instant")

    @field_validator("when")
    def validate_when(cls, value: datetime) -> datetime:
        return _as_aware(value)


def _as_aware(value: datetime) -> datetime:
    if value.tzinfo is None:
        return value.replace(tzinfo=UTC)
    return value


class SunPositionResponse(BaseModel):
    ok: bool = True
    azimuth: float = Field(..., description="Azimuth in radians, 0 = south, west positive")
    altitude: float = Field(..., description="Altitude in radians")
    azimuth_deg: float
    altitude_deg: float


class SunTimesResponse(BaseModel):
    """Sun event times; events that do not happen on the day are ``null``."""

    ok: bool = True
    latitude: float
    longitude: float
    height: float
    times: Dict[str, Optional[str]] = Field(
        ..., description="Event name to ISO-8601 time, or null when absent"
    )


class MoonPositionResponse(BaseModel):
    ok: bool = True
    azimuth: float
    altitude: float
    distance_km: float
    parallactic_angle: float


class MoonIlluminationResponse(BaseModel):
    ok: bool = True
    fraction: float = Field(..., ge=0.0, le=1.0)
    phase: float = Field(..., ge=0.0, lt=1.0)
    angle: float


class MoonTimesResponse(BaseModel):
    ok: bool = True
    rise: Optional[str] = None
    set: Optional[str] = None
    always_up: bool = False
    always_down: bool = False


class HealthResponse(BaseModel):
    """Health-check response."""

    ok: bool = True
    version: str


class ErrorResponse(BaseModel):
    """Error payload."""

    ok: bool = False
    code: str
    error: str
