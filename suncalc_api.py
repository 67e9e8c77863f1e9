"""FastAPI application exposing sun and moon computations."""

from __future__ import annotations

import json
import logging
import math
import os
import time
from datetime import UTC, datetime, timedelta, timezone
from typing import Annotated, List, Optional

from fastapi import FastAPI, HTTPException, Query, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

import suncalc
from models import (
    ErrorResponse,
    HealthResponse,
    IlluminationParams,
    LocationParams,
    MoonIlluminationResponse,
    MoonPositionResponse,
    MoonTimesParams,
    MoonTimesResponse,
    SunPositionResponse,
    SunTimesParams,
    SunTimesResponse,
)

logging.basicConfig(level=os.environ.get("SUNCALC_LOG_LEVEL", "INFO").upper(), format="%(message)s")
LOGGER = logging.getLogger("suncalc-api")

APP_DESCRIPTION = "Sun and moon positions, sunlight phases and moon phases"


def _cors_origins() -> List[str]:
    raw = os.environ.get("SUNCALC_CORS_ORIGINS", "*")
    return [origin.strip() for origin in raw.split(",") if origin.strip()]


app = FastAPI(
    title="Suncalc API",
    description=APP_DESCRIPTION,
    version=suncalc.__version__,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=_cors_origins(),
    allow_methods=["GET"],
    allow_headers=["*"],
)

RESPONSES = {
    400: {"model": ErrorResponse},
    422: {"model": ErrorResponse},
    500: {"model": ErrorResponse},
}


def _format(dt: Optional[datetime]) -> Optional[str]:
    if dt is None:
        return None
    if dt.utcoffset() == timedelta(0):
        return dt.astimezone(UTC).isoformat().replace("+00:00", "Z")
    return dt.isoformat()


def _error_response(status_code: int, code: str, message: str) -> JSONResponse:
    payload = ErrorResponse(code=code, error=message)
    LOGGER.error(json.dumps({"event": "error", "code": code, "message": message}))
    return JSONResponse(status_code=status_code, content=payload.model_dump())


def _log_request(event: str, started: float, **fields: object) -> None:
    duration_ms = (time.perf_counter() - started) * 1000.0
    LOGGER.info(json.dumps({"event": event, **fields, "duration_ms": round(duration_ms, 3)}))


@app.exception_handler(RequestValidationError)
async def validation_exception_handler(
    request: Request, exc: RequestValidationError
) -> JSONResponse:
    messages = ", ".join(error["msg"] for error in exc.errors())
    return _error_response(422, "validation_error", messages)


@app.exception_handler(HTTPException)
async def http_exception_handler(request: Request, exc: HTTPException) -> JSONResponse:
    return _error_response(exc.status_code, f"http_{exc.status_code}", str(exc.detail))


@app.exception_handler(Exception)
async def unhandled_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    LOGGER.exception("Unhandled exception", exc_info=exc)
    return _error_response(500, "internal_error", "Unhandled server error")


@app.get("/health", response_model=HealthResponse)
def health() -> HealthResponse:
    return HealthResponse(ok=True, version=suncalc.__version__)


@app.get("/sun/position", response_model=SunPositionResponse, responses=RESPONSES)
def sun_position(params: Annotated[LocationParams, Query()]) -> SunPositionResponse:
    started = time.perf_counter()
    try:
        pos = suncalc.get_position(params.when, params.lat, params.lon)
    except suncalc.InvalidArgumentError as exc:
        raise HTTPException(status_code=400, detail=str(exc))
    _log_request("sun_position", started, lat=params.lat, lon=params.lon)
    return SunPositionResponse(
        azimuth=pos.azimuth,
        altitude=pos.altitude,
        azimuth_deg=math.degrees(pos.azimuth),
        altitude_deg=math.degrees(pos.altitude),
    )


@app.get("/sun/times", response_model=SunTimesResponse, responses=RESPONSES)
def sun_times(params: Annotated[SunTimesParams, Query()]) -> SunTimesResponse:
    started = time.perf_counter()
    tz = UTC if params.offset_hours is None else timezone(timedelta(hours=params.offset_hours))
    try:
        events = suncalc.get_times(params.when, params.lat, params.lon, params.height, tz)
    except suncalc.InvalidArgumentError as exc:
        raise HTTPException(status_code=400, detail=str(exc))
    absent = [kind.value for kind, event in events.items() if not event.occurs]
    _log_request("sun_times", started, lat=params.lat, lon=params.lon, absent=absent)
    return SunTimesResponse(
        latitude=params.lat,
        longitude=params.lon,
        height=params.height,
        times={kind.value: _format(event.time) for kind, event in events.items()},
    )


@app.get("/moon/position", response_model=MoonPositionResponse, responses=RESPONSES)
def moon_position(params: Annotated[LocationParams, Query()]) -> MoonPositionResponse:
    started = time.perf_counter()
    try:
        pos = suncalc.get_moon_position(params.when, params.lat, params.lon)
    except suncalc.InvalidArgumentError as exc:
        raise HTTPException(status_code=400, detail=str(exc))
    _log_request("moon_position", started, lat=params.lat, lon=params.lon)
    return MoonPositionResponse(
        azimuth=pos.azimuth,
        altitude=pos.altitude,
        distance_km=pos.distance,
        parallactic_angle=pos.parallactic_angle,
    )


@app.get("/moon/illumination", response_model=MoonIlluminationResponse, responses=RESPONSES)
def moon_illumination(params: Annotated[IlluminationParams, Query()]) -> MoonIlluminationResponse:
    started = time.perf_counter()
    try:
        illumination = suncalc.get_moon_illumination(params.when)
    except suncalc.InvalidArgumentError as exc:
        raise HTTPException(status_code=400, detail=str(exc))
    _log_request("moon_illumination", started, phase=round(illumination.phase, 4))
    return MoonIlluminationResponse(
        fraction=illumination.fraction,
        phase=illumination.phase,
        angle=illumination.angle,
    )


@app.get("/moon/times", response_model=MoonTimesResponse, responses=RESPONSES)
def moon_times(params: Annotated[MoonTimesParams, Query()]) -> MoonTimesResponse:
    started = time.perf_counter()
    try:
        result = suncalc.get_moon_times(params.when, params.lat, params.lon, in_utc=params.utc)
    except suncalc.InvalidArgumentError as exc:
        raise HTTPException(status_code=400, detail=str(exc))
    _log_request(
        "moon_times",
        started,
        lat=params.lat,
        lon=params.lon,
        always_up=result.always_up,
        always_down=result.always_down,
    )
    return MoonTimesResponse(
        rise=_format(result.rise),
        set=_format(result.set),
        always_up=result.always_up,
        always_down=result.always_down,
    )
