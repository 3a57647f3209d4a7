"""Helpers for fetching geocoding and hourly forecast data from the Open-Meteo APIs."""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

import requests_cache
from retry_requests import retry

from pooltime.config import settings
from pooltime.errors import LocationNotFoundError
from utils.logging_utils import get_tagged_logger

logger = get_tagged_logger(__name__, tag="open_meteo_client")

cache_session = requests_cache.CachedSession(".cache", expire_after=settings.http_cache_seconds)
session = retry(cache_session, retries=settings.http_retries, backoff_factor=settings.http_backoff_factor)

OPEN_METEO_WEATHER_URL = "https://api.open-meteo.com/v1/forecast"
OPEN_METEO_GEOCODING_URL = "https://geocoding-api.open-meteo.com/v1/search"

HOURLY_VARS = [
    "temperature_2m",
    "weathercode",
    "windspeed_10m",
    "precipitation_probability",
    "uv_index",
]

EXPECTED_HOURLY_UNITS = {
    "temperature_2m": "°C",
    "windspeed_10m": "km/h",
    "precipitation_probability": "%",
    "weathercode": "wmo code",
    "uv_index": "",
}

# Acceptable alternative units that should not trigger warnings (API/localized differences).
ALLOWED_HOURLY_UNIT_SYNONYMS = {
    "temperature_2m": {"°C"},
    "windspeed_10m": {"km/h", "kmh"},
    "precipitation_probability": {"%", "percent"},
    "weathercode": {"wmo code", "WMO code"},
    "uv_index": {"", "index", "UV-index"},
}


@dataclass
class GeocodedLocation:
    """First geocoding match for a place name."""
    name: str
    latitude: float
    longitude: float
    country: Optional[str] = None
    timezone: Optional[str] = None


@dataclass
class CurrentWeather:
    """Open-Meteo `current_weather` block (used for the detail view)."""
    time: str
    temperature: float
    weather_code: int
    wind_speed: Optional[float] = None


@dataclass
class PoolForecast:
    """Hourly forecast block plus the metadata needed to interpret it."""
    hourly: Dict[str, List[Any]]
    timezone: str
    utc_offset_seconds: int = 0
    hourly_units: Dict[str, str] = field(default_factory=dict)
    current: Optional[CurrentWeather] = None


def _warn_on_unexpected_units(units: dict, *, context: str):
    """Log a warning if Open-Meteo returns units the scoring bands were not written for."""
    if not units:
        return
    for field_name, expected in EXPECTED_HOURLY_UNITS.items():
        if field_name not in units:
            continue
        actual = units.get(field_name)
        if actual is None or actual == expected:
            continue
        allowed = ALLOWED_HOURLY_UNIT_SYNONYMS.get(field_name, set())
        if actual not in allowed:
            logger.warning(
                "Unexpected Open-Meteo unit",
                extra={"context": context, "field": field_name, "unit": actual, "expected": expected,
                       "allowed": sorted(allowed)},
            )


def _parse_current(data: dict) -> Optional[CurrentWeather]:
    """Read the optional current_weather block."""
    current = data.get("current_weather")
    if not current:
        return None
    return CurrentWeather(
        time=current.get("time", ""),
        temperature=current.get("temperature"),
        weather_code=current.get("weathercode", current.get("weather_code")),
        wind_speed=current.get("windspeed", current.get("wind_speed")),
    )


def geocode_location(name: str, *, language: str = "en") -> GeocodedLocation:
    """Resolve a place name to coordinates using the first geocoding match."""
    params = {
        "name": name,
        "count": 1,
        "language": language,
        "format": "json",
    }

    resp = session.get(OPEN_METEO_GEOCODING_URL, params=params, timeout=settings.http_timeout_seconds)
    resp.raise_for_status()
    data = resp.json()

    results = data.get("results") or []
    if not results:
        logger.info("No geocoding match", extra={"location": name})
        raise LocationNotFoundError(f"Location not found: {name}")

    top = results[0]
    return GeocodedLocation(
        name=top.get("name", name),
        latitude=top["latitude"],
        longitude=top["longitude"],
        country=top.get("country"),
        timezone=top.get("timezone"),
    )


def fetch_pool_forecast(
    latitude: float,
    longitude: float,
    *,
    timezone: str = "auto",
    forecast_days: int = 1,
) -> PoolForecast:
    """Fetch today's hourly forecast (Celsius, km/h) for the given coordinates."""
    params = {
        "latitude": latitude,
        "longitude": longitude,
        "hourly": ",".join(HOURLY_VARS),
        "current_weather": "true",
        "timezone": timezone,
        "forecast_days": forecast_days,
    }

    resp = session.get(OPEN_METEO_WEATHER_URL, params=params, timeout=settings.http_timeout_seconds)
    resp.raise_for_status()
    data = resp.json()

    hourly = data.get("hourly") or {}
    hourly_units = data.get("hourly_units") or {}
    _warn_on_unexpected_units(hourly_units, context="pool_hourly")

    forecast = PoolForecast(
        hourly=hourly,
        timezone=data.get("timezone") or timezone,
        utc_offset_seconds=int(data.get("utc_offset_seconds") or 0),
        hourly_units=hourly_units,
        current=_parse_current(data),
    )
    logger.debug(
        "Fetched pool forecast",
        extra={"hours": len(hourly.get("time", [])), "timezone": forecast.timezone},
    )
    return forecast
