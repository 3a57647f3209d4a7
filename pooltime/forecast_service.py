"""Fetch today's forecast and turn it into a pool-time outlook."""
from __future__ import annotations

import datetime as dt
from dataclasses import dataclass
from typing import Optional
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from pooltime.config import settings
from pooltime.data_sources import CallableForecastDataSource, ForecastDataSource
from pooltime.data_sources.open_meteo_client import (
    CurrentWeather,
    PoolForecast,
    fetch_pool_forecast,
    geocode_location,
)
from pooltime.domain import ChartGeometry, PoolOutlook
from pooltime.engine import build_pool_outlook
from pooltime.samples import build_samples
from utils.logging_utils import get_tagged_logger

logger = get_tagged_logger(__name__, tag="forecast_service")

FORECAST_DAYS = 1


@dataclass
class PoolReport:
    """Outlook plus the context it was computed for."""
    outlook: PoolOutlook
    timezone: str
    location_name: Optional[str] = None
    current_weather: Optional[CurrentWeather] = None


def _default_data_source() -> ForecastDataSource:
    return CallableForecastDataSource(geocode_location, fetch_pool_forecast)


def resolve_current_hour(forecast: PoolForecast, now: Optional[dt.datetime] = None) -> int:
    """
    Local hour at the forecast location.

    Uses the IANA zone Open-Meteo resolved; falls back to the reported UTC
    offset when the zone name is unknown to this machine.
    """
    now_utc = (now or dt.datetime.now(dt.timezone.utc)).astimezone(dt.timezone.utc)
    try:
        tz: dt.tzinfo = ZoneInfo(forecast.timezone)
    except (ZoneInfoNotFoundError, ValueError):
        logger.debug("Unknown forecast timezone; using utc offset", extra={"timezone": forecast.timezone})
        tz = dt.timezone(dt.timedelta(seconds=forecast.utc_offset_seconds))
    return now_utc.astimezone(tz).hour


def default_geometry() -> ChartGeometry:
    """Chart geometry sized from settings, with the standard margins."""
    return ChartGeometry(width=settings.chart_width, height=settings.chart_height)


def get_pool_outlook(
    latitude: float,
    longitude: float,
    *,
    current_hour: Optional[int] = None,
    location_name: Optional[str] = None,
    data_source: ForecastDataSource | None = None,
    geometry: Optional[ChartGeometry] = None,
) -> PoolReport:
    """
    Fetch the hourly forecast for a coordinate and compute the outlook.

    `current_hour` defaults to the wall-clock hour at the forecast location;
    pass it explicitly for deterministic results.
    """
    ds = data_source or _default_data_source()

    logger.info(
        "Fetching pool forecast",
        extra={"latitude": latitude, "longitude": longitude, "location": location_name},
    )
    forecast = ds.fetch_pool_forecast(
        latitude,
        longitude,
        timezone=settings.timezone,
        forecast_days=FORECAST_DAYS,
    )

    if current_hour is None:
        current_hour = resolve_current_hour(forecast)

    samples = build_samples(forecast.hourly, timezone=forecast.timezone)
    outlook = build_pool_outlook(samples, current_hour, geometry=geometry or default_geometry())

    return PoolReport(
        outlook=outlook,
        timezone=forecast.timezone,
        location_name=location_name,
        current_weather=forecast.current,
    )


def get_pool_outlook_for_location(
    name: str,
    *,
    current_hour: Optional[int] = None,
    data_source: ForecastDataSource | None = None,
    geometry: Optional[ChartGeometry] = None,
) -> PoolReport:
    """Geocode a place name, then compute its pool outlook."""
    ds = data_source or _default_data_source()
    location = ds.geocode_location(name.strip())
    logger.debug(
        "Geocoded location",
        extra={"query": name, "match": location.name, "latitude": location.latitude, "longitude": location.longitude},
    )
    return get_pool_outlook(
        location.latitude,
        location.longitude,
        current_hour=current_hour,
        location_name=location.name,
        data_source=ds,
        geometry=geometry,
    )
