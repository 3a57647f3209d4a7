"""Data source factories for plugging different forecast backends."""

from .base import CallableForecastDataSource, ForecastDataSource
from .factory import build_data_source
from .open_meteo_client import (
    CurrentWeather,
    GeocodedLocation,
    PoolForecast,
    fetch_pool_forecast,
    geocode_location,
)

__all__ = [
    "build_data_source",
    "ForecastDataSource",
    "CallableForecastDataSource",
    "CurrentWeather",
    "GeocodedLocation",
    "PoolForecast",
    "fetch_pool_forecast",
    "geocode_location",
]
