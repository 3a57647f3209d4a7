"""Interfaces and helpers for forecast data sources."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Callable, Protocol

from pooltime.data_sources.open_meteo_client import GeocodedLocation, PoolForecast


class ForecastDataSource(Protocol):
    """Interface for anything that can geocode a place and provide hourly weather."""

    def geocode_location(self, name: str) -> GeocodedLocation:
        """Return coordinates for a place name."""
        ...

    def fetch_pool_forecast(
        self,
        latitude: float,
        longitude: float,
        *,
        timezone: str = "auto",
        forecast_days: int = 1,
    ) -> PoolForecast:
        """Return the hourly forecast block for one day."""
        ...


@dataclass
class CallableForecastDataSource(ForecastDataSource):
    """Wrap two callables so they can be swapped for different backends or fakes."""

    geocode: Callable[..., GeocodedLocation]
    pool_forecast: Callable[..., PoolForecast]

    def geocode_location(self, *args, **kwargs) -> GeocodedLocation:
        """Delegate to the configured geocoding callable."""
        return self.geocode(*args, **kwargs)

    def fetch_pool_forecast(self, *args, **kwargs) -> PoolForecast:
        """Delegate to the configured forecast callable."""
        return self.pool_forecast(*args, **kwargs)
