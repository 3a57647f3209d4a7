import unittest

from pooltime.data_sources.factory import build_data_source, DEFAULT_SOURCE_NAME
from pooltime.data_sources.base import CallableForecastDataSource
from pooltime.data_sources.open_meteo_client import fetch_pool_forecast, geocode_location


class DummySettings:
    def __init__(self, **kwargs):
        for k, v in kwargs.items():
            setattr(self, k, v)
        self.forecast_source = getattr(self, "forecast_source", DEFAULT_SOURCE_NAME)


class TestDataSourceFactory(unittest.TestCase):
    def test_build_open_meteo_default(self):
        ds = build_data_source(DummySettings(forecast_source="open_meteo"))
        self.assertIsInstance(ds, CallableForecastDataSource)
        self.assertIs(ds.geocode, geocode_location)
        self.assertIs(ds.pool_forecast, fetch_pool_forecast)

    def test_source_name_is_case_insensitive(self):
        ds = build_data_source(DummySettings(forecast_source="Open_Meteo"))
        self.assertIsInstance(ds, CallableForecastDataSource)

    def test_empty_source_uses_default(self):
        ds = build_data_source(DummySettings(forecast_source=""))
        self.assertIsInstance(ds, CallableForecastDataSource)

    def test_unknown_source_raises(self):
        with self.assertRaises(ValueError):
            build_data_source(DummySettings(forecast_source="unknown-source"))


if __name__ == "__main__":
    unittest.main()
