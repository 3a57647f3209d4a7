import unittest

import requests
from fastapi.testclient import TestClient

from pooltime.data_sources import CallableForecastDataSource
from pooltime.data_sources.open_meteo_client import CurrentWeather, GeocodedLocation, PoolForecast
from pooltime.errors import LocationNotFoundError
from pooltime.main import app as fastapi_app


def _hourly():
    return {
        "time": ["2025-07-01T10:00", "2025-07-01T14:00", "2025-07-01T23:00"],
        "temperature_2m": [30.0, 36.0, 15.0],
        "windspeed_10m": [8.0, 25.0, 2.0],
        "precipitation_probability": [5, 40, 0],
        "uv_index": [5.0, 9.0, 0.0],
        "weathercode": [1, 61, 0],
    }


def _forecast(hourly=None):
    return PoolForecast(
        hourly=_hourly() if hourly is None else hourly,
        timezone="Europe/Madrid",
        utc_offset_seconds=7200,
        current=CurrentWeather(time="2025-07-01T10:00", temperature=29.6, weather_code=1),
    )


def _madrid(*_args, **_kwargs):
    return GeocodedLocation(name="Madrid", latitude=40.4, longitude=-3.7)


class TestApi(unittest.TestCase):
    def setUp(self):
        import pooltime.api as api_mod

        self.api_mod = api_mod
        self._orig_data_source = api_mod.DATA_SOURCE
        self.client = TestClient(fastapi_app)

    def tearDown(self):
        self.api_mod.DATA_SOURCE = self._orig_data_source

    def _use(self, geocode=_madrid, forecast=lambda *_a, **_k: _forecast()):
        self.api_mod.DATA_SOURCE = CallableForecastDataSource(geocode, forecast)

    def test_health(self):
        resp = self.client.get("/v1/health")
        self.assertEqual(resp.status_code, 200)
        self.assertEqual(resp.json(), {"status": "ok"})

    def test_pool_time_for_location(self):
        self._use()
        resp = self.client.get("/v1/pool-time", params={"location": "Madrid", "current_hour": 9})
        self.assertEqual(resp.status_code, 200)
        body = resp.json()

        self.assertEqual(body["location"], "Madrid")
        self.assertEqual(body["recommendation"]["hour"], 10)
        self.assertEqual(body["recommendation"]["best_time"], "10:00")
        self.assertEqual(body["recommendation"]["score"], 100)
        self.assertEqual(body["best"]["hour"], 10)
        self.assertTrue(body["best"]["is_best"])
        self.assertEqual(len(body["hours"]), 24)
        self.assertEqual([h["hour"] for h in body["hours"] if h["is_best"]], [10])
        self.assertTrue(body["curve"]["line_svg"].startswith("M 30 135 C"))
        self.assertTrue(body["curve"]["area_svg"].endswith("Z"))
        self.assertEqual(body["curve"]["line_path"][0]["op"], "M")
        self.assertEqual([c["hour"] for c in body["upcoming"]], [10, 14, 23])
        self.assertEqual(body["current"]["description"], "Mainly clear")

    def test_pool_time_for_coordinates_skips_geocoding(self):
        def geocode_should_not_run(*_a, **_k):
            raise AssertionError("geocoding called for coordinates")

        self._use(geocode=geocode_should_not_run)
        resp = self.client.get("/v1/pool-time", params={"latitude": 40.4, "longitude": -3.7, "current_hour": 12})
        self.assertEqual(resp.status_code, 200)
        self.assertEqual(resp.json()["recommendation"]["hour"], 14)

    def test_missing_location_and_coordinates(self):
        resp = self.client.get("/v1/pool-time", params={"latitude": 40.4})
        self.assertEqual(resp.status_code, 400)

    def test_current_hour_is_validated(self):
        resp = self.client.get("/v1/pool-time", params={"location": "Madrid", "current_hour": 24})
        self.assertEqual(resp.status_code, 422)

    def test_unknown_location(self):
        def not_found(name, **_kwargs):
            raise LocationNotFoundError(f"Location not found: {name}")

        self._use(geocode=not_found)
        resp = self.client.get("/v1/pool-time", params={"location": "Atlantis"})
        self.assertEqual(resp.status_code, 404)

    def test_no_forecast_data(self):
        self._use(forecast=lambda *_a, **_k: _forecast(hourly={}))
        resp = self.client.get("/v1/pool-time", params={"location": "Madrid", "current_hour": 9})
        self.assertEqual(resp.status_code, 404)
        self.assertEqual(resp.json()["detail"], "No forecast data available.")

    def test_malformed_forecast(self):
        hourly = _hourly()
        del hourly["weathercode"]
        self._use(forecast=lambda *_a, **_k: _forecast(hourly=hourly))
        resp = self.client.get("/v1/pool-time", params={"location": "Madrid", "current_hour": 9})
        self.assertEqual(resp.status_code, 422)

    def test_upstream_failure(self):
        def boom(*_a, **_k):
            raise requests.ConnectionError("down")

        self._use(forecast=boom)
        resp = self.client.get("/v1/pool-time", params={"location": "Madrid", "current_hour": 9})
        self.assertEqual(resp.status_code, 502)


if __name__ == "__main__":
    unittest.main()
