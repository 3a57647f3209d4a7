import os
import unittest

from pydantic import ValidationError

from pooltime.config import Settings


class TestConfig(unittest.TestCase):
    def _with_env(self, key, value):
        previous = os.environ.get(key)
        os.environ[key] = value
        self.addCleanup(self._restore, key, previous)

    @staticmethod
    def _restore(key, previous):
        if previous is None:
            os.environ.pop(key, None)
        else:
            os.environ[key] = previous

    def test_settings_defaults(self):
        for key in ("POOLTIME_FORECAST_SOURCE", "POOLTIME_CHART_WIDTH"):
            previous = os.environ.pop(key, None)
            if previous is not None:
                self.addCleanup(self._restore, key, previous)
        s = Settings()
        self.assertEqual(s.forecast_source, "open_meteo")
        self.assertEqual(s.chart_width, 600)

    def test_forecast_horizon_is_not_configurable(self):
        self._with_env("POOLTIME_FORECAST_DAYS", "2")
        self.assertFalse(hasattr(Settings(), "forecast_days"))

    def test_log_level_is_normalized(self):
        self._with_env("POOLTIME_LOG_LEVEL", "debug")
        self.assertEqual(Settings().log_level, "DEBUG")

    def test_chart_size_must_be_positive(self):
        self._with_env("POOLTIME_CHART_HEIGHT", "0")
        with self.assertRaises(ValidationError):
            Settings()


if __name__ == "__main__":
    unittest.main()
