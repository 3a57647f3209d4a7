"""Deterministic pool-suitability scoring for a single forecast hour.

Five independent factors award points from ordered band tables (first
matching band wins), the sum is scaled by a time-of-day multiplier and the
result is clamped to 0-100. Values outside every band, including NaN or a
missing reading, simply earn nothing for that factor.
"""

from __future__ import annotations

import math
from typing import Any, Callable, Mapping, Optional, Sequence, Tuple

from pooltime.domain import ScoreBreakdown

Band = Tuple[Callable[[float], bool], float]

# Narrowest band first.
TEMPERATURE_BANDS: Sequence[Band] = (
    (lambda t: 24 <= t <= 32, 40.0),
    (lambda t: 20 <= t <= 35, 25.0),
    (lambda t: 18 <= t <= 37, 10.0),
)

WIND_BANDS: Sequence[Band] = (
    (lambda kmh: kmh <= 10, 20.0),
    (lambda kmh: kmh <= 20, 10.0),
)

PRECIPITATION_BANDS: Sequence[Band] = (
    (lambda pct: pct <= 10, 25.0),
    (lambda pct: pct <= 30, 15.0),
    (lambda pct: pct <= 50, 5.0),
)

UV_BANDS: Sequence[Band] = (
    (lambda uv: 3 <= uv <= 7, 10.0),
    (lambda uv: 1 <= uv <= 9, 5.0),
)

# WMO codes: 0-3 clear to overcast, 45/48 fog, higher codes carry precipitation.
WEATHER_CODE_BANDS: Sequence[Band] = (
    (lambda code: code <= 3, 15.0),
    (lambda code: code <= 48, 8.0),
)

# Night hours (22:00-06:59) then the shoulder hours (07:00-08:59, 20:00-21:59).
HOUR_MULTIPLIERS: Sequence[Band] = (
    (lambda h: h < 7 or h >= 22, 0.3),
    (lambda h: h < 9 or h >= 20, 0.7),
)

MIN_SCORE = 0.0
MAX_SCORE = 100.0


def _get_field(sample: Any, key: str, default=None):
    """Support attribute, dict, or Mapping access for samples."""
    if sample is None:
        return default
    if isinstance(sample, Mapping):
        return sample.get(key, default)
    return getattr(sample, key, default)


def _as_number(value: Any) -> Optional[float]:
    """Coerce a reading to float; None and NaN mean 'no reading'."""
    if value is None:
        return None
    try:
        number = float(value)
    except (TypeError, ValueError):
        return None
    if math.isnan(number):
        return None
    return number


def band_value(value: Any, bands: Sequence[Band], default: float = 0.0) -> float:
    """Return the value of the first band whose predicate accepts `value`."""
    number = _as_number(value)
    if number is None:
        return default
    for predicate, points in bands:
        if predicate(number):
            return points
    return default


def hour_multiplier(hour: Any) -> float:
    """Time-of-day multiplier; hours without a penalty return 1.0."""
    return band_value(hour, HOUR_MULTIPLIERS, default=1.0)


def _clamp_score(score: float) -> float:
    """Clamp a score to the 0-100 range."""
    return max(MIN_SCORE, min(MAX_SCORE, score))


def score_breakdown(sample: Any) -> ScoreBreakdown:
    """Score one sample and keep the per-factor points for explanations."""
    temperature = band_value(_get_field(sample, "temperature_c"), TEMPERATURE_BANDS)
    wind = band_value(_get_field(sample, "wind_speed_kmh"), WIND_BANDS)
    precipitation = band_value(_get_field(sample, "precipitation_probability_pct"), PRECIPITATION_BANDS)
    uv = band_value(_get_field(sample, "uv_index", 0.0), UV_BANDS)
    weather = band_value(_get_field(sample, "weather_code"), WEATHER_CODE_BANDS)

    raw_total = temperature + wind + precipitation + uv + weather
    multiplier = hour_multiplier(_get_field(sample, "hour"))

    # penalty first, clamp last
    return ScoreBreakdown(
        temperature=temperature,
        wind=wind,
        precipitation=precipitation,
        uv=uv,
        weather=weather,
        raw_total=raw_total,
        hour_multiplier=multiplier,
        score=_clamp_score(raw_total * multiplier),
    )


def score_sample(sample: Any) -> float:
    """Pure function: map a forecast hour to a 0-100 pool score."""
    return score_breakdown(sample).score


def score_conditions(
    *,
    temperature_c: float,
    wind_speed_kmh: float,
    precipitation_probability_pct: float,
    uv_index: float | None,
    weather_code: int,
    hour: int,
) -> float:
    """Keyword form of score_sample for callers holding bare readings."""
    return score_sample(
        {
            "temperature_c": temperature_c,
            "wind_speed_kmh": wind_speed_kmh,
            "precipitation_probability_pct": precipitation_probability_pct,
            "uv_index": uv_index or 0.0,
            "weather_code": weather_code,
            "hour": hour,
        }
    )
