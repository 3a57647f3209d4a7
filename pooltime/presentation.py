"""Human-facing text for pool recommendations (single fixed English locale).

Everything here reads engine output and returns strings or small payloads; it
never changes a score or the chosen hour.
"""

from __future__ import annotations

import math
from typing import Dict, List, Sequence

from pydantic import BaseModel

from pooltime.domain import HourBucket, PoolOutlook, WeatherSample


class WeatherDescription(BaseModel):
    """Label and icon for a WMO weather code."""
    description: str
    icon: str


class HourCard(BaseModel):
    """One upcoming hour as shown in the detailed forecast strip."""
    hour: int
    label: str
    icon: str
    temperature_c: int
    score: int
    score_class: str


class RecommendationSummary(BaseModel):
    """Headline block for the recommended hour."""
    best_time: str
    hour: int
    reason: str
    score: int
    score_class: str
    explanation: str


WEATHER_CODES: Dict[int, WeatherDescription] = {
    0: WeatherDescription(description="Clear sky", icon="☀️"),
    1: WeatherDescription(description="Mainly clear", icon="🌤️"),
    2: WeatherDescription(description="Partly cloudy", icon="⛅"),
    3: WeatherDescription(description="Overcast", icon="☁️"),
    45: WeatherDescription(description="Fog", icon="🌫️"),
    48: WeatherDescription(description="Freezing fog", icon="🌫️"),
    51: WeatherDescription(description="Light drizzle", icon="🌦️"),
    53: WeatherDescription(description="Moderate drizzle", icon="🌦️"),
    55: WeatherDescription(description="Dense drizzle", icon="🌧️"),
    61: WeatherDescription(description="Light rain", icon="🌦️"),
    63: WeatherDescription(description="Moderate rain", icon="🌧️"),
    65: WeatherDescription(description="Heavy rain", icon="🌧️"),
    80: WeatherDescription(description="Light showers", icon="🌦️"),
    81: WeatherDescription(description="Moderate showers", icon="🌧️"),
    82: WeatherDescription(description="Violent showers", icon="⛈️"),
    95: WeatherDescription(description="Thunderstorm", icon="⛈️"),
}
UNKNOWN_WEATHER = WeatherDescription(description="Unknown", icon="🌡️")

SCORE_CLASSES = (
    (80, "excellent"),
    (60, "good"),
    (40, "fair"),
)

EXPLANATION_PREFIXES = (
    (85, "Golden hour! "),
    (70, "Great choice! "),
    (55, "Good pick: "),
    (40, "Not bad: "),
    (25, "Worth a try: "),
)
FALLBACK_PREFIX = "Better to wait: "
MAX_REASONS = 3
MAX_HOUR_CARDS = 24


def _round_half_up(value: float) -> int:
    """Round .5 away from zero for positive values, like a display would."""
    return int(math.floor(value + 0.5))


def describe_weather_code(code: int) -> WeatherDescription:
    """Look up the label/icon for a weather code."""
    return WEATHER_CODES.get(code, UNKNOWN_WEATHER)


def score_class(score: float) -> str:
    """Bucket a score into excellent/good/fair/poor."""
    for floor, name in SCORE_CLASSES:
        if score >= floor:
            return name
    return "poor"


def format_hour(sample: WeatherSample) -> str:
    """24-hour clock label such as '14:00'."""
    return f"{sample.timestamp.hour}:{sample.timestamp.minute:02d}"


def quick_reason(sample: WeatherSample) -> str:
    """One-line reason: icon and temperature, plus rain/wind notes when favourable."""
    weather = describe_weather_code(sample.weather_code)
    parts = [f"{weather.icon} {_round_half_up(sample.temperature_c)}°C"]
    if sample.precipitation_probability_pct <= 20:
        parts.append("No rain")
    if sample.wind_speed_kmh <= 15:
        parts.append("Light wind")
    return " • ".join(parts)


def _temperature_reason(temp: float) -> str:
    if 24 <= temp <= 32:
        return "perfect water weather"
    if 20 <= temp <= 35:
        return "cool but pleasant" if temp < 24 else "nice and warm"
    if temp < 20:
        return "a little chilly"
    return "seriously hot"


def _wind_reason(wind: float) -> str:
    if wind <= 5:
        return "air as calm as a lake"
    if wind <= 10:
        return "a gentle breeze"
    if wind <= 20:
        return "a bit breezy"
    return "wind strong enough to knock your hat off"


def _rain_reason(precip: float) -> str:
    if precip <= 10:
        return "dry skies"
    if precip <= 30:
        return "only a few threatening clouds"
    if precip <= 50:
        return "might sprinkle a little"
    return "the clouds look suspicious"


def _uv_reason(uv: float) -> str | None:
    if 3 <= uv <= 7:
        return "great sun for tanning"
    if 1 <= uv <= 9:
        return "soft sunshine" if uv < 3 else "strong sun, wear sunscreen"
    return None


def explain_score(sample: WeatherSample) -> str:
    """Short sentence: a score-band prefix followed by up to three reasons."""
    reasons = [
        _temperature_reason(sample.temperature_c),
        _wind_reason(sample.wind_speed_kmh),
        _rain_reason(sample.precipitation_probability_pct),
    ]
    uv = _uv_reason(sample.uv_index)
    if uv:
        reasons.append(uv)

    prefix = FALLBACK_PREFIX
    for floor, text in EXPLANATION_PREFIXES:
        if sample.score >= floor:
            prefix = text
            break
    return prefix + ", ".join(reasons[:MAX_REASONS]) + "."


def hour_cards(samples: Sequence[WeatherSample], current_hour: int) -> List[HourCard]:
    """Cards for the upcoming hours of the first 24 forecast entries."""
    cards: List[HourCard] = []
    for sample in samples[:MAX_HOUR_CARDS]:
        if sample.hour < current_hour:
            continue
        weather = describe_weather_code(sample.weather_code)
        cards.append(
            HourCard(
                hour=sample.hour,
                label=f"{sample.hour}h",
                icon=weather.icon,
                temperature_c=_round_half_up(sample.temperature_c),
                score=_round_half_up(sample.score),
                score_class=score_class(sample.score),
            )
        )
    return cards


def axis_labels(hours: Sequence[HourBucket], every: int = 4) -> Dict[int, str]:
    """Hour labels for the chart axis: every `every` hours plus the best hour."""
    return {b.hour: f"{b.hour}h" for b in hours if b.hour % every == 0 or b.is_best}


def summarize_outlook(outlook: PoolOutlook) -> RecommendationSummary:
    """Headline text for the recommended hour."""
    best = outlook.best
    return RecommendationSummary(
        best_time=format_hour(best),
        hour=best.hour,
        reason=quick_reason(best),
        score=_round_half_up(best.score),
        score_class=score_class(best.score),
        explanation=explain_score(best),
    )
