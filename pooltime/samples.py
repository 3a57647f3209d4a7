"""Turn the raw hourly forecast block into scored WeatherSample objects."""
from __future__ import annotations

import datetime as dt
from typing import Any, Dict, List, Mapping, Optional, Sequence, Union
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from pydantic import ValidationError

from pooltime.domain import WeatherSample
from pooltime.errors import MalformedSampleError
from pooltime.scoring import score_sample
from utils.logging_utils import get_tagged_logger

logger = get_tagged_logger(__name__, tag="samples")

# Hourly series names, with the alternate Open-Meteo spellings accepted for each.
TIME_KEYS = ("time",)
TEMPERATURE_KEYS = ("temperature_2m",)
WIND_KEYS = ("windspeed_10m", "wind_speed_10m")
PRECIP_KEYS = ("precipitation_probability",)
UV_KEYS = ("uv_index",)
WEATHER_CODE_KEYS = ("weathercode", "weather_code")

REQUIRED_SERIES = {
    "time": TIME_KEYS,
    "temperature": TEMPERATURE_KEYS,
    "wind_speed": WIND_KEYS,
    "precipitation_probability": PRECIP_KEYS,
    "weather_code": WEATHER_CODE_KEYS,
}


def _resolve_tz(timezone: Optional[str]) -> Optional[dt.tzinfo]:
    """Map an IANA name to tzinfo; 'auto', empty and unknown names stay naive."""
    if not timezone or timezone == "auto":
        return None
    try:
        return ZoneInfo(timezone)
    except (ZoneInfoNotFoundError, ValueError):
        logger.warning("Unknown timezone; keeping naive local timestamps", extra={"timezone": timezone})
        return None


def _parse_timestamp(value: Union[str, dt.datetime], tzinfo: Optional[dt.tzinfo]) -> dt.datetime:
    """Interpret an ISO-8601 local time string, optionally pinning it to tzinfo."""
    if isinstance(value, dt.datetime):
        parsed = value
    elif isinstance(value, str):
        try:
            parsed = dt.datetime.fromisoformat(value)
        except ValueError as exc:
            raise MalformedSampleError(f"invalid timestamp {value!r}") from exc
    else:
        raise MalformedSampleError(f"invalid timestamp {value!r}")

    if tzinfo is not None and parsed.tzinfo is None:
        # Open-Meteo returns wall-clock times in the requested zone
        parsed = parsed.replace(tzinfo=tzinfo)
    return parsed


def build_sample(
    timestamp: Union[str, dt.datetime, None],
    temperature: Any,
    wind_speed: Any,
    precipitation_probability: Any,
    uv_index: Any,
    weather_code: Any,
    *,
    tzinfo: Optional[dt.tzinfo] = None,
) -> WeatherSample:
    """
    Normalise one hourly record and attach its score.

    Every reading except the UV index is required; a missing UV index counts
    as 0. Out-of-range but numeric values are accepted as-is.
    """
    required = {
        "time": timestamp,
        "temperature": temperature,
        "wind_speed": wind_speed,
        "precipitation_probability": precipitation_probability,
        "weather_code": weather_code,
    }
    missing = [name for name, value in required.items() if value is None]
    if missing:
        raise MalformedSampleError(f"missing {', '.join(missing)}")

    try:
        sample = WeatherSample(
            timestamp=_parse_timestamp(timestamp, tzinfo),
            temperature_c=temperature,
            wind_speed_kmh=wind_speed,
            precipitation_probability_pct=precipitation_probability,
            uv_index=0.0 if uv_index is None else uv_index,
            weather_code=weather_code,
        )
    except ValidationError as exc:
        raise MalformedSampleError(str(exc)) from exc

    return sample.model_copy(update={"score": score_sample(sample)})


def _series(hourly: Mapping[str, Any], keys: Sequence[str]) -> Optional[List[Any]]:
    """Return the first series present under any of `keys`."""
    for key in keys:
        values = hourly.get(key)
        if values is not None:
            return list(values)
    return None


def build_samples(hourly: Mapping[str, Any], *, timezone: Optional[str] = None) -> List[WeatherSample]:
    """
    Build samples from parallel hourly arrays (Open-Meteo `hourly` block).

    A missing required series or series of unequal length rejects the whole
    block. A single record with a null required reading is logged and dropped.
    """
    if not isinstance(hourly, Mapping):
        raise MalformedSampleError("hourly data must be a mapping of parallel series")
    if not hourly:
        return []

    series: Dict[str, List[Any]] = {}
    for name, keys in REQUIRED_SERIES.items():
        values = _series(hourly, keys)
        if values is None:
            raise MalformedSampleError(f"hourly data is missing the '{keys[0]}' series")
        series[name] = values

    expected = len(series["time"])
    uv = _series(hourly, UV_KEYS)
    if uv is None:
        logger.debug("No uv_index series; treating UV as 0 for every hour")
        uv = [None] * expected
    series["uv_index"] = uv

    lengths = {name: len(values) for name, values in series.items()}
    if any(length != expected for length in lengths.values()):
        raise MalformedSampleError(f"hourly series have unequal lengths: {lengths}")

    tzinfo = _resolve_tz(timezone)
    samples: List[WeatherSample] = []
    for i in range(expected):
        try:
            samples.append(
                build_sample(
                    series["time"][i],
                    series["temperature"][i],
                    series["wind_speed"][i],
                    series["precipitation_probability"][i],
                    series["uv_index"][i],
                    series["weather_code"][i],
                    tzinfo=tzinfo,
                )
            )
        except MalformedSampleError as exc:
            logger.warning(
                "Dropping malformed forecast hour",
                extra={"index": i, "reason": str(exc)},
            )

    logger.debug(
        "Built weather samples",
        extra={"received": expected, "kept": len(samples)},
    )
    return samples
