"""Spread sparse hourly samples over the fixed 24-slot chart axis."""

from __future__ import annotations

from typing import Dict, List, Optional, Sequence

from pooltime.domain import HourBucket, WeatherSample

HOURS_PER_DAY = 24


def aggregate_hours(samples: Sequence[WeatherSample], best_hour: Optional[int]) -> List[HourBucket]:
    """
    Return exactly 24 buckets ordered by hour.

    Hours without a sample score 0. When several samples share an hour the
    first one wins. `is_best` follows `best_hour` even for an hour with no data.
    """
    by_hour: Dict[int, WeatherSample] = {}
    for sample in samples:
        by_hour.setdefault(sample.hour, sample)

    buckets: List[HourBucket] = []
    for hour in range(HOURS_PER_DAY):
        sample = by_hour.get(hour)
        buckets.append(
            HourBucket(
                hour=hour,
                score=sample.score if sample is not None else 0.0,
                is_best=best_hour is not None and hour == best_hour,
                has_data=sample is not None,
            )
        )
    return buckets
