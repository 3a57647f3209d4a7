"""Run the full pool-time pipeline for one day's forecast."""

from __future__ import annotations

from typing import Any, List, Mapping, Optional, Sequence

from pooltime.aggregation import aggregate_hours
from pooltime.curve import build_curve
from pooltime.domain import ChartGeometry, PoolOutlook, WeatherSample
from pooltime.errors import EmptyInputError
from pooltime.samples import build_samples
from pooltime.selection import mark_best, select_best
from utils.logging_utils import get_tagged_logger

logger = get_tagged_logger(__name__, tag="engine")


def first_day(samples: Sequence[WeatherSample]) -> List[WeatherSample]:
    """Keep only the samples on the earliest calendar date, in input order."""
    day = min(s.timestamp.date() for s in samples)
    kept = [s for s in samples if s.timestamp.date() == day]
    if len(kept) < len(samples):
        logger.debug(
            "Ignoring hours past the first forecast day",
            extra={"day": day.isoformat(), "dropped": len(samples) - len(kept)},
        )
    return kept


def build_pool_outlook(
    samples: Sequence[WeatherSample],
    current_hour: int,
    *,
    geometry: Optional[ChartGeometry] = None,
) -> PoolOutlook:
    """
    Select the best hour, mark it, fill the 24 hour buckets and build the curve.

    Hours beyond the first calendar date in `samples` are ignored.

    Recomputed in full for every forecast; nothing is carried between calls.
    """
    if not samples:
        raise EmptyInputError("no hourly samples to score")

    samples = first_day(samples)
    best = select_best(samples, current_hour)
    marked = mark_best(samples, best.hour)
    hours = aggregate_hours(marked, best.hour)
    curve = build_curve(hours, geometry)

    logger.info(
        "Selected best pool hour",
        extra={"best_hour": best.hour, "score": best.score, "current_hour": current_hour},
    )
    return PoolOutlook(
        current_hour=current_hour,
        best=best.model_copy(update={"is_best": True}),
        samples=marked,
        hours=hours,
        curve=curve,
    )


def build_pool_outlook_from_hourly(
    hourly: Mapping[str, Any],
    current_hour: int,
    *,
    timezone: Optional[str] = None,
    geometry: Optional[ChartGeometry] = None,
) -> PoolOutlook:
    """Normalise a raw hourly block, then run build_pool_outlook."""
    samples = build_samples(hourly, timezone=timezone)
    return build_pool_outlook(samples, current_hour, geometry=geometry)
