"""Pick the recommended hour from a day's scored samples."""

from __future__ import annotations

from functools import reduce
from typing import List, Optional, Sequence

from pooltime.domain import WeatherSample
from pooltime.errors import EmptyInputError
from utils.logging_utils import get_tagged_logger

logger = get_tagged_logger(__name__, tag="selection")


def _check_hour(hour: int) -> None:
    if not 0 <= hour <= 23:
        raise ValueError(f"current_hour must be within 0-23, got {hour}")


def _chronological(samples: Sequence[WeatherSample]) -> List[WeatherSample]:
    """Order samples by timestamp; sorted() keeps input order for equal keys."""
    return sorted(samples, key=lambda s: s.timestamp)


def _higher_score(best: WeatherSample, candidate: WeatherSample) -> WeatherSample:
    """Keep the earlier sample unless the later one scores strictly higher."""
    return candidate if candidate.score > best.score else best


def select_best(samples: Sequence[WeatherSample], current_hour: int) -> WeatherSample:
    """
    Return the highest-scoring sample at or after `current_hour`.

    Ties go to the earliest hour. When every sample lies before
    `current_hour` the day's first sample is returned regardless of score.
    """
    if not samples:
        raise EmptyInputError("no hourly samples to choose from")
    _check_hour(current_hour)

    ordered = _chronological(samples)
    upcoming = [s for s in ordered if s.hour >= current_hour]
    if not upcoming:
        logger.info(
            "No forecast hours left today; falling back to the first hour",
            extra={"current_hour": current_hour, "fallback_hour": ordered[0].hour},
        )
        return ordered[0]

    return reduce(_higher_score, upcoming)


def mark_best(samples: Sequence[WeatherSample], best_hour: Optional[int]) -> List[WeatherSample]:
    """Return copies of `samples` with is_best set only where hour == best_hour."""
    return [s.model_copy(update={"is_best": best_hour is not None and s.hour == best_hour}) for s in samples]
