"""HTTP API for the pool-time recommender."""

from typing import Dict, List, Optional

import requests
from fastapi import APIRouter, HTTPException, Query, status
from pydantic import BaseModel

from .config import settings
from .data_sources import build_data_source
from .domain import HourBucket, PathCommand, Point, WeatherSample
from .errors import EmptyInputError, LocationNotFoundError, MalformedSampleError
from .forecast_service import PoolReport, get_pool_outlook, get_pool_outlook_for_location
from .presentation import (
    HourCard,
    RecommendationSummary,
    axis_labels,
    describe_weather_code,
    hour_cards,
    summarize_outlook,
)
from utils.logging_utils import get_tagged_logger

logger = get_tagged_logger(__name__, tag="pooltime/api")

router = APIRouter()
DATA_SOURCE = build_data_source(settings)


class CurveResponse(BaseModel):
    """Chart geometry ready for any 2D renderer."""
    points: List[Point]
    line_path: List[PathCommand]
    area_path: List[PathCommand]
    line_svg: str
    area_svg: str
    axis_labels: Dict[int, str]


class CurrentConditions(BaseModel):
    """Current observation shown in the detail view."""
    temperature_c: Optional[float] = None
    description: Optional[str] = None
    icon: Optional[str] = None


class PoolTimeResponse(BaseModel):
    """Best hour, 24-hour chart data and upcoming hour cards."""
    location: Optional[str] = None
    timezone: str
    current_hour: int
    recommendation: RecommendationSummary
    best: WeatherSample
    hours: List[HourBucket]
    curve: CurveResponse
    upcoming: List[HourCard]
    current: Optional[CurrentConditions] = None


def _current_conditions(report: PoolReport) -> Optional[CurrentConditions]:
    """Convert the current_weather block into the API shape."""
    current = report.current_weather
    if current is None:
        return None
    weather = describe_weather_code(current.weather_code) if current.weather_code is not None else None
    return CurrentConditions(
        temperature_c=current.temperature,
        description=weather.description if weather else None,
        icon=weather.icon if weather else None,
    )


def _to_response(report: PoolReport) -> PoolTimeResponse:
    """Flatten a PoolReport into the response payload."""
    outlook = report.outlook
    curve = outlook.curve
    return PoolTimeResponse(
        location=report.location_name,
        timezone=report.timezone,
        current_hour=outlook.current_hour,
        recommendation=summarize_outlook(outlook),
        best=outlook.best,
        hours=outlook.hours,
        curve=CurveResponse(
            points=curve.points,
            line_path=curve.line_path,
            area_path=curve.area_path,
            line_svg=curve.line_svg(),
            area_svg=curve.area_svg(),
            axis_labels=axis_labels(outlook.hours),
        ),
        upcoming=hour_cards(outlook.samples, outlook.current_hour),
        current=_current_conditions(report),
    )


@router.get("/health")
def health():
    """Liveness check."""
    return {"status": "ok"}


@router.get("/pool-time", response_model=PoolTimeResponse)
def pool_time(
    location: Optional[str] = Query(default=None, min_length=1),
    latitude: Optional[float] = Query(default=None, ge=-90, le=90),
    longitude: Optional[float] = Query(default=None, ge=-180, le=180),
    current_hour: Optional[int] = Query(default=None, ge=0, le=23),
):
    """Recommend today's best pool hour for a place name or coordinate."""
    has_coords = latitude is not None and longitude is not None
    if not location and not has_coords:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Provide a location name or both latitude and longitude.",
        )

    try:
        if has_coords:
            report = get_pool_outlook(
                latitude, longitude, current_hour=current_hour, location_name=location, data_source=DATA_SOURCE
            )
        else:
            report = get_pool_outlook_for_location(location, current_hour=current_hour, data_source=DATA_SOURCE)
    except LocationNotFoundError as exc:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(exc))
    except EmptyInputError:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="No forecast data available.")
    except MalformedSampleError as exc:
        logger.warning("Rejected malformed forecast", extra={"error": str(exc)})
        raise HTTPException(status_code=422, detail=f"Malformed forecast: {exc}")
    except requests.RequestException as exc:
        logger.error("Weather service request failed", extra={"error": str(exc)})
        raise HTTPException(status_code=status.HTTP_502_BAD_GATEWAY, detail="Weather service unavailable.")

    return _to_response(report)
