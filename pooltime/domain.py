"""Typed payloads shared by the scoring engine, the curve builder and the API.

This module defines the stable contract between the pure pool-time math and
anything that renders or serves it: forecast samples, hour buckets, chart
geometry and technology-agnostic path commands. No scoring logic lives here.
"""

from __future__ import annotations

from datetime import datetime
from typing import Any, List, Literal, Sequence, Tuple

from pydantic import BaseModel, ConfigDict, Field, model_validator


class _StrictBaseModel(BaseModel):
    """Base model with strict extra handling."""

    model_config = ConfigDict(extra="forbid")


class _FrozenModel(BaseModel):
    """Immutable strict model; derive new values with model_copy(update=...)."""

    model_config = ConfigDict(extra="forbid", frozen=True)


class WeatherSample(_FrozenModel):
    """One forecast hour, normalised and scored.

    `hour` is derived from `timestamp` when omitted and must agree with it
    when given, so serialised samples validate back unchanged.
    """
    timestamp: datetime  # local wall-clock time of the forecast hour
    hour: int = Field(ge=0, le=23)
    temperature_c: float
    wind_speed_kmh: float
    precipitation_probability_pct: float
    uv_index: float = 0.0
    weather_code: int
    score: float = Field(default=0.0, ge=0.0, le=100.0)
    is_best: bool = False

    @model_validator(mode="before")
    @classmethod
    def _derive_hour(cls, data: Any) -> Any:
        if not isinstance(data, dict) or data.get("hour") is not None:
            return data
        ts = data.get("timestamp")
        if isinstance(ts, str):
            try:
                ts = datetime.fromisoformat(ts)
            except ValueError:
                return data  # field validation reports the bad timestamp
        if isinstance(ts, datetime):
            return {**data, "timestamp": ts, "hour": ts.hour}
        return data

    @model_validator(mode="after")
    def _check_hour(self) -> "WeatherSample":
        if self.hour != self.timestamp.hour:
            raise ValueError(f"hour {self.hour} does not match timestamp {self.timestamp.isoformat()}")
        return self


class ScoreBreakdown(_StrictBaseModel):
    """Points earned per factor plus the time-of-day multiplier."""
    temperature: float = 0.0
    wind: float = 0.0
    precipitation: float = 0.0
    uv: float = 0.0
    weather: float = 0.0
    raw_total: float = 0.0
    hour_multiplier: float = 1.0
    score: float = Field(default=0.0, ge=0.0, le=100.0)


class HourBucket(_StrictBaseModel):
    """One of the 24 fixed hour slots plotted on the chart."""
    hour: int = Field(ge=0, le=23)
    score: float = 0.0
    is_best: bool = False
    has_data: bool = False


class ChartGeometry(_FrozenModel):
    """Pixel layout of the score chart."""
    width: float = 600.0
    height: float = 160.0
    margin_top: float = 30.0
    margin_right: float = 30.0
    margin_bottom: float = 25.0
    margin_left: float = 30.0

    @model_validator(mode="after")
    def _check_plot_area(self) -> "ChartGeometry":
        if self.plot_width <= 0 or self.plot_height <= 0:
            raise ValueError("margins leave no room for the plot area")
        return self

    @property
    def plot_width(self) -> float:
        return self.width - self.margin_left - self.margin_right

    @property
    def plot_height(self) -> float:
        return self.height - self.margin_top - self.margin_bottom

    @property
    def baseline_y(self) -> float:
        """y coordinate of a zero score."""
        return self.margin_top + self.plot_height

    @property
    def x_scale(self) -> float:
        """Pixels per hour; 24 points span 23 intervals."""
        return self.plot_width / 23

    @property
    def y_scale(self) -> float:
        """Pixels per score point."""
        return self.plot_height / 100


class Point(_FrozenModel):
    """Pixel-space coordinate."""
    x: float
    y: float


class ControlPoints(_FrozenModel):
    """Bezier handles around one curve point."""
    cp_in: Point
    cp_out: Point


def _format_number(value: float) -> str:
    """Render a coordinate with at most 3 decimals and no trailing zeros."""
    rounded = round(value, 3) + 0.0  # folds -0.0 into 0.0
    return f"{rounded:.3f}".rstrip("0").rstrip(".")


_ARITY = {"M": 2, "L": 2, "C": 6, "Z": 0}


class PathCommand(_FrozenModel):
    """A single draw instruction: move-to, line-to, cubic-to or close."""
    op: Literal["M", "L", "C", "Z"]
    coords: Tuple[float, ...] = ()

    @model_validator(mode="after")
    def _check_arity(self) -> "PathCommand":
        expected = _ARITY[self.op]
        if len(self.coords) != expected:
            raise ValueError(f"'{self.op}' takes {expected} coordinates, got {len(self.coords)}")
        return self

    def to_svg(self) -> str:
        """Return this command as SVG path data."""
        if not self.coords:
            return self.op
        return " ".join([self.op, *(_format_number(c) for c in self.coords)])


def svg_path_data(commands: Sequence[PathCommand]) -> str:
    """Join path commands into an SVG `d` attribute value."""
    return " ".join(cmd.to_svg() for cmd in commands)


class PoolCurve(_StrictBaseModel):
    """Smoothed score line and the filled area beneath it."""
    points: List[Point]
    control_points: List[ControlPoints]
    line_path: List[PathCommand]
    area_path: List[PathCommand]

    def line_svg(self) -> str:
        return svg_path_data(self.line_path)

    def area_svg(self) -> str:
        return svg_path_data(self.area_path)


class PoolOutlook(_StrictBaseModel):
    """Everything computed for one day's forecast."""
    current_hour: int = Field(ge=0, le=23)
    best: WeatherSample
    samples: List[WeatherSample] = Field(default_factory=list)
    hours: List[HourBucket] = Field(default_factory=list)
    curve: PoolCurve
