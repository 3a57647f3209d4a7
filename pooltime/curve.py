"""Smoothed score curve for the 24-hour chart.

Pure geometry: hour buckets go in, pixel points, Bezier handles and path
commands come out. Nothing here knows about SVG elements or a canvas; the
path commands can be rendered by either (see `to_svg_path`).
"""

from __future__ import annotations

from typing import List, Sequence

from pooltime.aggregation import HOURS_PER_DAY
from pooltime.domain import (
    ChartGeometry,
    ControlPoints,
    HourBucket,
    PathCommand,
    Point,
    PoolCurve,
    svg_path_data,
)

SMOOTHING = 0.2


def scale_points(buckets: Sequence[HourBucket], geometry: ChartGeometry) -> List[Point]:
    """Map (hour, score) pairs to pixels; score 0 sits on the baseline, 100 on top."""
    return [
        Point(
            x=geometry.margin_left + b.hour * geometry.x_scale,
            y=geometry.margin_top + (geometry.plot_height - b.score * geometry.y_scale),
        )
        for b in buckets
    ]


def control_points(points: Sequence[Point], smoothing: float = SMOOTHING) -> List[ControlPoints]:
    """
    Bezier handles for every point.

    Interior points get a tangent estimated from their two neighbours,
    scaled by `smoothing`. The first and last points collapse both handles
    onto the point itself so the curve does not overshoot at the edges.
    """
    handles: List[ControlPoints] = []
    last = len(points) - 1
    for i, p in enumerate(points):
        if i == 0 or i == last:
            handles.append(ControlPoints(cp_in=p, cp_out=p))
            continue
        prev, nxt = points[i - 1], points[i + 1]
        dx = (nxt.x - prev.x) * smoothing
        dy = (nxt.y - prev.y) * smoothing
        handles.append(
            ControlPoints(
                cp_in=Point(x=p.x - dx, y=p.y - dy),
                cp_out=Point(x=p.x + dx, y=p.y + dy),
            )
        )
    return handles


def _curve_segments(points: Sequence[Point], handles: Sequence[ControlPoints]) -> List[PathCommand]:
    """
    One cubic segment per consecutive pair: leave i-1 on its out-handle, reach i on its in-handle.

    Taking both handles from point i-1 (`C cp_out(i-1) cp_in(i-1) p(i)`) would
    pull each segment back behind its start before it reaches p(i). Pairing
    the in-handle with the end point keeps the curve between its neighbours.
    """
    segments: List[PathCommand] = []
    for i in range(1, len(points)):
        out_handle = handles[i - 1].cp_out
        in_handle = handles[i].cp_in
        end = points[i]
        segments.append(
            PathCommand(
                op="C",
                coords=(out_handle.x, out_handle.y, in_handle.x, in_handle.y, end.x, end.y),
            )
        )
    return segments


def build_curve(buckets: Sequence[HourBucket], geometry: ChartGeometry | None = None) -> PoolCurve:
    """Build the line and area paths for exactly 24 hour buckets."""
    if len(buckets) != HOURS_PER_DAY:
        raise ValueError(f"expected {HOURS_PER_DAY} hour buckets, got {len(buckets)}")

    geometry = geometry or ChartGeometry()
    ordered = sorted(buckets, key=lambda b: b.hour)
    points = scale_points(ordered, geometry)
    handles = control_points(points)
    segments = _curve_segments(points, handles)

    first, last = points[0], points[-1]
    baseline = geometry.baseline_y

    line_path = [PathCommand(op="M", coords=(first.x, first.y)), *segments]
    area_path = [
        PathCommand(op="M", coords=(first.x, baseline)),
        PathCommand(op="L", coords=(first.x, first.y)),
        *segments,
        PathCommand(op="L", coords=(last.x, baseline)),
        PathCommand(op="Z"),
    ]

    return PoolCurve(
        points=points,
        control_points=handles,
        line_path=line_path,
        area_path=area_path,
    )


def to_svg_path(commands: Sequence[PathCommand]) -> str:
    """Render path commands as SVG path data."""
    return svg_path_data(commands)
