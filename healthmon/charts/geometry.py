"""Geometry for ring, gauge, donut and bar charts.

All functions are pure: they turn normalized values into the numbers a
renderer needs (radii, dash lengths and offsets, SVG arc paths, bar
heights). Units are abstract drawing units.
"""
import itertools
import math
from dataclasses import dataclass
from typing import Iterable, List, Optional, Sequence, Tuple

from ..collectors.system_models import StorageCategory

DONUT_SEGMENT_GAP = 4.0
BAR_MIN_HEIGHT = 2.0
BAR_LABEL_HEIGHT = 16.0


def clamp(value: float, low: float, high: float) -> float:
    return min(max(value, low), high)


@dataclass(frozen=True)
class Point:
    x: float
    y: float


@dataclass(frozen=True)
class RingGeometry:
    value: float
    size: float
    stroke_width: float
    center: float
    radius: float
    circumference: float
    dash_offset: float

    @property
    def fill_fraction(self) -> float:
        """Share of the ring that is drawn."""
        return 1.0 - self.dash_offset / self.circumference


def circular_progress(value: float, size: float = 80, stroke_width: float = 8) -> RingGeometry:
    """Ring filled proportionally to value (a percentage).

    Requires size > stroke_width.
    """
    if size <= stroke_width:
        raise ValueError(f"size ({size}) must be larger than stroke_width ({stroke_width})")
    normalized = clamp(value, 0, 100)
    radius = (size - stroke_width) / 2
    circumference = 2 * math.pi * radius
    return RingGeometry(
        value=normalized,
        size=size,
        stroke_width=stroke_width,
        center=size / 2,
        radius=radius,
        circumference=circumference,
        dash_offset=circumference * (1 - normalized / 100),
    )


def polar_to_cartesian(center_x: float, center_y: float, radius: float,
                       angle_degrees: float) -> Point:
    """Angle 0 points up; angles grow clockwise."""
    angle = math.radians(angle_degrees - 90)
    return Point(
        x=center_x + radius * math.cos(angle),
        y=center_y + radius * math.sin(angle),
    )


def _num(value: float) -> str:
    """Compact number for SVG path data."""
    text = f"{value:.4f}".rstrip("0").rstrip(".")
    return "0" if text in ("-0", "") else text


def large_arc_flag(start_angle: float, end_angle: float) -> int:
    return 0 if end_angle - start_angle <= 180 else 1


def describe_arc(x: float, y: float, radius: float,
                 start_angle: float, end_angle: float) -> str:
    """SVG path for the arc between two angles, drawn from end to start."""
    start = polar_to_cartesian(x, y, radius, end_angle)
    end = polar_to_cartesian(x, y, radius, start_angle)
    return " ".join([
        "M", _num(start.x), _num(start.y),
        "A", _num(radius), _num(radius), "0",
        str(large_arc_flag(start_angle, end_angle)), "0",
        _num(end.x), _num(end.y),
    ])


@dataclass(frozen=True)
class GaugeGeometry:
    value: float
    label: str
    size: float
    center: float
    radius: float
    start_angle: float
    end_angle: float
    background_path: str
    foreground_path: str

    @property
    def sweep(self) -> float:
        return self.end_angle - self.start_angle

    @property
    def large_arc_flag(self) -> int:
        return large_arc_flag(self.start_angle, self.end_angle)

    @property
    def display_value(self) -> str:
        return f"{math.floor(self.value + 0.5)}%"


def gauge(value: float, size: float = 120, stroke_width: float = 12,
          label: str = "USAGE") -> GaugeGeometry:
    """Semi-circle gauge sweeping from 180 to 360 degrees."""
    normalized = clamp(value, 0, 100)
    radius = (size - stroke_width) / 2
    center = size / 2
    end_angle = 180 + (normalized / 100) * 180
    return GaugeGeometry(
        value=normalized,
        label=label,
        size=size,
        center=center,
        radius=radius,
        start_angle=180,
        end_angle=end_angle,
        background_path=describe_arc(center, center, radius, 180, 360),
        foreground_path=describe_arc(center, center, radius, 180, end_angle),
    )


@dataclass(frozen=True)
class DonutSegment:
    value: float
    color: str
    label: str


@dataclass(frozen=True)
class DonutArc:
    segment: DonutSegment
    start_fraction: float
    fraction: float
    length: float  # drawn length, gap already removed
    offset: float  # distance from the start of the circle


@dataclass(frozen=True)
class DonutGeometry:
    size: float
    center: float
    radius: float
    circumference: float
    total: float
    arcs: Tuple[DonutArc, ...]

    @property
    def no_data(self) -> bool:
        return self.total == 0


def donut(segments: Sequence[DonutSegment], size: float = 140,
          stroke_width: float = 16) -> DonutGeometry:
    """Partition the circumference among segments in the order given.

    A zero total yields no arcs; renderers show a no-data state instead.
    """
    radius = (size - stroke_width) / 2
    circumference = 2 * math.pi * radius
    total = sum(segment.value for segment in segments)

    arcs: List[DonutArc] = []
    if total != 0:
        gap = DONUT_SEGMENT_GAP if len(segments) > 1 else 0.0
        cumulative = 0.0
        for segment in segments:
            fraction = segment.value / total
            arcs.append(DonutArc(
                segment=segment,
                start_fraction=cumulative,
                fraction=fraction,
                length=max(fraction * circumference - gap, 0.0),
                offset=cumulative * circumference,
            ))
            cumulative += fraction

    return DonutGeometry(
        size=size,
        center=size / 2,
        radius=radius,
        circumference=circumference,
        total=total,
        arcs=tuple(arcs),
    )


def storage_segments(categories: Iterable[StorageCategory]) -> List[DonutSegment]:
    """Non-empty categories, largest first."""
    non_empty = [c for c in categories if c.bytes > 0]
    non_empty.sort(key=lambda c: c.bytes, reverse=True)
    return [DonutSegment(value=c.bytes, color=c.color, label=c.name) for c in non_empty]


@dataclass(frozen=True)
class Bar:
    value: float
    fraction: float
    height: float
    label: Optional[str] = None


@dataclass(frozen=True)
class BarChartGeometry:
    height: float
    bar_area_height: float
    label_height: float
    bars: Tuple[Bar, ...]


def bar_chart(values: Sequence[float], max_value: float = 100, height: float = 60,
              labels: Optional[Sequence[str]] = None) -> BarChartGeometry:
    """Bars scaled against max_value with a minimum visible height."""
    if max_value <= 0:
        raise ValueError(f"max_value must be positive, got {max_value}")
    label_height = BAR_LABEL_HEIGHT if labels else 0.0
    area = height - label_height

    bars = []
    for index, value in enumerate(values):
        normalized = clamp(value, 0, max_value)
        fraction = normalized / max_value
        bars.append(Bar(
            value=normalized,
            fraction=fraction,
            height=max(fraction * area, BAR_MIN_HEIGHT),
            label=labels[index] if labels and index < len(labels) else None,
        ))

    return BarChartGeometry(
        height=height,
        bar_area_height=area,
        label_height=label_height,
        bars=tuple(bars),
    )


class GradientIds:
    """Unique, reproducible gradient identifiers for one rendering context.

    The terminal renderer draws with character cells and needs no ids.
    Renderers that emit SVG (exports, web views) take one instance per
    document so gradient definitions never collide.
    """

    def __init__(self, prefix: str = "gradient"):
        self.prefix = prefix
        self._counter = itertools.count(1)

    def next(self, name: str) -> str:
        return f"{self.prefix}-{name}-{next(self._counter)}"
