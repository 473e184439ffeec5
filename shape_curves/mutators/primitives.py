"""Value types shared by the segment mutators.

``Point`` and ``LineSegment`` are what a curve degenerates into after a
split; ``Projection`` is the nearest-point query result.  All are frozen
dataclasses, so they can be shared freely between paths and commands.
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from enum import Enum
from typing import Sequence, Union

from shape_curves.commands import LineCommand, new_line


class CurveKind(str, Enum):
    """Curve kind, valued by its outline command letter."""

    QUADRATIC = "Q"
    CUBIC = "C"

    @property
    def control_point_count(self) -> int:
        return 3 if self is CurveKind.QUADRATIC else 4


@dataclass(frozen=True, slots=True)
class Point:
    """2D point.  Equality is exact coordinate equality."""

    x: float
    y: float

    @classmethod
    def of(cls, p: Union["Point", Sequence[float]]) -> "Point":
        """Coerce an (x, y) pair into a Point; Points pass through."""
        if isinstance(p, Point):
            return p
        x, y = p
        return cls(float(x), float(y))

    def as_tuple(self) -> tuple[float, float]:
        return (self.x, self.y)

    def distance_to(self, other: "Point") -> float:
        return math.hypot(self.x - other.x, self.y - other.y)

    def lerp(self, other: "Point", t: float) -> "Point":
        return Point(
            (1.0 - t) * self.x + t * other.x,
            (1.0 - t) * self.y + t * other.y,
        )

    def to_command(self, is_split: bool = False) -> LineCommand:
        """Zero-length line at this point."""
        return new_line(self, self, is_split)


@dataclass(frozen=True, slots=True)
class Projection:
    """Closest point on a segment to a query point.

    Parameters
    ----------
    x, y : float
        Closest point on the segment.
    t : float
        Segment parameter of the closest point, in [0, 1].
    d : float
        Euclidean distance from the query point.
    """

    x: float
    y: float
    t: float
    d: float


@dataclass(frozen=True, slots=True)
class LineSegment:
    """Straight segment from ``start`` to ``end``."""

    start: Point
    end: Point

    def path_length(self) -> float:
        return self.start.distance_to(self.end)

    def point_at(self, t: float) -> Point:
        return self.start.lerp(self.end, t)

    def project(self, point: Union[Point, Sequence[float]]) -> Projection:
        p = Point.of(point)
        vx = self.end.x - self.start.x
        vy = self.end.y - self.start.y
        denom = vx * vx + vy * vy
        if denom == 0.0:
            t = 0.0
        else:
            t = ((p.x - self.start.x) * vx + (p.y - self.start.y) * vy) / denom
            t = min(max(t, 0.0), 1.0)
        q = self.point_at(t)
        return Projection(q.x, q.y, t, q.distance_to(p))

    def to_command(self, is_split: bool = False) -> LineCommand:
        return new_line(self.start, self.end, is_split)
