"""Outline path commands -- the values handed to the path-serialization layer.

Every command is an immutable, slotted dataclass keyed by its outline-format
letter (``L``, ``Q``, ``C``).  Commands carry control points only; turning
them into text or drawing them is the caller's business.

Split flag
----------
``is_split`` marks a command produced by cutting an existing segment.  The
editor uses it for continuity and selection handling; nothing in this
package interprets it.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import TYPE_CHECKING, ClassVar

if TYPE_CHECKING:
    from shape_curves.mutators.primitives import Point

# ---------------------------------------------------------------------------
# Base class
# ---------------------------------------------------------------------------


@dataclass(frozen=True, slots=True)
class Command(ABC):
    """Base class for all path commands."""

    svg_char: ClassVar[str] = ""

    @property
    @abstractmethod
    def points(self) -> tuple[Point, ...]:
        """All points of the command, start point first."""

    @property
    def start(self) -> Point:
        return self.points[0]

    @property
    def end(self) -> Point:
        return self.points[-1]


# ---------------------------------------------------------------------------
# Drawing commands
# ---------------------------------------------------------------------------


@dataclass(frozen=True, slots=True)
class LineCommand(Command):
    """Straight segment.

    Parameters
    ----------
    start_point, end_point : Point
        End-points, also exposed as ``start`` and ``end``.  Equal points give a zero-length line, which is how a
        collapsed split is written back into a path.
    is_split : bool
        Produced by a split.
    """

    svg_char: ClassVar[str] = "L"

    start_point: Point
    end_point: Point
    is_split: bool = False

    @property
    def points(self) -> tuple[Point, ...]:
        return (self.start_point, self.end_point)


@dataclass(frozen=True, slots=True)
class QuadraticCurveCommand(Command):
    """Quadratic Bézier segment (``Q``)."""

    svg_char: ClassVar[str] = "Q"

    p0: Point
    p1: Point
    p2: Point
    is_split: bool = False

    @property
    def points(self) -> tuple[Point, ...]:
        return (self.p0, self.p1, self.p2)


@dataclass(frozen=True, slots=True)
class BezierCurveCommand(Command):
    """Cubic Bézier segment (``C``)."""

    svg_char: ClassVar[str] = "C"

    p0: Point
    p1: Point
    p2: Point
    p3: Point
    is_split: bool = False

    @property
    def points(self) -> tuple[Point, ...]:
        return (self.p0, self.p1, self.p2, self.p3)


# ---------------------------------------------------------------------------
# Factories
# ---------------------------------------------------------------------------


def new_line(start: Point, end: Point, is_split: bool = False) -> LineCommand:
    return LineCommand(start, end, is_split)


def new_quadratic_curve(
    p0: Point, p1: Point, p2: Point, is_split: bool = False
) -> QuadraticCurveCommand:
    return QuadraticCurveCommand(p0, p1, p2, is_split)


def new_bezier_curve(
    p0: Point, p1: Point, p2: Point, p3: Point, is_split: bool = False
) -> BezierCurveCommand:
    return BezierCurveCommand(p0, p1, p2, p3, is_split)
