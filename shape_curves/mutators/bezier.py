"""Quadratic and cubic Bézier segments of an editable outline.

A ``CurveSegment`` answers the questions the path editor asks about one
curved segment: its length, the closest point to the cursor, the piece
between two parameters, the equivalent cubic of a quadratic, and the
parameter at which a given fraction of the length has been travelled.

Degenerate results are not kept as curves: a split that collapses to a
single parameter is a ``Point`` and a split that turns out straight is a
``LineSegment``.  Callers dispatch on the returned type (``SplitResult``).

All geometry comes from ``shape_curves.utils.geometry``; control points are
held as a float64 tensor next to the immutable ``Point`` tuple.
"""

from __future__ import annotations

import logging
import math
import warnings
from dataclasses import dataclass, field
from typing import Optional, Sequence, Tuple, Union

import torch

from shape_curves.commands import Command, new_bezier_curve, new_quadratic_curve
from shape_curves.mutators.diagnostics import (
    ArcLengthSearchDiagnostic,
    DiagnosticSink,
    log_diagnostic,
)
from shape_curves.mutators.primitives import CurveKind, LineSegment, Point, Projection
from shape_curves.utils import geometry
from shape_curves.utils.validators import DEFAULT_KERNEL_CONFIG, KernelConfig

logger = logging.getLogger(__name__)

PointLike = Union[Point, Sequence[float]]


# ---------------------------------------------------------------------------
# Exceptions
# ---------------------------------------------------------------------------


class InvalidCurveStateError(RuntimeError):
    """Raised when a segment carries a kind it cannot be written as."""

    pass


class UnsupportedConversionWarning(UserWarning):
    """Emitted for conversions that would need a lossy fit (cubic → quadratic)."""

    pass


# ---------------------------------------------------------------------------
# Segment
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class CurveSegment:
    """Immutable quadratic or cubic Bézier segment.

    Parameters
    ----------
    kind : CurveKind or ``"Q"`` | ``"C"``
        Curve kind; fixes the number of control points (3 or 4).
    points : sequence of Point or (x, y)
        Control points, start point first.  Copied into a tuple.
    config : KernelConfig, optional
        Numeric tolerances; defaults to ``DEFAULT_KERNEL_CONFIG``.
    diagnostics : callable, optional
        Sink for search diagnostics; defaults to logging a warning.

    Raises
    ------
    ValueError
        Unknown kind, wrong number of control points, or non-finite
        coordinates.
    """

    kind: CurveKind
    points: Tuple[Point, ...]
    config: Optional[KernelConfig] = field(default=None, kw_only=True, compare=False, repr=False)
    diagnostics: Optional[DiagnosticSink] = field(default=None, kw_only=True, compare=False, repr=False)
    length: float = field(init=False, compare=False)
    _ctrl: torch.Tensor = field(init=False, compare=False, repr=False)

    def __post_init__(self) -> None:
        try:
            kind = CurveKind(self.kind)
        except ValueError:
            raise ValueError(f"Unknown curve kind: {self.kind!r}, expected 'Q' or 'C'") from None

        points = tuple(Point.of(p) for p in self.points)
        if len(points) != kind.control_point_count:
            raise ValueError(
                f"{kind.name.lower()} curve needs {kind.control_point_count} control points, "
                f"got {len(points)}"
            )
        for p in points:
            if not (math.isfinite(p.x) and math.isfinite(p.y)):
                raise ValueError(f"Control point must be finite, got ({p.x}, {p.y})")

        config = self.config if self.config is not None else DEFAULT_KERNEL_CONFIG
        ctrl = geometry.control_tensor([p.as_tuple() for p in points])

        object.__setattr__(self, 'kind', kind)
        object.__setattr__(self, 'points', points)
        object.__setattr__(self, 'config', config)
        object.__setattr__(self, 'diagnostics', self.diagnostics or log_diagnostic)
        object.__setattr__(self, '_ctrl', ctrl)
        object.__setattr__(self, 'length', geometry.bezier_length(ctrl, config.quadrature_order))

    @classmethod
    def quadratic(cls, p0: PointLike, p1: PointLike, p2: PointLike, **kwargs) -> "CurveSegment":
        return cls(CurveKind.QUADRATIC, (p0, p1, p2), **kwargs)

    @classmethod
    def cubic(
        cls, p0: PointLike, p1: PointLike, p2: PointLike, p3: PointLike, **kwargs
    ) -> "CurveSegment":
        return cls(CurveKind.CUBIC, (p0, p1, p2, p3), **kwargs)

    def _derive(self, points: Sequence[PointLike], kind: Optional[CurveKind] = None) -> "CurveSegment":
        """New segment sharing this one's config and diagnostics sink."""
        return CurveSegment(
            kind or self.kind,
            points,
            config=self.config,
            diagnostics=self.diagnostics,
        )

    # ---- queries -------------------------------------------------------------

    @property
    def start(self) -> Point:
        return self.points[0]

    @property
    def end(self) -> Point:
        return self.points[-1]

    def path_length(self) -> float:
        """Arc length over t ∈ [0, 1], computed at construction."""
        return self.length

    def point_at(self, t: float) -> Point:
        x, y = geometry.bezier_eval(self._ctrl, t).tolist()
        return Point(x, y)

    def project(self, point: PointLike) -> Projection:
        """Closest point on the curve to ``point``.

        Returns
        -------
        Projection
            Coordinates of B(t), t ∈ [0, 1] and the distance to ``point``.
        """
        p = Point.of(point)
        t, q, d = geometry.bezier_project(
            self._ctrl,
            p.as_tuple(),
            samples=self.config.projection_samples,
            iterations=self.config.projection_refine_iterations,
        )
        x, y = q.tolist()
        return Projection(x, y, t, d)

    # ---- transformations -----------------------------------------------------

    def split(self, t1: float, t2: float) -> Union[Point, LineSegment, "CurveSegment"]:
        """Piece of the curve running from B(t1) to B(t2).

        Parameters
        ----------
        t1, t2 : float
            Parameters in [0, 1].  ``t1 > t2`` gives the reversed piece.

        Returns
        -------
        Point
            If ``t1 == t2``, or every resulting control point coincides.
        LineSegment
            If the resulting control points reduce to two distinct points,
            or all lie on the chord between the first and last one.
        CurveSegment
            Otherwise; same kind as ``self``.

        Raises
        ------
        ValueError
            If a parameter lies outside [0, 1].

        Notes
        -----
        A piece with ``t1 != t2`` whose control points all coincide is
        returned as a ``Point`` rather than a one-point curve, so a fully
        collapsed piece has the same type whichever way it arises.
        """
        for t in (t1, t2):
            if not 0.0 <= t <= 1.0:
                raise ValueError(f"Split parameter must be in [0, 1], got {t}")

        if t1 == t2:
            return self.point_at(t1)

        ctrl = geometry.bezier_segment(self._ctrl, t1, t2)
        points = [Point(x, y) for x, y in ctrl.tolist()]
        unique = list(dict.fromkeys(points))

        if len(unique) == 1:
            return points[0]
        if len(unique) == 2 or geometry.is_flat_on_chord(ctrl, self.config.collinear_tolerance):
            return LineSegment(points[0], points[-1])
        return self._derive(points)

    def convert(self, kind: Union[CurveKind, str]) -> "CurveSegment":
        """Equivalent curve of the requested kind.

        Quadratic → cubic is an exact degree elevation.  Same-kind requests
        return a copy.  Cubic → quadratic is not supported: a warning is
        emitted and an unchanged cubic copy is returned.
        """
        kind = CurveKind(kind)

        if self.kind is CurveKind.QUADRATIC and kind is CurveKind.CUBIC:
            q0, q1, q2 = self.points
            c1 = Point(
                q0.x + (2.0 / 3.0) * (q1.x - q0.x),
                q0.y + (2.0 / 3.0) * (q1.y - q0.y),
            )
            c2 = Point(
                q2.x + (2.0 / 3.0) * (q1.x - q2.x),
                q2.y + (2.0 / 3.0) * (q1.y - q2.y),
            )
            return self._derive((q0, c1, c2, q2), CurveKind.CUBIC)

        if kind is not self.kind:
            warnings.warn(
                f"Conversion {self.kind.value} -> {kind.value} is not supported, "
                f"returning the {self.kind.name.lower()} curve unchanged",
                UnsupportedConversionWarning,
                stacklevel=2,
            )
        return self._derive(self.points)

    def reverse(self) -> "CurveSegment":
        """Same curve traversed from end to start."""
        return self._derive(self.points[::-1])

    # ---- arc-length parametrization ------------------------------------------

    def find_t_by_fraction(self, fraction: float) -> float:
        """Parameter t at which ``fraction`` of the arc length is reached.

        Parameters
        ----------
        fraction : float
            Fraction of the total length measured from the start, in [0, 1].

        Returns
        -------
        float
            t ∈ [0, 1].  If the search does not converge, a diagnostic is
            sent to the sink and ``fraction`` is returned unchanged.

        Raises
        ------
        ValueError
            If ``fraction`` lies outside [0, 1].

        Notes
        -----
        Binary search in log-step space.  At candidate t the curve is split
        and the residual ``low - fraction / (1 - fraction) * high`` compares
        the left and right piece lengths with the requested ratio.  Each
        miss halves the step and moves t against the residual's sign.
        """
        if not 0.0 <= fraction <= 1.0:
            raise ValueError(f"Arc-length fraction must be in [0, 1], got {fraction}")
        if fraction == 0.0 or fraction == 1.0:
            return float(fraction)

        cfg = self.config
        ratio = fraction / (1.0 - fraction)
        t = fraction
        step = cfg.initial_step_exponent
        iterations = 0
        t_eval = t
        diff = math.nan

        while step > cfg.min_step_exponent:
            t_eval = min(max(t, 0.0), 1.0)
            left, right = geometry.bezier_split(self._ctrl, t_eval)
            low = geometry.bezier_length(left, cfg.quadrature_order)
            high = geometry.bezier_length(right, cfg.quadrature_order)
            diff = low - ratio * high
            iterations += 1
            if abs(diff) < cfg.arc_length_epsilon:
                logger.debug(
                    "Arc-length fraction %s -> t=%.6f after %d iterations",
                    fraction, t_eval, iterations,
                )
                return t_eval
            step -= 1
            t += (-1.0 if diff > 0 else 1.0) * 2.0 ** step

        self.diagnostics(ArcLengthSearchDiagnostic(
            kind=self.kind.value,
            points=tuple(p.as_tuple() for p in self.points),
            fraction=fraction,
            iterations=iterations,
            last_t=t_eval,
            last_diff=diff,
        ))
        return fraction

    # ---- output --------------------------------------------------------------

    def to_command(self, is_split: bool = False) -> Command:
        """Outline command for this segment (``Q`` or ``C``).

        Raises
        ------
        InvalidCurveStateError
            If ``kind`` is neither quadratic nor cubic.
        """
        if self.kind is CurveKind.QUADRATIC:
            return new_quadratic_curve(*self.points, is_split=is_split)
        if self.kind is CurveKind.CUBIC:
            return new_bezier_curve(*self.points, is_split=is_split)
        raise InvalidCurveStateError(f"Invalid command type: {self.kind!r}")


SplitResult = Union[Point, LineSegment, CurveSegment]
