"""Tests for the CurveSegment mutator.

Validates construction contracts, immutability, length, projection,
splitting (including degenerate results), quadratic → cubic elevation,
the arc-length search and command output.

Run:
    pytest tests/test_curve_segment.py -v
"""

from __future__ import annotations

import dataclasses
import logging
import math

import pytest

from shape_curves.commands import BezierCurveCommand, QuadraticCurveCommand
from shape_curves.mutators import (
    ArcLengthSearchDiagnostic,
    CurveKind,
    CurveSegment,
    InvalidCurveStateError,
    LineSegment,
    Point,
    Projection,
    UnsupportedConversionWarning,
)
from shape_curves.utils.validators import KernelConfig


@pytest.fixture
def cubic() -> CurveSegment:
    return CurveSegment.cubic((0.0, 0.0), (1.0, 2.0), (3.0, 2.0), (4.0, 0.0))


@pytest.fixture
def quadratic() -> CurveSegment:
    return CurveSegment.quadratic((0.0, 0.0), (1.0, 2.0), (2.0, 0.0))


@pytest.fixture
def events() -> list:
    return []


def _assert_point_close(a: Point, b: Point, tol: float = 1e-9) -> None:
    assert a.x == pytest.approx(b.x, abs=tol)
    assert a.y == pytest.approx(b.y, abs=tol)


# ---------------------------------------------------------------------------
# Construction and immutability
# ---------------------------------------------------------------------------


class TestConstruction:
    def test_kind_from_letter(self) -> None:
        seg = CurveSegment("Q", [(0, 0), (1, 1), (2, 0)])
        assert seg.kind is CurveKind.QUADRATIC
        assert seg.points == (Point(0.0, 0.0), Point(1.0, 1.0), Point(2.0, 0.0))

    def test_points_may_be_point_instances(self) -> None:
        pts = (Point(0, 0), Point(1, 1), Point(2, 1), Point(3, 0))
        seg = CurveSegment(CurveKind.CUBIC, pts)
        assert seg.points == pts
        assert seg.start == Point(0, 0)
        assert seg.end == Point(3, 0)

    def test_wrong_point_count_quadratic(self) -> None:
        with pytest.raises(ValueError, match="needs 3 control points, got 2"):
            CurveSegment("Q", [(0, 0), (1, 1)])

    def test_wrong_point_count_cubic(self) -> None:
        with pytest.raises(ValueError, match="needs 4 control points, got 3"):
            CurveSegment("C", [(0, 0), (1, 1), (2, 0)])

    def test_unknown_kind(self) -> None:
        with pytest.raises(ValueError, match="Unknown curve kind"):
            CurveSegment("A", [(0, 0), (1, 1), (2, 0)])

    def test_non_finite_point(self) -> None:
        with pytest.raises(ValueError, match="finite"):
            CurveSegment("Q", [(0, 0), (math.nan, 1), (2, 0)])

    def test_frozen(self, quadratic: CurveSegment) -> None:
        with pytest.raises(dataclasses.FrozenInstanceError):
            quadratic.kind = CurveKind.CUBIC  # type: ignore[misc]

    def test_input_not_aliased(self) -> None:
        pts = [[0.0, 0.0], [1.0, 2.0], [2.0, 0.0]]
        seg = CurveSegment("Q", pts)
        pts[0][0] = 99.0
        pts.append([5.0, 5.0])
        assert seg.points[0] == Point(0.0, 0.0)
        assert len(seg.points) == 3

    def test_value_equality_and_hash(self, quadratic: CurveSegment) -> None:
        same = CurveSegment.quadratic((0, 0), (1, 2), (2, 0))
        assert same == quadratic
        assert len({same, quadratic}) == 1


# ---------------------------------------------------------------------------
# Length
# ---------------------------------------------------------------------------


class TestPathLength:
    def test_straight_cubic(self) -> None:
        seg = CurveSegment.cubic((0, 0), (1, 0), (2, 0), (3, 0))
        assert seg.path_length() == pytest.approx(3.0, abs=1e-12)

    def test_zero_length(self) -> None:
        seg = CurveSegment.quadratic((2, 2), (2, 2), (2, 2))
        assert seg.path_length() == 0.0

    def test_cached(self, cubic: CurveSegment) -> None:
        assert cubic.path_length() == cubic.length
        assert cubic.path_length() > 0.0

    @pytest.mark.parametrize("t", [0.1, 0.35, 0.5, 0.9])
    def test_split_lengths_add_up(self, cubic: CurveSegment, quadratic: CurveSegment, t: float) -> None:
        for seg in (cubic, quadratic):
            left = seg.split(0.0, t)
            right = seg.split(t, 1.0)
            assert left.path_length() + right.path_length() == pytest.approx(seg.path_length(), rel=1e-7)

    @pytest.mark.parametrize("t", [0.3, 0.5, 0.8])
    def test_split_lengths_add_up_across_cusp(self, t: float) -> None:
        # B'(0.5) = 0: the speed has a kink there
        seg = CurveSegment.cubic((0, 0), (1, 1), (0, 1), (1, 0))
        total = seg.split(0.0, t).path_length() + seg.split(t, 1.0).path_length()
        assert total == pytest.approx(seg.path_length(), rel=1e-9)
        assert seg.path_length() == pytest.approx(2.0 * math.sqrt(2.0) - 1.0, rel=1e-9)


# ---------------------------------------------------------------------------
# Projection
# ---------------------------------------------------------------------------


class TestProject:
    @pytest.mark.parametrize("t0", [0.0, 0.2, 0.6, 1.0])
    def test_point_on_curve(self, cubic: CurveSegment, t0: float) -> None:
        target = cubic.point_at(t0)
        proj = cubic.project(target)
        assert isinstance(proj, Projection)
        assert proj.t == pytest.approx(t0, abs=1e-6)
        assert proj.d == pytest.approx(0.0, abs=1e-6)

    def test_point_off_curve(self, quadratic: CurveSegment) -> None:
        proj = quadratic.project((1.0, 5.0))
        assert proj.t == pytest.approx(0.5, abs=1e-6)
        assert proj.d == pytest.approx(4.0, abs=1e-9)
        assert proj.x == pytest.approx(1.0, abs=1e-6)
        assert proj.y == pytest.approx(1.0, abs=1e-9)

    def test_result_lies_on_curve(self, cubic: CurveSegment) -> None:
        proj = cubic.project(Point(1.0, -3.0))
        assert 0.0 <= proj.t <= 1.0
        _assert_point_close(Point(proj.x, proj.y), cubic.point_at(proj.t))
        assert proj.d == pytest.approx(math.hypot(proj.x - 1.0, proj.y + 3.0), abs=1e-12)


# ---------------------------------------------------------------------------
# Split
# ---------------------------------------------------------------------------


class TestSplit:
    @pytest.mark.parametrize("t", [0.0, 0.3, 1.0])
    def test_equal_parameters_give_point(self, cubic: CurveSegment, t: float) -> None:
        result = cubic.split(t, t)
        assert isinstance(result, Point)
        assert result == cubic.point_at(t)

    def test_full_range_reproduces_curve(self, cubic: CurveSegment, quadratic: CurveSegment) -> None:
        for seg in (cubic, quadratic):
            result = seg.split(0.0, 1.0)
            assert isinstance(result, CurveSegment)
            assert result.kind is seg.kind
            assert result.points == seg.points

    def test_sub_curve_follows_original(self, cubic: CurveSegment) -> None:
        piece = cubic.split(0.2, 0.7)
        assert isinstance(piece, CurveSegment)
        for s in (0.0, 0.25, 0.5, 1.0):
            _assert_point_close(piece.point_at(s), cubic.point_at(0.2 + 0.5 * s))

    def test_reversed_parameters(self, cubic: CurveSegment) -> None:
        backward = cubic.split(0.8, 0.2)
        forward = cubic.split(0.2, 0.8)
        assert isinstance(backward, CurveSegment)
        _assert_point_close(backward.start, cubic.point_at(0.8))
        _assert_point_close(backward.end, cubic.point_at(0.2))
        assert backward.path_length() == pytest.approx(forward.path_length(), rel=1e-9)

    def test_collinear_quadratic_gives_line(self) -> None:
        seg = CurveSegment.quadratic((0, 0), (1, 1), (2, 2))
        result = seg.split(0.0, 1.0)
        assert isinstance(result, LineSegment)
        assert result.start == Point(0.0, 0.0)
        assert result.end == Point(2.0, 2.0)

    def test_two_distinct_points_give_line(self) -> None:
        seg = CurveSegment.cubic((0, 0), (0, 0), (3, 3), (3, 3))
        result = seg.split(0.0, 1.0)
        assert isinstance(result, LineSegment)
        assert result == LineSegment(Point(0.0, 0.0), Point(3.0, 3.0))

    def test_collapsed_curve_gives_point(self) -> None:
        seg = CurveSegment.cubic((1, 1), (1, 1), (1, 1), (1, 1))
        assert seg.split(0.0, 0.5) == Point(1.0, 1.0)

    def test_overshooting_collinear_stays_curve(self) -> None:
        seg = CurveSegment.quadratic((0, 0), (3, 0), (1, 0))
        assert isinstance(seg.split(0.0, 1.0), CurveSegment)

    def test_out_of_range(self, cubic: CurveSegment) -> None:
        with pytest.raises(ValueError, match="must be in \\[0, 1\\]"):
            cubic.split(-0.1, 0.5)
        with pytest.raises(ValueError, match="must be in \\[0, 1\\]"):
            cubic.split(0.5, 1.5)

    def test_pieces_share_config_and_sink(self, events: list) -> None:
        cfg = KernelConfig(arc_length_epsilon=0.01)
        seg = CurveSegment.cubic((0, 0), (1, 2), (3, 2), (4, 0), config=cfg, diagnostics=events.append)
        piece = seg.split(0.0, 0.5)
        assert piece.config is cfg
        assert piece.diagnostics == events.append


# ---------------------------------------------------------------------------
# Conversion
# ---------------------------------------------------------------------------


class TestConvert:
    def test_quadratic_to_cubic_control_points(self, quadratic: CurveSegment) -> None:
        cubic = quadratic.convert(CurveKind.CUBIC)
        assert cubic.kind is CurveKind.CUBIC
        expected = [Point(0, 0), Point(2 / 3, 4 / 3), Point(4 / 3, 4 / 3), Point(2, 0)]
        for got, want in zip(cubic.points, expected):
            _assert_point_close(got, want, tol=1e-12)

    def test_quadratic_to_cubic_same_path(self) -> None:
        quad = CurveSegment.quadratic((-1.5, 3.0), (4.0, -2.0), (7.5, 6.25))
        cubic = quad.convert("C")
        for i in range(11):
            t = i / 10
            _assert_point_close(cubic.point_at(t), quad.point_at(t), tol=1e-12)
        assert cubic.path_length() == pytest.approx(quad.path_length(), rel=1e-9)

    def test_same_kind_is_copy(self, cubic: CurveSegment) -> None:
        copy = cubic.convert(CurveKind.CUBIC)
        assert copy == cubic
        assert copy is not cubic

    def test_cubic_to_quadratic_unsupported(self, cubic: CurveSegment) -> None:
        with pytest.warns(UnsupportedConversionWarning, match="not supported"):
            result = cubic.convert(CurveKind.QUADRATIC)
        assert result.kind is CurveKind.CUBIC
        assert result.points == cubic.points

    def test_reverse(self, cubic: CurveSegment) -> None:
        rev = cubic.reverse()
        assert rev.points == cubic.points[::-1]
        _assert_point_close(rev.point_at(0.3), cubic.point_at(0.7))


# ---------------------------------------------------------------------------
# Arc-length search
# ---------------------------------------------------------------------------


class TestFindTByFraction:
    def test_endpoints_exact(self, cubic: CurveSegment) -> None:
        assert cubic.find_t_by_fraction(0) == 0
        assert cubic.find_t_by_fraction(1) == 1
        assert cubic.find_t_by_fraction(0.0) == 0.0
        assert cubic.find_t_by_fraction(1.0) == 1.0

    @pytest.mark.parametrize("fraction", [0.1, 0.3, 0.5, 0.75, 0.9])
    def test_length_ratio_matches(self, cubic: CurveSegment, events: list, fraction: float) -> None:
        seg = CurveSegment(cubic.kind, cubic.points, diagnostics=events.append)
        t = seg.find_t_by_fraction(fraction)
        assert 0.0 <= t <= 1.0
        ratio = seg.split(0.0, t).path_length() / seg.path_length()
        assert ratio == pytest.approx(fraction, abs=seg.config.arc_length_epsilon)
        assert events == []

    def test_uniform_speed_curve(self) -> None:
        seg = CurveSegment.cubic((0, 0), (1, 0), (2, 0), (3, 0))
        assert seg.find_t_by_fraction(0.25) == pytest.approx(0.25, abs=1e-9)

    def test_symmetric_curve_midpoint(self, quadratic: CurveSegment) -> None:
        assert quadratic.find_t_by_fraction(0.5) == pytest.approx(0.5, abs=1e-9)

    def test_tighter_epsilon_from_config(self, cubic: CurveSegment) -> None:
        seg = CurveSegment(cubic.kind, cubic.points, config=KernelConfig(arc_length_epsilon=1e-9))
        t = seg.find_t_by_fraction(0.3)
        ratio = seg.split(0.0, t).path_length() / seg.path_length()
        assert ratio == pytest.approx(0.3, abs=1e-8)

    def test_exhausted_search_returns_fraction(self, events: list) -> None:
        # x = 10 t^3: the target t lies beyond the reach of the step sequence
        seg = CurveSegment.cubic((0, 0), (0, 0), (0, 0), (10, 0), diagnostics=events.append)
        assert seg.find_t_by_fraction(0.1) == 0.1

        assert len(events) == 1
        event = events[0]
        assert isinstance(event, ArcLengthSearchDiagnostic)
        assert event.kind == "C"
        assert event.fraction == 0.1
        assert event.iterations == 98
        assert event.points == ((0.0, 0.0), (0.0, 0.0), (0.0, 0.0), (10.0, 0.0))
        assert abs(event.last_diff) >= seg.config.arc_length_epsilon

    def test_exhausted_search_logs_by_default(self, caplog) -> None:
        seg = CurveSegment.cubic((0, 0), (0, 0), (0, 0), (10, 0))
        with caplog.at_level(logging.WARNING, logger="shape_curves.mutators.diagnostics"):
            assert seg.find_t_by_fraction(0.1) == 0.1

        records = [r for r in caplog.records if r.name == "shape_curves.mutators.diagnostics"]
        assert len(records) == 1
        assert records[0].levelno == logging.WARNING
        assert records[0].fields["event"] == "arc_length_search_exhausted"
        assert records[0].fields["kind"] == "C"

    def test_zero_length_curve(self, events: list) -> None:
        seg = CurveSegment.quadratic((1, 1), (1, 1), (1, 1), diagnostics=events.append)
        assert seg.find_t_by_fraction(0.3) == pytest.approx(0.3)
        assert events == []

    def test_out_of_range(self, cubic: CurveSegment) -> None:
        with pytest.raises(ValueError, match="must be in \\[0, 1\\]"):
            cubic.find_t_by_fraction(1.2)


# ---------------------------------------------------------------------------
# Commands
# ---------------------------------------------------------------------------


class TestToCommand:
    def test_quadratic(self, quadratic: CurveSegment) -> None:
        cmd = quadratic.to_command(is_split=True)
        assert isinstance(cmd, QuadraticCurveCommand)
        assert cmd.svg_char == "Q"
        assert cmd.points == quadratic.points
        assert cmd.is_split is True

    def test_cubic(self, cubic: CurveSegment) -> None:
        cmd = cubic.to_command()
        assert isinstance(cmd, BezierCurveCommand)
        assert cmd.svg_char == "C"
        assert cmd.points == cubic.points
        assert cmd.is_split is False

    def test_invalid_kind(self, cubic: CurveSegment) -> None:
        object.__setattr__(cubic, "kind", "Z")
        with pytest.raises(InvalidCurveStateError, match="Invalid command type"):
            cubic.to_command()
