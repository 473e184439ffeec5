"""Bézier geometry kernel for quadratic and cubic segments.

Provides:
    - De Casteljau evaluation (vectorized over t)
    - Hodograph (derivative control points)
    - Blossom-based sub-segment extraction between two parameters
    - Arc length by adaptive Gauss-Legendre quadrature of the hodograph speed
    - Nearest-point search (coarse sampling + golden-section refinement)
    - Flatness test against the chord (straight-line degeneracy)

Used by:
    - CurveSegment: length cache, projection, split, arc-length search
    - Tests: reference evaluation of curves

Control points are float64 tensors of shape (n, 2), n = degree + 1.
Only degree 2 and degree 3 are exercised, but nothing here depends on it.
"""

import math
from functools import lru_cache
from typing import Sequence, Tuple, Union

import numpy as np
import torch

Scalar = Union[float, torch.Tensor]

DTYPE = torch.float64

_INV_PHI = (math.sqrt(5.0) - 1.0) / 2.0


def control_tensor(points: Sequence[Sequence[float]]) -> torch.Tensor:
    """Build a (n, 2) float64 control-point tensor.

    Parameters
    ----------
    points : Sequence[Sequence[float]]
        Control points as (x, y) pairs

    Returns
    -------
    torch.Tensor
        Control points, shape (n, 2), dtype float64

    Raises
    ------
    ValueError
        If fewer than two points are given or points are not 2D
    """
    ctrl = torch.tensor([[float(p[0]), float(p[1])] for p in points], dtype=DTYPE)
    if ctrl.ndim != 2 or ctrl.shape[0] < 2 or ctrl.shape[1] != 2:
        raise ValueError(f"Expected at least two 2D control points, got shape {tuple(ctrl.shape)}")
    return ctrl


def bezier_eval(ctrl: torch.Tensor, t: Scalar) -> torch.Tensor:
    """Evaluate a Bézier curve at parameter(s) t by de Casteljau.

    Parameters
    ----------
    ctrl : torch.Tensor
        Control points, shape (n, 2)
    t : float or torch.Tensor
        Parameter value(s), scalar or shape (N,)

    Returns
    -------
    torch.Tensor
        Shape (2,) for scalar t, (N, 2) otherwise

    Notes
    -----
    Each level uses (1-t)·a + t·b, which is exact at t=0 and t=1.
    """
    t = torch.as_tensor(t, dtype=ctrl.dtype)
    scalar = t.ndim == 0
    t = t.reshape(-1, 1, 1)  # (N, 1, 1)

    pts = ctrl.unsqueeze(0).expand(t.shape[0], -1, -1)  # (N, n, 2)
    while pts.shape[1] > 1:
        pts = (1.0 - t) * pts[:, :-1] + t * pts[:, 1:]

    out = pts[:, 0]
    return out[0] if scalar else out


def bezier_derivative(ctrl: torch.Tensor) -> torch.Tensor:
    """Control points of the hodograph B'(t).

    Parameters
    ----------
    ctrl : torch.Tensor
        Control points, shape (n, 2)

    Returns
    -------
    torch.Tensor
        Derivative control points, shape (n-1, 2)

    Notes
    -----
    For degree d: D_i = d·(P_{i+1} - P_i)
    """
    degree = ctrl.shape[0] - 1
    return degree * (ctrl[1:] - ctrl[:-1])


def bezier_blossom(ctrl: torch.Tensor, params: Sequence[float]) -> torch.Tensor:
    """Evaluate the polar form (blossom) of the curve.

    Runs de Casteljau with a different parameter at every level. With all
    parameters equal to t this is B(t).
    """
    pts = ctrl
    for u in params:
        pts = (1.0 - u) * pts[:-1] + u * pts[1:]
    return pts[0]


def bezier_segment(ctrl: torch.Tensor, t1: float, t2: float) -> torch.Tensor:
    """Control points of the sub-curve running from B(t1) to B(t2).

    Parameters
    ----------
    ctrl : torch.Tensor
        Control points, shape (n, 2)
    t1, t2 : float
        Start and end parameters; t1 > t2 gives the reversed piece

    Returns
    -------
    torch.Tensor
        Sub-curve control points, shape (n, 2)

    Notes
    -----
    Q_i = blossom(t1 repeated d-i times, t2 repeated i times). This is the
    two-parameter de Casteljau subdivision; with (t1, t2) = (0, 1) it returns
    the input control points exactly.
    """
    degree = ctrl.shape[0] - 1
    rows = [
        bezier_blossom(ctrl, [t1] * (degree - i) + [t2] * i)
        for i in range(degree + 1)
    ]
    return torch.stack(rows, dim=0)


def bezier_split(ctrl: torch.Tensor, t: float) -> Tuple[torch.Tensor, torch.Tensor]:
    """Split at t into (left, right) control points."""
    return bezier_segment(ctrl, 0.0, t), bezier_segment(ctrl, t, 1.0)


@lru_cache(maxsize=None)
def _legendre_gauss(order: int) -> Tuple[torch.Tensor, torch.Tensor]:
    """Gauss-Legendre nodes mapped to [0, 1] and their weights."""
    nodes, weights = np.polynomial.legendre.leggauss(order)
    t = torch.as_tensor(0.5 * (nodes + 1.0), dtype=DTYPE)
    w = torch.as_tensor(0.5 * weights, dtype=DTYPE)
    return t, w


def _speed_integrals(hodograph: torch.Tensor, bounds: torch.Tensor, order: int) -> torch.Tensor:
    """Gauss-Legendre integral of |B'(t)| over each [a, b] row of `bounds`."""
    t, w = _legendre_gauss(order)
    a = bounds[:, :1]
    h = bounds[:, 1:] - a
    nodes = a + h * t
    speed = torch.linalg.norm(bezier_eval(hodograph, nodes.reshape(-1)), dim=-1)
    return h[:, 0] * (speed.reshape(nodes.shape) * w).sum(dim=-1)


def bezier_length(
    ctrl: torch.Tensor,
    order: int = 24,
    rel_tol: float = 1e-12,
    max_depth: int = 50
) -> float:
    """Arc length of the curve over t ∈ [0, 1].

    Parameters
    ----------
    ctrl : torch.Tensor
        Control points, shape (n, 2)
    order : int
        Number of Gauss-Legendre nodes per interval, default 24
    rel_tol : float
        Accepted disagreement between an interval and its two halves,
        relative to the first whole-curve estimate
    max_depth : int
        Maximum number of halvings of any interval

    Returns
    -------
    float
        Arc length, ≥ 0

    Notes
    -----
    L = ∫₀¹ |B'(t)| dt, integrated with adaptive Gauss-Legendre quadrature:
    an interval is accepted when its estimate agrees with the sum of its two
    halves, otherwise both halves are refined. The speed has a kink where
    B'(t) = 0 (a cusp), so intervals containing one keep halving.
    A curve whose control points all coincide has length 0.
    """
    hodograph = bezier_derivative(ctrl)
    total = 0.0
    scale = None
    stack = [(0.0, 1.0, 0)]
    while stack:
        a, b, depth = stack.pop()
        m = 0.5 * (a + b)
        bounds = torch.tensor([[a, b], [a, m], [m, b]], dtype=DTYPE)
        whole, left, right = _speed_integrals(hodograph, bounds, order).tolist()
        halves = left + right
        if scale is None:
            scale = halves
        if abs(whole - halves) <= rel_tol * scale or depth >= max_depth:
            total += halves
        else:
            stack.append((m, b, depth + 1))
            stack.append((a, m, depth + 1))
    return total


def bezier_project(
    ctrl: torch.Tensor,
    point: Sequence[float],
    samples: int = 100,
    iterations: int = 60
) -> Tuple[float, torch.Tensor, float]:
    """Find the point on the curve closest to `point`.

    Parameters
    ----------
    ctrl : torch.Tensor
        Control points, shape (n, 2)
    point : Sequence[float]
        Query point (x, y)
    samples : int
        Number of coarse sampling intervals over [0, 1], default 100
    iterations : int
        Golden-section refinement steps, default 60

    Returns
    -------
    Tuple[float, torch.Tensor, float]
        (t, B(t) with shape (2,), Euclidean distance)

    Notes
    -----
    The coarse minimum brackets the refinement to the two neighbouring
    sample intervals. The refined candidate only replaces the sampled one
    when it is at least as close, so the result never regresses.
    """
    p = torch.as_tensor([float(point[0]), float(point[1])], dtype=ctrl.dtype)

    ts = torch.linspace(0.0, 1.0, samples + 1, dtype=ctrl.dtype)
    dists = torch.linalg.norm(bezier_eval(ctrl, ts) - p, dim=-1)
    i = int(torch.argmin(dists))

    def dist(u: float) -> float:
        return float(torch.linalg.norm(bezier_eval(ctrl, u) - p))

    a = float(ts[max(i - 1, 0)])
    b = float(ts[min(i + 1, samples)])
    c = b - _INV_PHI * (b - a)
    d = a + _INV_PHI * (b - a)
    fc, fd = dist(c), dist(d)
    for _ in range(iterations):
        if fc < fd:
            b, d, fd = d, c, fc
            c = b - _INV_PHI * (b - a)
            fc = dist(c)
        else:
            a, c, fc = c, d, fd
            d = a + _INV_PHI * (b - a)
            fd = dist(d)

    best_t = float(ts[i])
    best_d = float(dists[i])
    refined_t = min(max(0.5 * (a + b), 0.0), 1.0)
    refined_d = dist(refined_t)
    if refined_d <= best_d:
        best_t, best_d = refined_t, refined_d

    return best_t, bezier_eval(ctrl, best_t), best_d


def is_flat_on_chord(ctrl: torch.Tensor, tol: float = 1e-12) -> bool:
    """Check whether every control point lies on the chord P0→Pn.

    Parameters
    ----------
    ctrl : torch.Tensor
        Control points, shape (n, 2)
    tol : float
        Relative tolerance on the cross product (scaled by |chord|²)

    Returns
    -------
    bool
        True if the curve traces exactly the straight segment P0→Pn

    Notes
    -----
    Collinear control points that overshoot the chord (projection outside
    [0, 1]) are not flat: the curve doubles back past an endpoint.
    Returns False for a zero-length chord.
    """
    chord = ctrl[-1] - ctrl[0]
    len2 = float(chord @ chord)
    if len2 == 0.0:
        return False

    for q in ctrl[1:-1]:
        v = q - ctrl[0]
        cross = float(v[0] * chord[1] - v[1] * chord[0])
        if abs(cross) > tol * len2:
            return False
        along = float(v @ chord)
        if along < 0.0 or along > len2:
            return False
    return True
