"""shape-curves: Bézier segment kernel for a vector-path editor.

Represents, queries and transforms the quadratic and cubic segments of an
editable outline: arc length, nearest point, splitting, quadratic → cubic
elevation and arc-length re-parametrization.

Architecture layers (strict one-way dependency):
    shape_curves/mutators/ → shape_curves/commands/ → shape_curves/utils/

Key invariants:
    - Segments are immutable; every transformation returns a new value
    - Degenerate splits come back as Point / LineSegment, never as curves
    - YAML-only configs, validated with pydantic
"""

__version__ = "0.3.0"
