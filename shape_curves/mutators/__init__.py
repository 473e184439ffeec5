"""
Segment mutators.

``CurveSegment`` models one quadratic or cubic outline segment; ``Point``
and ``LineSegment`` are the primitives it degenerates into.
"""

from shape_curves.mutators.primitives import (
    CurveKind,
    LineSegment,
    Point,
    Projection,
)
from shape_curves.mutators.diagnostics import (
    ArcLengthSearchDiagnostic,
    DiagnosticSink,
    log_diagnostic,
)
from shape_curves.mutators.bezier import (
    CurveSegment,
    InvalidCurveStateError,
    SplitResult,
    UnsupportedConversionWarning,
)

__all__ = [
    "CurveKind",
    "LineSegment",
    "Point",
    "Projection",
    "ArcLengthSearchDiagnostic",
    "DiagnosticSink",
    "log_diagnostic",
    "CurveSegment",
    "InvalidCurveStateError",
    "SplitResult",
    "UnsupportedConversionWarning",
]
