"""
Outline command module.

Immutable command values (line, quadratic, cubic) produced when a segment is
written back into a path.
"""

from shape_curves.commands.operations import (
    Command,
    LineCommand,
    QuadraticCurveCommand,
    BezierCurveCommand,
    new_line,
    new_quadratic_curve,
    new_bezier_curve,
)

__all__ = [
    "Command",
    "LineCommand",
    "QuadraticCurveCommand",
    "BezierCurveCommand",
    "new_line",
    "new_quadratic_curve",
    "new_bezier_curve",
]
