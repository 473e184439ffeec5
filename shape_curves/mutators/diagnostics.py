"""Structured diagnostics emitted by the curve kernel.

The arc-length search reports non-convergence through an injected sink
instead of printing.  The default sink logs a WARNING with the event's
fields attached as structured data (see logging_config.ContextFormatter).
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Callable, Dict, Tuple

logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class ArcLengthSearchDiagnostic:
    """The arc-length search ran out of steps without converging.

    Parameters
    ----------
    kind : str
        Outline command letter of the curve (``Q`` or ``C``).
    points : tuple of (x, y)
        Control points of the curve.
    fraction : float
        Requested arc-length fraction (returned unchanged to the caller).
    iterations : int
        Number of split-and-measure evaluations performed.
    last_t : float
        Last candidate parameter evaluated.
    last_diff : float
        Residual at ``last_t``.
    """

    kind: str
    points: Tuple[Tuple[float, float], ...]
    fraction: float
    iterations: int
    last_t: float
    last_diff: float

    def as_fields(self) -> Dict[str, Any]:
        return {
            'event': 'arc_length_search_exhausted',
            'kind': self.kind,
            'points': list(self.points),
            'fraction': self.fraction,
            'iterations': self.iterations,
            'last_t': self.last_t,
            'last_diff': self.last_diff,
        }


DiagnosticSink = Callable[[ArcLengthSearchDiagnostic], None]


def log_diagnostic(event: ArcLengthSearchDiagnostic) -> None:
    """Default sink: log the event as a WARNING with structured fields."""
    logger.warning(
        "Could not find t for arc-length fraction %s on %s curve, returning it unchanged",
        event.fraction,
        event.kind,
        extra={'fields': event.as_fields()},
    )
