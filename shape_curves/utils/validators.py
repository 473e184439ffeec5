"""YAML schema validation and config loading.

Provides centralized validation using pydantic:
    - Kernel schema (curve_kernel.v1.yaml): numeric tolerances of the curve kernel
    - Segment schema (curve_segments.v1.yaml): stored quadratic/cubic segments

Loaders fail fast with actionable messages (file path, offending key,
expected range).

Usage:
    from shape_curves.utils import validators

    cfg = validators.load_kernel_config("configs/curve_kernel.v1.yaml")
    segment = validators.parse_segment({"kind": "C", "points": [[0, 0], [1, 2], [3, 2], [4, 0]]})
"""

from pathlib import Path
from typing import Any, Dict, List, Literal, Optional, Tuple, Union

from pydantic import BaseModel, ConfigDict, Field, model_validator


# ============================================================================
# KERNEL SCHEMA V1
# ============================================================================

class KernelConfig(BaseModel):
    """Numeric tolerances for arc length, projection and the arc-length search.

    Lengths are in the same units as the control points.
    """
    model_config = ConfigDict(frozen=True, populate_by_name=True, extra="forbid")

    schema_version: Literal["curve_kernel.v1"] = Field("curve_kernel.v1", alias="schema")
    arc_length_epsilon: float = Field(
        0.001, gt=0.0, description="Convergence threshold of the arc-length search"
    )
    initial_step_exponent: int = Field(
        -2, lt=0, description="Search starts moving t by 2**(exponent - 1)"
    )
    min_step_exponent: int = Field(
        -100, description="Search gives up once the step exponent reaches this value"
    )
    quadrature_order: int = Field(
        24, ge=2, le=64, description="Gauss-Legendre nodes for arc length"
    )
    projection_samples: int = Field(
        100, ge=4, description="Coarse sampling intervals for projection"
    )
    projection_refine_iterations: int = Field(
        60, ge=1, description="Golden-section steps after coarse sampling"
    )
    collinear_tolerance: float = Field(
        1e-12, ge=0.0, description="Relative cross-product tolerance for straight splits"
    )

    @model_validator(mode='after')
    def validate_step_range(self) -> 'KernelConfig':
        if self.min_step_exponent >= self.initial_step_exponent:
            raise ValueError(
                f"min_step_exponent ({self.min_step_exponent}) must be below "
                f"initial_step_exponent ({self.initial_step_exponent})"
            )
        return self


DEFAULT_KERNEL_CONFIG = KernelConfig()


# ============================================================================
# SEGMENT SCHEMA V1
# ============================================================================

class CurveSegmentV1(BaseModel):
    """Stored Bézier segment: outline command letter plus control points."""
    model_config = ConfigDict(frozen=True, extra="forbid")

    kind: Literal["Q", "C"] = Field(..., description="Q = quadratic, C = cubic")
    points: List[Tuple[float, float]] = Field(..., description="Control points (x, y)")

    @model_validator(mode='after')
    def validate_point_count(self) -> 'CurveSegmentV1':
        expected = 3 if self.kind == "Q" else 4
        if len(self.points) != expected:
            raise ValueError(
                f"Segment kind '{self.kind}' needs {expected} control points, got {len(self.points)}"
            )
        return self


class CurveSegmentsFileV1(BaseModel):
    """Container for multiple segments (YAML file format)."""
    model_config = ConfigDict(populate_by_name=True, extra="forbid")

    schema_version: Literal["curve_segments.v1"] = Field("curve_segments.v1", alias="schema")
    segments: List[CurveSegmentV1] = Field(..., description="List of segments")


# ============================================================================
# PUBLIC API
# ============================================================================

def load_kernel_config(path: Union[str, Path]) -> KernelConfig:
    """Load and validate kernel config from YAML.

    Parameters
    ----------
    path : Union[str, Path]
        Path to curve_kernel.v1.yaml file

    Returns
    -------
    KernelConfig
        Validated configuration; keys left out keep their defaults

    Raises
    ------
    FileNotFoundError
        If path doesn't exist
    ValueError
        If validation fails (with actionable error message)
    """
    from . import fs

    path = Path(path)
    if not path.exists():
        raise FileNotFoundError(f"Kernel config not found: {path}")

    data = fs.load_yaml(path)
    try:
        return KernelConfig(**data)
    except Exception as e:
        raise ValueError(f"Kernel config validation failed at {path}: {e}") from e


def parse_segment(
    data: Union[Dict[str, Any], CurveSegmentV1],
    config: Optional[KernelConfig] = None
):
    """Validate a segment record and build a CurveSegment from it.

    Parameters
    ----------
    data : dict or CurveSegmentV1
        Record like {"kind": "Q", "points": [[0, 0], [1, 2], [2, 0]]}
    config : KernelConfig, optional
        Kernel tolerances for the new segment

    Returns
    -------
    CurveSegment

    Raises
    ------
    ValueError
        If the record is malformed
    """
    from ..mutators import CurveSegment

    if not isinstance(data, CurveSegmentV1):
        try:
            data = CurveSegmentV1(**data)
        except Exception as e:
            raise ValueError(f"Segment validation failed: {e}") from e

    return CurveSegment(data.kind, data.points, config=config)


def load_segments_file(
    path: Union[str, Path],
    config: Optional[KernelConfig] = None
) -> list:
    """Load and validate a curve_segments.v1 YAML file.

    Returns
    -------
    list[CurveSegment]
        Segments in file order

    Raises
    ------
    FileNotFoundError
        If path doesn't exist
    ValueError
        If validation fails
    """
    from . import fs

    path = Path(path)
    if not path.exists():
        raise FileNotFoundError(f"Segments file not found: {path}")

    data = fs.load_yaml(path)
    try:
        records = CurveSegmentsFileV1(**data)
    except Exception as e:
        raise ValueError(f"Segments file validation failed at {path}: {e}") from e

    return [parse_segment(record, config) for record in records.segments]
