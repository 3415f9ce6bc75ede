"""
Fixed-Point Fitting - Curves built from an exact number of control points.

No simplification happens here: the caller decides the count (directly or
through the estimator) and the curve kind decides the placement.

- LINEAR: uniformly indexed samples joined by straight segments
- BSPLINE: window-averaged control points joined by two-point B-splines
- BEZIER: uniformly indexed samples joined by Hermite segments with smooth tangents
"""

from typing import Sequence

from curvecompress.adapters.algorithms.bezier import select_uniform_points
from curvecompress.adapters.algorithms.bspline import approximate_with_fixed_points
from curvecompress.adapters.algorithms.tangents import TangentMode, calculate_smooth_tangents
from curvecompress.core.domain.params import CurveType
from curvecompress.core.domain.samples import Sample
from curvecompress.core.domain.segments import (
    BezierSegment,
    BSplineSegment,
    CompressedCurveData,
    LinearSegment,
)
from curvecompress.core.math_utils import is_valid_time_interval


def fixed_points(samples: Sequence[Sample], n: int, curve_type: CurveType) -> list[Sample]:
    """Control points used for a fixed-count fit of the given kind."""
    if curve_type == CurveType.BSPLINE:
        return approximate_with_fixed_points(samples, n)
    return select_uniform_points(samples, n)


def fit_fixed_points(
    samples: Sequence[Sample],
    n: int,
    curve_type: CurveType = CurveType.LINEAR,
) -> CompressedCurveData:
    """
    Curve with `n - 1` segments through `n` control points.

    Args:
        samples: Time-sorted samples
        n: Control point count (clamped the same way as the placement helpers)
        curve_type: Segment kind

    Returns:
        Contiguous curve; control points that do not advance in time are dropped
    """
    if len(samples) < 2:
        return CompressedCurveData()

    points = _strictly_increasing(fixed_points(samples, n, curve_type))

    if curve_type == CurveType.BEZIER:
        tangents = calculate_smooth_tangents(points, TangentMode.SMOOTH)
        segments = [
            BezierSegment(a.time, a.value, b.time, b.value, tangents[i], tangents[i + 1])
            for i, (a, b) in enumerate(zip(points, points[1:]))
        ]
    elif curve_type == CurveType.BSPLINE:
        segments = [
            BSplineSegment(((a.time, a.value), (b.time, b.value)))
            for a, b in zip(points, points[1:])
        ]
    else:
        segments = [
            LinearSegment(a.time, a.value, b.time, b.value)
            for a, b in zip(points, points[1:])
        ]

    return CompressedCurveData(tuple(segments))


def _strictly_increasing(points: list[Sample]) -> list[Sample]:
    kept = points[:1]
    for point in points[1:]:
        if is_valid_time_interval(point.time - kept[-1].time):
            kept.append(point)
    return kept
