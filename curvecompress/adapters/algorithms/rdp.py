"""
RDP Adapter - Importance-weighted Ramer-Douglas-Peucker simplification.

Every interior sample's deviation from the chord of its range is scaled by
(1 + importance * importance_threshold), so salient samples (sharp turns,
peaks, noisy stretches) survive a tolerance that would otherwise drop them.
Retained samples are then turned into linear, B-spline or Bezier segments.
"""

import logging
from typing import Sequence

import numpy as np

from curvecompress.adapters.algorithms.bezier import leading_tangent, trailing_tangent
from curvecompress.adapters.algorithms.importance import importance_scores
from curvecompress.core.domain.params import (
    CompressionMethod,
    CompressionParams,
    CurveType,
    ImportanceWeights,
)
from curvecompress.core.domain.samples import Sample, as_arrays
from curvecompress.core.domain.segments import (
    BezierSegment,
    BSplineSegment,
    CompressedCurveData,
    CurveSegment,
    LinearSegment,
)
from curvecompress.core.math_utils import EPSILON, is_valid_time_interval, safe_slope
from curvecompress.core.ports.compression_algorithm import CompressionAlgorithm

logger = logging.getLogger(__name__)


def segment_distances(
    times: np.ndarray,
    values: np.ndarray,
    start: int,
    end: int,
) -> np.ndarray:
    """
    Distance of samples start+1..end-1 to the segment [start, end].

    The projection onto the chord is clamped to the segment; a degenerate
    chord measures the distance to its start point.
    """
    px = times[start + 1:end] - times[start]
    py = values[start + 1:end] - values[start]
    dx = times[end] - times[start]
    dy = values[end] - values[start]
    length_sq = dx * dx + dy * dy
    if length_sq < EPSILON:
        return np.hypot(px, py)

    t = np.clip((px * dx + py * dy) / length_sq, 0.0, 1.0)
    return np.hypot(px - t * dx, py - t * dy)


def rdp_keypoint_indices(
    samples: Sequence[Sample],
    tolerance: float,
    importance_threshold: float = 1.0,
    weights: ImportanceWeights | None = None,
) -> list[int]:
    """
    Indices of the samples retained by weighted RDP, ascending.

    Args:
        samples: Time-sorted samples
        tolerance: Maximum allowed weighted deviation from a chord
        importance_threshold: Strength of the importance weighting
        weights: Importance signal weights (default preset when None)

    Returns:
        Sorted indices, always including the first and last sample
    """
    n = len(samples)
    if n <= 2:
        return list(range(n))

    times, values = as_arrays(samples)
    multipliers = 1.0 + importance_scores(times, values, weights) * importance_threshold

    keep = {0, n - 1}
    stack = [(0, n - 1)]
    while stack:
        start, end = stack.pop()
        if end - start <= 1:
            continue

        distances = segment_distances(times, values, start, end) * multipliers[start + 1:end]
        # argmax returns the first maximum
        offset = int(np.argmax(distances))
        if distances[offset] > tolerance:
            split = start + 1 + offset
            keep.add(split)
            stack.append((split, end))
            stack.append((start, split))

    return sorted(keep)


def simplify(
    samples: Sequence[Sample],
    tolerance: float,
    importance_threshold: float = 1.0,
    weights: ImportanceWeights | None = None,
) -> list[Sample]:
    """Samples retained by weighted RDP, in time order."""
    indices = rdp_keypoint_indices(samples, tolerance, importance_threshold, weights)
    return [samples[i] for i in indices]


def rdp_compress(
    samples: Sequence[Sample],
    tolerance: float,
    curve_type: CurveType = CurveType.LINEAR,
    importance_threshold: float = 1.0,
    weights: ImportanceWeights | None = None,
) -> CompressedCurveData:
    """
    Simplify with weighted RDP and join consecutive keypoints with segments.

    Args:
        samples: Time-sorted samples
        tolerance: Maximum allowed weighted deviation
        curve_type: Kind of segment built between keypoints
        importance_threshold: Strength of the importance weighting
        weights: Importance signal weights

    Returns:
        Curve with one segment per pair of distinct-time keypoints
    """
    if len(samples) < 2:
        return CompressedCurveData()

    indices = rdp_keypoint_indices(samples, tolerance, importance_threshold, weights)
    segments = []
    for start, end in zip(indices, indices[1:]):
        if not is_valid_time_interval(samples[end].time - samples[start].time):
            continue
        segments.append(_build_segment(samples, start, end, curve_type))

    logger.debug(f"RDP kept {len(indices)}/{len(samples)} samples as {len(segments)} {curve_type.value} segments")
    return CompressedCurveData(tuple(segments))


def _build_segment(samples: Sequence[Sample], start: int, end: int, curve_type: CurveType) -> CurveSegment:
    first, last = samples[start], samples[end]

    if curve_type == CurveType.BSPLINE:
        count = end - start + 1
        if count >= 4:
            mid1 = samples[start + count // 3]
            mid2 = samples[start + 2 * count // 3]
            control_points = [
                (first.time, first.value),
                (mid1.time, mid1.value),
                (mid2.time, mid2.value),
                (last.time, last.value),
            ]
        else:
            control_points = [(first.time, first.value), (last.time, last.value)]
        return BSplineSegment(tuple(control_points))

    if curve_type == CurveType.BEZIER:
        if end - start < 2:
            slope = safe_slope(first.time, first.value, last.time, last.value)
            return BezierSegment(first.time, first.value, last.time, last.value, slope, slope)
        return BezierSegment(
            first.time,
            first.value,
            last.time,
            last.value,
            in_tangent=leading_tangent(samples, start, end),
            out_tangent=trailing_tangent(samples, start, end),
        )

    return LinearSegment(first.time, first.value, last.time, last.value)


class RDPCompressor(CompressionAlgorithm):
    """Weighted RDP producing segments of a fixed curve kind."""

    _CURVE_TYPES = {
        CompressionMethod.RDP_LINEAR: CurveType.LINEAR,
        CompressionMethod.RDP_BSPLINE: CurveType.BSPLINE,
        CompressionMethod.RDP_BEZIER: CurveType.BEZIER,
    }

    def __init__(self, method: CompressionMethod = CompressionMethod.RDP_LINEAR):
        if method not in self._CURVE_TYPES:
            raise ValueError(f"RDPCompressor does not serve {method.value}")
        self._method = method

    @property
    def name(self) -> str:
        return f"RDP ({self.curve_type.value})"

    @property
    def method(self) -> CompressionMethod:
        return self._method

    @property
    def curve_type(self) -> CurveType:
        return self._CURVE_TYPES[self._method]

    def compress(self, samples: Sequence[Sample], params: CompressionParams) -> CompressedCurveData:
        return rdp_compress(
            samples,
            params.tolerance,
            curve_type=self.curve_type,
            importance_threshold=params.importance_threshold,
            weights=params.effective_weights(),
        )
