"""
Bezier Adapter - Adaptive Hermite segmentation and uniform keyframe placement.
"""

import logging
from typing import Sequence

import numpy as np

from curvecompress.adapters.algorithms.bspline import segment_max_error
from curvecompress.core.domain.params import CompressionMethod, CompressionParams
from curvecompress.core.domain.samples import Sample
from curvecompress.core.domain.segments import (
    BezierSegment,
    CompressedCurveData,
    CurveSegment,
    LinearSegment,
)
from curvecompress.core.ports.compression_algorithm import CompressionAlgorithm

logger = logging.getLogger(__name__)


def adaptive_bezier_compress(samples: Sequence[Sample], tolerance: float) -> CompressedCurveData:
    """
    Split the samples at their midpoint until every Bezier segment fits.

    Ranges spanning a single interval become linear segments.
    """
    if len(samples) < 2:
        return CompressedCurveData()
    if len(samples) == 2:
        first, last = samples
        return CompressedCurveData((LinearSegment(first.time, first.value, last.time, last.value),))

    segments: list[CurveSegment] = []
    _segment_range(samples, 0, len(samples) - 1, tolerance, segments)
    logger.debug(f"Adaptive Bezier produced {len(segments)} segments for {len(samples)} samples")
    return CompressedCurveData(tuple(segments))


def _segment_range(
    samples: Sequence[Sample],
    start: int,
    end: int,
    tolerance: float,
    segments: list[CurveSegment],
) -> None:
    first, last = samples[start], samples[end]
    if last.time - first.time <= 0:
        return

    if end - start <= 1:
        segments.append(LinearSegment(first.time, first.value, last.time, last.value))
        return

    segment = fit_bezier(samples, start, end)
    if segment_max_error(samples, start, end, segment) <= tolerance:
        segments.append(segment)
        return

    mid = (start + end) // 2
    _segment_range(samples, start, mid, tolerance, segments)
    _segment_range(samples, mid, end, tolerance, segments)


def fit_bezier(samples: Sequence[Sample], start: int, end: int) -> BezierSegment:
    """Hermite segment through the range ends with slopes estimated near each end."""
    first, last = samples[start], samples[end]
    return BezierSegment(
        first.time,
        first.value,
        last.time,
        last.value,
        in_tangent=leading_tangent(samples, start, end),
        out_tangent=trailing_tangent(samples, start, end),
    )


def leading_tangent(samples: Sequence[Sample], start: int, end: int) -> float:
    """Weighted slope over the first (up to) three intervals of [start, end]."""
    pairs = [(start + i, start + i + 1) for i in range(min(3, end - start))]
    return _weighted_slope(samples, pairs)


def trailing_tangent(samples: Sequence[Sample], start: int, end: int) -> float:
    """Weighted slope over the last (up to) three intervals of [start, end]."""
    pairs = [(end - i - 1, end - i) for i in range(min(3, end - start))]
    return _weighted_slope(samples, pairs)


def _weighted_slope(samples: Sequence[Sample], pairs: list[tuple[int, int]]) -> float:
    # Closer intervals weigh 1, 1/2, 1/3
    total_weight = 0.0
    weighted = 0.0
    for i, (a, b) in enumerate(pairs):
        dt = samples[b].time - samples[a].time
        if dt <= 0:
            continue
        weight = 1.0 / (i + 1)
        weighted += (samples[b].value - samples[a].value) / dt * weight
        total_weight += weight
    return weighted / total_weight if total_weight > 0 else 0.0


def select_uniform_points(samples: Sequence[Sample], n: int) -> list[Sample]:
    """
    `n` samples at uniformly rounded indices, endpoints included.

    A count below 2 is treated as 2; n >= len(samples) or len(samples) <= 2
    returns a copy of the input.
    """
    n = max(n, 2)
    if len(samples) <= 2 or n >= len(samples):
        return list(samples)

    indices = np.rint(np.linspace(0, len(samples) - 1, n)).astype(int)
    return [samples[i] for i in indices]


class BezierCompressor(CompressionAlgorithm):
    """Adaptive Bezier segmentation under a tolerance."""

    @property
    def name(self) -> str:
        return "Adaptive Bezier"

    @property
    def method(self) -> CompressionMethod:
        return CompressionMethod.BEZIER_DIRECT

    def compress(self, samples: Sequence[Sample], params: CompressionParams) -> CompressedCurveData:
        return adaptive_bezier_compress(samples, params.tolerance)
