"""
B-Spline Adapter - Adaptive B-spline segmentation and fixed-count fitting.
"""

import logging
from typing import Sequence

import numpy as np

from curvecompress.core.domain.params import CompressionMethod, CompressionParams
from curvecompress.core.domain.samples import Sample, as_arrays
from curvecompress.core.domain.segments import (
    BSplineSegment,
    CompressedCurveData,
    CurveSegment,
    LinearSegment,
)
from curvecompress.core.ports.compression_algorithm import CompressionAlgorithm

logger = logging.getLogger(__name__)


def segment_max_error(samples: Sequence[Sample], start: int, end: int, segment: CurveSegment) -> float:
    """Largest absolute deviation of samples[start..end] from `segment`."""
    return max(abs(s.value - segment.evaluate(s.time)) for s in samples[start:end + 1])


def adaptive_bspline_compress(samples: Sequence[Sample], tolerance: float) -> CompressedCurveData:
    """
    Split the samples at their midpoint until every 4-point B-spline fits.

    Ranges spanning three or fewer intervals become linear segments.
    """
    if len(samples) < 2:
        return CompressedCurveData()
    if len(samples) == 2:
        first, last = samples
        return CompressedCurveData((LinearSegment(first.time, first.value, last.time, last.value),))

    segments: list[CurveSegment] = []
    _segment_range(samples, 0, len(samples) - 1, tolerance, segments)
    logger.debug(f"Adaptive B-spline produced {len(segments)} segments for {len(samples)} samples")
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

    if end - start <= 3:
        segments.append(LinearSegment(first.time, first.value, last.time, last.value))
        return

    segment = fit_bspline(samples, start, end)
    if segment_max_error(samples, start, end, segment) <= tolerance:
        segments.append(segment)
        return

    mid = (start + end) // 2
    _segment_range(samples, start, mid, tolerance, segments)
    _segment_range(samples, mid, end, tolerance, segments)


def fit_bspline(samples: Sequence[Sample], start: int, end: int) -> BSplineSegment:
    """Four control points: the range ends plus the samples at one and two thirds."""
    count = end - start + 1
    indices = [start, start + count // 3, start + 2 * count // 3, end]
    return BSplineSegment(tuple((samples[i].time, samples[i].value) for i in indices))


def approximate_with_fixed_points(samples: Sequence[Sample], n: int) -> list[Sample]:
    """
    Exactly `n` representative control points.

    Points sit at uniformly rounded indices. Each interior point is then
    replaced by the mean time and value of the originals lying fewer than
    `window` positions away from it, where window = max(1, len // (2n)).
    The endpoints stay fixed.

    Args:
        samples: Time-sorted samples
        n: Requested count; below 2 is treated as 2

    Returns:
        A fresh list of `n` samples, or a copy of the input when
        n >= len(samples) or len(samples) <= 2
    """
    n = max(n, 2)
    if len(samples) <= 2 or n >= len(samples):
        return list(samples)

    times, values = as_arrays(samples)
    indices = np.rint(np.linspace(0, len(samples) - 1, n)).astype(int)
    points = [samples[i] for i in indices]

    window = max(1, len(samples) // (2 * n))
    for i in range(1, n - 1):
        lo = max(indices[i] - window + 1, 0)
        hi = indices[i] + window
        points[i] = Sample(float(times[lo:hi].mean()), float(values[lo:hi].mean()))

    return points


class BSplineCompressor(CompressionAlgorithm):
    """Adaptive B-spline segmentation under a tolerance."""

    @property
    def name(self) -> str:
        return "Adaptive B-Spline"

    @property
    def method(self) -> CompressionMethod:
        return CompressionMethod.BSPLINE_DIRECT

    def compress(self, samples: Sequence[Sample], params: CompressionParams) -> CompressedCurveData:
        return adaptive_bspline_compress(samples, params.tolerance)
