"""
Result Domain Models - Summaries of compression and estimation runs.
"""

from dataclasses import dataclass, field, replace
from typing import Sequence

import numpy as np

from curvecompress.core.domain.samples import Sample, as_arrays
from curvecompress.core.domain.segments import CompressedCurveData
from curvecompress.core.math_utils import interpolate_many


@dataclass(frozen=True)
class CompressionResult:
    """
    Immutable summary of one compression run.

    Built once from an (original, compressed) pair; the error scan happens at
    construction time.
    """

    original_count: int
    compressed_count: int
    compression_ratio: float
    mean_error: float
    max_error: float
    compressed_samples: tuple[Sample, ...] = ()
    compressed_curve: CompressedCurveData | None = None
    elapsed_ms: float | None = None

    @classmethod
    def from_samples(
        cls,
        original: Sequence[Sample],
        compressed: Sequence[Sample],
        elapsed_ms: float | None = None,
    ) -> "CompressionResult":
        """
        Compare against a discrete compressed sequence.

        The compressed sequence is interpolated linearly at each original time,
        clamped to its endpoint values outside its range.
        """
        times, values = as_arrays(original)
        c_times, c_values = as_arrays(compressed)
        errors = np.abs(values - interpolate_many(c_times, c_values, times))
        return cls._build(
            original_count=len(original),
            compressed_count=len(compressed),
            errors=errors,
            compressed_samples=tuple(compressed),
            compressed_curve=None,
            elapsed_ms=elapsed_ms,
        )

    @classmethod
    def from_curve(
        cls,
        original: Sequence[Sample],
        curve: CompressedCurveData,
        elapsed_ms: float | None = None,
    ) -> "CompressionResult":
        """Compare against a continuous curve evaluated at each original time."""
        errors = np.array([abs(s.value - curve.evaluate(s.time)) for s in original], dtype=float)
        return cls._build(
            original_count=len(original),
            compressed_count=len(curve.segments),
            errors=errors,
            compressed_samples=tuple(curve.to_samples(len(original))),
            compressed_curve=curve,
            elapsed_ms=elapsed_ms,
        )

    @classmethod
    def _build(
        cls,
        original_count: int,
        compressed_count: int,
        errors: np.ndarray,
        compressed_samples: tuple[Sample, ...],
        compressed_curve: CompressedCurveData | None,
        elapsed_ms: float | None,
    ) -> "CompressionResult":
        if original_count == 0:
            # Nothing to compare against
            return cls(0, compressed_count, 0.0, 0.0, 0.0, compressed_samples, compressed_curve, elapsed_ms)

        return cls(
            original_count=original_count,
            compressed_count=compressed_count,
            compression_ratio=compressed_count / original_count,
            mean_error=float(errors.mean()),
            max_error=float(errors.max()),
            compressed_samples=compressed_samples,
            compressed_curve=compressed_curve,
            elapsed_ms=elapsed_ms,
        )

    def with_elapsed(self, elapsed_ms: float) -> "CompressionResult":
        """Copy of this result carrying a measured duration."""
        return replace(self, elapsed_ms=elapsed_ms)


@dataclass
class EstimationResult:
    """One heuristic's verdict on the control point count."""

    optimal_points: int
    score: float
    method: str
    metrics: dict[str, float] = field(default_factory=dict)
