"""
Curve Compressor Service - Entry point of the compression engine.

This service dispatches one compression run:
1. Pick the model complexity (tolerance, fixed count, or estimated count)
2. Run the matching algorithm
3. Measure the error against the original samples
"""

import logging
import time
from typing import Sequence

from curvecompress.adapters.algorithms.bezier import BezierCompressor
from curvecompress.adapters.algorithms.bspline import BSplineCompressor
from curvecompress.adapters.algorithms.fixed_points import fit_fixed_points
from curvecompress.adapters.algorithms.rdp import RDPCompressor, simplify
from curvecompress.core.domain.params import (
    CompressionMethod,
    CompressionMode,
    CompressionParams,
    CurveType,
)
from curvecompress.core.domain.result import CompressionResult
from curvecompress.core.domain.samples import Sample
from curvecompress.core.domain.segments import CompressedCurveData
from curvecompress.core.ports.compression_algorithm import CompressionAlgorithm
from curvecompress.core.services.estimator import ControlPointEstimator

logger = logging.getLogger(__name__)


class CurveCompressor:
    """
    Core service that compresses a sample sequence into a curve.
    """

    def __init__(
        self,
        algorithms: Sequence[CompressionAlgorithm] | None = None,
        estimator: ControlPointEstimator | None = None,
        min_points: int = 2,
        max_points: int = 50,
    ):
        """
        Initialize the compressor.

        Args:
            algorithms: Tolerance-mode algorithms (defaults to the built-in five)
            estimator: Estimator used in ESTIMATED_CONTROL_POINTS mode
            min_points: Lower bound handed to the estimator
            max_points: Upper bound handed to the estimator
        """
        if algorithms is None:
            algorithms = [
                RDPCompressor(CompressionMethod.RDP_LINEAR),
                RDPCompressor(CompressionMethod.RDP_BSPLINE),
                RDPCompressor(CompressionMethod.RDP_BEZIER),
                BSplineCompressor(),
                BezierCompressor(),
            ]
        self.algorithms: dict[CompressionMethod, CompressionAlgorithm] = {a.method: a for a in algorithms}
        self.estimator = estimator or ControlPointEstimator()
        self.min_points = min_points
        self.max_points = max_points

    def compress(self, samples: Sequence[Sample], params: CompressionParams | None = None) -> CompressionResult:
        """
        Compress samples according to the parameters.

        Args:
            samples: Time-sorted samples
            params: Compression parameters (defaults when None)

        Returns:
            Result carrying the curve and its error against the samples
        """
        params = params or CompressionParams()
        samples = list(samples)
        started = time.perf_counter()

        if not samples:
            logger.warning("No samples to compress")
            result = CompressionResult.from_curve(samples, CompressedCurveData())
        elif len(samples) == 1:
            logger.warning("Single sample, returning it unchanged")
            result = CompressionResult.from_samples(samples, samples)
        else:
            curve = self._build_curve(samples, params)
            result = CompressionResult.from_curve(samples, curve)

        if params.enable_time_measurement:
            result = result.with_elapsed((time.perf_counter() - started) * 1000.0)

        logger.info(
            f"Compressed {result.original_count} samples with {params.compression_method.value} "
            f"({params.compression_mode.value}): {result.compressed_count} segments, "
            f"ratio={result.compression_ratio:.3f} max_error={result.max_error:.6g}"
        )
        return result

    def compress_samples(self, samples: Sequence[Sample], params: CompressionParams | None = None) -> CompressionResult:
        """
        Weighted RDP keypoints as a plain sample sequence.

        The error is measured by linear interpolation between the keypoints.
        """
        params = params or CompressionParams()
        samples = list(samples)
        if not samples:
            logger.warning("No samples to compress")
            return CompressionResult.from_samples(samples, samples)

        keypoints = simplify(
            samples,
            params.tolerance,
            importance_threshold=params.importance_threshold,
            weights=params.effective_weights(),
        )
        return CompressionResult.from_samples(samples, keypoints)

    def _build_curve(self, samples: list[Sample], params: CompressionParams) -> CompressedCurveData:
        if params.compression_mode == CompressionMode.TOLERANCE:
            algorithm = self.algorithms.get(params.compression_method)
            if algorithm is None:
                raise ValueError(f"No algorithm registered for {params.compression_method.value}")
            logger.debug(f"Running {algorithm.name} at tolerance {params.tolerance}")
            return algorithm.compress(samples, params)

        if params.compression_mode == CompressionMode.ESTIMATED_CONTROL_POINTS:
            estimation = self.estimator.estimate(
                samples,
                params.tolerance,
                params.estimation_method,
                self.min_points,
                self.max_points,
            )
            count = estimation.optimal_points
            logger.info(f"{estimation.method} recommends {count} control points")
        else:
            count = params.fixed_control_point_count

        if count > len(samples):
            logger.warning(f"Requested {count} control points for {len(samples)} samples, clamping")
            count = len(samples)

        return fit_fixed_points(samples, count, self._fixed_curve_type(params.compression_method))

    @staticmethod
    def _fixed_curve_type(method: CompressionMethod) -> CurveType:
        if method == CompressionMethod.BSPLINE_DIRECT:
            return CurveType.BSPLINE
        if method == CompressionMethod.BEZIER_DIRECT:
            return CurveType.BEZIER
        return CurveType.LINEAR
