"""
Control Point Estimator Service - How many control points should a curve use?

Seven independent heuristics answer the question from different angles:

1. Elbow: sharpest bend of the fit-error curve
2. Curvature: share of turning-angle mass carried by the sharpest corners
3. Entropy: smallest fit retaining 95% of the value-distribution entropy
4. DouglasPeucker: RDP point count interpolated at the target tolerance
5. TotalVariation: smallest fit retaining 90% of the total variation
6. ErrorBound: binary search for the smallest fit within tolerance
7. Statistical: upper bound on useful complexity from the signal-to-noise ratio

None reads another's output, so `estimate_all` may fan them out over a
thread pool.
"""

import logging
import math
from concurrent.futures import ThreadPoolExecutor
from typing import Callable, Sequence

import numpy as np

from curvecompress.adapters.algorithms.bspline import approximate_with_fixed_points
from curvecompress.adapters.algorithms.rdp import simplify
from curvecompress.core.domain.params import EstimationMethod
from curvecompress.core.domain.result import EstimationResult
from curvecompress.core.domain.samples import Sample, as_arrays
from curvecompress.core.math_utils import clamp, interpolate_many, lerp, turning_angle

logger = logging.getLogger(__name__)

ENTROPY_RETENTION = 0.95
VARIATION_RETENTION = 0.9
CURVATURE_MASS = 0.9
DP_TOLERANCE_STEPS = 20
UPPER_BOUND_CAP = 200

# Method label and diagnostic metric keys per heuristic
_DESCRIPTIONS: dict[EstimationMethod, tuple[str, tuple[str, ...]]] = {
    EstimationMethod.ELBOW: ("Elbow Method", ("error", "second_derivative")),
    EstimationMethod.CURVATURE: ("Curvature Based", ("total_curvature", "significant_points")),
    EstimationMethod.ENTROPY: (
        "Information Entropy",
        ("original_entropy", "compressed_entropy", "information_rate"),
    ),
    EstimationMethod.DOUGLAS_PEUCKER: ("Douglas-Peucker Adaptive", ("tolerance", "interpolated_points")),
    EstimationMethod.TOTAL_VARIATION: (
        "Total Variation",
        ("original_variation", "compressed_variation", "variation_rate"),
    ),
    EstimationMethod.ERROR_BOUND: ("Error Bound", ("max_points", "tolerance", "max_error")),
    EstimationMethod.STATISTICAL: ("Statistical", ("variance", "noise_level", "snr")),
}


class ControlPointEstimator:
    """
    Recommends control point counts for the fixed-point fit.

    Every heuristic is pure; results are freshly built per call.
    """

    def __init__(self, max_workers: int = 1):
        """
        Initialize the estimator.

        Args:
            max_workers: Thread pool size used by `estimate_all` (1 runs inline)
        """
        self.max_workers = max_workers

    def estimate_all(
        self,
        samples: Sequence[Sample],
        tolerance: float,
        min_points: int = 2,
        max_points: int = 50,
    ) -> dict[str, EstimationResult]:
        """
        Run all seven heuristics.

        Args:
            samples: Time-sorted samples
            tolerance: Target absolute error
            min_points: Lower search bound (>= 2)
            max_points: Upper search bound (>= min_points)

        Returns:
            Results keyed by heuristic name (the EstimationMethod values)
        """
        _check_bounds(min_points, max_points)
        methods = list(EstimationMethod)

        if self.max_workers > 1:
            with ThreadPoolExecutor(max_workers=self.max_workers) as executor:
                futures = {
                    method: executor.submit(self.estimate, samples, tolerance, method, min_points, max_points)
                    for method in methods
                }
                results = {method.value: future.result() for method, future in futures.items()}
        else:
            results = {
                method.value: self.estimate(samples, tolerance, method, min_points, max_points)
                for method in methods
            }

        logger.info(
            f"Estimated control points for {len(samples)} samples: "
            + ", ".join(f"{name}={r.optimal_points}" for name, r in results.items())
        )
        return results

    def estimate(
        self,
        samples: Sequence[Sample],
        tolerance: float,
        method: EstimationMethod = EstimationMethod.TOTAL_VARIATION,
        min_points: int = 2,
        max_points: int = 50,
    ) -> EstimationResult:
        """Run a single heuristic by name."""
        _check_bounds(min_points, max_points)
        heuristics: dict[EstimationMethod, Callable[[], EstimationResult]] = {
            EstimationMethod.ELBOW: lambda: self.estimate_by_elbow(samples, tolerance, min_points, max_points),
            EstimationMethod.CURVATURE: lambda: self.estimate_by_curvature(samples, tolerance, min_points, max_points),
            EstimationMethod.ENTROPY: lambda: self.estimate_by_entropy(samples, tolerance, min_points, max_points),
            EstimationMethod.DOUGLAS_PEUCKER: lambda: self.estimate_by_douglas_peucker(
                samples, tolerance, min_points, max_points
            ),
            EstimationMethod.TOTAL_VARIATION: lambda: self.estimate_by_total_variation(
                samples, tolerance, min_points, max_points
            ),
            EstimationMethod.ERROR_BOUND: lambda: self.determine_by_error_bound(samples, tolerance),
            EstimationMethod.STATISTICAL: lambda: self.determine_by_statistical(samples, tolerance),
        }
        result = heuristics[EstimationMethod(method)]()
        logger.debug(f"{result.method}: optimal_points={result.optimal_points} score={result.score:.6g}")
        return result

    # --- Estimators ---

    def estimate_by_elbow(self, samples, tolerance, min_points=2, max_points=50) -> EstimationResult:
        """Point of sharpest diminishing returns of the mean squared fit error."""
        _check_bounds(min_points, max_points)
        if len(samples) < 2:
            return _degenerate(EstimationMethod.ELBOW, min_points)

        errors = [
            mean_squared_error(samples, approximate_with_fixed_points(samples, n))
            for n in range(min_points, max_points + 1)
        ]

        second = np.abs(np.diff(errors, n=2)) if len(errors) >= 3 else np.array([])
        # Flat error curves carry only rounding noise
        second[second < 1e-12] = 0.0

        elbow_index = min(1, len(errors) - 1)
        max_d2 = 0.0
        for i, d2 in enumerate(second):
            if d2 > max_d2:
                max_d2 = float(d2)
                elbow_index = i + 1

        error = errors[elbow_index]
        return _result(
            EstimationMethod.ELBOW,
            min_points + elbow_index,
            error,
            error=error,
            second_derivative=max_d2,
        )

    def estimate_by_curvature(self, samples, tolerance, min_points=2, max_points=50) -> EstimationResult:
        """Half the number of corners carrying 90% of the turning-angle mass, plus min_points."""
        _check_bounds(min_points, max_points)
        if len(samples) < 2:
            return _degenerate(EstimationMethod.CURVATURE, min_points)

        curvatures = sorted(
            (
                turning_angle(
                    (samples[i - 1].time, samples[i - 1].value),
                    (samples[i].time, samples[i].value),
                    (samples[i + 1].time, samples[i + 1].value),
                )
                for i in range(1, len(samples) - 1)
            ),
            reverse=True,
        )
        total = float(sum(curvatures))

        threshold = total * CURVATURE_MASS
        cumulative = 0.0
        significant = 0
        for curvature in curvatures:
            cumulative += curvature
            significant += 1
            if cumulative >= threshold:
                break

        optimal = clamp(round(significant * 0.5 + min_points), min_points, max_points)
        return _result(
            EstimationMethod.CURVATURE,
            optimal,
            total,
            total_curvature=total,
            significant_points=float(significant),
        )

    def estimate_by_entropy(self, samples, tolerance, min_points=2, max_points=50) -> EstimationResult:
        """Smallest fit whose value histogram keeps 95% of the original entropy."""
        _check_bounds(min_points, max_points)
        if len(samples) < 2:
            return _degenerate(EstimationMethod.ENTROPY, min_points)

        original = value_entropy(samples)
        rate = compressed = 0.0
        for n in range(min_points, max_points + 1):
            compressed = value_entropy(approximate_with_fixed_points(samples, n))
            rate = _retention(compressed, original)
            if rate >= ENTROPY_RETENTION:
                return _result(
                    EstimationMethod.ENTROPY,
                    n,
                    rate,
                    original_entropy=original,
                    compressed_entropy=compressed,
                    information_rate=rate,
                )

        return _result(
            EstimationMethod.ENTROPY,
            max_points,
            rate,
            original_entropy=original,
            compressed_entropy=compressed,
            information_rate=rate,
        )

    def estimate_by_douglas_peucker(self, samples, tolerance, min_points=2, max_points=50) -> EstimationResult:
        """RDP point count interpolated (log tolerance) at the target tolerance."""
        _check_bounds(min_points, max_points)
        if len(samples) < 2:
            return _degenerate(EstimationMethod.DOUGLAS_PEUCKER, min_points)

        tolerances = np.geomspace(tolerance * 0.1, tolerance * 10, DP_TOLERANCE_STEPS)
        counts = [len(simplify(samples, float(t))) for t in tolerances]
        target = _interpolate_count(tolerances, counts, tolerance)

        optimal = clamp(round(target), min_points, max_points)
        return _result(
            EstimationMethod.DOUGLAS_PEUCKER,
            optimal,
            tolerance,
            tolerance=tolerance,
            interpolated_points=target,
        )

    def estimate_by_total_variation(self, samples, tolerance, min_points=2, max_points=50) -> EstimationResult:
        """Smallest fit keeping 90% of the total variation."""
        _check_bounds(min_points, max_points)
        if len(samples) < 2:
            return _degenerate(EstimationMethod.TOTAL_VARIATION, min_points)

        original = total_variation(samples)
        rate = compressed = 0.0
        for n in range(min_points, max_points + 1):
            compressed = total_variation(approximate_with_fixed_points(samples, n))
            rate = _retention(compressed, original)
            if rate >= VARIATION_RETENTION:
                return _result(
                    EstimationMethod.TOTAL_VARIATION,
                    n,
                    rate,
                    original_variation=original,
                    compressed_variation=compressed,
                    variation_rate=rate,
                )

        return _result(
            EstimationMethod.TOTAL_VARIATION,
            max_points,
            rate,
            original_variation=original,
            compressed_variation=compressed,
            variation_rate=rate,
        )

    # --- Upper Bounds ---

    def determine_by_error_bound(self, samples, tolerance) -> EstimationResult:
        """
        Smallest count in [2, min(len // 2, 200)] whose fit max error is within tolerance.

        Binary search; assumes the fit error does not grow with the count.
        """
        if len(samples) < 2:
            return _degenerate(EstimationMethod.ERROR_BOUND, 2)

        low, high = 2, min(len(samples) // 2, UPPER_BOUND_CAP)
        while low < high:
            mid = (low + high) // 2
            if max_error(samples, approximate_with_fixed_points(samples, mid)) <= tolerance:
                high = mid
            else:
                low = mid + 1

        error = max_error(samples, approximate_with_fixed_points(samples, low))
        return _result(
            EstimationMethod.ERROR_BOUND,
            low,
            tolerance,
            max_points=float(high),
            tolerance=tolerance,
            max_error=error,
        )

    def determine_by_statistical(self, samples, tolerance) -> EstimationResult:
        """Upper bound clamp(round(10 + 5 * snr), 10, min(len // 2, 200))."""
        if len(samples) < 2:
            return _degenerate(EstimationMethod.STATISTICAL, 2)

        _, values = as_arrays(samples)
        variance = float(values.var())
        noise = noise_level(samples)
        snr = math.sqrt(variance) / (noise + 1e-4)

        upper = min(len(samples) // 2, UPPER_BOUND_CAP)
        optimal = clamp(round(10 + snr * 5), 10, upper)
        return _result(
            EstimationMethod.STATISTICAL,
            optimal,
            snr,
            variance=variance,
            noise_level=noise,
            snr=snr,
        )


# --- Measures ---

def mean_squared_error(original: Sequence[Sample], approximation: Sequence[Sample]) -> float:
    """Mean squared deviation from the approximation, linearly interpolated."""
    times, values = as_arrays(original)
    a_times, a_values = as_arrays(approximation)
    residuals = values - interpolate_many(a_times, a_values, times)
    return float(np.mean(residuals ** 2))


def max_error(original: Sequence[Sample], approximation: Sequence[Sample]) -> float:
    """Largest absolute deviation from the approximation, linearly interpolated."""
    times, values = as_arrays(original)
    a_times, a_values = as_arrays(approximation)
    return float(np.max(np.abs(values - interpolate_many(a_times, a_values, times))))


def value_entropy(samples: Sequence[Sample]) -> float:
    """
    Shannon entropy (bits) of the value histogram.

    Uses max(1, min(20, len // 5)) bins; flat or single-sample data scores 0.
    """
    if len(samples) <= 1:
        return 0.0

    _, values = as_arrays(samples)
    bins = max(1, min(20, len(values) // 5))
    low, high = float(values.min()), float(values.max())
    value_range = high - low
    if value_range < 1e-4:
        return 0.0

    indices = np.clip(((values - low) / value_range * (bins - 1)).astype(int), 0, bins - 1)
    counts = np.bincount(indices, minlength=bins)
    p = counts[counts > 0] / len(values)
    return float(-(p * np.log2(p)).sum())


def total_variation(samples: Sequence[Sample]) -> float:
    _, values = as_arrays(samples)
    return float(np.abs(np.diff(values)).sum())


def noise_level(samples: Sequence[Sample]) -> float:
    """Population standard deviation of first differences (0 below three samples)."""
    if len(samples) < 3:
        return 0.0
    _, values = as_arrays(samples)
    return float(np.diff(values).std())


# --- Helpers ---

def _check_bounds(min_points: int, max_points: int) -> None:
    if min_points < 2:
        raise ValueError(f"min_points must be at least 2, got {min_points}")
    if max_points < min_points:
        raise ValueError(f"max_points ({max_points}) must not be below min_points ({min_points})")


def _retention(compressed: float, original: float) -> float:
    # Nothing to retain
    if original < 1e-12:
        return 1.0
    return compressed / original


def _interpolate_count(tolerances: np.ndarray, counts: list[int], target: float) -> float:
    """Linear in log tolerance between the bracketing steps; last count when not bracketed."""
    for i in range(len(tolerances) - 1):
        t0, t1 = tolerances[i], tolerances[i + 1]
        if t0 <= target <= t1:
            t = (math.log(target) - math.log(t0)) / (math.log(t1) - math.log(t0))
            return lerp(counts[i], counts[i + 1], t)
    return float(counts[-1])


def _result(method: EstimationMethod, optimal: int, score: float, **metrics: float) -> EstimationResult:
    label, _ = _DESCRIPTIONS[method]
    return EstimationResult(
        optimal_points=int(optimal),
        score=float(score),
        method=label,
        metrics={key: float(value) for key, value in metrics.items()},
    )


def _degenerate(method: EstimationMethod, min_points: int) -> EstimationResult:
    label, keys = _DESCRIPTIONS[method]
    logger.warning(f"{label}: fewer than 2 samples, returning {min_points}")
    return EstimationResult(min_points, 0.0, label, {key: 0.0 for key in keys})
