"""
Tests for ControlPointEstimator Service.
"""
import math

import numpy as np
import pytest

from curvecompress.adapters.algorithms.bspline import approximate_with_fixed_points
from curvecompress.core.domain.params import EstimationMethod
from curvecompress.core.domain.samples import Sample, from_arrays
from curvecompress.core.services.estimator import (
    ControlPointEstimator,
    max_error,
    noise_level,
    total_variation,
    value_entropy,
)

ALL_NAMES = {"Elbow", "Curvature", "Entropy", "DouglasPeucker", "TotalVariation", "ErrorBound", "Statistical"}


@pytest.fixture
def estimator():
    return ControlPointEstimator()


def test_estimate_all_returns_seven_results(estimator, sine_samples):
    results = estimator.estimate_all(sine_samples, 0.01)
    assert set(results) == ALL_NAMES
    assert results["Elbow"].method == "Elbow Method"
    assert results["DouglasPeucker"].method == "Douglas-Peucker Adaptive"
    for name in ("Elbow", "Curvature", "Entropy", "DouglasPeucker", "TotalVariation"):
        assert 2 <= results[name].optimal_points <= 50


def test_parallel_matches_sequential(sine_samples):
    sequential = ControlPointEstimator().estimate_all(sine_samples, 0.02, 2, 30)
    parallel = ControlPointEstimator(max_workers=4).estimate_all(sine_samples, 0.02, 2, 30)
    for name in ALL_NAMES:
        assert parallel[name].optimal_points == sequential[name].optimal_points
        assert parallel[name].metrics == pytest.approx(sequential[name].metrics)


def test_estimate_single_method(estimator, sine_samples):
    single = estimator.estimate(sine_samples, 0.01, EstimationMethod.CURVATURE)
    assert single.method == "Curvature Based"
    assert single.optimal_points == estimator.estimate_all(sine_samples, 0.01)["Curvature"].optimal_points


@pytest.mark.parametrize("min_points, max_points", [(1, 50), (10, 5)])
def test_invalid_bounds(estimator, sine_samples, min_points, max_points):
    with pytest.raises(ValueError):
        estimator.estimate_all(sine_samples, 0.01, min_points, max_points)


@pytest.mark.parametrize("samples", [[], [Sample(0.0, 1.0)]])
def test_degenerate_input_returns_min_points(estimator, samples):
    results = estimator.estimate_all(samples, 0.01, 2, 50)
    for result in results.values():
        assert result.optimal_points == 2
        assert result.score == 0.0
        assert all(value == 0.0 for value in result.metrics.values())


def test_elbow_on_linear_ramp(estimator, ramp_samples):
    result = estimator.estimate_by_elbow(ramp_samples, 0.01, 2, 50)
    assert result.optimal_points in (2, 3)
    assert result.metrics["error"] == pytest.approx(0.0, abs=1e-12)


def test_elbow_finds_bend(estimator, sine_samples):
    result = estimator.estimate_by_elbow(sine_samples, 0.01, 2, 20)
    assert result.metrics["second_derivative"] > 0
    assert set(result.metrics) == {"error", "second_derivative"}


def test_curvature_on_single_corner(estimator, peak_samples):
    result = estimator.estimate_by_curvature(peak_samples, 0.01, 2, 50)
    assert result.metrics["total_curvature"] == pytest.approx(math.pi / 2)
    assert result.metrics["significant_points"] == 1
    # round(1 * 0.5 + 2) rounds half to even
    assert result.optimal_points == 2


def test_curvature_clamped_to_max(estimator, noisy_sine_samples):
    result = estimator.estimate_by_curvature(noisy_sine_samples, 0.01, 2, 10)
    assert result.optimal_points == 10


def test_entropy_not_reached_returns_max(estimator, ramp_samples):
    result = estimator.estimate_by_entropy(ramp_samples, 0.01, 2, 50)
    assert result.optimal_points == 50
    assert result.metrics["information_rate"] < 0.95


def test_entropy_of_flat_signal_is_retained(estimator):
    samples = from_arrays(np.linspace(0, 1, 50), np.full(50, 1.0))
    result = estimator.estimate_by_entropy(samples, 0.01, 3, 50)
    assert result.optimal_points == 3
    assert result.metrics["original_entropy"] == 0.0


def test_total_variation_ramp_needs_two_points(estimator, ramp_samples):
    result = estimator.estimate_by_total_variation(ramp_samples, 0.01, 2, 50)
    assert result.optimal_points == 2
    assert result.metrics["variation_rate"] == pytest.approx(1.0)


def test_total_variation_sine_needs_more(estimator, sine_samples):
    result = estimator.estimate_by_total_variation(sine_samples, 0.01, 2, 50)
    assert result.optimal_points > 2
    assert result.metrics["variation_rate"] >= 0.9


def test_douglas_peucker_on_ramp(estimator, ramp_samples):
    result = estimator.estimate_by_douglas_peucker(ramp_samples, 0.01, 2, 50)
    assert result.optimal_points == 2
    assert result.metrics["tolerance"] == 0.01
    assert result.metrics["interpolated_points"] == pytest.approx(2.0)


def test_douglas_peucker_more_points_at_lower_tolerance(estimator, sine_samples):
    coarse = estimator.estimate_by_douglas_peucker(sine_samples, 0.1, 2, 200)
    fine = estimator.estimate_by_douglas_peucker(sine_samples, 0.005, 2, 200)
    assert fine.optimal_points >= coarse.optimal_points


def test_error_bound_satisfies_tolerance(estimator, noisy_sine_samples):
    tolerance = 0.01
    result = estimator.determine_by_error_bound(noisy_sine_samples, tolerance)
    n = result.optimal_points

    assert 2 < n < min(len(noisy_sine_samples) // 2, 200)
    fit = approximate_with_fixed_points(noisy_sine_samples, n)
    assert max_error(noisy_sine_samples, fit) <= tolerance
    assert result.metrics["max_error"] <= tolerance

    # One point fewer no longer fits
    fewer = approximate_with_fixed_points(noisy_sine_samples, n - 1)
    assert max_error(noisy_sine_samples, fewer) > tolerance


def test_error_bound_linear_data_needs_two(estimator, ramp_samples):
    assert estimator.determine_by_error_bound(ramp_samples, 0.01).optimal_points == 2


def test_statistical_clean_signal_hits_cap(estimator, ramp_samples):
    result = estimator.determine_by_statistical(ramp_samples, 0.01)
    assert result.optimal_points == 50
    assert result.metrics["noise_level"] == pytest.approx(0.0, abs=1e-9)


def test_statistical_white_noise_stays_low(estimator):
    rng = np.random.default_rng(7)
    samples = from_arrays(np.arange(200, dtype=float), rng.normal(0.0, 1.0, 200))
    result = estimator.determine_by_statistical(samples, 0.01)
    assert 10 <= result.optimal_points <= 20
    assert result.metrics["snr"] < 1.5


def test_measures():
    samples = from_arrays([0.0, 1.0, 2.0, 3.0], [0.0, 2.0, 1.0, 1.0])
    assert total_variation(samples) == pytest.approx(3.0)
    assert noise_level(samples[:2]) == 0.0
    assert value_entropy(samples[:1]) == 0.0
    assert value_entropy(from_arrays([0.0, 1.0], [2.0, 2.0])) == 0.0
