"""
Tests for CompressionResult and EstimationResult.
"""
import pytest

from curvecompress.core.domain.result import CompressionResult, EstimationResult
from curvecompress.core.domain.samples import from_pairs
from curvecompress.core.domain.segments import CompressedCurveData, LinearSegment


def test_from_samples_errors_and_ratio(peak_samples):
    compressed = [peak_samples[0], peak_samples[-1]]
    result = CompressionResult.from_samples(peak_samples, compressed)

    assert result.original_count == 3
    assert result.compressed_count == 2
    assert result.compression_ratio == 2 / 3
    assert result.max_error == pytest.approx(1.0)
    assert result.mean_error == pytest.approx(1 / 3)
    assert result.compressed_curve is None
    assert result.elapsed_ms is None


def test_from_samples_clamps_outside_compressed_range():
    original = from_pairs([(0, 5), (1, 1), (2, 1), (3, 7)])
    compressed = from_pairs([(1, 1), (2, 1)])
    result = CompressionResult.from_samples(original, compressed)
    assert result.max_error == pytest.approx(6.0)


def test_from_curve(peak_samples):
    curve = CompressedCurveData((
        LinearSegment(0.0, 0.0, 1.0, 1.0),
        LinearSegment(1.0, 1.0, 2.0, 0.0),
    ))
    result = CompressionResult.from_curve(peak_samples, curve)

    assert result.compressed_count == 2
    assert result.compression_ratio == 2 / 3
    assert result.max_error == pytest.approx(0.0)
    assert result.compressed_curve is curve
    assert len(result.compressed_samples) == 3


def test_empty_original_gives_zeros():
    result = CompressionResult.from_curve([], CompressedCurveData())
    assert result.original_count == 0
    assert result.compression_ratio == 0.0
    assert result.max_error == 0.0


def test_with_elapsed_returns_copy(peak_samples):
    result = CompressionResult.from_samples(peak_samples, peak_samples)
    timed = result.with_elapsed(12.5)
    assert timed.elapsed_ms == 12.5
    assert result.elapsed_ms is None
    assert timed.compression_ratio == result.compression_ratio


def test_result_is_immutable(peak_samples):
    result = CompressionResult.from_samples(peak_samples, peak_samples)
    with pytest.raises(Exception):
        result.max_error = 1.0


def test_estimation_results_do_not_share_metrics():
    a = EstimationResult(3, 0.1, "Elbow Method")
    b = EstimationResult(4, 0.2, "Elbow Method")
    a.metrics["error"] = 1.0
    assert b.metrics == {}
