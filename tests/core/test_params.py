"""
Tests for compression parameters and importance weights.
"""
import pytest

from curvecompress.core.domain.errors import ConfigurationError
from curvecompress.core.domain.params import (
    CompressionDataType,
    CompressionMethod,
    CompressionMode,
    CompressionParams,
    EstimationMethod,
    ImportanceWeights,
)


def test_params_defaults():
    params = CompressionParams()
    assert params.tolerance == 0.01
    assert params.importance_threshold == 1.0
    assert params.compression_method == CompressionMethod.BEZIER_DIRECT
    assert params.compression_mode == CompressionMode.TOLERANCE
    assert params.data_type == CompressionDataType.ANIMATION
    assert params.fixed_control_point_count == 10
    assert params.estimation_method == EstimationMethod.TOTAL_VARIATION
    assert params.enable_time_measurement is False


@pytest.mark.parametrize("tolerance", [0.0, -0.1, 1.5])
def test_invalid_tolerance_fails_at_construction(tolerance):
    with pytest.raises(ConfigurationError):
        CompressionParams(tolerance=tolerance)


def test_tolerance_upper_bound_inclusive():
    assert CompressionParams(tolerance=1.0).tolerance == 1.0


def test_invalid_values_fail_at_assignment():
    params = CompressionParams()
    with pytest.raises(ConfigurationError):
        params.tolerance = 0.0
    with pytest.raises(ConfigurationError):
        params.importance_threshold = -1.0
    with pytest.raises(ConfigurationError):
        params.fixed_control_point_count = 1
    # Rejected values are not stored
    assert params.tolerance == 0.01


@pytest.mark.parametrize("count", [1, 1001])
def test_fixed_count_range(count):
    with pytest.raises(ConfigurationError):
        CompressionParams(fixed_control_point_count=count)


def test_negative_weight_rejected():
    with pytest.raises(ConfigurationError):
        ImportanceWeights(curvature=-0.1)


def test_unknown_weight_rejected():
    with pytest.raises(ConfigurationError, match="changeRate"):
        ImportanceWeights(changeRate=0.3)


def test_weight_presets():
    assert ImportanceWeights.default() == ImportanceWeights(
        curvature=0.4, change_rate=0.25, local_variance=0.2, extreme_value=0.15
    )
    assert ImportanceWeights.for_animation().curvature == 0.5
    assert ImportanceWeights.for_sensor_data().local_variance == 0.35
    assert ImportanceWeights.for_financial_data().extreme_value == 0.3


def test_weights_normalized():
    weights = ImportanceWeights(curvature=2.0, change_rate=1.0, local_variance=1.0, extreme_value=0.0)
    normalized = weights.normalized()
    assert normalized.total == pytest.approx(1.0)
    assert normalized.curvature == pytest.approx(0.5)
    # Original untouched
    assert weights.curvature == 2.0


def test_zero_weights_normalize_unchanged():
    weights = ImportanceWeights(curvature=0, change_rate=0, local_variance=0, extreme_value=0)
    assert weights.normalized() == weights


def test_effective_weights_follow_data_type():
    custom = ImportanceWeights(curvature=1.0, change_rate=1.0, local_variance=0.0, extreme_value=0.0)
    params = CompressionParams(data_type=CompressionDataType.CUSTOM, importance_weights=custom)
    assert params.effective_weights().curvature == pytest.approx(0.5)

    params.data_type = CompressionDataType.SENSOR
    assert params.effective_weights() == ImportanceWeights.for_sensor_data().normalized()
