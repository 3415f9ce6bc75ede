"""
Compression Parameters Domain Model - Configuration inputs of a compression run.

Uses Pydantic for validation. Out-of-range values raise ConfigurationError
both at construction and on assignment; nothing is silently clamped.
"""

from enum import Enum

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

from curvecompress.core.domain.errors import ConfigurationError


class CurveType(str, Enum):
    """Kind of a curve segment."""

    LINEAR = "linear"
    BSPLINE = "bspline"
    BEZIER = "bezier"


class CompressionMethod(str, Enum):
    """Algorithm used to build the compressed curve."""

    RDP_LINEAR = "rdp_linear"
    RDP_BSPLINE = "rdp_bspline"
    RDP_BEZIER = "rdp_bezier"
    BSPLINE_DIRECT = "bspline_direct"
    BEZIER_DIRECT = "bezier_direct"


class CompressionMode(str, Enum):
    """How the model complexity of the compressed curve is chosen."""

    TOLERANCE = "tolerance"
    FIXED_CONTROL_POINTS = "fixed_control_points"
    ESTIMATED_CONTROL_POINTS = "estimated_control_points"


class EstimationMethod(str, Enum):
    """Control-point-count heuristic; values are the `estimate_all` keys."""

    ELBOW = "Elbow"
    CURVATURE = "Curvature"
    ENTROPY = "Entropy"
    DOUGLAS_PEUCKER = "DouglasPeucker"
    TOTAL_VARIATION = "TotalVariation"
    ERROR_BOUND = "ErrorBound"
    STATISTICAL = "Statistical"


class CompressionDataType(str, Enum):
    """Signal family; selects the importance weight preset."""

    ANIMATION = "animation"
    SENSOR = "sensor"
    FINANCIAL = "financial"
    CUSTOM = "custom"


class ImportanceWeights(BaseModel):
    """Weights combining the per-sample importance signals."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    curvature: float = 0.4
    change_rate: float = 0.25
    local_variance: float = 0.2
    extreme_value: float = 0.15

    @model_validator(mode="before")
    @classmethod
    def _known_weights(cls, data):
        if isinstance(data, dict):
            unknown = sorted(set(data) - set(cls.model_fields))
            if unknown:
                raise ConfigurationError(f"Unknown importance weights: {', '.join(unknown)}")
        return data

    @field_validator("curvature", "change_rate", "local_variance", "extreme_value")
    @classmethod
    def _non_negative(cls, value: float, info) -> float:
        if value < 0:
            raise ConfigurationError(f"Importance weight '{info.field_name}' must be non-negative, got {value}")
        return value

    @property
    def total(self) -> float:
        return self.curvature + self.change_rate + self.local_variance + self.extreme_value

    def normalized(self) -> "ImportanceWeights":
        """Copy scaled to sum to 1 (unchanged if all weights are 0)."""
        total = self.total
        if total <= 0:
            return self
        return ImportanceWeights(
            curvature=self.curvature / total,
            change_rate=self.change_rate / total,
            local_variance=self.local_variance / total,
            extreme_value=self.extreme_value / total,
        )

    @classmethod
    def default(cls) -> "ImportanceWeights":
        return cls()

    @classmethod
    def for_animation(cls) -> "ImportanceWeights":
        """Smoothness first."""
        return cls(curvature=0.5, change_rate=0.2, local_variance=0.15, extreme_value=0.15)

    @classmethod
    def for_sensor_data(cls) -> "ImportanceWeights":
        """Noise tolerant."""
        return cls(curvature=0.3, change_rate=0.15, local_variance=0.35, extreme_value=0.2)

    @classmethod
    def for_financial_data(cls) -> "ImportanceWeights":
        """Extremes first."""
        return cls(curvature=0.25, change_rate=0.3, local_variance=0.15, extreme_value=0.3)


class CompressionParams(BaseModel):
    """
    Complete configuration of a compression run.
    """

    model_config = ConfigDict(validate_assignment=True)

    # --- Error Budget ---
    tolerance: float = 0.01
    importance_threshold: float = 1.0

    # --- Algorithm ---
    compression_method: CompressionMethod = CompressionMethod.BEZIER_DIRECT
    compression_mode: CompressionMode = CompressionMode.TOLERANCE

    # --- Importance Weighting ---
    data_type: CompressionDataType = CompressionDataType.ANIMATION
    importance_weights: ImportanceWeights = Field(default_factory=ImportanceWeights)

    # --- Fixed / Estimated Modes ---
    fixed_control_point_count: int = 10
    estimation_method: EstimationMethod = EstimationMethod.TOTAL_VARIATION

    # --- Diagnostics ---
    enable_time_measurement: bool = False

    @field_validator("tolerance")
    @classmethod
    def _check_tolerance(cls, value: float) -> float:
        if not 0 < value <= 1:
            raise ConfigurationError(f"Tolerance must be in (0, 1], got {value}")
        return value

    @field_validator("importance_threshold")
    @classmethod
    def _check_importance_threshold(cls, value: float) -> float:
        if value <= 0:
            raise ConfigurationError(f"Importance threshold must be positive, got {value}")
        return value

    @field_validator("fixed_control_point_count")
    @classmethod
    def _check_fixed_count(cls, value: int) -> int:
        if not 2 <= value <= 1000:
            raise ConfigurationError(f"Fixed control point count must be in [2, 1000], got {value}")
        return value

    def effective_weights(self) -> ImportanceWeights:
        """Normalized weights for the configured data type."""
        presets = {
            CompressionDataType.ANIMATION: ImportanceWeights.for_animation,
            CompressionDataType.SENSOR: ImportanceWeights.for_sensor_data,
            CompressionDataType.FINANCIAL: ImportanceWeights.for_financial_data,
        }
        preset = presets.get(self.data_type)
        weights = preset() if preset else self.importance_weights
        return weights.normalized()
