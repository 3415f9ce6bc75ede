from pydantic import BaseModel, Field

from curvecompress.core.domain.params import CompressionMethod


class EngineSettings(BaseModel):
    """
    Global engine configuration settings.
    """
    # Compression defaults
    default_tolerance: float = Field(default=0.01, gt=0, le=1, description="Tolerance used when a request sets none")
    default_method: CompressionMethod = Field(default=CompressionMethod.BEZIER_DIRECT, description="Method used when a request sets none")

    # Estimator
    estimator_min_points: int = Field(default=2, ge=2, description="Lower bound of the control point search")
    estimator_max_points: int = Field(default=50, ge=2, description="Upper bound of the control point search")
    estimator_workers: int = Field(default=1, ge=1, description="Threads used to run the estimation heuristics")

    # Logging
    log_level: str = Field(default="INFO", description="Root logging level")
