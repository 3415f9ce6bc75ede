import logging

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse
from pydantic import BaseModel, Field

from curvecompress.adapters.config.settings_loader import load_settings
from curvecompress.core.domain.errors import ConfigurationError
from curvecompress.core.domain.params import (
    CompressionDataType,
    CompressionMethod,
    CompressionMode,
    CompressionParams,
    EstimationMethod,
    ImportanceWeights,
)
from curvecompress.core.domain.samples import Sample
from curvecompress.core.domain.segments import BezierSegment, BSplineSegment, CurveSegment
from curvecompress.core.services.compressor import CurveCompressor
from curvecompress.core.services.estimator import ControlPointEstimator

__version__ = "0.1.0"

# Configuration (Load from YAML with Env Overrides)
settings = load_settings()

# Logging
logging.basicConfig(level=settings.log_level.upper())
logger = logging.getLogger(__name__)

estimator = ControlPointEstimator(max_workers=settings.estimator_workers)
compressor = CurveCompressor(
    estimator=estimator,
    min_points=settings.estimator_min_points,
    max_points=settings.estimator_max_points,
)

# FastAPI Application
app = FastAPI(title="curvecompress")


class SamplePoint(BaseModel):
    time: float
    value: float


class CompressRequest(BaseModel):
    samples: list[SamplePoint]
    tolerance: float | None = None
    importance_threshold: float = 1.0
    method: CompressionMethod | None = None
    mode: CompressionMode = CompressionMode.TOLERANCE
    data_type: CompressionDataType = CompressionDataType.ANIMATION
    importance_weights: dict[str, float] | None = None
    fixed_control_point_count: int = 10
    estimation_method: EstimationMethod = EstimationMethod.TOTAL_VARIATION
    include_samples: bool = Field(default=False, description="Return the resampled compressed curve")


class EstimateRequest(BaseModel):
    samples: list[SamplePoint]
    tolerance: float | None = None
    min_points: int | None = None
    max_points: int | None = None


@app.exception_handler(ConfigurationError)
async def configuration_error_handler(request: Request, exc: ConfigurationError):
    logger.warning(f"Rejected configuration: {exc}")
    return JSONResponse(status_code=422, content={"detail": str(exc)})


@app.get("/health")
def health_check():
    return {"status": "ok", "version": __version__}


@app.post("/compress")
def compress(request: CompressRequest):
    """
    Compress a sample sequence and return the curve with its error summary.
    """
    params = CompressionParams(
        tolerance=request.tolerance if request.tolerance is not None else settings.default_tolerance,
        importance_threshold=request.importance_threshold,
        compression_method=request.method or settings.default_method,
        compression_mode=request.mode,
        data_type=request.data_type,
        importance_weights=ImportanceWeights(**(request.importance_weights or {})),
        fixed_control_point_count=request.fixed_control_point_count,
        estimation_method=request.estimation_method,
        enable_time_measurement=True,
    )
    samples = [Sample(p.time, p.value) for p in request.samples]
    result = compressor.compress(samples, params)

    response = {
        "original_count": result.original_count,
        "compressed_count": result.compressed_count,
        "compression_ratio": result.compression_ratio,
        "mean_error": result.mean_error,
        "max_error": result.max_error,
        "elapsed_ms": result.elapsed_ms,
        "segments": [_segment_payload(s) for s in result.compressed_curve.segments] if result.compressed_curve is not None else [],
    }
    if request.include_samples:
        response["compressed_samples"] = [{"time": s.time, "value": s.value} for s in result.compressed_samples]
    return response


@app.post("/estimate")
def estimate(request: EstimateRequest):
    """
    Run every control point heuristic on a sample sequence.
    """
    tolerance = request.tolerance if request.tolerance is not None else settings.default_tolerance
    if tolerance <= 0:
        raise ConfigurationError(f"Tolerance must be positive, got {tolerance}")

    min_points = request.min_points if request.min_points is not None else settings.estimator_min_points
    max_points = request.max_points if request.max_points is not None else settings.estimator_max_points
    try:
        results = estimator.estimate_all(
            [Sample(p.time, p.value) for p in request.samples],
            tolerance,
            min_points,
            max_points,
        )
    except ValueError as e:
        raise ConfigurationError(str(e)) from e

    return {
        name: {
            "optimal_points": r.optimal_points,
            "score": r.score,
            "method": r.method,
            "metrics": r.metrics,
        }
        for name, r in results.items()
    }


def _segment_payload(segment: CurveSegment) -> dict:
    payload = {
        "kind": segment.kind.value,
        "start_time": segment.start_time,
        "start_value": segment.start_value,
        "end_time": segment.end_time,
        "end_value": segment.end_value,
    }
    if isinstance(segment, BSplineSegment):
        payload["control_points"] = [list(p) for p in segment.control_points]
    elif isinstance(segment, BezierSegment):
        payload["in_tangent"] = segment.in_tangent
        payload["out_tangent"] = segment.out_tangent
    return payload
